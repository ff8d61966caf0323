from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from app.agents.gateway import AgentGateway
from app.history.recorder import HistoryRecorder
from app.routes.deps import (
    get_config_store,
    get_gateway,
    get_history,
    get_preview_service,
    require_api_key_if_configured,
)
from app.services.calendar_check import check_calendar
from app.services.preview import PreviewService
from app.settings.store import ConfigStore

router = APIRouter(dependencies=[Depends(require_api_key_if_configured)])


@router.post("/preview")
async def generate_preview(
    debug: bool = Query(False, description="Include the raw coordinator envelope"),
    service: PreviewService = Depends(get_preview_service),
) -> JSONResponse:
    """
    Generate the day brief for the configured date.

    Agent and transport failures still return 200 with `ok: false`; the
    attempt is recorded in history either way.
    """
    result = await service.generate_preview()
    exclude = None if debug else {"debug_info"}
    return JSONResponse(content=result.model_dump(mode="json", exclude=exclude))


@router.post("/calendar/check")
async def calendar_check(
    simple: bool = Query(False, description="Use the minimal 'today' prompt"),
    date: Optional[str] = Query(None, description="ISO date (YYYY-MM-DD). Defaults to the configured date."),
    store: ConfigStore = Depends(get_config_store),
    gateway: AgentGateway = Depends(get_gateway),
) -> JSONResponse:
    """Call the calendar agent directly and report whether it answered."""
    selected_date = date or store.load().selected_date
    result = await check_calendar(gateway, selected_date, simple=simple)
    return JSONResponse(content=result.model_dump())


@router.get("/history")
async def list_history(
    limit: Optional[int] = Query(None, ge=1, description="Return at most this many entries"),
    history: HistoryRecorder = Depends(get_history),
) -> JSONResponse:
    """Preview attempts, most recent first."""
    entries = history.entries()
    if limit is not None:
        entries = entries[:limit]
    return JSONResponse(content={
        "ok": True,
        "count": len(history),
        "entries": [entry.model_dump() for entry in entries],
    })


@router.get("/history/{entry_id}")
async def get_history_entry(entry_id: str, history: HistoryRecorder = Depends(get_history)) -> JSONResponse:
    for entry in history.entries():
        if entry.id == entry_id:
            return JSONResponse(content=entry.model_dump())
    raise HTTPException(status_code=404, detail=f"History entry not found: {entry_id}")
