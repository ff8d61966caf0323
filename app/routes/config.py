from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from app.agents.gateway import AgentGateway
from app.core.errors import AgentError, ConfigParseError, TransportError
from app.routes.deps import get_config_store, get_gateway, require_api_key_if_configured
from app.services.profile_companies import fetch_previous_companies
from app.settings.store import ConfigStore, export_filename, validate_config_document

router = APIRouter(dependencies=[Depends(require_api_key_if_configured)])


@router.get("/config")
async def get_config(store: ConfigStore = Depends(get_config_store)) -> JSONResponse:
    """Return the current planner config in its camelCase file layout."""
    return JSONResponse(content=store.load().to_document())


@router.put("/config")
async def replace_config(
    document: Dict[str, Any] = Body(...),
    store: ConfigStore = Depends(get_config_store),
) -> JSONResponse:
    """
    Replace the whole config. Fields missing from the body take their default values.
    """
    try:
        new_config = validate_config_document(document)
    except ConfigParseError as e:
        raise HTTPException(status_code=422, detail=str(e))
    config = store.update(lambda _: new_config)
    return JSONResponse(content=config.to_document())


@router.patch("/config")
async def patch_config(
    changes: Dict[str, Any] = Body(...),
    store: ConfigStore = Depends(get_config_store),
) -> JSONResponse:
    """Update selected fields, keeping the others."""
    current = store.load().to_document()
    try:
        new_config = validate_config_document({**current, **changes})
    except ConfigParseError as e:
        raise HTTPException(status_code=422, detail=str(e))
    config = store.update(lambda _: new_config)
    return JSONResponse(content=config.to_document())


@router.post("/config/reset")
async def reset_config(store: ConfigStore = Depends(get_config_store)) -> JSONResponse:
    return JSONResponse(content=store.reset().to_document())


@router.get("/config/export")
async def export_config(store: ConfigStore = Depends(get_config_store)) -> Response:
    """Download the current config as a dated JSON file."""
    return Response(
        content=store.export(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.post("/config/import")
async def import_config(request: Request, store: ConfigStore = Depends(get_config_store)) -> JSONResponse:
    """Replace the config with the uploaded JSON document (raw request body)."""
    raw = await request.body()
    try:
        config = store.import_config(raw)
    except ConfigParseError as e:
        raise HTTPException(status_code=400, detail=f"Failed to import configuration: {e}")
    return JSONResponse(content={"ok": True, "config": config.to_document()})


@router.post("/config/previous-companies")
async def refresh_previous_companies(
    store: ConfigStore = Depends(get_config_store),
    gateway: AgentGateway = Depends(get_gateway),
) -> JSONResponse:
    """Fill `previousCompanies` from the rep's professional profile."""
    try:
        config = await fetch_previous_companies(store, gateway)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (AgentError, TransportError) as e:
        raise HTTPException(status_code=502, detail=f"LinkedIn agent failed: {e}")
    return JSONResponse(content={"ok": True, "config": config.to_document()})
