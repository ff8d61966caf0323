import json
from typing import Optional

from pydantic import BaseModel

from app.agents.constants import AGENT_IDS
from app.agents.gateway import AgentGateway
from app.core.errors import TransportError
from app.observability.logger import log_event, log_error, timing


class CalendarCheckResult(BaseModel):
    ok: bool
    error_message: Optional[str] = None
    debug_info: str = ""


def calendar_check_message(selected_date: str, simple: bool = False) -> str:
    if simple:
        return "List my calendar events for today"
    return (
        f"Please fetch ALL calendar events for {selected_date}. "
        "Return the complete list of meetings including all participants."
    )


async def check_calendar(gateway: AgentGateway, selected_date: str, simple: bool = False) -> CalendarCheckResult:
    """Call the calendar agent directly to diagnose connectivity."""
    calendar_id = AGENT_IDS["calendar"]
    message = calendar_check_message(selected_date, simple=simple)

    with timing("calendar_check") as t:
        try:
            envelope = await gateway.invoke(message, calendar_id)
        except TransportError as e:
            log_error(e, {"action": "calendar_check", "simple": simple})
            return CalendarCheckResult(ok=False, error_message=f"Calendar test failed: {e}")

    debug_info = json.dumps(envelope.model_dump(), indent=2, default=str)

    if not envelope.success or envelope.response.status == "error":
        reason = envelope.error or envelope.response.message or "Unknown error from Calendar Agent"
        log_event("calendar_check", "calendar", "failed", duration_ms=t.get_duration_ms(), simple=simple)
        return CalendarCheckResult(ok=False, error_message=f"Calendar Agent Error: {reason}", debug_info=debug_info)

    log_event("calendar_check", "calendar", "success", duration_ms=t.get_duration_ms(), simple=simple)
    return CalendarCheckResult(ok=True, debug_info=debug_info)
