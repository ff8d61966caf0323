import pytest

from app.agents.constants import AGENT_IDS
from app.agents.gateway import StubAgentGateway
from app.core.errors import TransportError
from app.services.calendar_check import calendar_check_message, check_calendar

CALENDAR = AGENT_IDS["calendar"]


def test_full_and_simple_messages():
    assert "ALL calendar events for 2026-02-06" in calendar_check_message("2026-02-06")
    assert calendar_check_message("2026-02-06", simple=True) == "List my calendar events for today"


@pytest.mark.asyncio
async def test_success():
    gateway = StubAgentGateway()

    result = await check_calendar(gateway, "2026-02-06")

    assert result.ok is True
    assert result.error_message is None
    assert '"meetings"' in result.debug_info
    assert gateway.calls[0][1] == CALENDAR


@pytest.mark.asyncio
async def test_agent_error_prefers_envelope_error():
    envelope = {"success": False, "error": "OAuth expired", "response": {"status": "error", "message": "failed"}}
    gateway = StubAgentGateway(responses={CALENDAR: envelope})

    result = await check_calendar(gateway, "2026-02-06", simple=True)

    assert result.ok is False
    assert result.error_message == "Calendar Agent Error: OAuth expired"
    assert gateway.calls[0][0] == "List my calendar events for today"


@pytest.mark.asyncio
async def test_agent_error_without_message():
    gateway = StubAgentGateway(responses={CALENDAR: {"success": True, "response": {"status": "error"}}})

    result = await check_calendar(gateway, "2026-02-06")

    assert result.error_message == "Calendar Agent Error: Unknown error from Calendar Agent"


@pytest.mark.asyncio
async def test_transport_error():
    gateway = StubAgentGateway(responses={CALENDAR: TransportError("connection refused")})

    result = await check_calendar(gateway, "2026-02-06")

    assert result.ok is False
    assert result.error_message == "Calendar test failed: connection refused"
    assert result.debug_info == ""
