import json
import logging
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel

from app.agents.constants import AGENT_IDS
from app.agents.gateway import AgentGateway, AgentResult
from app.calendar.types import Meeting
from app.core.errors import AgentError, TransportError
from app.enrichment.aggregator import aggregate_participants
from app.enrichment.models import EnrichedParticipant
from app.history.recorder import HistoryEntry, HistoryRecorder, PreviewFailure, PreviewSuccess
from app.normalize.email_content import extract_email_content
from app.normalize.meetings import normalize_meetings
from app.observability.logger import log_event, log_error, timing
from app.settings.models import DayPlannerConfig
from app.settings.store import ConfigStore

logger = logging.getLogger(__name__)


class PreviewResult(BaseModel):
    ok: bool
    meetings: List[Meeting] = []
    participants: Dict[str, EnrichedParticipant] = {}
    email_content: Optional[str] = None
    error_message: Optional[str] = None
    strategy: Optional[str] = None
    debug_info: str = ""
    history_entry: HistoryEntry


def _readable_date(iso_date: str) -> str:
    selected = date.fromisoformat(iso_date)
    return f"{selected:%A}, {selected:%B} {selected.day}, {selected.year}"


def build_preview_message(config: DayPlannerConfig) -> str:
    """Build the coordinator prompt for the configured day."""
    day = config.selected_date
    return f"""Generate a day prep preview for {_readable_date(day)} ({day}) with the following settings:

Company domains to filter OUT (these are internal): {config.company_domains}
Email recipient: {config.email_recipient or 'Not specified'}
LinkedIn URL: {config.linked_in_url or 'Not specified'}
Previous companies: {config.previous_companies or 'Not specified'}
Hometown: {config.hometown or 'Not specified'}
Research preferences: Apollo={config.enable_apollo}, LinkedIn={config.enable_linked_in}, News={config.enable_news}, Sports={config.enable_sports}, Connections={config.enable_connections}

IMPORTANT: Please retrieve ALL calendar events for {day}. Filter to show ONLY meetings that have external participants (participants whose email domains do NOT match: {config.company_domains}). For each meeting with external participants, provide detailed research on those external participants only."""


def _debug_dump(envelope: AgentResult) -> str:
    return json.dumps(envelope.model_dump(), indent=2, default=str)


class PreviewService:
    """
    Runs one preview generation: settings -> coordinator call -> meetings,
    participants and email draft -> history entry.

    Transport and agent failures end here as a failed history entry; they
    never reach the caller as exceptions.
    """

    def __init__(self, config_store: ConfigStore, gateway: AgentGateway, history: HistoryRecorder):
        self.config_store = config_store
        self.gateway = gateway
        self.history = history

    async def generate_preview(self) -> PreviewResult:
        config = self.config_store.load()
        message = build_preview_message(config)
        coordinator_id = AGENT_IDS["coordinator"]
        debug_info = ""

        with timing("preview") as t:
            try:
                envelope = await self.gateway.invoke(message, coordinator_id)
                debug_info = _debug_dump(envelope)
                normalized = normalize_meetings(envelope)
                if normalized.failed:
                    raise AgentError(normalized.error_message, agent_id=coordinator_id)
            except (TransportError, AgentError) as e:
                failure = e
            else:
                failure = None

        if failure is not None:
            log_error(failure, {"action": "preview", "selected_date": config.selected_date})
            log_event("preview", "coordinator", "failed", duration_ms=t.get_duration_ms())
            entry = self.history.record(PreviewFailure(error_message=str(failure)))
            return PreviewResult(
                ok=False,
                error_message=str(failure),
                debug_info=debug_info,
                history_entry=entry,
            )

        result = envelope.response.result
        participants = aggregate_participants(result, sources=config.enabled_sources())
        email_content = extract_email_content(result)

        entry = self.history.record(PreviewSuccess(
            meetings=normalized.meetings,
            participants=participants,
            email_content=email_content,
        ))

        if not normalized.meetings:
            logger.warning(
                f"No meetings found for {config.selected_date}: the day may be empty, "
                "the calendar agent may be disconnected, or the response format changed"
            )

        log_event(
            "preview",
            "coordinator",
            "success" if normalized.meetings else "empty",
            meeting_count=len(normalized.meetings),
            participant_count=len(participants),
            duration_ms=t.get_duration_ms(),
            strategy=normalized.strategy,
            selected_date=config.selected_date,
        )

        return PreviewResult(
            ok=True,
            meetings=normalized.meetings,
            participants=participants,
            email_content=email_content,
            strategy=normalized.strategy,
            debug_info=debug_info,
            history_entry=entry,
        )
