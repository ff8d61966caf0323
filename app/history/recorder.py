import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from app.calendar.types import Meeting
from app.enrichment.models import EnrichedParticipant

logger = logging.getLogger(__name__)


class HistoryEntry(BaseModel):
    """Immutable record of one preview attempt."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    meeting_count: int
    participant_count: int
    status: Literal["sent", "draft", "failed"]
    content: str


@dataclass
class PreviewSuccess:
    meetings: List[Meeting]
    participants: Dict[str, EnrichedParticipant]
    email_content: str


@dataclass
class PreviewFailure:
    error_message: str


PreviewOutcome = Union[PreviewSuccess, PreviewFailure]


@dataclass
class HistoryRecorder:
    """Append-only, newest-first history of preview attempts for the process lifetime."""

    _entries: List[HistoryEntry] = field(default_factory=list)

    def record(self, outcome: PreviewOutcome, today: Optional[date] = None) -> HistoryEntry:
        entry_date = (today or date.today()).isoformat()

        if isinstance(outcome, PreviewFailure):
            entry = HistoryEntry(
                id=uuid.uuid4().hex,
                date=entry_date,
                meeting_count=0,
                participant_count=0,
                status="failed",
                content=f"Error: {outcome.error_message}",
            )
        else:
            entry = HistoryEntry(
                id=uuid.uuid4().hex,
                date=entry_date,
                meeting_count=len(outcome.meetings),
                participant_count=len(outcome.participants),
                status="sent",
                content=outcome.email_content,
            )

        self._entries.insert(0, entry)
        logger.info(f"History entry recorded: status={entry.status} meetings={entry.meeting_count}")
        return entry

    def entries(self) -> Tuple[HistoryEntry, ...]:
        """Snapshot of all entries, most recent first."""
        return tuple(self._entries)

    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)
