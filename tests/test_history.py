from datetime import date

import pytest
from pydantic import ValidationError

from app.calendar.types import Meeting
from app.enrichment.models import EnrichedParticipant
from app.history.recorder import HistoryRecorder, PreviewFailure, PreviewSuccess


def _success(meeting_count: int = 2, participant_count: int = 3) -> PreviewSuccess:
    return PreviewSuccess(
        meetings=[Meeting(title=f"Meeting {i}") for i in range(meeting_count)],
        participants={f"p{i}@acme.com": EnrichedParticipant(email=f"p{i}@acme.com") for i in range(participant_count)},
        email_content="Prep email body",
    )


class TestHistoryRecorder:
    """Test the append-only history."""

    def test_success_entry(self):
        recorder = HistoryRecorder()

        entry = recorder.record(_success(), today=date(2026, 2, 6))

        assert entry.status == "sent"
        assert entry.meeting_count == 2
        assert entry.participant_count == 3
        assert entry.content == "Prep email body"
        assert entry.date == "2026-02-06"
        assert entry.id

    def test_failure_entry(self):
        """Test that failures are recorded with zero counts."""
        recorder = HistoryRecorder()

        entry = recorder.record(PreviewFailure(error_message="Calendar not connected"))

        assert entry.status == "failed"
        assert entry.meeting_count == 0
        assert entry.participant_count == 0
        assert entry.content == "Error: Calendar not connected"
        assert entry.date == date.today().isoformat()

    def test_newest_first(self):
        recorder = HistoryRecorder()
        first = recorder.record(_success())
        second = recorder.record(PreviewFailure(error_message="boom"))
        third = recorder.record(_success(meeting_count=0, participant_count=0))

        assert [e.id for e in recorder.entries()] == [third.id, second.id, first.id]
        assert recorder.latest() == third
        assert len(recorder) == 3

    def test_ids_are_unique(self):
        recorder = HistoryRecorder()
        ids = {recorder.record(_success()).id for _ in range(50)}
        assert len(ids) == 50

    def test_entries_are_immutable(self):
        entry = HistoryRecorder().record(_success())
        with pytest.raises(ValidationError):
            entry.status = "draft"

    def test_snapshot_is_not_live(self):
        recorder = HistoryRecorder()
        recorder.record(_success())
        snapshot = recorder.entries()

        recorder.record(_success())

        assert len(snapshot) == 1
        assert len(recorder.entries()) == 2

    def test_empty_history(self):
        recorder = HistoryRecorder()
        assert recorder.entries() == ()
        assert recorder.latest() is None
