"""
Meeting extraction from coordinator results.

The coordinator has no fixed response contract, so meetings are looked up
with an ordered list of strategies. Each strategy is a pure function that
returns a non-empty raw list or None; the first one that yields at least one
usable meeting wins and results are never merged across strategies.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from app.agents.constants import CALENDAR_AGENT_MARKER, CALENDAR_AGENT_NAME, UNKNOWN_AGENT_ERROR
from app.agents.gateway import AgentResult
from app.calendar.types import Meeting
from app.normalize.probe import coerce_result, dig, find_sub_agent, non_empty_list

logger = logging.getLogger(__name__)


MeetingStrategy = Callable[[Dict[str, Any]], Optional[List[Any]]]


@dataclass
class NormalizedMeetings:
    meetings: List[Meeting] = field(default_factory=list)
    error_message: Optional[str] = None
    strategy: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error_message is not None


def from_final_output(result: Dict[str, Any]) -> Optional[List[Any]]:
    return non_empty_list(dig(result, "final_output", "calendar", "meetings"))


def from_calendar_sub_agent(result: Dict[str, Any]) -> Optional[List[Any]]:
    agent = find_sub_agent(result, CALENDAR_AGENT_MARKER, exact_name=CALENDAR_AGENT_NAME)
    if agent is None:
        return None
    return (
        non_empty_list(coerce_result(agent.get("output")).get("meetings"))
        or non_empty_list(coerce_result(agent.get("result")).get("meetings"))
    )


def from_top_level(result: Dict[str, Any]) -> Optional[List[Any]]:
    return non_empty_list(result.get("meetings"))


MEETING_STRATEGIES: List[Tuple[str, MeetingStrategy]] = [
    ("final_output.calendar", from_final_output),
    ("sub_agent.calendar", from_calendar_sub_agent),
    ("top_level", from_top_level),
]


def _to_meetings(raw_meetings: List[Any]) -> List[Meeting]:
    meetings: List[Meeting] = []
    for raw in raw_meetings:
        if not isinstance(raw, dict):
            logger.debug(f"Skipping non-object meeting entry: {type(raw).__name__}")
            continue
        try:
            meetings.append(Meeting.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed meeting entry: {e.error_count()} errors")
    return meetings


def extract_meetings(
    result: Any,
    strategies: Optional[List[Tuple[str, MeetingStrategy]]] = None,
) -> Tuple[List[Meeting], Optional[str]]:
    """
    Run the extraction strategies against a raw coordinator result.

    Returns:
        (meetings, strategy name) or ([], None) when nothing matched
    """
    data = coerce_result(result)
    for name, strategy in strategies or MEETING_STRATEGIES:
        raw = strategy(data)
        if not raw:
            continue
        meetings = _to_meetings(raw)
        if meetings:
            logger.info(f"Found {len(meetings)} meetings via {name}")
            return meetings, name
    return [], None


def normalize_meetings(envelope: Union[AgentResult, Dict[str, Any]]) -> NormalizedMeetings:
    """
    Extract meetings from a coordinator envelope.

    A failed envelope yields no meetings and its error message verbatim. A
    successful envelope without calendar data yields no meetings and no
    error: an empty day is a valid outcome.
    """
    if not isinstance(envelope, AgentResult):
        try:
            envelope = AgentResult.model_validate(envelope)
        except ValidationError:
            return NormalizedMeetings(error_message=UNKNOWN_AGENT_ERROR)

    if not envelope.ok:
        return NormalizedMeetings(error_message=envelope.error_message())

    meetings, strategy = extract_meetings(envelope.response.result)
    if not meetings:
        logger.warning("No meetings found in coordinator result")
    return NormalizedMeetings(meetings=meetings, strategy=strategy)
