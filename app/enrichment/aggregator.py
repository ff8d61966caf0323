"""
Participant aggregation across enrichment sources.

Each source owns exactly one field of EnrichedParticipant, so merging is a
reducer applied record by record, source by source, in a fixed order.
"""

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from app.enrichment.models import (
    ApolloContact,
    ConnectionAnalysis,
    EnrichedParticipant,
    ProfessionalProfile,
    SportsIntel,
)
from app.normalize.probe import coerce_result, dig, find_sub_agent

logger = logging.getLogger(__name__)


Participants = Dict[str, EnrichedParticipant]

IDENTITY_FIELDS = ("email", "person_email", "prospect_email", "contact_email")
NAME_FIELDS = ("name", "person_name", "prospect_name")


@dataclass(frozen=True)
class EnrichmentSource:
    name: str
    output_keys: Tuple[str, ...]
    list_field: str
    agent_marker: str
    target_field: str
    record_model: Optional[Type[BaseModel]] = None
    # Only the profile source may be keyed by profile URL
    url_fallback: bool = False


ENRICHMENT_SOURCES: Tuple[EnrichmentSource, ...] = (
    EnrichmentSource("apollo", ("apollo",), "enriched_contacts", "Apollo", "apollo_data", ApolloContact),
    EnrichmentSource(
        "linkedin", ("linkedin",), "linkedin_profiles", "LinkedIn", "professional_profile",
        ProfessionalProfile, url_fallback=True,
    ),
    EnrichmentSource("news", ("news", "web_research"), "research_findings", "Research", "news_items"),
    EnrichmentSource("sports", ("sports",), "sports_intel", "Sports", "sports_intel", SportsIntel),
    EnrichmentSource(
        "connections", ("connections",), "connection_analysis", "Connection", "connection_analysis",
        ConnectionAnalysis,
    ),
)


def _first_text(record: Dict[str, Any], fields: Iterable[str]) -> str:
    for f in fields:
        value = record.get(f)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def identity_key(record: Dict[str, Any], source: EnrichmentSource) -> Optional[str]:
    """Email-like field first; profile URL only for the profile source."""
    key = _first_text(record, IDENTITY_FIELDS)
    if not key and source.url_fallback:
        key = _first_text(record, ("profile_url",))
    return key or None


def source_records(result: Dict[str, Any], source: EnrichmentSource) -> List[Dict[str, Any]]:
    """Per-person records for `source`, from final_output or its sub-agent entry."""
    payload = None
    for key in source.output_keys:
        payload = dig(result, "final_output", key)
        if payload is not None:
            break

    if payload is None:
        agent = find_sub_agent(result, source.agent_marker)
        if agent is not None:
            for container in ("output", "result"):
                candidate = coerce_result(agent.get(container))
                if source.list_field in candidate:
                    payload = candidate
                    break

    records = dig(payload, source.list_field)
    if not isinstance(records, list):
        return []
    return [r for r in records if isinstance(r, dict)]


def merge_record(participants: Participants, source: EnrichmentSource, record: Dict[str, Any]) -> Participants:
    """
    Fold one source record into the participant map.

    Only `source.target_field` is written; fields set by other sources are kept.
    """
    key = identity_key(record, source)
    if key is None:
        logger.debug(f"Skipping {source.name} record without identity")
        return participants

    existing = participants.get(key) or EnrichedParticipant(email=key, name=_first_text(record, NAME_FIELDS))

    if source.record_model is None:
        value: Any = list(getattr(existing, source.target_field) or []) + [record]
    else:
        try:
            value = source.record_model.model_validate(record)
        except ValidationError as e:
            # Participant is kept without this source's data
            logger.warning(f"Dropping malformed {source.name} data for {key}: {e.error_count()} errors")
            value = getattr(existing, source.target_field)

    update: Dict[str, Any] = {source.target_field: value}
    if not existing.name:
        update["name"] = _first_text(record, NAME_FIELDS)

    merged = dict(participants)
    merged[key] = existing.model_copy(update=update)
    return merged


def merge_source(participants: Participants, source: EnrichmentSource, result: Dict[str, Any]) -> Participants:
    return reduce(lambda acc, record: merge_record(acc, source, record), source_records(result, source), participants)


def aggregate_participants(result: Any, sources: Optional[Iterable[str]] = None) -> Participants:
    """
    Build the identity-keyed participant map from a coordinator result.

    Args:
        result: Raw coordinator result (dict or JSON string)
        sources: Source names to include; all sources when None. Sources are
            always applied in the declared ENRICHMENT_SOURCES order.

    Returns:
        Mapping of identity key (email, or profile URL) to EnrichedParticipant
    """
    data = coerce_result(result)
    wanted = set(sources) if sources is not None else None

    participants: Participants = {}
    for source in ENRICHMENT_SOURCES:
        if wanted is not None and source.name not in wanted:
            continue
        participants = merge_source(participants, source, data)

    logger.info(f"Aggregated {len(participants)} enriched participants")
    return participants
