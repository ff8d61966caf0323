import logging
from typing import Any

from app.agents.constants import AGENT_IDS
from app.agents.gateway import AgentGateway
from app.normalize.probe import coerce_result, dig
from app.observability.logger import log_event, log_warning, timing
from app.settings.models import DayPlannerConfig
from app.settings.store import ConfigStore

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v).strip() for v in value if str(v).strip())
    if isinstance(value, str):
        return value.strip()
    return ""


def extract_previous_companies(result: Any) -> str:
    """
    Previous companies from a profile agent result, as a comma-separated string.

    Looks at the first researched profile, then a top-level field, then any
    free-text answer.
    """
    data = coerce_result(result)
    if not data and isinstance(result, str):
        return result.strip()

    profiles = data.get("linkedin_profiles")
    if isinstance(profiles, list) and profiles:
        companies = _as_text(dig(profiles[0], "previous_companies"))
        if companies:
            return companies

    companies = _as_text(data.get("previous_companies"))
    if companies:
        return companies

    return _as_text(data.get("text")) or _as_text(data.get("response"))


async def fetch_previous_companies(config_store: ConfigStore, gateway: AgentGateway) -> DayPlannerConfig:
    """
    Research the rep's own profile and store their previous companies.

    Returns the (possibly unchanged) config.

    Raises:
        ValueError: If no profile URL is configured.
        AgentError: If the profile agent reports failure.
        TransportError: If the agent call cannot complete.
    """
    config = config_store.load()
    if not config.linked_in_url:
        raise ValueError("Please enter your LinkedIn profile URL first")

    message = (
        "Research this LinkedIn profile and extract the previous companies this person has worked at: "
        f"{config.linked_in_url}\n\n"
        "Please return a list of previous company names (not including current company) as a comma-separated string."
    )

    linkedin_id = AGENT_IDS["linkedin"]
    with timing("profile_companies") as t:
        envelope = await gateway.invoke(message, linkedin_id)
    envelope.raise_for_status(agent_id=linkedin_id)

    previous_companies = extract_previous_companies(envelope.response.result)
    if not previous_companies:
        log_warning("Could not extract previous companies from profile", {"profile_url": config.linked_in_url})
        log_event("profile_companies", "linkedin", "empty", duration_ms=t.get_duration_ms())
        return config

    logger.info(f"Previous companies updated: {previous_companies}")
    log_event("profile_companies", "linkedin", "success", duration_ms=t.get_duration_ms())
    return config_store.update(lambda current: current.model_copy(update={"previous_companies": previous_companies}))
