from datetime import date
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _today_iso() -> str:
    return date.today().isoformat()


class DayPlannerConfig(BaseModel):
    """Rep settings that parameterize every coordinator call.

    Serialized with camelCase keys (``scheduleTime``, ``linkedInUrl``, ...),
    which is also the export/import file format.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    schedule_time: str = Field("06:00", pattern=r"^\d{2}:\d{2}$")
    timezone: str = "America/New_York"
    enabled: bool = True
    company_domains: str = "company.com"
    email_recipient: str = ""
    linked_in_url: str = ""
    previous_companies: str = ""
    hometown: str = ""
    enable_apollo: bool = True
    enable_linked_in: bool = True
    enable_news: bool = True
    enable_sports: bool = True
    enable_connections: bool = True
    selected_date: str = Field(default_factory=_today_iso, pattern=r"^\d{4}-\d{2}-\d{2}$")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("selected_date")
    @classmethod
    def _real_date(cls, value: str) -> str:
        date.fromisoformat(value)
        return value

    def to_document(self) -> dict:
        """Camel-cased dict in the persisted/exported layout."""
        return self.model_dump(by_alias=True)

    def enabled_sources(self) -> list[str]:
        """Enrichment source names switched on for this rep."""
        toggles = {
            "apollo": self.enable_apollo,
            "linkedin": self.enable_linked_in,
            "news": self.enable_news,
            "sports": self.enable_sports,
            "connections": self.enable_connections,
        }
        return [name for name, on in toggles.items() if on]


def default_config() -> DayPlannerConfig:
    """Return the compiled-in default configuration (selected date = today)."""
    return DayPlannerConfig()
