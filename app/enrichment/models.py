from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return _text(value) or None


def _text_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [t for t in (_text(v) for v in value) if t]


def _objects(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


# Agents report numbers, nulls and lists where prose is expected
Text = Annotated[str, BeforeValidator(_text)]
OptionalText = Annotated[Optional[str], BeforeValidator(_optional_text)]
TextList = Annotated[List[str], BeforeValidator(_text_list)]


class SourceRecord(BaseModel):
    # Agents add fields freely; keep them for the debug view
    model_config = ConfigDict(extra="allow")


class ApolloCompany(SourceRecord):
    name: Text = ""
    industry: OptionalText = None
    size: OptionalText = None
    funding_stage: OptionalText = None
    technologies: TextList = []


class ApolloContact(SourceRecord):
    email: Text = ""
    name: Text = ""
    title: OptionalText = None
    seniority: OptionalText = None
    company: Optional[ApolloCompany] = None

    @field_validator("company", mode="before")
    @classmethod
    def _company_object(cls, value):
        if isinstance(value, dict) or value is None:
            return value
        name = _text(value)
        return {"name": name} if name else None


class Education(SourceRecord):
    school: Text = ""
    degree: OptionalText = None
    year: OptionalText = None


class ProfessionalProfile(SourceRecord):
    name: Text = ""
    profile_url: Text = ""
    email: OptionalText = None
    recent_posts: TextList = []
    recent_announcements: TextList = []
    hobbies: TextList = []
    languages: TextList = []
    education: Annotated[List[Education], BeforeValidator(_objects)] = []
    location: OptionalText = None
    mutual_connections: TextList = []
    previous_companies: TextList = []


class SportsResult(SourceRecord):
    date: OptionalText = None
    opponent: OptionalText = None
    score: OptionalText = None
    result: OptionalText = None


class SportsTeam(SourceRecord):
    team_name: Text = ""
    league: OptionalText = None
    sport: OptionalText = None
    recent_results: Annotated[List[SportsResult], BeforeValidator(_objects)] = []
    current_record: OptionalText = None


class SportsIntel(SourceRecord):
    person_name: Text = ""
    hometown: OptionalText = None
    college: OptionalText = None
    professional_teams: Annotated[List[SportsTeam], BeforeValidator(_objects)] = []
    college_teams: Annotated[List[SportsTeam], BeforeValidator(_objects)] = []
    conversation_starters: TextList = []


class MutualConnection(SourceRecord):
    name: Text = ""
    title: OptionalText = None
    company: OptionalText = None
    relationship_to_rep: OptionalText = None
    relationship_to_prospect: OptionalText = None


class OverlappingCompany(SourceRecord):
    company_name: Text = ""
    rep_tenure: OptionalText = None
    prospect_tenure: OptionalText = None
    overlap_period: OptionalText = None


class SharedEducation(SourceRecord):
    institution: Text = ""
    rep_details: OptionalText = None
    prospect_details: OptionalText = None


class ConnectionAnalysis(SourceRecord):
    prospect_name: Text = ""
    mutual_connections: Annotated[List[MutualConnection], BeforeValidator(_objects)] = []
    overlapping_companies: Annotated[List[OverlappingCompany], BeforeValidator(_objects)] = []
    shared_education: Annotated[List[SharedEducation], BeforeValidator(_objects)] = []
    connection_strength: OptionalText = None
    recommended_approach: OptionalText = None


class EnrichedParticipant(BaseModel):
    """One external participant with whatever each enrichment source found.

    Every enrichment field is optional and owned by exactly one source.
    """

    email: str
    name: str = ""
    apollo_data: Optional[ApolloContact] = None
    professional_profile: Optional[ProfessionalProfile] = None
    news_items: Optional[List[Dict[str, Any]]] = None
    sports_intel: Optional[SportsIntel] = None
    connection_analysis: Optional[ConnectionAnalysis] = None

    def sources(self) -> List[str]:
        """Names of the enrichment fields that are populated."""
        fields = ["apollo_data", "professional_profile", "news_items", "sports_intel", "connection_analysis"]
        return [f for f in fields if getattr(self, f) is not None]
