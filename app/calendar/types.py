from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExternalParticipant(BaseModel):
    # email is an opaque identity key, no case folding
    email: str = ""
    name: str = ""


class Meeting(BaseModel):
    """A calendar meeting as reported by the calendar agent.

    Accepts the agent's wire names (``meeting_title``, ``meeting_time``) as
    well as the short attribute names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field("", alias="meeting_title")
    time: str = Field("", alias="meeting_time")
    duration_minutes: int = 0
    attendees: List[str] = []
    external_participants: List[ExternalParticipant] = []

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _non_negative_duration(cls, value):
        try:
            minutes = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0
        return max(minutes, 0)

    @field_validator("attendees", mode="before")
    @classmethod
    def _attendee_strings(cls, value):
        if not isinstance(value, list):
            return []
        attendees = []
        for item in value:
            if isinstance(item, str):
                attendees.append(item)
            elif isinstance(item, dict):
                attendees.append(str(item.get("email") or item.get("name") or ""))
        return [a for a in attendees if a]

    @field_validator("external_participants", mode="before")
    @classmethod
    def _participant_objects(cls, value):
        if not isinstance(value, list):
            return []
        participants = []
        for item in value:
            if isinstance(item, dict):
                participants.append({
                    "email": str(item.get("email") or ""),
                    "name": str(item.get("name") or ""),
                })
            elif isinstance(item, str):
                participants.append({"email": item, "name": ""})
        return participants

    @field_validator("title", "time", mode="before")
    @classmethod
    def _text(cls, value):
        return "" if value is None else str(value)
