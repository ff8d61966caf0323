from typing import Optional


class DayPrepError(Exception):
    """Base class for day prep failures."""


class TransportError(DayPrepError):
    """The agent call itself could not complete (network or service failure)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AgentError(DayPrepError):
    """The agent call completed but reported an unsuccessful outcome."""

    def __init__(self, message: str, agent_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.agent_id = agent_id


class ConfigParseError(DayPrepError):
    """A persisted or imported planner config could not be decoded."""
