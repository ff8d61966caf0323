import copy
import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.agents.constants import UNKNOWN_AGENT_ERROR
from app.core.config import AppConfig, load_config
from app.core.errors import AgentError, TransportError

logger = logging.getLogger(__name__)


class AgentResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str = "error"
    result: Any = None
    message: Optional[str] = None


class AgentResult(BaseModel):
    """Result-or-error envelope returned by every agent call."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    response: AgentResponse = Field(default_factory=AgentResponse)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.success and self.response.status == "success"

    def error_message(self, fallback: str = UNKNOWN_AGENT_ERROR) -> str:
        return self.response.message or self.error or fallback

    def raise_for_status(self, agent_id: Optional[str] = None) -> None:
        """Raise AgentError if the call completed but reported failure."""
        if not self.ok:
            raise AgentError(self.error_message(), agent_id=agent_id)


class AgentGateway(Protocol):
    async def invoke(self, message: str, agent_id: str) -> AgentResult:
        """
        Send `message` to the agent `agent_id` and return its envelope.

        Raises:
            TransportError: If the call could not complete.
        """
        ...


class HttpAgentGateway:
    """Agent gateway that POSTs to the agent service over HTTP."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout_seconds: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def invoke(self, message: str, agent_id: str) -> AgentResult:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = {"message": message, "agent_id": agent_id}

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(self.base_url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(f"Agent call timed out after {self.timeout_seconds}s") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Agent call failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                f"Agent service returned non-JSON response ({response.status_code})",
                status_code=response.status_code,
            ) from e

        # Error statuses still carry an envelope when the service itself reports the failure
        if not isinstance(data, dict) or not ({"success", "response"} & set(data)):
            raise TransportError(
                f"Agent service returned unexpected payload ({response.status_code})",
                status_code=response.status_code,
            )

        try:
            result = AgentResult.model_validate(data)
        except ValidationError as e:
            raise TransportError(f"Agent envelope could not be decoded: {e}", status_code=response.status_code) from e

        logger.debug(f"Agent {agent_id} responded with status {result.response.status}")
        return result


StubResponse = Union[AgentResult, Dict[str, Any], Exception]


class StubAgentGateway:
    """Deterministic gateway for tests and when no agent service is configured."""

    def __init__(self, responses: Optional[Dict[str, StubResponse]] = None):
        if responses is None:
            from app.data.sample_agent_results import sample_responses
            responses = sample_responses()
        self._responses = responses
        self.calls: List[Tuple[str, str]] = []

    async def invoke(self, message: str, agent_id: str) -> AgentResult:
        self.calls.append((message, agent_id))

        canned = self._responses.get(agent_id)
        if isinstance(canned, Exception):
            raise canned
        if canned is None:
            return AgentResult(
                success=False,
                response=AgentResponse(status="error", message=f"No stub response for agent {agent_id}"),
            )
        if isinstance(canned, AgentResult):
            return canned.model_copy(deep=True)
        return AgentResult.model_validate(copy.deepcopy(canned))


def select_agent_gateway(cfg: Optional[AppConfig] = None) -> AgentGateway:
    """Factory function to select the agent gateway based on AGENT_GATEWAY env var."""
    cfg = cfg or load_config()

    if cfg.agent_gateway == "stub":
        return StubAgentGateway()
    elif cfg.agent_gateway == "http":
        if not cfg.agent_api_url:
            raise ValueError("AGENT_API_URL must be set when AGENT_GATEWAY=http")
        return HttpAgentGateway(
            base_url=cfg.agent_api_url,
            api_key=cfg.agent_api_key,
            timeout_seconds=cfg.agent_timeout_ms / 1000.0,
        )
    else:
        raise ValueError(f"Unsupported AGENT_GATEWAY: {cfg.agent_gateway}")
