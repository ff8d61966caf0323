from fastapi import HTTPException, Request

from app.agents.gateway import AgentGateway
from app.core.config import load_config
from app.history.recorder import HistoryRecorder
from app.services.preview import PreviewService
from app.settings.store import ConfigStore


def require_api_key_if_configured(request: Request) -> None:
    """Require API key if configured in environment."""
    cfg = load_config()
    if not cfg.api_key:
        return
    provided = request.headers.get("x-api-key") or request.headers.get("X-API-Key")
    if provided != cfg.api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


def get_config_store(request: Request) -> ConfigStore:
    return request.app.state.config_store


def get_gateway(request: Request) -> AgentGateway:
    return request.app.state.gateway


def get_history(request: Request) -> HistoryRecorder:
    return request.app.state.history


def get_preview_service(request: Request) -> PreviewService:
    state = request.app.state
    return PreviewService(state.config_store, state.gateway, state.history)
