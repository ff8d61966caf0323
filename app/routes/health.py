import os
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import load_config
from app.history.recorder import HistoryRecorder
from app.observability.logger import init_sentry
from app.routes.deps import get_history

router = APIRouter()


@router.get("/healthz")
async def health_check(history: HistoryRecorder = Depends(get_history)) -> JSONResponse:
    """
    Health check endpoint with the most recent preview attempt.

    Returns:
        JSON response with status and last run metadata
    """
    response = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "agent_gateway": load_config().agent_gateway,
    }

    latest = history.latest()
    if latest:
        response["last_run"] = {
            "date": latest.date,
            "status": latest.status,
            "meeting_count": latest.meeting_count,
            "participant_count": latest.participant_count,
        }

    obs_enabled = os.getenv("OBS_ENABLED", "false").lower() == "true"
    response["observability"] = {
        "enabled": obs_enabled,
        "sentry_configured": bool(os.getenv("SENTRY_DSN")),
    }

    return JSONResponse(status_code=200, content=response)


@router.get("/healthz/ready")
async def readiness_check() -> JSONResponse:
    """
    Readiness check: the agent gateway must be usable as configured.
    """
    cfg = load_config()
    gateway_ok = cfg.agent_gateway == "stub" or (cfg.agent_gateway == "http" and bool(cfg.agent_api_url))
    checks = {
        "agent_gateway": "ok" if gateway_ok else "misconfigured",
    }

    all_healthy = all(status == "ok" for status in checks.values())

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "checks": checks,
    }

    status_code = 200 if all_healthy else 503
    return JSONResponse(status_code=status_code, content=response)


@router.get("/healthz/live")
async def liveness_check() -> JSONResponse:
    response = {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }

    return JSONResponse(status_code=200, content=response)


# Initialize Sentry on module import if enabled
init_sentry()
