import logging
from typing import Optional

from fastapi import FastAPI

from app.agents.gateway import AgentGateway, select_agent_gateway
from app.core.config import load_config
from app.history.recorder import HistoryRecorder
from app.routes.config import router as config_router
from app.routes.health import router as health_router
from app.routes.preview import router as preview_router
from app.settings.store import ConfigStore
from app.storage.slots import FileSlotStorage

logger = logging.getLogger("day_planner")
logging.basicConfig(level=logging.INFO)


def create_app(
    config_store: Optional[ConfigStore] = None,
    gateway: Optional[AgentGateway] = None,
    history: Optional[HistoryRecorder] = None,
) -> FastAPI:
    """
    Build the API with its collaborators held on `app.state`.

    Anything not passed in is built from the environment.
    """
    cfg = load_config()

    app = FastAPI(title="Day Prep Planner")
    app.state.config_store = config_store or ConfigStore(FileSlotStorage(cfg.config_storage_dir))
    app.state.gateway = gateway or select_agent_gateway(cfg)
    app.state.history = history or HistoryRecorder()

    app.include_router(health_router, tags=["health"])
    app.include_router(config_router, tags=["config"])
    app.include_router(preview_router, tags=["preview"])

    @app.get("/")
    def root():
        return {"status": "ok"}

    logger.info(f"Day Prep Planner ready (agent gateway: {cfg.agent_gateway})")
    return app


app = create_app()
