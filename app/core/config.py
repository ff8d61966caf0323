import os
from typing import Optional

from pydantic import BaseModel


class AppConfig(BaseModel):
    agent_gateway: str = "stub"
    agent_api_url: Optional[str] = None
    agent_api_key: Optional[str] = None
    agent_timeout_ms: int = 120000
    config_storage_dir: str = "/tmp/day-planner"
    api_key: Optional[str] = None


def load_config() -> AppConfig:
    timeout_str = os.getenv("AGENT_TIMEOUT_MS", "120000")
    timeout_ms = int(timeout_str) if timeout_str.isdigit() else 120000
    return AppConfig(
        agent_gateway=os.getenv("AGENT_GATEWAY", "stub").lower(),
        agent_api_url=os.getenv("AGENT_API_URL"),
        agent_api_key=os.getenv("AGENT_API_KEY"),
        agent_timeout_ms=timeout_ms,
        config_storage_dir=os.getenv("CONFIG_STORAGE_DIR", "/tmp/day-planner"),
        api_key=os.getenv("API_KEY"),
    )
