import os
import time
import json
import logging
from contextlib import contextmanager
from typing import Dict, Any, Optional
from datetime import datetime

# Import sentry_sdk at module level for testing
try:
    import sentry_sdk
except ImportError:
    sentry_sdk = None

logger = logging.getLogger(__name__)


class TimingContext:
    """Context manager for timing operations."""

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration_ms = (time.time() - self.start_time) * 1000

    def get_duration_ms(self) -> Optional[float]:
        """Get duration in milliseconds."""
        return self.duration_ms


@contextmanager
def timing(operation_name: str):
    """Context manager for timing operations."""
    context = TimingContext(operation_name)
    with context:
        yield context


def log_event(
    action: str,
    agent: str,
    status: str,
    meeting_count: int = 0,
    participant_count: int = 0,
    duration_ms: Optional[float] = None,
    **kwargs
) -> None:
    """
    Log a structured agent-call event with required fields.

    Args:
        action: The action performed (e.g., 'preview', 'calendar_check', 'profile_companies')
        agent: The agent that was invoked (e.g., 'coordinator', 'calendar')
        status: Outcome of the call ('success', 'failed', 'empty')
        meeting_count: Number of meetings extracted
        participant_count: Number of enriched participants
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields to include in the log
    """
    log_entry = {
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "action": action,
        "agent": agent,
        "status": status,
        "meeting_count": meeting_count,
        "participant_count": participant_count,
    }

    if duration_ms is not None:
        log_entry["duration_ms"] = round(duration_ms, 2)

    log_entry.update(_sanitize_fields(kwargs))

    # Log as JSON string for structured logging
    logger.info(json.dumps(log_entry, separators=(',', ':'), default=str))


def _sanitize_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Drop values whose keys look like secrets and truncate long strings.

    Args:
        fields: Extra log fields

    Returns:
        Fields safe for logging
    """
    sensitive_patterns = [
        "password",
        "secret",
        "api_key",
        "token",
        "auth",
        "credential",
    ]

    sanitized = {}
    for key, value in fields.items():
        if any(pattern in key.lower() for pattern in sensitive_patterns):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, str) and len(value) > 200:
            sanitized[key] = value[:197] + "..."
        else:
            sanitized[key] = value
    return sanitized


def init_sentry() -> bool:
    """
    Initialize Sentry if enabled and DSN is provided.

    Returns:
        True if Sentry was initialized, False otherwise
    """
    if not os.getenv("OBS_ENABLED", "false").lower() == "true":
        return False

    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info("Sentry DSN not provided, skipping Sentry initialization")
        return False

    try:
        if sentry_sdk is None:
            raise ImportError("sentry_sdk not available")

        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[
                FastApiIntegration(),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR
                ),
            ],
            traces_sample_rate=0.1,
            environment=os.getenv("ENVIRONMENT", "development"),
        )

        logger.info("Sentry initialized successfully")
        return True

    except ImportError:
        logger.warning("Sentry SDK not installed, skipping Sentry initialization")
        return False
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def log_error(error: Exception, context: Dict[str, Any] = None) -> None:
    """
    Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context dictionary
    """
    log_entry = {
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "level": "ERROR",
        "error": str(error),
        "error_type": type(error).__name__,
    }

    if context:
        log_entry.update(_sanitize_fields(context))

    logger.error(json.dumps(log_entry, separators=(',', ':'), default=str))


def log_warning(message: str, context: Dict[str, Any] = None) -> None:
    """
    Log a warning with optional context.

    Args:
        message: The warning message
        context: Optional context dictionary
    """
    log_entry = {
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "level": "WARNING",
        "message": message,
    }

    if context:
        log_entry.update(_sanitize_fields(context))

    logger.warning(json.dumps(log_entry, separators=(',', ':'), default=str))


def log_info(message: str, context: Dict[str, Any] = None) -> None:
    """
    Log an info message with optional context.

    Args:
        message: The info message
        context: Optional context dictionary
    """
    log_entry = {
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "level": "INFO",
        "message": message,
    }

    if context:
        log_entry.update(_sanitize_fields(context))

    logger.info(json.dumps(log_entry, separators=(',', ':'), default=str))
