import json
import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError

from app.core.errors import ConfigParseError
from app.observability.logger import log_error, log_info, log_warning
from app.settings.models import DayPlannerConfig, default_config
from app.storage.slots import SlotStorage

logger = logging.getLogger(__name__)


CONFIG_STORAGE_KEY = "day-planner-config"

# field name -> camelCase key, so snake_case documents are accepted too
_ALIASES: Dict[str, str] = {
    name: (field.alias or name) for name, field in DayPlannerConfig.model_fields.items()
}
_KNOWN_KEYS = set(_ALIASES.values())


def _decode_document(raw: Union[str, bytes]) -> Dict[str, Any]:
    """
    Decode persisted or imported text into a JSON object.

    Raises:
        ConfigParseError: If the text is not valid JSON or not an object.
    """
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        document = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigParseError(f"Config is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ConfigParseError(f"Config must be a JSON object, got {type(document).__name__}")
    return document


def _normalize_keys(document: Dict[str, Any]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for key, value in document.items():
        alias = _ALIASES.get(key, key)
        if alias in _KNOWN_KEYS:
            normalized[alias] = value
    return normalized


def config_from_document(document: Dict[str, Any]) -> DayPlannerConfig:
    """
    Build a config, falling back to the default value for each field that is
    missing or fails validation. Valid fields are preserved as stored.
    """
    data = _normalize_keys(document)

    while True:
        try:
            return DayPlannerConfig.model_validate(data)
        except ValidationError as e:
            bad_keys = {err["loc"][0] for err in e.errors() if err.get("loc")}
            bad_keys &= set(data)
            if not bad_keys:
                log_warning("Stored config unusable, using defaults", {"errors": e.error_count()})
                return default_config()
            log_warning("Dropping invalid stored config fields", {"fields": sorted(bad_keys)})
            for key in bad_keys:
                data.pop(key)


def validate_config_document(document: Dict[str, Any]) -> DayPlannerConfig:
    """
    Strictly build a config from a whole document. Missing fields take their
    default values; the existing config is never consulted.

    Raises:
        ConfigParseError: If a field has the wrong type or format.
    """
    try:
        return DayPlannerConfig.model_validate(_normalize_keys(document))
    except ValidationError as e:
        raise ConfigParseError(f"Config has invalid fields: {e}") from e


def parse_config(raw: Union[str, bytes]) -> DayPlannerConfig:
    """
    Parse an imported config file.

    Raises:
        ConfigParseError: If the content is not a JSON object or a field is invalid.
    """
    return validate_config_document(_decode_document(raw))


def export_filename(today: Optional[date] = None) -> str:
    """Download name for an exported config, e.g. day-planner-config-2026-02-06.json."""
    return f"day-planner-config-{(today or date.today()).isoformat()}.json"


class ConfigStore:
    """
    Owns the rep's planner config and its persisted copy.

    There is a single in-memory value; every update writes through to the
    storage slot. Persistence failures are logged and never roll back the
    in-memory value.
    """

    def __init__(self, storage: SlotStorage, slot: str = CONFIG_STORAGE_KEY):
        self._storage = storage
        self._slot = slot
        self._config: Optional[DayPlannerConfig] = None

    def load(self) -> DayPlannerConfig:
        """Return the current config, reading the persisted slot on first use."""
        if self._config is None:
            self._config = self._read_persisted()
        return self._config

    def _read_persisted(self) -> DayPlannerConfig:
        try:
            stored = self._storage.read(self._slot)
        except OSError as e:
            log_error(e, {"slot": self._slot, "operation": "read"})
            return default_config()

        if stored is None:
            logger.info("No stored planner config, using defaults")
            return default_config()

        try:
            document = _decode_document(stored)
        except ConfigParseError as e:
            log_error(e, {"slot": self._slot, "operation": "parse"})
            return default_config()

        logger.info("Planner config loaded from storage")
        return config_from_document(document)

    def update(self, transform: Callable[[DayPlannerConfig], DayPlannerConfig]) -> DayPlannerConfig:
        """
        Apply `transform` to the current config, persist the result and return it.

        Raises:
            ValidationError: If the transformed value is not a valid config. The current config is left unchanged.
        """
        updated = transform(self.load())
        if isinstance(updated, DayPlannerConfig):
            # model_copy(update=...) skips validation
            updated = updated.model_dump()
        updated = DayPlannerConfig.model_validate(updated)

        self._config = updated
        self._persist(updated)
        return updated

    def _persist(self, config: DayPlannerConfig) -> None:
        try:
            self._storage.write(self._slot, json.dumps(config.to_document()))
            logger.info("Planner config saved")
        except OSError as e:
            log_error(e, {"slot": self._slot, "operation": "write"})

    def reset(self) -> DayPlannerConfig:
        config = self.update(lambda _: default_config())
        logger.info("Planner config reset to defaults")
        return config

    def export(self) -> bytes:
        """Serialize the current config as pretty-printed JSON."""
        return json.dumps(self.load().to_document(), indent=2).encode("utf-8")

    def import_config(self, raw: Union[str, bytes]) -> DayPlannerConfig:
        """
        Replace the current config wholesale with the parsed content.

        Raises:
            ConfigParseError: If the content cannot be parsed. The current config is left unchanged.
        """
        try:
            imported = parse_config(raw)
        except ConfigParseError as e:
            log_error(e, {"operation": "import"})
            raise

        config = self.update(lambda _: imported)
        log_info("Planner config imported", {"selected_date": config.selected_date, "sources": config.enabled_sources()})
        return config
