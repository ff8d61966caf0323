import os
import re
from pathlib import Path
from typing import Dict, Optional, Protocol


class SlotStorage(Protocol):
    def read(self, slot: str) -> Optional[str]:
        """Return the text stored under `slot`, or None if the slot is empty."""
        ...

    def write(self, slot: str, content: str) -> None:
        """Replace the text stored under `slot`. May raise OSError."""
        ...

    def delete(self, slot: str) -> bool:
        ...


class FileSlotStorage:
    """Named text slots persisted as one file per slot."""

    def __init__(self, storage_dir: Optional[str] = None):
        """
        Initialize the slot storage.

        Args:
            storage_dir: Directory to store slot files. If None, uses CONFIG_STORAGE_DIR or /tmp/day-planner.
        """
        self.storage_dir = Path(storage_dir or os.getenv("CONFIG_STORAGE_DIR", "/tmp/day-planner"))
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _slot_path(self, slot: str) -> Path:
        safe_name = re.sub(r"[^A-Za-z0-9._-]", "_", slot)
        return self.storage_dir / f"{safe_name}.json"

    def read(self, slot: str) -> Optional[str]:
        slot_file = self._slot_path(slot)
        if not slot_file.exists():
            return None
        with open(slot_file, 'r', encoding='utf-8') as f:
            return f.read()

    def write(self, slot: str, content: str) -> None:
        slot_file = self._slot_path(slot)
        # Atomic replace via sibling temp file
        tmp_file = slot_file.with_suffix(".json.tmp")
        with open(tmp_file, 'w', encoding='utf-8') as f:
            f.write(content)
        tmp_file.replace(slot_file)

    def delete(self, slot: str) -> bool:
        slot_file = self._slot_path(slot)
        if slot_file.exists():
            slot_file.unlink()
            return True
        return False


class MemorySlotStorage:
    """In-process slot storage, used by tests and the stub gateway setup."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._slots: Dict[str, str] = dict(initial or {})

    def read(self, slot: str) -> Optional[str]:
        return self._slots.get(slot)

    def write(self, slot: str, content: str) -> None:
        self._slots[slot] = content

    def delete(self, slot: str) -> bool:
        return self._slots.pop(slot, None) is not None
