"""Small JSON key-value store for advisory local state."""

import json
from pathlib import Path
from typing import Optional

from loguru import logger


class JsonStateStore:
    """Persists string values keyed by string in a single JSON file.

    A missing or corrupt file reads as empty; nothing stored here is
    required for correctness.
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize store.

        Args:
            path: Backing file, None keeps everything in memory
        """
        self.path = path
        self._data: dict[str, str] = self._load()

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._save()

    def _load(self) -> dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return {str(k): str(v) for k, v in data.items()}
        except (json.JSONDecodeError, OSError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return {}

    def _save(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"Failed to persist state to {self.path}: {e}")
