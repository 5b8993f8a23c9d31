"""Small JSON-file key/value store with browser localStorage semantics."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    Key/value store persisted as one JSON document.

    With ``path=None`` everything stays in memory, which is what tests use.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring storage file {self.path}: expected a JSON object")
            return {}
        return data

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)

    def get_item(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set_item(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    def clear(self) -> None:
        self._data = {}
        self._flush()

    def keys(self):
        return list(self._data.keys())
