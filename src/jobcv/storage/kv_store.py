"""Key-value stores for named templates and UI state.

``JsonFileStore`` keeps everything in one JSON object on disk and rewrites
the whole file on every change. There is no locking: concurrent writers
race and the last one wins.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str) -> None: ...

    def delete(self, name: str) -> bool: ...

    def all(self) -> dict[str, str]: ...


class MemoryStore:
    """In-process store, mainly for tests."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, name: str) -> str | None:
        return self._data.get(name)

    def set(self, name: str, value: str) -> None:
        self._data[name] = value

    def delete(self, name: str) -> bool:
        return self._data.pop(name, None) is not None

    def all(self) -> dict[str, str]:
        return dict(self._data)


class JsonFileStore:
    """Store backed by a single JSON file mapping name -> string."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning("Store file %s is not valid JSON, treating as empty", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file %s does not hold an object, treating as empty", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def get(self, name: str) -> str | None:
        return self._read().get(name)

    def set(self, name: str, value: str) -> None:
        """Save a value, overwriting any existing entry of that name."""
        data = self._read()
        data[name] = value
        self._write(data)

    def delete(self, name: str) -> bool:
        """Remove an entry. Returns False if it did not exist."""
        data = self._read()
        if name not in data:
            return False
        del data[name]
        self._write(data)
        return True

    def all(self) -> dict[str, str]:
        return self._read()
