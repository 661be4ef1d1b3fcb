"""Key-value stores backing the simulated tool catalogs.

The stores are an explicit interface injected into the dispatcher and the
history: tests use an in-memory instance, a dev server can persist to a JSON
file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from mcp_playground.config import Settings
from mcp_playground.shared.exceptions import StorageError
from mcp_playground.shared.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Minimal key-value interface (values are JSON-compatible)."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default."""

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Remove key if present."""

    def keys(self, prefix: str = "") -> list[str]:
        """Return all keys starting with prefix."""


def _copy(value: Any) -> Any:
    # Values go in and out as serialized copies
    return json.loads(json.dumps(value))


class InMemoryStore:
    """Process-local store. Last write wins, no locking."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return [key for key in self._data if key.startswith(prefix)]


class JsonFileStore:
    """Store persisted as a single JSON document on disk.

    The whole document is rewritten on every mutation. Reads and writes are
    synchronous and run on the event loop when called from the async tool
    handlers; this store is meant for local development with small files.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(
                f"Store file {self.path} is unreadable",
                details={"path": str(self.path), "error": str(e)},
            ) from e
        if not isinstance(raw, dict):
            raise StorageError(
                f"Store file {self.path} must contain a JSON object",
                details={"path": str(self.path)},
            )
        return raw

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self.path.write_text(json.dumps(self._data, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as e:
            logger.error("store_write_failed", path=str(self.path), error=str(e))
            raise StorageError(f"Failed to write store file {self.path}") from e

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return _copy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = _copy(value)
        self._flush()

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    def keys(self, prefix: str = "") -> list[str]:
        return [key for key in self._data if key.startswith(prefix)]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the store configured by STORE_PATH (in-memory when empty)."""
    if settings.store_path:
        logger.info("using_json_file_store", path=settings.store_path)
        return JsonFileStore(settings.store_path)
    logger.info("using_in_memory_store")
    return InMemoryStore()
