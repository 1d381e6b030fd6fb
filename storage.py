"""
Per-profile key-value persistence.

Everything the tracker remembers lives in one flat JSON object keyed by
string. The file is re-read on every access and rewritten on every change,
so two processes sharing a profile simply see last-write-wins.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from exceptions import StorageUnavailable
from logging_config import get_logger

logger = get_logger("self_reliance.storage")

# Keys of the persisted blob
USAGE_RECORD_KEY = "usage_record"
STREAK_KEY = "streak"
STREAK_EVALUATED_KEY = "streak_last_evaluated"
EARNED_BADGES_KEY = "earned_badges"
MESSAGES_KEY = "messages"
SELF_SOLVED_KEY = "self_solved"
AI_SOLVED_KEY = "ai_solved"
HAS_VISITED_KEY = "has_visited"


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    """In-memory store; used for tests and as the degraded fallback."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._data)


class JsonFileStore:
    """One JSON file per profile."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(f"Profile file {self.path} is not valid JSON, starting fresh")
            return {}
        except OSError as e:
            raise StorageUnavailable(f"Cannot read {self.path}: {e}", path=str(self.path)) from e

        if not isinstance(data, dict):
            logger.warning(f"Profile file {self.path} does not hold an object, starting fresh")
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        # serialize before touching the file so a bad value cannot truncate it
        content = json.dumps(data, indent=2, ensure_ascii=False)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(content, encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageUnavailable(f"Cannot write {self.path}: {e}", path=str(self.path)) from e

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)


class ResilientStore:
    """
    Wraps a primary store and degrades to an in-memory session
    the first time the primary raises StorageUnavailable.

    Values seen so far are carried over, so the session keeps working
    with whatever it already knew.
    """

    def __init__(self, primary: KeyValueStore):
        self._primary = primary
        self._shadow: Dict[str, Any] = {}
        self._fallback: Optional[MemoryStore] = None

    @property
    def degraded(self) -> bool:
        return self._fallback is not None

    def _degrade(self, error: StorageUnavailable) -> MemoryStore:
        logger.warning(f"Storage unavailable, continuing in memory only: {error}")
        self._fallback = MemoryStore(self._shadow)
        return self._fallback

    def get(self, key: str, default: Any = None) -> Any:
        if self._fallback is not None:
            return self._fallback.get(key, default)
        try:
            value = self._primary.get(key, default)
        except StorageUnavailable as e:
            return self._degrade(e).get(key, default)
        if value is not default:
            self._shadow[key] = value
        return value

    def set(self, key: str, value: Any) -> None:
        if self._fallback is not None:
            self._fallback.set(key, value)
            return
        self._shadow[key] = value
        try:
            self._primary.set(key, value)
        except StorageUnavailable as e:
            self._degrade(e)


def open_store(path: str | Path) -> ResilientStore:
    """Open the profile store at `path`, falling back to memory if it breaks."""
    return ResilientStore(JsonFileStore(path))
