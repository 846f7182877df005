"""
Local key/value cache and the two persistence interfaces built on it.

The raw cache is only ever touched through CredentialStore (owned by the
ApiClient) and SessionRepository (injected into the SessionManager).
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from pydantic import ValidationError
from clinic_client.schemas.auth import Session
from clinic_client.utils.logger import get_logger

logger = get_logger("storage")

TOKEN_KEY = "accessToken"
SESSION_KEY = "user"


class KeyValueCache(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryCache(KeyValueCache):
    """Process-local cache. Also the fake used by the test suite."""

    def __init__(self, initial: dict = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FileCache(KeyValueCache):
    """JSON file on disk, rewritten on every change."""

    def __init__(self, path: str):
        self.path = Path(path).expanduser()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class CredentialStore:
    def __init__(self, cache: KeyValueCache):
        self.cache = cache

    def load(self) -> Optional[str]:
        return self.cache.get(TOKEN_KEY) or None

    def save(self, token: str) -> None:
        self.cache.set(TOKEN_KEY, token)

    def clear(self) -> None:
        self.cache.remove(TOKEN_KEY)


class SessionRepository:
    def __init__(self, cache: KeyValueCache):
        self.cache = cache

    def load(self) -> Optional[Session]:
        """Return the cached session, or None when missing or corrupted."""
        raw = self.cache.get(SESSION_KEY)
        if not raw:
            return None
        try:
            return Session.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding corrupted cached session")
            self.cache.remove(SESSION_KEY)
            return None

    def save(self, session: Session) -> None:
        self.cache.set(SESSION_KEY, session.model_dump_json())

    def clear(self) -> None:
        self.cache.remove(SESSION_KEY)


def build_cache(path: str = "") -> KeyValueCache:
    return FileCache(path) if path else MemoryCache()
