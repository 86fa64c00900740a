"""
Client-side persistence of the signed-in session.

The record lives under a single well-known key ("auth") so that it
survives process restarts the way browser local storage survives reloads.
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from taskboard.schemas.base import CamelModel

logger = logging.getLogger(__name__)

SESSION_KEY = "auth"


class SessionUser(CamelModel):
    email: str
    username: Optional[str] = None


class SessionRecord(CamelModel):
    access_token: str
    refresh_token: str
    user: SessionUser


class SessionStore(ABC):
    """get/set/clear access to the stored SessionRecord."""

    @abstractmethod
    def get(self) -> Optional[SessionRecord]:
        ...

    @abstractmethod
    def set(self, record: SessionRecord) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemorySessionStore(SessionStore):
    def __init__(self, record: Optional[SessionRecord] = None):
        self._record = record

    def get(self) -> Optional[SessionRecord]:
        return self._record.model_copy(deep=True) if self._record else None

    def set(self, record: SessionRecord) -> None:
        self._record = record.model_copy(deep=True)

    def clear(self) -> None:
        self._record = None


class FileSessionStore(SessionStore):
    """JSON file store; other keys in the file are left untouched."""

    def __init__(self, path: Union[str, Path], key: str = SESSION_KEY):
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read session file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self) -> Optional[SessionRecord]:
        raw = self._read_all().get(self.key)
        if raw is None:
            return None
        try:
            return SessionRecord.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed session record in %s", self.path)
            return None

    def set(self, record: SessionRecord) -> None:
        data = self._read_all()
        data[self.key] = record.model_dump(by_alias=True)
        self._write_all(data)

    def clear(self) -> None:
        data = self._read_all()
        if self.key in data:
            del data[self.key]
            self._write_all(data)
