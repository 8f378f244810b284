"""String key/value stores backing the planner's persistence.

All stores share the same small contract: ``get`` returns the stored string
or ``None``, ``set`` and ``remove`` return nothing. Writes are
fire-and-forget: a failing write is logged here and never raised to the
caller, so the in-memory session stays authoritative.
"""

from __future__ import annotations

import json
import os
from typing import Callable, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from glassrubber.config import Settings
from glassrubber.utils.logger import get_logger

from .models import KeyValueEntry

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """
    Protocol for synchronous string stores.

    The memory, JSON file and SQL stores implement this interface, making
    them interchangeable behind PlanStorage.
    """

    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileKeyValueStore:
    """All keys in one JSON object file."""

    def __init__(self, path: str):
        self.path = path

    def _ensure_dir(self) -> None:
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Unreadable store file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file %s is not a JSON object; ignoring", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> None:
        try:
            self._ensure_dir()
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning("Failed to write store file %s: %s", self.path, e)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._write(data)


class SqlKeyValueStore:
    """Key/value rows in the ``kv_entries`` table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        session = self.session_factory()
        try:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            logger.warning("Failed to read %s: %s", key, e)
            return None
        finally:
            session.close()

    def set(self, key: str, value: str) -> None:
        session = self.session_factory()
        try:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning("Failed to write %s: %s", key, e)
        finally:
            session.close()

    def remove(self, key: str) -> None:
        session = self.session_factory()
        try:
            entry = session.get(KeyValueEntry, key)
            if entry is not None:
                session.delete(entry)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning("Failed to remove %s: %s", key, e)
        finally:
            session.close()


def build_store(settings: Settings) -> KeyValueStore:
    """Return the store selected by ``settings.store_backend``."""
    if settings.store_backend == "memory":
        return InMemoryKeyValueStore()
    if settings.store_backend == "json":
        return JsonFileKeyValueStore(settings.json_store_path)

    from .engine import get_engine, init_db

    eng = get_engine(settings.database_url)
    try:
        init_db(eng)
    except SQLAlchemyError as e:
        logger.warning("Could not initialize %s: %s", settings.database_url, e)
    return SqlKeyValueStore(sessionmaker(bind=eng, autoflush=False, autocommit=False))
