"""Database models, key/value stores and the planner repository."""
from .engine import get_engine, init_db
from .kv_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    SqlKeyValueStore,
    build_store,
)
from .models import Base, KeyValueEntry
from .repository import DAY_KEY, INTRO_SEEN_KEY, RECENTS_KEY, PlanStorage

__all__ = [
    "get_engine",
    "init_db",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "SqlKeyValueStore",
    "build_store",
    "Base",
    "KeyValueEntry",
    "DAY_KEY",
    "INTRO_SEEN_KEY",
    "RECENTS_KEY",
    "PlanStorage",
]
