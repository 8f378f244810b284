"""Thin repository over the key/value store for planner state.

Owns the three fixed keys and the JSON shapes stored under them. Reads are
validated through the pydantic schemas; anything malformed is logged and
treated as absent so the app falls back to a fresh day.
"""
import json
from typing import List, Optional

from pydantic import ValidationError

from glassrubber.day.record import DayRecord
from glassrubber.models.schemas import DayRecordSchema, RecentsSchema
from glassrubber.utils.logger import get_logger

from .kv_store import KeyValueStore

logger = get_logger(__name__)

DAY_KEY = "glass-rubber-data"
RECENTS_KEY = "glass-rubber-recents"
INTRO_SEEN_KEY = "glass-rubber-intro-seen"


class PlanStorage:
    """Persistence gateway injected into the day state machine."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _read_json(self, key: str):
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning("Ignoring unparseable %s: %s", key, e)
            return None

    # Day record ---------------------------------------------------------

    def load_day(self) -> Optional[DayRecord]:
        data = self._read_json(DAY_KEY)
        if data is None:
            return None
        try:
            return DayRecord.from_schema(DayRecordSchema.model_validate(data))
        except ValidationError as e:
            logger.warning("Ignoring malformed day record: %s", e)
            return None

    def save_day(self, record: DayRecord) -> None:
        self.store.set(DAY_KEY, json.dumps(record.to_dict()))

    def clear_day(self) -> None:
        self.store.remove(DAY_KEY)

    # Recents ------------------------------------------------------------

    def load_recents(self) -> List[str]:
        data = self._read_json(RECENTS_KEY)
        if data is None:
            return []
        try:
            return list(RecentsSchema.model_validate(data).root)
        except ValidationError as e:
            logger.warning("Ignoring malformed recents: %s", e)
            return []

    def save_recents(self, recents: List[str]) -> None:
        self.store.set(RECENTS_KEY, json.dumps(list(recents)))

    def clear_recents(self) -> None:
        self.store.remove(RECENTS_KEY)

    # Intro flag ---------------------------------------------------------

    def intro_seen(self) -> bool:
        return bool(self.store.get(INTRO_SEEN_KEY))

    def mark_intro_seen(self) -> None:
        self.store.set(INTRO_SEEN_KEY, "true")
