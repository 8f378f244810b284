"""Database engine helpers.

This centralizes engine creation so both the app and tests can share the
same configuration. By default we store the SQLite database under the
project root in `data/glass_rubber.db` (override with DATABASE_URL).
"""

import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from glassrubber.config import get_settings

from .models import Base


def get_engine(database_url: Optional[str] = None) -> Engine:
    """Return a SQLAlchemy engine, creating data dir as needed."""
    url = database_url or get_settings().database_url
    if url.startswith("sqlite:///"):
        db_location = url.replace("sqlite:///", "")
        if db_location != ":memory:" and db_location:
            os.makedirs(os.path.dirname(os.path.abspath(db_location)), exist_ok=True)
    return create_engine(url, echo=False, future=True)


def init_db(engine_override: Optional[Engine] = None) -> None:
    """Create tables if they don't exist.

    The schema is a single key/value table, so there are no migrations.
    """
    eng = engine_override or get_engine()
    Base.metadata.create_all(eng)
