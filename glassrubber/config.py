"""Centralized configuration loading.

Loads environment variables once and provides a typed Settings object
for the rest of the codebase. Entrypoints (Streamlit app, CLI scripts)
call get_settings() instead of reading os.environ directly.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


# Load .env once at import time
load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
DATA_DIR = os.path.join(PROJECT_ROOT, "data")

STORE_BACKENDS = ("sqlite", "json", "memory")
DEFAULT_GLASS_WARNING_THRESHOLD = 5

logger = logging.getLogger(__name__)


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r (expected an integer)", name, raw)
        return default


def _store_backend() -> str:
    backend = _env("GR_STORE_BACKEND", "sqlite").lower()
    if backend not in STORE_BACKENDS:
        logger.warning(
            "Unknown GR_STORE_BACKEND=%r, falling back to sqlite", backend
        )
        return "sqlite"
    return backend


@dataclass
class Settings:
    # Storage
    store_backend: str = field(default_factory=_store_backend)
    database_url: str = field(
        default_factory=lambda: _env(
            "DATABASE_URL",
            "sqlite:///" + os.path.join(DATA_DIR, "glass_rubber.db"),
        )
    )
    json_store_path: str = field(
        default_factory=lambda: _env(
            "GR_JSON_STORE_PATH", os.path.join(DATA_DIR, "glass_rubber.json")
        )
    )

    # Planning
    glass_warning_threshold: int = field(
        default_factory=lambda: _env_int(
            "GR_GLASS_WARNING_THRESHOLD", DEFAULT_GLASS_WARNING_THRESHOLD
        )
    )

    # Logging
    log_level: str = field(default_factory=lambda: _env("GR_LOG_LEVEL", "INFO"))
    verbose: bool = field(default_factory=lambda: os.getenv("GR_VERBOSE", "0") == "1")

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.verbose else self.log_level.upper()

    def describe(self) -> dict:
        """Small, secret-free summary for diagnostics panels."""
        location: Optional[str] = None
        if self.store_backend == "sqlite":
            location = self.database_url
        elif self.store_backend == "json":
            location = self.json_store_path
        return {
            "store_backend": self.store_backend,
            "location": location,
            "glass_warning_threshold": self.glass_warning_threshold,
            "log_level": self.effective_log_level,
        }


def get_settings() -> Settings:
    """Return a new Settings instance (cheap dataclass construction)."""
    return Settings()
