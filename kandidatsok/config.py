"""
Environment-driven settings.

Values come from the process environment, optionally seeded from a `.env`
file in the working directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .logger import get_logger

DEFAULT_INDEX = "veilederkandidat_current"
DEFAULT_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_env() -> None:
    """Load .env from the working directory if present. Existing variables win."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        get_logger().warning(f"Invalid {name}; using default", value=raw, default=default)
        return default
    if value <= 0:
        get_logger().warning(f"Non-positive {name}; using default", value=raw, default=default)
        return default
    return value


def _level_env(name: str) -> str:
    raw = os.getenv(name, "").strip()
    if not raw:
        return DEFAULT_LOG_LEVEL
    level = raw.upper()
    if level not in LOG_LEVELS:
        get_logger().warning(f"Unknown {name}; using default", value=raw, default=DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level


def _path_env(name: str) -> Optional[Path]:
    raw = os.getenv(name, "").strip()
    return Path(raw) if raw else None


@dataclass(frozen=True)
class Settings:
    open_search_uri: str
    open_search_username: Optional[str] = None
    open_search_password: Optional[str] = None
    index: str = DEFAULT_INDEX
    timeout: float = DEFAULT_TIMEOUT
    audit_db_path: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ValueError: If OPEN_SEARCH_URI is not set
        """
        uri = os.getenv("OPEN_SEARCH_URI", "").strip()
        if not uri:
            raise ValueError("Missing OPEN_SEARCH_URI. Set env var or add it to .env.")
        return cls(
            open_search_uri=uri.rstrip("/"),
            open_search_username=os.getenv("OPEN_SEARCH_USERNAME") or None,
            open_search_password=os.getenv("OPEN_SEARCH_PASSWORD") or None,
            index=os.getenv("KANDIDATSOK_INDEX", "").strip() or DEFAULT_INDEX,
            timeout=_float_env("KANDIDATSOK_TIMEOUT", DEFAULT_TIMEOUT),
            audit_db_path=_path_env("KANDIDATSOK_AUDIT_DB"),
            log_level=_level_env("KANDIDATSOK_LOG_LEVEL"),
            log_dir=_path_env("KANDIDATSOK_LOG_DIR"),
        )
