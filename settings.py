from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Storage
    db_file: Path

    # Listener
    host: str
    port: int

    # Logging
    enable_logs: bool

    # Seconds in-flight requests get to finish on shutdown
    shutdown_timeout_seconds: float

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def get_settings() -> Settings:
    db_file = Path(os.getenv("JSON_SERVER_FILE", "db.json"))
    host = os.getenv("JSON_SERVER_HOST", "0.0.0.0")
    port = _env_int("JSON_SERVER_PORT", 3000)

    enable_logs = _env_bool("JSON_SERVER_LOGS", False)

    shutdown_timeout_seconds = _env_float("JSON_SERVER_SHUTDOWN_TIMEOUT", 15.0)

    return Settings(
        db_file=db_file,
        host=host,
        port=port,
        enable_logs=enable_logs,
        shutdown_timeout_seconds=shutdown_timeout_seconds,
    )
