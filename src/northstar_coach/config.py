import os
from dataclasses import dataclass

from .logging import resolve_level

_LOG_FORMATS = ("json", "text")


@dataclass(frozen=True)
class Config:
    log_format: str = "json"
    log_level: str = "INFO"
    action_limit: int = 4

    @classmethod
    def from_env(cls) -> "Config":
        log_format = os.environ.get("NORTHSTAR_LOG_FORMAT", "json").strip().lower()
        if log_format not in _LOG_FORMATS:
            raise RuntimeError("NORTHSTAR_LOG_FORMAT must be 'json' or 'text'")

        log_level = os.environ.get("NORTHSTAR_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        try:
            resolve_level(log_level)
        except ValueError as exc:
            raise RuntimeError(f"NORTHSTAR_LOG_LEVEL is not a log level: {log_level}") from exc

        raw_limit = os.environ.get("NORTHSTAR_ACTION_LIMIT", "4")
        try:
            action_limit = int(raw_limit)
        except ValueError as exc:
            raise RuntimeError("NORTHSTAR_ACTION_LIMIT must be an integer") from exc

        return cls(log_format=log_format, log_level=log_level, action_limit=action_limit)
