from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional


def _parse_max_entries(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"EDIT_HISTORY_MAX_ENTRIES must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"EDIT_HISTORY_MAX_ENTRIES must be positive, got {value}")
    return value


def _parse_log_level(raw: Optional[str]) -> int:
    name = (raw or "WARNING").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {raw!r}")
    return level


@dataclass
class HistoryConfig:
    max_entries: Optional[int] = None
    log_level: int = logging.WARNING

    @classmethod
    def from_env(cls) -> "HistoryConfig":
        """Build a config from EDIT_HISTORY_MAX_ENTRIES / EDIT_HISTORY_LOG_LEVEL."""
        return cls(
            max_entries=_parse_max_entries(os.getenv("EDIT_HISTORY_MAX_ENTRIES")),
            log_level=_parse_log_level(os.getenv("EDIT_HISTORY_LOG_LEVEL")),
        )


__all__ = ["HistoryConfig"]
