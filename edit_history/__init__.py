"""Undo/redo history for in-memory document edits."""

from .action import Action
from .config import HistoryConfig
from .entry import Entry
from .schemas import ActionMetadata, ActionType, HistoryValue, ValueSlot
from .session import HistorySession
from .store import HistoryError, HistoryStore
from .value_path import MapKey, PathError, ValuePath

__all__ = [
    "Action",
    "ActionMetadata",
    "ActionType",
    "Entry",
    "HistoryConfig",
    "HistoryError",
    "HistorySession",
    "HistoryStore",
    "HistoryValue",
    "MapKey",
    "PathError",
    "ValuePath",
    "ValueSlot",
]
