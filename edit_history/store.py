from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from .entry import Entry
from .schemas import ActionMetadata

logger = logging.getLogger(__name__)


class HistoryError(RuntimeError):
    """Raised when undo/redo/preview is requested with nothing to act on."""


class HistoryStore:
    """Committed entries plus a cursor.

    Entries below ``cursor`` are done; entries at or above it can only be
    reached through :meth:`redo`. Committing discards everything at or above the
    cursor first, so there is a single linear history.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        """
        max_entries: None keeps every entry; otherwise only the most recent N are kept.
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be a positive integer or None.")
        self.max_entries = max_entries
        self._entries: List[Entry] = []
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries)

    def get_undo_preview(self) -> Optional[ActionMetadata]:
        if not self.can_undo():
            raise HistoryError("Nothing to undo.")
        return self._entries[self._cursor - 1].data

    def get_redo_preview(self) -> Optional[ActionMetadata]:
        if not self.can_redo():
            raise HistoryError("Nothing to redo.")
        return self._entries[self._cursor].data

    def undo(self) -> None:
        if not self.can_undo():
            raise HistoryError("Nothing to undo.")
        self._entries[self._cursor - 1].undo()
        self._cursor -= 1

    def redo(self) -> None:
        if not self.can_redo():
            raise HistoryError("Nothing to redo.")
        self._entries[self._cursor].redo()
        self._cursor += 1

    def commit(self, entry: Entry) -> None:
        if len(entry) == 0:
            raise HistoryError("Cannot commit an entry without actions.")
        dropped = len(self._entries) - self._cursor
        if dropped:
            logger.debug("Discarding %s redoable entries", dropped)
            del self._entries[self._cursor :]
        self._entries.append(entry)
        self._cursor += 1
        if self.max_entries is not None and len(self._entries) > self.max_entries:
            overflow = len(self._entries) - self.max_entries
            self._entries = self._entries[overflow:]
            self._cursor -= overflow
        logger.debug("Committed %r (cursor=%s, size=%s)", entry, self._cursor, len(self._entries))

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = 0

    def summary(self) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        for idx, entry in enumerate(self._entries):
            data = entry.data
            rows.append(
                {
                    "index": idx,
                    "description": entry.description,
                    "actions": len(entry),
                    "entity_ids": entry.entity_ids(),
                    "data": data.to_json() if data is not None else None,
                    "done": idx < self._cursor,
                }
            )
        return rows


__all__ = ["HistoryStore", "HistoryError"]
