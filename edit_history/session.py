from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Hashable, Iterator, MutableMapping, Optional

from .action import Action
from .config import HistoryConfig
from .entry import Entry
from .schemas import ActionMetadata, ValueSlot
from .store import HistoryStore
from .value_path import MapKey, PathLike, ValuePath

logger = logging.getLogger(__name__)


class HistorySession:
    """Owns one document's history and its (at most one) open transaction.

    Outside a transaction every ``update_*`` call becomes its own committed
    entry. Inside one, each call is applied immediately and collected; the
    group is committed as a single entry by :meth:`commit_transaction`.
    There is no rollback: an uncommitted transaction leaves its changes applied
    but not undoable.

    ``config`` only sizes a store the session builds itself, so it cannot be
    combined with an explicit ``store``.
    """

    def __init__(
        self,
        store: Optional[HistoryStore] = None,
        *,
        config: Optional[HistoryConfig] = None,
    ) -> None:
        if store is not None and config is not None:
            raise ValueError("Pass either a store or a config, not both.")
        if store is None:
            store = HistoryStore(max_entries=config.max_entries if config else None)
        self.store = store
        self._transaction: Optional[Entry] = None

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    # ---------- Mutations ----------

    def update_value(
        self,
        target: MutableMapping[Any, Any],
        path: PathLike,
        value: Any,
        description: Optional[str] = None,
        data: Optional[ActionMetadata] = None,
        remove: bool = False,
    ) -> Action:
        """Set (or with ``remove=True`` delete) the value at ``path`` inside ``target``."""
        return self._record(ValuePath(target, path), value, description, data, remove)

    def update_map(
        self,
        target_map: MutableMapping[Any, Any],
        key: Hashable,
        value: Any,
        description: Optional[str] = None,
        data: Optional[ActionMetadata] = None,
        remove: bool = False,
    ) -> Action:
        return self._record(MapKey(target_map, key), value, description, data, remove)

    def _record(
        self,
        location: ValuePath | MapKey,
        value: Any,
        description: Optional[str],
        data: Optional[ActionMetadata],
        remove: bool,
    ) -> Action:
        old = location.read()
        new = ValueSlot(value=value, exists=not remove)
        # List slots that appear or vanish must shift their neighbours, not overwrite them.
        insert = not (old.exists and new.exists)
        action = Action(old, new, data, lambda slot: location.write(slot, insert=insert))

        if self._transaction is not None:
            self._transaction.push(action)
            action.apply()
        else:
            entry = Entry(description)
            entry.push(action)
            entry.apply()
            self.store.commit(entry)
        return action

    # ---------- Transactions ----------

    def start_transaction(self, description: Optional[str] = None) -> bool:
        """Open a transaction; returns False if one is already open."""
        if self._transaction is not None:
            return False
        self._transaction = Entry(description)
        logger.debug("Transaction opened: %s", description)
        return True

    def commit_transaction(self) -> None:
        if self._transaction is None:
            return
        entry, self._transaction = self._transaction, None
        if len(entry) == 0:
            logger.debug("Transaction %r closed without actions", entry.description)
            return
        entry.log()
        self.store.commit(entry)

    @contextmanager
    def transaction(self, description: Optional[str] = None) -> Iterator["HistorySession"]:
        """Group the mutations made in the block into one entry.

        Inside an already open transaction the block joins it and leaves the
        commit to the outer owner. The transaction is committed even when the
        block raises, since its changes are already applied.
        """
        opened = self.start_transaction(description)
        try:
            yield self
        finally:
            if opened:
                self.commit_transaction()

    # ---------- History ----------

    def can_undo(self) -> bool:
        return self.store.can_undo()

    def can_redo(self) -> bool:
        return self.store.can_redo()

    def get_undo_preview(self) -> Optional[ActionMetadata]:
        return self.store.get_undo_preview()

    def get_redo_preview(self) -> Optional[ActionMetadata]:
        return self.store.get_redo_preview()

    def undo(self) -> None:
        self.store.undo()

    def redo(self) -> None:
        self.store.redo()


__all__ = ["HistorySession"]
