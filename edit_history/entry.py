from __future__ import annotations

import logging
from typing import List, Optional

from .action import Action
from .schemas import ActionMetadata, HistoryValue

logger = logging.getLogger(__name__)


class Entry:
    """Group of actions that undo and redo as one step.

    Actions are replayed in push order in both directions. Undo does not reverse
    the order, so an entry whose second action captured its old value after the
    first one ran will restore the second action's old value last.
    """

    def __init__(self, description: Optional[str] = None) -> None:
        self._description = description
        self._actions: List[Action] = []

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def data(self) -> Optional[ActionMetadata]:
        """Metadata of the most recently pushed action, used for previews."""
        return self._actions[-1].data if self._actions else None

    def push(self, action: Action) -> None:
        self._actions.append(action)

    def apply(self, value: HistoryValue = HistoryValue.NEW) -> None:
        self._run(value, "")

    def undo(self) -> None:
        self._run(HistoryValue.OLD, "UNDO ")

    def redo(self) -> None:
        self._run(HistoryValue.NEW, "REDO ")

    def log(self) -> None:
        """Log the entry without applying it (transactions were applied eagerly)."""
        self._log(self.entity_ids(), "")

    def entity_ids(self) -> List[Optional[int]]:
        return [action.data.entity_id if action.data is not None else None for action in self._actions]

    def _run(self, value: HistoryValue, prefix: str) -> None:
        ids = [action.apply(value) for action in self._actions]
        self._log(ids, prefix)

    def _log(self, ids: List[Optional[int]], prefix: str) -> None:
        if self._description is None:
            return
        joined = ",".join("" if i is None else str(i) for i in ids)
        logger.info("[%s]: %s%s", joined, prefix, self._description)

    def __len__(self) -> int:
        return len(self._actions)

    def __repr__(self) -> str:
        return f"Entry({self._description!r}, actions={len(self._actions)})"


__all__ = ["Entry"]
