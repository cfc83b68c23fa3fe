from __future__ import annotations

from typing import Callable, List, Optional

from .schemas import ActionMetadata, HistoryValue, ValueSlot

EmitFn = Callable[[], None]


class Action:
    """Smallest reversible change: an old slot, a new slot and how to write them.

    ``apply(HistoryValue.NEW)`` performs (or redoes) the change and
    ``apply(HistoryValue.OLD)`` undoes it. Callbacks registered through
    :meth:`emit` run after every apply, in both directions, for the lifetime of
    the action. Errors raised by the apply function or by a callback are not
    caught; the remaining callbacks are skipped.

    Callbacks must not start new mutations on the owning session.
    """

    def __init__(
        self,
        old: ValueSlot,
        new: ValueSlot,
        data: Optional[ActionMetadata],
        apply_fn: Callable[[ValueSlot], None],
    ) -> None:
        self._old = old
        self._new = new
        self._data = data
        self._apply_fn = apply_fn
        self._emits: List[EmitFn] = []

    @property
    def old(self) -> ValueSlot:
        return self._old

    @property
    def new(self) -> ValueSlot:
        return self._new

    @property
    def data(self) -> Optional[ActionMetadata]:
        return self._data

    def apply(self, value: HistoryValue = HistoryValue.NEW) -> Optional[int]:
        """Write the chosen slot, run the callbacks, return the entity id."""
        self._apply_fn(self._new if value is HistoryValue.NEW else self._old)
        for fn in self._emits:
            fn()
        return self._data.entity_id if self._data is not None else None

    def emit(self, fn: EmitFn) -> "Action":
        self._emits.append(fn)
        return self

    add_callback = emit

    def __repr__(self) -> str:
        return f"Action(old={self._old!r}, new={self._new!r}, data={self._data!r})"


__all__ = ["Action", "EmitFn"]
