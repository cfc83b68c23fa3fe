from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class HistoryValue(Enum):
    """Which slot of an action gets written during apply."""

    NEW = "new"
    OLD = "old"


class ActionType(str, Enum):
    INIT = "init"
    ADD = "add"
    DEL = "del"
    MOV = "mov"
    UPD = "upd"


@dataclass(frozen=True)
class ValueSlot:
    """A value plus whether it is present at all.

    ``exists=False`` means the key is absent (apply deletes it), which is not the
    same thing as a present key holding ``None``.
    """

    value: Any
    exists: bool = True

    @classmethod
    def missing(cls) -> "ValueSlot":
        return cls(value=None, exists=False)


@dataclass(frozen=True)
class ActionMetadata:
    type: ActionType
    entity_id: int
    related_entity_id: Optional[int] = None

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": ActionType(self.type).value,
            "entity_id": self.entity_id,
        }
        if self.related_entity_id is not None:
            payload["related_entity_id"] = self.related_entity_id
        return payload


__all__ = ["HistoryValue", "ActionType", "ValueSlot", "ActionMetadata"]
