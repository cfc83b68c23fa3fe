from __future__ import annotations

from typing import Any, Hashable, List, MutableMapping, MutableSequence, Sequence, Union

from .schemas import ValueSlot

PathLike = Union[str, Sequence[Hashable]]
Container = Union[MutableMapping[Any, Any], MutableSequence[Any]]


class PathError(KeyError):
    """Raised when a path segment does not lead to a mapping or list."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


def parse_path(path: PathLike) -> List[Hashable]:
    """Normalise ``"a.b.c"`` or ``["a", "b", "c"]`` into a segment list."""
    if isinstance(path, str):
        keys: List[Hashable] = [segment for segment in path.split(".") if segment]
    else:
        keys = list(path)
    if not keys:
        raise ValueError("Path must contain at least one segment.")
    return keys


def get_value(target: Container, path: PathLike) -> ValueSlot:
    """Read the slot at ``path``; a list index past the end reads as missing."""
    parent, final_key = _walk(target, parse_path(path))
    if isinstance(parent, MutableSequence):
        if final_key < len(parent):
            return ValueSlot(value=parent[final_key], exists=True)
        return ValueSlot.missing()
    if final_key in parent:
        return ValueSlot(value=parent[final_key], exists=True)
    return ValueSlot.missing()


def set_value(target: Container, path: PathLike, value: Any, *, insert: bool = False) -> None:
    """Assign ``value`` at ``path``.

    On a list parent the index is replaced, or with ``insert=True`` the value is
    inserted before it. Index ``len(list)`` always appends.
    """
    parent, final_key = _walk(target, parse_path(path))
    if isinstance(parent, MutableSequence):
        if final_key > len(parent):
            raise PathError(f"Index {final_key} is past the end of a list of {len(parent)}")
        if insert or final_key == len(parent):
            parent.insert(final_key, value)
        else:
            parent[final_key] = value
        return
    parent[final_key] = value


def delete_value(target: Container, path: PathLike) -> None:
    """Remove the value at ``path``; absent keys are left alone.

    Deleting a list element shifts the following elements down.
    """
    parent, final_key = _walk(target, parse_path(path))
    if isinstance(parent, MutableSequence):
        if final_key < len(parent):
            del parent[final_key]
        return
    if final_key in parent:
        del parent[final_key]


def _list_index(key: Hashable, keys: List[Hashable]) -> int:
    if isinstance(key, int) and not isinstance(key, bool):
        index = key
    elif isinstance(key, str) and key.isdecimal():
        index = int(key)
    else:
        raise PathError(f"List index expected at {keys!r}, got {key!r}")
    if index < 0:
        raise PathError(f"Negative list index at {keys!r}")
    return index


def _walk(state: Container, keys: List[Hashable]) -> tuple[Container, Any]:
    cursor: Any = state
    for depth, key in enumerate(keys[:-1]):
        if isinstance(cursor, MutableSequence):
            index = _list_index(key, keys[: depth + 1])
            if index >= len(cursor):
                raise PathError(f"Missing intermediate segment {keys[: depth + 1]!r}")
            cursor = cursor[index]
            continue
        if not isinstance(cursor, MutableMapping):
            raise PathError(f"Segment {keys[:depth]!r} does not resolve to a mapping or list")
        if key not in cursor:
            raise PathError(f"Missing intermediate segment {keys[: depth + 1]!r}")
        cursor = cursor[key]
    if isinstance(cursor, MutableSequence):
        return cursor, _list_index(keys[-1], keys)
    if not isinstance(cursor, MutableMapping):
        raise PathError(f"Segment {keys[:-1]!r} does not resolve to a mapping or list")
    return cursor, keys[-1]


class ValuePath:
    """A location inside a nested record, bound to its root at call time."""

    def __init__(self, target: Container, path: PathLike) -> None:
        self.target = target
        self.path = parse_path(path)

    def read(self) -> ValueSlot:
        return get_value(self.target, self.path)

    def write(self, slot: ValueSlot, insert: bool = False) -> None:
        if slot.exists:
            set_value(self.target, self.path, slot.value, insert=insert)
        else:
            delete_value(self.target, self.path)

    def __repr__(self) -> str:
        return f"ValuePath({'.'.join(str(k) for k in self.path)})"


class MapKey:
    """A single key of a flat mapping; key presence stands in for path existence."""

    def __init__(self, mapping: MutableMapping[Any, Any], key: Hashable) -> None:
        self.mapping = mapping
        self.key = key

    def read(self) -> ValueSlot:
        if self.key in self.mapping:
            return ValueSlot(value=self.mapping[self.key], exists=True)
        return ValueSlot.missing()

    def write(self, slot: ValueSlot, insert: bool = False) -> None:
        if slot.exists:
            self.mapping[self.key] = slot.value
        elif self.key in self.mapping:
            del self.mapping[self.key]

    def __repr__(self) -> str:
        return f"MapKey({self.key!r})"


__all__ = [
    "PathError",
    "PathLike",
    "parse_path",
    "get_value",
    "set_value",
    "delete_value",
    "ValuePath",
    "MapKey",
]
