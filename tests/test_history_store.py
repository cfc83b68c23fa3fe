from __future__ import annotations

import pytest

from edit_history import (
    Action,
    ActionMetadata,
    ActionType,
    Entry,
    HistoryError,
    HistoryStore,
    MapKey,
    ValueSlot,
)


def _entry(mapping, key, value, entity_id) -> Entry:
    loc = MapKey(mapping, key)
    entry = Entry(f"set {key}")
    entry.push(Action(loc.read(), ValueSlot(value), ActionMetadata(ActionType.UPD, entity_id), loc.write))
    entry.apply()
    return entry


def test_empty_store_has_nothing_to_do():
    store = HistoryStore()
    assert not store.can_undo()
    assert not store.can_redo()
    assert store.cursor == 0


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.undo(),
        lambda s: s.redo(),
        lambda s: s.get_undo_preview(),
        lambda s: s.get_redo_preview(),
    ],
)
def test_preconditions_fail_loudly(call):
    with pytest.raises(HistoryError):
        call(HistoryStore())


def test_commit_undo_redo_moves_cursor():
    m = {}
    store = HistoryStore()
    store.commit(_entry(m, "a", 1, entity_id=1))
    store.commit(_entry(m, "b", 2, entity_id=2))
    assert store.cursor == 2

    store.undo()
    assert m == {"a": 1}
    assert store.cursor == 1
    assert store.can_redo()
    assert store.get_redo_preview().entity_id == 2
    assert store.get_undo_preview().entity_id == 1

    store.redo()
    assert m == {"a": 1, "b": 2}
    assert not store.can_redo()


def test_commit_after_undo_discards_redo_branch():
    m = {}
    store = HistoryStore()
    store.commit(_entry(m, "a", 1, entity_id=1))
    store.commit(_entry(m, "b", 2, entity_id=2))
    store.undo()
    store.undo()
    assert store.can_redo()

    store.commit(_entry(m, "c", 3, entity_id=3))
    assert not store.can_redo()
    assert len(store.entries) == 1
    assert store.cursor == 1


def test_commit_rejects_empty_entry():
    with pytest.raises(HistoryError):
        HistoryStore().commit(Entry("nothing"))


def test_max_entries_drops_oldest_and_shifts_cursor():
    m = {}
    store = HistoryStore(max_entries=2)
    for i in range(4):
        store.commit(_entry(m, f"k{i}", i, entity_id=i))
    assert len(store.entries) == 2
    assert store.cursor == 2
    assert store.get_undo_preview().entity_id == 3

    store.undo()
    store.undo()
    assert not store.can_undo()
    assert m == {"k0": 0, "k1": 1}


def test_max_entries_must_be_positive():
    with pytest.raises(ValueError):
        HistoryStore(max_entries=0)


def test_summary_marks_done_entries():
    m = {}
    store = HistoryStore()
    store.commit(_entry(m, "a", 1, entity_id=5))
    store.commit(_entry(m, "b", 2, entity_id=6))
    store.undo()

    rows = store.summary()
    assert [r["done"] for r in rows] == [True, False]
    assert rows[0]["description"] == "set a"
    assert rows[1]["data"] == {"type": "upd", "entity_id": 6}
    assert rows[1]["entity_ids"] == [6]


def test_clear_resets_history():
    m = {}
    store = HistoryStore()
    store.commit(_entry(m, "a", 1, entity_id=1))
    store.clear()
    assert store.entries == ()
    assert store.cursor == 0
