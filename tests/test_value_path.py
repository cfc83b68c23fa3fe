from __future__ import annotations

import pytest

from edit_history.schemas import ValueSlot
from edit_history.value_path import (
    MapKey,
    PathError,
    ValuePath,
    delete_value,
    get_value,
    parse_path,
    set_value,
)


def test_parse_path_accepts_dotted_string_and_sequences():
    assert parse_path("a.b.c") == ["a", "b", "c"]
    assert parse_path(["a", 1]) == ["a", 1]
    assert parse_path(("x",)) == ["x"]


@pytest.mark.parametrize("path", ["", [], "..."])
def test_parse_path_rejects_empty(path):
    with pytest.raises(ValueError):
        parse_path(path)


def test_get_value_distinguishes_missing_from_none():
    target = {"a": None}
    assert get_value(target, ["a"]) == ValueSlot(None, True)
    assert get_value(target, ["b"]) == ValueSlot(None, False)


def test_nested_get_set_delete(document):
    assert get_value(document, "meta.tags.primary").value == "smelting"

    set_value(document, ["meta", "tags", "secondary"], "research")
    assert document["meta"]["tags"]["secondary"] == "research"

    delete_value(document, "meta.tags.primary")
    assert "primary" not in document["meta"]["tags"]


def test_delete_missing_is_noop(document):
    delete_value(document, ["meta", "nope"])
    assert set(document["meta"]) == {"author", "tags"}


def test_integer_keys_are_supported(document):
    assert get_value(document, ["entities", 2, "name"]).value == "belt"


def test_missing_intermediate_segment_raises(document):
    with pytest.raises(PathError):
        get_value(document, ["meta", "missing", "leaf"])
    with pytest.raises(PathError):
        set_value(document, ["missing", "leaf"], 1)


def test_non_mapping_intermediate_raises(document):
    with pytest.raises(PathError):
        get_value(document, ["name", "first"])


def test_value_path_write_sets_and_deletes():
    target = {"a": {"b": 1}}
    loc = ValuePath(target, "a.b")
    loc.write(ValueSlot(2))
    assert target == {"a": {"b": 2}}
    loc.write(ValueSlot.missing())
    assert target == {"a": {}}
    loc.write(ValueSlot.missing())
    assert target == {"a": {}}


def test_map_key_read_and_write():
    mapping = {1: "x"}
    loc = MapKey(mapping, 1)
    assert loc.read() == ValueSlot("x", True)
    loc.write(ValueSlot.missing())
    assert mapping == {}
    assert loc.read().exists is False
    loc.write(ValueSlot(None))
    assert mapping == {1: None}


def test_list_elements_by_index():
    target = {"entities": [{"name": "inserter"}, {"name": "belt"}]}
    assert get_value(target, "entities.1.name").value == "belt"
    assert get_value(target, ["entities", 0]).value == {"name": "inserter"}
    assert get_value(target, ["entities", 2]).exists is False

    set_value(target, "entities.0.name", "splitter")
    assert target["entities"][0] == {"name": "splitter"}


def test_list_set_replaces_appends_and_inserts():
    items = {"items": ["a", "b"]}
    set_value(items, ["items", 1], "z")
    assert items["items"] == ["a", "z"]
    set_value(items, ["items", 2], "c")
    assert items["items"] == ["a", "z", "c"]
    set_value(items, ["items", 0], "first", insert=True)
    assert items["items"] == ["first", "a", "z", "c"]
    with pytest.raises(PathError):
        set_value(items, ["items", 9], "far")


def test_list_delete_shifts_and_ignores_out_of_range():
    items = {"items": ["a", "b", "c"]}
    delete_value(items, ["items", 1])
    assert items["items"] == ["a", "c"]
    delete_value(items, ["items", 5])
    assert items["items"] == ["a", "c"]


@pytest.mark.parametrize("path", [["items", -1], ["items", "first"], ["items", True], ["items", -1, "x"]])
def test_bad_list_index_raises(path):
    with pytest.raises(PathError):
        get_value({"items": [{"x": 1}]}, path)


def test_missing_list_element_as_intermediate_raises():
    with pytest.raises(PathError):
        get_value({"items": []}, "items.0.name")


def test_path_error_message_is_not_quoted():
    assert str(PathError("Missing intermediate segment ['missing']")) == "Missing intermediate segment ['missing']"
    with pytest.raises(PathError) as info:
        set_value({}, "missing.leaf", 1)
    assert str(info.value) == "Missing intermediate segment ['missing']"
