from __future__ import annotations

from breezy.core.structured import (
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_raw_str,
    get_str,
    get_str_list,
    get_table,
    is_str_dict,
)


def test_is_str_dict() -> None:
    assert is_str_dict({"a": 1})
    assert not is_str_dict({1: "a"})
    assert not is_str_dict(["a"])


def test_as_helpers() -> None:
    assert as_str_dict({"a": 1}) == {"a": 1}
    assert as_str_dict("a") is None
    assert as_obj_list([1, "x"]) == [1, "x"]
    assert as_obj_list({"a": 1}) is None


def test_get_str_strips_and_drops_empty() -> None:
    table: dict[str, object] = {"a": "  v1  ", "b": "   ", "c": 3}
    assert get_str(table, "a") == "v1"
    assert get_str(table, "b") is None
    assert get_str(table, "c") is None
    assert get_str(table, "missing") is None


def test_get_raw_str_keeps_whitespace() -> None:
    assert get_raw_str({"t": "* $TITLE\n"}, "t") == "* $TITLE\n"


def test_get_int_rejects_bool() -> None:
    assert get_int({"id": 7}, "id") == 7
    assert get_int({"id": True}, "id") is None
    assert get_int({"id": "7"}, "id") is None


def test_get_bool() -> None:
    assert get_bool({"draft": False}, "draft") is False
    assert get_bool({"draft": "false"}, "draft") is None


def test_get_table_and_list() -> None:
    table: dict[str, object] = {"user": {"login": "alice"}, "labels": [{"name": "bug"}]}
    assert get_table(table, "user") == {"login": "alice"}
    assert get_table(table, "labels") is None
    assert get_list(table, "labels") == [{"name": "bug"}]
    assert get_list(table, "user") is None


def test_get_str_list() -> None:
    assert get_str_list({"labels": "bug"}, "labels") == ["bug"]
    assert get_str_list({"labels": ["bug", "fix"]}, "labels") == ["bug", "fix"]
    assert get_str_list({"labels": ["bug", 3]}, "labels") is None
    assert get_str_list({}, "labels") is None
