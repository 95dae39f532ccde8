import pytest

from kclick.command_def import (
    Completion,
    add_extra_cols,
    complete_option,
    extract_first,
    try_complete,
    try_complete_all,
)

COL_MAP = (("name", "Name"), ("ready", "Ready"), ("age", "Age"))
EXTRA_COL_MAP = (
    ("ip", "IP"),
    ("labels", "Labels"),
    ("namespace", "Namespace"),
    ("node", "Node"),
)


def test_try_complete_all_uses_both_lists():
    result = try_complete_all("na", ["name", "age"], ["namespace", "node"])
    assert [c.display for c in result] == ["name", "namespace"]
    assert all(c.display == "na" + c.replacement for c in result)


def test_try_complete_all_empty_prefix_matches_everything():
    result = try_complete_all("", ["name", "age"], ["ip"])
    assert [c.display for c in result] == ["name", "age", "ip"]
    assert all(c.display == c.replacement for c in result)


def test_try_complete_ignores_normal_cols():
    result = try_complete("n", ["namespace", "node", "ip"])
    assert [c.display for c in result] == ["namespace", "node"]
    assert try_complete("zzz", ["namespace"]) == []


def test_completion_is_value_object():
    assert Completion("name", "me") == Completion(display="name", replacement="me")


def test_complete_option():
    result = complete_option("ver", ["verbose", "version", "all", None])
    assert [c.display for c in result] == ["--verbose", "--version"]
    for c, name in zip(result, ["verbose", "version"]):
        assert c.replacement.endswith(" ")
        assert "ver" + c.replacement.rstrip() == name


def test_extract_first():
    assert extract_first(COL_MAP) == ("name", "ready", "age")
    assert extract_first([]) == ()


def test_add_extra_cols_all_excludes_labels():
    out = add_extra_cols(["Name"], False, ["all"], EXTRA_COL_MAP)
    assert out == ["Name", "IP", "Namespace", "Node"]


def test_add_extra_cols_all_and_labels_case_insensitive():
    out = add_extra_cols(["Name"], False, ["ALL", "Labels"], EXTRA_COL_MAP)
    assert out == ["Name", "IP", "Labels", "Namespace", "Node"]


def test_add_extra_cols_labels_flag():
    assert add_extra_cols(["Name"], True, [], EXTRA_COL_MAP) == ["Name", "Labels"]


def test_add_extra_cols_order_follows_map():
    out = add_extra_cols(["Name"], False, ["node", "IP"], EXTRA_COL_MAP)
    assert out == ["Name", "IP", "Node"]


def test_add_extra_cols_does_not_mutate_input():
    cols = ["Name", "Age"]
    out = add_extra_cols(cols, False, ["ip"], EXTRA_COL_MAP)
    assert cols == ["Name", "Age"]
    assert out[: len(cols)] == cols
    assert len(out) == len(cols) + 1


@pytest.mark.parametrize("flags", [[], ["unknown"], ["nam"]])
def test_add_extra_cols_no_match(flags):
    assert add_extra_cols(["Name"], False, flags, EXTRA_COL_MAP) == ["Name"]