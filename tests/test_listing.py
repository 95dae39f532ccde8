import re
from datetime import datetime, timedelta, timezone

import pytest

from kclick.listing import (
    CellSpec,
    KObj,
    ObjType,
    build_specs,
    extract_age,
    extract_labels,
    extract_name,
    extract_namespace,
    handle_list_result,
    render_table,
    resolve_columns,
    row_matches,
)
from kclick.util import ClickError, format_duration, keyval_string

NOW = datetime(2024, 1, 2, tzinfo=timezone.utc)


def _item(name, ns=None, labels=None, size=0):
    meta = {"name": name}
    if ns is not None:
        meta["namespace"] = ns
    if labels is not None:
        meta["labels"] = labels
    return {"metadata": meta, "size": size}


def _kobj(item):
    meta = item["metadata"]
    return KObj(meta["name"], meta.get("namespace"), ObjType.CONFIG_MAP)


EXTRACTORS = {"Size": lambda item: item["size"]}


def test_kobj_kinds():
    assert KObj("web", "default", ObjType.POD, ("app",)).is_pod() is True
    node = KObj("n1", None, ObjType.NODE)
    assert node.is_pod() is False
    assert node.type_str() == ObjType.NODE.value


def test_cell_text():
    assert CellSpec(7).text() == "7"
    assert CellSpec("abc").text() == "abc"
    assert CellSpec(None).text() == "<none>"
    delta = timedelta(hours=5, minutes=3)
    assert CellSpec(NOW - delta, now=NOW).text() == format_duration(delta)
    assert CellSpec(delta).text() == format_duration(delta)


def test_cell_matches():
    assert CellSpec("nginx-123").matches(re.compile("nginx"))
    assert not CellSpec("nginx-123").matches(re.compile("redis"))
    assert not CellSpec(index=True).matches(re.compile(".*"))


def test_extractors():
    item = _item("cm", "kube", {"b": "2", "a": "1"})
    item["metadata"]["creationTimestamp"] = "2024-01-01T00:00:00Z"
    assert extract_name(item) == "cm"
    assert extract_namespace(item) == "kube"
    assert extract_labels(item) == keyval_string({"a": "1", "b": "2"})
    assert extract_age(item) == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert extract_age({"metadata": {}}) is None
    assert extract_labels({}) == ""


def test_row_matches():
    row = [CellSpec(index=True), CellSpec("alpha"), CellSpec(3)]
    assert row_matches(row, re.compile("alp"))
    assert not row_matches(row, re.compile("zzz"))


def test_build_specs_with_regex_and_index():
    items = [_item("one", size=1), _item("two", size=2)]
    specs = build_specs(["Name", "Size"], items, EXTRACTORS, True, "tw", _kobj)
    assert [k.name for k, _ in specs] == ["two"]
    row = specs[0][1]
    assert row[0].index is True
    assert [c.value for c in row[1:]] == ["two", 2]


def test_build_specs_missing_extractor():
    with pytest.raises(ClickError):
        build_specs(["Bogus"], [_item("x")], EXTRACTORS, False, None, _kobj)


def test_build_specs_bad_regex():
    with pytest.raises(ClickError):
        build_specs(["Name"], [_item("x")], None, False, "(", _kobj)


COL_MAP = [("name", "Name"), ("size", "Size")]
EXTRA = [("namespace", "Namespace"), ("labels", "Labels"), ("ip", "IP")]


def test_resolve_show_all_excludes_labels():
    cols, sort = resolve_columns(COL_MAP, EXTRA, "all", None, False, True)
    assert cols == ["Name", "Size", "Namespace", "IP"]
    assert sort is None


def test_resolve_labels_flag_and_namespace():
    cols, _ = resolve_columns(COL_MAP, EXTRA, None, None, True, False)
    assert cols == ["Name", "Size", "Namespace", "Labels"]


def test_resolve_sort_on_extra_adds_column():
    cols, sort = resolve_columns(COL_MAP, EXTRA, None, "IP", False, True)
    assert sort == "IP"
    assert "IP" in cols


def test_resolve_errors():
    with pytest.raises(ClickError):
        resolve_columns(COL_MAP, EXTRA, None, "nope", False, True)
    with pytest.raises(ClickError):
        resolve_columns(COL_MAP, EXTRA, "nope", None, False, True)


def test_handle_list_result_sort_and_reverse():
    items = [_item("b", size=2), _item("c", size=3), _item("a", size=1)]
    kobjs, text = handle_list_result(["Name", "Size"], items, EXTRACTORS, None, "Name", False, _kobj)
    assert [k.name for k in kobjs] == ["a", "b", "c"]
    assert text.splitlines()[0].split() == ["####", "Name", "Size"]
    kobjs, _ = handle_list_result(["Name", "Size"], items, EXTRACTORS, None, "Size", True, _kobj)
    assert [k.name for k in kobjs] == ["c", "b", "a"]


def test_handle_list_result_missing_sort_column():
    kobjs, text = handle_list_result(["Name"], [_item("a")], None, None, "Age", False, _kobj)
    assert text.splitlines()[0] == "Asked to sort by Age, but it's not a column in the output"
    assert [k.name for k in kobjs] == ["a"]


def test_render_table_numbers_and_multiline():
    rows = [
        [CellSpec(index=True), CellSpec("x"), CellSpec("a=1\nb=2\n")],
        [CellSpec(index=True), CellSpec("y"), CellSpec("")],
    ]
    lines = render_table(["####", "Name", "Labels"], rows).splitlines()
    assert len(lines) == 4
    assert lines[1].split() == ["0", "x", "a=1"]
    assert lines[2].split() == ["b=2"]
    assert lines[3].split() == ["1", "y"]