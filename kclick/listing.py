"""Building, filtering, sorting and rendering listings of cluster objects."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from itertools import zip_longest
from typing import Any

from .command_def import add_extra_cols
from .util import ClickError, format_duration, keyval_string, mapped_val, parse_timestamp, time_since

__all__ = [
    "ObjType",
    "KObj",
    "CellSpec",
    "extract_name",
    "extract_age",
    "extract_namespace",
    "extract_labels",
    "row_matches",
    "build_specs",
    "resolve_columns",
    "handle_list_result",
    "render_table",
]

Item = Mapping[str, Any]
Extractor = Callable[[Item], Any]


class ObjType(Enum):
    """The kinds of object a listing can produce."""

    CONFIG_MAP = "ConfigMap"
    DEPLOYMENT = "Deployment"
    JOB = "Job"
    NAMESPACE = "Namespace"
    NODE = "Node"
    PERSISTENT_VOLUME = "PersistentVolume"
    POD = "Pod"
    CRD = "Crd"
    REPLICA_SET = "ReplicaSet"
    STATEFUL_SET = "StatefulSet"
    SECRET = "Secret"
    SERVICE = "Service"
    STORAGE_CLASS = "StorageClass"


@dataclass(frozen=True)
class KObj:
    """A reference to one object in the cluster."""

    name: str
    namespace: str | None
    typ: ObjType
    containers: tuple[str, ...] = field(default=())

    def type_str(self) -> str:
        return self.typ.value

    def is_pod(self) -> bool:
        return self.typ is ObjType.POD


@dataclass(frozen=True)
class CellSpec:
    """One table cell: a value, an optional style, or a row-number placeholder."""

    value: Any = None
    style: str | None = None
    index: bool = False
    now: datetime | None = None

    def text(self) -> str:
        value = self.value
        if value is None:
            return "<none>"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, datetime):
            return format_duration(time_since(value, self.now))
        if isinstance(value, timedelta):
            return format_duration(value)
        return str(value)

    def matches(self, regex: re.Pattern[str]) -> bool:
        if self.index:
            return False
        return regex.search(self.text()) is not None

    def _sort_key(self) -> tuple[int, Any]:
        value = self.value
        if value is None:
            return (0, 0)
        if isinstance(value, (bool, int, float)):
            return (1, value)
        if isinstance(value, str):
            return (2, value)
        if isinstance(value, datetime):
            return (3, value)
        if isinstance(value, timedelta):
            return (4, value)
        return (5, str(value))


def _meta(obj: Item) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


def extract_name(obj: Item) -> str | None:
    """The object's name from its metadata."""
    return _meta(obj).get("name")


def extract_age(obj: Item) -> datetime | None:
    """The object's creation time from its metadata."""
    return parse_timestamp(_meta(obj).get("creationTimestamp"))


def extract_namespace(obj: Item) -> str | None:
    """The object's namespace from its metadata."""
    return _meta(obj).get("namespace")


def extract_labels(obj: Item) -> str:
    """The object's labels as key=value lines."""
    return keyval_string(_meta(obj).get("labels"))


_BUILTIN: dict[str, Extractor] = {
    "Age": extract_age,
    "Labels": extract_labels,
    "Name": extract_name,
    "Namespace": extract_namespace,
}


def _as_cell(value: Any) -> CellSpec:
    return value if isinstance(value, CellSpec) else CellSpec(value)


def _compile(regex: str | re.Pattern[str] | None) -> re.Pattern[str] | None:
    if regex is None or isinstance(regex, re.Pattern):
        return regex
    try:
        return re.compile(regex)
    except re.error as err:
        raise ClickError(f"Invalid regex: {err}") from err


def row_matches(row: Iterable[CellSpec], regex: re.Pattern[str]) -> bool:
    """True if any cell of the row matches the regex."""
    return any(cell.matches(regex) for cell in row)


def build_specs(
    cols: Sequence[str],
    items: Iterable[Item],
    extractors: Mapping[str, Extractor] | None,
    include_index: bool,
    regex: str | re.Pattern[str] | None,
    get_kobj: Callable[[Item], KObj],
) -> list[tuple[KObj, list[CellSpec]]]:
    """Build (object, row) pairs for the items, keeping rows the regex matches."""
    pattern = _compile(regex)
    extractors = extractors or {}
    specs = []
    for item in items:
        row = [CellSpec(index=True)] if include_index else []
        for col in cols:
            extractor = _BUILTIN.get(col) or extractors.get(col)
            if extractor is None:
                raise ClickError(f"Can't extract column {col}")
            row.append(_as_cell(extractor(item)))
        if pattern is None or row_matches(row, pattern):
            specs.append((get_kobj(item), row))
    return specs


def _show_flags(show: str | Iterable[str] | None, extra_col_map) -> list[str]:
    if show is None:
        return []
    values = [show] if isinstance(show, str) else list(show)
    flags = [flag for value in values for flag in value.split(",")]
    allowed = {"all"} | {flag for flag, _ in (extra_col_map or ())}
    for flag in flags:
        if flag.lower() not in allowed:
            raise ClickError(f"Invalid column to show: {flag}")
    return flags


def resolve_columns(
    col_map: Sequence[tuple[str, str]],
    extra_col_map: Sequence[tuple[str, str]] | None,
    show: str | Iterable[str] | None,
    sort: str | None,
    labels: bool,
    in_namespace: bool,
) -> tuple[list[str], str | None]:
    """Work out the columns to show and the column to sort by."""
    cols = [col for _, col in col_map]
    flags = _show_flags(show, extra_col_map)
    sort_col = None
    if sort is not None:
        name = sort.lower()
        sort_col = mapped_val(name, col_map)
        if sort_col is None:
            found = [(flag, col) for flag, col in (extra_col_map or ()) if flag == name]
            if not found:
                raise ClickError(f"Can't sort by: {sort}")
            flag, sort_col = found[-1]
            flags.append(flag)
    if extra_col_map is not None:
        if not in_namespace and mapped_val("namespace", extra_col_map) is not None:
            flags.append("namespace")
        cols = add_extra_cols(cols, labels, flags, extra_col_map)
    return cols, sort_col


def handle_list_result(
    cols: Sequence[str],
    items: Iterable[Item],
    extractors: Mapping[str, Extractor] | None,
    regex: str | re.Pattern[str] | None,
    sort: str | None,
    reverse: bool,
    get_kobj: Callable[[Item], KObj],
) -> tuple[list[KObj], str]:
    """Build a numbered listing; return the listed objects and the rendered table."""
    specs = build_specs(cols, items, extractors, True, regex, get_kobj)
    notes = []
    if sort is not None:
        if sort in cols:
            idx = list(cols).index(sort) + 1
            specs.sort(key=lambda spec: spec[1][idx]._sort_key())
        else:
            notes.append(f"Asked to sort by {sort}, but it's not a column in the output\n")
    if reverse:
        specs.reverse()
    kobjs = [kobj for kobj, _ in specs]
    rows = [row for _, row in specs]
    return kobjs, "".join(notes) + render_table(["####", *cols], rows)


def render_table(titles: Sequence[str], rows: Iterable[Sequence[CellSpec]]) -> str:
    """Render titles and rows as aligned text; index cells show the row number."""
    table = [list(titles)]
    table.extend(
        [str(number) if cell.index else cell.text() for cell in row]
        for number, row in enumerate(rows)
    )
    split = [[text.rstrip("\n").split("\n") for text in row] for row in table]
    widths = [
        max(len(line) for cell in column for line in cell)
        for column in zip_longest(*split, fillvalue=[""])
    ]
    lines = []
    for row in split:
        for parts in zip_longest(*row, fillvalue=""):
            lines.append("  ".join(p.ljust(w) for p, w in zip(parts, widths)).rstrip())
    return "\n".join(lines) + "\n"