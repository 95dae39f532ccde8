"""Listing configmaps."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .command_def import extract_first
from .listing import KObj, ObjType, handle_list_result, resolve_columns
from .util import ClickError

__all__ = [
    "COL_MAP",
    "COL_FLAGS",
    "EXTRA_COL_MAP",
    "EXTRA_COL_FLAGS",
    "cm_to_kobj",
    "cm_data",
    "list_configmaps",
]

Obj = Mapping[str, Any]

COL_MAP = (("name", "Name"), ("data", "Data"), ("age", "Age"))
COL_FLAGS = extract_first(COL_MAP)

EXTRA_COL_MAP = (("labels", "Labels"),)
EXTRA_COL_FLAGS = extract_first(EXTRA_COL_MAP)


def cm_to_kobj(configmap: Obj) -> KObj:
    meta = configmap.get("metadata") or {}
    return KObj(meta.get("name") or "<Unknown>", meta.get("namespace"), ObjType.CONFIG_MAP)


def cm_data(configmap: Obj) -> int:
    """Number of data entries in the configmap."""
    return len(configmap.get("data") or {})


_EXTRACTORS = {"Data": cm_data}


def list_configmaps(
    items: Iterable[Obj],
    show: str | Iterable[str] | None = None,
    sort: str | None = None,
    reverse: bool = False,
    regex: str | re.Pattern[str] | None = None,
    labels: bool = False,
    namespace: str | None = None,
) -> tuple[list[KObj], str]:
    """List configmaps; return the listed objects and the rendered table."""
    if sort is not None and sort.lower() not in COL_FLAGS:
        raise ClickError(f"Can't sort by: {sort}")
    cols, sort_col = resolve_columns(
        COL_MAP, EXTRA_COL_MAP, show, sort, labels, namespace is not None
    )
    return handle_list_result(cols, items, _EXTRACTORS, regex, sort_col, reverse, cm_to_kobj)