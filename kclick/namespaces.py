"""Listing namespaces."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .command_def import extract_first
from .listing import KObj, ObjType, handle_list_result, resolve_columns

__all__ = ["COL_MAP", "COL_FLAGS", "namespace_to_kobj", "namespace_status", "list_namespaces"]

COL_MAP = (("name", "Name"), ("age", "Age"), ("status", "Status"))
COL_FLAGS = extract_first(COL_MAP)


def namespace_to_kobj(namespace: Mapping[str, Any]) -> KObj:
    name = (namespace.get("metadata") or {}).get("name") or "<Unknown>"
    return KObj(name, None, ObjType.NAMESPACE)


def namespace_status(namespace: Mapping[str, Any]) -> str | None:
    status = namespace.get("status")
    return None if status is None else status.get("phase")


_EXTRACTORS = {"Status": namespace_status}


def list_namespaces(
    items: Iterable[Mapping[str, Any]],
    regex: str | re.Pattern[str] | None = None,
    sort: str | None = None,
    reverse: bool = False,
) -> tuple[list[KObj], str]:
    """List namespaces; return the listed objects and the rendered table."""
    cols, sort_col = resolve_columns(COL_MAP, None, None, sort, False, True)
    return handle_list_result(cols, items, _EXTRACTORS, regex, sort_col, reverse, namespace_to_kobj)