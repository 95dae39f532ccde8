"""Listing replicasets."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .command_def import extract_first
from .listing import KObj, ObjType, handle_list_result, resolve_columns
from .util import keyval_string

__all__ = [
    "COL_MAP",
    "COL_FLAGS",
    "EXTRA_COL_MAP",
    "EXTRA_COL_FLAGS",
    "rs_to_kobj",
    "rs_containers",
    "rs_images",
    "rs_current",
    "rs_desired",
    "rs_ready",
    "rs_selector",
    "list_replicasets",
]

Obj = Mapping[str, Any]

COL_MAP = (
    ("name", "Name"),
    ("desired", "Desired"),
    ("current", "Current"),
    ("ready", "Ready"),
    ("age", "Age"),
)
COL_FLAGS = extract_first(COL_MAP)

EXTRA_COL_MAP = (
    ("namespace", "Namespace"),
    ("containers", "Containers"),
    ("images", "Images"),
    ("selector", "Selector"),
    ("labels", "Labels"),
)
EXTRA_COL_FLAGS = extract_first(EXTRA_COL_MAP)


def rs_to_kobj(replicaset: Obj) -> KObj:
    meta = replicaset.get("metadata") or {}
    return KObj(meta.get("name") or "<Unknown>", meta.get("namespace"), ObjType.REPLICA_SET)


def _pod_spec(replicaset: Obj) -> Mapping[str, Any] | None:
    spec = replicaset.get("spec")
    if spec is None:
        return None
    template = spec.get("template")
    return None if template is None else template.get("spec")


def rs_containers(replicaset: Obj) -> str | None:
    pod_spec = _pod_spec(replicaset)
    if pod_spec is None:
        return None
    return ", ".join(c["name"] for c in pod_spec.get("containers") or ())


def rs_images(replicaset: Obj) -> str | None:
    pod_spec = _pod_spec(replicaset)
    if pod_spec is None:
        return None
    return ", ".join(c.get("image") or "<unknown>" for c in pod_spec.get("containers") or ())


def rs_current(replicaset: Obj) -> int | None:
    status = replicaset.get("status")
    return None if status is None else status.get("replicas", 0)


def rs_desired(replicaset: Obj) -> int | str | None:
    spec = replicaset.get("spec")
    if spec is None:
        return None
    desired = spec.get("replicas")
    return "Unspecified" if desired is None else desired


def rs_ready(replicaset: Obj) -> int | None:
    status = replicaset.get("status")
    return None if status is None else status.get("readyReplicas", 0)


def rs_selector(replicaset: Obj) -> str | None:
    spec = replicaset.get("spec")
    if spec is None:
        return None
    return keyval_string((spec.get("selector") or {}).get("matchLabels"))


_EXTRACTORS = {
    "Current": rs_current,
    "Containers": rs_containers,
    "Desired": rs_desired,
    "Images": rs_images,
    "Ready": rs_ready,
    "Selector": rs_selector,
}


def list_replicasets(
    items: Iterable[Obj],
    show: str | Iterable[str] | None = None,
    sort: str | None = None,
    reverse: bool = False,
    regex: str | re.Pattern[str] | None = None,
    labels: bool = False,
    namespace: str | None = None,
) -> tuple[list[KObj], str]:
    """List replicasets; return the listed objects and the rendered table."""
    cols, sort_col = resolve_columns(
        COL_MAP, EXTRA_COL_MAP, show, sort, labels, namespace is not None
    )
    return handle_list_result(cols, items, _EXTRACTORS, regex, sort_col, reverse, rs_to_kobj)