"""Listing deployments."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .command_def import extract_first
from .listing import KObj, ObjType, handle_list_result, resolve_columns

__all__ = [
    "COL_MAP",
    "COL_FLAGS",
    "EXTRA_COL_MAP",
    "EXTRA_COL_FLAGS",
    "deployment_to_kobj",
    "deployment_containers",
    "deployment_images",
    "deployment_desired",
    "deployment_available",
    "deployment_ready",
    "deployment_uptodate",
    "list_deployments",
]

Obj = Mapping[str, Any]

COL_MAP = (
    ("name", "Name"),
    ("ready", "Ready"),
    ("desired", "Desired"),
    ("uptodate", "Up To Date"),
    ("available", "Available"),
    ("age", "Age"),
)
COL_FLAGS = extract_first(COL_MAP)

EXTRA_COL_MAP = (
    ("containers", "Containers"),
    ("images", "Images"),
    ("namespace", "Namespace"),
)
EXTRA_COL_FLAGS = extract_first(EXTRA_COL_MAP)


def deployment_to_kobj(deployment: Obj) -> KObj:
    meta = deployment.get("metadata") or {}
    return KObj(meta.get("name") or "<Unknown>", meta.get("namespace"), ObjType.DEPLOYMENT)


def _pod_spec(deployment: Obj) -> Mapping[str, Any] | None:
    spec = deployment.get("spec")
    if spec is None:
        return None
    return (spec.get("template") or {}).get("spec")


def deployment_containers(deployment: Obj) -> str | None:
    pod_spec = _pod_spec(deployment)
    if pod_spec is None:
        return None
    return ", ".join(c["name"] for c in pod_spec.get("containers") or ())


def deployment_images(deployment: Obj) -> str | None:
    pod_spec = _pod_spec(deployment)
    if pod_spec is None:
        return None
    return ", ".join(c.get("image") or "<unknown>" for c in pod_spec.get("containers") or ())


def deployment_desired(deployment: Obj) -> int | None:
    spec = deployment.get("spec")
    return None if spec is None else spec.get("replicas")


def _status_count(deployment: Obj, key: str) -> int | None:
    status = deployment.get("status")
    return None if status is None else status.get(key, 0)


def deployment_available(deployment: Obj) -> int | None:
    return _status_count(deployment, "availableReplicas")


def deployment_ready(deployment: Obj) -> int | None:
    return _status_count(deployment, "readyReplicas")


def deployment_uptodate(deployment: Obj) -> int | None:
    return _status_count(deployment, "updatedReplicas")


_EXTRACTORS = {
    "Containers": deployment_containers,
    "Images": deployment_images,
    "Ready": deployment_ready,
    "Desired": deployment_desired,
    "Up To Date": deployment_uptodate,
    "Available": deployment_available,
}


def list_deployments(
    items: Iterable[Obj],
    show: str | Iterable[str] | None = None,
    sort: str | None = None,
    reverse: bool = False,
    regex: str | re.Pattern[str] | None = None,
    labels: bool = False,
    namespace: str | None = None,
) -> tuple[list[KObj], str]:
    """List deployments; return the listed objects and the rendered table."""
    cols, sort_col = resolve_columns(
        COL_MAP, EXTRA_COL_MAP, show, sort, labels, namespace is not None
    )
    return handle_list_result(
        cols, items, _EXTRACTORS, regex, sort_col, reverse, deployment_to_kobj
    )