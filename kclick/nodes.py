"""Listing nodes."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .command_def import extract_first
from .listing import CellSpec, KObj, ObjType, handle_list_result, resolve_columns

__all__ = [
    "COL_MAP",
    "COL_FLAGS",
    "EXTRA_COL_MAP",
    "EXTRA_COL_FLAGS",
    "node_to_kobj",
    "node_container_runtime",
    "node_external_ip",
    "node_internal_ip",
    "node_kernel_version",
    "node_os_image",
    "node_roles",
    "node_state",
    "node_version",
    "list_nodes",
]

Obj = Mapping[str, Any]

COL_MAP = (
    ("name", "Name"),
    ("state", "State"),
    ("roles", "Roles"),
    ("age", "Age"),
    ("version", "Version"),
)
COL_FLAGS = extract_first(COL_MAP)

EXTRA_COL_MAP = (
    ("internalip", "Internal Ip"),
    ("externalip", "External Ip"),
    ("osimage", "Os Image"),
    ("kernelversion", "Kernel Version"),
    ("containerruntime", "Container Runtime"),
    ("labels", "Labels"),
)
EXTRA_COL_FLAGS = extract_first(EXTRA_COL_MAP)

_ROLE_LABEL = "kubernetes.io/role"
_ROLE_PREFIX = "node-role.kubernetes.io/"


def node_to_kobj(node: Obj) -> KObj:
    name = (node.get("metadata") or {}).get("name") or "<Unknown>"
    return KObj(name, None, ObjType.NODE)


def _node_info(node: Obj, key: str) -> str | None:
    status = node.get("status")
    if status is None:
        return None
    info = status.get("nodeInfo")
    return None if info is None else info.get(key, "")


def node_container_runtime(node: Obj) -> str | None:
    return _node_info(node, "containerRuntimeVersion")


def _node_addr(node: Obj, addr_type: str) -> str | None:
    status = node.get("status")
    if status is None:
        return None
    return next(
        (a.get("address") for a in status.get("addresses") or () if a.get("type") == addr_type),
        None,
    )


def node_external_ip(node: Obj) -> str | None:
    return _node_addr(node, "ExternalIP")


def node_internal_ip(node: Obj) -> str | None:
    return _node_addr(node, "InternalIP")


def node_kernel_version(node: Obj) -> str | None:
    return _node_info(node, "kernelVersion")


def node_os_image(node: Obj) -> str | None:
    return _node_info(node, "osImage")


def node_roles(node: Obj) -> str:
    """Roles from 'node-role.kubernetes.io/<role>' or 'kubernetes.io/role' labels."""
    labels = (node.get("metadata") or {}).get("labels") or {}
    roles = []
    for key in sorted(labels):
        if key == _ROLE_LABEL:
            roles.append(labels[key])
        elif key.startswith(_ROLE_PREFIX):
            roles.append(key[len(_ROLE_PREFIX):])
    return ", ".join(roles) if roles else "<none>"


def node_state(node: Obj) -> CellSpec:
    """Readiness of the node, styled, noting when scheduling is disabled."""
    status = node.get("status") or {}
    ready = next(
        (c for c in status.get("conditions") or () if c.get("type") == "Ready"), None
    )
    if ready is None:
        state, style = "Unknown", "Fy"
    elif ready.get("status") == "True":
        state, style = "Ready", "Fg"
    else:
        state, style = "Not Ready", "Fr"
    if (node.get("spec") or {}).get("unschedulable"):
        state = f"{state}\nSchedulingDisabled"
    return CellSpec(state, style=style)


def node_version(node: Obj) -> str | None:
    return _node_info(node, "kubeletVersion")


_EXTRACTORS = {
    "Container Runtime": node_container_runtime,
    "External Ip": node_external_ip,
    "Internal Ip": node_internal_ip,
    "Kernel Version": node_kernel_version,
    "Roles": node_roles,
    "Os Image": node_os_image,
    "State": node_state,
    "Version": node_version,
}


def list_nodes(
    items: Iterable[Obj],
    show: str | Iterable[str] | None = None,
    sort: str | None = None,
    reverse: bool = False,
    regex: str | re.Pattern[str] | None = None,
    labels: bool = False,
) -> tuple[list[KObj], str]:
    """List nodes; return the listed objects and the rendered table."""
    cols, sort_col = resolve_columns(COL_MAP, EXTRA_COL_MAP, show, sort, labels, True)
    return handle_list_result(cols, items, _EXTRACTORS, regex, sort_col, reverse, node_to_kobj)