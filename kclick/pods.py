"""Listing pods and describing their containers."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from .command_def import extract_first
from .listing import CellSpec, KObj, ObjType, handle_list_result, resolve_columns
from .util import ClickError, parse_timestamp

__all__ = [
    "COL_MAP",
    "COL_FLAGS",
    "EXTRA_COL_MAP",
    "EXTRA_COL_FLAGS",
    "pod_to_kobj",
    "has_waiting",
    "phase_style_str",
    "pod_ip",
    "pod_node",
    "pod_nominated_node",
    "ready_counts",
    "pod_readiness_gates",
    "restart_count",
    "last_restart",
    "pod_status",
    "pod_field_selector",
    "list_pods",
    "format_state",
    "format_containers",
]

Obj = Mapping[str, Any]

COL_MAP = (
    ("name", "Name"),
    ("ready", "Ready"),
    ("status", "Status"),
    ("restarts", "Restarts"),
    ("age", "Age"),
)
COL_FLAGS = extract_first(COL_MAP)

EXTRA_COL_MAP = (
    ("ip", "IP"),
    ("labels", "Labels"),
    ("lastrestart", "Last Restart"),
    ("namespace", "Namespace"),
    ("node", "Node"),
    ("nominatednode", "Nominated Node"),
    ("readinessgates", "Readiness Gates"),
)
EXTRA_COL_FLAGS = extract_first(EXTRA_COL_MAP)

_PHASE_STYLES = {
    "Running": "Fg",
    "Active": "Fg",
    "Terminated": "Fr",
    "Terminating": "Fr",
    "Pending": "Fy",
    "ContainerCreating": "Fy",
    "Succeeded": "Fb",
    "Failed": "Fr",
    "Unknown": "Fr",
}


def _container_statuses(status: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    return list(status.get("containerStatuses") or ())


def pod_to_kobj(pod: Obj) -> KObj:
    spec = pod.get("spec")
    containers = tuple(c["name"] for c in (spec.get("containers") or ())) if spec else ()
    meta = pod.get("metadata") or {}
    return KObj(
        meta.get("name") or "<Unknown>",
        meta.get("namespace"),
        ObjType.POD,
        containers,
    )


def has_waiting(pod: Obj) -> bool:
    """True if any container of the pod is waiting."""
    status = pod.get("status")
    if status is None:
        return False
    for cs in _container_statuses(status):
        state = cs.get("state")
        if state is None:
            continue
        if state.get("waiting") is not None or (
            state.get("running") is None and state.get("terminated") is None
        ):
            return True
    return False


def phase_style_str(phase: str) -> str:
    """Table style code for a pod phase."""
    return _PHASE_STYLES.get(phase, "Fr")


def pod_ip(pod: Obj) -> str | None:
    status = pod.get("status")
    return None if status is None else status.get("podIP")


def pod_node(pod: Obj) -> str | None:
    spec = pod.get("spec")
    return None if spec is None else spec.get("nodeName")


def pod_nominated_node(pod: Obj) -> str | None:
    status = pod.get("status")
    if status is None:
        return None
    return status.get("nominatedNodeName") or "<none>"


def ready_counts(pod: Obj) -> str | None:
    """Ready and total containers as 'ready/total'."""
    status = pod.get("status")
    if status is None:
        return None
    statuses = _container_statuses(status)
    ready = sum(1 for cs in statuses if cs.get("ready"))
    return f"{ready}/{len(statuses)}"


def pod_readiness_gates(pod: Obj) -> str | None:
    spec = pod.get("spec")
    if spec is None:
        return None
    gates = spec.get("readinessGates") or ()
    if not gates:
        return "<none>"
    return ", ".join(gate["conditionType"] for gate in gates)


def restart_count(pod: Obj) -> int | None:
    status = pod.get("status")
    if status is None:
        return None
    return sum(cs.get("restartCount", 0) for cs in _container_statuses(status))


def last_restart(pod: Obj) -> datetime | None:
    """Most recent time a container of the pod finished before restarting."""
    status = pod.get("status")
    if status is None:
        return None
    finished = [
        parse_timestamp(terminated["finishedAt"])
        for cs in _container_statuses(status)
        if (terminated := (cs.get("lastState") or {}).get("terminated")) is not None
        and terminated.get("finishedAt") is not None
    ]
    return max(finished, default=None)


def pod_status(pod: Obj) -> CellSpec:
    """The pod's display status, styled by phase."""
    if (pod.get("metadata") or {}).get("deletionTimestamp") is not None:
        status = "Terminating"
    elif has_waiting(pod):
        status = "ContainerCreating"
    else:
        status = (pod.get("status") or {}).get("phase") or "Unknown"
    return CellSpec(status, style=phase_style_str(status))


def pod_field_selector(node: str | None, selected: KObj | None) -> str | None:
    """Field selector limiting pods to a node: the given one, or a selected node."""
    if node is not None:
        return f"spec.nodeName={node}"
    if selected is not None and selected.typ is ObjType.NODE:
        return f"spec.nodeName={selected.name}"
    return None


_EXTRACTORS = {
    "IP": pod_ip,
    "Last Restart": last_restart,
    "Node": pod_node,
    "Nominated Node": pod_nominated_node,
    "Readiness Gates": pod_readiness_gates,
    "Ready": ready_counts,
    "Restarts": restart_count,
    "Status": pod_status,
}


def list_pods(
    items: Iterable[Obj],
    show: str | Iterable[str] | None = None,
    sort: str | None = None,
    reverse: bool = False,
    regex: str | re.Pattern[str] | None = None,
    labels: bool = False,
    namespace: str | None = None,
) -> tuple[list[KObj], str]:
    """List pods; return the listed objects and the rendered table."""
    cols, sort_col = resolve_columns(
        COL_MAP, EXTRA_COL_MAP, show, sort, labels, namespace is not None
    )
    return handle_list_result(cols, items, _EXTRACTORS, regex, sort_col, reverse, pod_to_kobj)


def _utc_str(value: Any) -> str:
    ts = parse_timestamp(value)
    assert ts is not None
    ts = ts.astimezone(timezone.utc)
    text = ts.strftime("%Y-%m-%d %H:%M:%S")
    if ts.microsecond:
        text += f".{ts.microsecond:06d}"
    return f"{text} UTC"


def format_state(state: Mapping[str, Any] | None) -> str:
    """Describe a container state as indented text."""
    out = ["  State:\t"]
    if state is None:
        out.append("Unknown")
        return "".join(out)
    running = state.get("running")
    terminated = state.get("terminated")
    waiting = state.get("waiting")
    if running is not None:
        out.append("Running\n")
        started = running.get("startedAt")
        if started is not None:
            out.append(f"\t\t  started at: {_utc_str(started)}\n")
        else:
            out.append("\t\t  since unknown\n")
    elif terminated is not None:
        finished = terminated.get("finishedAt")
        tsr = _utc_str(finished) if finished is not None else "<unknown>"
        out.append("Terminated\n")
        out.append(f"\t\t  at: {tsr}\n")
        out.append(f"\t\t  code: {terminated.get('exitCode', 0)}\n")
        out.append(f"\t\t  message: {terminated.get('message') or 'no message'}\n")
        out.append(f"\t\t  reason: {terminated.get('reason') or 'no reason'}\n")
    elif waiting is not None:
        out.append("Waiting\n")
        out.append(f"\t\t  message: {waiting.get('message') or 'no message'}\n")
        out.append(f"\t\t  reason: {waiting.get('reason') or 'no reason'}\n")
    else:
        out.append("Waiting (reason unknown)\n")
    return "".join(out)


def _bool_str(value: Any) -> str:
    return "true" if value else "false"


def _format_quantities(title: str, quantities: Mapping[str, str] | None) -> list[str]:
    lines = [f"    {title}:\n"]
    quantities = quantities or {}
    lines.extend(f"      {name}:\t{quantities[name]}\n" for name in sorted(quantities))
    if not quantities:
        lines.append("      <none>\n")
    return lines


def format_containers(pod: Obj, volumes: bool = False) -> str:
    """Describe each container of a pod, optionally with its volume mounts."""
    status = pod.get("status")
    if status is None:
        raise ClickError("No container info returned from api server")
    spec = pod.get("spec")
    out: list[str] = []
    for cont in _container_statuses(status):
        name = cont.get("name")
        out.append(f"Name:\t{name}\n")
        out.append(f"  ID:\t\t{cont.get('containerID') or '<none>'}\n")
        out.append(f"  Image:\t{cont.get('imageID', '')}\n")
        out.append(format_state(cont.get("state")))
        out.append(f"  Ready:\t{_bool_str(cont.get('ready'))}\n")
        out.append(f"  Restarts:\t{cont.get('restartCount', 0)}\n")

        cont_spec = None
        if spec is not None:
            cont_spec = next(
                (c for c in spec.get("containers") or () if c.get("name") == name), None
            )
        if cont_spec is not None:
            out.append("  Resources:\n")
            resources = cont_spec.get("resources")
            if resources is not None:
                out.extend(_format_quantities("Requests", resources.get("requests")))
                out.extend(_format_quantities("Limits", resources.get("limits")))
            else:
                out.append("    <Unknown>\n")

            if volumes:
                out.append("  Volumes:\n")
                mounts = cont_spec.get("volumeMounts") or ()
                for vol in mounts:
                    out.append(f"   {vol.get('name')}\n")
                    out.append(f"    Path:\t{vol.get('mountPath')}\n")
                    out.append(f"    Sub-Path:\t{vol.get('subPath') or '<none>'}\n")
                    out.append(f"    Read-Only:\t{_bool_str(vol.get('readOnly', False))}\n")
                if not mounts:
                    out.append("    No Volumes\n")
        out.append("\n")
    return "".join(out)