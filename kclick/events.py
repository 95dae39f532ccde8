"""Selecting, ordering and rendering cluster events."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from .listing import CellSpec, KObj, render_table
from .util import format_duration, parse_timestamp, time_since

__all__ = [
    "get_event_ts",
    "sort_events",
    "object_field_selector",
    "namespace_field_selector",
    "event_rows",
    "render_events",
]

Event = Mapping[str, Any]

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def get_event_ts(event: Event) -> datetime | None:
    """The event's last timestamp, falling back to its event time."""
    ts = event.get("lastTimestamp")
    if ts is None:
        ts = event.get("eventTime")
    return parse_timestamp(ts)


def sort_events(events: Iterable[Event]) -> list[Event]:
    """Events oldest first; events without a timestamp come before all others."""

    def key(event: Event) -> tuple[int, datetime]:
        ts = get_event_ts(event)
        return (0, _EARLIEST) if ts is None else (1, ts)

    return sorted(events, key=key)


def object_field_selector(obj: KObj) -> str:
    """Field selector for the events that involve ``obj``."""
    if obj.namespace is not None:
        return f"involvedObject.name={obj.name},involvedObject.namespace={obj.namespace}"
    return f"involvedObject.name={obj.name}"


def namespace_field_selector(namespace: str | None) -> str | None:
    """Field selector for the events in ``namespace``, or ``None`` for all namespaces."""
    if namespace is None:
        return None
    return f"involvedObject.namespace={namespace}"


def _titles(include_namespace: bool, include_object: bool) -> list[str]:
    titles = ["Namespace"] if include_namespace else []
    titles.extend(["Last Seen", "Type", "Reason"])
    if include_object:
        titles.append("Object")
    titles.append("Message")
    return titles


def event_rows(
    events: Iterable[Event],
    include_namespace: bool,
    include_object: bool,
    now: datetime | None = None,
) -> list[list[str]]:
    """Table rows for the events, oldest first."""
    rows = []
    for event in sort_events(events):
        row = []
        if include_namespace:
            row.append((event.get("metadata") or {}).get("namespace") or "unknown")
        ts = get_event_ts(event)
        row.append("unknown" if ts is None else format_duration(time_since(ts, now)))
        row.append(event.get("type") or "unknown")
        row.append(event.get("reason") or "unknown")
        if include_object:
            row.append((event.get("involvedObject") or {}).get("name") or "unknown")
        row.append(event.get("message") or "<none>")
        rows.append(row)
    return rows


def render_events(
    events: Iterable[Event],
    include_namespace: bool,
    include_object: bool,
    now: datetime | None = None,
) -> str:
    """Render the events as a table, or 'No events' when there are none."""
    rows = event_rows(events, include_namespace, include_object, now)
    if not rows:
        return "No events\n"
    cells = [[CellSpec(text) for text in row] for row in rows]
    return render_table(_titles(include_namespace, include_object), cells)