"""Listing jobs."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any

from .command_def import extract_first
from .listing import KObj, ObjType, handle_list_result, resolve_columns
from .util import keyval_string, parse_timestamp, time_since

__all__ = [
    "COL_MAP",
    "COL_FLAGS",
    "EXTRA_COL_MAP",
    "EXTRA_COL_FLAGS",
    "job_to_kobj",
    "job_completions",
    "job_duration",
    "job_containers",
    "job_images",
    "job_selector",
    "list_jobs",
]

Obj = Mapping[str, Any]

COL_MAP = (
    ("name", "Name"),
    ("completions", "Completions"),
    ("duration", "Duration"),
    ("age", "Age"),
)
COL_FLAGS = extract_first(COL_MAP)

EXTRA_COL_MAP = (
    ("containers", "Containers"),
    ("images", "Images"),
    ("selector", "Selector"),
    ("labels", "Labels"),
)
EXTRA_COL_FLAGS = extract_first(EXTRA_COL_MAP)


def job_to_kobj(job: Obj) -> KObj:
    meta = job.get("metadata") or {}
    # Jobs are selected as stateful-set objects, as the listing always has.
    return KObj(meta.get("name") or "<Unknown>", meta.get("namespace"), ObjType.STATEFUL_SET)


def job_completions(job: Obj) -> str:
    """Succeeded and wanted completions as 'succeeded/completions'."""
    completions = (job.get("spec") or {}).get("completions") or 0
    succeeded = (job.get("status") or {}).get("succeeded") or 0
    return f"{succeeded}/{completions}"


def job_duration(job: Obj, now: datetime | None = None) -> timedelta | str:
    """How long the job ran, or has been running, or 'Unknown' if it never started."""
    status = job.get("status") or {}
    start = parse_timestamp(status.get("startTime"))
    if start is None:
        return "Unknown"
    end = parse_timestamp(status.get("completionTime"))
    if end is None:
        cond = next(
            (
                c
                for c in status.get("conditions") or ()
                if c.get("type") == "Failed" or c.get("status") == "True"
            ),
            None,
        )
        if cond is not None:
            end = parse_timestamp(cond.get("lastTransitionTime"))
    if end is not None:
        return end - start
    return time_since(start, now)


def _pod_spec(job: Obj) -> Mapping[str, Any] | None:
    spec = job.get("spec")
    if spec is None:
        return None
    return (spec.get("template") or {}).get("spec")


def job_containers(job: Obj) -> str | None:
    pod_spec = _pod_spec(job)
    if pod_spec is None:
        return None
    return ", ".join(c["name"] for c in pod_spec.get("containers") or ())


def job_images(job: Obj) -> str | None:
    pod_spec = _pod_spec(job)
    if pod_spec is None:
        return None
    return ", ".join(c.get("image") or "<unknown>" for c in pod_spec.get("containers") or ())


def job_selector(job: Obj) -> str | None:
    spec = job.get("spec")
    if spec is None:
        return None
    selector = spec.get("selector")
    return None if selector is None else keyval_string(selector.get("matchLabels"))


_EXTRACTORS = {
    "Completions": job_completions,
    "Duration": job_duration,
    "Containers": job_containers,
    "Images": job_images,
    "Selector": job_selector,
}


def list_jobs(
    items: Iterable[Obj],
    show: str | Iterable[str] | None = None,
    sort: str | None = None,
    reverse: bool = False,
    regex: str | re.Pattern[str] | None = None,
    labels: bool = False,
    namespace: str | None = None,
) -> tuple[list[KObj], str]:
    """List jobs; return the listed objects and the rendered table."""
    cols, sort_col = resolve_columns(
        COL_MAP, EXTRA_COL_MAP, show, sort, labels, namespace is not None
    )
    return handle_list_result(cols, items, _EXTRACTORS, regex, sort_col, reverse, job_to_kobj)