"""Options and helpers for fetching pod logs."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from os import PathLike
from pathlib import Path

from .listing import KObj
from .util import ClickError, parse_duration, valid_date, valid_u32

__all__ = [
    "LogOptions",
    "build_log_options",
    "log_timeout",
    "pick_container",
    "render_output_path",
    "log_file_name",
    "editor_command",
    "write_logs_to_file",
]

_log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0


@dataclass
class LogOptions:
    """Query options for reading a pod's logs."""

    follow: bool = False
    previous: bool = False
    tail_lines: int | None = None
    since_seconds: int | None = None
    timestamps: bool = False
    insecure_skip_tls_verify_backend: bool = False
    container: str | None = None

    def to_params(self) -> dict[str, str]:
        """The options that are set, as API query parameters."""
        params: dict[str, str] = {}
        if self.container is not None:
            params["container"] = self.container
        if self.follow:
            params["follow"] = "true"
        if self.insecure_skip_tls_verify_backend:
            params["insecureSkipTLSVerifyBackend"] = "true"
        if self.previous:
            params["previous"] = "true"
        if self.since_seconds is not None:
            params["sinceSeconds"] = str(self.since_seconds)
        if self.tail_lines is not None:
            params["tailLines"] = str(self.tail_lines)
        if self.timestamps:
            params["timestamps"] = "true"
        return params


def _trunc_seconds(delta) -> int:
    micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    whole = abs(micros) // 1_000_000
    return whole if micros >= 0 else -whole


def build_log_options(
    follow: bool = False,
    previous: bool = False,
    tail: str | None = None,
    since: str | None = None,
    since_time: str | None = None,
    timestamps: bool = False,
    insecure: bool = False,
    now: datetime | None = None,
) -> LogOptions:
    """Validate command-line values and turn them into log options."""
    if since is not None and since_time is not None:
        raise ClickError("--since and --since-time cannot be used together")
    opts = LogOptions(
        follow=follow,
        previous=previous,
        timestamps=timestamps,
        insecure_skip_tls_verify_backend=insecure,
    )
    if tail is not None:
        try:
            opts.tail_lines = valid_u32(tail)
        except ValueError as err:
            raise ClickError(f"Invalid value for --tail: {err}") from err
    if since is not None:
        try:
            dur = parse_duration(since)
        except ValueError as err:
            raise ClickError(f"Invalid duration in --since: {err}") from err
        opts.since_seconds = _trunc_seconds(dur)
    if since_time is not None:
        try:
            specified = valid_date(since_time)
        except ValueError as err:
            raise ClickError(f"Invalid date in --since-time: {err}") from err
        if now is None:
            now = datetime.now().astimezone()
        opts.since_seconds = _trunc_seconds(now - specified)
    return opts


def log_timeout(follow: bool) -> float | None:
    """Request timeout in seconds: none when following, otherwise the default."""
    return None if follow else DEFAULT_TIMEOUT


def pick_container(obj: KObj) -> str:
    """The first container of a pod, used when none was named."""
    if not obj.is_pod():
        raise ClickError("Logs only available on a pod")
    if not obj.containers:
        raise ClickError(f"Pod {obj.name} has no containers")
    if len(obj.containers) > 1:
        _log.info("Pod has multiple containers, picking the first one")
    return obj.containers[0]


def _rfc3339(time: datetime | str | None) -> str:
    if time is None:
        time = datetime.now().astimezone()
    if isinstance(time, str):
        return time
    return time.isoformat()


def render_output_path(template: str, obj: KObj, time: datetime | str | None = None) -> str:
    """Fill {name}, {namespace} and {time} into an output path template."""
    values = {
        "name": obj.name,
        "namespace": obj.namespace if obj.namespace is not None else "[none]",
        "time": _rfc3339(time),
    }
    try:
        return template.format_map(values)
    except (KeyError, IndexError, ValueError) as err:
        raise ClickError(f"Can't generate output path: {err}") from err


def log_file_name(obj: KObj, container: str, time: datetime | str | None = None) -> str:
    """File name for logs saved to open in an editor."""
    return f"{obj.name}_{container}_{_rfc3339(time)}.log"


def editor_command(editor: str, path: str | PathLike[str]) -> list[str]:
    """Argument list that opens ``path`` in ``editor`` (which may carry arguments)."""
    if " " in editor:
        return [*editor.split(), str(path)]
    return [editor, str(path)]


def write_logs_to_file(
    path: str | PathLike[str],
    chunks: Iterable[bytes],
    stop: Callable[[], bool] | None = None,
) -> int:
    """Write log chunks to ``path`` until they run out or ``stop`` says so.

    Returns the number of bytes written.
    """
    written = 0
    source = iter(chunks)
    with Path(path).open("wb") as out:
        while stop is None or not stop():
            chunk = next(source, b"")
            if not chunk:
                break
            out.write(chunk)
            written += len(chunk)
    return written