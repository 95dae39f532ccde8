"""Shared pieces for defining commands: completion and extra-column handling."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import chain

__all__ = [
    "Completion",
    "try_complete_all",
    "try_complete",
    "complete_option",
    "extract_first",
    "add_extra_cols",
]


@dataclass(frozen=True)
class Completion:
    """A completion candidate: what to show, and the text to insert."""

    display: str
    replacement: str


def _complete(prefix: str, values: Iterable[str]) -> list[Completion]:
    return [
        Completion(display=val, replacement=val[len(prefix):])
        for val in values
        if val.startswith(prefix)
    ]


def try_complete_all(
    prefix: str, cols: Iterable[str], extra_cols: Iterable[str]
) -> list[Completion]:
    """Complete ``prefix`` against both the normal and the extra columns."""
    return _complete(prefix, chain(cols, extra_cols))


def try_complete(prefix: str, extra_cols: Iterable[str]) -> list[Completion]:
    """Complete ``prefix`` against the extra columns only."""
    return _complete(prefix, extra_cols)


def complete_option(
    prefix: str, long_options: Iterable[str | None]
) -> list[Completion]:
    """Complete a long option name (given without dashes) from ``long_options``."""
    return [
        Completion(display=f"--{name}", replacement=f"{name[len(prefix):]} ")
        for name in long_options
        if name is not None and name.startswith(prefix)
    ]


def extract_first(col_map: Iterable[tuple[str, str]]) -> tuple[str, ...]:
    """The flag names (first elements) of a column map."""
    return tuple(flag for flag, _ in col_map)


def add_extra_cols(
    cols: Sequence[str],
    labels: bool,
    flags: Iterable[str],
    extra_cols: Iterable[tuple[str, str]],
) -> list[str]:
    """Return ``cols`` followed by the extra columns the flags ask for.

    ``extra_cols`` holds (flag, column) pairs in display order. The flag
    'all' selects every extra column except Labels, which is only added by
    ``labels`` or an explicit 'labels' flag.
    """
    wanted = {flag.lower() for flag in flags}
    show_all = "all" in wanted
    result = list(cols)
    for flag, col in extra_cols:
        if col == "Labels":
            if labels or "labels" in wanted:
                result.append(col)
        elif show_all or flag.lower() in wanted:
            result.append(col)
    return result