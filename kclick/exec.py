"""Running commands in pods through kubectl."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from .listing import KObj
from .util import ClickError

__all__ = [
    "DEFAULT_TERMINAL",
    "parse_bool",
    "it_flag",
    "build_exec_args",
    "build_terminal_args",
    "run_exec",
]

DEFAULT_TERMINAL = "xterm -e"


def parse_bool(s: str) -> bool:
    """Parse exactly 'true' or 'false'."""
    if s == "true":
        return True
    if s == "false":
        return False
    raise ValueError("provided string was not `true` or `false`")


def it_flag(tty: bool, stdin: bool) -> str:
    """The kubectl exec flag for the tty and stdin settings."""
    if tty and stdin:
        return "-it"
    if tty:
        return "-t"
    if stdin:
        return "-i"
    return ""


def build_exec_args(
    namespace: str,
    context: str,
    it_arg: str,
    pod: str,
    container: str | None,
    command: Sequence[str],
) -> list[str]:
    """The kubectl argument list that runs ``command`` in ``pod``."""
    args = ["kubectl", "--namespace", namespace, "--context", context, "exec"]
    if it_arg:
        args.append(it_arg)
    args.append(pod)
    if container is not None:
        args.extend(["-c", container])
    args.append("--")
    args.extend(command)
    return args


def build_terminal_args(terminal: str | None, exec_args: Sequence[str]) -> list[str]:
    """Arguments that run ``exec_args`` inside a new terminal."""
    return [*(terminal or DEFAULT_TERMINAL).split(), *exec_args]


def run_exec(
    obj: KObj,
    context: str | None,
    command: Sequence[str],
    it_arg: str = "-it",
    container: str | None = None,
    terminal: str | None = None,
    use_terminal: bool = False,
) -> subprocess.Popen | None:
    """Run ``command`` in the pod ``obj``.

    In a terminal, the terminal is started and its process returned; otherwise
    the call waits for kubectl and raises ClickError if it fails.
    """
    if context is None:
        raise ClickError("Need an active context in order to exec.")
    if not obj.is_pod():
        raise ClickError("Exec only possible on pods")
    if obj.namespace is None:
        raise ClickError(f"Pod {obj.name} has no namespace")
    if not command:
        raise ClickError("No command given to exec")

    args = build_exec_args(obj.namespace, context, it_arg, obj.name, container, command)
    if use_terminal:
        targs = build_terminal_args(terminal, args)
        print(f"Starting on {obj.name} in terminal")
        try:
            return subprocess.Popen(targs)
        except OSError as err:
            raise ClickError(f"Could not start terminal: {err}") from err

    try:
        result = subprocess.run(args)
    except FileNotFoundError as err:
        raise ClickError("Could not find kubectl binary. Is it in your PATH?") from err
    except OSError as err:
        raise ClickError(str(err)) from err
    if result.returncode != 0:
        raise ClickError("kubectl exited abnormally")
    return None