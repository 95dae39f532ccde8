"""Deleting cluster objects: options, request paths and response handling."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from .listing import KObj, ObjType
from .util import ClickError, uppercase_first, valid_u32

__all__ = [
    "CASCADE_POLICIES",
    "DeleteOptions",
    "build_delete_options",
    "delete_path",
    "interpret_delete_response",
    "confirm",
]

_log = logging.getLogger(__name__)

CASCADE_POLICIES = ("background", "foreground", "orphan")
DEFAULT_CASCADE = "background"

_CORE = "/api/v1"
_APPS = "/apis/apps/v1"
_BATCH = "/apis/batch/v1"
_STORAGE = "/apis/storage.k8s.io/v1"

_NAMESPACED: dict[ObjType, tuple[str, str]] = {
    ObjType.CONFIG_MAP: (_CORE, "configmaps"),
    ObjType.DEPLOYMENT: (_APPS, "deployments"),
    ObjType.JOB: (_BATCH, "jobs"),
    ObjType.POD: (_CORE, "pods"),
    ObjType.REPLICA_SET: (_APPS, "replicasets"),
    ObjType.STATEFUL_SET: (_APPS, "statefulsets"),
    ObjType.SECRET: (_CORE, "secrets"),
    ObjType.SERVICE: (_CORE, "services"),
}

_CLUSTER_SCOPED: dict[ObjType, tuple[str, str]] = {
    ObjType.NAMESPACE: (_CORE, "namespaces"),
    ObjType.NODE: (_CORE, "nodes"),
    ObjType.PERSISTENT_VOLUME: (_CORE, "persistentvolumes"),
    ObjType.STORAGE_CLASS: (_STORAGE, "storageclasses"),
}


@dataclass(frozen=True)
class DeleteOptions:
    """Options sent along with a delete request."""

    propagation_policy: str | None = None
    grace_period_seconds: int | None = None

    def to_params(self) -> dict[str, str]:
        """The options that are set, as API query parameters."""
        params: dict[str, str] = {}
        if self.grace_period_seconds is not None:
            params["gracePeriodSeconds"] = str(self.grace_period_seconds)
        if self.propagation_policy is not None:
            params["propagationPolicy"] = self.propagation_policy
        return params


def build_delete_options(
    force: bool = False,
    now: bool = False,
    grace: str | None = None,
    cascade: str | None = DEFAULT_CASCADE,
) -> DeleteOptions:
    """Validate command-line values and turn them into delete options."""
    if force and (now or grace is not None):
        raise ClickError("--force cannot be used with --now or --gracePeriod")
    if now and grace is not None:
        raise ClickError("--now cannot be used with --gracePeriod")

    if force:
        grace_seconds: int | None = 0
    elif now:
        grace_seconds = 1
    elif grace is not None:
        try:
            grace_seconds = valid_u32(grace)
        except ValueError as err:
            raise ClickError(f"Invalid value for --gracePeriod: {err}") from err
    else:
        grace_seconds = None

    if cascade is None:
        cascade = DEFAULT_CASCADE
    lower = cascade.lower()
    if lower not in CASCADE_POLICIES:
        raise ClickError(
            f"Invalid cascade strategy '{cascade}'. Possible values are: "
            f"[{', '.join(CASCADE_POLICIES)}]"
        )
    # the API wants the policy capitalised, e.g. 'Background'
    return DeleteOptions(
        propagation_policy=uppercase_first(lower),
        grace_period_seconds=grace_seconds,
    )


def _path(base: str, resource: str, name: str, namespace: str | None = None) -> str:
    name_part = quote(name, safe="")
    if namespace is None:
        return f"{base}/{resource}/{name_part}"
    return f"{base}/namespaces/{quote(namespace, safe='')}/{resource}/{name_part}"


def delete_path(obj: KObj) -> str:
    """API path to send a delete request to for ``obj``."""
    if obj.namespace is not None:
        if obj.typ is ObjType.CRD:
            raise ClickError("Can't delete CRDs yet")
        if obj.typ in _NAMESPACED:
            base, resource = _NAMESPACED[obj.typ]
            return _path(base, resource, obj.name, obj.namespace)
        if obj.typ in _CLUSTER_SCOPED:
            _log.warning(
                "%s has unexpected namespace. Please file an issue on github. "
                "Deleting anyway",
                obj.type_str(),
            )
            base, resource = _CLUSTER_SCOPED[obj.typ]
            return _path(base, resource, obj.name)
        raise ClickError(f"Cannot delete objects of type {obj.type_str()}")
    if obj.typ in _CLUSTER_SCOPED:
        base, resource = _CLUSTER_SCOPED[obj.typ]
        return _path(base, resource, obj.name)
    raise ClickError(f"Object {obj.name} has no namespace. Cannot delete")


def _decode(body: Mapping[str, Any] | str | bytes | None) -> Any:
    if body is None or isinstance(body, Mapping):
        return body
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    if not body.strip():
        return None
    return json.loads(body)


def interpret_delete_response(
    status: int, body: Mapping[str, Any] | str | bytes | None = None
) -> str:
    """Describe a successful delete response; raise ClickError for a failed one."""
    if status == 200:
        return "Deleted"
    if status == 202:
        return "Delete request accepted"
    try:
        value = _decode(body)
    except ValueError as err:
        raise ClickError(f"Delete request failed with an error: {err}") from err
    if value is None:
        raise ClickError("Delete request failed with no reason given")
    message = value.get("message") if isinstance(value, Mapping) else None
    if message is None:
        message = "<No message>"
    elif not isinstance(message, str):
        message = json.dumps(message)
    raise ClickError(f"Delete request failed. Message: {message}")


def confirm(answer: str | None) -> bool:
    """True if the answer to a 'Delete ... [y/N]?' prompt agrees to it."""
    if answer is None:
        return False
    return answer.strip() in ("y", "yes")