import pytest

from kclick.listing import ObjType
from kclick.namespaces import list_namespaces, namespace_status, namespace_to_kobj
from kclick.util import ClickError


def _ns(name, phase=None):
    ns = {"metadata": {"name": name}}
    if phase is not None:
        ns["status"] = {"phase": phase}
    return ns


def test_namespace_to_kobj():
    kobj = namespace_to_kobj(_ns("kube-system"))
    assert kobj.name == "kube-system"
    assert kobj.namespace is None
    assert kobj.typ is ObjType.NAMESPACE
    assert namespace_to_kobj({"metadata": {}}).name == "<Unknown>"


def test_namespace_status():
    assert namespace_status(_ns("a", "Active")) == "Active"
    assert namespace_status(_ns("a")) is None


def test_list_namespaces_sorted_reverse():
    items = [_ns("b", "Active"), _ns("a", "Terminating"), _ns("c", "Active")]
    kobjs, text = list_namespaces(items, sort="name", reverse=True)
    assert [k.name for k in kobjs] == ["c", "b", "a"]
    assert text.splitlines()[0].split() == ["####", "Name", "Age", "Status"]


def test_list_namespaces_regex():
    items = [_ns("b", "Active"), _ns("a", "Terminating")]
    kobjs, _ = list_namespaces(items, regex="Termin")
    assert [k.name for k in kobjs] == ["a"]


def test_list_namespaces_bad_sort():
    with pytest.raises(ClickError):
        list_namespaces([_ns("a")], sort="labels")