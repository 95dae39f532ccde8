import pytest

from kclick.configmaps import cm_data, cm_to_kobj, list_configmaps
from kclick.listing import ObjType
from kclick.util import ClickError


def _cm(name, data=None, labels=None):
    cm = {"metadata": {"name": name, "namespace": "default"}}
    if labels is not None:
        cm["metadata"]["labels"] = labels
    if data is not None:
        cm["data"] = data
    return cm


def test_cm_to_kobj():
    kobj = cm_to_kobj(_cm("settings"))
    assert (kobj.name, kobj.namespace, kobj.typ) == ("settings", "default", ObjType.CONFIG_MAP)
    assert cm_to_kobj({}).name == "<Unknown>"


def test_cm_data():
    assert cm_data(_cm("x", {"a": "1", "b": "2"})) == 2
    assert cm_data(_cm("x")) == 0


def test_list_sort_by_data():
    items = [_cm("big", {"a": "1", "b": "2", "c": "3"}), _cm("small", {"a": "1"})]
    kobjs, text = list_configmaps(items, sort="data")
    assert [k.name for k in kobjs] == ["small", "big"]
    assert text.splitlines()[0].split() == ["####", "Name", "Data", "Age"]


def test_list_labels_column():
    items = [_cm("x", labels={"app": "web"})]
    _, text = list_configmaps(items, labels=True)
    assert text.splitlines()[0].split()[-1] == "Labels"
    assert "app=web" in text


def test_list_cannot_sort_by_extra():
    with pytest.raises(ClickError):
        list_configmaps([_cm("x")], sort="labels")


def test_list_regex_filter():
    items = [_cm("alpha"), _cm("beta")]
    kobjs, _ = list_configmaps(items, regex="^bet")
    assert [k.name for k in kobjs] == ["beta"]