from kclick.deployments import (
    deployment_available,
    deployment_containers,
    deployment_desired,
    deployment_images,
    deployment_ready,
    deployment_to_kobj,
    deployment_uptodate,
    list_deployments,
)
from kclick.listing import ObjType


def _dep(name, replicas=None, status=None, containers=None):
    dep = {"metadata": {"name": name, "namespace": "default"}}
    spec = {}
    if replicas is not None:
        spec["replicas"] = replicas
    if containers is not None:
        spec["template"] = {"spec": {"containers": containers}}
    dep["spec"] = spec
    if status is not None:
        dep["status"] = status
    return dep


CONTAINERS = [{"name": "web", "image": "nginx:1"}, {"name": "side"}]


def test_to_kobj():
    kobj = deployment_to_kobj(_dep("api"))
    assert (kobj.name, kobj.namespace, kobj.typ) == ("api", "default", ObjType.DEPLOYMENT)
    assert deployment_to_kobj({}).name == "<Unknown>"


def test_containers_and_images():
    dep = _dep("api", containers=CONTAINERS)
    assert deployment_containers(dep) == "web, side"
    assert deployment_images(dep) == "nginx:1, <unknown>"
    assert deployment_containers(_dep("x")) is None
    assert deployment_images({}) is None


def test_counts():
    dep = _dep("api", replicas=3, status={"readyReplicas": 2})
    assert deployment_desired(dep) == 3
    assert deployment_ready(dep) == 2
    assert deployment_available(dep) == 0
    assert deployment_uptodate(dep) == 0
    bare = _dep("x")
    assert deployment_desired(bare) is None
    assert deployment_ready(bare) is None


def test_list_adds_namespace_outside_namespace():
    items = [_dep("a", replicas=1)]
    _, text = list_deployments(items)
    assert "Namespace" in text.splitlines()[0]
    _, text = list_deployments(items, namespace="default")
    assert "Namespace" not in text.splitlines()[0]


def test_list_sort_by_desired_and_show():
    items = [_dep("a", replicas=5, containers=CONTAINERS), _dep("b", replicas=1, containers=CONTAINERS)]
    kobjs, text = list_deployments(items, show="containers", sort="desired", namespace="ns")
    assert [k.name for k in kobjs] == ["b", "a"]
    assert text.splitlines()[0].endswith("Containers")


def test_list_sort_by_extra_column_shows_it():
    items = [_dep("a", containers=CONTAINERS)]
    _, text = list_deployments(items, sort="images", namespace="ns")
    assert "Images" in text.splitlines()[0]
    assert "nginx:1" in text