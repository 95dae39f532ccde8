from datetime import datetime, timedelta, timezone

import pytest

from kclick.jobs import (
    job_completions,
    job_containers,
    job_duration,
    job_images,
    job_selector,
    job_to_kobj,
    list_jobs,
)
from kclick.listing import ObjType
from kclick.util import ClickError, parse_timestamp

START = "2023-01-01T10:00:00Z"
END = "2023-01-01T10:05:00Z"


def make_job(name, status=None, spec=None):
    job = {"metadata": {"name": name, "namespace": "batch"}}
    if status is not None:
        job["status"] = status
    job["spec"] = spec if spec is not None else {
        "completions": 3,
        "selector": {"matchLabels": {"job": name}},
        "template": {"spec": {"containers": [{"name": "worker", "image": "busybox"}]}},
    }
    return job


def test_to_kobj_keeps_stateful_set_type():
    kobj = job_to_kobj(make_job("j"))
    assert (kobj.name, kobj.namespace, kobj.typ) == ("j", "batch", ObjType.STATEFUL_SET)


def test_completions():
    assert job_completions(make_job("j", status={"succeeded": 2})).split("/") == ["2", "3"]


def test_completions_defaults():
    assert job_completions({"metadata": {"name": "j"}}).split("/") == ["0", "0"]


def test_duration_unknown_without_start():
    assert job_duration(make_job("j", status={})) == "Unknown"


def test_duration_completed():
    job = make_job("j", status={"startTime": START, "completionTime": END})
    assert job_duration(job) == timedelta(minutes=5)


def test_duration_failed_condition():
    job = make_job(
        "j",
        status={
            "startTime": START,
            "conditions": [{"type": "Failed", "status": "True", "lastTransitionTime": END}],
        },
    )
    assert job_duration(job) == parse_timestamp(END) - parse_timestamp(START)


def test_duration_running_uses_now():
    job = make_job("j", status={"startTime": START})
    now = datetime(2023, 1, 1, 11, 0, tzinfo=timezone.utc)
    assert job_duration(job, now) == now - parse_timestamp(START)


def test_containers_images_selector():
    job = make_job("j")
    assert job_containers(job) == "worker"
    assert job_images(job) == "busybox"
    assert job_selector(job) == "job=j\n"


def test_no_selector():
    assert job_selector(make_job("j", spec={"template": {}})) is None
    assert job_containers(make_job("j", spec={"template": {}})) is None


def test_list_sort_and_filter():
    items = [make_job("zeta"), make_job("alpha")]
    kobjs, _ = list_jobs(items, sort="name", namespace="batch")
    assert [k.name for k in kobjs] == ["alpha", "zeta"]
    kobjs, _ = list_jobs(items, regex="^ze", namespace="batch")
    assert [k.name for k in kobjs] == ["zeta"]


def test_list_labels_column():
    _, table = list_jobs([make_job("a")], labels=True, namespace="batch")
    assert "Labels" in table.splitlines()[0]


def test_list_bad_sort():
    with pytest.raises(ClickError):
        list_jobs([make_job("a")], sort="nope")