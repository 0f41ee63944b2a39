import copy
from types import SimpleNamespace

import pytest
from kubernetes import client

from esoperator.app.services.status.base import (
    PodExecutor,
    PodLister,
    PodListError,
    ResourceStore,
    StatusConflictError,
)


def make_named(name, namespace="logging"):
    """Stand-in for a workload object (Deployment, ReplicaSet, StatefulSet)."""
    return SimpleNamespace(metadata=SimpleNamespace(name=name, namespace=namespace))


def make_pod(name, phase="Running", ready=(True,), namespace="logging"):
    """Build a V1Pod with one container status per entry of ``ready``."""
    statuses = [
        client.V1ContainerStatus(
            name=f"c{i}",
            image="elasticsearch",
            image_id="",
            ready=is_ready,
            restart_count=0,
        )
        for i, is_ready in enumerate(ready)
    ]
    return client.V1Pod(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        status=client.V1PodStatus(phase=phase, container_statuses=statuses or None),
    )


class FakePodLister(PodLister):
    """Return canned pods per label selector; selectors in ``failing`` raise."""

    def __init__(self, pods_by_selector=None, failing=()):
        self.pods_by_selector = pods_by_selector or {}
        self.failing = set(failing)
        self.calls = []

    def list_pods(self, namespace, label_selector, field_selector=None):
        self.calls.append((namespace, label_selector, field_selector))
        if label_selector in self.failing:
            raise PodListError("list failed", resource=namespace)
        return list(self.pods_by_selector.get(label_selector, []))


class FakeExecutor(PodExecutor):
    def __init__(self, output="", error=None):
        self.output = output
        self.error = error
        self.calls = []

    def exec(self, pod, container, command, credentials):
        self.calls.append((pod.metadata.name, container, command, credentials))
        if self.error is not None:
            raise self.error
        return self.output


class FakeStore(ResourceStore):
    """In-memory store with resourceVersion checks.

    ``conflicts`` is the number of upcoming updates rejected as conflicts;
    ``get_error`` / ``update_error`` are raised from the matching call.
    """

    def __init__(self, resource, conflicts=0, get_error=None, update_error=None):
        self.resource = resource
        self.conflicts = conflicts
        self.get_error = get_error
        self.update_error = update_error
        self.get_calls = 0
        self.update_calls = 0
        self.committed = []

    def get(self, ref):
        self.get_calls += 1
        if self.get_error is not None:
            raise self.get_error
        return copy.deepcopy(self.resource)

    def update(self, resource):
        self.update_calls += 1
        if self.update_error is not None:
            raise self.update_error
        if self.conflicts > 0:
            self.conflicts -= 1
            raise StatusConflictError("resource version conflict")
        stored = copy.deepcopy(resource)
        version = int(stored["metadata"].get("resourceVersion", "0")) + 1
        stored["metadata"]["resourceVersion"] = str(version)
        self.resource = stored
        self.committed.append(copy.deepcopy(stored["status"]))
        return stored


@pytest.fixture
def es_resource():
    return {
        "apiVersion": "logging.openshift.io/v1",
        "kind": "Elasticsearch",
        "metadata": {"name": "elasticsearch", "namespace": "logging", "resourceVersion": "1"},
        "spec": {},
        "status": {"clusterHealth": "red", "nodes": [{"podName": "stale"}], "pods": {}},
    }
