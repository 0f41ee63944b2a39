from unittest.mock import MagicMock, patch

import pytest

from esoperator.app.config import TestingConfig
from esoperator.app.integrations import kubernetes_client
from esoperator.app.integrations.kubernetes_client import (
    KubernetesPodExecutor,
    KubernetesPodLister,
    KubernetesResourceStore,
)
from esoperator.app.services.status import (
    RetryPolicy,
    StatusReconciler,
    build_status_reconciler,
)
from esoperator.app.services.status.nodes import NodeState


class ExternalConfig(TestingConfig):
    KUBERNETES_CONFIG = "/etc/kube/config"
    KUBERNETES_MASTER_URL = "https://api.example:6443"
    ES_CRD_GROUP = "elasticsearch.example.com"
    ES_CRD_VERSION = "v1beta1"
    ES_CRD_PLURAL = "clusters"
    ES_STATUS_SUBRESOURCE = False
    ES_CONTAINER_NAME = "es"
    ES_HEALTH_QUERY = "_cluster/health"
    EXEC_TIMEOUT_SECONDS = 7
    API_REQUEST_TIMEOUT_SECONDS = 11
    STATUS_UPDATE_MAX_ATTEMPTS = 3
    STATUS_UPDATE_BACKOFF_SECONDS = 0.5
    STATUS_UPDATE_BACKOFF_FACTOR = 2.0


@pytest.fixture
def mock_default_client():
    with patch.object(kubernetes_client, "load_default_client") as load:
        load.return_value = MagicMock()
        yield load


def test_factory_wires_config_into_collaborators(mock_default_client):
    nodes = [NodeState()]

    reconciler = build_status_reconciler(ExternalConfig, nodes=nodes)

    mock_default_client.assert_called_once_with("/etc/kube/config")
    assert isinstance(reconciler, StatusReconciler)
    assert reconciler.nodes is nodes

    store = reconciler.store
    assert isinstance(store, KubernetesResourceStore)
    assert (store.group, store.version, store.plural) == (
        "elasticsearch.example.com", "v1beta1", "clusters"
    )
    assert store.status_subresource is False
    assert store.request_timeout == 11

    probe = reconciler.health_probe
    assert probe.kubeconfig_path == "/etc/kube/config"
    assert probe.master_url == "https://api.example:6443"
    assert probe.container_name == "es"
    assert probe.command == ["es_util", "--query=_cluster/health"]
    assert isinstance(probe.executor, KubernetesPodExecutor)
    assert probe.executor.timeout == 7
    assert isinstance(probe.pod_lister, KubernetesPodLister)
    assert probe.pod_lister.request_timeout == 11
    assert reconciler.pod_aggregator.pod_lister is probe.pod_lister

    assert reconciler.retry_policy == RetryPolicy(
        max_attempts=3, delay=0.5, factor=2.0, jitter=0.0
    )


def test_factory_in_cluster_ignores_master_url(mock_default_client):
    reconciler = build_status_reconciler(TestingConfig)

    mock_default_client.assert_called_once_with("")
    probe = reconciler.health_probe
    assert (probe.kubeconfig_path, probe.master_url) == ("", "")
    assert reconciler.store.status_subresource is TestingConfig.ES_STATUS_SUBRESOURCE
    assert reconciler.retry_policy == RetryPolicy.from_config(TestingConfig)
