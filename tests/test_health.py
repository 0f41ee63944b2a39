import pytest

from conftest import FakeExecutor, FakePodLister, make_pod
from esoperator.app.config import TestingConfig
from esoperator.app.services.status.base import (
    ExternalCredentials,
    InClusterCredentials,
    PodExecError,
)
from esoperator.app.services.status.health import ClusterHealthProbe

SELECTOR = "component=elasticsearch"


def make_probe(output="", error=None, pods=None, failing=(), **kwargs):
    if pods is None:
        pods = [make_pod("es-0"), make_pod("es-1")]
    lister = FakePodLister({SELECTOR: pods}, failing=failing)
    executor = FakeExecutor(output=output, error=error)
    return ClusterHealthProbe(lister, executor, **kwargs), lister, executor


def test_green_status_is_returned_verbatim():
    probe, lister, executor = make_probe('{"status":"green"}')

    assert probe.health("elasticsearch", "logging") == "green"
    assert lister.calls == [("logging", SELECTOR, "status.phase=Running")]


def test_health_command_runs_in_first_pod():
    probe, _, executor = make_probe('{"status":"yellow"}')

    probe.health("elasticsearch", "logging")

    pod_name, container, command, credentials = executor.calls[0]
    assert pod_name == "es-0"
    assert container == "elasticsearch"
    assert command == ["es_util", "--query=_cluster/health?pretty=true"]
    assert credentials == InClusterCredentials()


def test_no_running_pods_reports_empty_health():
    probe, _, executor = make_probe('{"status":"green"}', pods=[])

    assert probe.health("elasticsearch", "logging") == ""
    assert executor.calls == []


def test_listing_failure_takes_precedence_over_probe():
    probe, _, executor = make_probe('{"status":"green"}', failing=[SELECTOR])

    assert probe.health("elasticsearch", "logging") == "unknown"
    assert executor.calls == []


@pytest.mark.parametrize(
    "output, error",
    [
        ("", PodExecError("exec failed")),
        ("", RuntimeError("websocket closed")),
        ("not json", None),
        ("[1, 2]", None),
        ('{"cluster_name": "elasticsearch"}', None),
        ('{"status": 3}', None),
        ('{"status": null}', None),
    ],
)
def test_probe_failures_report_unknown(output, error):
    probe, _, _ = make_probe(output, error=error)

    assert probe.health("elasticsearch", "logging") == "unknown"


@pytest.mark.parametrize(
    "failing, pods, output, error, expected",
    [
        ([SELECTOR], None, '{"status":"green"}', None, "unknown"),
        ([], [], '{"status":"green"}', None, ""),
        ([], None, "", PodExecError("exec failed"), "unknown"),
        ([], None, "<html>", None, "unknown"),
        ([], None, "{}", None, "unknown"),
        ([], None, '{"status":"red"}', None, "red"),
    ],
)
def test_health_is_always_a_string(failing, pods, output, error, expected):
    probe, _, _ = make_probe(output, error=error, pods=pods, failing=failing)

    result = probe.health("elasticsearch", "logging")

    assert isinstance(result, str)
    assert result == expected


def test_external_credentials_are_passed_to_executor():
    probe, _, executor = make_probe(
        '{"status":"green"}',
        kubeconfig_path="/etc/kube/config",
        master_url="https://api.example:6443",
    )

    assert probe.health("elasticsearch", "logging") == "green"
    assert executor.calls[0][3] == ExternalCredentials(
        path="/etc/kube/config", endpoint="https://api.example:6443"
    )


@pytest.mark.parametrize(
    "kubeconfig_path, master_url",
    [("/etc/kube/config", ""), ("", "https://api.example:6443")],
)
def test_partial_credentials_are_rejected_before_exec(kubeconfig_path, master_url):
    probe, _, executor = make_probe(
        '{"status":"green"}', kubeconfig_path=kubeconfig_path, master_url=master_url
    )

    assert probe.health("elasticsearch", "logging") == "unknown"
    assert executor.calls == []


def test_from_config_uses_master_url_only_with_kubeconfig():
    class ExternalConfig(TestingConfig):
        KUBERNETES_CONFIG = "/etc/kube/config"
        KUBERNETES_MASTER_URL = "https://kubernetes.default.svc"

    in_cluster = ClusterHealthProbe.from_config(TestingConfig, FakePodLister(), FakeExecutor())
    external = ClusterHealthProbe.from_config(ExternalConfig, FakePodLister(), FakeExecutor())

    assert (in_cluster.kubeconfig_path, in_cluster.master_url) == ("", "")
    assert (external.kubeconfig_path, external.master_url) == (
        "/etc/kube/config",
        "https://kubernetes.default.svc",
    )
    assert external.container_name == "elasticsearch"
