"""
Elasticsearch cluster health probe.

Health is read by running ``es_util`` inside one of the cluster's running
pods and parsing the ``status`` field of the ``_cluster/health`` response.
The probe never raises: when the cluster has no running pods it reports an
empty health, and any other failure is reported as ``unknown`` so the rest of
the status update can proceed.
"""

import json
import logging
from typing import Optional

from esoperator.app.models.enums import ClusterHealth, PodPhase

from .base import (
    CredentialMode,
    PodExecutor,
    PodLister,
    cluster_selector,
    resolve_credentials,
)

logger = logging.getLogger(__name__)


class ClusterHealthProbe:
    """Classify the health of an Elasticsearch cluster."""

    def __init__(
        self,
        pod_lister: PodLister,
        executor: PodExecutor,
        kubeconfig_path: Optional[str] = None,
        master_url: Optional[str] = None,
        container_name: str = "elasticsearch",
        health_query: str = "_cluster/health?pretty=true"
    ):
        """
        Initialize the probe.

        Args:
            pod_lister: Lists the cluster's running pods
            executor: Runs the health command inside a pod
            kubeconfig_path: Kubeconfig path for external access, empty in-cluster
            master_url: API server URL for external access, empty in-cluster
            container_name: Container the command runs in
            health_query: Query passed to es_util
        """
        self.pod_lister = pod_lister
        self.executor = executor
        self.kubeconfig_path = kubeconfig_path or ""
        self.master_url = master_url or ""
        self.container_name = container_name
        self.health_query = health_query

    @classmethod
    def from_config(cls, config, pod_lister: PodLister, executor: PodExecutor) -> "ClusterHealthProbe":
        """Build a probe from configuration.

        The master URL only applies when a kubeconfig path is configured.
        """
        kubeconfig_path = config.KUBERNETES_CONFIG
        master_url = config.KUBERNETES_MASTER_URL if kubeconfig_path else ""
        return cls(
            pod_lister,
            executor,
            kubeconfig_path=kubeconfig_path,
            master_url=master_url,
            container_name=config.ES_CONTAINER_NAME,
            health_query=config.ES_HEALTH_QUERY,
        )

    @property
    def command(self):
        return ["es_util", f"--query={self.health_query}"]

    def health(self, name: str, namespace: str) -> str:
        """
        Return the health of cluster ``name`` in ``namespace``.

        Args:
            name: Cluster name
            namespace: Cluster namespace

        Returns:
            The Elasticsearch ``status`` value (e.g. green, yellow, red),
            ``""`` when no pod is running, or ``"unknown"``
        """
        try:
            pods = self.pod_lister.list_pods(
                namespace,
                cluster_selector(name),
                field_selector=f"status.phase={PodPhase.RUNNING.value}",
            )
        except Exception as e:
            logger.debug(f"Could not list running pods for {namespace}/{name}: {e}")
            return ClusterHealth.UNKNOWN.value

        if not pods:
            return ClusterHealth.NOT_RUNNING.value

        pod = pods[0]

        try:
            credentials = resolve_credentials(self.kubeconfig_path, self.master_url)
            output = self._exec_health(pod, credentials)
        except Exception as e:
            logger.debug(f"Health query failed for {namespace}/{name}: {e}")
            return ClusterHealth.UNKNOWN.value

        return self._parse_status(output, f"{namespace}/{name}")

    def _exec_health(self, pod, credentials: CredentialMode) -> str:
        return self.executor.exec(pod, self.container_name, self.command, credentials)

    def _parse_status(self, output: str, cluster: str) -> str:
        try:
            result = json.loads(output)
        except (TypeError, ValueError) as e:
            logger.debug(f"Could not parse health response from {cluster}: {e}")
            return ClusterHealth.UNKNOWN.value

        if not isinstance(result, dict) or "status" not in result:
            logger.debug(
                f"Health response from {cluster} did not contain a 'status' field"
            )
            return ClusterHealth.UNKNOWN.value

        status = result["status"]
        if not isinstance(status, str):
            logger.debug(f"Health response from {cluster} has non-string status {status!r}")
            return ClusterHealth.UNKNOWN.value

        return status
