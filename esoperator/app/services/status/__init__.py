"""
Status reconciliation services for Elasticsearch clusters.

This package computes the status of an Elasticsearch custom resource
(cluster health, node status and per-role pod readiness) and commits it
back to the Kubernetes API with optimistic concurrency.
"""

from typing import Sequence

from .base import (
    ClusterRef,
    CredentialMode,
    CredentialModeError,
    ExternalCredentials,
    InClusterCredentials,
    PodExecError,
    PodExecutor,
    PodLister,
    PodListError,
    ResourceStore,
    RetryPolicy,
    StatusCommitError,
    StatusComputeError,
    StatusConflictError,
    StatusException,
    StatusFetchError,
    StatusRetryExhaustedError,
    resolve_credentials,
)
from .health import ClusterHealthProbe
from .nodes import ActualNodeResources, DesiredNodeSpec, NodeState, NodeStatusProjector
from .pods import PodRoleAggregator
from .reconciler import StatusReconciler


def build_status_reconciler(config=None, nodes: Sequence[NodeState] = ()) -> StatusReconciler:
    """
    Factory function wiring a reconciler to the Kubernetes API.

    Args:
        config: Configuration class; defaults to ``get_config()``
        nodes: Known node states projected on every cycle

    Returns:
        StatusReconciler using Kubernetes-backed collaborators

    Examples:
        >>> reconciler = build_status_reconciler()
        >>> reconciler.update_status(ClusterRef(name="elasticsearch", namespace="logging"))
    """
    # Import lazily to avoid circular dependencies
    from esoperator.app.config import get_config
    from esoperator.app.integrations.kubernetes_client import (
        KubernetesPodExecutor,
        KubernetesPodLister,
        KubernetesResourceStore,
        load_default_client,
    )

    if config is None:
        config = get_config()

    api_client = load_default_client(config.KUBERNETES_CONFIG)
    pod_lister = KubernetesPodLister(
        api_client, request_timeout=config.API_REQUEST_TIMEOUT_SECONDS
    )
    store = KubernetesResourceStore(
        api_client,
        group=config.ES_CRD_GROUP,
        version=config.ES_CRD_VERSION,
        plural=config.ES_CRD_PLURAL,
        status_subresource=config.ES_STATUS_SUBRESOURCE,
        request_timeout=config.API_REQUEST_TIMEOUT_SECONDS,
    )
    probe = ClusterHealthProbe.from_config(
        config, pod_lister, KubernetesPodExecutor(timeout=config.EXEC_TIMEOUT_SECONDS)
    )

    return StatusReconciler(
        store,
        probe,
        PodRoleAggregator(pod_lister),
        nodes=nodes,
        retry_policy=RetryPolicy.from_config(config),
    )


__all__ = [
    'ActualNodeResources',
    'ClusterHealthProbe',
    'ClusterRef',
    'CredentialMode',
    'CredentialModeError',
    'DesiredNodeSpec',
    'ExternalCredentials',
    'InClusterCredentials',
    'NodeState',
    'NodeStatusProjector',
    'PodExecError',
    'PodExecutor',
    'PodListError',
    'PodLister',
    'PodRoleAggregator',
    'ResourceStore',
    'RetryPolicy',
    'StatusCommitError',
    'StatusComputeError',
    'StatusConflictError',
    'StatusException',
    'StatusFetchError',
    'StatusReconciler',
    'StatusRetryExhaustedError',
    'build_status_reconciler',
    'resolve_credentials',
]
