"""
Integration clients for external services.

Includes Kubernetes implementations of:
- Elasticsearch custom resource store
- Pod listing
- Pod command execution
"""

from .kubernetes_client import (
    KubernetesPodExecutor,
    KubernetesPodLister,
    KubernetesResourceStore,
    load_api_client,
    load_default_client,
)

__all__ = [
    "KubernetesPodExecutor",
    "KubernetesPodLister",
    "KubernetesResourceStore",
    "load_api_client",
    "load_default_client",
]
