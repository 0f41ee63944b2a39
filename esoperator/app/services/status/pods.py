"""Per-role pod readiness for an Elasticsearch cluster."""

import logging
from typing import Any, Dict, Iterable, Optional

from esoperator.app.models.enums import PodPhase, PodStateType, Role
from esoperator.app.schemas.status import PodStateMap

from .base import PodLister, cluster_selector

logger = logging.getLogger(__name__)


def is_pod_ready(pod: Any) -> bool:
    """True when every container of ``pod`` reports ready."""
    statuses = pod.status.container_statuses or []
    return all(container.ready for container in statuses)


def pod_state(pod: Any) -> Optional[PodStateType]:
    """Readiness bucket for ``pod``, or None for phases that are not reported.

    Succeeded and Unknown pods are not counted in any bucket.
    """
    phase = pod.status.phase if pod.status else None
    if phase == PodPhase.PENDING.value:
        return PodStateType.NOT_READY
    if phase == PodPhase.RUNNING.value:
        return PodStateType.READY if is_pod_ready(pod) else PodStateType.NOT_READY
    if phase == PodPhase.FAILED.value:
        return PodStateType.FAILED
    return None


def pod_state_map(pods: Iterable[Any]) -> PodStateMap:
    """Bucket ``pods`` by readiness, keeping listing order."""
    state_map = PodStateMap()
    for pod in pods:
        state = pod_state(pod)
        if state is not None:
            state_map.add(state, pod.metadata.name)
    return state_map


class PodRoleAggregator:
    """Group the pods of a cluster by role and readiness."""

    def __init__(self, pod_lister: PodLister):
        self.pod_lister = pod_lister

    def aggregate(self, namespace: str, cluster_name: str) -> Dict[Role, PodStateMap]:
        """
        Build the readiness map of every role.

        A role whose pods cannot be listed is reported with empty buckets.

        Args:
            namespace: Cluster namespace
            cluster_name: Cluster name

        Returns:
            Mapping of each role to its pod state map
        """
        result = {}
        for role in Role:
            selector = f"{cluster_selector(cluster_name)},{role.label}"
            try:
                pods = self.pod_lister.list_pods(namespace, selector)
            except Exception as e:
                logger.debug(
                    f"Could not list {role.value} pods for {namespace}/{cluster_name}: {e}"
                )
                pods = []
            result[role] = pod_state_map(pods)
        return result
