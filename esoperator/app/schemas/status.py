"""Pydantic schemas for the Elasticsearch custom resource status.

These models describe the ``status`` sub-document the operator writes back to
the Elasticsearch custom resource on every reconciliation cycle. Field aliases
match the camelCase keys of the CRD schema.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from esoperator.app.models.enums import PodStateType, Role


class PodStateMap(BaseModel):
    """Pod names of one role grouped by readiness.

    Attributes:
        ready: Running pods whose containers are all ready
        not_ready: Pending pods and running pods with an unready container
        failed: Pods in the Failed phase
    """

    ready: List[str] = Field(default_factory=list, description="Ready pod names")
    not_ready: List[str] = Field(default_factory=list, alias="notReady", description="Not ready pod names")
    failed: List[str] = Field(default_factory=list, description="Failed pod names")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"ready": ["es-data-0"], "notReady": [], "failed": []}]},
    )

    def add(self, state: PodStateType, pod_name: str) -> None:
        """Append a pod name to the bucket for ``state``."""
        if state is PodStateType.READY:
            self.ready.append(pod_name)
        elif state is PodStateType.NOT_READY:
            self.not_ready.append(pod_name)
        else:
            self.failed.append(pod_name)


class NodeStatus(BaseModel):
    """Public status of one Elasticsearch node.

    Every field is optional: a node that is still being created may own some
    Kubernetes resources and not others.
    """

    deployment_name: Optional[str] = Field(default=None, alias="deploymentName")
    replica_set_name: Optional[str] = Field(default=None, alias="replicaSetName")
    stateful_set_name: Optional[str] = Field(default=None, alias="statefulSetName")
    pod_name: Optional[str] = Field(default=None, alias="podName")
    status: Optional[str] = Field(default=None, description="Pod phase")
    roles: Optional[List[str]] = Field(default=None, description="Desired node roles")

    model_config = ConfigDict(populate_by_name=True)


class ClusterStatus(BaseModel):
    """Status document of an Elasticsearch cluster.

    Attributes:
        health: Health reported by Elasticsearch, or a sentinel when unavailable
        nodes: Per-node status in node order
        pods: Per-role pod readiness
    """

    health: str = Field(default="", alias="clusterHealth")
    nodes: List[NodeStatus] = Field(default_factory=list)
    pods: Dict[Role, PodStateMap] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> Dict[str, Any]:
        """Serialize into the camelCase ``status`` sub-document of the resource."""
        return {
            "clusterHealth": self.health,
            "nodes": [
                node.model_dump(mode="json", by_alias=True, exclude_none=True)
                for node in self.nodes
            ],
            "pods": {
                role.value: state.model_dump(mode="json", by_alias=True)
                for role, state in self.pods.items()
            },
        }
