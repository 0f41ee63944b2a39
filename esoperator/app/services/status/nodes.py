"""Projection of internal node state into public node status."""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from esoperator.app.schemas.status import NodeStatus


@dataclass
class ActualNodeResources:
    """
    Kubernetes objects that currently back a node.

    Attributes:
        deployment: Deployment running the node, if any
        replica_set: ReplicaSet owned by the deployment, if any
        stateful_set: StatefulSet running the node, if any
        pod: Pod of the node, if scheduled
    """
    deployment: Optional[Any] = None
    replica_set: Optional[Any] = None
    stateful_set: Optional[Any] = None
    pod: Optional[Any] = None


@dataclass
class DesiredNodeSpec:
    """What the node is meant to be."""
    roles: Optional[List[str]] = None


@dataclass
class NodeState:
    """Actual and desired state of one Elasticsearch node."""
    actual: ActualNodeResources = field(default_factory=ActualNodeResources)
    desired: DesiredNodeSpec = field(default_factory=DesiredNodeSpec)


class NodeStatusProjector:
    """Map node state into the status record written to the resource."""

    def project(self, node: NodeState) -> NodeStatus:
        actual = node.actual
        fields = {}

        if actual.deployment is not None:
            fields["deployment_name"] = actual.deployment.metadata.name

        if actual.replica_set is not None:
            fields["replica_set_name"] = actual.replica_set.metadata.name

        if actual.pod is not None:
            fields["pod_name"] = actual.pod.metadata.name
            if actual.pod.status is not None:
                fields["status"] = actual.pod.status.phase

        if actual.stateful_set is not None:
            fields["stateful_set_name"] = actual.stateful_set.metadata.name

        if node.desired.roles is not None:
            fields["roles"] = list(node.desired.roles)

        return NodeStatus(**fields)
