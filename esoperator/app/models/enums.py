"""Elasticsearch Operator Enumeration Types"""

from enum import Enum


class Role(Enum):
    """Elasticsearch node roles"""
    CLIENT = "client"
    DATA = "data"
    MASTER = "master"

    @property
    def label(self) -> str:
        """Pod label selecting members of this role."""
        return f"es-node-{self.value}=true"


class PodStateType(Enum):
    """Readiness buckets reported per role"""
    READY = "ready"
    NOT_READY = "notReady"
    FAILED = "failed"


class PodPhase(Enum):
    """Kubernetes pod lifecycle phases"""
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"


class ClusterHealth(Enum):
    """Sentinel health values reported when Elasticsearch cannot answer"""
    # No running pods yet
    NOT_RUNNING = ""
    # Pods exist but the health API could not be queried
    UNKNOWN = "unknown"
