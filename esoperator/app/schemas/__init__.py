"""Pydantic schemas for the Elasticsearch custom resource."""

from .status import ClusterStatus, NodeStatus, PodStateMap

__all__ = ["ClusterStatus", "NodeStatus", "PodStateMap"]
