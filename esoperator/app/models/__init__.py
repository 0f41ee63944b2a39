"""Elasticsearch Operator models package."""

from .enums import ClusterHealth, PodPhase, PodStateType, Role

__all__ = ["ClusterHealth", "PodPhase", "PodStateType", "Role"]
