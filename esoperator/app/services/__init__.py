"""
Services package for the Elasticsearch operator.

This package contains business logic services including:
- Status: cluster health, node status and pod readiness reconciliation
"""

__all__ = []
