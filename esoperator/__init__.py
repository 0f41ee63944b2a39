"""Elasticsearch operator status reconciliation."""

__version__ = "0.1.0"
