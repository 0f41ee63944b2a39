"""Elasticsearch Operator application package

Holds configuration, status schemas, reconciliation services and the
Kubernetes integrations they run on.
"""

import logging

from esoperator.app.config import get_config


def configure_logging(config=None):
    """
    Configure root logging from LOG_LEVEL and LOG_FORMAT.

    Args:
        config: Configuration class; defaults to ``get_config()``
    """
    if config is None:
        config = get_config()

    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format=config.LOG_FORMAT,
    )
    # The kubernetes client logs every request at debug
    logging.getLogger("kubernetes").setLevel(logging.WARNING)
