"""
Status reconciliation for Elasticsearch custom resources.

Each call to :meth:`StatusReconciler.update_status` recomputes the full status
of a cluster (health, node status and per-role pod readiness) and overwrites
the ``status`` of the latest version of the custom resource. Version conflicts
are retried with a bounded backoff, refetching and recomputing on every
attempt.
"""

import logging
import time
from typing import Callable, Optional, Sequence

from esoperator.app.schemas.status import ClusterStatus

from .base import (
    ClusterRef,
    ResourceStore,
    RetryPolicy,
    StatusCommitError,
    StatusComputeError,
    StatusConflictError,
    StatusException,
    StatusFetchError,
    StatusRetryExhaustedError,
)
from .health import ClusterHealthProbe
from .nodes import NodeState, NodeStatusProjector
from .pods import PodRoleAggregator

logger = logging.getLogger(__name__)


class StatusReconciler:
    """Compute and commit the status of an Elasticsearch cluster."""

    def __init__(
        self,
        store: ResourceStore,
        health_probe: ClusterHealthProbe,
        pod_aggregator: PodRoleAggregator,
        projector: Optional[NodeStatusProjector] = None,
        nodes: Sequence[NodeState] = (),
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the reconciler.

        Args:
            store: Custom resource store
            health_probe: Cluster health probe
            pod_aggregator: Per-role pod readiness aggregator
            projector: Node status projector
            nodes: Known node states, projected in order on every cycle
            retry_policy: Conflict retry policy
            sleep: Called with the backoff delay between conflicting attempts
        """
        self.store = store
        self.health_probe = health_probe
        self.pod_aggregator = pod_aggregator
        self.projector = projector or NodeStatusProjector()
        self.nodes = nodes
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    def compute_status(self, ref: ClusterRef) -> ClusterStatus:
        """Build the status of ``ref`` from scratch."""
        return ClusterStatus(
            health=self.health_probe.health(ref.name, ref.namespace),
            nodes=[self.projector.project(node) for node in self.nodes],
            pods=self.pod_aggregator.aggregate(ref.namespace, ref.name),
        )

    def update_status(self, ref: ClusterRef) -> None:
        """
        Recompute and commit the status of ``ref``.

        Args:
            ref: Elasticsearch resource to update

        Raises:
            StatusFetchError: If the resource could not be read
            StatusComputeError: If a collaborator failed while building the status
            StatusCommitError: If the commit failed for a reason other than a conflict
            StatusRetryExhaustedError: If every attempt ended in a version conflict
        """
        resource_id = str(ref)
        delays = self.retry_policy.delays()
        last_conflict = None

        for attempt in range(1, self.retry_policy.max_attempts + 1):
            resource = self._fetch(ref)
            resource["status"] = self._compute(ref)

            try:
                self._commit(resource, resource_id)
            except StatusConflictError as e:
                logger.debug(
                    f"Conflict updating Elasticsearch {resource_id} status "
                    f"(attempt {attempt}/{self.retry_policy.max_attempts}): {e}"
                )
                last_conflict = e
                delay = next(delays, None)
                if delay:
                    self._sleep(delay)
                continue

            logger.debug(f"Updated Elasticsearch {resource_id} after {attempt - 1} retries")
            return

        error = StatusRetryExhaustedError(
            resource_id, self.retry_policy.max_attempts, original_error=last_conflict
        )
        logger.error(str(error))
        raise error

    def _fetch(self, ref: ClusterRef) -> dict:
        try:
            return self.store.get(ref)
        except StatusFetchError as e:
            logger.debug(f"Could not get Elasticsearch {ref}: {e}")
            raise
        except Exception as e:
            logger.debug(f"Could not get Elasticsearch {ref}: {e}")
            raise StatusFetchError(
                "failed to get Elasticsearch resource",
                resource=str(ref),
                original_error=e,
            ) from e

    def _compute(self, ref: ClusterRef) -> dict:
        try:
            return self.compute_status(ref).to_document()
        except StatusException:
            raise
        except Exception as e:
            logger.warning(f"Failed to compute Elasticsearch {ref} status: {e}")
            raise StatusComputeError(
                "failed to compute Elasticsearch status",
                resource=str(ref),
                original_error=e,
            ) from e

    def _commit(self, resource: dict, resource_id: str) -> None:
        try:
            self.store.update(resource)
        except StatusConflictError:
            raise
        except StatusCommitError as e:
            logger.warning(f"Failed to update Elasticsearch {resource_id} status: {e}")
            raise
        except Exception as e:
            logger.warning(f"Failed to update Elasticsearch {resource_id} status: {e}")
            raise StatusCommitError(
                "failed to update Elasticsearch status",
                resource=resource_id,
                original_error=e,
            ) from e
