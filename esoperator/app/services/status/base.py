"""
Core types shared by the status reconciliation services.

This module defines the exceptions, value objects and the abstract
collaborator interfaces (resource store, pod lister, pod executor) used to
compute and commit the status of an Elasticsearch custom resource. Concrete
Kubernetes implementations live in ``esoperator.app.integrations``.
"""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Union


class StatusException(Exception):
    """
    Base exception for status reconciliation errors.

    Attributes:
        message: Error message
        resource: Resource identity (namespace/name) if applicable
        original_error: Original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.resource = resource
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.resource:
            parts.append(f"Resource: {self.resource}")
        if self.original_error:
            parts.append(f"Original error: {str(self.original_error)}")
        return " | ".join(parts)


class StatusFetchError(StatusException):
    """Raised when the custom resource could not be retrieved."""


class StatusConflictError(StatusException):
    """Raised when a commit is rejected because the resource version is stale."""


class StatusCommitError(StatusException):
    """Raised when a commit fails for any reason other than a version conflict."""


class StatusComputeError(StatusException):
    """Raised when the status could not be assembled from its collaborators."""


class StatusRetryExhaustedError(StatusException):
    """Raised when every commit attempt was rejected with a version conflict."""

    def __init__(
        self,
        resource: str,
        attempts: int,
        original_error: Optional[Exception] = None
    ):
        self.attempts = attempts
        super().__init__(
            f"could not update status for Elasticsearch {resource} after {attempts} attempts",
            resource=resource,
            original_error=original_error,
        )


class CredentialModeError(StatusException):
    """Raised when only one of kubeconfig path and master URL is configured."""


class PodListError(StatusException):
    """Raised when pods could not be listed."""


class PodExecError(StatusException):
    """Raised when a command could not be executed inside a pod."""


@dataclass(frozen=True)
class ClusterRef:
    """Identity of an Elasticsearch custom resource."""
    name: str
    namespace: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


def cluster_selector(cluster_name: str) -> str:
    """Label selector matching every pod of an Elasticsearch cluster."""
    return f"component={cluster_name}"


@dataclass(frozen=True)
class InClusterCredentials:
    """Use the service account mounted into the operator pod."""


@dataclass(frozen=True)
class ExternalCredentials:
    """
    Use a kubeconfig file against an explicit API server.

    Attributes:
        path: Path to the kubeconfig file
        endpoint: API server URL
    """
    path: str
    endpoint: str


CredentialMode = Union[InClusterCredentials, ExternalCredentials]


def resolve_credentials(
    kubeconfig_path: Optional[str],
    master_url: Optional[str]
) -> CredentialMode:
    """
    Build the credential mode from the two configuration values.

    Both values must be empty (in-cluster) or both must be set (external).

    Args:
        kubeconfig_path: Kubeconfig path, empty for in-cluster access
        master_url: API server URL, empty for in-cluster access

    Returns:
        The resolved credential mode

    Raises:
        CredentialModeError: If exactly one of the values is set
    """
    if not kubeconfig_path and not master_url:
        return InClusterCredentials()
    if kubeconfig_path and master_url:
        return ExternalCredentials(path=kubeconfig_path, endpoint=master_url)
    raise CredentialModeError(
        "kubeconfig path and master URL must both be empty or both be set"
    )


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with backoff for status commits.

    Attributes:
        max_attempts: Total number of attempts, including the first one
        delay: Initial delay between attempts in seconds
        factor: Multiplier applied to the delay after each attempt
        jitter: Maximum extra delay as a fraction of the current delay
    """
    max_attempts: int = 5
    delay: float = 0.01
    factor: float = 1.0
    jitter: float = 0.1

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @classmethod
    def from_config(cls, config) -> "RetryPolicy":
        """Build a policy from the STATUS_UPDATE_* configuration keys."""
        return cls(
            max_attempts=config.STATUS_UPDATE_MAX_ATTEMPTS,
            delay=config.STATUS_UPDATE_BACKOFF_SECONDS,
            factor=config.STATUS_UPDATE_BACKOFF_FACTOR,
            jitter=config.STATUS_UPDATE_BACKOFF_JITTER,
        )

    def delays(self) -> Iterator[float]:
        """Yield the sleep before each retry (``max_attempts - 1`` values)."""
        current = self.delay
        for _ in range(self.max_attempts - 1):
            extra = random.uniform(0, self.jitter * current) if self.jitter > 0 else 0.0
            yield current + extra
            current *= self.factor


class ResourceStore(ABC):
    """Read and write Elasticsearch custom resources."""

    @abstractmethod
    def get(self, ref: ClusterRef) -> Dict[str, Any]:
        """
        Fetch the latest version of a resource.

        Raises:
            StatusFetchError: If the resource cannot be retrieved
        """

    @abstractmethod
    def update(self, resource: Dict[str, Any]) -> Dict[str, Any]:
        """
        Write a resource previously returned by ``get``.

        Raises:
            StatusConflictError: If the resource changed since it was read
            StatusCommitError: On any other failure
        """


class PodLister(ABC):
    """List pods by label selector."""

    @abstractmethod
    def list_pods(
        self,
        namespace: str,
        label_selector: str,
        field_selector: Optional[str] = None
    ) -> List[Any]:
        """
        List pods in ``namespace`` matching the selectors.

        Raises:
            PodListError: If the listing fails
        """


class PodExecutor(ABC):
    """Run commands inside pod containers."""

    @abstractmethod
    def exec(
        self,
        pod: Any,
        container: str,
        command: List[str],
        credentials: CredentialMode
    ) -> str:
        """
        Execute ``command`` in ``container`` of ``pod`` and return its stdout.

        Raises:
            PodExecError: If the command cannot run or exits non-zero
        """
