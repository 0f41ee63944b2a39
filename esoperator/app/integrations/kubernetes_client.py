"""Kubernetes-backed collaborators for status reconciliation."""
import logging
from typing import Any, Dict, List, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.stream import stream
from websocket import WebSocketException

from esoperator.app.services.status.base import (
    ClusterRef,
    CredentialMode,
    ExternalCredentials,
    PodExecError,
    PodExecutor,
    PodLister,
    PodListError,
    ResourceStore,
    StatusCommitError,
    StatusConflictError,
    StatusFetchError,
)

logger = logging.getLogger(__name__)


def load_api_client(credentials: CredentialMode) -> client.ApiClient:
    """Build an API client for the given credential mode.

    Args:
        credentials: In-cluster or external credentials

    Returns:
        Configured API client
    """
    configuration = client.Configuration()
    if isinstance(credentials, ExternalCredentials):
        config.load_kube_config(
            config_file=credentials.path,
            client_configuration=configuration,
        )
        configuration.host = credentials.endpoint
    else:
        config.load_incluster_config(client_configuration=configuration)
    return client.ApiClient(configuration)


def load_default_client(kubeconfig_path: Optional[str] = None) -> client.ApiClient:
    """Build the operator's own API client.

    Uses the kubeconfig file when a path is given, otherwise the in-cluster
    service account, falling back to the default kubeconfig.
    """
    configuration = client.Configuration()
    if kubeconfig_path:
        config.load_kube_config(
            config_file=kubeconfig_path,
            client_configuration=configuration,
        )
    else:
        try:
            config.load_incluster_config(client_configuration=configuration)
        except config.ConfigException:
            config.load_kube_config(client_configuration=configuration)
    return client.ApiClient(configuration)


class KubernetesResourceStore(ResourceStore):
    """Elasticsearch custom resources stored in the Kubernetes API."""

    def __init__(
        self,
        api_client: client.ApiClient,
        group: str = "logging.openshift.io",
        version: str = "v1",
        plural: str = "elasticsearches",
        status_subresource: bool = True,
        request_timeout: Optional[int] = None
    ):
        """Initialize the store.

        Args:
            api_client: Kubernetes API client
            group: Custom resource API group
            version: Custom resource API version
            plural: Custom resource plural name
            status_subresource: Write through the /status subresource
            request_timeout: Per-request timeout in seconds
        """
        self.custom_objects = client.CustomObjectsApi(api_client)
        self.group = group
        self.version = version
        self.plural = plural
        self.status_subresource = status_subresource
        self.request_timeout = request_timeout

    def _request_kwargs(self) -> Dict[str, Any]:
        if self.request_timeout:
            return {"_request_timeout": self.request_timeout}
        return {}

    def get(self, ref: ClusterRef) -> Dict[str, Any]:
        try:
            return self.custom_objects.get_namespaced_custom_object(
                group=self.group,
                version=self.version,
                namespace=ref.namespace,
                plural=self.plural,
                name=ref.name,
                **self._request_kwargs()
            )
        except ApiException as e:
            raise StatusFetchError(
                f"failed to get {self.plural}.{self.group}",
                resource=str(ref),
                original_error=e,
            ) from e

    def update(self, resource: Dict[str, Any]) -> Dict[str, Any]:
        metadata = resource.get("metadata", {})
        ref = ClusterRef(name=metadata.get("name", ""), namespace=metadata.get("namespace", ""))

        if self.status_subresource:
            replace = self.custom_objects.replace_namespaced_custom_object_status
        else:
            replace = self.custom_objects.replace_namespaced_custom_object

        try:
            return replace(
                group=self.group,
                version=self.version,
                namespace=ref.namespace,
                plural=self.plural,
                name=ref.name,
                body=resource,
                **self._request_kwargs()
            )
        except ApiException as e:
            if e.status == 409:  # resourceVersion changed since get
                raise StatusConflictError(
                    "resource version conflict",
                    resource=str(ref),
                    original_error=e,
                ) from e
            raise StatusCommitError(
                f"failed to update {self.plural}.{self.group}",
                resource=str(ref),
                original_error=e,
            ) from e


class KubernetesPodLister(PodLister):
    """List pods through the core v1 API."""

    def __init__(self, api_client: client.ApiClient, request_timeout: Optional[int] = None):
        self.core_v1 = client.CoreV1Api(api_client)
        self.request_timeout = request_timeout

    def list_pods(
        self,
        namespace: str,
        label_selector: str,
        field_selector: Optional[str] = None
    ) -> List[client.V1Pod]:
        kwargs = {"label_selector": label_selector}
        if field_selector:
            kwargs["field_selector"] = field_selector
        if self.request_timeout:
            kwargs["_request_timeout"] = self.request_timeout

        try:
            return self.core_v1.list_namespaced_pod(namespace, **kwargs).items
        except ApiException as e:
            raise PodListError(
                f"failed to list pods with selector {label_selector}",
                resource=namespace,
                original_error=e,
            ) from e


class KubernetesPodExecutor(PodExecutor):
    """Run commands in pods over the exec websocket."""

    def __init__(self, timeout: int = 30):
        """Initialize the executor.

        Args:
            timeout: Seconds to wait for the command to finish
        """
        self.timeout = timeout

    def exec(
        self,
        pod: client.V1Pod,
        container: str,
        command: List[str],
        credentials: CredentialMode
    ) -> str:
        name = pod.metadata.name
        namespace = pod.metadata.namespace
        pod_id = f"{namespace}/{name}"

        try:
            with load_api_client(credentials) as api_client:
                core_v1 = client.CoreV1Api(api_client)
                resp = stream(
                    core_v1.connect_get_namespaced_pod_exec,
                    name,
                    namespace,
                    container=container,
                    command=command,
                    stderr=True,
                    stdin=False,
                    stdout=True,
                    tty=False,
                    _preload_content=False,
                )
                try:
                    resp.run_forever(timeout=self.timeout)
                    if resp.is_open():
                        raise PodExecError(
                            f"{command[0]} did not finish within {self.timeout}s",
                            resource=pod_id,
                        )
                    stdout = resp.read_stdout()
                    stderr = resp.read_stderr()
                    returncode = resp.returncode
                finally:
                    resp.close()
        except (ApiException, config.ConfigException, WebSocketException, OSError) as e:
            raise PodExecError(
                f"failed to exec {command[0]} in container {container}",
                resource=pod_id,
                original_error=e,
            ) from e

        if returncode:
            raise PodExecError(
                f"{command[0]} exited with code {returncode}: {stderr.strip()}",
                resource=pod_id,
            )
        return stdout
