"""Look up Trident pods and containers through the Kubernetes API."""

from __future__ import annotations

import logging
from typing import Any

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from trident_logs.config import Settings
from trident_logs.errors import DiscoveryError, EnumerationError

logger = logging.getLogger(__name__)


def _load_kube_config(kubeconfig_path: str | None, context: str | None) -> client.Configuration:
    """Load in-cluster or kubeconfig-based configuration."""
    try:
        config.load_incluster_config()
        return client.Configuration.get_default_copy()
    except config.ConfigException:
        pass
    kwargs: dict[str, Any] = {}
    if kubeconfig_path:
        kwargs["config_file"] = str(kubeconfig_path)
    if context:
        kwargs["context"] = context
    config.load_kube_config(**kwargs)
    return client.Configuration.get_default_copy()


def current_namespace(kubeconfig_path: str | None = None, context: str | None = None) -> str | None:
    """Return the namespace of the active (or named) kubeconfig context, if it sets one."""
    try:
        contexts, active = config.list_kube_config_contexts(
            config_file=str(kubeconfig_path) if kubeconfig_path else None
        )
    except (config.ConfigException, OSError):
        return None
    if context:
        active = next((c for c in contexts if c.get("name") == context), None)
    if not active:
        return None
    return (active.get("context") or {}).get("namespace")


def _live_pods(items: list[Any]) -> list[Any]:
    """Drop pods that are being deleted."""
    return [p for p in items if getattr(p.metadata, "deletion_timestamp", None) is None]


class PodQueries:
    """Queries over the running Trident pod set."""

    def __init__(
        self,
        settings: Settings,
        core: client.CoreV1Api | None = None,
    ) -> None:
        self.settings = settings
        if core is None:
            kubeconfig = str(settings.kubeconfig) if settings.kubeconfig else None
            try:
                cfg = _load_kube_config(kubeconfig, settings.context)
            except config.ConfigException as e:
                raise DiscoveryError(f"could not load Kubernetes configuration; {e}") from e
            core = client.CoreV1Api(client.ApiClient(cfg))
        self._core = core

    def find_controller_pod(self, namespace: str, search_all: bool = False) -> tuple[str, str]:
        """Return (pod, namespace) of the Trident controller.

        With search_all, every namespace is tried when none is found in namespace.
        """
        selector = self.settings.controller_selector
        try:
            pods = _live_pods(
                self._core.list_namespaced_pod(namespace=namespace, label_selector=selector).items
            )
            if not pods and search_all:
                logger.debug("No Trident pod in namespace %s, searching all namespaces", namespace)
                pods = _live_pods(self._core.list_pod_for_all_namespaces(label_selector=selector).items)
        except ApiException as e:
            raise DiscoveryError(f"could not list Trident controller pods; {e.reason}") from e
        if not pods:
            raise DiscoveryError(f"could not find a Trident pod in the {namespace} namespace")
        if len(pods) > 1:
            logger.warning("Found %d Trident controller pods, using %s", len(pods), pods[0].metadata.name)
        pod = pods[0]
        return pod.metadata.name, pod.metadata.namespace or namespace

    def list_sidecars(self, pod: str, namespace: str) -> list[str]:
        """Return names of every container in pod other than the main Trident container."""
        try:
            obj = self._core.read_namespaced_pod(name=pod, namespace=namespace)
        except ApiException as e:
            raise EnumerationError(f"could not read pod {pod}; {e.reason}") from e
        containers = getattr(obj.spec, "containers", []) or []
        return [c.name for c in containers if c.name != self.settings.main_container]

    def list_nodes(self, namespace: str) -> dict[str, str]:
        """Return node name -> Trident node pod name."""
        try:
            pods = self._core.list_namespaced_pod(
                namespace=namespace,
                label_selector=self.settings.node_selector,
            ).items
        except ApiException as e:
            raise EnumerationError(f"could not list Trident node pods; {e.reason}") from e
        nodes: dict[str, str] = {}
        for pod in _live_pods(pods):
            node_name = getattr(pod.spec, "node_name", None)
            if node_name:
                nodes[node_name] = pod.metadata.name
        if not nodes:
            raise EnumerationError(f"no Trident node pods found in the {namespace} namespace")
        return nodes

    def get_node_pod(self, node: str, namespace: str) -> str:
        """Return the Trident node pod scheduled on node."""
        try:
            pods = self._core.list_namespaced_pod(
                namespace=namespace,
                label_selector=self.settings.node_selector,
                field_selector=f"spec.nodeName={node}",
            ).items
        except ApiException as e:
            raise EnumerationError(f"could not list Trident node pods; {e.reason}") from e
        pods = _live_pods(pods)
        if not pods:
            raise EnumerationError(f"no Trident node pod found on node {node}")
        return pods[0].metadata.name
