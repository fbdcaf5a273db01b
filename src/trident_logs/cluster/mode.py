"""Discover whether Trident can be reached through a Kubernetes pod."""

from __future__ import annotations

import logging
import shutil

from trident_logs.cluster.models import ClusterContext, OperatingMode
from trident_logs.cluster.queries import PodQueries, current_namespace
from trident_logs.config import Settings
from trident_logs.errors import DiscoveryError

logger = logging.getLogger(__name__)

KUBERNETES_CLIS = ("kubectl", "oc")
DEFAULT_NAMESPACE = "default"


def find_kubernetes_cli(preferred: str | None = None) -> str:
    """Return the Kubernetes CLI to invoke."""
    if preferred:
        if shutil.which(preferred) is None:
            raise DiscoveryError(f"could not find the Kubernetes CLI {preferred}")
        return preferred
    for cli in KUBERNETES_CLIS:
        if shutil.which(cli):
            return cli
    raise DiscoveryError("could not find the Kubernetes CLI; install kubectl or oc")


def discover_operating_mode(settings: Settings, queries: PodQueries | None = None) -> ClusterContext:
    """
    Work out how to reach Trident: direct to a configured server, or through the
    controller pod in a Kubernetes namespace.
    """
    if settings.server:
        logger.debug("Trident server %s configured, using direct mode", settings.server)
        return ClusterContext(mode=OperatingMode.DIRECT, server=settings.server)

    cli = find_kubernetes_cli(settings.kubernetes_cli)
    kubeconfig = str(settings.kubeconfig) if settings.kubeconfig else None
    namespace = settings.namespace or current_namespace(kubeconfig, settings.context) or DEFAULT_NAMESPACE

    pods = queries or PodQueries(settings)
    pod, pod_namespace = pods.find_controller_pod(namespace, search_all=not settings.namespace)
    logger.debug("Using Trident pod %s in namespace %s via %s", pod, pod_namespace, cli)
    return ClusterContext(
        mode=OperatingMode.TUNNEL,
        kubernetes_cli=cli,
        namespace=pod_namespace,
        controller_pod=pod,
    )
