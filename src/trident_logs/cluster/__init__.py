"""Cluster layer: operating mode discovery and Trident pod lookups."""

from trident_logs.cluster.mode import discover_operating_mode
from trident_logs.cluster.models import ClusterContext, OperatingMode
from trident_logs.cluster.queries import PodQueries

__all__ = [
    "ClusterContext",
    "OperatingMode",
    "PodQueries",
    "discover_operating_mode",
]
