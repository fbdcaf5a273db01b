"""Logs layer: plan, fetch and write Trident container logs."""

from trident_logs.logs.collector import LogCollector
from trident_logs.logs.models import CollectionResult, ErrorBuffer, FetchTarget, LogRequest, LogScope
from trident_logs.logs.plan import FetchPlan, build_fetch_plan

__all__ = [
    "CollectionResult",
    "ErrorBuffer",
    "FetchPlan",
    "FetchTarget",
    "LogCollector",
    "LogRequest",
    "LogScope",
    "build_fetch_plan",
]
