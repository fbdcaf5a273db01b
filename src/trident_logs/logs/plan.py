"""Resolve a log request into the ordered list of containers to fetch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Protocol

from trident_logs.cluster.models import ClusterContext
from trident_logs.errors import EnumerationError
from trident_logs.logs.models import (
    LOG_NAME_CONTROLLER,
    LOG_NAME_NODE,
    PREVIOUS_SUFFIX,
    FetchTarget,
    LogRequest,
    LogScope,
    parse_scope,
)


class NodeLookup(Protocol):
    def list_nodes(self, namespace: str) -> dict[str, str]: ...

    def get_node_pod(self, node: str, namespace: str) -> str: ...


def _node_pods(request: LogRequest, scope: LogScope, cluster: ClusterContext, nodes: NodeLookup) -> dict[str, str]:
    """Return node -> pod for the node logs the request asks for."""
    if request.node:
        try:
            return {request.node: nodes.get_node_pod(request.node, cluster.namespace)}
        except EnumerationError as e:
            raise EnumerationError(f"error listing trident node pods; {e}") from e
    if scope is LogScope.ALL:
        try:
            listed = nodes.list_nodes(cluster.namespace)
        except EnumerationError as e:
            raise EnumerationError(f"error listing trident node pods; {e}") from e
        return dict(sorted(listed.items()))
    return {}


@dataclass
class FetchPlan:
    """Targets to fetch, plus the node lookup failure that cut the node branch, if any."""

    targets: list[FetchTarget] = field(default_factory=list)
    node_error: EnumerationError | None = None

    def __iter__(self) -> Iterator[FetchTarget]:
        return iter(self.targets)

    def names(self) -> list[str]:
        return [t.name for t in self.targets]


def build_fetch_plan(
    request: LogRequest,
    cluster: ClusterContext,
    nodes: NodeLookup,
    main_container: str = "trident-main",
) -> FetchPlan:
    """
    Build the fetch plan for a request: the controller and/or node logs selected by
    scope and node, repeated for the previous instance when requested.

    A failed node lookup only drops the node rows; it is kept on the plan as
    node_error so the controller rows still run.
    """
    scope = parse_scope(request.log_type)
    with_controller = scope is LogScope.ALL or not request.node
    plan = FetchPlan()
    try:
        node_pods = _node_pods(request, scope, cluster, nodes)
    except EnumerationError as e:
        node_pods = {}
        plan.node_error = e

    for previous in ([False, True] if request.previous else [False]):
        suffix = PREVIOUS_SUFFIX if previous else ""
        if with_controller:
            plan.targets.append(
                FetchTarget(
                    name=LOG_NAME_CONTROLLER + suffix,
                    pod=cluster.controller_pod or "",
                    namespace=cluster.namespace,
                    container=main_container,
                    previous=previous,
                    sidecars=request.sidecars,
                )
            )
        for node, pod in node_pods.items():
            plan.targets.append(
                FetchTarget(
                    name=f"{LOG_NAME_NODE}-{node}{suffix}",
                    pod=pod,
                    namespace=cluster.namespace,
                    container=main_container,
                    previous=previous,
                    sidecars=request.sidecars,
                )
            )
    return plan
