"""Shared fakes for the Kubernetes CLI and cluster lookups."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from trident_logs.cluster import ClusterContext, OperatingMode
from trident_logs.config import Settings
from trident_logs.errors import EnumerationError, FetchError


class FakeFetcher:
    """Returns canned logs keyed by (pod, container, previous); unknown keys fail like kubectl."""

    def __init__(self, logs: dict[tuple[str, str, bool], bytes] | None = None) -> None:
        self.logs = logs or {}
        self.calls: list[tuple[str, str, str, bool]] = []

    def fetch(self, pod: str, namespace: str, container: str, previous: bool = False) -> bytes:
        self.calls.append((pod, namespace, container, previous))
        key = (pod, container, previous)
        if key not in self.logs:
            raise FetchError(f'Error from server (BadRequest): container "{container}" in pod "{pod}" not found.')
        return self.logs[key]


class FakeQueries:
    def __init__(
        self,
        nodes: dict[str, str] | None = None,
        sidecars: dict[str, list[str]] | None = None,
        fail_sidecars: bool = False,
        fail_nodes: bool = False,
        sidecar_failures: tuple[str, ...] = (),
    ) -> None:
        self.nodes = nodes or {}
        self.sidecars = sidecars or {}
        self.fail_sidecars = fail_sidecars
        self.fail_nodes = fail_nodes
        self.sidecar_failures = set(sidecar_failures)
        self.calls: list[str] = []

    def list_sidecars(self, pod: str, namespace: str) -> list[str]:
        self.calls.append(f"sidecars:{pod}")
        if self.fail_sidecars or pod in self.sidecar_failures:
            raise EnumerationError(f"could not read pod {pod}; Forbidden")
        return list(self.sidecars.get(pod, []))

    def list_nodes(self, namespace: str) -> dict[str, str]:
        self.calls.append("nodes")
        if self.fail_nodes:
            raise EnumerationError("could not list Trident node pods; Forbidden")
        return dict(self.nodes)

    def get_node_pod(self, node: str, namespace: str) -> str:
        self.calls.append(f"node:{node}")
        if self.fail_nodes or node not in self.nodes:
            raise EnumerationError(f"no Trident node pod found on node {node}")
        return self.nodes[node]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(_env_file=None, output_dir=tmp_path, namespace="trident")


@pytest.fixture
def cluster() -> ClusterContext:
    return ClusterContext(
        mode=OperatingMode.TUNNEL,
        kubernetes_cli="kubectl",
        namespace="trident",
        controller_pod="trident-controller-abc",
    )


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(output) -> Console:
    return Console(file=output, width=200)
