import pytest

from conftest import FakeQueries
from trident_logs.errors import EnumerationError
from trident_logs.logs import LogRequest, build_fetch_plan

NODES = {"worker-2": "trident-node-bbb", "worker-1": "trident-node-aaa"}


def _names(plan) -> list[str]:
    return [t.name for t in plan]


@pytest.mark.parametrize("log_type", ["trident", "auto"])
def test_controller_only_without_node(cluster, log_type: str) -> None:
    queries = FakeQueries(nodes=NODES)
    plan = build_fetch_plan(LogRequest(log_type=log_type), cluster, queries)
    assert _names(plan) == ["trident-controller"]
    assert plan.targets[0].pod == "trident-controller-abc"
    assert plan.targets[0].container == "trident-main"
    assert plan.targets[0].previous is False
    assert queries.calls == []


@pytest.mark.parametrize("log_type", ["trident", "auto"])
def test_named_node_only(cluster, log_type: str) -> None:
    queries = FakeQueries(nodes=NODES)
    plan = build_fetch_plan(LogRequest(log_type=log_type, node="worker-1"), cluster, queries)
    assert _names(plan) == ["trident-node-worker-1"]
    assert plan.targets[0].pod == "trident-node-aaa"


def test_all_without_node_covers_every_node(cluster) -> None:
    queries = FakeQueries(nodes=NODES)
    plan = build_fetch_plan(LogRequest(log_type="all"), cluster, queries)
    assert _names(plan) == ["trident-controller", "trident-node-worker-1", "trident-node-worker-2"]
    assert queries.calls == ["nodes"]


def test_all_with_node_is_controller_and_that_node(cluster) -> None:
    queries = FakeQueries(nodes=NODES)
    plan = build_fetch_plan(LogRequest(log_type="all", node="worker-2"), cluster, queries)
    assert _names(plan) == ["trident-controller", "trident-node-worker-2"]
    assert queries.calls == ["node:worker-2"]


def test_previous_repeats_the_set_with_suffix(cluster) -> None:
    queries = FakeQueries(nodes=NODES)
    plan = build_fetch_plan(LogRequest(log_type="all", previous=True, sidecars=True), cluster, queries)
    assert _names(plan) == [
        "trident-controller",
        "trident-node-worker-1",
        "trident-node-worker-2",
        "trident-controller-previous",
        "trident-node-worker-1-previous",
        "trident-node-worker-2-previous",
    ]
    assert [t.previous for t in plan] == [False] * 3 + [True] * 3
    assert all(t.sidecars for t in plan)
    # node pods are looked up once for both instances
    assert queries.calls == ["nodes"]


def test_main_container_is_configurable(cluster) -> None:
    plan = build_fetch_plan(LogRequest(), cluster, FakeQueries(), main_container="main")
    assert plan.targets[0].container == "main"


def test_named_node_lookup_failure_keeps_controller_rows(cluster) -> None:
    plan = build_fetch_plan(LogRequest(log_type="all", node="missing", previous=True), cluster, FakeQueries(nodes=NODES))
    assert plan.names() == ["trident-controller", "trident-controller-previous"]
    assert isinstance(plan.node_error, EnumerationError)
    assert str(plan.node_error).startswith("error listing trident node pods; no Trident node pod found")


def test_node_listing_failure_keeps_controller_rows(cluster) -> None:
    plan = build_fetch_plan(LogRequest(log_type="all"), cluster, FakeQueries(fail_nodes=True))
    assert plan.names() == ["trident-controller"]
    assert "error listing trident node pods" in str(plan.node_error)


def test_node_only_request_with_failed_lookup_is_empty(cluster) -> None:
    plan = build_fetch_plan(LogRequest(log_type="trident", node="missing"), cluster, FakeQueries(nodes=NODES))
    assert plan.targets == []
    assert plan.node_error is not None


def test_successful_plan_has_no_node_error(cluster) -> None:
    assert build_fetch_plan(LogRequest(log_type="all"), cluster, FakeQueries(nodes=NODES)).node_error is None
