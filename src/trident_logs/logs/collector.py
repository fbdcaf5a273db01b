"""Collector: validate → discover → plan → fetch → write."""

from __future__ import annotations

import logging
from typing import Protocol

from rich.console import Console

from trident_logs.cluster import ClusterContext, OperatingMode, PodQueries, discover_operating_mode
from trident_logs.config import Settings, get_settings
from trident_logs.errors import (
    ArchiveError,
    CollectionError,
    EnumerationError,
    FetchError,
    UnsupportedModeError,
    WriteError,
)
from trident_logs.logs.fetch import LogFetcher
from trident_logs.logs.models import ERRORS_ENTRY, CollectionResult, FetchTarget, LogRequest, RunContext, parse_scope
from trident_logs.logs.plan import build_fetch_plan
from trident_logs.logs.sinks import ArchiveSink, ConsoleSink, archive_filename

logger = logging.getLogger(__name__)


class ClusterQueries(Protocol):
    def list_sidecars(self, pod: str, namespace: str) -> list[str]: ...

    def list_nodes(self, namespace: str) -> dict[str, str]: ...

    def get_node_pod(self, node: str, namespace: str) -> str: ...


class Fetcher(Protocol):
    def fetch(self, pod: str, namespace: str, container: str, previous: bool = False) -> bytes: ...


class LogCollector:
    """Retrieves Trident logs to the console or a support archive."""

    def __init__(
        self,
        settings: Settings | None = None,
        console: Console | None = None,
        cluster: ClusterContext | None = None,
        queries: ClusterQueries | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.console = console or Console()
        self._cluster = cluster
        self._queries = queries
        self._fetcher = fetcher

    def run(self, request: LogRequest) -> CollectionResult:
        """
        Retrieve the logs selected by request. Raises LogsError subclasses for
        invalid input, unsupported mode, enumeration and archive failures, and in
        console mode when any log could not be retrieved.
        """
        parse_scope(request.log_type)

        cluster = self._discover()
        if cluster.mode is not OperatingMode.TUNNEL:
            raise UnsupportedModeError("'tridentctl logs' only supports Trident running in a Kubernetes pod")

        if request.archive:
            return self._archive_logs(request.for_archive(), cluster)
        return self._console_logs(request, cluster)

    def _discover(self) -> ClusterContext:
        if self._cluster is None:
            if self._queries is None and not self.settings.server:
                self._queries = PodQueries(self.settings)
            self._cluster = discover_operating_mode(self.settings, self._queries)
        return self._cluster

    def _cluster_queries(self) -> ClusterQueries:
        if self._queries is None:
            self._queries = PodQueries(self.settings)
        return self._queries

    def _log_fetcher(self, cluster: ClusterContext) -> Fetcher:
        if self._fetcher is None:
            self._fetcher = LogFetcher(cluster.kubernetes_cli, debug=self.settings.debug)
        return self._fetcher

    def _console_logs(self, request: LogRequest, cluster: ClusterContext) -> CollectionResult:
        ctx = RunContext(sink=ConsoleSink(self.console))
        self._collect(request, cluster, ctx)
        if ctx.failures:
            first, *rest = ctx.failures
            for failure in rest:
                ctx.errors.append(str(failure))
            raise EnumerationError(ctx.errors.combine(str(first))) from first
        if ctx.errors:
            raise CollectionError(ctx.errors.combine("failed to retrieve one or more Trident logs"))
        return CollectionResult(written=ctx.written)

    def _archive_logs(self, request: LogRequest, cluster: ClusterContext) -> CollectionResult:
        path = self.settings.output_dir / archive_filename()
        with ArchiveSink(path, self.console) as sink:
            ctx = RunContext(sink=sink)
            self._collect(request, cluster, ctx)
            for failure in ctx.failures:
                ctx.errors.append(str(failure))
            if ctx.errors:
                try:
                    sink.write(ERRORS_ENTRY, ctx.errors.text.encode("utf-8"))
                except WriteError as e:
                    raise ArchiveError(f"could not write log {ERRORS_ENTRY}; {e}") from e
        if ctx.failures:
            raise ctx.failures[0]
        return CollectionResult(written=ctx.written, errors=ctx.errors.text, archive=path)

    def _collect(self, request: LogRequest, cluster: ClusterContext, ctx: RunContext) -> None:
        """Run the fetch plan. Enumeration failures end only their own branch and land in ctx.failures."""
        queries = self._cluster_queries()
        plan = build_fetch_plan(request, cluster, queries, main_container=self.settings.main_container)
        logger.debug("Fetch plan: %s", plan.names())
        fetcher = self._log_fetcher(cluster)
        for target in plan:
            self._fetch_one(fetcher, target.name, target, target.container, ctx)
            if target.sidecars:
                try:
                    sidecars = queries.list_sidecars(target.pod, target.namespace)
                except EnumerationError as e:
                    logger.info("Skipping sidecars of %s: %s", target.name, e)
                    ctx.failures.append(EnumerationError(f"error listing trident sidecar containers; {e}"))
                    continue
                for sidecar in sidecars:
                    self._fetch_one(fetcher, target.sidecar_name(sidecar), target, sidecar, ctx)
        if plan.node_error is not None:
            ctx.failures.append(plan.node_error)

    def _fetch_one(self, fetcher: Fetcher, name: str, target: FetchTarget, container: str, ctx: RunContext) -> None:
        """Fetch one container log and write it; failures go to the error buffer."""
        try:
            content = fetcher.fetch(target.pod, target.namespace, container, target.previous)
        except FetchError as e:
            logger.info("Could not fetch %s log: %s", name, str(e).strip())
            ctx.errors.append(str(e))
            return
        try:
            ctx.sink.write(name, content)
        except WriteError as e:
            ctx.errors.append(f"could not write log {name}; {e}")
            return
        ctx.written.append(name)
