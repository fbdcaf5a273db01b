"""Retrieve container logs by invoking the Kubernetes CLI."""

from __future__ import annotations

import logging
import subprocess

from trident_logs.errors import FetchError

logger = logging.getLogger(__name__)


def logs_command(cli: str, pod: str, namespace: str, container: str, previous: bool) -> list[str]:
    """Build the argument vector for one `logs` call."""
    return [cli, "logs", pod, "-n", namespace, "-c", container, f"--previous={str(previous).lower()}"]


class LogFetcher:
    """Runs `<cli> logs` and returns the combined output."""

    def __init__(self, kubernetes_cli: str = "kubectl", debug: bool = False) -> None:
        self.kubernetes_cli = kubernetes_cli
        self.debug = debug

    def fetch(self, pod: str, namespace: str, container: str, previous: bool = False) -> bytes:
        """
        Return the log of one container. Raises FetchError carrying the CLI output
        when the command exits non-zero or cannot be started.
        """
        cmd = logs_command(self.kubernetes_cli, pod, namespace, container, previous)
        if self.debug:
            logger.debug("Invoking command: %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError as e:
            raise FetchError(f"could not run {self.kubernetes_cli}; {e}") from e
        if proc.returncode != 0:
            output = proc.stdout.decode("utf-8", errors="replace")
            logger.debug("%s exited with status %d for %s/%s", self.kubernetes_cli, proc.returncode, pod, container)
            raise FetchError(output or f"{self.kubernetes_cli} exited with status {proc.returncode}")
        return proc.stdout
