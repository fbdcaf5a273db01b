"""Models describing how the tool reaches Trident."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class OperatingMode(str, Enum):
    """How the tool talks to Trident."""

    DIRECT = "direct"  # REST server address configured
    TUNNEL = "tunnel"  # Trident runs in a Kubernetes pod


class ClusterContext(BaseModel):
    """Outcome of operating mode discovery."""

    mode: OperatingMode
    kubernetes_cli: str = Field(default="kubectl", description="CLI binary used to fetch logs")
    namespace: str = Field(default="default", description="Namespace Trident runs in")
    controller_pod: str | None = Field(default=None, description="Name of the Trident controller pod")
    server: str | None = None
