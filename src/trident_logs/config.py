"""Configuration and environment for the Trident logs tool."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tool settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="TRIDENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Trident
    server: str | None = Field(
        default=None,
        description="Address of a Trident REST server; when set the tool runs in direct mode",
    )
    main_container: str = Field(default="trident-main", description="Name of the main Trident container")
    controller_selector: str = Field(
        default="app=controller.csi.trident.netapp.io",
        description="Label selector matching the Trident controller pod",
    )
    node_selector: str = Field(
        default="app=node.csi.trident.netapp.io",
        description="Label selector matching the Trident node pods",
    )

    # Kubernetes
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to kubeconfig; uses KUBECONFIG env or default location if unset",
    )
    context: str | None = Field(default=None, description="Kubernetes context to use")
    namespace: str | None = Field(
        default=None,
        description="Namespace Trident runs in; discovered from the current context if unset",
    )
    kubernetes_cli: str | None = Field(
        default=None,
        description="Kubernetes CLI binary; kubectl or oc from PATH if unset",
    )

    # Output
    output_dir: Path = Field(default=Path("."), description="Directory support archives are written to")
    debug: bool = Field(default=False, description="Log every external command before running it")


def get_settings() -> Settings:
    """Return validated settings instance."""
    return Settings()
