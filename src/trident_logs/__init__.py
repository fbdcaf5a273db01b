"""Retrieve and archive Trident container logs from Kubernetes."""

__version__ = "0.1.0"
