"""Error types raised while collecting Trident logs."""

from __future__ import annotations


class LogsError(Exception):
    """Base class for every failure the CLI reports with a failure exit code."""

    exit_code = 1


class InvalidLogTypeError(LogsError):
    """The requested log type is not one of trident, auto or all."""


class UnsupportedModeError(LogsError):
    """Logs can only be collected when Trident runs in a Kubernetes pod."""


class DiscoveryError(LogsError):
    """The Kubernetes CLI or the Trident controller pod could not be found."""


class EnumerationError(LogsError):
    """Listing node pods or sidecar containers failed."""


class FetchError(LogsError):
    """The Kubernetes CLI failed to return logs for one container.

    The message is the output the CLI produced.
    """


class WriteError(LogsError):
    """A fetched log could not be written to its destination."""


class ArchiveError(LogsError):
    """The support archive could not be created or finalized."""


class CollectionError(LogsError):
    """One or more logs could not be retrieved in console mode."""
