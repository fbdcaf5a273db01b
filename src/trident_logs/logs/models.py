"""Structured models for a single logs run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from trident_logs.errors import EnumerationError, InvalidLogTypeError

if TYPE_CHECKING:
    from trident_logs.logs.sinks import LogSink

LOG_NAME_CONTROLLER = "trident-controller"
LOG_NAME_NODE = "trident-node"
PREVIOUS_SUFFIX = "-previous"
SIDECAR_INFIX = "-sidecar-"
ERRORS_ENTRY = "errors"


class LogScope(str, Enum):
    """Which Trident logs to retrieve."""

    TRIDENT = "trident"
    AUTO = "auto"
    ALL = "all"


def parse_scope(log_type: str) -> LogScope:
    """Map a --log value to LogScope."""
    try:
        return LogScope(log_type)
    except ValueError:
        raise InvalidLogTypeError(f"{log_type} is not a valid Trident log") from None


class LogRequest(BaseModel):
    """Parameters selecting the logs to retrieve."""

    model_config = ConfigDict(frozen=True)

    log_type: str = Field(default=LogScope.AUTO.value, description="One of trident, auto, all")
    previous: bool = Field(default=False, description="Also fetch the previous container instance")
    node: str | None = Field(default=None, description="Kubernetes node to gather node pod logs from")
    sidecars: bool = Field(default=False, description="Also fetch sidecar container logs")
    archive: bool = Field(default=False, description="Write a support archive instead of printing")

    def for_archive(self) -> LogRequest:
        """In archive mode "auto" means every log, current and previous, with sidecars."""
        if self.log_type == LogScope.AUTO.value:
            return self.model_copy(update={"log_type": LogScope.ALL.value, "previous": True, "sidecars": True})
        return self


class FetchTarget(BaseModel):
    """One row of a fetch plan: a container log to retrieve."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Entry name, e.g. trident-node-worker1-previous")
    pod: str
    namespace: str
    container: str
    previous: bool = False
    sidecars: bool = Field(default=False, description="Fetch the pod's sidecar containers after this one")

    def sidecar_name(self, container: str) -> str:
        return f"{self.name}{SIDECAR_INFIX}{container}"


def _trim_sentence(text: str) -> str:
    text = text.strip()
    return text[:-1] if text.endswith(".") else text


class ErrorBuffer:
    """Accumulates failure messages into one sentence sequence."""

    def __init__(self) -> None:
        self._text = ""

    def append(self, message: str) -> None:
        if not self._text:
            self._text = message
        else:
            self._text = f"{_trim_sentence(self._text)}. {message}"

    def combine(self, message: str) -> str:
        """Join a terminal error message with the buffered text."""
        buffered = _trim_sentence(self._text)
        if not buffered:
            return message
        return f"{_trim_sentence(message)}. {buffered}"

    @property
    def text(self) -> str:
        return self._text

    def __bool__(self) -> bool:
        return bool(self._text)


@dataclass
class RunContext:
    """Mutable state of one logs run."""

    sink: LogSink
    errors: ErrorBuffer = field(default_factory=ErrorBuffer)
    written: list[str] = field(default_factory=list)
    failures: list[EnumerationError] = field(default_factory=list)


@dataclass
class CollectionResult:
    """Outcome of a logs run that did not fail."""

    written: list[str] = field(default_factory=list)
    errors: str = ""
    archive: Path | None = None

    @property
    def complete(self) -> bool:
        return not self.errors
