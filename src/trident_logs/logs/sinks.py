"""Destinations for retrieved logs: the console or a zip archive."""

from __future__ import annotations

import logging
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Protocol

from rich.console import Console

from trident_logs.errors import ArchiveError, WriteError

logger = logging.getLogger(__name__)

ARCHIVE_FILENAME_FORMAT = "support-%Y-%m-%dT%H-%M-%S-%Z.zip"


def archive_filename(now: datetime | None = None) -> str:
    """Return the support archive name for the given (default: current local) time."""
    stamp = now or datetime.now().astimezone()
    return stamp.strftime(ARCHIVE_FILENAME_FORMAT)


class LogSink(Protocol):
    def write(self, name: str, content: bytes) -> None: ...


class ConsoleSink:
    """Prints each log as `<name> log:` followed by its raw text.

    The log text bypasses rich rendering so tabs and carriage returns survive.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def write(self, name: str, content: bytes) -> None:
        self.console.out(f"{name} log:", highlight=False)
        out = self.console.file
        out.write(content.decode("utf-8", errors="replace") + "\n")
        out.flush()


class ArchiveSink:
    """Writes each log as one entry of a zip archive."""

    def __init__(self, path: Path, console: Console | None = None) -> None:
        self.path = Path(path)
        self.console = console or Console()
        try:
            self._zip = zipfile.ZipFile(self.path, "w", compression=zipfile.ZIP_DEFLATED)
        except OSError as e:
            raise ArchiveError(f"could not create archive {self.path}; {e}") from e

    def write(self, name: str, content: bytes) -> None:
        try:
            self._zip.writestr(name, content)
        except (OSError, ValueError, zipfile.BadZipFile) as e:
            raise WriteError(str(e)) from e
        self.console.print(f"Wrote {name} log to {self.path.name} archive file.", markup=False, highlight=False)

    def close(self) -> None:
        try:
            self._zip.close()
        except OSError as e:
            raise ArchiveError(f"could not finalize archive {self.path}; {e}") from e
        logger.debug("Closed archive %s", self.path)

    def __enter__(self) -> ArchiveSink:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
