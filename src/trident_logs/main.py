"""CLI entrypoint for the Trident logs tool."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from trident_logs import __version__
from trident_logs.config import Settings, get_settings
from trident_logs.errors import LogsError
from trident_logs.logs import LogCollector, LogRequest, LogScope


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tridentctl-logs",
        description="Print the logs from the Trident storage orchestrator for Kubernetes.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--namespace",
        "-n",
        default=None,
        help="Namespace Trident runs in (default: from env or the current context)",
    )
    parser.add_argument(
        "--server",
        "-s",
        default=None,
        help="Address/port of a Trident REST interface",
    )
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        default=None,
        help="Path to kubeconfig (default: KUBECONFIG env or ~/.kube/config)",
    )
    parser.add_argument(
        "--context",
        default=None,
        help="Kubernetes context to use",
    )
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="Debug output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    logs = commands.add_parser(
        "logs",
        help="Print the logs from Trident",
        description="Print the logs from the Trident storage orchestrator for Kubernetes.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    logs.add_argument(
        "--log",
        "-l",
        default=LogScope.AUTO.value,
        help="Trident log to display. One of trident|auto|all",
    )
    logs.add_argument(
        "--archive",
        "-a",
        action="store_true",
        help="Create a support archive with all logs unless otherwise specified.",
    )
    logs.add_argument(
        "--previous",
        "-p",
        action="store_true",
        help="Get the logs for the previous container instance if it exists.",
    )
    logs.add_argument(
        "--node",
        default=None,
        help="The kubernetes node name to gather node pod logs from.",
    )
    logs.add_argument(
        "--sidecars",
        action="store_true",
        help="Get the logs for the sidecar containers as well.",
    )
    logs.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory to write the support archive to (default: working directory)",
    )
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Let command line flags take precedence over environment settings."""
    if args.namespace:
        settings.namespace = args.namespace
    if args.server:
        settings.server = args.server
    if args.kubeconfig:
        settings.kubeconfig = args.kubeconfig
    if args.context:
        settings.context = args.context
    if args.debug:
        settings.debug = True
    if getattr(args, "output_dir", None):
        settings.output_dir = args.output_dir
    return settings


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for tridentctl-logs CLI."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logger = logging.getLogger("trident_logs")
    if not args.debug:
        logger.setLevel(logging.WARNING)

    try:
        settings = _apply_overrides(get_settings(), args)
        request = LogRequest(
            log_type=args.log,
            previous=args.previous,
            node=args.node or None,
            sidecars=args.sidecars,
            archive=args.archive,
        )
        console = Console()
        result = LogCollector(settings=settings, console=console).run(request)
        if result.archive is not None:
            console.print(f"Support archive written to {result.archive}", markup=False, highlight=False, soft_wrap=True)
            if not result.complete:
                logger.warning("Some logs could not be retrieved; see the errors entry in %s", result.archive.name)
        return 0
    except LogsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        logging.exception("Collecting logs failed")
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
