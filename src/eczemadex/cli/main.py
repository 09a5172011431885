from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from eczemadex.cli.commands import (
    edit_cmd,
    resources_cmd,
    schema_cmd,
    status_cmd,
    verify_cmd,
    web_cmd,
)
from eczemadex.cli.context import CLIContext
from eczemadex.core.config import load_paths
from eczemadex.core.errors import EczemaError
from eczemadex.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eczemadex",
        description="Eczemadex community resource store",
    )
    parser.add_argument(
        "--home",
        type=Path,
        default=None,
        help="Directory holding the snapshot (default: $ECZEMADEX_HOME or ./.eczemadex)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    edit_cmd.register(subparsers)
    resources_cmd.register(subparsers)
    verify_cmd.register(subparsers)
    status_cmd.register(subparsers)
    schema_cmd.register(subparsers)
    web_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        ctx = CLIContext(paths=load_paths(args.home), console=console)
        return handler(args, ctx)
    except EczemaError as exc:
        logger.error(str(exc))
        return 1
