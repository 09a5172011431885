from __future__ import annotations

import argparse
import json
from pathlib import Path

from eczemadex.cli.context import CLIContext
from eczemadex.core.files import write_bytes_atomic
from eczemadex.web.app import create_app


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("schema", help="Export the OpenAPI description of the HTTP operations")
    parser.add_argument("--output", type=Path, default=None)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    document = json.dumps(create_app(ctx.paths).openapi(), indent=2, ensure_ascii=False)
    if args.output is None:
        ctx.console.print_json(document)
        return 0

    write_bytes_atomic(args.output, (document + "\n").encode("utf-8"))
    ctx.console.print(f"[green]Wrote[/green] {args.output}")
    return 0
