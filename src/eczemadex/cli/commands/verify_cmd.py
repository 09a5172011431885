from __future__ import annotations

import argparse

from rich.markup import escape

from eczemadex.cli.context import CLIContext


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("verify", help="Mark a resource as verified")
    parser.add_argument("resource_id", type=int)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    with ctx.resource_service(persist=True) as service:
        resource = service.verify_resource(args.resource_id)
    ctx.console.print(f"[green]Verified[/green] resource #{resource.id}: {escape(resource.title)}")
    return 0
