from __future__ import annotations

import argparse

from rich.markup import escape

from eczemadex.cli.context import CLIContext
from eczemadex.domain.models.resource import ResourcePatch


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    add_parser = subparsers.add_parser("add", help="Create a resource")
    add_parser.add_argument("--title", required=True)
    add_parser.add_argument("--description", default="")
    add_parser.add_argument("--category", required=True)
    add_parser.set_defaults(handler=run_add)

    update_parser = subparsers.add_parser("update", help="Change fields of a resource")
    update_parser.add_argument("resource_id", type=int)
    update_parser.add_argument("--title")
    update_parser.add_argument("--description")
    update_parser.add_argument("--category")
    update_parser.set_defaults(handler=run_update)

    delete_parser = subparsers.add_parser("delete", help="Permanently remove a resource")
    delete_parser.add_argument("resource_id", type=int)
    delete_parser.set_defaults(handler=run_delete)


def run_add(args: argparse.Namespace, ctx: CLIContext) -> int:
    with ctx.resource_service(persist=True) as service:
        resource = service.create_resource(args.title, args.description, args.category)
    ctx.console.print(f"[green]Created[/green] resource #{resource.id}: {escape(resource.title)}")
    return 0


def run_update(args: argparse.Namespace, ctx: CLIContext) -> int:
    patch = ResourcePatch(title=args.title, description=args.description, category=args.category)
    with ctx.resource_service(persist=True) as service:
        resource = service.update_resource(args.resource_id, patch)
    ctx.console.print(f"[green]Updated[/green] resource #{resource.id}: {escape(resource.title)}")
    return 0


def run_delete(args: argparse.Namespace, ctx: CLIContext) -> int:
    with ctx.resource_service(persist=True) as service:
        service.delete_resource(args.resource_id)
    ctx.console.print(f"[yellow]Deleted[/yellow] resource #{args.resource_id}")
    return 0
