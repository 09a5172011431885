from __future__ import annotations

import argparse

from rich.markup import escape
from rich.panel import Panel

from eczemadex.cli.context import CLIContext
from eczemadex.cli.render import resource_lines, resources_table
from eczemadex.domain.models.resource import ResourceCategory


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    list_parser = subparsers.add_parser("list", help="List resources in id order")
    list_parser.add_argument(
        "--category",
        help="One of: " + ", ".join(c.value for c in ResourceCategory),
    )
    list_parser.set_defaults(handler=run_list)

    show_parser = subparsers.add_parser("show", help="Show one resource")
    show_parser.add_argument("resource_id", type=int)
    show_parser.set_defaults(handler=run_show)

    search_parser = subparsers.add_parser(
        "search", help="Case-insensitive substring search over titles and descriptions"
    )
    search_parser.add_argument("query", nargs="?", default="")
    search_parser.set_defaults(handler=run_search)


def run_list(args: argparse.Namespace, ctx: CLIContext) -> int:
    with ctx.resource_service() as service:
        if args.category:
            resources = service.list_resources_by_category(args.category)
            title = f"Resources in {escape(args.category)}"
        else:
            resources = service.list_resources()
            title = "Resources"
    ctx.console.print(resources_table(resources, title))
    return 0


def run_show(args: argparse.Namespace, ctx: CLIContext) -> int:
    with ctx.resource_service() as service:
        resource = service.get_resource(args.resource_id)
    ctx.console.print(Panel("\n".join(resource_lines(resource)), title="Resource"))
    return 0


def run_search(args: argparse.Namespace, ctx: CLIContext) -> int:
    with ctx.resource_service() as service:
        resources = service.search_resources(args.query)
    ctx.console.print(resources_table(resources, f"Matches for {escape(repr(args.query))}"))
    return 0
