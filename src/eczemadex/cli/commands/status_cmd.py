from __future__ import annotations

import argparse

from rich.markup import escape
from rich.panel import Panel

from eczemadex.application.services.lifecycle_service import StoreLifecycle
from eczemadex.cli.context import CLIContext
from eczemadex.core.errors import SnapshotRestoreError
from eczemadex.infrastructure.snapshot.home_lock import HomeLock


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("status", help="Check that the snapshot restores cleanly")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    lifecycle = StoreLifecycle(ctx.paths)
    try:
        with HomeLock(ctx.paths.lock_path):
            store = lifecycle.after_startup()
    except SnapshotRestoreError:
        ctx.console.print(
            Panel(
                f"[red]RESTORE FAILED[/red]\n{escape(lifecycle.last_error or '')}\n\n"
                f"Snapshot left untouched at {ctx.paths.snapshot_path}",
                title="Store status",
            )
        )
        return 1

    ctx.console.print(
        Panel(
            "\n".join(
                [
                    f"Status: [green]{lifecycle.status.value}[/green]",
                    f"Snapshot: {ctx.paths.snapshot_path}",
                    f"Resources: {store.count()}",
                    f"Next id: {store.next_id}",
                ]
            ),
            title="Store status",
        )
    )
    return 0
