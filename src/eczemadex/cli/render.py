from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from eczemadex.core.time import to_iso
from eczemadex.domain.models.resource import Resource, ResourceCategory

CATEGORY_LABELS: dict[ResourceCategory, str] = {
    ResourceCategory.TREATMENT: "[green]Treatment[/green]",
    ResourceCategory.PREVENTION: "[cyan]Prevention[/cyan]",
    ResourceCategory.RESEARCH: "[blue]Research[/blue]",
    ResourceCategory.DIET_ADVICE: "[yellow]Diet advice[/yellow]",
    ResourceCategory.TESTIMONIAL: "[magenta]Testimonial[/magenta]",
    ResourceCategory.MEDICAL_ADVICE: "[red]Medical advice[/red]",
}


def category_label(category: ResourceCategory) -> str:
    return CATEGORY_LABELS[category]


def resources_table(resources: list[Resource], title: str) -> Table:
    table = Table(title=f"{title} ({len(resources)})")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Verified")
    table.add_column("Updated (UTC)")

    for r in resources:
        table.add_row(
            str(r.id),
            escape(r.title),
            category_label(r.category),
            "yes" if r.verified else "no",
            r.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    return table


def resource_lines(resource: Resource) -> list[str]:
    return [
        f"[bold]#{resource.id}[/bold] {escape(resource.title)}",
        f"Category: {category_label(resource.category)}",
        f"Verified: {'yes' if resource.verified else 'no'}",
        f"Created: {to_iso(resource.created_at)}",
        f"Updated: {to_iso(resource.updated_at)}",
        "",
        escape(resource.description) or "[dim](no description)[/dim]",
    ]
