from __future__ import annotations

from rich.console import Console
from rich.table import Table

from precache.manifest.models import GroupDecision


def render_decisions(decisions: list[GroupDecision], console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title="Cache groups")
    table.add_column("Group")
    table.add_column("Status")
    table.add_column("Files", justify="right")
    table.add_column("Bytes", justify="right")
    table.add_column("Fingerprint")
    for decision in decisions:
        status = "added" if decision.accepted else "skipped"
        table.add_row(
            decision.name,
            status,
            str(decision.file_count),
            str(decision.cumulative_size),
            decision.fingerprint if decision.accepted else "-",
        )
    console.print(table)
