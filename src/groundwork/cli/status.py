"""groundwork status — show what the saved index holds."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel

from groundwork.cli.common import console, load_cli_config, status_panel
from groundwork.rag.system import RagSystem


def status_cmd(
    snapshot: Annotated[
        Path | None,
        typer.Option("--snapshot", help="Snapshot path (overrides store.snapshot_path)."),
    ] = None,
) -> None:
    """Show chunk and embedding counts of the saved index."""
    cfg = load_cli_config(snapshot)
    system = RagSystem(cfg)

    if not system.load():
        console.print(
            Panel(
                "[yellow]No index snapshot found.[/]\n"
                "  Run:  groundwork index --pages <pages.json>",
                title="[bold]Index[/]",
                expand=False,
            )
        )
        return

    console.print(status_panel(system.status(), cfg.store.snapshot_path))
