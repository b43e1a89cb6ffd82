"""Shared CLI helpers: config loading and the status panel."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from groundwork.cli.errors import err_config
from groundwork.config import ConfigError, GroundworkConfig, load_config
from groundwork.index.models import IndexStatus
from groundwork.logging_utils import setup_logging

console = Console()


def load_cli_config(snapshot: Path | None = None) -> GroundworkConfig:
    """Load config, apply the --snapshot override and set up logging.

    Exits with code 1 on an invalid config file.
    """
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from exc

    if snapshot is not None:
        cfg.store.snapshot_path = str(snapshot)
    setup_logging(cfg.logging.level)
    return cfg


def status_panel(status: IndexStatus, snapshot_path: str) -> Panel:
    ready = "[green]✓ ready[/]" if status.is_ready else "[yellow]✗ not ready[/]"
    lines = [
        f"Snapshot:    {snapshot_path}",
        f"Chunks:      [bold]{status.chunk_count:,}[/]",
        f"Embeddings:  [bold]{status.embedding_count:,}[/]",
        f"Status:      {ready}",
    ]
    if status.last_updated:
        lines.append(f"Updated:     [dim]{status.last_updated}[/]")
    return Panel("\n".join(lines), title="[bold]Index[/]", expand=False)
