"""groundwork index — build (or reuse) the index from a JSON page export."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from groundwork.cli.common import console, load_cli_config, status_panel
from groundwork.cli.errors import (
    err_embedding_failed,
    err_no_api_key,
    err_pages_invalid,
    err_pages_not_found,
)
from groundwork.rag.llm_client import MissingApiKeyError, provider_of
from groundwork.rag.system import RagSystem


def index_cmd(
    pages: Annotated[
        Path,
        typer.Option("--pages", "-p", help="JSON export of the pages to index."),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", help="Rebuild even if a snapshot already exists."),
    ] = False,
    snapshot: Annotated[
        Path | None,
        typer.Option("--snapshot", help="Snapshot path (overrides store.snapshot_path)."),
    ] = None,
) -> None:
    """Chunk and embed pages, then save the index snapshot."""
    cfg = load_cli_config(snapshot)
    system = RagSystem(cfg)

    try:
        status = system.initialize(lambda: read_pages(pages), force=force)
    except typer.Exit:
        raise
    except MissingApiKeyError as exc:
        console.print(err_no_api_key(provider_of(cfg.embedding.model)))
        raise typer.Exit(1) from exc
    except Exception as exc:  # embedding service failure; nothing was saved
        console.print(err_embedding_failed(str(exc)))
        raise typer.Exit(1) from exc

    console.print(status_panel(status, cfg.store.snapshot_path))


class PagesFileError(ValueError):
    """Raised when the --pages export cannot be used."""


def read_pages(path: Path) -> list[dict[str, Any]]:
    """Read a page export: a JSON array, or an object with a ``results`` array.

    Exits with code 1 (after printing an actionable error) if the file is
    missing or malformed.
    """
    if not path.exists():
        console.print(err_pages_not_found(str(path)))
        raise typer.Exit(1)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return _page_list(data)
    except (json.JSONDecodeError, PagesFileError) as exc:
        console.print(err_pages_invalid(str(path), str(exc)))
        raise typer.Exit(1) from exc


def _page_list(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get("results")
    if not isinstance(data, list):
        raise PagesFileError("top-level value is not a list of pages")
    pages = [item for item in data if isinstance(item, dict)]
    if len(pages) != len(data):
        raise PagesFileError("every page must be a JSON object")
    return pages
