"""``provsite validate`` — schema-check a manifest without reading artifacts."""

from __future__ import annotations

from pathlib import Path

import typer

from provsite.cli.console import console, print_error
from provsite.config import settings
from provsite.core.errors import ProvsiteError
from provsite.core.loader import load_manifest


def validate_cmd(
    manifest: Path = typer.Argument(..., help="Manifest JSON file."),
    schema: Path = typer.Option(None, "--schema", help="Manifest JSON Schema."),
) -> None:
    """Validate a manifest against the schema and semantic rules."""
    try:
        loaded = load_manifest(manifest, schema or settings.schema_path)
    except ProvsiteError as exc:
        print_error(exc)
        raise typer.Exit(code=exc.exit_code)
    console.print(
        f"[green]valid[/green] {manifest} [dim](commit {loaded.commit}, "
        f"{len(loaded.artifacts)} artifact(s))[/dim]"
    )
