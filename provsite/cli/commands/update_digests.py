"""``provsite update-digests`` — recompute manifest digests in place."""

from __future__ import annotations

from pathlib import Path

import typer

from provsite.cli.console import console, print_error
from provsite.config import settings
from provsite.core.digests import update_digests
from provsite.core.errors import ProvsiteError


def update_digests_cmd(
    manifest: Path = typer.Option(
        Path(".provenance/manifest.json"),
        "--manifest",
        "-m",
        help="Manifest path, relative to --root unless absolute.",
    ),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Artifact root directory."),
    schema: Path = typer.Option(None, "--schema", help="Manifest JSON Schema."),
) -> None:
    """Set every artifact's digest to the sha256 of its file."""
    manifest_path = manifest if manifest.is_absolute() else root / manifest
    try:
        results = update_digests(manifest_path, root, schema or settings.schema_path)
    except ProvsiteError as exc:
        print_error(exc)
        raise typer.Exit(code=exc.exit_code)

    for artifact_id, digest, changed in results:
        marker = "[yellow]updated[/yellow]" if changed else "[dim]unchanged[/dim]"
        console.print(f"{marker} {artifact_id} => {digest}", highlight=False)
