"""``provsite verify`` — check artifact digests without generating a site.

Exits 0 when every artifact is present and verified, 1 on any digest
mismatch, or the error's exit code for fatal errors.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from provsite.cli.console import console, print_error
from provsite.config import settings
from provsite.core.errors import ProvsiteError
from provsite.core.loader import load_manifest
from provsite.core.verifier import read_artifact, verify


def verify_cmd(
    manifest: Path = typer.Option(
        Path(".provenance/manifest.json"),
        "--manifest",
        "-m",
        help="Manifest path, relative to --root unless absolute.",
    ),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Artifact root directory."),
    schema: Path = typer.Option(None, "--schema", help="Manifest JSON Schema."),
) -> None:
    """Verify every artifact digest declared in the manifest."""
    manifest_path = manifest if manifest.is_absolute() else root / manifest
    try:
        loaded = load_manifest(manifest_path, schema or settings.schema_path)
        results = [verify(entry, read_artifact(entry, root)) for entry in loaded.artifacts]
    except ProvsiteError as exc:
        print_error(exc)
        raise typer.Exit(code=exc.exit_code)

    table = Table(title=f"Artifacts at {loaded.commit}")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Status", justify="center", no_wrap=True)
    table.add_column("Declared", overflow="fold")
    table.add_column("Computed", overflow="fold")
    for result in results:
        status = "[green]verified[/green]" if result.is_verified else "[bold red]digest mismatch[/bold red]"
        table.add_row(result.artifact_id, status, result.expected, result.actual)
    console.print(table)

    if not all(result.is_verified for result in results):
        raise typer.Exit(code=1)
