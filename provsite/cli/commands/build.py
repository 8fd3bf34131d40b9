"""``provsite build`` — generate the static site from a manifest."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from provsite.cli.console import console, print_error
from provsite.config import FailurePolicy, settings
from provsite.core.errors import ProvsiteError
from provsite.core.pipeline import generate


def build_cmd(
    manifest: Path = typer.Option(
        Path(".provenance/manifest.json"),
        "--manifest",
        "-m",
        help="Manifest path, relative to --root unless absolute.",
    ),
    root: Path = typer.Option(
        Path("."), "--root", "-r", help="Artifact root directory."
    ),
    out: Path = typer.Option(
        Path("site"), "--out", "-o", help="Output directory for the generated site."
    ),
    schema: Path = typer.Option(
        None, "--schema", help="Manifest JSON Schema (defaults to the packaged schema)."
    ),
    on_error: FailurePolicy = typer.Option(
        None, "--on-error", help="Policy for missing or unrenderable artifacts: abort or skip."
    ),
    workers: int = typer.Option(
        None, "--workers", "-w", min=1, help="Worker threads for digest and render."
    ),
    inline_limit: int = typer.Option(
        None, "--inline-limit", min=0, help="Max bytes of markdown/raw text rendered inline."
    ),
    signature: Path = typer.Option(
        None, "--signature", help="Detached Ed25519 signature of the manifest."
    ),
    public_key: str = typer.Option(
        None, "--pubkey", help="Ed25519 public key (base64 or hex) for --signature."
    ),
) -> None:
    """Generate the provenance site and report verification results."""
    overrides = {
        key: value
        for key, value in {
            "on_error": on_error,
            "max_workers": workers,
            "inline_limit_bytes": inline_limit,
            "public_key": public_key,
        }.items()
        if value is not None
    }
    run_settings = settings.model_copy(update=overrides)
    manifest_path = manifest if manifest.is_absolute() else root / manifest

    try:
        report = generate(
            manifest_path,
            root,
            out,
            schema,
            settings=run_settings,
            signature_path=signature,
        )
    except ProvsiteError as exc:
        print_error(exc)
        raise typer.Exit(code=exc.exit_code)

    console.print(
        f"[green]Site generated at[/green] {report.out_dir} "
        f"[dim]({report.file_count} files, commit {report.commit})[/dim]"
    )
    for skipped in report.skipped:
        console.print(f"[yellow]skipped[/yellow] {skipped.artifact_id}: {escape(skipped.reason)}")
    for mismatch in report.mismatches:
        console.print(
            f"[bold red]digest mismatch[/bold red] {mismatch.artifact_id}: "
            f"expected {mismatch.expected}, got {mismatch.actual}"
        )
