"""``provsite sign`` — write a detached Ed25519 signature for a manifest."""

from __future__ import annotations

from pathlib import Path

import typer

from provsite.cli.console import console, print_error
from provsite.config import settings
from provsite.core.errors import ProvsiteError
from provsite.core.loader import load_schema, parse_manifest, read_document
from provsite.core.signing import (
    load_private_key,
    public_key_b64,
    sign_manifest,
    signature_path_for,
    write_key_material,
)


def sign_cmd(
    private_key: Path = typer.Option(
        ..., "--key", "-k", help="Ed25519 private key file (32-byte seed)."
    ),
    manifest: Path = typer.Option(
        Path(".provenance/manifest.json"),
        "--manifest",
        "-m",
        help="Manifest path, relative to --root unless absolute.",
    ),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Repository root."),
    sig_out: Path = typer.Option(
        None, "--sig-out", help="Signature output path (defaults to <manifest>.sig)."
    ),
    pubkey_out: Path = typer.Option(
        None, "--pubkey-out", help="Also write the base64 public key here."
    ),
    schema: Path = typer.Option(None, "--schema", help="Manifest JSON Schema."),
) -> None:
    """Validate the manifest, then sign its canonical JSON."""
    manifest_path = manifest if manifest.is_absolute() else root / manifest
    sig_path = sig_out or signature_path_for(manifest_path)
    try:
        document = read_document(manifest_path)
        parse_manifest(
            document, schema=load_schema(schema or settings.schema_path), source=manifest_path
        )
        key = load_private_key(private_key)
        write_key_material(sig_path, (sign_manifest(document, key) + "\n").encode("ascii"))
        if pubkey_out is not None:
            write_key_material(pubkey_out, (public_key_b64(key) + "\n").encode("ascii"))
    except ProvsiteError as exc:
        print_error(exc)
        raise typer.Exit(code=exc.exit_code)

    console.print(f"[green]Wrote signature to[/green] {sig_path}")
    if pubkey_out is not None:
        console.print(f"[green]Wrote public key to[/green] {pubkey_out}")
