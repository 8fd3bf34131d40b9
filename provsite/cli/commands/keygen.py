"""``provsite keygen`` — generate an Ed25519 keypair for manifest signing."""

from __future__ import annotations

from pathlib import Path

import typer

from provsite.cli.console import console, err_console, print_error
from provsite.core.errors import ProvsiteError
from provsite.core.signing import generate_keypair, write_key_material


def keygen_cmd(
    private_out: Path = typer.Option(
        ..., "--private-out", help="Private key output (raw 32-byte seed, mode 600)."
    ),
    public_out: Path = typer.Option(
        ..., "--public-out", help="Public key output (base64)."
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite existing key files."),
) -> None:
    """Generate a keypair.  Intended for tests and local trials."""
    existing = [path for path in (private_out, public_out) if path.exists()]
    if existing and not force:
        err_console.print(
            f"[bold red]Refusing to overwrite[/bold red] {existing[0]} (use --force)",
            highlight=False,
        )
        raise typer.Exit(code=1)

    private_key, public_key = generate_keypair()
    try:
        write_key_material(private_out, private_key, private=True)
        write_key_material(public_out, (public_key + "\n").encode("ascii"))
    except ProvsiteError as exc:
        print_error(exc)
        raise typer.Exit(code=exc.exit_code)

    console.print(f"[green]Wrote[/green] private={private_out} public={public_out}")
    console.print(f"public key: {public_key}", highlight=False)
