"""Main Typer application — registers all CLI commands.

Entry point: ``provsite`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from provsite.cli.commands.build import build_cmd
from provsite.cli.commands.keygen import keygen_cmd
from provsite.cli.commands.sign import sign_cmd
from provsite.cli.commands.update_digests import update_digests_cmd
from provsite.cli.commands.validate import validate_cmd
from provsite.cli.commands.verify import verify_cmd
from provsite.cli.console import err_console
from provsite.config import settings

app = typer.Typer(
    name="provsite",
    help="provsite: static provenance site generator for CI build artifacts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def configure(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (defaults to PROVSITE_LOG_LEVEL)."
    ),
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="build", help="Generate the static site from a manifest.")(build_cmd)
app.command(name="verify", help="Verify artifact digests without generating.")(verify_cmd)
app.command(name="validate", help="Validate a manifest against its schema.")(validate_cmd)
app.command(name="update-digests", help="Recompute artifact digests in the manifest.")(update_digests_cmd)
app.command(name="sign", help="Write a detached Ed25519 signature for the manifest.")(sign_cmd)
app.command(name="keygen", help="Generate an Ed25519 keypair for signing.")(keygen_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
