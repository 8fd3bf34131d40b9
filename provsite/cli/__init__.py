"""provsite CLI — Typer-based command-line interface."""
