"""Runtime configuration — env-driven via pydantic-settings.

Reads ``PROVSITE_*`` environment variables and an optional ``.env`` file.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "schemas" / "manifest.schema.json"


class FailurePolicy(str, Enum):
    """What to do when one entry's file is missing or fails to render."""

    ABORT = "abort"
    SKIP = "skip"


class SiteSettings(BaseSettings):
    """Generator settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export PROVSITE_ON_ERROR=skip
        export PROVSITE_MAX_WORKERS=4
        export PROVSITE_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PROVSITE_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Validation
    schema_path: Path = DEFAULT_SCHEMA_PATH

    # Per-entry failures (missing file, render error)
    on_error: FailurePolicy = FailurePolicy.ABORT

    # Worker pool for digest + render; None means os.cpu_count()
    max_workers: int | None = None

    # markdown/raw-text payloads above this size are not inlined
    inline_limit_bytes: int = 1_000_000

    # Manifest signature (Ed25519); public key as base64 or hex
    signature_required: bool = False
    public_key: str = ""


# Module-level singleton; import as `from provsite.config import settings`
settings = SiteSettings()
