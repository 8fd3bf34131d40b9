"""Canonical hashing helpers for digest verification and signing."""

from __future__ import annotations

import hashlib
import json
from typing import Any

SUPPORTED_ALGORITHM = "sha256"


def canonical_manifest_bytes(document: Any) -> bytes:
    """Canonical bytes of a manifest document for Ed25519 signing.

    Keys are sorted and separators compact, and non-ASCII text stays raw
    UTF-8 instead of ``\\uXXXX`` escapes.  These are the bytes existing
    manifest signers sign, so a title such as ``"Qualität"`` must not be
    escaped.
    """
    return json.dumps(
        document, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def content_address(data: bytes) -> str:
    """Return ``"sha256:<hex>"`` for raw bytes."""
    return f"{SUPPORTED_ALGORITHM}:{sha256_hex(data)}"


def split_digest(digest: str) -> tuple[str, str]:
    """Split ``"<algorithm>:<hex>"`` into its parts.

    A bare hex string is treated as SHA-256 for compatibility with
    manifests that only carry the hex value.
    """
    algorithm, sep, value = digest.partition(":")
    if not sep:
        return SUPPORTED_ALGORITHM, digest.lower()
    return algorithm.lower(), value.lower()
