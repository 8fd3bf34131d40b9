"""Digest verifier — recompute and compare artifact content digests.

``verify`` is a pure function of the entry and its bytes.  Reading the
bytes is a separate step so a missing file is reported as
``MissingArtifactFile`` before any verification is attempted.
"""

from __future__ import annotations

import hmac
import logging
from pathlib import Path

from provsite.core.errors import MissingArtifactFile
from provsite.core.hasher import SUPPORTED_ALGORITHM, content_address, sha256_hex
from provsite.models.manifest import ArtifactEntry
from provsite.models.verification import VerificationResult, VerificationStatus

logger = logging.getLogger(__name__)


def resolve_artifact_path(entry: ArtifactEntry, root: Path) -> Path:
    return Path(root) / entry.path


def read_artifact(entry: ArtifactEntry, root: Path) -> bytes:
    """Read an artifact's bytes in full.

    Raises ``MissingArtifactFile`` when the file is absent, unreadable, or
    resolves outside the artifact root (e.g. through a symlink).
    """
    root = Path(root)
    path = resolve_artifact_path(entry, root)
    try:
        resolved = path.resolve(strict=True)
    except (OSError, RuntimeError):
        raise MissingArtifactFile(entry.id, path) from None
    if not resolved.is_relative_to(root.resolve()):
        raise MissingArtifactFile(entry.id, path, reason="resolves outside the artifact root")
    if not resolved.is_file():
        raise MissingArtifactFile(entry.id, path, reason="not a regular file")
    try:
        return resolved.read_bytes()
    except OSError as exc:
        raise MissingArtifactFile(entry.id, path, reason=exc.strerror or str(exc)) from exc


def verify(entry: ArtifactEntry, data: bytes) -> VerificationResult:
    """Compare the declared digest against the digest of ``data``."""
    expected = f"{entry.digest_algorithm}:{entry.digest_value}"
    actual = content_address(data)

    if entry.digest_algorithm != SUPPORTED_ALGORITHM:
        logger.warning(
            "Artifact %s declares unsupported digest algorithm %s",
            entry.id,
            entry.digest_algorithm,
        )
        return VerificationResult(
            artifact_id=entry.id,
            status=VerificationStatus.DIGEST_MISMATCH,
            expected=expected,
            actual=actual,
            reason=f"unsupported digest algorithm: {entry.digest_algorithm}",
        )

    if hmac.compare_digest(sha256_hex(data), entry.digest_value):
        return VerificationResult(
            artifact_id=entry.id,
            status=VerificationStatus.VERIFIED,
            expected=expected,
            actual=actual,
        )

    logger.warning("Digest mismatch for %s: expected %s, got %s", entry.id, expected, actual)
    return VerificationResult(
        artifact_id=entry.id,
        status=VerificationStatus.DIGEST_MISMATCH,
        expected=expected,
        actual=actual,
        reason="content does not match declared digest",
    )
