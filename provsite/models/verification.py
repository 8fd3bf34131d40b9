"""Digest verification results (derived, one per artifact entry)."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    DIGEST_MISMATCH = "digest_mismatch"


class VerificationResult(BaseModel):
    """Outcome of recomputing an artifact's digest.

    A mismatch carries both values so pages can display them.
    """

    model_config = ConfigDict(frozen=True)

    artifact_id: str
    status: VerificationStatus
    expected: str  # "<algorithm>:<hex>" as declared
    actual: str  # "sha256:<hex>" as computed
    reason: str = ""

    @property
    def is_verified(self) -> bool:
        return self.status == VerificationStatus.VERIFIED

    @property
    def label(self) -> str:
        """Reader-facing badge text."""
        return "verified" if self.is_verified else "digest mismatch"
