"""Error taxonomy for site generation.

Every fatal condition is a ``ProvsiteError`` subclass carrying the exit
code the invoking process should propagate.  A digest mismatch is *not*
an error: it is recorded as a verification status and shown to readers.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ProvsiteError(RuntimeError):
    """Base class for all fatal generation errors."""

    exit_code: int = 1


class SchemaValidationError(ProvsiteError):
    """Raised when the manifest fails schema or semantic validation.

    ``violations`` holds ``(path, message)`` pairs, e.g.
    ``("artifacts[2].render", "'pdf' is not one of [...]")``.
    """

    exit_code = 2

    def __init__(self, source: Path | str, violations: list[tuple[str, str]]) -> None:
        self.source = str(source)
        self.violations = violations
        lines = "\n".join(f"  {path}: {message}" for path, message in violations)
        super().__init__(f"manifest {self.source} failed validation:\n{lines}")

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.violations]


class ManifestSignatureError(ProvsiteError):
    """Raised when the manifest's Ed25519 signature cannot be verified."""

    exit_code = 2


class MissingArtifactFile(ProvsiteError):
    """Raised when an artifact's declared file is absent or unreadable."""

    exit_code = 3

    def __init__(self, artifact_id: str, path: Path | str, reason: str = "not found") -> None:
        self.artifact_id = artifact_id
        self.path = str(path)
        super().__init__(f"artifact {artifact_id!r}: cannot read {self.path} ({reason})")


class RenderErrorKind(str, Enum):
    """Why an artifact payload could not be rendered."""

    EMPTY_TABLE = "empty_table"
    NOT_TABULAR = "not_tabular"
    MALFORMED_DATA = "malformed_data"


class RenderError(ProvsiteError):
    """Raised when an artifact's bytes do not fit its declared media kind."""

    exit_code = 4

    def __init__(self, artifact_id: str, kind: RenderErrorKind, detail: str) -> None:
        self.artifact_id = artifact_id
        self.kind = kind
        self.detail = detail
        super().__init__(f"artifact {artifact_id!r}: {kind.value}: {detail}")


class SiteEmitError(ProvsiteError):
    """Raised when writing the output tree fails (permissions, disk full)."""

    exit_code = 5

    def __init__(self, path: Path | str, cause: OSError) -> None:
        self.path = str(path)
        super().__init__(f"cannot write {self.path}: {cause.strerror or cause}")


class ManifestWriteError(ProvsiteError):
    """Raised when a manifest, signature, or key file cannot be written."""

    exit_code = 5

    def __init__(self, path: Path | str, cause: OSError) -> None:
        self.path = str(path)
        super().__init__(f"cannot write {self.path}: {cause.strerror or cause}")
