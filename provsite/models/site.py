"""Output tree and generation report models."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from provsite.models.verification import VerificationResult


class SiteFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: bytes
    content_type: str


class SiteTree:
    """Ordered mapping of output-relative path -> ``SiteFile``.

    Paths are POSIX, relative, and unique; adding a path twice raises
    ``ValueError``.  Iteration follows insertion order so emission is
    deterministic.
    """

    def __init__(self) -> None:
        self._files: dict[str, SiteFile] = {}

    def add(self, path: str, content: bytes | str, content_type: str) -> None:
        if path in self._files:
            raise ValueError(f"duplicate output path: {path}")
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._files[path] = SiteFile(content=content, content_type=content_type)

    def __getitem__(self, path: str) -> SiteFile:
        return self._files[path]

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def items(self) -> Iterator[tuple[str, SiteFile]]:
        return iter(self._files.items())

    def text(self, path: str) -> str:
        return self._files[path].content.decode("utf-8")


class SkippedEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    artifact_id: str
    reason: str


class GenerationReport(BaseModel):
    """Summary of one generation run, returned to the caller."""

    model_config = ConfigDict(frozen=True)

    out_dir: Path
    commit: str
    published: tuple[str, ...]
    skipped: tuple[SkippedEntry, ...] = ()
    verifications: tuple[VerificationResult, ...] = ()
    file_count: int = 0

    @property
    def all_verified(self) -> bool:
        return all(v.is_verified for v in self.verifications)

    @property
    def mismatches(self) -> list[VerificationResult]:
        return [v for v in self.verifications if not v.is_verified]
