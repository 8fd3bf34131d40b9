"""Manifest models — the validated, immutable view of a build manifest."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from pydantic import BaseModel, ConfigDict, Field

from provsite.core.hasher import split_digest


class MediaKind(str, Enum):
    """Closed set of renderable artifact kinds."""

    JSON_SUMMARY = "json-summary"
    JSON_TABLE = "json-table"
    MARKDOWN = "markdown"
    RAW_TEXT = "raw-text"


class WorkflowRun(BaseModel):
    """CI workflow run that produced the artifacts."""

    model_config = ConfigDict(frozen=True)

    id: str | int
    url: str
    attempt: int = 1


class FrontPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = "Provenance"


class ArtifactEntry(BaseModel):
    """One build artifact referenced by the manifest.

    ``path`` is relative to the artifact root and is read-only to the
    pipeline.  ``digest`` is ``"<algorithm>:<hex>"``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    path: str
    media_type: str
    render: MediaKind
    digest: str

    @property
    def digest_algorithm(self) -> str:
        return split_digest(self.digest)[0]

    @property
    def digest_value(self) -> str:
        return split_digest(self.digest)[1]

    @property
    def filename(self) -> str:
        """Basename of the on-disk file."""
        return PurePosixPath(self.path).name


class Manifest(BaseModel):
    """Root manifest document.  Artifact order is significant."""

    model_config = ConfigDict(frozen=True)

    version: int
    repo: str
    commit: str
    generated_at: str
    workflow_run: WorkflowRun | None = None
    front_page: FrontPage = Field(default_factory=FrontPage)
    artifacts: tuple[ArtifactEntry, ...]

    def get(self, artifact_id: str) -> ArtifactEntry | None:
        for entry in self.artifacts:
            if entry.id == artifact_id:
                return entry
        return None
