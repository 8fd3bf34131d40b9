"""Test data builders shared by fixtures and test modules."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

TEST_SUMMARY: dict[str, Any] = {"total": 10, "passed": 9, "failed": 1, "duration_seconds": 1.234}

COVERAGE: dict[str, Any] = {
    "total": {"pct": 87.5},
    "files": [{"path": f"src/module_{i}.py", "pct": 80.0 + i} for i in range(5)],
}

FAILURES_MD = (
    "# Failing Specs\n"
    "\n"
    "Two specs failed on this run.\n"
    "\n"
    "## Login\n"
    "\n"
    "- login times out after 30s\n"
    "- retry banner missing\n"
)


@dataclass
class ArtifactSpec:
    id: str
    title: str
    path: str
    content: bytes
    render: str
    media_type: str = "application/json"
    digest: str | None = None  # computed from content when None


def default_artifacts() -> list[ArtifactSpec]:
    return [
        ArtifactSpec(
            id="tests-summary",
            title="Test Summary",
            path="ci/tests/summary.json",
            content=json.dumps(TEST_SUMMARY).encode(),
            render="json-summary",
        ),
        ArtifactSpec(
            id="coverage",
            title="Coverage",
            path="ci/coverage/coverage.json",
            content=json.dumps(COVERAGE).encode(),
            render="json-table",
        ),
        ArtifactSpec(
            id="failures",
            title="Failing Specs",
            path="ci/tests/failures.md",
            content=FAILURES_MD.encode(),
            render="markdown",
            media_type="text/markdown",
        ),
    ]


@dataclass
class Workspace:
    """A temp artifact root with a manifest describing its files."""

    root: Path
    manifest_path: Path
    out_dir: Path
    document: dict[str, Any] = field(default_factory=dict)

    def artifact_file(self, artifact_id: str) -> Path:
        for artifact in self.document["artifacts"]:
            if artifact["id"] == artifact_id:
                return self.root / artifact["path"]
        raise KeyError(artifact_id)

    def read_out(self, rel_path: str) -> str:
        return (self.out_dir / rel_path).read_text(encoding="utf-8")


def sha256_digest(content: bytes) -> str:
    return "sha256:" + hashlib.sha256(content).hexdigest()


def manifest_document(artifacts: list[ArtifactSpec], **overrides: Any) -> dict[str, Any]:
    document: dict[str, Any] = {
        "version": 1,
        "repo": "acme/widgets",
        "commit": "deadbeef",
        "generated_at": "2025-01-01T00:00:00Z",
        "workflow_run": {"id": 4242, "url": "https://ci.example/runs/4242", "attempt": 1},
        "front_page": {"title": "QA Evidence"},
        "artifacts": [
            {
                "id": a.id,
                "title": a.title,
                "path": a.path,
                "media_type": a.media_type,
                "render": a.render,
                "digest": a.digest or sha256_digest(a.content),
            }
            for a in artifacts
        ],
    }
    document.update(overrides)
    return document
