"""Shared test fixtures for provsite."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from factories import ArtifactSpec, Workspace, default_artifacts, manifest_document, sha256_digest
from provsite.config import SiteSettings
from provsite.core.loader import load_schema
from provsite.models.manifest import ArtifactEntry, MediaKind


@pytest.fixture
def make_workspace(tmp_path: Path) -> Callable[..., Workspace]:
    """Factory fixture: write artifacts + manifest into a fresh root."""
    counter = {"n": 0}

    def _factory(
        artifacts: list[ArtifactSpec] | None = None,
        *,
        write_files: bool = True,
        **overrides: Any,
    ) -> Workspace:
        counter["n"] += 1
        root = tmp_path / f"repo{counter['n']}"
        root.mkdir()
        specs = default_artifacts() if artifacts is None else artifacts
        if write_files:
            for spec in specs:
                target = root / spec.path
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(spec.content)
        document = manifest_document(specs, **overrides)
        manifest_path = root / ".provenance" / "manifest.json"
        manifest_path.parent.mkdir(parents=True)
        manifest_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        return Workspace(
            root=root,
            manifest_path=manifest_path,
            out_dir=tmp_path / f"site{counter['n']}",
            document=document,
        )

    return _factory


@pytest.fixture
def workspace(make_workspace: Callable[..., Workspace]) -> Workspace:
    """Convenience: the default three-artifact workspace."""
    return make_workspace()


@pytest.fixture
def schema() -> dict[str, Any]:
    """The packaged manifest schema."""
    return load_schema()


@pytest.fixture
def settings() -> SiteSettings:
    """Deterministic settings independent of the caller's environment."""
    return SiteSettings(_env_file=None, max_workers=2)


@pytest.fixture
def make_entry() -> Callable[..., ArtifactEntry]:
    """Factory fixture: build an ArtifactEntry with sensible defaults."""

    def _factory(content: bytes = b"", **overrides: Any) -> ArtifactEntry:
        defaults: dict[str, Any] = {
            "id": "sample",
            "title": "Sample",
            "path": "ci/sample.json",
            "media_type": "application/json",
            "render": MediaKind.JSON_SUMMARY,
            "digest": sha256_digest(content),
        }
        defaults.update(overrides)
        return ArtifactEntry(**defaults)

    return _factory
