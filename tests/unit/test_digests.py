"""Tests for rewriting manifest digests from artifact files."""

from __future__ import annotations

import json

import pytest

from factories import sha256_digest
from provsite.core.digests import update_digests
from provsite.core.errors import MissingArtifactFile, SchemaValidationError
from provsite.core.loader import load_manifest


class TestUpdateDigests:
    def test_stale_digest_rewritten(self, workspace):
        path = workspace.artifact_file("coverage")
        path.write_bytes(b'{"files": [{"pct": 1}]}')

        results = update_digests(workspace.manifest_path, workspace.root)

        assert [(i, changed) for i, _, changed in results] == [
            ("tests-summary", False),
            ("coverage", True),
            ("failures", False),
        ]
        manifest = load_manifest(workspace.manifest_path)
        assert manifest.artifacts[1].digest == sha256_digest(path.read_bytes())

    def test_only_digests_change(self, workspace):
        workspace.artifact_file("failures").write_bytes(b"# Failing Specs\n")
        update_digests(workspace.manifest_path, workspace.root)
        document = json.loads(workspace.manifest_path.read_text(encoding="utf-8"))
        for before, after in zip(workspace.document["artifacts"], document["artifacts"]):
            assert list(before) == list(after)
            assert {k: v for k, v in before.items() if k != "digest"} == {
                k: v for k, v in after.items() if k != "digest"
            }
        assert document["commit"] == workspace.document["commit"]

    def test_non_ascii_written_unescaped(self, make_workspace):
        ws = make_workspace(front_page={"title": "Qualität"})
        update_digests(ws.manifest_path, ws.root)
        assert "Qualität" in ws.manifest_path.read_text(encoding="utf-8")

    def test_missing_artifact_leaves_manifest_untouched(self, workspace):
        original = workspace.manifest_path.read_bytes()
        workspace.artifact_file("failures").unlink()
        with pytest.raises(MissingArtifactFile):
            update_digests(workspace.manifest_path, workspace.root)
        assert workspace.manifest_path.read_bytes() == original

    def test_invalid_manifest_rejected(self, make_workspace):
        ws = make_workspace(version=2)
        with pytest.raises(SchemaValidationError):
            update_digests(ws.manifest_path, ws.root)
