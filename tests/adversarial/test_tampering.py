"""Adversarial tests — tampered artifacts and hostile manifests.

These tests verify that the generator:
1. Flags artifacts whose bytes changed after the manifest was written
2. Refuses manifest paths that escape the artifact root
3. Never emits markup taken from titles, ids, or artifact content
4. Rejects a manifest whose signature no longer matches its content
"""

from __future__ import annotations

import json
import os

import nacl.signing
import pytest

from factories import ArtifactSpec
from provsite import generate
from provsite.config import FailurePolicy
from provsite.core.errors import ManifestSignatureError, MissingArtifactFile, SchemaValidationError
from provsite.core.signing import sign_manifest


class TestArtifactTampering:
    """Artifact bytes modified between manifest creation and generation."""

    def test_appended_byte_detected(self, workspace, settings):
        path = workspace.artifact_file("failures")
        path.write_bytes(path.read_bytes() + b" ")
        report = generate(workspace.manifest_path, workspace.root, workspace.out_dir, settings=settings)
        assert [m.artifact_id for m in report.mismatches] == ["failures"]

    def test_tampered_asset_is_published_as_read(self, workspace, settings):
        """The raw download must be the bytes that failed verification, not the declared ones."""
        tampered = b'{"total": 10, "passed": 10, "failed": 0}'
        workspace.artifact_file("tests-summary").write_bytes(tampered)
        generate(workspace.manifest_path, workspace.root, workspace.out_dir, settings=settings)
        asset = workspace.out_dir / "assets" / "tests-summary" / "summary.json"
        assert asset.read_bytes() == tampered
        records = json.loads(workspace.read_out("search_index.json"))
        assert {r["id"]: r["verified"] for r in records}["tests-summary"] is False

    def test_swapped_files_flagged(self, workspace, settings):
        summary = workspace.artifact_file("tests-summary")
        coverage = workspace.artifact_file("coverage")
        a, b = summary.read_bytes(), coverage.read_bytes()
        summary.write_bytes(b)
        coverage.write_bytes(a)
        # the summary object has no rows, so the coverage entry cannot render
        skip = settings.model_copy(update={"on_error": FailurePolicy.SKIP})
        report = generate(workspace.manifest_path, workspace.root, workspace.out_dir, settings=skip)
        assert [s.artifact_id for s in report.skipped] == ["coverage"]
        assert [m.artifact_id for m in report.mismatches] == ["tests-summary"]
        assert json.loads(workspace.read_out("badge/provenance.json"))["color"] == "red"


class TestPathEscape:
    @pytest.mark.parametrize("bad_path", ["../outside.json", "ci/../../outside.json", "/etc/passwd"])
    def test_escaping_paths_rejected_at_load(self, make_workspace, settings, bad_path):
        spec = ArtifactSpec(
            id="escape", title="Escape", path="ok.json", content=b"{}", render="json-summary"
        )
        ws = make_workspace([spec])
        document = json.loads(ws.manifest_path.read_text(encoding="utf-8"))
        document["artifacts"][0]["path"] = bad_path
        ws.manifest_path.write_text(json.dumps(document), encoding="utf-8")
        with pytest.raises(SchemaValidationError) as excinfo:
            generate(ws.manifest_path, ws.root, ws.out_dir, settings=settings)
        assert "artifacts[0].path" in excinfo.value.paths
        assert not ws.out_dir.exists()

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlink_out_of_root_treated_as_missing(self, make_workspace, settings, tmp_path):
        secret = tmp_path / "secret.json"
        secret.write_bytes(b'{"token": "hunter2"}')
        spec = ArtifactSpec(
            id="link", title="Link", path="link.json", content=secret.read_bytes(), render="json-summary"
        )
        ws = make_workspace([spec], write_files=False)
        (ws.root / "link.json").symlink_to(secret)
        with pytest.raises(MissingArtifactFile, match="outside the artifact root"):
            generate(ws.manifest_path, ws.root, ws.out_dir, settings=settings)
        assert not ws.out_dir.exists()


class TestMarkupInjection:
    def test_hostile_title_and_content_escaped(self, make_workspace, settings):
        spec = ArtifactSpec(
            id="xss",
            title='<img src=x onerror="alert(1)">',
            path="xss.txt",
            content=b"</pre><script>alert(2)</script>",
            render="raw-text",
            media_type="text/plain",
        )
        ws = make_workspace([spec])
        generate(ws.manifest_path, ws.root, ws.out_dir, settings=settings)
        for page in ("index.html", "artifacts/index.html", "a/xss/index.html"):
            html = ws.read_out(page)
            assert "<img src=x" not in html
            assert "<script>" not in html

    def test_hostile_markdown_escaped(self, make_workspace, settings):
        spec = ArtifactSpec(
            id="md",
            title="Notes",
            path="notes.md",
            content=b"# Notes\n\n- <b onclick=\"x()\">item</b>\n\n```\n</code></pre><script>1</script>\n```\n",
            render="markdown",
            media_type="text/markdown",
        )
        ws = make_workspace([spec])
        generate(ws.manifest_path, ws.root, ws.out_dir, settings=settings)
        html = ws.read_out("a/md/index.html")
        assert "<b onclick" not in html
        assert "<script>" not in html


class TestSignatureTampering:
    def test_manifest_edited_after_signing(self, workspace, settings):
        """Editing the manifest after signing must fail before any output is written."""
        signing_key = nacl.signing.SigningKey.generate()
        sig = workspace.manifest_path.with_name("manifest.json.sig")
        sig.write_text(sign_manifest(workspace.document, bytes(signing_key)), encoding="ascii")

        document = dict(workspace.document)
        document["commit"] = "cafebabe"
        workspace.manifest_path.write_text(json.dumps(document), encoding="utf-8")

        signed = settings.model_copy(
            update={"signature_required": True, "public_key": bytes(signing_key.verify_key).hex()}
        )
        with pytest.raises(ManifestSignatureError):
            generate(workspace.manifest_path, workspace.root, workspace.out_dir, settings=signed)
        assert not workspace.out_dir.exists()
