"""Tests for Ed25519 manifest signatures and key files."""

from __future__ import annotations

import base64
import json
import stat

import nacl.signing
import pytest

from factories import default_artifacts, manifest_document
from provsite.core.errors import ManifestSignatureError, ManifestWriteError
from provsite.core.signing import (
    generate_keypair,
    load_private_key,
    public_key_b64,
    read_signature,
    sign_manifest,
    signature_path_for,
    verify_manifest_signature,
    write_key_material,
)


@pytest.fixture
def keypair() -> tuple[bytes, nacl.signing.VerifyKey]:
    signing_key = nacl.signing.SigningKey.generate()
    return bytes(signing_key), signing_key.verify_key


@pytest.fixture
def document() -> dict:
    return manifest_document(default_artifacts())


class TestSignatures:
    def test_round_trip_with_hex_public_key(self, keypair, document):
        seed, verify_key = keypair
        signature = sign_manifest(document, seed)
        verify_manifest_signature(document, signature, bytes(verify_key).hex())

    def test_base64_public_key_accepted(self, keypair, document):
        seed, verify_key = keypair
        signature = sign_manifest(document, seed)
        verify_manifest_signature(document, signature, base64.b64encode(bytes(verify_key)).decode())

    def test_key_order_does_not_matter(self, keypair, document):
        seed, verify_key = keypair
        signature = sign_manifest(document, seed)
        reordered = dict(reversed(list(document.items())))
        verify_manifest_signature(reordered, signature, bytes(verify_key).hex())

    def test_non_ascii_signed_as_raw_utf8(self, keypair):
        """Signatures made over raw UTF-8 key-sorted JSON verify."""
        seed, verify_key = keypair
        document = {"repo": "org/p", "front_page": {"title": "Qualität"}}
        message = json.dumps(
            document, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")
        assert "Qualität".encode("utf-8") in message
        external = base64.b64encode(nacl.signing.SigningKey(seed).sign(message).signature).decode()

        verify_manifest_signature(document, external, bytes(verify_key).hex())
        assert sign_manifest(document, seed) == external

    def test_tampered_document_rejected(self, keypair, document):
        """Changing a declared digest after signing must fail verification."""
        seed, verify_key = keypair
        signature = sign_manifest(document, seed)
        document["artifacts"][0]["digest"] = "sha256:" + "0" * 64
        with pytest.raises(ManifestSignatureError, match="verification failed"):
            verify_manifest_signature(document, signature, bytes(verify_key).hex())

    def test_wrong_key_rejected(self, keypair, document):
        seed, _ = keypair
        signature = sign_manifest(document, seed)
        other = nacl.signing.SigningKey.generate().verify_key
        with pytest.raises(ManifestSignatureError):
            verify_manifest_signature(document, signature, bytes(other).hex())

    def test_malformed_public_key(self, keypair, document):
        seed, _ = keypair
        signature = sign_manifest(document, seed)
        with pytest.raises(ManifestSignatureError, match="32 bytes"):
            verify_manifest_signature(document, signature, "abcd")

    def test_signature_not_base64(self, keypair, document):
        _, verify_key = keypair
        with pytest.raises(ManifestSignatureError, match="base64"):
            verify_manifest_signature(document, "not base64!!", bytes(verify_key).hex())

    def test_exit_code(self):
        assert ManifestSignatureError("x").exit_code == 2


class TestKeys:
    def test_generated_pair_matches(self, document):
        seed, public_key = generate_keypair()
        assert len(seed) == 32
        assert public_key == public_key_b64(seed)
        verify_manifest_signature(document, sign_manifest(document, seed), public_key)

    def test_load_raw_seed(self, tmp_path, keypair):
        seed, _ = keypair
        path = tmp_path / "signing.key"
        path.write_bytes(seed)
        assert load_private_key(path) == seed

    def test_load_hex_and_base64_seed(self, tmp_path, keypair):
        seed, _ = keypair
        hex_path = tmp_path / "hex.key"
        hex_path.write_text(seed.hex() + "\n", encoding="ascii")
        b64_path = tmp_path / "b64.key"
        b64_path.write_text(base64.b64encode(seed).decode() + "\n", encoding="ascii")
        assert load_private_key(hex_path) == seed
        assert load_private_key(b64_path) == seed

    def test_wrong_length_rejected(self, tmp_path):
        path = tmp_path / "short.key"
        path.write_bytes(b"\x00" * 16)
        with pytest.raises(ManifestSignatureError, match="32-byte seed"):
            load_private_key(path)

    def test_missing_key_file(self, tmp_path):
        with pytest.raises(ManifestSignatureError, match="cannot read private key"):
            load_private_key(tmp_path / "absent.key")


class TestSignatureFiles:
    def test_default_signature_path(self, tmp_path):
        assert signature_path_for(tmp_path / "manifest.json") == tmp_path / "manifest.json.sig"

    def test_missing_signature_file(self, tmp_path):
        with pytest.raises(ManifestSignatureError, match="cannot read signature"):
            read_signature(tmp_path / "absent.sig")

    def test_private_material_is_owner_only(self, tmp_path):
        path = tmp_path / "keys" / "signing.key"
        write_key_material(path, b"\x01" * 32, private=True)
        assert path.read_bytes() == b"\x01" * 32
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_write_failure_is_manifest_write_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(ManifestWriteError) as excinfo:
            write_key_material(blocker / "out.sig", b"sig\n")
        assert excinfo.value.exit_code == 5
