"""Ed25519 manifest signatures via PyNaCl.

The signed message is the canonical JSON of the manifest document
(sorted keys, compact separators, raw UTF-8), so whitespace or key order
changes in the file do not invalidate a signature.  Signatures and
public keys are written as base64; public keys are also accepted as hex.
Private keys are 32-byte Ed25519 seeds stored as raw bytes.
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Any

import nacl.signing
from nacl.exceptions import BadSignatureError

from provsite.core.errors import ManifestSignatureError, ManifestWriteError
from provsite.core.hasher import canonical_manifest_bytes

logger = logging.getLogger(__name__)

_KEY_LENGTH = 32


def _decode_key_text(text: str) -> bytes | None:
    text = text.strip()
    candidates: list[bytes] = []
    try:
        candidates.append(bytes.fromhex(text))
    except ValueError:
        pass
    try:
        candidates.append(base64.b64decode(text, validate=True))
    except (binascii.Error, ValueError):
        pass
    for raw in candidates:
        if len(raw) == _KEY_LENGTH:
            return raw
    return None


def _decode_public_key(public_key: str) -> bytes:
    raw = _decode_key_text(public_key)
    if raw is None:
        raise ManifestSignatureError("public key must be 32 bytes, base64 or hex encoded")
    return raw


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def generate_keypair() -> tuple[bytes, str]:
    """Return a fresh ``(private seed, base64 public key)`` pair."""
    signing_key = nacl.signing.SigningKey.generate()
    return bytes(signing_key), public_key_b64(bytes(signing_key))


def public_key_b64(private_key: bytes) -> str:
    verify_key = nacl.signing.SigningKey(private_key).verify_key
    return base64.b64encode(bytes(verify_key)).decode("ascii")


def load_private_key(path: Path) -> bytes:
    """Read a 32-byte Ed25519 seed.

    The file normally holds the raw seed; hex or base64 text of the seed
    is accepted too.
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise ManifestSignatureError(f"cannot read private key at {path}: {exc}") from exc
    if len(raw) == _KEY_LENGTH:
        return raw
    try:
        decoded = _decode_key_text(raw.decode("ascii"))
    except UnicodeDecodeError:
        decoded = None
    if decoded is None:
        raise ManifestSignatureError(f"private key at {path} must be a 32-byte seed")
    return decoded


# ---------------------------------------------------------------------------
# Signing and verification
# ---------------------------------------------------------------------------


def sign_manifest(document: dict[str, Any], private_key: bytes) -> str:
    """Sign a manifest document and return the base64 signature."""
    signing_key = nacl.signing.SigningKey(private_key)
    signed = signing_key.sign(canonical_manifest_bytes(document))
    return base64.b64encode(signed.signature).decode("ascii")


def verify_manifest_signature(
    document: dict[str, Any], signature_b64: str, public_key: str
) -> None:
    """Raise ``ManifestSignatureError`` unless the signature is valid."""
    verify_key = nacl.signing.VerifyKey(_decode_public_key(public_key))
    try:
        signature = base64.b64decode(signature_b64.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ManifestSignatureError("signature is not valid base64") from exc

    try:
        verify_key.verify(canonical_manifest_bytes(document), signature)
    except BadSignatureError as exc:
        raise ManifestSignatureError("manifest signature verification failed") from exc
    except ValueError as exc:
        raise ManifestSignatureError(f"malformed signature: {exc}") from exc
    logger.info("Manifest signature verified")


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def signature_path_for(manifest_path: Path) -> Path:
    """Default detached signature location: ``<manifest>.sig``."""
    return manifest_path.with_name(manifest_path.name + ".sig")


def read_signature(path: Path) -> str:
    try:
        return path.read_text(encoding="ascii")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestSignatureError(f"cannot read signature at {path}: {exc}") from exc


def write_key_material(path: Path, content: bytes, *, private: bool = False) -> None:
    """Write a signature, public key, or private seed file."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        if private:
            path.chmod(0o600)
    except OSError as exc:
        raise ManifestWriteError(path, exc) from exc
    logger.debug("Wrote %s (%d bytes)", path, len(content))
