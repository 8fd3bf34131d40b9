"""Tests for hashing helpers — digests, canonical JSON, digest parsing."""

from __future__ import annotations

import hashlib

from provsite.core.hasher import (
    canonical_manifest_bytes,
    content_address,
    sha256_hex,
    split_digest,
)


class TestHasher:
    def test_sha256_hex(self):
        assert sha256_hex(b"abc") == hashlib.sha256(b"abc").hexdigest()

    def test_content_address_prefix(self):
        assert content_address(b"abc") == f"sha256:{hashlib.sha256(b'abc').hexdigest()}"

    def test_canonical_json_sorted_and_compact(self):
        assert canonical_manifest_bytes({"b": 1, "a": [1, 2]}) == b'{"a":[1,2],"b":1}'

    def test_canonical_json_ignores_key_order(self):
        assert canonical_manifest_bytes({"x": 1, "y": 2}) == canonical_manifest_bytes({"y": 2, "x": 1})

    def test_non_ascii_kept_as_utf8(self):
        data = canonical_manifest_bytes({"repo": "org/p", "front_page": {"title": "Qualität"}})
        assert data == '{"front_page":{"title":"Qualität"},"repo":"org/p"}'.encode("utf-8")
        assert b"\\u00e4" not in data

    def test_split_digest(self):
        assert split_digest("sha256:ABCDEF") == ("sha256", "abcdef")
        assert split_digest("SHA512:00") == ("sha512", "00")

    def test_split_bare_hex_defaults_to_sha256(self):
        assert split_digest("abc123") == ("sha256", "abc123")
