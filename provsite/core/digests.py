"""Rewrite a manifest's declared digests from the artifact files on disk.

Used when producing a manifest, before signing it.  The manifest must
already be valid; only each artifact's ``digest`` field changes, and key
order of the document is preserved.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from provsite.core.errors import ManifestWriteError
from provsite.core.hasher import content_address
from provsite.core.loader import load_schema, parse_manifest, read_document
from provsite.core.verifier import read_artifact

logger = logging.getLogger(__name__)


def update_digests(
    manifest_path: Path, root: Path, schema_path: Path | None = None
) -> list[tuple[str, str, bool]]:
    """Recompute every artifact digest and write the manifest back.

    Returns ``(artifact_id, digest, changed)`` per artifact in manifest
    order.  Nothing is written if any artifact file cannot be read.
    """
    manifest_path = Path(manifest_path)
    document = read_document(manifest_path)
    manifest = parse_manifest(document, schema=load_schema(schema_path), source=manifest_path)

    results: list[tuple[str, str, bool]] = []
    for raw, entry in zip(document["artifacts"], manifest.artifacts):
        digest = content_address(read_artifact(entry, Path(root)))
        changed = raw.get("digest") != digest
        raw["digest"] = digest
        results.append((entry.id, digest, changed))

    text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    try:
        manifest_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ManifestWriteError(manifest_path, exc) from exc
    logger.info(
        "Updated %d of %d digest(s) in %s",
        sum(1 for _, _, changed in results if changed),
        len(results),
        manifest_path,
    )
    return results
