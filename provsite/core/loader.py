"""Manifest loader and validator.

Validation is all-or-nothing: the document is checked against the JSON
Schema, then against semantic rules the schema cannot express (unique
ids, repository-relative paths).  Every violation is reported with its
document path, e.g. ``artifacts[2].render``.  No artifact file is
touched here.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from pydantic import ValidationError

from provsite.config import DEFAULT_SCHEMA_PATH
from provsite.core.errors import SchemaValidationError
from provsite.models.manifest import Manifest

logger = logging.getLogger(__name__)


def format_path(parts: Iterable[str | int]) -> str:
    """Render a JSON document path as ``artifacts[2].render``.

    The document root is ``$``.
    """
    out = ""
    for part in parts:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out or "$"


def read_document(path: Path) -> dict[str, Any]:
    """Read and parse a JSON document, mapping failures to validation errors."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaValidationError(path, [("$", f"cannot read file: {exc.strerror or exc}")]) from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaValidationError(
            path, [("$", f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}")]
        ) from exc
    if not isinstance(document, dict):
        raise SchemaValidationError(path, [("$", "manifest must be a JSON object")])
    return document


def load_schema(path: Path | None = None) -> dict[str, Any]:
    schema_path = Path(path) if path else DEFAULT_SCHEMA_PATH
    schema = read_document(schema_path)
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as exc:
        raise SchemaValidationError(schema_path, [("$", f"invalid JSON Schema: {exc.message}")]) from exc
    return schema


def _path_sort_key(parts: Iterable[str | int]) -> tuple[tuple[int, int, str], ...]:
    # Indexes compare numerically so artifacts[2] sorts before artifacts[10].
    return tuple((0, part, "") if isinstance(part, int) else (1, 0, str(part)) for part in parts)


def validate_document(document: dict[str, Any], schema: dict[str, Any]) -> list[tuple[str, str]]:
    """Return every schema violation as ``(path, message)``, sorted by path."""
    validator = Draft202012Validator(schema)
    errors = sorted(
        validator.iter_errors(document),
        key=lambda error: (_path_sort_key(error.absolute_path), error.message),
    )
    return [(format_path(error.absolute_path), error.message) for error in errors]


def check_semantics(document: dict[str, Any]) -> list[tuple[str, str]]:
    """Rules beyond the schema: unique ids and safe relative paths."""
    violations: list[tuple[str, str]] = []
    seen: dict[str, int] = {}
    for index, artifact in enumerate(document.get("artifacts", [])):
        artifact_id = artifact.get("id")
        if artifact_id in seen:
            violations.append(
                (
                    f"artifacts[{index}].id",
                    f"duplicate artifact id {artifact_id!r} (first at artifacts[{seen[artifact_id]}])",
                )
            )
        else:
            seen[artifact_id] = index

        raw_path = artifact.get("path", "")
        posix = PurePosixPath(raw_path.replace("\\", "/"))
        if posix.is_absolute() or raw_path.startswith("/"):
            violations.append((f"artifacts[{index}].path", f"must be relative, got {raw_path!r}"))
        elif ".." in posix.parts:
            violations.append((f"artifacts[{index}].path", f"must not contain '..', got {raw_path!r}"))
    return violations


def parse_manifest(
    document: dict[str, Any],
    *,
    schema: dict[str, Any],
    source: Path | str = "<memory>",
) -> Manifest:
    """Validate an already-parsed manifest document and build the model."""
    violations = validate_document(document, schema)
    if not violations:
        violations = check_semantics(document)
    if violations:
        logger.error("Manifest %s rejected with %d violation(s)", source, len(violations))
        raise SchemaValidationError(source, violations)

    try:
        return Manifest.model_validate(document)
    except ValidationError as exc:
        # Only reachable with a schema looser than the packaged one.
        raise SchemaValidationError(
            source,
            [(format_path(err["loc"]), err["msg"]) for err in exc.errors()],
        ) from exc


def load_manifest(manifest_path: Path | str, schema_path: Path | str | None = None) -> Manifest:
    """Load, schema-validate, and semantically validate a manifest file."""
    path = Path(manifest_path)
    schema = load_schema(Path(schema_path) if schema_path else None)
    manifest = parse_manifest(read_document(path), schema=schema, source=path)
    logger.info(
        "Loaded manifest %s: commit=%s artifacts=%d",
        path,
        manifest.commit,
        len(manifest.artifacts),
    )
    return manifest
