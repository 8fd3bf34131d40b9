"""Generation pipeline — the coordinator for one manifest-to-site run.

Phases:

    load + validate -> (signature) -> per-entry read/verify/render
        -> barrier -> failure policy -> badges -> assemble -> emit

Per-entry work is pure and runs on a thread pool; results are collected
in manifest order before anything downstream starts.  Only ``emit``
writes to disk, and nothing is written unless every earlier phase
succeeded.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from provsite.badges.synth import derive_facts, synthesize_all
from provsite.config import FailurePolicy, SiteSettings
from provsite.core.errors import MissingArtifactFile, ProvsiteError, RenderError
from provsite.core.loader import load_schema, parse_manifest, read_document
from provsite.core.signing import read_signature, signature_path_for, verify_manifest_signature
from provsite.core.verifier import read_artifact, verify
from provsite.models.manifest import ArtifactEntry, Manifest
from provsite.models.pages import RenderedArtifactPage
from provsite.models.site import GenerationReport, SiteTree, SkippedEntry
from provsite.models.verification import VerificationResult
from provsite.render.dispatcher import render
from provsite.site.assembler import assemble
from provsite.site.emitter import emit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryOutcome:
    """Result of processing one artifact entry in a worker."""

    entry: ArtifactEntry
    data: bytes = b""
    verification: VerificationResult | None = None
    page: RenderedArtifactPage | None = None
    error: ProvsiteError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def process_entry(entry: ArtifactEntry, root: Path, inline_limit_bytes: int) -> EntryOutcome:
    """Read, verify, and render one entry.  Never raises for entry errors."""
    try:
        data = read_artifact(entry, root)
    except MissingArtifactFile as exc:
        return EntryOutcome(entry=entry, error=exc)

    verification = verify(entry, data)
    try:
        page = render(entry, data, inline_limit_bytes=inline_limit_bytes)
    except RenderError as exc:
        return EntryOutcome(entry=entry, data=data, verification=verification, error=exc)
    return EntryOutcome(entry=entry, data=data, verification=verification, page=page)


def process_entries(
    manifest: Manifest,
    root: Path,
    *,
    inline_limit_bytes: int,
    max_workers: int | None = None,
) -> list[EntryOutcome]:
    """Process all entries in parallel; returns outcomes in manifest order."""
    workers = max(1, min(max_workers or os.cpu_count() or 1, len(manifest.artifacts) or 1))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="provsite") as pool:
        outcomes = list(
            pool.map(
                lambda entry: process_entry(entry, root, inline_limit_bytes),
                manifest.artifacts,
            )
        )
    logger.debug("Processed %d entries on %d worker(s)", len(outcomes), workers)
    return outcomes


def apply_policy(
    outcomes: list[EntryOutcome], policy: FailurePolicy
) -> tuple[list[EntryOutcome], list[SkippedEntry]]:
    """Split outcomes into published and skipped, or raise under ``abort``.

    Missing files and render errors are treated identically.
    """
    published: list[EntryOutcome] = []
    skipped: list[SkippedEntry] = []
    for outcome in outcomes:
        if outcome.ok:
            published.append(outcome)
            continue
        if policy == FailurePolicy.ABORT:
            logger.error("Aborting: %s", outcome.error)
            raise outcome.error
        logger.warning("Skipping artifact %s: %s", outcome.entry.id, outcome.error)
        skipped.append(SkippedEntry(artifact_id=outcome.entry.id, reason=str(outcome.error)))
    return published, skipped


def load_verified_manifest(
    manifest_path: Path,
    *,
    schema_path: Path | None,
    settings: SiteSettings,
    signature_path: Path | None = None,
) -> Manifest:
    document = read_document(manifest_path)
    manifest = parse_manifest(document, schema=load_schema(schema_path), source=manifest_path)
    if settings.signature_required or signature_path is not None:
        sig_path = signature_path or signature_path_for(manifest_path)
        verify_manifest_signature(document, read_signature(sig_path), settings.public_key)
    return manifest


def build_tree(
    manifest: Manifest,
    root: Path,
    settings: SiteSettings,
) -> tuple[SiteTree, list[EntryOutcome], list[SkippedEntry]]:
    """Everything up to (not including) emission.  No side effects."""
    outcomes = process_entries(
        manifest,
        root,
        inline_limit_bytes=settings.inline_limit_bytes,
        max_workers=settings.max_workers,
    )
    published, skipped = apply_policy(outcomes, settings.on_error)

    verifications = [o.verification for o in published]
    facts = derive_facts([(o.entry, o.data) for o in published], verifications)
    tree = assemble(
        manifest,
        [o.page for o in published],
        verifications,
        synthesize_all(facts),
        facts,
        {o.entry.id: o.data for o in published},
    )
    return tree, published, skipped


def generate(
    manifest_path: Path | str,
    artifact_root: Path | str,
    out_dir: Path | str,
    schema_path: Path | str | None = None,
    *,
    settings: SiteSettings | None = None,
    signature_path: Path | str | None = None,
) -> GenerationReport:
    """Generate the static provenance site.

    Parameters
    ----------
    manifest_path:
        Manifest JSON document.
    artifact_root:
        Directory artifact ``path`` values are relative to.
    out_dir:
        Output directory; created if needed.
    schema_path:
        JSON Schema for the manifest.  Defaults to ``settings.schema_path``.
    settings:
        Generator settings.  Uses environment defaults if not provided.
    signature_path:
        Detached Ed25519 signature; implies signature verification.

    Raises
    ------
    ProvsiteError
        Any fatal error; nothing is written unless emission began.
    """
    settings = settings or SiteSettings()
    manifest_path = Path(manifest_path)
    root = Path(artifact_root)
    manifest = load_verified_manifest(
        manifest_path,
        schema_path=Path(schema_path) if schema_path else settings.schema_path,
        settings=settings,
        signature_path=Path(signature_path) if signature_path else None,
    )

    tree, published, skipped = build_tree(manifest, root, settings)
    written = emit(tree, Path(out_dir))

    report = GenerationReport(
        out_dir=Path(out_dir),
        commit=manifest.commit,
        published=tuple(o.entry.id for o in published),
        skipped=tuple(skipped),
        verifications=tuple(o.verification for o in published),
        file_count=len(written),
    )
    logger.info(
        "Generated site for %s: %d published, %d skipped, %d mismatch(es)",
        manifest.commit,
        len(report.published),
        len(report.skipped),
        len(report.mismatches),
    )
    return report
