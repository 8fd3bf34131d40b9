"""Site assembler — builds the complete ``SiteTree`` in memory.

Assembly is pure: given the same manifest, pages, verification results,
badges, and asset bytes it produces the same tree, byte for byte.  All
listings follow manifest order.  Writing to disk is ``emitter.emit``'s job.

Output layout::

    index.html                   home page
    artifacts/index.html         artifacts index table
    a/{id}/index.html            artifact detail page
    assets/{id}/{filename}       raw artifact bytes
    search_index.json            [{id, title, ...}]
    robots.txt                   disallows /fragment/
    badge/{kind}.json|svg        shields.io endpoint + SVG
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from provsite.models.badges import Badge, BadgeFacts, BadgeKind
from provsite.models.manifest import Manifest
from provsite.models.pages import RenderedArtifactPage
from provsite.models.site import SiteTree
from provsite.models.verification import VerificationResult

logger = logging.getLogger(__name__)

HTML = "text/html; charset=utf-8"
JSON = "application/json"
SVG = "image/svg+xml"
TEXT = "text/plain; charset=utf-8"

ROBOTS_TXT = "User-agent: *\nDisallow: /fragment/\n"

_TEMPLATE_DIR = Path(__file__).parent / "templates"
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def _render(template: str, **context: object) -> str:
    return _env.get_template(template).render(**context)


def home_kpis(facts: BadgeFacts, artifact_count: int) -> list[tuple[str, str]]:
    """KPI cards for the home page.  Always at least one card."""
    kpis: list[tuple[str, str]] = []
    if facts.tests is not None:
        suite = facts.tests
        kpis.append(("Tests", f"{suite.total} total, {suite.passed} passed, {suite.failed} failed"))
        if suite.duration_seconds is not None:
            kpis.append(("Duration", f"{suite.duration_seconds:.2f}s"))
    if facts.coverage_pct is not None:
        kpis.append(("Coverage", f"{facts.coverage_pct:.1f}%"))
    kpis.append(("Artifacts", str(artifact_count)))
    kpis.append(("Provenance", "verified" if facts.all_verified else "digest mismatch"))
    return kpis


def search_index(
    pages: Sequence[RenderedArtifactPage], results: Mapping[str, VerificationResult]
) -> bytes:
    records = [
        {
            "id": page.id,
            "title": page.title,
            "render": page.render.value,
            "media_type": page.media_type,
            "verified": results[page.id].is_verified,
            "href": f"/a/{page.id}/",
        }
        for page in pages
    ]
    return (json.dumps(records, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def assemble(
    manifest: Manifest,
    pages: Sequence[RenderedArtifactPage],
    verifications: Sequence[VerificationResult],
    badges: Mapping[BadgeKind, Badge],
    facts: BadgeFacts,
    assets: Mapping[str, bytes],
) -> SiteTree:
    """Build the output tree for the published pages.

    ``pages`` are in manifest order and contain only published entries;
    ``assets`` maps artifact id -> raw bytes for each of them.
    """
    results = {v.artifact_id: v for v in verifications}
    pairs = [(page, results[page.id]) for page in pages]
    common = {
        "commit": manifest.commit,
        "repo": manifest.repo,
    }

    tree = SiteTree()
    tree.add(
        "index.html",
        _render(
            "home.html.j2",
            page_title=f"{manifest.front_page.title} — {manifest.commit}",
            site_title=manifest.front_page.title,
            generated_at=manifest.generated_at,
            run_url=manifest.workflow_run.url if manifest.workflow_run else "",
            kpis=home_kpis(facts, len(pages)),
            featured=pairs,
            **common,
        ),
        HTML,
    )
    tree.add(
        "artifacts/index.html",
        _render("artifacts.html.j2", page_title="All Artifacts", rows=pairs, **common),
        HTML,
    )

    for page, result in pairs:
        tree.add(
            f"a/{page.id}/index.html",
            _render("artifact.html.j2", page_title=page.title, page=page, result=result, **common),
            HTML,
        )
        entry = manifest.get(page.id)
        tree.add(page.asset_path, assets[page.id], entry.media_type if entry else page.media_type)

    tree.add("search_index.json", search_index(pages, results), JSON)
    tree.add("robots.txt", ROBOTS_TXT, TEXT)

    for kind, badge in badges.items():
        tree.add(f"badge/{kind.value}.json", badge.to_json_bytes(), JSON)
        tree.add(f"badge/{kind.value}.svg", badge.to_svg(), SVG)

    logger.info("Assembled site tree: %d files for %d artifact(s)", len(tree), len(pages))
    return tree
