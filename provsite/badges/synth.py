"""Badge synthesizer.

Facts are derived once from the published artifacts into ``BadgeFacts``;
each ``Badge`` is then a pure function of (kind, facts).  A missing or
unparseable tests/coverage artifact yields a neutral ``unknown`` badge,
never an error.

Color scheme
------------
- tests    : brightgreen (0 failed), orange (<= 2 failed), red
- coverage : brightgreen (>= 90%), yellow (>= 75%), orange (> 0%), lightgrey
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from provsite.models.badges import Badge, BadgeFacts, BadgeKind, SuiteFacts
from provsite.models.manifest import ArtifactEntry, MediaKind
from provsite.models.verification import VerificationResult
from provsite.render.dispatcher import table_rows, table_total_pct

logger = logging.getLogger(__name__)

UNKNOWN_MESSAGE = "unknown"
UNKNOWN_COLOR = "lightgrey"


def _load_json(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def suite_facts(payload: Any) -> SuiteFacts | None:
    """Pass/fail counts from a test summary object, if it carries them."""
    if not isinstance(payload, dict) or not _is_count(payload.get("passed")):
        return None
    passed = payload["passed"]
    total = payload.get("total")
    failed = payload.get("failed")
    if _is_count(total) and not _is_count(failed):
        failed = max(total - passed, 0)
    elif _is_count(failed) and not _is_count(total):
        total = passed + failed
    elif not (_is_count(total) and _is_count(failed)):
        return None
    duration = payload.get("duration_seconds")
    return SuiteFacts(
        total=total,
        passed=passed,
        failed=failed,
        duration_seconds=float(duration) if isinstance(duration, (int, float)) else None,
    )


def coverage_pct(payload: Any) -> float | None:
    """``total.pct``, else the mean of a numeric ``pct`` column."""
    total = table_total_pct(payload)
    if total is not None:
        return total
    rows = table_rows(payload) or []
    values = [
        float(row["pct"])
        for row in rows
        if isinstance(row, dict) and isinstance(row.get("pct"), (int, float))
    ]
    if values and len(values) == len(rows):
        return sum(values) / len(values)
    return None


def derive_facts(
    artifacts: Sequence[tuple[ArtifactEntry, bytes]],
    verifications: Sequence[VerificationResult],
) -> BadgeFacts:
    """Aggregate badge facts over published artifacts, in manifest order."""
    tests: SuiteFacts | None = None
    coverage: float | None = None
    for entry, data in artifacts:
        if tests is None and entry.render == MediaKind.JSON_SUMMARY:
            tests = suite_facts(_load_json(data))
            if tests is not None:
                logger.debug("Test facts taken from %s", entry.id)
        elif coverage is None and entry.render == MediaKind.JSON_TABLE:
            coverage = coverage_pct(_load_json(data))
            if coverage is not None:
                logger.debug("Coverage facts taken from %s", entry.id)
    return BadgeFacts(
        all_verified=all(v.is_verified for v in verifications),
        tests=tests,
        coverage_pct=coverage,
    )


# ---------------------------------------------------------------------------
# Per-kind synthesis
# ---------------------------------------------------------------------------


def badge_provenance(facts: BadgeFacts) -> Badge:
    if facts.all_verified:
        return Badge(kind=BadgeKind.PROVENANCE, label="provenance", message="verified", color="brightgreen")
    return Badge(kind=BadgeKind.PROVENANCE, label="provenance", message="digest mismatch", color="red")


def badge_tests(facts: BadgeFacts) -> Badge:
    suite = facts.tests
    if suite is None:
        return Badge(kind=BadgeKind.TESTS, label="tests", message=UNKNOWN_MESSAGE, color=UNKNOWN_COLOR)
    if suite.failed == 0:
        color = "brightgreen"
    elif suite.failed <= 2:
        color = "orange"
    else:
        color = "red"
    return Badge(
        kind=BadgeKind.TESTS,
        label="tests",
        message=f"{suite.passed}/{suite.total} passed",
        color=color,
    )


def badge_coverage(facts: BadgeFacts) -> Badge:
    pct = facts.coverage_pct
    if pct is None:
        return Badge(kind=BadgeKind.COVERAGE, label="coverage", message=UNKNOWN_MESSAGE, color=UNKNOWN_COLOR)
    if pct >= 90.0:
        color = "brightgreen"
    elif pct >= 75.0:
        color = "yellow"
    elif pct > 0.0:
        color = "orange"
    else:
        color = "lightgrey"
    return Badge(kind=BadgeKind.COVERAGE, label="coverage", message=f"{pct:.1f}%", color=color)


_SYNTHESIZERS = {
    BadgeKind.PROVENANCE: badge_provenance,
    BadgeKind.TESTS: badge_tests,
    BadgeKind.COVERAGE: badge_coverage,
}


def synthesize(kind: BadgeKind, facts: BadgeFacts) -> Badge:
    return _SYNTHESIZERS[kind](facts)


def synthesize_all(facts: BadgeFacts) -> dict[BadgeKind, Badge]:
    """One badge per kind, in ``BadgeKind`` declaration order."""
    return {kind: synthesize(kind, facts) for kind in BadgeKind}
