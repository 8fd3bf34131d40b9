"""Badge models — one value, two serializations (JSON and SVG)."""

from __future__ import annotations

import json
from enum import Enum
from xml.sax.saxutils import escape

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_VERSION = 1

# shields.io named colours -> hex
_SVG_COLORS: dict[str, str] = {
    "brightgreen": "#4c1",
    "green": "#97ca00",
    "yellow": "#dfb317",
    "orange": "#fe7d37",
    "red": "#e05d44",
    "blue": "#007ec6",
    "lightgrey": "#9f9f9f",
}

_CHAR_WIDTH = 6
_PADDING = 10
_MIN_SEGMENT = 40
_HEIGHT = 20
_ATTR_ENTITIES = {'"': "&quot;"}


class BadgeKind(str, Enum):
    PROVENANCE = "provenance"
    TESTS = "tests"
    COVERAGE = "coverage"


class SuiteFacts(BaseModel):
    """Pass/fail counts from a test summary artifact."""

    model_config = ConfigDict(frozen=True)

    total: int
    passed: int
    failed: int
    duration_seconds: float | None = None


class BadgeFacts(BaseModel):
    """Aggregated manifest facts every badge is derived from."""

    model_config = ConfigDict(frozen=True)

    all_verified: bool
    tests: SuiteFacts | None = None
    coverage_pct: float | None = None


class Badge(BaseModel):
    """A shields.io endpoint badge.

    ``to_json_bytes`` and ``to_svg`` both read ``label``/``message``/``color``
    so the two representations cannot disagree.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: BadgeKind
    label: str
    message: str
    color: str
    schema_version: int = Field(default=SCHEMA_VERSION, alias="schemaVersion")

    def to_endpoint(self) -> dict[str, object]:
        return {
            "schemaVersion": self.schema_version,
            "label": self.label,
            "message": self.message,
            "color": self.color,
        }

    def to_json_bytes(self) -> bytes:
        return (json.dumps(self.to_endpoint(), indent=2) + "\n").encode("utf-8")

    def to_svg(self) -> str:
        label_w = max(len(self.label) * _CHAR_WIDTH + _PADDING, _MIN_SEGMENT)
        msg_w = max(len(self.message) * _CHAR_WIDTH + _PADDING, _MIN_SEGMENT)
        width = label_w + msg_w
        fill = _SVG_COLORS.get(self.color, self.color)
        label = escape(self.label, _ATTR_ENTITIES)
        message = escape(self.message, _ATTR_ENTITIES)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{_HEIGHT}"'
            f' role="img" aria-label="{label}: {message}">'
            f"<title>{label}: {message}</title>"
            f'<rect width="{label_w}" height="{_HEIGHT}" fill="#555"/>'
            f'<rect x="{label_w}" width="{msg_w}" height="{_HEIGHT}" fill="{escape(fill)}"/>'
            '<g fill="#fff" text-anchor="middle"'
            ' font-family="DejaVu Sans,Verdana,Geneva,sans-serif" font-size="11">'
            f'<text x="{label_w // 2}" y="14">{label}</text>'
            f'<text x="{label_w + msg_w // 2}" y="14">{message}</text>'
            "</g></svg>\n"
        )
