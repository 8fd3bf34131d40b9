"""Render dispatcher — maps each ``MediaKind`` to a pure renderer.

``RENDERERS`` covers every member of ``MediaKind``; unknown kinds are
rejected by manifest validation long before dispatch.  Renderers raise
``RenderError`` when the bytes do not fit the declared kind.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from provsite.core.errors import RenderError, RenderErrorKind
from provsite.models.manifest import ArtifactEntry, MediaKind
from provsite.models.pages import (
    KeyValue,
    KeyValueBody,
    MarkdownBody,
    PageBody,
    RenderedArtifactPage,
    TableBody,
    TextBody,
    TruncatedBody,
)
from provsite.render.markdown import render_html

logger = logging.getLogger(__name__)

# Keys under which a coverage-style object carries its rows.
TABLE_ROW_KEYS = ("files", "rows")

Renderer = Callable[[ArtifactEntry, bytes, int], PageBody]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def asset_path(entry: ArtifactEntry) -> str:
    """Output-relative path of the raw asset copy."""
    return f"assets/{entry.id}/{entry.filename}"


def download_href(entry: ArtifactEntry) -> str:
    """Absolute site href for the raw asset, percent-encoded."""
    return f"/assets/{quote(entry.id)}/{quote(entry.filename)}"


def format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return f"{value:g}"
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _parse_json(entry: ArtifactEntry, data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise RenderError(entry.id, RenderErrorKind.MALFORMED_DATA, f"invalid JSON: {exc}") from exc


def table_rows(payload: Any) -> list[Any] | None:
    """Extract the row sequence from a table payload, or ``None``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in TABLE_ROW_KEYS:
            rows = payload.get(key)
            if isinstance(rows, list):
                return rows
    return None


def table_total_pct(payload: Any) -> float | None:
    """``total.pct`` of a coverage-style object, when present."""
    if isinstance(payload, dict):
        total = payload.get("total")
        if isinstance(total, dict) and isinstance(total.get("pct"), (int, float)):
            return float(total["pct"])
    return None


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def render_json_summary(entry: ArtifactEntry, data: bytes, limit: int) -> PageBody:
    payload = _parse_json(entry, data)
    if not isinstance(payload, dict):
        raise RenderError(
            entry.id,
            RenderErrorKind.MALFORMED_DATA,
            f"summary must be a JSON object, got {type(payload).__name__}",
        )
    return KeyValueBody(
        items=tuple(KeyValue(key=str(k), value=format_value(v)) for k, v in payload.items())
    )


def render_json_table(entry: ArtifactEntry, data: bytes, limit: int) -> PageBody:
    payload = _parse_json(entry, data)
    rows = table_rows(payload)
    if rows is None:
        raise RenderError(
            entry.id,
            RenderErrorKind.NOT_TABULAR,
            "expected a list of row objects or an object with a 'files'/'rows' list",
        )
    if not rows:
        raise RenderError(entry.id, RenderErrorKind.EMPTY_TABLE, "table has no rows")

    first = rows[0]
    if not isinstance(first, dict):
        raise RenderError(entry.id, RenderErrorKind.NOT_TABULAR, "row 0 is not an object")
    columns = tuple(first.keys())
    body_rows: list[tuple[str, ...]] = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            raise RenderError(entry.id, RenderErrorKind.NOT_TABULAR, f"row {index} is not an object")
        if set(row.keys()) != set(columns):
            raise RenderError(
                entry.id,
                RenderErrorKind.NOT_TABULAR,
                f"row {index} keys {sorted(row)} differ from {sorted(columns)}",
            )
        body_rows.append(tuple(format_value(row[column]) for column in columns))

    total = table_total_pct(payload)
    return TableBody(
        columns=columns,
        rows=tuple(body_rows),
        total=f"{total:.1f}%" if total is not None else "",
    )


def render_markdown(entry: ArtifactEntry, data: bytes, limit: int) -> PageBody:
    if len(data) > limit:
        return TruncatedBody(size_bytes=len(data), limit_bytes=limit)
    html = render_html(data.decode("utf-8", errors="replace"), entry.title)
    return MarkdownBody(html=html)


def render_raw_text(entry: ArtifactEntry, data: bytes, limit: int) -> PageBody:
    if len(data) > limit:
        return TruncatedBody(size_bytes=len(data), limit_bytes=limit)
    return TextBody(text=data.decode("utf-8", errors="replace"))


RENDERERS: dict[MediaKind, Renderer] = {
    MediaKind.JSON_SUMMARY: render_json_summary,
    MediaKind.JSON_TABLE: render_json_table,
    MediaKind.MARKDOWN: render_markdown,
    MediaKind.RAW_TEXT: render_raw_text,
}


def render(
    entry: ArtifactEntry, data: bytes, *, inline_limit_bytes: int = 1_000_000
) -> RenderedArtifactPage:
    """Render one artifact into its detail-page model."""
    body = RENDERERS[entry.render](entry, data, inline_limit_bytes)
    logger.debug("Rendered %s as %s (%s)", entry.id, entry.render.value, body.kind)
    return RenderedArtifactPage(
        id=entry.id,
        title=entry.title,
        render=entry.render,
        media_type=entry.media_type,
        body=body,
        download_href=download_href(entry),
        asset_path=asset_path(entry),
    )
