"""Rendered artifact page models.

The body is a discriminated union keyed on ``kind`` so templates can
dispatch on it without inspecting the media kind again.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from provsite.models.manifest import MediaKind


class KeyValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value: str


class KeyValueBody(BaseModel):
    """KPI-style grid for ``json-summary`` artifacts."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["key_value"] = "key_value"
    items: tuple[KeyValue, ...]


class TableBody(BaseModel):
    """Tabular body for ``json-table`` artifacts.  Always has >= 1 row."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["table"] = "table"
    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    total: str = ""  # formatted total, e.g. "87.5%"


class MarkdownBody(BaseModel):
    """Rendered markdown HTML.  Marked safe at template time."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["markdown"] = "markdown"
    html: str


class TextBody(BaseModel):
    """Verbatim text for ``raw-text`` artifacts."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class TruncatedBody(BaseModel):
    """Placeholder when a payload exceeds the inline size limit."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["truncated"] = "truncated"
    size_bytes: int
    limit_bytes: int


PageBody = Annotated[
    Union[KeyValueBody, TableBody, MarkdownBody, TextBody, TruncatedBody],
    Field(discriminator="kind"),
]


class RenderedArtifactPage(BaseModel):
    """Everything the assembler needs to emit ``/a/{id}/``.

    Pure function of the validated entry and its bytes; never mutated.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    render: MediaKind
    media_type: str
    body: PageBody
    download_href: str  # percent-encoded, e.g. /assets/coverage/coverage.json
    asset_path: str  # output-relative path, e.g. assets/coverage/coverage.json

    @property
    def row_count(self) -> int:
        if isinstance(self.body, TableBody):
            return len(self.body.rows)
        return 0
