"""Markdown to HTML via markdown-it-py.

CommonMark with GFM tables and strikethrough.  Raw HTML in the source is
disabled, so it is rendered as escaped text, and unsafe link schemes
(``javascript:`` and friends) are dropped by the parser's link validator.
"""

from __future__ import annotations

from collections.abc import Iterator

from markdown_it import MarkdownIt
from markdown_it.token import Token
from markupsafe import escape

_md = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])


def _text_chunks(tokens: list[Token]) -> Iterator[str]:
    for token in tokens:
        if token.type in ("fence", "code_block"):
            yield token.content
        elif token.children:
            yield "".join(
                child.content for child in token.children if child.type in ("text", "code_inline")
            )


def has_text(tokens: list[Token], needle: str) -> bool:
    """True if ``needle`` appears in the rendered text of any block."""
    return any(needle in chunk for chunk in _text_chunks(tokens))


def render_html(text: str, title: str) -> str:
    """Render markdown, prepending ``<h1>title</h1>`` unless the title already appears."""
    tokens = _md.parse(text)
    html = _md.renderer.render(tokens, _md.options, {})
    if has_text(tokens, title):
        return html
    return f"<h1>{escape(title)}</h1>\n{html}"
