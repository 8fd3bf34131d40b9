"""Per-artifact rendering."""

from provsite.render.dispatcher import RENDERERS, render

__all__ = ["RENDERERS", "render"]
