"""provsite: static provenance site generator for build artifacts.

Turns a build manifest plus the artifact bytes it describes into a
deployable, byte-for-byte reproducible static site:
  - Schema-validated manifest ingestion (jsonschema)
  - SHA-256 digest verification per artifact
  - Per-media-kind rendering (summary grid, table, markdown, raw text)
  - shields.io-compatible badges (JSON + SVG) for provenance, tests, coverage
  - Home page, artifacts index, detail pages, search index, robots.txt
"""

__version__ = "0.2.0"
__description__ = "Static provenance site generator for CI build artifacts"

from provsite.core.pipeline import generate
from provsite.core.loader import load_manifest

__all__ = ["generate", "load_manifest", "__version__"]
