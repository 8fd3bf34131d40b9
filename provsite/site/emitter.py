"""Single-writer emission of a ``SiteTree`` to disk.

The tree is written into a fresh sibling directory which then replaces
``out_dir`` as a whole, so files from an earlier run (a page for an entry
that is now skipped, say) never survive into the new site.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from provsite.core.errors import SiteEmitError
from provsite.models.site import SiteTree

logger = logging.getLogger(__name__)


def _write_tree(tree: SiteTree, staging: Path) -> None:
    for rel_path, site_file in tree.items():
        target = staging / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(site_file.content)
        logger.debug("Wrote %s (%s, %d bytes)", rel_path, site_file.content_type, len(site_file.content))


def _swap_into_place(staging: Path, out_dir: Path) -> None:
    previous = None
    if out_dir.exists():
        previous = out_dir.with_name(f".{out_dir.name}.old-{staging.name}")
        out_dir.rename(previous)
    try:
        staging.rename(out_dir)
    except OSError:
        if previous is not None:
            previous.rename(out_dir)
        raise
    if previous is not None:
        shutil.rmtree(previous)


def emit(tree: SiteTree, out_dir: Path) -> list[Path]:
    """Replace ``out_dir`` with exactly the files in ``tree``.

    Returns the written paths in tree order.  Any ``OSError`` is raised
    as ``SiteEmitError`` and leaves a pre-existing ``out_dir`` untouched.
    """
    out_dir = Path(out_dir).absolute()
    try:
        out_dir.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{out_dir.name}.", dir=out_dir.parent))
        # mkdtemp creates the directory with mode 0700
        staging.chmod(0o755)
    except OSError as exc:
        logger.error("Cannot prepare output directory %s: %s", out_dir, exc)
        raise SiteEmitError(out_dir, exc) from exc

    try:
        _write_tree(tree, staging)
        _swap_into_place(staging, out_dir)
    except OSError as exc:
        shutil.rmtree(staging, ignore_errors=True)
        failed = Path(exc.filename) if exc.filename else out_dir
        logger.error("Failed writing %s: %s", failed, exc)
        raise SiteEmitError(failed, exc) from exc

    written = [out_dir / rel_path for rel_path in tree]
    logger.info("Emitted %d file(s) to %s", len(written), out_dir)
    return written
