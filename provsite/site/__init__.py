"""Site assembly and emission."""

from provsite.site.assembler import assemble
from provsite.site.emitter import emit

__all__ = ["assemble", "emit"]
