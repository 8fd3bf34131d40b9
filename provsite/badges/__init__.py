"""shields.io-compatible badge synthesis."""

from provsite.badges.synth import derive_facts, synthesize, synthesize_all

__all__ = ["derive_facts", "synthesize", "synthesize_all"]
