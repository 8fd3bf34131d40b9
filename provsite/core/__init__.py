"""Core pipeline: loading, verification, coordination."""
