"""provsite data models — all Pydantic v2, all frozen (immutable)."""

from provsite.models.badges import Badge, BadgeFacts, BadgeKind, SuiteFacts
from provsite.models.manifest import (
    ArtifactEntry,
    FrontPage,
    Manifest,
    MediaKind,
    WorkflowRun,
)
from provsite.models.pages import (
    KeyValue,
    KeyValueBody,
    MarkdownBody,
    RenderedArtifactPage,
    TableBody,
    TextBody,
    TruncatedBody,
)
from provsite.models.site import GenerationReport, SiteFile, SiteTree, SkippedEntry
from provsite.models.verification import VerificationResult, VerificationStatus

__all__ = [
    # manifest
    "ArtifactEntry",
    "FrontPage",
    "Manifest",
    "MediaKind",
    "WorkflowRun",
    # verification
    "VerificationResult",
    "VerificationStatus",
    # pages
    "KeyValue",
    "KeyValueBody",
    "MarkdownBody",
    "RenderedArtifactPage",
    "TableBody",
    "TextBody",
    "TruncatedBody",
    # badges
    "Badge",
    "BadgeFacts",
    "BadgeKind",
    "SuiteFacts",
    # site
    "GenerationReport",
    "SiteFile",
    "SiteTree",
    "SkippedEntry",
]
