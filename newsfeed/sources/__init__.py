"""News sources: listing adapters and the source registry."""

from .base import NormalizedItem, RawCandidate, SourceAdapter, SourceDescriptor
from .listing import ListingAdapter, SiteConfig
from .sites import load_sources

__all__ = [
    "NormalizedItem",
    "RawCandidate",
    "SourceAdapter",
    "SourceDescriptor",
    "ListingAdapter",
    "SiteConfig",
    "load_sources",
]
