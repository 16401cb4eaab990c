"""RawCandidate/NormalizedItem dataclasses + SourceAdapter ABC."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from ..dates import to_iso


@dataclass(frozen=True)
class RawCandidate:
    """One entry scraped from a listing page, before date normalization."""
    title: str
    url: str
    image: str | None = None
    raw_date: str | None = None  # text or datetime attribute as found


@dataclass(frozen=True)
class NormalizedItem:
    """A feed item with its publication time resolved (or None)."""
    title: str
    url: str
    image: str | None = None
    published_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "url": self.url,
            "image": self.image,
            "publishedAt": to_iso(self.published_at),
        }


class SourceAdapter(ABC):
    """Abstract base class for news sources.

    collect() returns items in listing order; an empty listing is an empty
    list, never an exception. Transport failures propagate.
    """

    key: str = "unknown"

    @abstractmethod
    def collect(self) -> list[NormalizedItem]:
        """Fetch the listing page and return its normalized items."""
        ...


@dataclass(frozen=True)
class SourceDescriptor:
    """Registry entry: one configured source."""
    key: str
    name: str
    color: str
    adapter: SourceAdapter

    def to_dict(self) -> dict:
        return {"key": self.key, "name": self.name, "color": self.color}
