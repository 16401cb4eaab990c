"""Generic listing-page adapter driven by a declarative SiteConfig."""

from dataclasses import dataclass
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..config import FALLBACK_WORKERS
from ..dates import normalize
from ..fetch import fetch_page
from ..log import get_logger
from ..metadata import fill_missing
from .base import NormalizedItem, RawCandidate, SourceAdapter


def normalize_whitespace(text: str | None) -> str:
    return " ".join((text or "").split())


@dataclass(frozen=True)
class SiteConfig:
    """Where a site keeps its listing entries.

    link_selector=None means the item element is itself the link;
    base_url=None means hrefs are used as found.
    """
    listing_url: str
    item_selector: str
    link_selector: str | None = "a"
    title_selector: str | None = None  # falls back to the link text
    base_url: str | None = None
    image_attrs: tuple[str, ...] = ("src",)
    date_text_selector: str | None = None
    text_before_attr: bool = False  # prefer visible date text over time[datetime]


class ListingAdapter(SourceAdapter):
    """Scrapes one listing page and normalizes each entry.

    Subclasses override the extract_* hooks for site quirks.
    """

    def __init__(self, key: str, site: SiteConfig, fetcher=None, fallback=None,
                 fallback_workers: int = FALLBACK_WORKERS):
        self.key = key
        self.site = site
        self._fetcher = fetcher
        self._fallback = fallback
        self.fallback_workers = fallback_workers

    def collect(self) -> list[NormalizedItem]:
        fetcher = self._fetcher or fetch_page
        html = fetcher(self.site.listing_url)
        candidates = self.parse_listing(html)
        items = [self.to_item(c) for c in candidates]
        items = fill_missing(items, workers=self.fallback_workers, fetcher=self._fallback)
        get_logger(f"sources.{self.key}").debug("%d candidates on %s", len(items), self.site.listing_url)
        return items

    def parse_listing(self, html: str) -> list[RawCandidate]:
        """Listing HTML -> candidates in page order, deduplicated by URL."""
        soup = BeautifulSoup(html or "", "html.parser")
        seen = set()
        candidates = []
        for el in soup.select(self.site.item_selector):
            candidate = self.extract(el)
            if candidate is None or candidate.url in seen:
                continue
            seen.add(candidate.url)
            candidates.append(candidate)
        return candidates

    def to_item(self, candidate: RawCandidate) -> NormalizedItem:
        return NormalizedItem(
            title=candidate.title,
            url=candidate.url,
            image=candidate.image,
            published_at=normalize(candidate.raw_date),
        )

    # ─────────────────────────────────────────────────
    # Extraction hooks
    # ─────────────────────────────────────────────────
    def extract(self, el) -> RawCandidate | None:
        link = self.extract_link(el)
        if link is None:
            return None
        title = self.extract_title(el, link)
        href = (link.get("href") or "").strip()
        if not title or not href:
            return None
        return RawCandidate(
            title=title,
            url=self.absolutize(href),
            image=self.extract_image(el),
            raw_date=self.extract_date_text(el),
        )

    def extract_link(self, el):
        if self.site.link_selector is None:
            return el
        return el.select_one(self.site.link_selector)

    def extract_title(self, el, link) -> str:
        if self.site.title_selector:
            node = el.select_one(self.site.title_selector)
            title = normalize_whitespace(node.get_text(" ") if node else "")
            if title:
                return title
        return normalize_whitespace(link.get_text(" "))

    def extract_image(self, el) -> str | None:
        img = el.select_one("img")
        if img is None:
            return None
        for attr in self.site.image_attrs:
            src = (img.get(attr) or "").strip()
            if src:
                return self.absolutize(src)
        return None

    def extract_date_text(self, el) -> str | None:
        time_tag = el.select_one("time[datetime]")
        attr = (time_tag.get("datetime") or "").strip() if time_tag else ""
        text = ""
        if self.site.date_text_selector:
            node = el.select_one(self.site.date_text_selector)
            text = normalize_whitespace(node.get_text(" ") if node else "")
        if self.site.text_before_attr:
            return text or attr or None
        return attr or text or None

    def absolutize(self, href: str) -> str:
        if self.site.base_url and not href.startswith(("http://", "https://")):
            return urljoin(self.site.base_url, href)
        return href
