"""Article-page metadata fallback (image + publication time)."""

import concurrent.futures
from dataclasses import dataclass, replace
from datetime import datetime
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .config import FALLBACK_WORKERS, FETCH_TIMEOUT
from .dates import normalize
from .fetch import FetchError, fetch_page
from .log import get_logger

# (tag, attrs, attribute holding the value), in priority order
IMAGE_SOURCES = (
    ("meta", {"property": "og:image"}, "content"),
    ("meta", {"name": "twitter:image"}, "content"),
    ("meta", {"property": "og:image:url"}, "content"),
    ("link", {"rel": "image_src"}, "href"),
)

TIME_SOURCES = (
    ("meta", {"property": "article:published_time"}, "content"),
    ("meta", {"name": "date"}, "content"),
    ("meta", {"itemprop": "datePublished"}, "content"),
    ("time", {"datetime": True}, "datetime"),
)


@dataclass(frozen=True)
class ArticleMeta:
    image: str | None = None
    published_at: datetime | None = None


def _first_value(soup: BeautifulSoup, sources) -> str | None:
    for tag, attrs, attr in sources:
        el = soup.find(tag, attrs=attrs)
        if el is None:
            continue
        value = (el.get(attr) or "").strip()
        if value:
            return value
    return None


def extract_meta(html: str, base_url: str | None = None) -> ArticleMeta:
    """Pull the best-effort image URL and publication time out of a page."""
    soup = BeautifulSoup(html or "", "html.parser")
    image = _first_value(soup, IMAGE_SOURCES)
    if image and base_url:
        image = urljoin(base_url, image)
    return ArticleMeta(image=image, published_at=normalize(_first_value(soup, TIME_SOURCES)))


def fetch_fallback(url: str, timeout: float = FETCH_TIMEOUT) -> ArticleMeta:
    """Fetch an article page and extract its metadata.

    Always returns an ArticleMeta: a failed fetch or an unparseable page
    yields ArticleMeta(None, None).
    """
    logger = get_logger("metadata")
    try:
        html = fetch_page(url, timeout=timeout)
    except FetchError as e:
        logger.debug("Metadata fallback skipped for %s: %s", url, e)
        return ArticleMeta()

    try:
        return extract_meta(html, base_url=url)
    except Exception as e:
        logger.debug("Metadata fallback could not parse %s: %s", url, e)
        return ArticleMeta()


def needs_fallback(item) -> bool:
    return not item.image or item.published_at is None


def fill_missing(items: list, workers: int = FALLBACK_WORKERS, fetcher=None) -> list:
    """Complete items lacking an image or date from their article pages.

    Values already present are kept; order is preserved.
    """
    fetcher = fetcher or fetch_fallback
    pending = [i for i, item in enumerate(items) if needs_fallback(item)]
    out = list(items)
    if not pending:
        return out

    with concurrent.futures.ThreadPoolExecutor(max_workers=max(1, min(workers, len(pending)))) as pool:
        metas = pool.map(lambda i: fetcher(items[i].url), pending)
        for i, meta in zip(pending, metas):
            item = out[i]
            out[i] = replace(
                item,
                image=item.image or meta.image,
                published_at=item.published_at or meta.published_at,
            )
    return out
