"""FeedEngine — fans out to all selected sources, filters and sorts per source."""

import concurrent.futures
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from .cache import SourceCache
from .config import DEFAULT_TZ, KEEP_UNDATED, get_timezone
from .dates import to_iso
from .log import get_logger, log
from .sources.base import NormalizedItem, SourceDescriptor


@dataclass
class SourceResult:
    key: str
    name: str
    color: str
    items: list[NormalizedItem] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "color": self.color,
            "items": [item.to_dict() for item in self.items],
            "error": self.error,
        }


@dataclass
class FeedResponse:
    tz: str
    generated_at: datetime
    sources: list[SourceResult]

    def to_dict(self) -> dict:
        return {
            "tz": self.tz,
            "generatedAt": to_iso(self.generated_at),
            "sources": [s.to_dict() for s in self.sources],
        }


def parse_source_keys(raw: str | None) -> set[str] | None:
    """Split "a, b,,c" into {"a", "b", "c"}; absent or blank selects every source."""
    if not raw:
        return None
    keys = {k.strip() for k in str(raw).split(",") if k.strip()}
    return keys or None


def retention_window(now: datetime, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """[start of yesterday, end of today] by calendar days in tz."""
    today = now.astimezone(tz).date()
    start = datetime.combine(today - timedelta(days=1), time.min, tzinfo=tz)
    end = datetime.combine(today, time.max, tzinfo=tz)
    return start, end


def filter_and_sort(items, now: datetime, tz: ZoneInfo, keep_undated: bool = True) -> list[NormalizedItem]:
    """Keep items inside the retention window, newest first, undated last."""
    start, end = retention_window(now, tz)
    kept = [
        item for item in items
        if (item.published_at is None and keep_undated)
        or (item.published_at is not None and start <= item.published_at <= end)
    ]
    # sorted() is stable: equal timestamps keep listing order
    return sorted(
        kept,
        key=lambda item: (
            item.published_at is None,
            -item.published_at.timestamp() if item.published_at else 0.0,
        ),
    )


def describe_error(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class FeedEngine:
    """Aggregates the registered sources into one time-windowed feed."""

    def __init__(self, sources, cache: SourceCache, tz: ZoneInfo | None = None,
                 keep_undated: bool = KEEP_UNDATED, clock=None):
        self.sources: tuple[SourceDescriptor, ...] = tuple(sources)
        self.cache = cache
        self.tz = tz or get_timezone()
        self.keep_undated = keep_undated
        self._clock = clock or (lambda: datetime.now(self.tz))

    @property
    def tz_name(self) -> str:
        return getattr(self.tz, "key", None) or DEFAULT_TZ

    def select(self, keys: set[str] | None = None) -> list[SourceDescriptor]:
        """All sources when keys is None; otherwise the known ones, in registry order."""
        if keys is None:
            return list(self.sources)
        return [src for src in self.sources if src.key in keys]

    def aggregate(self, keys: set[str] | None = None, force: bool = False) -> FeedResponse:
        """Fetch every selected source concurrently and assemble the feed.

        One source failing never affects the others: its result carries the
        error string and no items. All tasks are awaited before returning.
        """
        selected = self.select(keys)
        outcomes: dict[str, tuple[list, str | None]] = {}

        if selected:
            with concurrent.futures.ThreadPoolExecutor(max_workers=len(selected)) as pool:
                futures = {
                    pool.submit(self.cache.get, src.key, src.adapter.collect, force): src
                    for src in selected
                }
                for future in concurrent.futures.as_completed(futures):
                    src = futures[future]
                    try:
                        items = future.result()
                        outcomes[src.key] = (items, None)
                        log(f"{src.key}: {len(items)} items", "engine")
                    except Exception as e:
                        outcomes[src.key] = ([], describe_error(e))
                        get_logger("engine").warning("%s: failed — %s", src.key, e)

        now = self._clock()
        results = []
        for src in selected:
            items, error = outcomes[src.key]
            results.append(SourceResult(
                key=src.key,
                name=src.name,
                color=src.color,
                items=filter_and_sort(items, now, self.tz, self.keep_undated),
                error=error,
            ))
        return FeedResponse(tz=self.tz_name, generated_at=now, sources=results)
