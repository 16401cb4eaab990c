"""Shared test fixtures."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from newsfeed.cache import SourceCache
from newsfeed.engine import FeedEngine
from newsfeed.sources.base import NormalizedItem, SourceAdapter, SourceDescriptor

TZ = ZoneInfo("America/Sao_Paulo")


class FakeAdapter(SourceAdapter):
    """Returns canned items (or raises) and counts invocations."""

    def __init__(self, key, items=None, error=None):
        self.key = key
        self.items = list(items or [])
        self.error = error
        self.calls = 0

    def collect(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.items)


@pytest.fixture
def tz():
    return TZ


@pytest.fixture
def now():
    """Mid-afternoon, 4 Nov 2025, São Paulo time."""
    return datetime(2025, 11, 4, 15, 0, tzinfo=TZ)


@pytest.fixture
def make_item():
    def _make(title="Headline", url=None, image=None, published_at=None):
        return NormalizedItem(
            title=title,
            url=url or f"https://example.org/{title.lower().replace(' ', '-')}",
            image=image,
            published_at=published_at,
        )
    return _make


@pytest.fixture
def make_source():
    def _make(key, items=None, error=None, name=None, color="#000000"):
        adapter = FakeAdapter(key, items=items, error=error)
        return SourceDescriptor(key=key, name=name or key.upper(), color=color, adapter=adapter)
    return _make


@pytest.fixture
def make_engine(now):
    def _make(sources, cache=None, keep_undated=True):
        return FeedEngine(
            sources,
            cache or SourceCache(ttl=3600),
            tz=TZ,
            keep_undated=keep_undated,
            clock=lambda: now,
        )
    return _make


@pytest.fixture
def listing_html():
    """A listing page in the gov.br layout."""
    return """
    <html><body>
      <div class="listagem">
        <div class="item">
          <a href="/mma/pt-br/noticias/primeira">Primeira   notícia
             do dia</a>
          <img src="/imagens/primeira.jpg">
          <span class="data">04/11/2025 09h30</span>
        </div>
        <div class="item">
          <a href="https://www.gov.br/mma/pt-br/noticias/segunda">Segunda notícia</a>
          <time datetime="2025-11-03T18:45:00-03:00">3 de novembro</time>
        </div>
        <div class="item">
          <a href="/mma/pt-br/noticias/sem-titulo"></a>
        </div>
        <div class="item">
          <span>Sem link</span>
        </div>
        <div class="item">
          <a href="/mma/pt-br/noticias/primeira">Primeira notícia (repetida)</a>
        </div>
      </div>
    </body></html>
    """


@pytest.fixture
def article_html():
    return """
    <html><head>
      <meta property="og:image" content="/media/capa.jpg">
      <meta name="twitter:image" content="https://cdn.example.org/tw.jpg">
      <meta property="article:published_time" content="2025-11-04T08:15:00-03:00">
      <meta name="date" content="01/01/2020">
    </head><body>
      <time datetime="2019-05-05T10:00:00Z">old</time>
    </body></html>
    """
