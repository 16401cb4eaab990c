"""Tests for newsfeed/api.py — /api/news HTTP surface."""

from datetime import datetime
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from newsfeed.api import create_app
from newsfeed.fetch import FetchError

TZ = ZoneInfo("America/Sao_Paulo")


@pytest.fixture
def sources(make_source, make_item):
    return [
        make_source("mma", [make_item("Floresta", published_at=datetime(2025, 11, 4, 9, 0, tzinfo=TZ))],
                    name="MMA – Notícias", color="#16a34a"),
        make_source("ibge", error=FetchError("https://ibge", "HTTP 502 on https://ibge")),
        make_source("eir", [make_item("Undated essay")]),
    ]


@pytest.fixture
def client(make_engine, sources):
    return TestClient(create_app(engine=make_engine(sources), client_dist=None))


class TestNewsEndpoint:
    def test_all_sources_by_default(self, client):
        r = client.get("/api/news")
        assert r.status_code == 200
        body = r.json()
        assert body["tz"] == "America/Sao_Paulo"
        assert body["generatedAt"] == "2025-11-04T15:00:00-03:00"
        assert [s["key"] for s in body["sources"]] == ["mma", "ibge", "eir"]

    def test_partial_failure_is_still_200(self, client):
        body = client.get("/api/news").json()
        ibge = body["sources"][1]
        assert ibge["error"] == "HTTP 502 on https://ibge"
        assert ibge["items"] == []

    def test_item_fields_exactly(self, client):
        item = client.get("/api/news").json()["sources"][0]["items"][0]
        assert set(item) == {"title", "url", "image", "publishedAt"}
        assert item["publishedAt"] == "2025-11-04T09:00:00-03:00"

    def test_undated_item_has_null_timestamp(self, client):
        item = client.get("/api/news?sources=eir").json()["sources"][0]["items"][0]
        assert item["title"] == "Undated essay"
        assert item["publishedAt"] is None

    def test_sources_filter_ignores_unknown(self, client):
        body = client.get("/api/news", params={"sources": "eir, nope ,mma"}).json()
        assert [s["key"] for s in body["sources"]] == ["mma", "eir"]

    def test_empty_sources_param_selects_all(self, client):
        body = client.get("/api/news?sources=").json()
        assert len(body["sources"]) == 3

    def test_force_bypasses_cache(self, client, sources):
        client.get("/api/news?sources=mma")
        client.get("/api/news?sources=mma")
        assert sources[0].adapter.calls == 1

        client.get("/api/news?sources=mma&force=1")
        assert sources[0].adapter.calls == 2

    def test_empty_force_value_does_not_bypass(self, client, sources):
        client.get("/api/news?sources=mma")
        client.get("/api/news?sources=mma&force=")
        assert sources[0].adapter.calls == 1

    def test_500_when_aggregation_raises(self):
        engine = MagicMock()
        engine.aggregate.side_effect = RuntimeError("registry exploded")
        r = TestClient(create_app(engine=engine, client_dist=None)).get("/api/news")
        assert r.status_code == 500
        assert r.json() == {"error": "registry exploded"}


class TestOtherRoutes:
    def test_root_banner(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.text == "News server up. Use /api/news"

    def test_sources_listing(self, client):
        body = client.get("/api/sources").json()
        assert body[0] == {"key": "mma", "name": "MMA – Notícias", "color": "#16a34a"}
        assert len(body) == 3

    def test_cors_header(self, client):
        r = client.get("/api/sources", headers={"Origin": "https://example.org"})
        assert r.headers["access-control-allow-origin"] == "*"


class TestStaticClient:
    @pytest.fixture
    def spa_client(self, tmp_path, make_engine, sources):
        (tmp_path / "index.html").write_text("<html>app</html>")
        (tmp_path / "app.js").write_text("console.log(1)")
        return TestClient(create_app(engine=make_engine(sources), client_dist=tmp_path))

    def test_serves_existing_file(self, spa_client):
        assert spa_client.get("/app.js").text == "console.log(1)"

    def test_unknown_path_falls_back_to_index(self, spa_client):
        assert spa_client.get("/tabs/ibge").text == "<html>app</html>"

    def test_api_routes_win(self, spa_client):
        assert spa_client.get("/api/sources").status_code == 200
        assert spa_client.get("/api/unknown").status_code == 404

    def test_asset_starting_with_api_is_served(self, spa_client, tmp_path):
        (tmp_path / "apple-touch-icon.png").write_bytes(b"png")
        r = spa_client.get("/apple-touch-icon.png")
        assert r.status_code == 200
        assert r.content == b"png"
