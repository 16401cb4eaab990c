"""FastAPI server — aggregated news endpoint + optional static client."""

from pathlib import Path

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse

from .cache import SourceCache
from .config import CLIENT_DIST
from .engine import FeedEngine, parse_source_keys
from .log import get_logger
from .sources import load_sources


def build_engine() -> FeedEngine:
    """One cache and one registry per process, injected into the engine."""
    return FeedEngine(load_sources(), SourceCache())


def create_app(engine: FeedEngine | None = None, client_dist: Path | None = CLIENT_DIST) -> FastAPI:
    engine = engine or build_engine()

    app = FastAPI(
        title="newsfeed",
        description="Aggregated, time-windowed news from configured sources",
        version="1.0.0",
    )
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    def index():
        return "News server up. Use /api/news"

    @app.get("/api/news")
    def get_news(
        sources: str | None = Query(None, description="Comma-separated source keys"),
        force: str | None = Query(None, description="Any non-empty value bypasses the cache"),
    ):
        """Aggregate the selected sources; individual failures are reported inline."""
        try:
            keys = parse_source_keys(sources)
            return engine.aggregate(keys, force=bool(force)).to_dict()
        except Exception as e:
            get_logger("api").exception("Aggregation failed")
            return JSONResponse(status_code=500, content={"error": str(e)})

    @app.get("/api/sources")
    def get_sources():
        return [src.to_dict() for src in engine.sources]

    if client_dist is not None and Path(client_dist).is_dir():
        dist = Path(client_dist).resolve()

        # Registered last so /api routes win; unknown paths fall back to the SPA
        @app.get("/{path:path}", include_in_schema=False)
        def client(path: str):
            if path == "api" or path.startswith("api/"):
                raise HTTPException(status_code=404, detail="Not Found")
            target = (dist / path).resolve()
            if path and target.is_file() and dist in target.parents:
                return FileResponse(target)
            return FileResponse(dist / "index.html")

    return app

