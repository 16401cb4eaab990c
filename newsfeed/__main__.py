"""CLI entry point — python -m newsfeed."""

import argparse
import json
import sys

from .config import HOST, PORT
from .log import set_verbose


def cmd_serve(args):
    import uvicorn

    uvicorn.run("newsfeed.api:create_app", factory=True, host=args.host, port=args.port)


def cmd_fetch(args):
    from .api import build_engine
    from .engine import parse_source_keys

    engine = build_engine()
    response = engine.aggregate(parse_source_keys(args.sources), force=args.force)
    print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))

    failed = [s.key for s in response.sources if s.error]
    if failed:
        print(f"  Failed sources: {', '.join(failed)}", file=sys.stderr)


def cmd_sources(args):
    from .sources import load_sources

    registry = load_sources()
    if not registry:
        print("  No sources enabled.")
        return

    print(f"\n  Registered sources ({len(registry)}):\n")
    for src in registry:
        print(f"  {src.key:22s} {src.name}")


def cmd_parse_date(args):
    from .dates import normalize, to_iso

    parsed = normalize(args.text)
    print(to_iso(parsed) if parsed else "unparseable")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="newsfeed — multi-source news aggregator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd")

    # serve
    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=HOST)
    p_serve.add_argument("--port", type=int, default=PORT)

    # fetch
    p_fetch = sub.add_parser("fetch", help="Aggregate once and print JSON")
    p_fetch.add_argument("--sources", default=None, help="Comma-separated source keys")
    p_fetch.add_argument("--force", action="store_true", help="Bypass the cache")

    # sources
    sub.add_parser("sources", help="List registered sources")

    # parse-date
    p_parse = sub.add_parser("parse-date", help="Normalize a date string")
    p_parse.add_argument("text")

    args = parser.parse_args(argv)

    if args.verbose:
        set_verbose(True)

    if not args.cmd:
        parser.print_help()
        return

    if args.cmd == "serve":
        cmd_serve(args)
    elif args.cmd == "fetch":
        cmd_fetch(args)
    elif args.cmd == "sources":
        cmd_sources(args)
    elif args.cmd == "parse-date":
        cmd_parse_date(args)


if __name__ == "__main__":
    main()
