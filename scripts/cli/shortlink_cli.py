#!/usr/bin/env python3
"""
Command-line interface for the short link service.

Talks to the storage backend directly (no HTTP). Output is JSON on stdout;
failures are JSON on stderr with exit status 1.

Usage:
    python shortlink_cli.py shorten <url> --owner OWNER
    python shortlink_cli.py resolve <short_code>
    python shortlink_cli.py links --owner OWNER
    python shortlink_cli.py info <short_code> --owner OWNER
    python shortlink_cli.py analytics <short_code> --owner OWNER --start YYYY-MM-DD --end YYYY-MM-DD [--zero-fill]
    python shortlink_cli.py totals --owner OWNER --start YYYY-MM-DD --end YYYY-MM-DD
    python shortlink_cli.py stats
    python shortlink_cli.py health
"""

import argparse
import asyncio
import json
import sys
from datetime import date
from typing import Any, Dict, Optional

from shortlink.config import load_config
from shortlink.database.cache import RedisCache
from shortlink.errors import ShortLinkError
from shortlink.service import ShortLinkService, create_backend
from shortlink.shortcode import ShortCodeGenerator
from shortlink.common.logging_config import setup_logging


def _emit(payload: Dict[str, Any], ok: bool = True) -> int:
    print(json.dumps({"success": ok, **payload}, indent=2, default=str), file=sys.stdout if ok else sys.stderr)
    return 0 if ok else 1


class ShortLinkCLI:
    """Command-line interface for the short link service."""

    def __init__(self, db_url: Optional[str] = None, redis_url: Optional[str] = None, verbose: bool = False):
        self.config = load_config()
        if db_url:
            self.config.database_url = db_url
        if redis_url:
            self.config.redis_url = redis_url
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service: Optional[ShortLinkService] = None

    async def initialize(self):
        """Initialize database and service."""
        db = create_backend(self.config, logger=self.logger)
        await db.initialize()

        cache = None
        if self.config.redis_url:
            cache = RedisCache(redis_url=self.config.redis_url, logger=self.logger)
            await cache.connect()

        self.service = ShortLinkService(
            db=db,
            cache=cache,
            short_code_generator=ShortCodeGenerator(default_length=self.config.short_code_length),
            logger=self.logger,
            max_collision_retries=self.config.max_collision_retries,
        )

    async def cleanup(self):
        if self.service:
            await self.service.close()

    async def shorten(self, url: str, owner: str) -> int:
        mapping = await self.service.create_short_link(url, owner)
        return _emit({**mapping.to_dict(), "message": f"Successfully shortened URL to: {mapping.short_code}"})

    async def resolve(self, short_code: str) -> int:
        # Counts as a click, exactly like an HTTP redirect
        original_url = await self.service.redirect(short_code)
        return _emit({"short_code": short_code, "original_url": original_url})

    async def links(self, owner: str) -> int:
        mappings = await self.service.list_owner_links(owner)
        return _emit({"count": len(mappings), "links": [m.to_dict() for m in mappings]})

    async def info(self, short_code: str, owner: str) -> int:
        mapping = await self.service.get_link_info(short_code, owner)
        return _emit(mapping.to_dict())

    async def analytics(self, short_code: str, owner: str, start: date, end: date, zero_fill: bool) -> int:
        buckets = await self.service.get_per_url_analytics(short_code, owner, start, end, zero_fill=zero_fill)
        return _emit({"short_code": short_code, "buckets": [b.to_dict() for b in buckets]})

    async def totals(self, owner: str, start: date, end: date) -> int:
        totals = await self.service.get_owner_totals(owner, start, end)
        return _emit({"owner_id": owner, "totals": {d.isoformat(): n for d, n in totals.items()}})

    async def stats(self) -> int:
        return _emit({"statistics": await self.service.get_statistics()})

    async def health(self) -> int:
        health_status = await self.service.health_check()
        return _emit({"health": health_status}, ok=health_status["overall"])


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Short link CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s shorten https://example.com/long/url --owner alice
  %(prog)s resolve aB3dE5gH
  %(prog)s analytics aB3dE5gH --owner alice --start 2024-12-01 --end 2024-12-31
  %(prog)s totals --owner alice --start 2024-12-01 --end 2024-12-31
  %(prog)s health
        """
    )

    parser.add_argument("--db-url", help="PostgreSQL connection URL (default: SHORTLINK_DATABASE_URL)")
    parser.add_argument("--redis-url", help="Redis connection URL (default: SHORTLINK_REDIS_URL)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--owner", required=True, help="Owner id")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code (records a click)")
    resolve_parser.add_argument("short_code")

    links_parser = subparsers.add_parser("links", help="List an owner's links")
    links_parser.add_argument("--owner", required=True)

    info_parser = subparsers.add_parser("info", help="Show one link")
    info_parser.add_argument("short_code")
    info_parser.add_argument("--owner", required=True)

    analytics_parser = subparsers.add_parser("analytics", help="Daily clicks for one link")
    analytics_parser.add_argument("short_code")
    analytics_parser.add_argument("--owner", required=True)
    analytics_parser.add_argument("--start", type=date.fromisoformat, required=True)
    analytics_parser.add_argument("--end", type=date.fromisoformat, required=True)
    analytics_parser.add_argument("--zero-fill", action="store_true", help="Include days without clicks")

    totals_parser = subparsers.add_parser("totals", help="Daily clicks across an owner's links")
    totals_parser.add_argument("--owner", required=True)
    totals_parser.add_argument("--start", type=date.fromisoformat, required=True)
    totals_parser.add_argument("--end", type=date.fromisoformat, required=True)

    subparsers.add_parser("stats", help="Service statistics")
    subparsers.add_parser("health", help="Check service health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortLinkCLI(db_url=args.db_url, redis_url=args.redis_url, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.owner)
        elif args.command == "resolve":
            return await cli.resolve(args.short_code)
        elif args.command == "links":
            return await cli.links(args.owner)
        elif args.command == "info":
            return await cli.info(args.short_code, args.owner)
        elif args.command == "analytics":
            return await cli.analytics(args.short_code, args.owner, args.start, args.end, args.zero_fill)
        elif args.command == "totals":
            return await cli.totals(args.owner, args.start, args.end)
        elif args.command == "stats":
            return await cli.stats()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except ShortLinkError as e:
        return _emit({"error": str(e), "error_type": type(e).__name__}, ok=False)

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
