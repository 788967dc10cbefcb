#!/usr/bin/env python3
"""
Command-line interface for the shortlink service.

Usage:
    shortlink shorten <url> [--custom-code CODE]
    shortlink resolve <code>
    shortlink stats <code>
    shortlink list [--limit N]
    shortlink delete <code>
    shortlink health
    shortlink init-db
"""

import argparse
import asyncio
import json
import sys
from typing import Optional, List

from config import Config
from .bootstrap import build_service
from .common.logging_config import setup_logging
from .database.memory import InMemoryShortLinkDB
from .database.postgres import PostgresShortLinkDB
from .errors import ShortLinkError


def _emit(payload: dict, error: bool = False) -> int:
    print(json.dumps(payload, indent=2, default=str), file=sys.stderr if error else sys.stdout)
    return 1 if error else 0


def _fail(message: str) -> int:
    return _emit({"success": False, "error": message}, error=True)


MEMORY_STORE_WARNING = "memory:// store: this change is lost when the command exits; pass --db-url or set DATABASE_URL"


class ShortLinkCLI:
    """Command-line interface over URLShortenerService."""

    def __init__(self, config: Config, verbose: bool = False):
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = None

    async def initialize(self):
        """Initialize store and service."""
        self.service = await build_service(self.config, self.logger)

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _with_store_warning(self, payload: dict) -> dict:
        """Flag writes that only reach this process's in-memory store."""
        if isinstance(self.service.db, InMemoryShortLinkDB):
            payload["warning"] = MEMORY_STORE_WARNING
        return payload

    async def shorten(self, url: str, custom_code: Optional[str] = None) -> int:
        """Shorten a URL."""
        link = await self.service.create_short_url(url, custom_code)
        return _emit(self._with_store_warning({
            "success": True,
            "code": link.code,
            "original_url": link.original_url,
            "created_at": link.created_at.isoformat(),
        }))

    async def resolve(self, code: str) -> int:
        """Look up the original URL without counting a click."""
        original_url = await self.service.get_original_url(code, increment_count=False)
        return _emit({"success": True, "code": code, "original_url": original_url})

    async def stats(self, code: str) -> int:
        """Show click statistics for a code."""
        stats = await self.service.get_click_stats(code)
        return _emit({
            "success": True,
            "code": stats["code"],
            "original_url": stats["original_url"],
            "created_at": stats["created_at"].isoformat(),
            "total_clicks": stats["total_clicks"],
            "clicks": [click.to_dict() for click in stats["clicks"]],
        })

    async def list_urls(self, limit: int = 100) -> int:
        """List recent URLs."""
        links = await self.service.list_recent_urls(limit)
        return _emit({
            "success": True,
            "count": len(links),
            "urls": [link.to_dict() for link in links],
        })

    async def delete(self, code: str) -> int:
        """Delete a short URL and retire its code."""
        link = await self.service.delete_short_url(code)
        return _emit(self._with_store_warning({"success": True, "deleted": link.to_dict()}))

    async def health(self) -> int:
        """Check service health."""
        health_status = await self.service.health_check()
        stats = await self.service.get_statistics()

        _emit({"success": True, "health": health_status, "statistics": stats})
        return 0 if health_status["overall"] else 1

    async def init_db(self) -> int:
        """Create PostgreSQL tables."""
        db = self.service.db
        if not isinstance(db, PostgresShortLinkDB):
            return _fail(f"init-db needs a PostgreSQL database URL, got {self.config.database_url}")

        await db.ensure_tables()
        if not await db.health_check():
            return _fail("Database health check failed")
        return _emit({"success": True, "message": "Tables initialized"})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlink",
        description="shortlink CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s --db-url postgresql://localhost/shortlink shorten https://example.com/long/url

  # Shorten with custom code
  %(prog)s shorten https://example.com/long/url --custom-code mylink

  # Click statistics
  %(prog)s stats mylink
        """
    )

    parser.add_argument(
        "--db-url",
        default=None,
        help="Store URL (default: DATABASE_URL env or memory://, which keeps nothing after the command exits)"
    )
    parser.add_argument(
        "--redis-url",
        default=None,
        help="Redis connection URL (default: REDIS_URL env, cache disabled if unset)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--custom-code", help="Custom short code")

    resolve_parser = subparsers.add_parser("resolve", help="Get original URL")
    resolve_parser.add_argument("code", help="Short code to lookup")

    stats_parser = subparsers.add_parser("stats", help="Get click statistics")
    stats_parser.add_argument("code", help="Short code to get stats for")

    list_parser = subparsers.add_parser("list", help="List recent URLs")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum number to return")

    delete_parser = subparsers.add_parser("delete", help="Delete a short URL")
    delete_parser.add_argument("code", help="Short code to delete")

    subparsers.add_parser("health", help="Check service health")
    subparsers.add_parser("init-db", help="Create PostgreSQL tables")

    return parser


async def run(args: argparse.Namespace) -> int:
    """Execute one parsed command."""
    overrides = {}
    if args.db_url:
        overrides["database_url"] = args.db_url
    if args.redis_url:
        overrides["redis_url"] = args.redis_url

    cli = ShortLinkCLI(Config(**overrides), verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.custom_code)
        elif args.command == "resolve":
            return await cli.resolve(args.code)
        elif args.command == "stats":
            return await cli.stats(args.code)
        elif args.command == "list":
            return await cli.list_urls(args.limit)
        elif args.command == "delete":
            return await cli.delete(args.code)
        elif args.command == "health":
            return await cli.health()
        elif args.command == "init-db":
            return await cli.init_db()
        return _fail(f"Unknown command: {args.command}")

    except ShortLinkError as e:
        return _emit({"success": False, "error": e.message, "details": e.details}, error=True)

    finally:
        await cli.cleanup()


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
