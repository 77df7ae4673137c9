#!/usr/bin/env python3
"""
Command-line interface for URL shortener service.

Usage:
    python shortener_cli.py shorten <url> [--owner-id ID] [--expires-in 1h|24h|7d|30d|never]
    python shortener_cli.py resolve <code>
    python shortener_cli.py stats <code>
    python shortener_cli.py list --owner-id ID
    python shortener_cli.py delete <code> --owner-id ID
    python shortener_cli.py update-expiry <code> --owner-id ID --expires-in 1h|24h|7d|30d|never
    python shortener_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from shortener.database.sqlite import LinkStoreSQLite
from shortener.exceptions import ShortenerError
from shortener.lifecycle import Outcome
from shortener.resolver import ResolutionService
from shortener.service import ShorteningService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging


def _emit(payload: dict, error: bool = False) -> int:
    print(json.dumps(payload, indent=2, default=str), file=sys.stderr if error else sys.stdout)
    return 1 if error else 0


class ShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(self, db_path: str, verbose: bool = False):
        """Initialize CLI."""
        self.db_path = db_path
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.store = None
        self.shortening = None
        self.resolution = None

    def initialize(self):
        """Open the database and build the services."""
        self.store = LinkStoreSQLite(db_config=self.db_path, logger=self.logger)
        self.shortening = ShorteningService(
            store=self.store,
            short_code_generator=ShortCodeGenerator(),
            logger=self.logger,
        )
        self.resolution = ResolutionService(store=self.store, logger=self.logger)

    async def cleanup(self):
        """Cleanup resources."""
        if self.shortening:
            await self.shortening.close()

    async def shorten(self, url: str, owner_id: Optional[int], expires_in: Optional[str]) -> int:
        result = await self.shortening.shorten(url, owner_id=owner_id, expires_in=expires_in)
        return _emit({
            "success": True,
            "code": result.code,
            "target": result.target,
            "created_at": result.created_at.isoformat(),
            "expires_at": result.expires_at.isoformat() if result.expires_at else None,
            "reused": result.reused,
        })

    async def resolve(self, code: str) -> int:
        """Resolve a code exactly as a visitor would (counts a click)."""
        resolution = await self.resolution.resolve(code)
        if resolution.outcome is Outcome.REDIRECT:
            return _emit({"success": True, "code": code, "target": resolution.target})
        return _emit({"success": False, "code": code, "outcome": resolution.outcome.value}, error=True)

    async def stats(self, code: str) -> int:
        link = await self.shortening.get_stats(code)
        return _emit({"success": True, **link.to_dict()})

    async def list_links(self, owner_id: int) -> int:
        links = await self.shortening.list_links(owner_id)
        return _emit({
            "success": True,
            "count": len(links),
            "links": [link.to_dict() for link in links],
        })

    async def delete(self, code: str, owner_id: int) -> int:
        await self.shortening.delete_link(code, owner_id)
        return _emit({"success": True, "code": code, "deleted": True})

    async def update_expiry(self, code: str, owner_id: int, expires_in: str) -> int:
        expires_at = await self.shortening.update_expiry(code, owner_id, expires_in)
        return _emit({
            "success": True,
            "code": code,
            "expires_at": expires_at.isoformat() if expires_at else None,
        })

    async def health(self) -> int:
        health_status = await self.shortening.health_check()
        stats = await self.shortening.get_statistics()
        _emit({"success": True, "health": health_status, "statistics": stats})
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL anonymously
  %(prog)s shorten https://example.com/long/url

  # Shorten for user 1, expiring in a week
  %(prog)s shorten https://example.com/long/url --owner-id 1 --expires-in 7d

  # Follow a code (counts a click)
  %(prog)s resolve aB3_x9Q

  # List a user's links
  %(prog)s list --owner-id 1
        """
    )

    parser.add_argument(
        "--db-path",
        default=os.getenv("DATABASE_PATH", "urls.db"),
        help="SQLite database file (default: from DATABASE_PATH env or urls.db)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--owner-id", type=int, help="Owning user id")
    shorten_parser.add_argument("--expires-in", help="1h, 24h, 7d, 30d or never (owned links only)")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code")
    resolve_parser.add_argument("code", help="Short code to resolve")

    stats_parser = subparsers.add_parser("stats", help="Get link statistics")
    stats_parser.add_argument("code", help="Short code to get stats for")

    list_parser = subparsers.add_parser("list", help="List a user's links")
    list_parser.add_argument("--owner-id", type=int, required=True, help="Owning user id")

    delete_parser = subparsers.add_parser("delete", help="Soft-delete a link")
    delete_parser.add_argument("code", help="Short code to delete")
    delete_parser.add_argument("--owner-id", type=int, required=True, help="Owning user id")

    expiry_parser = subparsers.add_parser("update-expiry", help="Change when a link expires")
    expiry_parser.add_argument("code", help="Short code to update")
    expiry_parser.add_argument("--owner-id", type=int, required=True, help="Owning user id")
    expiry_parser.add_argument("--expires-in", required=True, help="1h, 24h, 7d, 30d or never")

    subparsers.add_parser("health", help="Check database health and statistics")

    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortenerCLI(db_path=args.db_path, verbose=args.verbose)

    try:
        cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.owner_id, args.expires_in)
        elif args.command == "resolve":
            return await cli.resolve(args.code)
        elif args.command == "stats":
            return await cli.stats(args.code)
        elif args.command == "list":
            return await cli.list_links(args.owner_id)
        elif args.command == "delete":
            return await cli.delete(args.code, args.owner_id)
        elif args.command == "update-expiry":
            return await cli.update_expiry(args.code, args.owner_id, args.expires_in)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except ShortenerError as e:
        return _emit({"success": False, "error": e.error_code, "detail": str(e)}, error=True)
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
