#!/usr/bin/env python3
"""
Initialize the SQLite database for URL shortener.

The schema is also created on service startup; this script exists so the
file can be prepared (and checked) ahead of a deployment.

Usage:
    python init_database.py --db-path /var/lib/shortener/urls.db
"""

import argparse
import asyncio
import sys
import os

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from shortener.database.sqlite import LinkStoreSQLite
from shortener.exceptions import StoreError
from shortener.common.logging_config import setup_logging


async def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Initialize SQLite database")
    parser.add_argument(
        "--db-path",
        default=os.getenv("DATABASE_PATH", "urls.db"),
        help="SQLite database file"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    logger = setup_logging(level="DEBUG" if args.verbose else "INFO")

    try:
        logger.info(f"Initializing database at {args.db_path}...")
        store = LinkStoreSQLite(db_config=args.db_path, logger=logger)
    except StoreError as e:
        logger.error(f"Error initializing tables: {e} ({e.__cause__})")
        return 1

    healthy = await store.health_check()
    await store.close()

    if not healthy:
        logger.error("Database health check failed")
        return 1

    logger.info("Database health check passed")
    return 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
