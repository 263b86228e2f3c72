#!/usr/bin/env python3
"""
Command-line interface for the link store snapshot.

Works directly on the JSON snapshot file, so stop the server first or its
next save will overwrite the changes made here.

Usage:
    python link_store_cli.py shorten <url> [--owner IP]
    python link_store_cli.py get <short_code>
    python link_store_cli.py visit <short_code>
    python link_store_cli.py delete <short_code> --owner IP
    python link_store_cli.py list --owner IP
    python link_store_cli.py top [--limit N]
    python link_store_cli.py stats
"""

import argparse
import asyncio
import json
import sys
import os
from typing import List, Optional

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from linkstore.models import Link
from linkstore.persistence import SnapshotFile
from linkstore.service import LinkShortenerService
from linkstore.shortcode import ShortCodeGenerator
from linkstore.store import LinkStore
from linkstore.common.logging_config import setup_logging


MUTATING_COMMANDS = {"shorten", "visit", "delete"}


def _emit(payload: dict, error: bool = False) -> int:
    print(json.dumps(payload, indent=2, ensure_ascii=False), file=sys.stderr if error else sys.stdout)
    return 1 if error else 0


def _not_found(short_code: str) -> int:
    return _emit({"success": False, "error": f"Short code '{short_code}' not found"}, error=True)


class LinkStoreCLI:
    """Command-line interface for the link store."""

    def __init__(self, data_file: str, verbose: bool = False):
        """Initialize CLI."""
        self.data_file = data_file
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service: Optional[LinkShortenerService] = None

    def initialize(self) -> bool:
        """Load the snapshot. Returns False if it exists but is unusable."""
        store = LinkStore(
            snapshot=SnapshotFile(self.data_file),
            short_code_generator=ShortCodeGenerator(default_length=6),
            logger=self.logger,
        )
        loaded = store.load()
        # No autosave worker: close() writes the snapshot once
        self.service = LinkShortenerService(store=store, logger=self.logger)
        return loaded

    async def cleanup(self, save: bool):
        """Write changes back to the snapshot."""
        if self.service and save:
            await self.service.close()

    async def shorten(self, url: str, owner: str) -> int:
        """Shorten a URL."""
        try:
            link = await self.service.create_short_link(url, owner)
        except ValueError as e:
            return _emit({"success": False, "error": str(e)}, error=True)

        return _emit({
            "success": True,
            **link.to_dict(),
            "message": f"Successfully shortened URL to: {link.short_code}",
        })

    async def get(self, short_code: str) -> int:
        """Show a link without counting a visit."""
        link = await self.service.get_link(short_code)
        if link is None:
            return _not_found(short_code)
        return _emit({"success": True, **link.to_dict()})

    async def visit(self, short_code: str) -> int:
        """Resolve a link the way a redirect does, counting one visit."""
        original_url = await self.service.resolve(short_code)
        if original_url is None:
            return _not_found(short_code)
        return _emit({"success": True, "short_code": short_code, "original_url": original_url})

    async def delete(self, short_code: str, owner: str) -> int:
        """Delete a link on behalf of its owner."""
        deleted = await self.service.delete_link(short_code, owner)
        return _emit({"success": deleted, "short_code": short_code}, error=not deleted)

    async def list_links(self, owner: str) -> int:
        """List the links of one owner."""
        links = await self.service.list_my_links(owner)
        return self._emit_links(links)

    async def top(self, limit: int) -> int:
        """List the most visited links."""
        links = await self.service.top_links(limit)
        return self._emit_links(links)

    async def stats(self) -> int:
        """Show store statistics."""
        stats = await self.service.get_statistics()
        return _emit({"success": True, "statistics": stats})

    def _emit_links(self, links: List[Link]) -> int:
        return _emit({
            "success": True,
            "count": len(links),
            "links": [link.to_dict() for link in links],
        })


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Link Shorter CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten example.com --owner 1.1.1.1

  # Show a link and its visits
  %(prog)s get aZ3kq1

  # Delete a link
  %(prog)s delete aZ3kq1 --owner 1.1.1.1

  # Top 10 links
  %(prog)s top --limit 10
        """
    )

    parser.add_argument(
        "--data-file",
        default=os.getenv("DATA_FILE", "data/links.json"),
        help="Snapshot file (default: from DATA_FILE env or data/links.json)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--owner", default="127.0.0.1", help="Owner IP")

    get_parser = subparsers.add_parser("get", help="Show a link")
    get_parser.add_argument("short_code", help="Short code to lookup")

    visit_parser = subparsers.add_parser("visit", help="Resolve a link and count a visit")
    visit_parser.add_argument("short_code", help="Short code to resolve")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("short_code", help="Short code to delete")
    delete_parser.add_argument("--owner", required=True, help="Owner IP")

    list_parser = subparsers.add_parser("list", help="List links of an owner")
    list_parser.add_argument("--owner", required=True, help="Owner IP")

    top_parser = subparsers.add_parser("top", help="Most visited links")
    top_parser.add_argument("--limit", type=int, default=50, help="Maximum number to return (0 = all)")

    subparsers.add_parser("stats", help="Store statistics")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = LinkStoreCLI(data_file=args.data_file, verbose=args.verbose)

    if not cli.initialize():
        # Saving now would replace the unreadable snapshot with an empty one
        return _emit({"success": False, "error": f"Cannot read snapshot {args.data_file}"}, error=True)

    try:
        if args.command == "shorten":
            return await cli.shorten(args.url, args.owner)
        elif args.command == "get":
            return await cli.get(args.short_code)
        elif args.command == "visit":
            return await cli.visit(args.short_code)
        elif args.command == "delete":
            return await cli.delete(args.short_code, args.owner)
        elif args.command == "list":
            return await cli.list_links(args.owner)
        elif args.command == "top":
            return await cli.top(args.limit)
        else:
            return await cli.stats()

    finally:
        await cli.cleanup(save=args.command in MUTATING_COMMANDS)


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
