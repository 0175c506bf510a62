#!/usr/bin/env python3
"""
Command-line interface for a running short-link service.

Usage:
    shortlinks shorten <url> [--validity MINUTES] [--shortcode CODE]
    shortlinks stats <shortcode>
    shortlinks list
    shortlinks health
"""

import argparse
import json
import os
import sys
from typing import List, Optional

import requests

from .client import ShortLinksClient, ShortLinksError
from .common.logging_config import setup_logging


def _print_json(payload, stream=None) -> None:
    print(json.dumps(payload, indent=2, default=str), file=stream or sys.stdout)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Short-link service CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL for 30 minutes
  %(prog)s shorten https://example.com/long/url

  # Shorten with a custom code valid for a day
  %(prog)s shorten https://example.com/long/url --validity 1440 --shortcode mylink

  # Get statistics for one link
  %(prog)s stats mylink

  # List every link
  %(prog)s list

  # Check health
  %(prog)s health
        """
    )

    parser.add_argument(
        "--base-url",
        default=os.getenv("SHORTLINKS_URL", "http://localhost:8080"),
        help="Service base URL (default: from SHORTLINKS_URL env or http://localhost:8080)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--validity", type=int, help="Lifetime in minutes")
    shorten_parser.add_argument("--shortcode", help="Custom short code")

    stats_parser = subparsers.add_parser("stats", help="Get statistics for a short code")
    stats_parser.add_argument("shortcode", help="Short code to get stats for")

    subparsers.add_parser("list", help="List statistics for every link")
    subparsers.add_parser("health", help="Check service health")

    return parser


def run(args: argparse.Namespace, client: ShortLinksClient) -> int:
    """Execute a parsed command. Returns the process exit code."""
    try:
        if args.command == "shorten":
            result = client.shorten(args.url, validity=args.validity, shortcode=args.shortcode)
        elif args.command == "stats":
            result = client.stats(args.shortcode)
        elif args.command == "list":
            links = client.list_stats()
            result = {"count": len(links), "links": links}
        elif args.command == "health":
            result = client.health()
        else:
            return 1
    except ShortLinksError as e:
        _print_json({
            "success": False,
            "status": e.status_code,
            "error": e.error,
            "detail": e.detail,
        }, stream=sys.stderr)
        return 1
    except requests.RequestException as e:
        _print_json({
            "success": False,
            "error": f"Request failed: {e}",
        }, stream=sys.stderr)
        return 1

    _print_json({"success": True, "result": result})
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(level="DEBUG" if args.verbose else "WARNING")

    client = ShortLinksClient(base_url=args.base_url)
    try:
        return run(args, client)
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
