#!/usr/bin/env python3
"""
Command-line client for a running short-link service.

Usage:
    shortlinks shorten <url> [--validity MINUTES] [--custom-code CODE]
    shortlinks info <shortcode>
    shortlinks list
    shortlinks stats
    shortlinks log <event_type> [--data JSON]
    shortlinks health
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, Optional

import requests

from .common.logging_config import setup_logging

DEFAULT_BASE_URL = "http://localhost:5000"


class ShortLinksCLI:
    """Command-line interface over the short-link HTTP API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
        verbose: bool = False,
    ):
        """Initialize CLI."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")

    def _print(self, payload: Dict[str, Any], error: bool = False) -> int:
        print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)
        return 1 if error else 0

    def _request(self, method: str, path: str, **kwargs) -> int:
        url = f"{self.base_url}{path}"
        self.logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            return self._print({"success": False, "error": f"Request failed: {e}"}, error=True)

        try:
            body = response.json()
        except ValueError:
            body = {"body": response.text}

        if response.ok:
            if isinstance(body, dict):
                body.setdefault("success", True)
            return self._print(body)

        detail = body.get("detail", body) if isinstance(body, dict) else body
        return self._print(
            {"success": False, "status": response.status_code, "error": detail},
            error=True,
        )

    def shorten(self, url: str, validity: Optional[int] = None, custom_code: Optional[str] = None) -> int:
        """Shorten a URL."""
        payload: Dict[str, Any] = {"originalUrl": url}
        if validity is not None:
            payload["validityPeriod"] = validity
        if custom_code:
            payload["customShortcode"] = custom_code
        return self._request("POST", "/api/shorten", json=payload)

    def info(self, shortcode: str) -> int:
        """Show a link without counting a click."""
        return self._request("GET", f"/api/urls/{shortcode}")

    def list_urls(self) -> int:
        return self._request("GET", "/api/urls")

    def stats(self) -> int:
        return self._request("GET", "/api/stats")

    def log(self, event_type: str, data: Optional[str] = None) -> int:
        """Send an event to the log sink."""
        try:
            payload = json.loads(data) if data else {}
        except json.JSONDecodeError as e:
            return self._print({"success": False, "error": f"Invalid --data JSON: {e}"}, error=True)
        if not isinstance(payload, dict):
            return self._print({"success": False, "error": "--data must be a JSON object"}, error=True)
        return self._request("POST", "/api/log", json={"eventType": event_type, "data": payload})

    def health(self) -> int:
        return self._request("GET", "/api/health")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlinks",
        description="Short-link service CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL for 30 minutes
  %(prog)s shorten https://example.com/long/url

  # Shorten with custom code and a 2 hour validity
  %(prog)s shorten https://example.com/long/url --custom-code mylink --validity 120

  # Show clicks for a link
  %(prog)s info mylink

  # Totals across all links
  %(prog)s stats
        """
    )

    parser.add_argument(
        "--base-url",
        default=os.getenv("SHORTLINKS_URL", DEFAULT_BASE_URL),
        help=f"Service base URL (default: from SHORTLINKS_URL env or {DEFAULT_BASE_URL})"
    )
    parser.add_argument("--timeout", type=float, default=5.0, help="Request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--validity", type=int, help="Validity period in minutes")
    shorten_parser.add_argument("--custom-code", help="Custom short code")

    info_parser = subparsers.add_parser("info", help="Show one link")
    info_parser.add_argument("shortcode", help="Short code to look up")

    subparsers.add_parser("list", help="List all links")
    subparsers.add_parser("stats", help="Show totals")

    log_parser = subparsers.add_parser("log", help="Send an event to the log sink")
    log_parser.add_argument("event_type", help="Event name, e.g. URL_COPIED")
    log_parser.add_argument("--data", help="Event payload as a JSON object")

    subparsers.add_parser("health", help="Check service health")

    return parser


def main(argv=None, session: Optional[requests.Session] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortLinksCLI(
        base_url=args.base_url,
        timeout=args.timeout,
        session=session,
        verbose=args.verbose,
    )

    if args.command == "shorten":
        return cli.shorten(args.url, args.validity, args.custom_code)
    elif args.command == "info":
        return cli.info(args.shortcode)
    elif args.command == "list":
        return cli.list_urls()
    elif args.command == "stats":
        return cli.stats()
    elif args.command == "log":
        return cli.log(args.event_type, args.data)
    elif args.command == "health":
        return cli.health()

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
