#!/usr/bin/env python3
"""
CLI for calling a configured API connector.

Usage:
    api-connector --config config/api.yaml --section Vendor.Package.weather fetch forecast -p city=Berlin
    api-connector --config config/api.yaml --section Vendor.Package.weather post report --data '{"ok": true}'
    api-connector --config config/api.yaml --section Vendor.Package.weather --cache-dir .cache fetch forecast
    api-connector --config config/api.yaml --section Vendor.Package.weather cache-key some-identifier
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .cache import FileCache, MemoryCache
from .core.connector import ApiConnector
from .core.exceptions import ApiConnectorError


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_parameters(values: Optional[List[str]]) -> Dict[str, str]:
    """Parse repeated key=value arguments into a dict."""
    parameters = {}
    for value in values or []:
        key, sep, item = value.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected key=value, got: {value}")
        parameters[key] = item
    return parameters


def build_connector(args: argparse.Namespace) -> ApiConnector:
    """Build a connector from the command line options."""
    if args.cache_dir:
        cache_dir = Path(args.cache_dir)
        api_cache = FileCache(cache_dir / "api")
        fallback_cache = FileCache(cache_dir / "fallback")
    else:
        api_cache = MemoryCache()
        fallback_cache = MemoryCache()

    return ApiConnector.from_config(
        Path(args.config),
        api_cache=api_cache,
        fallback_cache=fallback_cache,
        section=args.section,
        env_prefix=args.env_prefix,
    )


def cmd_fetch(args: argparse.Namespace) -> int:
    """Handle fetch command."""
    connector = build_connector(args)
    data = connector.fetch_data(args.action, parse_parameters(args.param))
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


def cmd_post(args: argparse.Namespace) -> int:
    """Handle post command."""
    try:
        payload = json.loads(args.data) if args.data else {}
    except ValueError as e:
        logger.error(f"Invalid JSON for --data: {e}")
        return 2

    connector = build_connector(args)
    success = connector.post_json_data(args.action, parse_parameters(args.param), payload)
    print("ok" if success else "failed")
    return 0 if success else 1


def cmd_cache_key(args: argparse.Namespace) -> int:
    """Handle cache-key command."""
    connector = build_connector(args)
    print(connector.get_cache_key(args.identifier))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Call a configured REST API connector",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", required=True, help="Path to the YAML settings file")
    parser.add_argument("--section", required=True, help="Dotted path of the settings section")
    parser.add_argument("--cache-dir", help="Directory for persistent caches")
    parser.add_argument("--env-prefix", help="Prefix for environment overrides")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    subparsers.required = True

    fetch_parser = subparsers.add_parser("fetch", help="GET an action and print the JSON result")
    fetch_parser.add_argument("action", help="Configured action name")
    fetch_parser.add_argument("-p", "--param", action="append", help="Query parameter key=value")
    fetch_parser.set_defaults(func=cmd_fetch)

    post_parser = subparsers.add_parser("post", help="POST JSON data to an action")
    post_parser.add_argument("action", help="Configured action name")
    post_parser.add_argument("-p", "--param", action="append", help="Query parameter key=value")
    post_parser.add_argument("--data", help="JSON body")
    post_parser.set_defaults(func=cmd_post)

    key_parser = subparsers.add_parser("cache-key", help="Print the cache key for an identifier")
    key_parser.add_argument("identifier", help="Cache identifier")
    key_parser.set_defaults(func=cmd_cache_key)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        return args.func(args)
    except (ApiConnectorError, FileNotFoundError, argparse.ArgumentTypeError) as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
