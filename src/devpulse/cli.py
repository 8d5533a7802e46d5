"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from devpulse import __version__
from devpulse.analysis.correlation import analyze_significance, confidence_interval
from devpulse.config import get_settings
from devpulse.datasources.dashboard_api.models import CorrelationResult
from devpulse.fetching import DataLayer
from devpulse.flows.dashboard import snapshot_dashboards
from devpulse.schemas import VALID_PERIODS


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="devpulse",
        description="Correlate developer activity with air quality and crypto prices",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")
    subparsers.add_parser("cities", help="List supported cities")
    subparsers.add_parser("coins", help="List supported coins")

    show_parser = subparsers.add_parser("show", help="Load and print one dashboard")
    show_parser.add_argument("entity", help="City id (e.g. bangalore) or coin id (e.g. bitcoin)")
    show_parser.add_argument(
        "--period",
        type=int,
        choices=VALID_PERIODS,
        default=None,
        help="Days of history (default: default_period from settings)",
    )

    snapshot_parser = subparsers.add_parser(
        "snapshot", help="Run the dashboard-snapshot flow for several entities"
    )
    snapshot_parser.add_argument("entities", nargs="+", help="City or coin ids")
    snapshot_parser.add_argument(
        "--period",
        type=int,
        choices=VALID_PERIODS,
        default=None,
        help="Days of history (default: default_period from settings)",
    )

    return parser


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"API: {settings.api_base_url}")
    print(f"Fallback policy: {settings.fallback_policy} (mock allowed: {settings.allows_mock})")
    return 0


def cmd_cities(_args: argparse.Namespace) -> int:
    """Handle the 'cities' command."""
    state = asyncio.run(DataLayer(get_settings()).list_cities())
    if state.error:
        print(f"Error: {state.error}", file=sys.stderr)
        return 1
    for city in state.data:
        print(f"{city.id:<16} {city.name:<20} ({city.lat:.4f}, {city.lon:.4f})")
    print(f"{len(state.data)} cities [{state.source}]")
    return 0


def cmd_coins(_args: argparse.Namespace) -> int:
    """Handle the 'coins' command."""
    state = asyncio.run(DataLayer(get_settings()).list_coins())
    if state.error:
        print(f"Error: {state.error}", file=sys.stderr)
        return 1
    for coin in state.data:
        print(f"{coin.id:<16} {coin.symbol:<6} {coin.name:<16} {coin.github_repo}")
    print(f"{len(state.data)} coins [{state.source}]")
    return 0


def _print_correlation(result: CorrelationResult) -> None:
    print(f"Correlation over {result.data_points} days (confidence {result.confidence:.0%}):")
    for name, r in result.correlations.items():
        interval = confidence_interval(r, result.data_points)
        ci = f"  95% CI [{interval[0]:+.2f}, {interval[1]:+.2f}]" if interval else ""
        print(f"  {name:<20} {r:+.3f}{ci}")
    print(f"  {result.interpretation}")
    for highlight in analyze_significance(result).highlights:
        print(f"  - {highlight}")


def cmd_show(args: argparse.Namespace) -> int:
    """Handle the 'show' command: load one dashboard and print it."""
    layer = DataLayer(get_settings())
    aggregator = layer.use_aggregate(args.entity, args.period)
    try:
        state = asyncio.run(aggregator.load())
    finally:
        aggregator.dispose()

    print(f"{state.entity_id} ({state.period} days)")
    failed = False
    for name, child in state.resources.items():
        if child.error:
            failed = True
            print(f"  {name:<12} error: {child.error}")
        elif isinstance(child.data, CorrelationResult):
            print(f"  {name:<12} [{child.source}]")
        else:
            print(f"  {name:<12} {len(child.data)} points [{child.source}]")

    correlation = state.resources.get("correlation")
    if correlation is not None and isinstance(correlation.data, CorrelationResult):
        _print_correlation(correlation.data)

    return 1 if failed else 0


def cmd_snapshot(args: argparse.Namespace) -> int:
    """Handle the 'snapshot' command: run the Prefect flow."""
    results = asyncio.run(snapshot_dashboards(args.entities, args.period))
    return 1 if any(summary["errors"] for summary in results.values()) else 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()
    configure_logging(args.debug)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "cities": cmd_cities,
        "coins": cmd_coins,
        "show": cmd_show,
        "snapshot": cmd_snapshot,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
