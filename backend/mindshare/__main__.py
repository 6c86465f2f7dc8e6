"""Mindshare CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv
from pydantic import ValidationError as SettingsValidationError

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from mindshare import __version__
from mindshare.aggregator import PaginationReport, TimeframeAggregator
from mindshare.checker import RankChecker
from mindshare.config import Settings, get_settings
from mindshare.exceptions import ValidationError
from mindshare.services.leaderboard import CheckResponse, LeaderboardClient
from mindshare.storage import SnapshotCache

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Reduce noise from HTTP libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def _init_logfire(app=None) -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from mindshare.observability import initialize_logfire

        initialize_logfire(get_settings(), app=app)
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def _format_number(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value:,.4f}".rstrip("0").rstrip(".")


def print_check(
    response: CheckResponse,
    reports: dict[str, PaginationReport] | None = None,
) -> None:
    print(f"\n=== @{response.username} ===\n")
    for key, result in response.results.items():
        print(f"{result.label or key} ({result.total_fetched} entries fetched)")
        if result.found:
            print(f"  Rank: {result.rank}")
            print(f"  Mindshare: {_format_number(result.mindshare)}")
        else:
            print("  Not found")
        print(f"  Rank 100 mindshare: {_format_number(result.rank100_mindshare)}")
        if result.found:
            print(f"  Needed for top 100: {_format_number(result.needed_mindshare)}")
        report = (reports or {}).get(key)
        if report is not None:
            stop = report.stop_reason
            if report.truncated_at_page is not None:
                stop = f"{stop} at page {report.truncated_at_page}"
            print(
                f"  Data: {report.pages_fetched} pages, "
                f"{report.dropped_records} records dropped, "
                f"{report.heuristic_matches} heuristic matches, stopped on {stop}"
            )
        print()


async def run_check(
    username: str,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[CheckResponse, dict[str, PaginationReport]]:
    """Run one check with a fresh client and cache; also return each walk's report."""
    client = LeaderboardClient(settings.leaderboard_api_config(), transport=transport)
    async with client:
        aggregator = TimeframeAggregator(
            fetcher=client,
            cache=SnapshotCache(ttl_seconds=settings.cache_ttl_seconds),
            max_pages=settings.max_pages,
            page_size_hint=settings.page_size_hint,
        )
        response = await RankChecker(aggregator).check(username)
        return response, aggregator.last_reports


def cmd_check(args: argparse.Namespace) -> int:
    """Check one username against every timeframe."""
    _init_logfire()

    try:
        response, reports = asyncio.run(run_check(args.username, get_settings()))
        print_check(response, reports)
        return 0

    except ValidationError as e:
        print(f"\n❌ {e}\n")
        return 2
    except Exception as e:
        logger.error(f"Check failed: {e}", exc_info=True)
        print(f"\n❌ Check failed: {e}\n")
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Display resolved configuration."""
    try:
        settings = get_settings()

        print("\n=== Mindshare Configuration ===\n")
        print("Upstream:")
        print(f"  Base URL: {settings.upstream_base_url}")
        print(f"  Timeout: {settings.upstream_timeout_seconds}s\n")

        print("Server:")
        print(f"  Listen: {settings.host}:{settings.port}")
        print(f"  Static Dir: {settings.static_dir}")
        print(f"  CORS Origins: {', '.join(settings.cors_origins)}\n")

        print("Aggregation:")
        print(f"  Cache TTL: {settings.cache_ttl_seconds}s")
        print(f"  Max Pages: {settings.max_pages}")
        print(f"  Page Size Hint: {settings.page_size_hint}\n")

        print(f"Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")
        return 0

    except SettingsValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the HTTP API."""
    import uvicorn

    from mindshare.api.server import create_app

    try:
        if args.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        settings = get_settings()
        app = create_app(settings)
        _init_logfire(app)

        host = args.host or settings.host
        port = args.port or settings.port
        logger.info(f"Server running on {host}:{port}")
        uvicorn.run(app, host=host, port=port, log_level="debug" if args.debug else "info")
        return 0

    except KeyboardInterrupt:
        print("\n\nReceived interrupt signal. Shutting down...\n")
        return 0
    except Exception as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        print(f"\nFailed to start: {e}\n")
        return 1


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Mindshare: leaderboard rank checker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Mindshare {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_serve = subparsers.add_parser(
        "serve",
        help="Start the HTTP API",
    )
    parser_serve.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    parser_serve.add_argument("--port", type=int, help="Listen port (default: PORT or 3000)")
    parser_serve.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser_serve.set_defaults(func=cmd_serve)

    parser_check = subparsers.add_parser(
        "check",
        help="Check a username against every timeframe",
    )
    parser_check.add_argument("username", help="Username, with or without a leading @")
    parser_check.set_defaults(func=cmd_check)

    parser_config = subparsers.add_parser(
        "config",
        help="Display resolved configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
