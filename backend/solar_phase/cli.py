"""Command-line entry point for the solar phase service.

Usage:
    solar-phase now        Print the current time of day
    solar-phase refresh    Refetch sunrise/sunset data and print the result
    solar-phase purge      Delete expired transients
    solar-phase serve      Start the API server
"""

import argparse
import logging
import sys

from .api.time_of_day import format_instant
from .config import settings
from .models.database import init_database, SessionLocal
from .services.sunrise_api import SunriseSunsetClient
from .services.time_of_day import PhaseComputationError, TimeOfDayCalculator
from .services.transients import DatabaseTransientCache

logger = logging.getLogger(__name__)


def _calculator() -> tuple[TimeOfDayCalculator, DatabaseTransientCache]:
    init_database()
    cache = DatabaseTransientCache(SessionLocal)
    return TimeOfDayCalculator(SunriseSunsetClient(), cache), cache


def _print_phase(phase) -> None:
    print(f"  Sunrise:          {format_instant(phase.sunrise)}")
    print(f"  Sunset:           {format_instant(phase.sunset)}")
    print(f"  Tomorrow sunrise: {format_instant(phase.next_sunrise)}")
    print(f"  Time of day:      {phase.phase_label} ({phase.numeric_phase})")


def cmd_now(_args: argparse.Namespace) -> int:
    """Print the current phase, using cached data when available."""
    calculator, _ = _calculator()
    try:
        _print_phase(calculator.get_current_phase())
    except PhaseComputationError as e:
        logger.error("Time of day computation failed: %s", e)
        return 1
    return 0


def cmd_refresh(_args: argparse.Namespace) -> int:
    """Bypass the cache and refetch today's and tomorrow's data."""
    calculator, _ = _calculator()
    try:
        _print_phase(calculator.get_or_compute(force_refresh=True))
    except PhaseComputationError as e:
        logger.error("Time of day computation failed: %s", e)
        return 1
    return 0


def cmd_purge(_args: argparse.Namespace) -> int:
    _, cache = _calculator()
    print(f"  Removed {cache.purge_expired()} expired transients")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "solar_phase.main:app",
        host=args.host,
        port=args.port,
        log_level="info",
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s:     %(name)s - %(message)s",
    )
    parser = argparse.ArgumentParser(
        prog="solar-phase",
        description="Solar time of day for a fixed location",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("now", help="Print the current time of day")
    sub.add_parser("refresh", help="Refetch sunrise/sunset data")
    sub.add_parser("purge", help="Delete expired transients")
    serve = sub.add_parser("serve", help="Start the API server")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)

    args = parser.parse_args(argv)

    commands = {
        "now": cmd_now,
        "refresh": cmd_refresh,
        "purge": cmd_purge,
        "serve": cmd_serve,
    }

    if args.command is None:
        parser.print_help()
        return 0

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
