"""Command-line interface for Sujood."""

import argparse
import asyncio
import sys
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from sujood import __version__
from sujood.config import get_config, setup_logging
from sujood.domain.errors import SujoodError
from sujood.domain.methods import METHODS, CalculationMethod
from sujood.domain.models import Location, Madhab, PrayerName, UtcOffset
from sujood.domain.settings import SalahSettings

if TYPE_CHECKING:
    from sujood.services.prayer_service import PrayerService


def _common_options() -> argparse.ArgumentParser:
    """Options shared by every command."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--lat", type=float, help="Latitude (overrides the settings file)")
    common.add_argument("--lng", type=float, help="Longitude (overrides the settings file)")
    common.add_argument(
        "--elevation",
        type=float,
        help="Elevation in metres (default: 0)",
    )
    common.add_argument(
        "--method",
        "-m",
        choices=[m.value for m in CalculationMethod if m is not CalculationMethod.OTHER],
        help="Calculation method",
    )
    common.add_argument(
        "--madhab",
        choices=[m.value for m in Madhab],
        help="Madhab for Asr",
    )
    common.add_argument(
        "--utc-offset",
        "-z",
        help='Offset from UTC, e.g. "+5" or "-3:30" (default: from the location\'s time zone)',
    )
    common.add_argument("--settings", "-s", type=Path, help="Settings file path")
    common.add_argument("--cache", "-c", type=Path, help="Cache database path")
    common.add_argument(
        "--log-level",
        "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING, serve: INFO)",
    )
    return common


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="sujood",
        description="Offline prayer times, Hijri dates and next-prayer countdowns",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"sujood {__version__}",
    )

    common = _common_options()
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # serve command
    serve_parser = subparsers.add_parser("serve", parents=[common], help="Start the web server")
    serve_parser.add_argument("--host", "-H", help="Server address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", "-p", type=int, help="Server port (default: 8080)")

    # times command
    times_parser = subparsers.add_parser("times", parents=[common], help="Show prayer times")
    times_parser.add_argument(
        "--date",
        "-d",
        type=date.fromisoformat,
        help="First day, YYYY-MM-DD (default: today)",
    )
    times_parser.add_argument(
        "--days",
        "-n",
        type=int,
        default=1,
        help="Number of days (default: 1)",
    )

    # hijri command
    hijri_parser = subparsers.add_parser("hijri", parents=[common], help="Show the Hijri date")
    hijri_parser.add_argument(
        "--date",
        "-d",
        type=date.fromisoformat,
        help="Gregorian date, YYYY-MM-DD (default: today)",
    )

    # next command
    subparsers.add_parser("next", parents=[common], help="Show the next prayer and countdown")

    # methods command
    subparsers.add_parser("methods", help="List calculation methods")

    # cache command
    cache_parser = subparsers.add_parser("cache", parents=[common], help="Manage the cache")
    cache_parser.add_argument("action", choices=["prune", "clear", "info"], help="Cache action")
    cache_parser.add_argument(
        "--retention-days",
        type=int,
        help="Days kept behind today when pruning (default: 90)",
    )

    return parser


def _load_settings(args: argparse.Namespace) -> SalahSettings:
    """Settings file merged with command-line overrides."""
    from sujood.infrastructure.settings_repository import JsonSettingsRepository
    from sujood.services.timezone import suggest_utc_offset

    settings_path = args.settings or get_config().settings_path
    settings = asyncio.run(JsonSettingsRepository(settings_path).load())

    if (args.lat is None) != (args.lng is None):
        raise SystemExit("sujood: --lat and --lng must be given together")

    overrides: dict = {}
    if args.lat is not None:
        overrides["location"] = Location(
            latitude=args.lat,
            longitude=args.lng,
            elevation=args.elevation or 0.0,
        )
        if args.utc_offset is None:
            overrides["utc_offset"] = suggest_utc_offset(overrides["location"])
    if args.method:
        overrides["method"] = CalculationMethod.from_name(args.method)
    if args.madhab:
        overrides["madhab"] = Madhab.from_name(args.madhab)
    if args.utc_offset is not None:
        overrides["utc_offset"] = UtcOffset.parse(args.utc_offset)

    return replace(settings, **overrides) if overrides else settings


def _has_overrides(args: argparse.Namespace) -> bool:
    """Whether the command line overrides any saved setting."""
    return any(value is not None for value in (args.lat, args.lng, args.method, args.madhab, args.utc_offset))


def _build_service(args: argparse.Namespace) -> "PrayerService":
    """
    Prayer service wired to the persistent cache.

    Only runs with the saved settings claim the cache; one-off overrides
    share it without dropping rows written under the saved settings.
    """
    from sujood.infrastructure.cache_repository import SqlitePrayerTimeCache
    from sujood.services.prayer_service import PrayerService

    settings = _load_settings(args)
    cache = SqlitePrayerTimeCache(args.cache or get_config().cache_path)
    service = PrayerService(settings, cache=cache)
    if not _has_overrides(args):
        service.sync_cache_fingerprint()
    return service


def _print_header(service: "PrayerService") -> None:
    location = service.location
    label = f" ({location.name})" if location.name else ""
    print(f"\nLocation: {location.latitude:.4f}, {location.longitude:.4f}{label}")
    print(f"Method:   {service.params.display_name}, Asr {service.settings.madhab.value}")
    print(f"UTC:      {service.utc_offset}")
    print()


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the web server."""
    import uvicorn

    from sujood.api.app import create_app

    config = get_config()
    log_level = args.log_level or config.log_level
    setup_logging(log_level)

    app = create_app(
        settings_path=args.settings or config.settings_path,
        cache_path=args.cache or config.cache_path,
        retention_days=config.cache_retention_days,
        days_ahead=config.cache_days_ahead,
    )

    uvicorn.run(
        app,
        host=args.host or config.host,
        port=args.port or config.port,
        log_level=log_level.lower(),
    )


def cmd_times(args: argparse.Namespace) -> None:
    """Show prayer times."""
    from sujood.formatting import format_hijri

    if args.days < 1:
        raise SystemExit("sujood: --days must be at least 1")

    service = _build_service(args)
    start = args.date or datetime.now(service.timezone).date()
    times_list = service.calculate_range(start, args.days)

    _print_header(service)
    print("=" * 90)
    header = " ".join(f"{p.display_name:>8}" for p in PrayerName)
    print(f"{'Date':<12} {header}   {'Hijri'}")
    print("-" * 90)

    for times in times_list:
        columns = " ".join(f"{times.get_time(p).strftime('%H:%M'):>8}" for p in PrayerName)
        hijri = format_hijri(service.hijri_date(times.date))
        print(f"{times.date.isoformat():<12} {columns}   {hijri}")

    print("=" * 90)


def cmd_hijri(args: argparse.Namespace) -> None:
    """Show the Hijri date."""
    from sujood.formatting import format_date_long, format_hijri
    from sujood.services.hijri import to_hijri

    settings = _load_settings(args)
    target = args.date or datetime.now(settings.utc_offset.tzinfo).date()
    hijri = to_hijri(target, settings.hijri_mode)
    print(f"{format_date_long(target)}: {format_hijri(hijri)}")


def cmd_next(args: argparse.Namespace) -> None:
    """Show the next prayer."""
    from sujood.formatting import format_duration, format_time

    service = _build_service(args)
    upcoming = service.get_next_prayer()

    _print_header(service)
    current = "Isha (previous night)" if upcoming.before_fajr else upcoming.current_prayer.display_name
    print(f"Current: {current}")
    print(
        f"Next:    {upcoming.next_prayer.display_name} at {format_time(upcoming.next_at)} "
        f"(in {format_duration(upcoming.countdown)})"
    )


def cmd_methods(args: argparse.Namespace) -> None:
    """List calculation methods."""
    print(f"{'Method':<24} {'Fajr':>6}  {'Isha':<24} Name")
    print("-" * 90)
    for params in METHODS.values():
        print(
            f"{params.method.value:<24} {params.fajr_angle:>5g}°  "
            f"{params.isha.describe():<24} {params.display_name}"
        )
    print(f"{CalculationMethod.OTHER.value:<24} {'custom':>6}  {'custom':<24} Caller-supplied angles")


def cmd_cache(args: argparse.Namespace) -> None:
    """Manage the cache."""
    from sujood.infrastructure.cache_repository import SqlitePrayerTimeCache

    cache = SqlitePrayerTimeCache(args.cache or get_config().cache_path)

    if args.action == "prune":
        retention = args.retention_days or get_config().cache_retention_days
        removed = cache.prune(retention_days=retention)
        print(f"Pruned {removed} cached days older than {retention} days.")
    elif args.action == "clear":
        removed = cache.invalidate_all()
        print(f"Cleared {removed} cached days.")
    else:
        days = cache.dates()
        print(f"Cache:  {cache.file_path}")
        print(f"Days:   {len(days)}")
        if days:
            print(f"Range:  {days[0].isoformat()} .. {days[-1].isoformat()}")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command != "serve":
        setup_logging(getattr(args, "log_level", None) or "WARNING")

    commands = {
        "serve": cmd_serve,
        "times": cmd_times,
        "hijri": cmd_hijri,
        "next": cmd_next,
        "methods": cmd_methods,
        "cache": cmd_cache,
    }

    try:
        commands[args.command](args)
    except SujoodError as e:
        print(f"sujood: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
