"""
LaunchScope command line interface
==================================

    launchscope launches --upcoming --limit 5 --launchpad --weather
    launchscope launches --start 2022-01-01 --end 2022-12-31 --cost
    launchscope earth --lon -80.6 --lat 28.6 --date 2024-03-01

Each subcommand runs under one cancellation token: Ctrl-C, SIGTERM or the
command timeout stop further retries. A failed fetch prints the error and
ends only that subcommand.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

import argparse
import logging
import signal
import sys

from rich.console import Console
from rich.markup import escape

from .backend import CancellationToken, LaunchBriefing, LaunchDataService, LaunchOutcome, ResourceError
from .backend.models import AsteroidSummary, parse_day
from .config import ConfigError, Settings, get_settings

logger = logging.getLogger(__name__)

console = Console(highlight=False, soft_wrap=True)

OUTCOME_LABELS = {
    LaunchOutcome.UNKNOWN: "❓ Unknown",
    LaunchOutcome.SUCCEEDED: "✅ Success",
    LaunchOutcome.FAILED: "❌ Failed",
}


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="launchscope",
        description="Explore SpaceX launches alongside NASA Earth events and near-Earth asteroids.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    launches = sub.add_parser("launches", help="Explore space launch information")
    launches.add_argument("-l", "--limit", type=int, default=settings.default_limit,
                          help="Number of launches to show")
    launches.add_argument("-s", "--start", default="", help="Start date (YYYY-MM-DD)")
    launches.add_argument("-e", "--end", default="", help="End date (YYYY-MM-DD)")
    launches.add_argument("-f", "--failed", action="store_true", help="Filter for failed launches only")
    launches.add_argument("-u", "--upcoming", action="store_true", help="Filter for upcoming launches only")
    launches.add_argument("--ascending", action="store_true", help="Oldest launches first")
    launches.add_argument("-c", "--cost", action="store_true",
                          help="Get the total cost for all matching launches")
    launches.add_argument("-p", "--launchpad", action="store_true", help="Show launchpad information")
    launches.add_argument("-w", "--weather", action="store_true",
                          help="Show launchpad location weather warning information")
    launches.add_argument("-a", "--asteroids", action="store_true",
                          help="Show near Earth orbiting asteroid information")

    earth = sub.add_parser("earth", help="Natural events around a coordinate on a given day")
    earth.add_argument("--lon", type=float, required=True, help="Longitude in degrees")
    earth.add_argument("--lat", type=float, required=True, help="Latitude in degrees")
    earth.add_argument("--date", required=True, help="Day (YYYY-MM-DD)")
    return parser


@contextmanager
def cancel_on_signals(token: CancellationToken) -> Iterator[CancellationToken]:
    """Route SIGINT/SIGTERM to ``token`` while the block runs."""

    def _handler(signum: int, _frame: object) -> None:
        logger.info("Received signal %s, cancelling", signum)
        token.cancel()

    previous = {sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield token
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def run_launches(args: argparse.Namespace, service: LaunchDataService, cancel: CancellationToken) -> int:
    query = service.build_query(
        start=args.start,
        end=args.end,
        failed=args.failed,
        upcoming=args.upcoming,
        ascending=args.ascending,
        limit=args.limit,
    )
    try:
        launches = service.get_launches(query, cancel)
    except ResourceError as exc:
        console.print(f"Error fetching launches: {escape(str(exc))}")
        return 1

    console.print(f"\n🚀 Launches (showing {len(launches)}):")
    rockets = service.try_fetch("rockets", lambda: service.get_rockets(cancel))

    if args.cost:
        total = service.total_cost(launches, rockets or {})
        console.print(f"Total cost: ${total:,}")
        return 0

    crew = service.try_fetch("crew members", lambda: service.get_crew_members(cancel))
    launchpads = None
    if args.launchpad or args.weather:
        launchpads = service.try_fetch("launchpads", lambda: service.get_launchpads(cancel))

    briefings = service.build_briefings(
        launches,
        rockets=rockets,
        crew=crew,
        launchpads=launchpads,
        include_weather=args.weather,
        include_asteroids=args.asteroids,
        cancel=cancel,
    )
    console.print("-" * 80)
    for briefing in briefings:
        render_briefing(briefing, show_launchpad=args.launchpad, show_weather=args.weather,
                        show_asteroids=args.asteroids, launchpads_loaded=launchpads is not None)
    return 0


def run_earth(args: argparse.Namespace, service: LaunchDataService, cancel: CancellationToken) -> int:
    try:
        day = parse_day(args.date)
    except ValueError:
        console.print(f"Invalid date: {escape(args.date)} (expected YYYY-MM-DD)")
        return 2
    try:
        events = service.get_earth_events(args.lon, args.lat, day, cancel)
    except ResourceError as exc:
        console.print(f"Error fetching earth events: {escape(str(exc))}")
        return 1
    if not events:
        console.print("🌤️  No warning events found from NASA for this time & location")
    for event in events:
        categories = ", ".join(category.title for category in event.categories)
        console.print(f"🌤️  {escape(event.title)} ({escape(categories)})")
    return 0


def render_briefing(
    briefing: LaunchBriefing,
    *,
    show_launchpad: bool = False,
    show_weather: bool = False,
    show_asteroids: bool = False,
    launchpads_loaded: bool = True,
) -> None:
    item = briefing.correlated
    launch = item.launch
    when = launch.date.strftime("%Y-%m-%d %H:%M") if launch.date else "TBD"
    console.print(f"📅 {when}")
    console.print(f"   🏷️  {escape(launch.name)}")
    console.print(f"   {OUTCOME_LABELS[launch.outcome]}")
    console.print(f"   🚀 {escape(item.rocket_name)}")
    if launch.details:
        console.print(f"   ℹ️ {escape(launch.details)}")
    if launch.crew_ids and item.crew_names:
        console.print(f"   👥 Crew: {escape(', '.join(item.crew_names))}")

    if (show_launchpad or show_weather) and launchpads_loaded:
        if item.launchpad is None:
            console.print(f"   Launchpad not found for launch {escape(launch.launchpad_id)}")
        else:
            if show_launchpad:
                console.print(f"   📍 {escape(item.launchpad.name)}")
                console.print(f"      ({escape(item.launchpad.details)})")
            if show_weather and briefing.weather_events is not None:
                _render_weather(briefing)

    if show_asteroids and briefing.asteroids is not None:
        console.print(f"   🌍  {_describe_asteroids(briefing.asteroids)}")
    console.print()


def _render_weather(briefing: LaunchBriefing) -> None:
    if not briefing.weather_events:
        console.print("   🌤️  No warning events found from NASA for this time & location")
        return
    for event in briefing.weather_events:
        console.print(f"   🌤️  {escape(event.title)} ({escape(event.description)})")


def _describe_asteroids(summary: AsteroidSummary) -> str:
    return (
        f"total number of near earth asteroids {summary.element_count} "
        f"(hazardous: {summary.hazardous}, non-hazardous: {summary.non_hazardous}) "
        f"with diameters ranging from {summary.min_diameter_m:.1f} to {summary.max_diameter_m:.1f} meters"
    )


COMMANDS = {
    "launches": run_launches,
    "earth": run_earth,
}


def main(argv: Optional[Sequence[str]] = None, service: Optional[LaunchDataService] = None) -> int:
    try:
        settings = get_settings()
    except (ConfigError, ValueError) as exc:
        console.print(f"Error loading configuration: {escape(str(exc))}")
        return 2

    configure_logging(settings.debug)
    args = build_parser(settings).parse_args(argv)
    service = service or LaunchDataService(settings)

    cancel = CancellationToken.with_timeout(settings.command_timeout_s)
    with cancel_on_signals(cancel):
        try:
            return COMMANDS[args.command](args, service, cancel)
        except ValueError as exc:
            console.print(f"Invalid arguments: {escape(str(exc))}")
            return 2


if __name__ == "__main__":
    raise SystemExit(main())
