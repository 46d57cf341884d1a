"""High-level data service combining the SpaceX and NASA clients."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

import logging

import requests

from .aggregator import DEFAULT_MAX_WORKERS, total_cost
from .correlator import CorrelatedLaunch, asteroid_window, correlate, weather_window
from .fetcher import CancellationToken, ResourceError, RetryingFetcher
from .models import (
    AsteroidFeed,
    AsteroidSummary,
    BoundingBox,
    Crew,
    DateWindow,
    EarthEvent,
    EventQueryWindow,
    Launch,
    Launchpad,
    Rocket,
)
from .nasa_client import NASAClient
from .queries import build_launch_query
from .spacex_client import SpaceXClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LaunchBriefing:
    """One launch with whatever auxiliary context could be fetched for it."""

    correlated: CorrelatedLaunch
    weather_events: Optional[List[EarthEvent]] = None
    asteroids: Optional[AsteroidSummary] = None


class LaunchDataService:
    """Coordinates SpaceX launch data with NASA environment lookups."""

    def __init__(
        self,
        settings: Any = None,
        *,
        session: Optional[requests.Session] = None,
        spacex_client: Optional[SpaceXClient] = None,
        nasa_client: Optional[NASAClient] = None,
    ) -> None:
        self.settings = settings
        fetcher = None
        if spacex_client is None or nasa_client is None:
            fetcher = RetryingFetcher.from_settings(settings, session) if settings else RetryingFetcher(session)
        if spacex_client is None:
            root = getattr(settings, "spacex_api_root", None)
            spacex_client = SpaceXClient(fetcher, root) if root else SpaceXClient(fetcher)
        if nasa_client is None:
            nasa_client = NASAClient(
                getattr(settings, "nasa_api_key", "DEMO_KEY"),
                fetcher,
                eonet_root=getattr(settings, "eonet_api_root", "https://eonet.gsfc.nasa.gov"),
                neo_root=getattr(settings, "neo_api_root", "https://api.nasa.gov"),
            )
        self.spacex_client = spacex_client
        self.nasa_client = nasa_client
        self.cost_workers = getattr(settings, "cost_workers", DEFAULT_MAX_WORKERS)

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------
    def build_query(self, **filters: Any) -> Dict[str, Any]:
        filters.setdefault("upcoming_default", getattr(self.settings, "upcoming_default", False))
        return build_launch_query(**filters)

    def get_launches(self, query: Mapping[str, Any], cancel: Optional[CancellationToken] = None) -> List[Launch]:
        return self.spacex_client.launches_by_query(query, cancel)

    def get_rockets(self, cancel: Optional[CancellationToken] = None) -> Dict[str, Rocket]:
        return self.spacex_client.all_rockets(cancel)

    def get_crew_members(self, cancel: Optional[CancellationToken] = None) -> Dict[str, Crew]:
        return self.spacex_client.all_crew(cancel)

    def get_launchpads(self, cancel: Optional[CancellationToken] = None) -> Dict[str, Launchpad]:
        return self.spacex_client.all_launchpads(cancel)

    def total_cost(self, launches: Sequence[Launch], rockets: Mapping[str, Rocket]) -> int:
        return total_cost(launches, rockets, max_workers=self.cost_workers)

    def get_earth_events(
        self,
        longitude: float,
        latitude: float,
        day: date,
        cancel: Optional[CancellationToken] = None,
    ) -> List[EarthEvent]:
        window = EventQueryWindow(bbox=BoundingBox.around(longitude, latitude), dates=DateWindow.single_day(day))
        return self.nasa_client.earth_events(window, cancel)

    def get_asteroids(self, day: date, cancel: Optional[CancellationToken] = None) -> AsteroidFeed:
        return self.nasa_client.asteroid_feed(DateWindow.single_day(day), cancel)

    def try_fetch(self, label: str, fetch: Callable[[], T]) -> Optional[T]:
        """Run an auxiliary fetch; log and return None when the resource is unavailable."""

        try:
            return fetch()
        except ResourceError as exc:
            logger.warning("Failed to fetch %s: %s", label, exc)
            return None

    def build_briefings(
        self,
        launches: Iterable[Launch],
        *,
        rockets: Optional[Mapping[str, Rocket]] = None,
        crew: Optional[Mapping[str, Crew]] = None,
        launchpads: Optional[Mapping[str, Launchpad]] = None,
        include_weather: bool = False,
        include_asteroids: bool = False,
        cancel: Optional[CancellationToken] = None,
    ) -> List[LaunchBriefing]:
        """Correlate launches and attach weather/asteroid context where available.

        Each optional lookup degrades independently: a failed weather fetch for
        one launch leaves ``weather_events`` as ``None`` for that launch only.
        Lookups for the same window are issued once per call.
        """

        weather_seen: Dict[EventQueryWindow, Optional[List[EarthEvent]]] = {}
        asteroid_seen: Dict[DateWindow, Optional[AsteroidSummary]] = {}
        briefings: List[LaunchBriefing] = []
        for item in correlate(launches, rockets, crew, launchpads):
            events = None
            if include_weather and item.launchpad is not None:
                window = weather_window(item.launch, item.launchpad)
                if window is not None:
                    if window not in weather_seen:
                        weather_seen[window] = self.try_fetch(
                            "weather events", lambda: self.nasa_client.earth_events(window, cancel)
                        )
                    events = weather_seen[window]

            summary = None
            if include_asteroids:
                dates = asteroid_window(item.launch)
                if dates is not None:
                    if dates not in asteroid_seen:
                        feed = self.try_fetch("asteroids", lambda: self.nasa_client.asteroid_feed(dates, cancel))
                        asteroid_seen[dates] = feed.summary() if feed is not None else None
                    summary = asteroid_seen[dates]

            briefings.append(LaunchBriefing(correlated=item, weather_events=events, asteroids=summary))
        return briefings

    def get_health_snapshot(self, cancel: Optional[CancellationToken] = None) -> Dict[str, object]:
        """Summarise the health of both upstream integrations."""

        services: Dict[str, Dict[str, object]] = {}
        today = datetime.now(timezone.utc).date()

        checks = (
            ("spacex_api", lambda: self.spacex_client.all_launchpads(cancel)),
            ("nasa_neo_api", lambda: self.nasa_client.asteroid_feed(DateWindow.single_day(today), cancel)),
        )
        for name, check in checks:
            try:
                check()
                services[name] = {"status": "ok"}
            except ResourceError as exc:
                services[name] = {
                    "status": "degraded",
                    "detail": str(exc),
                }

        return {
            "status": _aggregate_overall_status(services.values()),
            "services": services,
        }


def _aggregate_overall_status(service_snapshots: Iterable[Dict[str, object]]) -> str:
    seen_statuses = {snapshot.get("status", "unknown") for snapshot in service_snapshots}
    if "degraded" in seen_statuses:
        return "degraded"
    if seen_statuses == {"ok"}:
        return "ok"
    return "unknown"
