"""Backend package for LaunchScope.

Exposes the retrying fetcher, the upstream clients and the pure join and
aggregation helpers built on their output.
"""
from __future__ import annotations

from .aggregator import total_cost
from .backoff import backoff_delay
from .correlator import (
    CorrelatedLaunch,
    asteroid_window,
    correlate,
    crew_names,
    resolve_launchpad,
    resolve_rocket,
    weather_window,
)
from .data_service import LaunchBriefing, LaunchDataService
from .fetcher import (
    CancellationToken,
    Cancelled,
    DecodeError,
    FetchError,
    FetchRequest,
    ResourceError,
    RetriesExhausted,
    RetryingFetcher,
    TransportError,
    UpstreamError,
)
from .models import (
    Asteroid,
    AsteroidFeed,
    Crew,
    EarthEvent,
    Launch,
    LaunchOutcome,
    Launchpad,
    Rocket,
)
from .nasa_client import NASAClient
from .queries import build_launch_query
from .spacex_client import SpaceXClient

__all__ = [
    "backoff_delay",
    "CancellationToken",
    "Cancelled",
    "DecodeError",
    "FetchError",
    "FetchRequest",
    "ResourceError",
    "RetriesExhausted",
    "RetryingFetcher",
    "TransportError",
    "UpstreamError",
    "Asteroid",
    "AsteroidFeed",
    "Crew",
    "EarthEvent",
    "Launch",
    "LaunchOutcome",
    "Launchpad",
    "Rocket",
    "SpaceXClient",
    "NASAClient",
    "build_launch_query",
    "CorrelatedLaunch",
    "asteroid_window",
    "correlate",
    "crew_names",
    "resolve_launchpad",
    "resolve_rocket",
    "weather_window",
    "total_cost",
    "LaunchDataService",
    "LaunchBriefing",
]
