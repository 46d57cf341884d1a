"""Tests for the command line interface."""

from __future__ import annotations

import signal

import pytest

from tests.helpers import (
    ASTEROID_FEED,
    CREW,
    EARTH_EVENTS,
    LAUNCHPADS,
    RoutingSession,
    launch_doc,
    make_response,
    rocket_doc,
)
from launchscope import cli
from launchscope.backend import CancellationToken, LaunchDataService, NASAClient, RetryingFetcher, SpaceXClient
from launchscope.config import Settings


@pytest.fixture
def routes():
    return {
        "/v4/launches/query": make_response(200, {"docs": [
            launch_doc(1, crew=["crew-1", "crew-2"], details="Crew rotation"),
            launch_doc(2, rocket="mystery", success=None),
        ]}),
        "/v4/rockets": make_response(200, [rocket_doc("falcon9", "Falcon 9", 50000000)]),
        "/v4/crew": make_response(200, CREW),
        "/v4/launchpads": make_response(200, LAUNCHPADS),
        "/api/v3/events": make_response(200, EARTH_EVENTS),
        "/neo/rest/v1/feed": make_response(200, ASTEROID_FEED),
    }


def _run(routes, *argv):
    session = RoutingSession(routes)
    fetcher = RetryingFetcher(session, max_retries=1, sleep=lambda seconds: None)
    service = LaunchDataService(
        Settings(nasa_api_key="test-key"),
        spacex_client=SpaceXClient(fetcher),
        nasa_client=NASAClient("test-key", fetcher),
    )
    return cli.main(list(argv), service=service), session


class TestLaunchesCommand:
    def test_renders_launches(self, routes, capsys):
        code, session = _run(routes, "launches", "--limit", "2")
        out = capsys.readouterr().out

        assert code == 0
        assert "Launches (showing 2)" in out
        assert "Mission 1" in out
        assert "Falcon 9" in out
        assert "Unknown" in out
        assert "Crew: Robert Behnken, Douglas Hurley" in out
        assert "Crew rotation" in out
        assert session.calls[0]["json"]["options"]["limit"] == 2

    def test_cost_only(self, routes, capsys):
        code, session = _run(routes, "launches", "--cost")
        out = capsys.readouterr().out

        assert code == 0
        assert "Total cost: $50,000,000" in out
        assert "/v4/crew" not in session.paths()

    def test_launchpad_weather_and_asteroids(self, routes, capsys):
        code, _ = _run(routes, "launches", "-p", "-w", "-a")
        out = capsys.readouterr().out

        assert code == 0
        assert "Kennedy Space Center" in out
        assert "Tropical Storm Alpha" in out
        assert "hazardous: 1, non-hazardous: 2" in out

    def test_upcoming_flag_builds_query(self, routes):
        _, session = _run(routes, "launches", "--upcoming", "--ascending", "-l", "5")
        body = session.calls[0]["json"]
        assert body["query"] == {"upcoming": True}
        assert body["options"] == {"sort": {"date_utc": "asc"}, "limit": 5}

    def test_launch_failure_reported_not_raised(self, routes, capsys):
        routes["/v4/launches/query"] = make_response(400, {"error": "bad query"})
        code, _ = _run(routes, "launches")

        assert code == 1
        assert "Error fetching launches" in capsys.readouterr().out

    def test_launchpad_failure_keeps_launch_output(self, routes, capsys):
        routes["/v4/launchpads"] = make_response(503, body=b"down")
        code, _ = _run(routes, "launches", "--launchpad")
        out = capsys.readouterr().out

        assert code == 0
        assert "Mission 2" in out
        assert "Kennedy" not in out

    def test_bad_date_reported(self, routes, capsys):
        code, _ = _run(routes, "launches", "--start", "2024-01-01", "--end", "01/31/2024")
        assert code == 2
        assert "Invalid arguments" in capsys.readouterr().out


class TestEarthCommand:
    def test_lists_events(self, routes, capsys):
        code, session = _run(routes, "earth", "--lon", "-80.6", "--lat", "28.6", "--date", "2024-03-01")
        out = capsys.readouterr().out

        assert code == 0
        assert "Tropical Storm Alpha (Severe Storms)" in out
        assert session.calls[0]["params"]["end"] == "2024-03-01"

    def test_no_events(self, routes, capsys):
        routes["/api/v3/events"] = make_response(200, {"events": []})
        code, _ = _run(routes, "earth", "--lon", "0", "--lat", "0", "--date", "2024-03-01")
        assert code == 0
        assert "No warning events" in capsys.readouterr().out


class TestSignals:
    def test_signal_handler_cancels_token(self):
        token = CancellationToken()
        with cli.cancel_on_signals(token):
            signal.raise_signal(signal.SIGTERM)
        assert token.cancelled
