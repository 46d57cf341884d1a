"""Scripted stand-ins for ``requests.Session`` and upstream payload samples."""

from __future__ import annotations

import io
import json
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlsplit

import requests


def make_response(
    status: int = 200,
    payload: Any = None,
    *,
    body: Optional[bytes] = None,
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    """Build a real, already-read ``requests.Response``."""
    if body is None:
        body = json.dumps(payload).encode("utf-8") if payload is not None else b""
    response = requests.Response()
    response.status_code = status
    response._content = body
    response._content_consumed = True
    response.raw = io.BytesIO(body)
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


class BrokenBodyResponse(requests.Response):
    """A 200 whose body stream breaks while being read."""

    def __init__(self) -> None:
        super().__init__()
        self.status_code = 200
        self._content_consumed = True
        self.raw = io.BytesIO(b"")

    @property
    def content(self):  # type: ignore[override]
        raise requests.exceptions.ChunkedEncodingError("connection broken")


Outcome = Union[requests.Response, Exception]


class ScriptedSession:
    """Returns (or raises) the scripted outcomes in order; the last one repeats."""

    def __init__(self, *outcomes: Outcome) -> None:
        self.outcomes: List[Outcome] = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RoutingSession:
    """Stub upstream: routes by URL path to a scripted outcome list."""

    def __init__(self, routes: Dict[str, Union[Outcome, List[Outcome]]]) -> None:
        self.routes = {
            path: list(value) if isinstance(value, list) else [value] for path, value in routes.items()
        }
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        path = urlsplit(url).path
        self.calls.append({"method": method, "url": url, "path": path, **kwargs})
        if path not in self.routes:
            return make_response(404, {"error": "not found"})
        outcomes = self.routes[path]
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def paths(self) -> List[str]:
        return [call["path"] for call in self.calls]


# ── Upstream payload samples ─────────────────────────────────────


def launch_doc(index: int, rocket: str = "falcon9", **overrides: Any) -> Dict[str, Any]:
    doc = {
        "id": f"launch-{index}",
        "flight_number": 100 + index,
        "name": f"Mission {index}",
        "date_utc": f"2024-03-0{index}T12:30:00.000Z",
        "success": True,
        "crew": [],
        "rocket": rocket,
        "launchpad": "ksc39a",
        "details": None,
    }
    doc.update(overrides)
    return doc


def rocket_doc(rocket_id: str, name: str, cost: int) -> Dict[str, Any]:
    return {
        "id": rocket_id,
        "name": name,
        "cost_per_launch": cost,
        "success_rate_pct": 98,
        "country": "United States",
        "company": "SpaceX",
        "height_w_trunk": {"meters": 70, "feet": 229.6},
        "diameter": {"meters": 3.7, "feet": 12},
        "mass": {"kg": 549054, "lb": 1207920},
        "first_flight": "2010-06-04",
        "description": "Two-stage rocket",
    }


LAUNCHPADS = [
    {
        "id": "ksc39a",
        "full_name": "Kennedy Space Center Historic Launch Complex 39A",
        "locality": "Cape Canaveral",
        "latitude": 28.6080585,
        "longitude": -80.6039558,
        "status": "active",
        "details": "NASA's historic pad",
    }
]

CREW = [
    {"id": "crew-1", "name": "Robert Behnken", "agency": "NASA", "status": "active"},
    {"id": "crew-2", "name": "Douglas Hurley", "agency": "NASA", "status": "active"},
]

EARTH_EVENTS = {
    "events": [
        {
            "id": "EONET_1",
            "title": "Tropical Storm Alpha",
            "description": "Storm near the coast",
            "categories": [{"id": "severeStorms", "title": "Severe Storms"}],
            "geometry": [{"type": "Point", "coordinates": [-80.1, 28.2], "date": "2024-03-01T00:00:00Z"}],
        }
    ]
}


def neo(asteroid_id: str, hazardous: bool, max_m: float) -> Dict[str, Any]:
    return {
        "id": asteroid_id,
        "name": f"({asteroid_id})",
        "is_potentially_hazardous_asteroid": hazardous,
        "estimated_diameter": {
            "meters": {"estimated_diameter_min": max_m / 2, "estimated_diameter_max": max_m},
            "feet": {"estimated_diameter_min": max_m * 1.64, "estimated_diameter_max": max_m * 3.28},
        },
    }


ASTEROID_FEED = {
    "element_count": 3,
    "near_earth_objects": {
        "2024-03-01": [neo("a1", False, 40.0), neo("a2", True, 350.0), neo("a3", False, 12.5)],
    },
}
