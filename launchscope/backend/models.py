"""Typed records decoded from SpaceX v4, NASA EONET and NASA NeoWs payloads.

Every record is immutable once built. ``from_payload`` constructors raise
``KeyError``/``TypeError``/``ValueError`` when a payload does not have the
expected shape, which the fetcher treats as a decode failure.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class LaunchOutcome(Enum):
    """Verdict of a launch; UNKNOWN covers upcoming launches and missing data."""

    UNKNOWN = "unknown"
    SUCCEEDED = "success"
    FAILED = "failed"

    @classmethod
    def from_flag(cls, value: Optional[bool]) -> "LaunchOutcome":
        if value is None:
            return cls.UNKNOWN
        return cls.SUCCEEDED if value else cls.FAILED


@dataclass(frozen=True)
class Length:
    meters: float = 0.0
    feet: float = 0.0

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "Length":
        payload = _mapping(payload)
        return cls(meters=_float(payload.get("meters")), feet=_float(payload.get("feet")))


@dataclass(frozen=True)
class Mass:
    kg: float = 0.0
    lb: float = 0.0

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "Mass":
        payload = _mapping(payload)
        return cls(kg=_float(payload.get("kg")), lb=_float(payload.get("lb")))


@dataclass(frozen=True)
class Launch:
    id: str
    name: str
    date: Optional[datetime]
    outcome: LaunchOutcome = LaunchOutcome.UNKNOWN
    crew_ids: Tuple[str, ...] = ()
    rocket_id: str = ""
    launchpad_id: str = ""
    details: str = ""
    flight_number: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Launch":
        payload = _mapping(payload, required=True)
        return cls(
            id=str(payload["id"]),
            name=payload.get("name") or "",
            date=parse_timestamp(payload.get("date_utc")),
            outcome=LaunchOutcome.from_flag(payload.get("success")),
            crew_ids=tuple(_crew_id(entry) for entry in _sequence(payload.get("crew"))),
            rocket_id=payload.get("rocket") or "",
            launchpad_id=payload.get("launchpad") or "",
            details=payload.get("details") or "",
            flight_number=int(payload.get("flight_number") or 0),
        )


@dataclass(frozen=True)
class Rocket:
    id: str
    name: str
    cost_per_launch: int = 0
    success_rate_pct: int = 0
    country: str = ""
    company: str = ""
    height: Length = field(default_factory=Length)
    diameter: Length = field(default_factory=Length)
    mass: Mass = field(default_factory=Mass)
    first_flight: str = ""
    description: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Rocket":
        payload = _mapping(payload, required=True)
        return cls(
            id=str(payload["id"]),
            name=payload.get("name") or "",
            cost_per_launch=int(payload.get("cost_per_launch") or 0),
            success_rate_pct=int(payload.get("success_rate_pct") or 0),
            country=payload.get("country") or "",
            company=payload.get("company") or "",
            height=Length.from_payload(payload.get("height_w_trunk")),
            diameter=Length.from_payload(payload.get("diameter")),
            mass=Mass.from_payload(payload.get("mass")),
            first_flight=payload.get("first_flight") or "",
            description=payload.get("description") or "",
        )


@dataclass(frozen=True)
class Crew:
    id: str
    name: str
    agency: str = ""
    image: str = ""
    status: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Crew":
        payload = _mapping(payload, required=True)
        return cls(
            id=str(payload["id"]),
            name=payload.get("name") or "",
            agency=payload.get("agency") or "",
            image=payload.get("image") or "",
            status=payload.get("status") or "",
        )


@dataclass(frozen=True)
class Launchpad:
    id: str
    name: str
    locality: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    status: str = ""
    details: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Launchpad":
        payload = _mapping(payload, required=True)
        return cls(
            id=str(payload["id"]),
            name=payload.get("full_name") or payload.get("name") or "",
            locality=payload.get("locality") or "",
            latitude=_float(payload.get("latitude")),
            longitude=_float(payload.get("longitude")),
            status=payload.get("status") or "",
            details=payload.get("details") or "",
        )


# ---------------------------------------------------------------------------
# NASA EONET
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class EventCategory:
    id: str
    title: str


@dataclass(frozen=True)
class EventGeometry:
    type: str
    coordinates: Tuple[Any, ...]
    date: str


@dataclass(frozen=True)
class EarthEvent:
    id: str
    title: str
    description: str = ""
    categories: Tuple[EventCategory, ...] = ()
    geometry: Tuple[EventGeometry, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "EarthEvent":
        payload = _mapping(payload, required=True)
        categories = tuple(
            EventCategory(id=str(item.get("id", "")), title=item.get("title") or "")
            for item in map(_mapping, _sequence(payload.get("categories")))
        )
        geometry = tuple(
            EventGeometry(
                type=item.get("type") or "",
                coordinates=tuple(_sequence(item.get("coordinates"))),
                date=item.get("date") or "",
            )
            for item in map(_mapping, _sequence(payload.get("geometry")))
        )
        return cls(
            id=str(payload["id"]),
            title=payload.get("title") or "",
            description=payload.get("description") or "",
            categories=categories,
            geometry=geometry,
        )


# ---------------------------------------------------------------------------
# NASA NeoWs
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class EstimatedDiameter:
    minimum: float = 0.0
    maximum: float = 0.0

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "EstimatedDiameter":
        payload = _mapping(payload)
        return cls(
            minimum=_float(payload.get("estimated_diameter_min")),
            maximum=_float(payload.get("estimated_diameter_max")),
        )


@dataclass(frozen=True)
class Asteroid:
    id: str
    name: str
    hazardous: bool = False
    diameter_m: EstimatedDiameter = field(default_factory=EstimatedDiameter)
    diameter_ft: EstimatedDiameter = field(default_factory=EstimatedDiameter)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Asteroid":
        payload = _mapping(payload, required=True)
        estimated = _mapping(payload.get("estimated_diameter"))
        return cls(
            id=str(payload["id"]),
            name=payload.get("name") or "",
            hazardous=bool(payload.get("is_potentially_hazardous_asteroid", False)),
            diameter_m=EstimatedDiameter.from_payload(estimated.get("meters")),
            diameter_ft=EstimatedDiameter.from_payload(estimated.get("feet")),
        )


@dataclass(frozen=True)
class AsteroidSummary:
    element_count: int
    hazardous: int
    non_hazardous: int
    min_diameter_m: float
    max_diameter_m: float


@dataclass(frozen=True)
class AsteroidFeed:
    element_count: int
    near_earth_objects: Mapping[str, Tuple[Asteroid, ...]]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AsteroidFeed":
        payload = _mapping(payload, required=True)
        objects = _mapping(payload.get("near_earth_objects"))
        return cls(
            element_count=int(payload.get("element_count") or 0),
            near_earth_objects={
                str(day): tuple(Asteroid.from_payload(item) for item in _sequence(entries))
                for day, entries in objects.items()
            },
        )

    def asteroids(self) -> List[Asteroid]:
        return [asteroid for day in sorted(self.near_earth_objects) for asteroid in self.near_earth_objects[day]]

    def summary(self) -> AsteroidSummary:
        """Hazard counts and the diameter range (upper estimate, meters) across the feed."""

        asteroids = self.asteroids()
        hazardous = sum(1 for asteroid in asteroids if asteroid.hazardous)
        diameters = [asteroid.diameter_m.maximum for asteroid in asteroids]
        return AsteroidSummary(
            element_count=self.element_count,
            hazardous=hazardous,
            non_hazardous=len(asteroids) - hazardous,
            min_diameter_m=min(diameters, default=0.0),
            max_diameter_m=max(diameters, default=0.0),
        )


# ---------------------------------------------------------------------------
# Query windows for the NASA lookups
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class DateWindow:
    start: date
    end: date

    @classmethod
    def single_day(cls, day: date) -> "DateWindow":
        return cls(start=day, end=day)


@dataclass(frozen=True)
class BoundingBox:
    west: float
    south: float
    east: float
    north: float

    @classmethod
    def around(cls, longitude: float, latitude: float, margin_deg: float = 1.0) -> "BoundingBox":
        return cls(
            west=longitude - margin_deg,
            south=latitude - margin_deg,
            east=longitude + margin_deg,
            north=latitude + margin_deg,
        )

    def as_param(self) -> str:
        return f"{self.west:f},{self.south:f},{self.east:f},{self.north:f}"


@dataclass(frozen=True)
class EventQueryWindow:
    bbox: BoundingBox
    dates: DateWindow


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------
def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 UTC timestamp such as ``2022-12-05T00:00:00.000Z``."""

    if not value:
        return None
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_day(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` day string."""

    return datetime.strptime(value, "%Y-%m-%d").date()


def _mapping(value: Any, *, required: bool = False) -> Dict[str, Any]:
    if value is None and not required:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"expected a JSON object, got {type(value).__name__}")
    return dict(value)


def _sequence(value: Any) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"expected a JSON array, got {type(value).__name__}")
    return value


def _crew_id(entry: Any) -> str:
    # Newer launch documents list crew as {"crew": <id>, "role": ...}.
    if isinstance(entry, Mapping):
        return str(entry.get("crew") or "")
    return str(entry)


def _float(value: Any) -> float:
    try:
        if value is None:
            return 0.0
        return float(value)
    except (TypeError, ValueError):
        return 0.0
