"""Join launches against the rocket, crew and launchpad maps.

Everything here is pure: inputs are already-fetched collections, and a
reference that cannot be resolved degrades to ``None``/"Unknown"/0 instead of
raising.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Tuple

from .models import (
    BoundingBox,
    Crew,
    DateWindow,
    EventQueryWindow,
    Launch,
    Launchpad,
    Rocket,
)

UNKNOWN_PLACEHOLDER = "Unknown"
WEATHER_MARGIN_DEG = 1.0


@dataclass(frozen=True)
class CorrelatedLaunch:
    launch: Launch
    rocket: Optional[Rocket] = None
    crew_names: Tuple[str, ...] = field(default_factory=tuple)
    launchpad: Optional[Launchpad] = None

    @property
    def rocket_name(self) -> str:
        return self.rocket.name if self.rocket is not None else UNKNOWN_PLACEHOLDER

    @property
    def cost_per_launch(self) -> int:
        return self.rocket.cost_per_launch if self.rocket is not None else 0


def resolve_rocket(launch: Launch, rockets: Optional[Mapping[str, Rocket]]) -> Optional[Rocket]:
    if not rockets:
        return None
    return rockets.get(launch.rocket_id)


def resolve_launchpad(launch: Launch, launchpads: Optional[Mapping[str, Launchpad]]) -> Optional[Launchpad]:
    if not launchpads:
        return None
    return launchpads.get(launch.launchpad_id)


def crew_names(launch: Launch, crew: Optional[Mapping[str, Crew]]) -> List[str]:
    """Display names for the launch crew in manifest order; unknown ids are skipped."""

    if not crew:
        return []
    return [crew[crew_id].name for crew_id in launch.crew_ids if crew_id in crew]


def weather_window(launch: Launch, launchpad: Launchpad) -> Optional[EventQueryWindow]:
    """Bounding box of +/-1 degree around the pad, on the launch day. None for undated launches."""

    if launch.date is None:
        return None
    return EventQueryWindow(
        bbox=BoundingBox.around(launchpad.longitude, launchpad.latitude, WEATHER_MARGIN_DEG),
        dates=DateWindow.single_day(launch.date.date()),
    )


def asteroid_window(launch: Launch) -> Optional[DateWindow]:
    if launch.date is None:
        return None
    return DateWindow.single_day(launch.date.date())


def correlate(
    launches: Iterable[Launch],
    rockets: Optional[Mapping[str, Rocket]],
    crew: Optional[Mapping[str, Crew]] = None,
    launchpads: Optional[Mapping[str, Launchpad]] = None,
) -> List[CorrelatedLaunch]:
    """Resolve each launch's references, keeping the order the launches arrived in."""

    return [
        CorrelatedLaunch(
            launch=launch,
            rocket=resolve_rocket(launch, rockets),
            crew_names=tuple(crew_names(launch, crew)),
            launchpad=resolve_launchpad(launch, launchpads),
        )
        for launch in launches
    ]
