"""NASA EONET and Near-Earth Object (NeoWs) API integration helpers."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import logging

from .fetcher import CancellationToken, FetchError, FetchRequest, ResourceError, RetryingFetcher
from .models import AsteroidFeed, DateWindow, EarthEvent, EventQueryWindow


logger = logging.getLogger(__name__)

EONET_API_ROOT = "https://eonet.gsfc.nasa.gov"
NASA_API_ROOT = "https://api.nasa.gov"
DAY_FORMAT = "%Y-%m-%d"


class NASAClient:
    """Earth natural events (EONET) and asteroid close-approach feed (NeoWs)."""

    def __init__(
        self,
        api_key: str,
        fetcher: Optional[RetryingFetcher] = None,
        *,
        eonet_root: str = EONET_API_ROOT,
        neo_root: str = NASA_API_ROOT,
    ) -> None:
        self.api_key = api_key or "DEMO_KEY"
        self.fetcher = fetcher or RetryingFetcher()
        self.eonet_root = eonet_root.rstrip("/")
        self.neo_root = neo_root.rstrip("/")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def earth_events(self, window: EventQueryWindow, cancel: Optional[CancellationToken] = None) -> List[EarthEvent]:
        """Return natural events inside the bounding box during the date window."""

        request = FetchRequest(
            url=f"{self.eonet_root}/api/v3/events",
            params={
                "bbox": window.bbox.as_param(),
                "start": window.dates.start.strftime(DAY_FORMAT),
                "end": window.dates.end.strftime(DAY_FORMAT),
            },
            decode=_decode_events,
        )
        return self._fetch("Earth events", request, cancel)

    def asteroid_feed(self, window: DateWindow, cancel: Optional[CancellationToken] = None) -> AsteroidFeed:
        """Return the NeoWs close-approach feed, keyed by date as upstream provides it."""

        request = FetchRequest(
            url=f"{self.neo_root}/neo/rest/v1/feed",
            params=self._neo_params(window),
            decode=AsteroidFeed.from_payload,
        )
        return self._fetch("asteroid data", request, cancel)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _neo_params(self, window: DateWindow) -> Dict[str, object]:
        return {
            "start_date": window.start.strftime(DAY_FORMAT),
            "end_date": window.end.strftime(DAY_FORMAT),
            "api_key": self.api_key,
        }

    def _fetch(self, resource: str, request: FetchRequest[Any], cancel: Optional[CancellationToken]) -> Any:
        try:
            return self.fetcher.fetch(request, cancel)
        except FetchError as exc:
            raise ResourceError(resource, exc) from exc


def _decode_events(payload: Any) -> List[EarthEvent]:
    if not isinstance(payload, dict):
        raise TypeError(f"expected an events envelope, got {type(payload).__name__}")
    events = payload["events"]
    if not isinstance(events, list):
        raise TypeError("events envelope does not hold a list")
    return [EarthEvent.from_payload(item) for item in events]
