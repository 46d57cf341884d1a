"""SpaceX REST API v4 integration helpers."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

import logging

from .fetcher import CancellationToken, FetchError, FetchRequest, ResourceError, RetryingFetcher
from .models import Crew, Launch, Launchpad, Rocket


logger = logging.getLogger(__name__)

SPACEX_API_ROOT = "https://api.spacexdata.com"

R = TypeVar("R")


class SpaceXClient:
    """Typed accessors over the SpaceX launches, rockets, crew and launchpads collections."""

    def __init__(self, fetcher: Optional[RetryingFetcher] = None, api_root: str = SPACEX_API_ROOT) -> None:
        self.fetcher = fetcher or RetryingFetcher()
        self.api_root = api_root.rstrip("/")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def launches_by_query(
        self, query: Mapping[str, Any], cancel: Optional[CancellationToken] = None
    ) -> List[Launch]:
        """POST a query document and return the ``docs`` envelope as launches, in upstream order."""

        request = FetchRequest(
            url=f"{self.api_root}/v4/launches/query",
            method="POST",
            json_body=dict(query),
            decode=_decode_launch_docs,
        )
        launches = self._fetch("launches", request, cancel)
        logger.debug("Fetched %d launches", len(launches))
        return launches

    def all_rockets(self, cancel: Optional[CancellationToken] = None) -> Dict[str, Rocket]:
        return self._fetch_collection("rockets", "/v4/rockets", Rocket.from_payload, cancel)

    def all_crew(self, cancel: Optional[CancellationToken] = None) -> Dict[str, Crew]:
        return self._fetch_collection("crew members", "/v4/crew", Crew.from_payload, cancel)

    def all_launchpads(self, cancel: Optional[CancellationToken] = None) -> Dict[str, Launchpad]:
        return self._fetch_collection("launchpads", "/v4/launchpads", Launchpad.from_payload, cancel)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _fetch_collection(
        self,
        resource: str,
        path: str,
        build: Callable[[Mapping[str, Any]], R],
        cancel: Optional[CancellationToken],
    ) -> Dict[str, R]:
        request = FetchRequest(url=f"{self.api_root}{path}", decode=lambda payload: _decode_list(payload, build))
        records = self._fetch(resource, request, cancel)
        return {record.id: record for record in records}

    def _fetch(self, resource: str, request: FetchRequest[Any], cancel: Optional[CancellationToken]) -> Any:
        try:
            return self.fetcher.fetch(request, cancel)
        except FetchError as exc:
            raise ResourceError(resource, exc) from exc


def _decode_list(payload: Any, build: Callable[[Mapping[str, Any]], R]) -> List[R]:
    if not isinstance(payload, list):
        raise TypeError(f"expected a JSON array, got {type(payload).__name__}")
    return [build(item) for item in payload]


def _decode_launch_docs(payload: Any) -> List[Launch]:
    if not isinstance(payload, dict):
        raise TypeError(f"expected a query envelope, got {type(payload).__name__}")
    return _decode_list(payload["docs"], Launch.from_payload)
