"""Builders for the SpaceX ``/v4/launches/query`` request document."""
from __future__ import annotations

from typing import Any, Dict, Optional

from .models import parse_day

SORT_FIELD = "date_utc"


def build_launch_query(
    *,
    start: Optional[str] = None,
    end: Optional[str] = None,
    failed: bool = False,
    upcoming: bool = False,
    limit: int = 0,
    ascending: bool = False,
    upcoming_default: Optional[bool] = False,
) -> Dict[str, Any]:
    """Return ``{"query": {...}, "options": {"sort": ..., "limit": ...}}``.

    The date filter applies only when both ``start`` and ``end`` (YYYY-MM-DD)
    are given. When ``upcoming`` is not requested, ``upcoming_default`` is
    written into the filter, or the key is left out when it is ``None``.
    A non-positive ``limit`` leaves the upstream default in place.
    """

    selector: Dict[str, Any] = {}
    if start and end:
        parse_day(start)
        parse_day(end)
        selector[SORT_FIELD] = {
            "$gte": f"{start}T00:00:00.000Z",
            "$lte": f"{end}T23:59:59.999Z",
        }
    if failed:
        selector["success"] = False
    if upcoming:
        selector["upcoming"] = True
    elif upcoming_default is not None:
        selector["upcoming"] = upcoming_default

    options: Dict[str, Any] = {"sort": {SORT_FIELD: "asc" if ascending else "desc"}}
    if limit > 0:
        options["limit"] = limit
    return {"query": selector, "options": options}
