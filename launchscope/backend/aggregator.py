"""Concurrent cost roll-up over a launch result set."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Mapping, Sequence

import logging

from .models import Launch, Rocket


logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


def launch_cost(launch: Launch, rockets: Mapping[str, Rocket]) -> int:
    rocket = rockets.get(launch.rocket_id)
    return rocket.cost_per_launch if rocket is not None else 0


def total_cost(
    launches: Sequence[Launch],
    rockets: Mapping[str, Rocket],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> int:
    """Sum the per-launch rocket cost; launches whose rocket is unknown add 0.

    Lookups run on a pool capped at ``max_workers`` regardless of how many
    launches there are. The rocket map is only read, so it is shared as-is.
    """

    if not launches:
        return 0
    workers = max(1, min(max_workers, len(launches)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="launch-cost") as pool:
        futures = [pool.submit(launch_cost, launch, rockets) for launch in launches]
        costs = [future.result() for future in futures]
    total = sum(costs)
    logger.debug("Aggregated cost of %d launches on %d workers: %d", len(launches), workers, total)
    return total
