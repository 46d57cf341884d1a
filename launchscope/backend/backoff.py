"""Retry delay calculation with bounded random jitter."""
from __future__ import annotations

from typing import Optional

import random

JITTER_FRACTION = 0.25

_default_rng = random.Random()


def backoff_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    rng: Optional[random.Random] = None,
) -> float:
    """Return the delay in seconds before retrying after ``attempt`` (zero-based).

    The delay grows linearly with the attempt number, is perturbed by a
    uniform jitter of +/-25% and is capped at ``max_delay``.
    """

    if attempt < 0:
        raise ValueError("attempt must be >= 0")
    source = rng or _default_rng
    raw = base_delay * (attempt + 1)
    jitter = raw * JITTER_FRACTION * source.uniform(-1.0, 1.0)
    return max(min(raw + jitter, max_delay), 0.0)
