"""Tests for the retry delay calculation."""

from __future__ import annotations

import random

import pytest

from launchscope.backend.backoff import backoff_delay


class _FixedRandom(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def uniform(self, a: float, b: float) -> float:
        return self.value


class TestBackoffDelay:
    @pytest.mark.parametrize("base_delay", [0.1, 0.2, 1.0])
    @pytest.mark.parametrize("max_delay", [1.0, 5.0, 30.0])
    def test_stays_within_bounds(self, base_delay, max_delay):
        rng = random.Random(1234)
        for attempt in range(12):
            raw = base_delay * (attempt + 1)
            for _ in range(50):
                delay = backoff_delay(attempt, base_delay, max_delay, rng)
                assert 0.75 * min(raw, max_delay) <= delay <= max_delay

    def test_lower_jitter_edge(self):
        assert backoff_delay(1, 0.2, 5.0, _FixedRandom(-1.0)) == pytest.approx(0.3)

    def test_upper_jitter_edge(self):
        assert backoff_delay(1, 0.2, 5.0, _FixedRandom(1.0)) == pytest.approx(0.5)

    def test_no_jitter_is_linear(self):
        delays = [backoff_delay(attempt, 0.2, 5.0, _FixedRandom(0.0)) for attempt in range(4)]
        assert delays == pytest.approx([0.2, 0.4, 0.6, 0.8])

    def test_clamped_to_max_delay(self):
        assert backoff_delay(100, 0.2, 5.0, random.Random(7)) == 5.0

    def test_seeded_generator_is_reproducible(self):
        first = [backoff_delay(n, 0.2, 5.0, random.Random(42)) for n in range(5)]
        second = [backoff_delay(n, 0.2, 5.0, random.Random(42)) for n in range(5)]
        assert first == second

    def test_default_generator_used_when_none_given(self):
        delay = backoff_delay(0, 0.2, 5.0)
        assert 0.15 <= delay <= 0.25

    def test_negative_attempt_rejected(self):
        with pytest.raises(ValueError):
            backoff_delay(-1, 0.2, 5.0)
