"""Shared fixtures for the LaunchScope test suite."""

from __future__ import annotations

from typing import List

import pytest

from launchscope.backend import RetryingFetcher


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fetcher_factory(sleeper):
    def build(session, max_retries: int = 3) -> RetryingFetcher:
        return RetryingFetcher(
            session,
            timeout=5,
            max_retries=max_retries,
            base_delay=0.2,
            max_delay=5.0,
            sleep=sleeper,
        )

    return build
