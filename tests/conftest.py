from __future__ import annotations

from typing import List

import pytest

from namereview.stores import CostTracker, SuggestionCache


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> SuggestionCache:
    """Provide an isolated suggestion cache driven by the fake clock."""
    return SuggestionCache(clock=clock)


@pytest.fixture
def tracker() -> CostTracker:
    return CostTracker()


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps: List[float]):
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return _sleep
