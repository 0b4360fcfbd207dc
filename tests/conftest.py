"""Pytest configuration and fixtures."""

import asyncio
import os
from typing import Dict, Optional

# Keep test runs from writing log files; must happen before Config is imported
os.environ.setdefault('LOG_DIR', '')

import pytest
import pytest_asyncio

from companion.data_models.home import Friend, Profile, RawMatch
from companion.services.home_state import HomeStateCoordinator
from companion.utils.result import Success


class Scripted:
    """Async callable returning queued outcomes in call order.

    The last outcome repeats once the queue is exhausted. Exceptions are raised.
    A call can be held until the test releases it with ``hold(index).set()``.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0
        self.gates: Dict[int, asyncio.Event] = {}

    def hold(self, call_index: int) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[call_index] = gate
        return gate

    async def __call__(self, *args):
        index = self.calls
        self.calls += 1
        gate = self.gates.get(index)
        if gate is not None:
            await gate.wait()
        outcome = self.outcomes[min(index, len(self.outcomes) - 1)]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeProfileProvider:
    def __init__(self, *outcomes):
        self.fetch = Scripted(*(outcomes or (Success(Profile("Ana", None, 200)),)))


class FakeFriendProvider:
    def __init__(self, *outcomes):
        self.fetch = Scripted(*(outcomes or (Success([]),)))


class FakeMatchProvider:
    """Match history fake with per-id role outcomes and optional per-id delays."""

    def __init__(self, *outcomes, roles: Optional[dict] = None, delays: Optional[dict] = None):
        self.fetch_all = Scripted(*(outcomes or (Success([]),)))
        self.roles = roles or {}
        self.delays = delays or {}
        self.enrich_calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def enrich(self, match_id: int):
        self.enrich_calls.append(match_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(match_id, 0))
            outcome = self.roles.get(match_id, Success(False))
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1


class FakeSessionProvider:
    def __init__(self, error: Optional[BaseException] = None):
        self.error = error
        self.calls = 0

    async def end_session(self):
        self.calls += 1
        if self.error is not None:
            raise self.error


def make_friends(count: int):
    return [Friend(player_id=i, nickname=f"friend{i}") for i in range(1, count + 1)]


def make_raw_matches(*ids: int, role: str = "?"):
    return [RawMatch(id=i, date="01/01/2024", duration="05:00", role=role) for i in ids]


async def until(predicate, timeout: float = 1.0):
    """Yield to the event loop until predicate() holds."""
    async def poll():
        while not predicate():
            await asyncio.sleep(0.001)
    await asyncio.wait_for(poll(), timeout)


@pytest.fixture
def providers():
    """Default set of fake providers that all succeed with empty data."""
    return {
        'profile_provider': FakeProfileProvider(),
        'friend_provider': FakeFriendProvider(),
        'match_provider': FakeMatchProvider(),
        'session_provider': FakeSessionProvider(),
    }


@pytest_asyncio.fixture
async def make_coordinator(providers):
    """Factory building a coordinator over the fake providers; closes them all on teardown."""
    created = []

    def factory(**overrides) -> HomeStateCoordinator:
        kwargs = dict(providers)
        kwargs.setdefault('enrichment_concurrency', 1)
        kwargs.update(overrides)
        coordinator = HomeStateCoordinator(**kwargs)
        created.append(coordinator)
        return coordinator

    yield factory

    for coordinator in created:
        await coordinator.close()
