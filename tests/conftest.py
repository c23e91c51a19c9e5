"""Shared fixtures: a virtual clock and a fetcher with scripted latency."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from repo_search.domain.models import RequestDescriptor, SearchResult
from repo_search.pipeline.clock import ManualClock

FIXTURE_BODY = (
    '{"total_count":2,"incomplete_results":false,"items":['
    '{"name":"foo","full_name":"org/foo"},{"name":"bar","full_name":"org/bar"}]}'
)


def make_result(*full_names: str) -> SearchResult:
    return SearchResult.model_validate(
        {
            "total_count": len(full_names),
            "incomplete_results": False,
            "items": [
                {"name": name.split("/")[-1], "full_name": name} for name in full_names
            ],
        }
    )


class ScriptedFetcher:
    """Answers each query after a per-query latency measured on the clock."""

    def __init__(self, clock: ManualClock) -> None:
        self.clock = clock
        self._script: dict[str, tuple[float, Any]] = {}
        self.calls: list[str] = []
        self.completed: list[str] = []
        self.cancelled: list[str] = []

    def script(
        self,
        query: str,
        *full_names: str,
        latency: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        outcome = error if error is not None else make_result(*full_names)
        self._script[query] = (latency, outcome)

    async def fetch(self, descriptor: RequestDescriptor) -> SearchResult:
        self.calls.append(descriptor.query)
        latency, outcome = self._script.get(descriptor.query, (0.0, make_result()))
        if latency > 0:
            try:
                await self.clock.sleep(latency)
            except asyncio.CancelledError:
                self.cancelled.append(descriptor.query)
                raise
        self.completed.append(descriptor.query)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def fetcher(clock: ManualClock) -> ScriptedFetcher:
    return ScriptedFetcher(clock)


@pytest.fixture
def fixture_body() -> str:
    return FIXTURE_BODY


@pytest.fixture
def result_factory():
    return make_result
