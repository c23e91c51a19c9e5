"""Debouncer behaviour on virtual and real clocks."""

from __future__ import annotations

import asyncio

import pytest

from repo_search.pipeline.clock import LoopClock
from repo_search.pipeline.debounce import Debouncer


@pytest.mark.asyncio
async def test_rapid_pushes_coalesce_to_last_value(clock):
    emitted: list[str] = []
    debouncer = Debouncer(clock, 0.5, emitted.append)

    debouncer.push("s")
    await clock.advance(0.2)
    debouncer.push("sw")
    await clock.advance(0.2)
    debouncer.push("swift")
    await clock.advance(0.45)
    assert emitted == []
    assert debouncer.pending

    await clock.advance(0.1)
    assert emitted == ["swift"]
    assert not debouncer.pending
    assert clock.pending == 0


@pytest.mark.asyncio
async def test_spaced_pushes_are_all_emitted_in_order(clock):
    emitted: list[str] = []
    debouncer = Debouncer(clock, 0.3, emitted.append)

    for value in ("a", "b", "c"):
        debouncer.push(value)
        await clock.advance(0.35)

    assert emitted == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_delay_is_per_instance(clock):
    fast: list[str] = []
    slow: list[str] = []
    fast_debouncer = Debouncer(clock, 0.1, fast.append)
    slow_debouncer = Debouncer(clock, 0.8, slow.append)

    fast_debouncer.push("x")
    slow_debouncer.push("x")
    await clock.advance(0.2)
    assert fast == ["x"]
    assert slow == []

    await clock.advance(0.7)
    assert slow == ["x"]


@pytest.mark.asyncio
async def test_cancel_discards_pending_value(clock):
    emitted: list[str] = []
    debouncer = Debouncer(clock, 0.5, emitted.append)

    debouncer.push("gone")
    assert debouncer.cancel() is True
    assert debouncer.cancel() is False
    await clock.advance(1.0)
    assert emitted == []


def test_flush_emits_immediately(clock):
    emitted: list[str] = []
    debouncer = Debouncer(clock, 0.5, emitted.append)

    assert debouncer.flush() is False
    debouncer.push("now")
    assert debouncer.flush() is True
    assert emitted == ["now"]
    assert not debouncer.pending
    assert clock.pending == 0


def test_negative_delay_is_rejected(clock):
    with pytest.raises(ValueError):
        Debouncer(clock, -0.1, print)


@pytest.mark.asyncio
async def test_loop_clock_debounces_in_real_time():
    emitted: list[int] = []
    debouncer = Debouncer(LoopClock(), 0.02, emitted.append)

    for value in range(5):
        debouncer.push(value)
    await asyncio.sleep(0.1)

    assert emitted == [4]
