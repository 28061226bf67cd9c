"""Unit tests for the single-flight guard."""

import asyncio

import pytest

from evote_api.core.errors import ConflictError
from evote_api.core.single_flight import SingleFlight


class TestSingleFlight:
    """Tests for overlapping-invocation rejection."""

    async def test_sequential_holds_succeed(self) -> None:
        guard = SingleFlight()
        async with guard.hold("audit"):
            assert guard.is_running("audit")
        async with guard.hold("audit"):
            pass
        assert not guard.is_running("audit")

    async def test_overlapping_hold_rejected(self) -> None:
        guard = SingleFlight()
        entered = asyncio.Event()
        release = asyncio.Event()

        async def first() -> None:
            async with guard.hold("audit"):
                entered.set()
                await release.wait()

        task = asyncio.create_task(first())
        await entered.wait()
        with pytest.raises(ConflictError, match="already running"):
            async with guard.hold("audit"):
                pass
        release.set()
        await task

    async def test_distinct_names_do_not_conflict(self) -> None:
        guard = SingleFlight()
        async with guard.hold("a"), guard.hold("b"):
            assert guard.is_running("a")
            assert guard.is_running("b")

    async def test_released_after_error(self) -> None:
        guard = SingleFlight()
        with pytest.raises(RuntimeError):
            async with guard.hold("audit"):
                raise RuntimeError("boom")
        assert not guard.is_running("audit")
