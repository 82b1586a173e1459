"""Tests for concurrency helpers."""

import asyncio

import pytest


class TestGatherOrCancel:
    """Test gather_or_cancel."""

    @pytest.mark.asyncio
    async def test_returns_results_in_order(self):
        """Results should follow the order of the awaitables."""
        from resume_builder.utils.concurrency import gather_or_cancel

        async def value(v: int, delay: float) -> int:
            await asyncio.sleep(delay)
            return v

        results = await gather_or_cancel([value(1, 0.02), value(2, 0.0), value(3, 0.01)])

        assert results == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_empty_input_returns_empty_list(self):
        """No awaitables should give an empty list."""
        from resume_builder.utils.concurrency import gather_or_cancel

        assert await gather_or_cancel([]) == []

    @pytest.mark.asyncio
    async def test_failure_cancels_siblings(self):
        """A failing awaitable should cancel the others and re-raise."""
        from resume_builder.utils.concurrency import gather_or_cancel

        cancelled = asyncio.Event()

        async def slow() -> int:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return 1

        async def fail() -> int:
            await asyncio.sleep(0)
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await gather_or_cancel([slow(), fail()])

        assert cancelled.is_set()
