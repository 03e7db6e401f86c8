"""
Tests for in_document_order: concurrent loads, ordered consumption.
"""
import asyncio

import pytest

from utils.ordered_await import in_document_order


async def _collect(items, load, **kwargs):
    return [result async for result in in_document_order(items, load, **kwargs)]


class TestInDocumentOrder:

    def test_results_follow_input_order(self):
        # First item finishes last
        delays = {'a': 0.05, 'b': 0.0, 'c': 0.01}

        async def load(item):
            await asyncio.sleep(delays[item])
            return item.upper()

        results = asyncio.run(_collect(['a', 'b', 'c'], load))
        assert [r.item for r in results] == ['a', 'b', 'c']
        assert [r.value for r in results] == ['A', 'B', 'C']
        assert all(r.ok for r in results)

    def test_loads_start_before_first_result(self):
        started = []

        async def load(item):
            started.append(item)
            await asyncio.sleep(0.02 if item == 0 else 0)
            return item

        async def first_result():
            async for result in in_document_order(range(4), load):
                return result.item, list(started)

        item, seen = asyncio.run(first_result())
        assert item == 0
        assert seen == [0, 1, 2, 3]

    def test_errors_captured_in_place(self):
        async def load(item):
            if item == 'bad':
                raise ValueError("boom")
            return item

        results = asyncio.run(_collect(['x', 'bad', 'y'], load))
        assert [r.ok for r in results] == [True, False, True]
        assert isinstance(results[1].error, ValueError)
        assert results[2].value == 'y'

    def test_uncaught_error_propagates(self):
        async def load(item):
            raise KeyError(item)

        with pytest.raises(KeyError):
            asyncio.run(_collect(['x'], load, catch=(ValueError,)))

    def test_none_load_yields_none_value(self):
        async def load_number(item):
            return item * 2

        def load(item):
            return None if item == 'skip' else load_number(item)

        results = asyncio.run(_collect([1, 'skip', 3], load))
        assert [r.value for r in results] == [2, None, 6]
        assert all(r.ok for r in results)

    def test_closing_early_cancels_pending(self):
        cancelled = []

        async def load(item):
            if item == 0:
                return item
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(item)
                raise

        async def consume_one():
            results = in_document_order([0, 1, 2], load)
            first = await results.__anext__()
            await results.aclose()
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            return first

        first = asyncio.run(consume_one())
        assert first.value == 0
        assert sorted(cancelled) == [1, 2]
