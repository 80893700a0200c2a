"""Tests for sequential async iteration helpers."""

import asyncio
import pytest

from dazzleutils.aio import for_each_async, map_async, reduce_async, find_async


class CallLog:
    """Async callback that records invocations and checks for overlap."""

    def __init__(self, fail_at=None, result=lambda value: value):
        self.calls = []
        self.active = 0
        self.max_active = 0
        self.fail_at = fail_at
        self.result = result

    async def __call__(self, value, index, sequence):
        self.calls.append(index)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            # Yield to the loop so overlapping calls would be observable
            await asyncio.sleep(0)
            if index == self.fail_at:
                raise ValueError(f"failed at {index}")
            return self.result(value)
        finally:
            self.active -= 1


class TestEmptySequences:
    """All helpers return their identity result without calling back."""

    @pytest.mark.asyncio
    async def test_empty_inputs(self):
        log = CallLog()

        assert await for_each_async([], log) is None
        assert await map_async([], log) == []
        assert await reduce_async([], log, 'initial') == 'initial'
        assert await find_async([], log) is None
        assert await find_async([], log, default='missing') == 'missing'

        assert log.calls == []


class TestForEachAsync:
    """Test for_each_async."""

    @pytest.mark.asyncio
    async def test_runs_in_order_one_at_a_time(self):
        log = CallLog()
        await for_each_async(['a', 'b', 'c'], log)
        assert log.calls == [0, 1, 2]
        assert log.max_active == 1

    @pytest.mark.asyncio
    async def test_error_short_circuits(self):
        log = CallLog(fail_at=1)
        with pytest.raises(ValueError, match="failed at 1"):
            await for_each_async([1, 2, 3, 4], log)
        assert log.calls == [0, 1]

    @pytest.mark.asyncio
    async def test_stop_on_false(self):
        log = CallLog(result=lambda value: value != 'stop')
        await for_each_async(['go', 'stop', 'never'], log, stop_on_false=True)
        assert log.calls == [0, 1]

    @pytest.mark.asyncio
    async def test_false_results_ignored_by_default(self):
        log = CallLog(result=lambda value: False)
        await for_each_async([1, 2, 3], log)
        assert log.calls == [0, 1, 2]


class TestMapAsync:
    """Test map_async."""

    @pytest.mark.asyncio
    async def test_identity_map(self):
        sequence = [3, 'x', None, {'k': 1}]
        log = CallLog()
        assert await map_async(sequence, log) == sequence
        assert log.max_active == 1

    @pytest.mark.asyncio
    async def test_results_at_original_index(self):
        async def slow_first(value, index, sequence):
            # Earlier elements take longer; order must still be kept
            await asyncio.sleep(0.01 * (len(sequence) - index))
            return value * 2

        assert await map_async([1, 2, 3], slow_first) == [2, 4, 6]

    @pytest.mark.asyncio
    async def test_error_abandons_rest(self):
        log = CallLog(fail_at=0)
        with pytest.raises(ValueError):
            await map_async(['a', 'b'], log)
        assert log.calls == [0]

    @pytest.mark.asyncio
    async def test_plain_callbacks_accepted(self):
        assert await map_async((1, 2), lambda value, index, sequence: value + index) == [1, 3]


class TestReduceAsync:
    """Test reduce_async."""

    @pytest.mark.asyncio
    async def test_threads_accumulator(self):
        seen = []

        async def add(accumulator, value, index, sequence):
            seen.append((accumulator, value, index))
            return accumulator + value

        assert await reduce_async([1, 2, 3], add, 10) == 16
        assert seen == [(10, 1, 0), (11, 2, 1), (13, 3, 2)]

    @pytest.mark.asyncio
    async def test_error_propagates(self):
        calls = []

        async def explode(accumulator, value, index, sequence):
            calls.append(index)
            if index == 1:
                raise RuntimeError("boom")
            return accumulator

        with pytest.raises(RuntimeError, match="boom"):
            await reduce_async([1, 2, 3], explode, 0)
        assert calls == [0, 1]


class TestFindAsync:
    """Test find_async."""

    @pytest.mark.asyncio
    async def test_stops_at_first_match(self):
        log = CallLog(result=lambda value: value > 1)
        assert await find_async([1, 2, 3], log) == 2
        assert log.calls == [0, 1]

    @pytest.mark.asyncio
    async def test_not_found(self):
        log = CallLog(result=lambda value: False)
        assert await find_async([1, 2], log) is None
        assert await find_async([1, 2], log, default=-1) == -1

    @pytest.mark.asyncio
    async def test_truthy_results_count_as_match(self):
        log = CallLog(result=lambda value: value)
        assert await find_async([0, '', 'hit', 'later'], log) == 'hit'

    @pytest.mark.asyncio
    async def test_error_propagates(self):
        log = CallLog(fail_at=0, result=lambda value: True)
        with pytest.raises(ValueError):
            await find_async(['a', 'b'], log)
        assert log.calls == [0]
