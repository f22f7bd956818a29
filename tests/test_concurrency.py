from __future__ import annotations

import asyncio

import pytest

from app.services.offer_copy.concurrency import Err, FailurePolicy, Ok, map_with_concurrency


class Tracker:
    def __init__(self) -> None:
        self.active = 0
        self.max_active = 0
        self.started: list[int] = []
        self.finished: list[int] = []

    async def run(self, delay: float, index: int) -> None:
        self.started.append(index)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(delay)
        finally:
            self.active -= 1
            self.finished.append(index)


@pytest.mark.asyncio
async def test_results_follow_input_order_despite_jitter() -> None:
    tracker = Tracker()
    items = list(range(8))

    async def fn(item: int, index: int):
        # later items finish first
        await tracker.run(0.002 * (len(items) - index), index)
        return Ok(item * 10)

    outcomes = await map_with_concurrency(items, 4, fn)

    assert [outcome.value for outcome in outcomes] == [item * 10 for item in items]
    assert tracker.finished != sorted(tracker.finished)


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrency,count", [(1, 5), (3, 10), (10, 4), (10, 25), (50, 50)])
async def test_in_flight_never_exceeds_cap(concurrency: int, count: int) -> None:
    tracker = Tracker()

    async def fn(item: int, index: int):
        await tracker.run(0.001 * (index % 3 + 1), index)
        return Ok(item)

    outcomes = await map_with_concurrency(list(range(count)), concurrency, fn)

    assert len(outcomes) == count
    assert tracker.max_active == min(concurrency, count)
    assert sorted(tracker.started) == list(range(count))


@pytest.mark.asyncio
async def test_empty_input_runs_nothing() -> None:
    called = []

    async def fn(item, index):
        called.append(index)
        return Ok(item)

    assert await map_with_concurrency([], 3, fn) == []
    assert called == []


@pytest.mark.asyncio
async def test_concurrency_below_one_is_rejected() -> None:
    async def fn(item, index):
        return Ok(item)

    with pytest.raises(ValueError):
        await map_with_concurrency([1, 2], 0, fn)


@pytest.mark.asyncio
async def test_fail_fast_raises_first_error_without_cancelling_siblings() -> None:
    sibling_done = asyncio.Event()
    boom = RuntimeError("item 1 failed")

    async def fn(item: int, index: int):
        if index == 1:
            return Err(boom)
        await asyncio.sleep(0.05)
        if index == 0:
            sibling_done.set()
        return Ok(item)

    with pytest.raises(RuntimeError) as exc_info:
        await map_with_concurrency([0, 1, 2], 3, fn)

    assert exc_info.value is boom
    assert not sibling_done.is_set()

    await asyncio.wait_for(sibling_done.wait(), timeout=1.0)


@pytest.mark.asyncio
async def test_fail_fast_stops_claiming_new_items() -> None:
    claimed = []

    async def fn(item: int, index: int):
        claimed.append(index)
        if index == 1:
            return Err(ValueError("bad item"))
        return Ok(item)

    with pytest.raises(ValueError):
        await map_with_concurrency(list(range(5)), 1, fn)

    assert claimed == [0, 1]


@pytest.mark.asyncio
async def test_collect_all_returns_every_outcome_in_order() -> None:
    async def fn(item: int, index: int):
        await asyncio.sleep(0.001 * (5 - index))
        if item % 2:
            return Err(ValueError(f"odd {item}"))
        return Ok(item)

    outcomes = await map_with_concurrency(list(range(5)), 2, fn, policy=FailurePolicy.COLLECT_ALL)

    assert [type(outcome) for outcome in outcomes] == [Ok, Err, Ok, Err, Ok]
    assert [outcome.value for outcome in outcomes if isinstance(outcome, Ok)] == [0, 2, 4]
    assert str(outcomes[3].error) == "odd 3"


@pytest.mark.asyncio
async def test_raising_task_becomes_err() -> None:
    async def fn(item: int, index: int):
        if index == 2:
            raise KeyError("unexpected")
        return Ok(item)

    outcomes = await map_with_concurrency(list(range(3)), 2, fn, policy=FailurePolicy.COLLECT_ALL)

    assert isinstance(outcomes[2], Err)
    assert isinstance(outcomes[2].error, KeyError)

    with pytest.raises(KeyError):
        await map_with_concurrency(list(range(3)), 2, fn)
