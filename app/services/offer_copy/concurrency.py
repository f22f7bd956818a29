"""
Bounded-concurrency map over an ordered list of items.

Each task reports an explicit outcome (Ok or Err) instead of raising, and the
aggregation policy decides what a failed task means for the batch:

- FAIL_FAST: the first Err stops further claiming and its error is raised
  immediately. Sibling tasks already in flight are not cancelled; their
  outcomes are discarded.
- COLLECT_ALL: every item runs and all outcomes are returned in input order.
"""
import asyncio
import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, Set, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Ok(Generic[R]):
    value: R


@dataclass(frozen=True)
class Err:
    error: Exception


TaskOutcome = Union[Ok[R], Err]


class FailurePolicy(str, Enum):
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


# Workers still running after a fail-fast return. Held here so they are not
# garbage-collected before they finish.
_detached: Set["asyncio.Future[Any]"] = set()


async def _run_one(
    fn: Callable[[T, int], Awaitable[TaskOutcome]],
    item: T,
    index: int,
) -> TaskOutcome:
    try:
        return await fn(item, index)
    except Exception as e:
        logger.error(f"Task {index} raised instead of returning an outcome: {e}")
        return Err(e)


async def map_with_concurrency(
    items: Sequence[T],
    concurrency: int,
    fn: Callable[[T, int], Awaitable[TaskOutcome]],
    *,
    policy: FailurePolicy = FailurePolicy.FAIL_FAST,
) -> List[TaskOutcome]:
    """
    Run fn(item, index) over items with at most min(concurrency, len(items)) in flight.

    Args:
        items: Items to process
        concurrency: Maximum number of concurrently running invocations of fn
        fn: Async task function returning Ok(value) or Err(error)
        policy: What a failed task means for the whole call

    Returns:
        Outcomes where results[i] is the outcome of fn(items[i], i).
        Under FAIL_FAST every returned outcome is Ok.

    Raises:
        ValueError: concurrency is less than 1
        Exception: under FAIL_FAST, the error of the first failed task
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    items = list(items)
    if not items:
        return []

    results: List[Optional[TaskOutcome]] = [None] * len(items)
    # next() on the cursor runs between awaits, so each index is claimed exactly once
    cursor = itertools.count()
    first_failure: "asyncio.Future[Err]" = asyncio.get_running_loop().create_future()

    async def worker() -> None:
        while not first_failure.done():
            index = next(cursor)
            if index >= len(items):
                return
            outcome = await _run_one(fn, items[index], index)
            if first_failure.done():
                return
            results[index] = outcome
            if policy is FailurePolicy.FAIL_FAST and isinstance(outcome, Err):
                first_failure.set_result(outcome)

    workers = [asyncio.create_task(worker()) for _ in range(min(concurrency, len(items)))]
    all_done = asyncio.gather(*workers)

    await asyncio.wait([all_done, first_failure], return_when=asyncio.FIRST_COMPLETED)

    if first_failure.done():
        if not all_done.done():
            _detached.add(all_done)
            all_done.add_done_callback(_detached.discard)
        raise first_failure.result().error

    first_failure.cancel()
    await all_done
    return [outcome for outcome in results if outcome is not None]
