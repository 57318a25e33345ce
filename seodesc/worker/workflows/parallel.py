"""Concurrency helpers for batch processing.

- run_in_groups: consecutive fixed-size groups, concurrent within a group,
  sequential across groups
- run_named: a fixed join of named sub-tasks with per-task error capture
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into consecutive groups of at most ``size``.

    Example:
        >>> chunked([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    if size < 1:
        raise ValueError("size must be at least 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def run_in_groups(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    group_size: int,
    on_group_start: Callable[[int, list[T]], None] | None = None,
) -> list[R | BaseException]:
    """Run ``worker`` over ``items`` in concurrency groups.

    Group ``i + 1`` starts only after every item of group ``i`` has
    settled. Results come back in input order; a raised exception is
    returned in its item's slot instead of propagating.
    """
    results: list[R | BaseException] = []
    for index, group in enumerate(chunked(items, group_size)):
        if on_group_start is not None:
            on_group_start(index, group)
        group_results = await asyncio.gather(*(worker(item) for item in group), return_exceptions=True)
        results.extend(group_results)
    return results


@dataclass(frozen=True)
class SubTaskOutcome(Generic[T]):
    """Result of one named sub-task: exactly one of value/error is meaningful."""

    name: str
    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_named(tasks: dict[str, Awaitable[Any]]) -> dict[str, SubTaskOutcome[Any]]:
    """Await named sub-tasks concurrently, capturing each task's error.

    Example:
        outcomes = await run_named({"search_volume": fetch_volume(), "competitors": analyze()})
        if outcomes["search_volume"].ok: ...
    """
    names = list(tasks)
    settled = await asyncio.gather(*tasks.values(), return_exceptions=True)
    outcomes: dict[str, SubTaskOutcome[Any]] = {}
    for name, result in zip(names, settled, strict=True):
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            outcomes[name] = SubTaskOutcome(name=name, error=result)
        else:
            outcomes[name] = SubTaskOutcome(name=name, value=result)
    return outcomes
