"""Sequential async iteration over ordered sequences.

Each helper awaits the callback for one element before invoking it for the
next, so callbacks never run concurrently and always run in index order.
The first exception raised by a callback propagates immediately and the
remaining elements are skipped.
"""

import inspect
from typing import Any, Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

T = TypeVar('T')
R = TypeVar('R')
A = TypeVar('A')

MaybeAwaitable = Union[Awaitable[R], R]


async def _resolve(result: Any) -> Any:
    """Await ``result`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(result):
        return await result
    return result


async def for_each_async(
    sequence: Sequence[T],
    callback: Callable[[T, int, Sequence[T]], MaybeAwaitable[Any]],
    *,
    stop_on_false: bool = False
) -> None:
    """Run ``callback(element, index, sequence)`` for every element in order.

    Args:
        sequence: Elements to visit
        callback: Async (or plain) function called once per element
        stop_on_false: If True, a callback returning exactly ``False`` ends
            the iteration early
    """
    for index in range(len(sequence)):
        result = await _resolve(callback(sequence[index], index, sequence))
        if stop_on_false and result is False:
            return


async def map_async(
    sequence: Sequence[T],
    callback: Callable[[T, int, Sequence[T]], MaybeAwaitable[R]]
) -> List[R]:
    """Map ``sequence`` through ``callback`` one element at a time.

    Returns:
        List of results, result ``i`` at index ``i``
    """
    results: List[R] = []
    for index in range(len(sequence)):
        results.append(await _resolve(callback(sequence[index], index, sequence)))
    return results


async def reduce_async(
    sequence: Sequence[T],
    callback: Callable[[A, T, int, Sequence[T]], MaybeAwaitable[A]],
    initial: A
) -> A:
    """Thread an accumulator through ``callback(acc, element, index, sequence)``.

    Returns:
        The final accumulator (``initial`` for an empty sequence)
    """
    accumulator = initial
    for index in range(len(sequence)):
        accumulator = await _resolve(callback(accumulator, sequence[index], index, sequence))
    return accumulator


async def find_async(
    sequence: Sequence[T],
    predicate: Callable[[T, int, Sequence[T]], MaybeAwaitable[Any]],
    default: Optional[T] = None
) -> Optional[T]:
    """Return the first element whose predicate result is truthy.

    Elements after the match are never passed to ``predicate``.

    Returns:
        The matching element, or ``default`` when nothing matches
    """
    for index in range(len(sequence)):
        if await _resolve(predicate(sequence[index], index, sequence)):
            return sequence[index]
    return default
