"""Nearest-timestamp lookup over ascending time series."""

from collections.abc import Callable, Sequence
from typing import Any


class InvalidArgumentError(ValueError):
    """Raised when a lookup is given input it cannot answer, such as an empty series."""


def _default_compare(a: float, b: float) -> float:
    return a - b


def insertion_point(
    times: Sequence[Any],
    target: Any,
    compare: Callable[[Any, Any], float] = _default_compare,
) -> tuple[int, bool]:
    """Binary search for ``target``.

    Returns:
        tuple: (index, found). When found, index is a matching position;
        otherwise it is where ``target`` would be inserted to keep order.
    """
    low = 0
    high = len(times) - 1
    while low <= high:
        mid = (low + high) >> 1
        cmp = compare(target, times[mid])
        if cmp > 0:
            low = mid + 1
        elif cmp < 0:
            high = mid - 1
        else:
            return mid, True
    return low, False


def nearest_index(
    times: Sequence[Any],
    target: Any,
    compare: Callable[[Any, Any], float] = _default_compare,
) -> int:
    """Index of the element of ``times`` closest to ``target``.

    Targets before the first or after the last element resolve to that
    boundary. When ``target`` sits exactly halfway between two neighbours the
    later index wins.

    Raises:
        InvalidArgumentError: If ``times`` is empty.
    """
    if len(times) == 0:
        raise InvalidArgumentError("Cannot resolve a target against an empty time series")

    index, found = insertion_point(times, target, compare)
    if found:
        return index
    if index == 0:
        return 0
    if index >= len(times):
        return len(times) - 1

    below = abs(compare(target, times[index - 1]))
    above = abs(compare(times[index], target))
    return index - 1 if below < above else index
