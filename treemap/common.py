"""Common types and comparison utilities for the treemap library.

This module provides the ordering vocabulary shared by the tree engine:
three-way comparison results, comparator adapters, the entry type handed
out to callers, and the error raised for missing keys.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generator, List

__all__ = [
    "Comparator",
    "Entry",
    "Impossible",
    "Iterating",
    "KeyNotFound",
    "Ordering",
    "Sized",
    "compare",
    "from_cmp",
    "key_order",
    "reverse_order",
]


class Impossible(Exception):
    """Exception raised when encountering theoretically impossible states.

    Used to indicate internal consistency violations in tree operations.
    """

    pass


class KeyNotFound(KeyError):
    """Raised when an operation requires a key that is not in the map.

    Subclasses KeyError so callers can treat the map like any other mapping.
    """

    def __init__(self, key: Any) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"key not found: {self.key!r}"


class Ordering(Enum):
    """Enumeration representing the result of a comparison operation."""

    Lt = -1
    Eq = 0
    Gt = 1


type Comparator[K] = Callable[[K, K], Ordering]


class Sized(metaclass=ABCMeta):
    @abstractmethod
    def size(self) -> int: ...

    def null(self) -> bool:
        return self.size() == 0

    def __bool__(self) -> bool:
        return not self.null()

    def __len__(self) -> int:
        return self.size()


class Iterating[U](metaclass=ABCMeta):
    @abstractmethod
    def iter(self) -> Generator[U]: ...

    def list(self) -> List[U]:
        return list(self.iter())

    def __iter__(self) -> Generator[U]:
        return self.iter()


@dataclass(frozen=True)
class Entry[K, V]:
    """An immutable key-value pair.

    Entries returned by a map are snapshots: later mutation of the map does
    not change an entry that has already been handed out.
    """

    key: K
    value: V


def compare[T](a: T, b: T) -> Ordering:
    """Compare two values by their natural order.

    Uses the == and < operators to determine the comparison result.

    Args:
        a: First value to compare.
        b: Second value to compare.

    Returns:
        Ordering indicating the relationship between a and b.
    """
    if a == b:
        return Ordering.Eq
    elif a < b:
        return Ordering.Lt
    else:
        return Ordering.Gt


def reverse_order[K](cmp: Comparator[K]) -> Comparator[K]:
    """Flip the result of another comparator.

    Example:
        >>> from treemap.common import compare, reverse_order, Ordering
        >>> compare(1, 2)
        <Ordering.Lt: -1>
        >>> reverse_order(compare)(1, 2)
        <Ordering.Gt: 1>
    """

    def flipped(a: K, b: K) -> Ordering:
        result = cmp(a, b)
        if result == Ordering.Lt:
            return Ordering.Gt
        elif result == Ordering.Gt:
            return Ordering.Lt
        else:
            return Ordering.Eq

    return flipped


def from_cmp[K](fn: Callable[[K, K], int]) -> Comparator[K]:
    """Adapt a cmp-style function returning a negative, zero or positive int.

    Args:
        fn: Classic comparison function, e.g. one written for functools.cmp_to_key.

    Returns:
        A comparator producing Ordering values.
    """

    def adapted(a: K, b: K) -> Ordering:
        result = fn(a, b)
        if result < 0:
            return Ordering.Lt
        elif result > 0:
            return Ordering.Gt
        else:
            return Ordering.Eq

    return adapted


def key_order[K, J](fn: Callable[[K], J]) -> Comparator[K]:
    """Order keys by the natural order of a projection of each key.

    Keys whose projections compare equal are treated as the same key.

    Example:
        >>> from treemap.common import key_order
        >>> key_order(len)("ab", "xyz")
        <Ordering.Lt: -1>
    """

    def projected(a: K, b: K) -> Ordering:
        return compare(fn(a), fn(b))

    return projected
