"""Mutable sorted map implementation based on an unbalanced binary search tree"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (
    Callable,
    Generator,
    Iterable,
    List,
    Optional,
    Tuple,
    Union,
    cast,
    override,
)

from treemap.arena import NodeArena
from treemap.common import (
    Comparator,
    Entry,
    Impossible,
    Iterating,
    KeyNotFound,
    Ordering,
    Sized,
    compare,
)

__all__ = ["SortedTreeMap"]


@dataclass(frozen=True)
class Missing:
    pass


_MISSING = Missing()


class SortedTreeMap[K, V](Sized, Iterating[Tuple[K, V]]):
    """A mutable map ordered by a caller-supplied comparator.

    The tree is a plain binary search tree: it is never rebalanced, so
    inserting keys in sorted order yields a tree whose height equals its
    size. Every operation is iterative and uses constant stack depth.

    Not thread safe. Mutating the map while a lazy iter() walk is
    suspended makes the walk raise RuntimeError on its next step.
    """

    def __init__(self, comparator: Optional[Comparator[K]] = None) -> None:
        """Create an empty map.

        Args:
            comparator: Total order over keys. Defaults to the keys' natural order.
        """
        self._comparator: Comparator[K] = (
            comparator if comparator is not None else compare
        )
        self._arena: NodeArena[K, V] = NodeArena()
        self._root: Optional[int] = None
        self._size = 0
        self._version = 0

    @staticmethod
    def mk(
        pairs: Iterable[Tuple[K, V]], comparator: Optional[Comparator[K]] = None
    ) -> SortedTreeMap[K, V]:
        """Create a map from an iterable of key-value pairs.

        Time Complexity: O(n * depth) where n is the number of pairs

        Args:
            pairs: Iterable of (key, value) tuples. Later pairs overwrite earlier ones.
            comparator: Total order over keys. Defaults to the keys' natural order.

        Returns:
            A map containing all the given key-value pairs.
        """
        tmap: SortedTreeMap[K, V] = SortedTreeMap(comparator)
        for key, value in pairs:
            tmap.add(key, value)
        return tmap

    @property
    def comparator(self) -> Comparator[K]:
        return self._comparator

    @override
    def size(self) -> int:
        """Get the number of key-value pairs in the map.

        Time Complexity: O(1)
        """
        return self._size

    def is_empty(self) -> bool:
        """Check if the map is empty.

        Time Complexity: O(1)
        """
        return self.null()

    @override
    def iter(self) -> Generator[Tuple[K, V]]:
        """Lazily iterate over all key-value pairs in key order.

        Time Complexity: O(n) for complete iteration
        Space Complexity: O(depth) for the explicit stack

        Raises:
            RuntimeError: If the map's structure changes between steps.
        """
        for index in _tree_walk(self):
            node = self._arena.node(index)
            yield (node.key, node.value)

    def keys(self) -> List[K]:
        """Return all keys in ascending order.

        Time Complexity: O(n)
        """
        return [self._arena.node(index).key for index in _tree_walk(self)]

    def values(self) -> List[V]:
        """Return all values in ascending order of their keys.

        Time Complexity: O(n)
        """
        return [self._arena.node(index).value for index in _tree_walk(self)]

    def entries(self) -> List[Entry[K, V]]:
        """Return snapshots of all entries in ascending key order.

        Time Complexity: O(n)
        """
        return [_tree_entry(self, index) for index in _tree_walk(self)]

    def min(self) -> Optional[Entry[K, V]]:
        """Find the entry with the smallest key.

        Time Complexity: O(depth)

        Returns:
            The minimum entry, or None if the map is empty.
        """
        if self._root is None:
            return None
        return _tree_entry(self, _tree_leftmost(self._arena, self._root))

    def max(self) -> Optional[Entry[K, V]]:
        """Find the entry with the largest key.

        Time Complexity: O(depth)

        Returns:
            The maximum entry, or None if the map is empty.
        """
        if self._root is None:
            return None
        return _tree_entry(self, _tree_rightmost(self._arena, self._root))

    def add(self, key: K, value: V) -> Optional[V]:
        """Insert or overwrite a key-value pair.

        An existing key keeps its node; only the value is replaced.

        Time Complexity: O(depth)

        Args:
            key: The key to insert or update.
            value: The value to associate with the key.

        Returns:
            The previous value if the key was present, otherwise None.
        """
        return _tree_insert(self, key, value)

    def add_entry(self, entry: Entry[K, V]) -> Optional[V]:
        """Insert or overwrite the pair held by an entry.

        Returns:
            The previous value if the key was present, otherwise None.
        """
        return self.add(entry.key, entry.value)

    def replace(self, key: K, value: V) -> None:
        """Overwrite the value of a key that is already present.

        Time Complexity: O(depth)

        Raises:
            KeyNotFound: If the key is not in the map.
        """
        index = _tree_require(self, key)
        self._arena.node(index).value = value

    def replace_with(self, key: K, fn: Callable[[K, V], V]) -> None:
        """Overwrite the value of a present key with fn(key, old_value).

        Time Complexity: O(depth) plus the cost of fn

        Raises:
            KeyNotFound: If the key is not in the map.
        """
        index = _tree_require(self, key)
        node = self._arena.node(index)
        node.value = fn(node.key, node.value)

    def remove(self, key: K) -> V:
        """Remove a key and return its value.

        Time Complexity: O(depth)

        Raises:
            KeyNotFound: If the key is not in the map. The map is left unchanged.
        """
        index = _tree_require(self, key)
        return _tree_delete(self, index)

    def get_value(self, key: K) -> V:
        """Get the value associated with a key.

        Time Complexity: O(depth)

        Raises:
            KeyNotFound: If the key is not in the map.
        """
        return self._arena.node(_tree_require(self, key)).value

    def get(self, key: K, default: Union[V, Missing] = _MISSING) -> V:
        """Get the value associated with a key, or a default.

        Raises:
            KeyNotFound: If the key is not found and no default is provided.
        """
        index = _tree_find(self, key)
        if index is not None:
            return self._arena.node(index).value
        elif isinstance(default, Missing):
            raise KeyNotFound(key)
        else:
            return default

    def lookup(self, key: K) -> Optional[V]:
        """Get the value associated with a key, returning None if not found."""
        index = _tree_find(self, key)
        return None if index is None else self._arena.node(index).value

    def contains_key(self, key: K) -> bool:
        """Check if the map contains the given key.

        Time Complexity: O(depth)
        """
        return _tree_find(self, key) is not None

    def contains_value(self, value: V) -> bool:
        """Check if any key maps to a value equal to the given one.

        Time Complexity: O(n)
        """
        for index in _tree_walk(self):
            if self._arena.node(index).value == value:
                return True
        return False

    def higher_or_equal_entry(self, key: K) -> Optional[Entry[K, V]]:
        """Find the entry with the smallest key greater than or equal to key.

        Time Complexity: O(depth)

        Returns:
            The ceiling entry, or None if every key is smaller.
        """
        index = _tree_ceiling(self, key)
        return None if index is None else _tree_entry(self, index)

    def lower_or_equal_entry(self, key: K) -> Optional[Entry[K, V]]:
        """Find the entry with the largest key less than or equal to key.

        Time Complexity: O(depth)

        Returns:
            The floor entry, or None if every key is larger.
        """
        index = _tree_floor(self, key)
        return None if index is None else _tree_entry(self, index)

    def merge(self, other: SortedTreeMap[K, V]) -> None:
        """Add every entry of another map into this one.

        On a key collision the value from other wins.

        Time Complexity: O(m * depth) where m is the size of other
        """
        entries = other.entries()
        logging.debug(
            "merging %d entries into map of size %d", len(entries), self._size
        )
        for entry in entries:
            self.add(entry.key, entry.value)

    def remove_if(self, predicate: Callable[[K, V], bool]) -> None:
        """Remove every entry for which predicate(key, value) holds.

        The predicate is evaluated against a snapshot taken before any removal.

        Time Complexity: O(n * depth) plus the cost of predicate
        """
        snapshot = self.entries()
        doomed = [
            entry.key for entry in snapshot if predicate(entry.key, entry.value)
        ]
        logging.debug("removing %d of %d entries", len(doomed), len(snapshot))
        for key in doomed:
            self.remove(key)

    def clear(self) -> None:
        """Remove every entry at once.

        Time Complexity: O(n) to release the node slots
        """
        logging.debug("clearing map of size %d", self._size)
        self._arena.clear()
        self._root = None
        self._size = 0
        self._version += 1

    def height(self) -> int:
        """Get the number of nodes on the longest root-to-leaf path.

        The tree is not balanced, so this can be as large as size().

        Time Complexity: O(n)
        """
        return _tree_height(self)

    def __contains__(self, key: object) -> bool:
        """Alias for contains_key()."""
        return self.contains_key(cast(K, key))

    def __getitem__(self, key: K) -> V:
        """Alias for get_value()."""
        return self.get_value(key)

    def __setitem__(self, key: K, value: V) -> None:
        """Alias for add()."""
        self.add(key, value)

    def __delitem__(self, key: K) -> None:
        """Alias for remove()."""
        self.remove(key)

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {value!r}" for key, value in self.iter())
        return f"SortedTreeMap({{{body}}})"


def _tree_entry[K, V](tmap: SortedTreeMap[K, V], index: int) -> Entry[K, V]:
    node = tmap._arena.node(index)
    return Entry(node.key, node.value)


def _tree_find[K, V](tmap: SortedTreeMap[K, V], key: K) -> Optional[int]:
    """Descend from the root to the node holding key, if any."""
    current = tmap._root
    while current is not None:
        node = tmap._arena.node(current)
        cmp = tmap._comparator(key, node.key)
        if cmp == Ordering.Eq:
            return current
        elif cmp == Ordering.Lt:
            current = node.left
        else:
            current = node.right
    return None


def _tree_require[K, V](tmap: SortedTreeMap[K, V], key: K) -> int:
    index = _tree_find(tmap, key)
    if index is None:
        raise KeyNotFound(key)
    return index


def _tree_insert[K, V](tmap: SortedTreeMap[K, V], key: K, value: V) -> Optional[V]:
    arena = tmap._arena
    parent: Optional[int] = None
    went_left = False
    current = tmap._root
    while current is not None:
        node = arena.node(current)
        cmp = tmap._comparator(key, node.key)
        if cmp == Ordering.Eq:
            previous = node.value
            node.value = value
            return previous
        parent = current
        went_left = cmp == Ordering.Lt
        current = node.left if went_left else node.right

    index = arena.alloc(key, value, parent)
    if parent is None:
        tmap._root = index
    elif went_left:
        arena.node(parent).left = index
    else:
        arena.node(parent).right = index
    tmap._size += 1
    tmap._version += 1
    return None


def _tree_delete[K, V](tmap: SortedTreeMap[K, V], index: int) -> V:
    """Unlink the node at index and return the value it held.

    A node with two children takes over its in-order successor's key and
    value, and the successor (which has no left child) is unlinked instead.
    """
    arena = tmap._arena
    node = arena.node(index)
    removed = node.value

    if node.left is not None and node.right is not None:
        successor_index = _tree_leftmost(arena, node.right)
        successor = arena.node(successor_index)
        node.key = successor.key
        node.value = successor.value
        index, node = successor_index, successor

    child = node.right if node.left is None else node.left
    _tree_splice(tmap, index, child)
    arena.free(index)
    tmap._size -= 1
    tmap._version += 1
    return removed


def _tree_splice[K, V](
    tmap: SortedTreeMap[K, V], index: int, child: Optional[int]
) -> None:
    """Put child (possibly empty) where the node at index hangs."""
    arena = tmap._arena
    parent = arena.node(index).parent
    if child is not None:
        arena.node(child).parent = parent
    if parent is None:
        tmap._root = child
    else:
        parent_node = arena.node(parent)
        if parent_node.left == index:
            parent_node.left = child
        elif parent_node.right == index:
            parent_node.right = child
        else:
            raise Impossible


def _tree_leftmost[K, V](arena: NodeArena[K, V], index: int) -> int:
    while True:
        left = arena.node(index).left
        if left is None:
            return index
        index = left


def _tree_rightmost[K, V](arena: NodeArena[K, V], index: int) -> int:
    while True:
        right = arena.node(index).right
        if right is None:
            return index
        index = right


def _tree_walk[K, V](tmap: SortedTreeMap[K, V]) -> Generator[int]:
    """Yield node indices in order using an explicit stack."""
    arena = tmap._arena
    version = tmap._version
    stack: List[int] = []
    current = tmap._root
    while stack or current is not None:
        while current is not None:
            stack.append(current)
            current = arena.node(current).left
        index = stack.pop()
        yield index
        if tmap._version != version:
            raise RuntimeError("map changed during iteration")
        current = arena.node(index).right


def _tree_ceiling[K, V](tmap: SortedTreeMap[K, V], key: K) -> Optional[int]:
    best: Optional[int] = None
    current = tmap._root
    while current is not None:
        node = tmap._arena.node(current)
        cmp = tmap._comparator(key, node.key)
        if cmp == Ordering.Eq:
            return current
        elif cmp == Ordering.Lt:
            # This node is a candidate; a smaller one may lie to the left
            best = current
            current = node.left
        else:
            current = node.right
    return best


def _tree_floor[K, V](tmap: SortedTreeMap[K, V], key: K) -> Optional[int]:
    best: Optional[int] = None
    current = tmap._root
    while current is not None:
        node = tmap._arena.node(current)
        cmp = tmap._comparator(key, node.key)
        if cmp == Ordering.Eq:
            return current
        elif cmp == Ordering.Gt:
            best = current
            current = node.right
        else:
            current = node.left
    return best


def _tree_height[K, V](tmap: SortedTreeMap[K, V]) -> int:
    if tmap._root is None:
        return 0
    tallest = 0
    stack: List[Tuple[int, int]] = [(tmap._root, 1)]
    while stack:
        index, depth = stack.pop()
        tallest = max(tallest, depth)
        node = tmap._arena.node(index)
        if node.left is not None:
            stack.append((node.left, depth + 1))
        if node.right is not None:
            stack.append((node.right, depth + 1))
    return tallest
