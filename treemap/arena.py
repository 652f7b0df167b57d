"""Node storage for the tree engine.

Nodes live in a flat arena and refer to each other by integer index.
An absent link (None) marks an empty subtree. Parent links are for
navigation only; a slot is released only by explicit free or clear.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, override

from treemap.common import Impossible, Sized

__all__ = ["Node", "NodeArena"]


@dataclass
class Node[K, V]:
    key: K
    value: V
    left: Optional[int] = None
    right: Optional[int] = None
    parent: Optional[int] = None


class NodeArena[K, V](Sized):
    """Index-addressed pool of tree nodes.

    Freed slots are recycled by later allocations, so an index is only
    stable for as long as its node is live.
    """

    def __init__(self) -> None:
        self._slots: List[Optional[Node[K, V]]] = []
        self._free: List[int] = []
        self._live = 0

    @override
    def size(self) -> int:
        """Get the number of live nodes.

        Time Complexity: O(1)
        """
        return self._live

    def capacity(self) -> int:
        """Get the number of slots, live or free."""
        return len(self._slots)

    def alloc(self, key: K, value: V, parent: Optional[int] = None) -> int:
        """Allocate a leaf node, reusing a free slot when one exists.

        Time Complexity: O(1) amortized

        Args:
            key: The key for the node.
            value: The value for the node.
            parent: Index of the parent node, or None for a root.

        Returns:
            The index of the new node.
        """
        node = Node(key, value, None, None, parent)
        if self._free:
            index = self._free.pop()
            self._slots[index] = node
        else:
            index = len(self._slots)
            self._slots.append(node)
        self._live += 1
        return index

    def free(self, index: int) -> Node[K, V]:
        """Release a slot and return the node that occupied it.

        The caller must already have unlinked the node from the tree.

        Raises:
            Impossible: If the slot is not live.
        """
        node = self.node(index)
        self._slots[index] = None
        self._free.append(index)
        self._live -= 1
        return node

    def node(self, index: int) -> Node[K, V]:
        """Resolve an index to its live node.

        Raises:
            Impossible: If the slot is out of range or has been freed.
        """
        if not (0 <= index < len(self._slots)):
            raise Impossible
        node = self._slots[index]
        if node is None:
            raise Impossible
        return node

    def clear(self) -> None:
        """Release every slot at once."""
        self._slots.clear()
        self._free.clear()
        self._live = 0
