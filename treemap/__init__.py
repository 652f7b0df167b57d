from treemap.arena import Node, NodeArena
from treemap.common import (
    Comparator,
    Entry,
    KeyNotFound,
    Ordering,
    compare,
    from_cmp,
    key_order,
    reverse_order,
)
from treemap.map import SortedTreeMap

__all__ = [
    "Comparator",
    "Entry",
    "KeyNotFound",
    "Node",
    "NodeArena",
    "Ordering",
    "SortedTreeMap",
    "compare",
    "from_cmp",
    "key_order",
    "reverse_order",
]
