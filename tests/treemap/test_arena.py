import pytest

from treemap.arena import NodeArena
from treemap.common import Impossible


def test_empty_arena():
    arena: NodeArena[int, str] = NodeArena()
    assert arena.size() == 0
    assert arena.null()
    assert arena.capacity() == 0


def test_alloc_links():
    arena: NodeArena[int, str] = NodeArena()
    root = arena.alloc(2, "b")
    child = arena.alloc(1, "a", root)

    assert arena.size() == 2
    assert arena.node(root).parent is None
    assert arena.node(child).parent == root
    assert arena.node(child).left is None
    assert arena.node(child).right is None
    assert arena.node(child).key == 1
    assert arena.node(child).value == "a"


def test_free_returns_node_and_reuses_slot():
    arena: NodeArena[int, str] = NodeArena()
    first = arena.alloc(1, "a")
    arena.alloc(2, "b")

    freed = arena.free(first)
    assert freed.key == 1
    assert freed.value == "a"
    assert arena.size() == 1

    # The freed slot is handed out again instead of growing the arena
    again = arena.alloc(3, "c")
    assert again == first
    assert arena.capacity() == 2
    assert arena.node(again).key == 3


def test_freed_slot_is_not_addressable():
    arena: NodeArena[int, str] = NodeArena()
    index = arena.alloc(1, "a")
    arena.free(index)
    with pytest.raises(Impossible):
        arena.node(index)
    with pytest.raises(Impossible):
        arena.free(index)


def test_out_of_range_index():
    arena: NodeArena[int, str] = NodeArena()
    with pytest.raises(Impossible):
        arena.node(0)
    with pytest.raises(Impossible):
        arena.node(-1)


def test_clear():
    arena: NodeArena[int, str] = NodeArena()
    for i in range(5):
        arena.alloc(i, str(i))
    arena.free(2)
    arena.clear()

    assert arena.size() == 0
    assert arena.capacity() == 0
    assert arena.alloc(9, "z") == 0
