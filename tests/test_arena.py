import pytest

from phytofsm.arena import ScopedArena


def test_new_node_at_root_when_no_scope():
    arena = ScopedArena()
    node = arena.new_node_in_scope("root")
    assert arena[node].parent is None
    assert len(list(arena.root_nodes())) == 1


def test_new_node_as_child_when_scoped():
    arena = ScopedArena()
    parent = arena.new_node_in_scope("parent")
    arena.set_scope(parent)
    child = arena.new_node_in_scope("child")
    assert arena[child].parent == parent
    assert len(list(arena.root_nodes())) == 1


def test_set_scope_returns_previous():
    arena = ScopedArena()
    node1 = arena.new_node_in_scope("node1")
    node2 = arena.new_node_in_scope("node2")
    assert arena.set_scope(node1) is None
    assert arena.set_scope(node2) == node1
    assert arena.scope() == node2


def test_nodes_in_scope_returns_children():
    arena = ScopedArena()
    parent = arena.new_node_in_scope("parent")
    arena.set_scope(parent)
    arena.new_node_in_scope("child1")
    arena.new_node_in_scope("child2")
    assert [n.data for n in arena.nodes_in_scope()] == ["child1", "child2"]


def test_nodes_in_scope_returns_roots_when_unscoped():
    arena = ScopedArena()
    arena.new_node_in_scope("root1")
    arena.new_node_in_scope("root2")
    assert [n.data for n in arena.nodes_in_scope()] == ["root1", "root2"]


def test_descendants_from_scope_traverses_hierarchy():
    arena = ScopedArena()
    parent = arena.new_node_in_scope("parent")
    arena.set_scope(parent)
    child = arena.new_node_in_scope("child")
    arena.set_scope(child)
    arena.new_node_in_scope("grandchild")
    arena.set_scope(parent)
    assert [n.data for n in arena.descendants_from_scope()] == [
        "parent",
        "child",
        "grandchild",
    ]


def test_descendants_unscoped_covers_all_trees_in_preorder():
    arena = ScopedArena()
    a = arena.new_node_in_scope("a")
    arena.new_node_in_scope("b")
    arena.set_scope(a)
    a1 = arena.new_node_in_scope("a1")
    arena.new_node_in_scope("a2")
    arena.set_scope(a1)
    arena.new_node_in_scope("a1x")
    arena.set_scope(None)
    assert [n.data for n in arena.descendants_from_scope()] == [
        "a",
        "a1",
        "a1x",
        "a2",
        "b",
    ]


def test_ancestors_start_with_node_itself():
    arena = ScopedArena()
    root = arena.new_node_in_scope("root")
    arena.set_scope(root)
    mid = arena.new_node_in_scope("mid")
    arena.set_scope(mid)
    leaf = arena.new_node_in_scope("leaf")
    assert list(arena.ancestors(leaf)) == [leaf, mid, root]
    assert list(arena.ancestors(root)) == [root]


def test_children_and_ids():
    arena = ScopedArena()
    root = arena.new_node_in_scope("root")
    arena.set_scope(root)
    c1 = arena.new_node_in_scope("c1")
    c2 = arena.new_node_in_scope("c2")
    assert list(arena.children(root)) == [c1, c2]
    assert list(arena.node_ids()) == [root, c1, c2]
    assert list(arena.root_node_ids()) == [root]
    assert len(arena) == 3
    assert [n.data for n in arena] == ["root", "c1", "c2"]


def test_unknown_node_raises():
    arena = ScopedArena()
    with pytest.raises(KeyError):
        arena[0]
    assert len(arena) == 0
    assert list(arena.node_ids()) == []