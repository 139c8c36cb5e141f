"""A tree of nodes stored in a flat list, with a current scope for insertion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterator, Optional, TypeVar

T = TypeVar("T")

NodeId = int


@dataclass
class Node(Generic[T]):
    """One node of the arena: its id, payload and links to parent and children."""

    id: NodeId
    data: T
    parent: Optional[NodeId] = None
    children: list[NodeId] = field(default_factory=list)


class ScopedArena(Generic[T]):
    """Tree storage where new nodes are created as children of the current scope."""

    def __init__(self) -> None:
        self._nodes: list[Node[T]] = []
        self._scope: Optional[NodeId] = None

    def set_scope(self, scope: Optional[NodeId]) -> Optional[NodeId]:
        """Set the current scope and return the previous one."""
        previous = self._scope
        self._scope = scope
        return previous

    def scope(self) -> Optional[NodeId]:
        """Return the current scope."""
        return self._scope

    def new_node_in_scope(self, data: T) -> NodeId:
        """Create a node; it becomes a child of the scope when one is set."""
        node = Node(id=len(self._nodes), data=data, parent=self._scope)
        self._nodes.append(node)
        if self._scope is not None:
            self._nodes[self._scope].children.append(node.id)
        return node.id

    def nodes_in_scope(self) -> Iterator[Node[T]]:
        """Direct children of the scope, or the root nodes when there is none."""
        if self._scope is None:
            return self.root_nodes()
        return (self._nodes[child] for child in self._nodes[self._scope].children)

    def descendants_from_scope(self) -> Iterator[Node[T]]:
        """The scope and all its descendants in pre-order, or every tree if unscoped."""
        starts = [self._scope] if self._scope is not None else list(self.root_node_ids())
        for start in starts:
            for node_id in self._descendants(start):
                yield self._nodes[node_id]

    def root_nodes(self) -> Iterator[Node[T]]:
        """Nodes without a parent, in creation order."""
        return (node for node in self._nodes if node.parent is None)

    def root_node_ids(self) -> Iterator[NodeId]:
        """Ids of nodes without a parent."""
        return (node.id for node in self.root_nodes())

    def node_ids(self) -> Iterator[NodeId]:
        """Ids of all nodes in creation order."""
        return (node.id for node in self._nodes)

    def children(self, node_id: NodeId) -> Iterator[NodeId]:
        """Ids of the direct children of a node."""
        return iter(list(self[node_id].children))

    def ancestors(self, node_id: NodeId) -> Iterator[NodeId]:
        """The node itself followed by its parent, grandparent and so on."""
        current: Optional[NodeId] = node_id
        while current is not None:
            yield current
            current = self[current].parent

    def _descendants(self, node_id: NodeId) -> Iterator[NodeId]:
        stack = [node_id]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self._nodes[current].children))

    def __getitem__(self, node_id: NodeId) -> Node[T]:
        if not 0 <= node_id < len(self._nodes):
            raise KeyError(node_id)
        return self._nodes[node_id]

    def __iter__(self) -> Iterator[Node[T]]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)