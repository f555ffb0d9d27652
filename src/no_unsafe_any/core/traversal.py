from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from no_unsafe_any.models import SyntaxNode


@dataclass(frozen=True)
class NodePath:
    """A node together with the chain of slots that led to it from the root."""

    node: SyntaxNode
    parent: NodePath | None = None
    field: str | None = None

    @property
    def type(self) -> str:
        return self.node.type

    @property
    def parent_node(self) -> SyntaxNode | None:
        return self.parent.node if self.parent is not None else None

    def is_child_of(self, parent_type: str, field: str | None = None) -> bool:
        if self.parent is None or self.parent.node.type != parent_type:
            return False
        return field is None or self.field == field

    def ancestors(self) -> Iterator[NodePath]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent


def walk(root: SyntaxNode) -> Iterator[NodePath]:
    """Depth-first pre-order walk in source order.

    Uses an explicit stack so deeply nested trees do not hit the recursion limit.
    """
    stack = [NodePath(root)]
    while stack:
        path = stack.pop()
        yield path
        children = [NodePath(child, path, name) for name, child in path.node.iter_children()]
        stack.extend(reversed(children))
