from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from no_unsafe_any.core.traversal import NodePath, walk
from no_unsafe_any.models import SyntaxNode

if TYPE_CHECKING:
    from no_unsafe_any.core.policies import RuleContext

Predicate = Callable[[NodePath], bool]
HandlerFn = Callable[[NodePath, "RuleContext"], None]


@dataclass(frozen=True)
class Handler:
    """One dispatch row. ``node_types=None`` matches nodes of every type."""

    name: str
    node_types: frozenset[str] | None
    handle: HandlerFn
    guard: Predicate | None = None

    def matches(self, path: NodePath) -> bool:
        if self.node_types is not None and path.node.type not in self.node_types:
            return False
        return self.guard is None or self.guard(path)


class DispatchTable:
    """Ordered ``(predicate, handler)`` rows evaluated for every node of one traversal.

    Matching rows fire in table order. Candidate rows are cached per node type so
    each node only evaluates the guards of rows that can possibly match.
    """

    def __init__(self, handlers: Iterable[Handler]) -> None:
        self._handlers = tuple(handlers)
        self._candidates: dict[str, tuple[Handler, ...]] = {}

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[Handler]:
        return iter(self._handlers)

    def _candidates_for(self, node_type: str) -> tuple[Handler, ...]:
        candidates = self._candidates.get(node_type)
        if candidates is None:
            candidates = tuple(h for h in self._handlers if h.node_types is None or node_type in h.node_types)
            self._candidates[node_type] = candidates
        return candidates

    def matching(self, path: NodePath) -> list[Handler]:
        return [handler for handler in self._candidates_for(path.node.type) if handler.matches(path)]

    def run(self, root: SyntaxNode, context: RuleContext) -> int:
        """Visit every node once and fire the matching handlers. Returns the node count."""
        visited = 0
        for path in walk(root):
            visited += 1
            for handler in self.matching(path):
                handler.handle(path, context)
        return visited
