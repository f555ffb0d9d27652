from typing import Protocol

from no_unsafe_any.core.oracle import TypeDescriptor
from no_unsafe_any.models import SyntaxNode


class TypeResolver(Protocol):
    def resolve_type(self, node: SyntaxNode) -> TypeDescriptor | None: ...
