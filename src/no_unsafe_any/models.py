from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from no_unsafe_any.messages import MessageId


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    column: int


_ORIGIN = Position(row=0, column=0)


class SyntaxNode(BaseModel):
    """A read-only ESTree-shaped node.

    ``slots`` holds the child slots (``init``, ``arguments``, ...) and
    ``attributes`` the scalar properties (``kind``, ``name``, ``raw``, ...).
    """

    model_config = ConfigDict(frozen=True)

    type: str
    start_byte: int = 0
    end_byte: int = 0
    start_point: Position = _ORIGIN
    end_point: Position = _ORIGIN
    text: str = ""
    slots: dict[str, SyntaxNode | list[SyntaxNode | None] | None] = Field(default_factory=dict)
    attributes: dict[str, str | int | float | bool | None] = Field(default_factory=dict)

    def child(self, name: str) -> SyntaxNode | None:
        value = self.slots.get(name)
        if isinstance(value, list):
            raise TypeError(f"Field '{name}' of {self.type} holds a list, not a single node")
        return value

    def children(self, name: str) -> list[SyntaxNode | None]:
        value = self.slots.get(name)
        if value is None:
            return []
        if isinstance(value, SyntaxNode):
            return [value]
        return list(value)

    def has(self, name: str) -> bool:
        return self.slots.get(name) is not None

    def attr(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def iter_children(self) -> Iterator[tuple[str, SyntaxNode]]:
        """Yield ``(field, child)`` pairs ordered by source position."""
        found: list[tuple[str, SyntaxNode]] = []
        for name, value in self.slots.items():
            if isinstance(value, SyntaxNode):
                found.append((name, value))
            elif isinstance(value, list):
                found.extend((name, item) for item in value if item is not None)
        found.sort(key=lambda pair: (pair[1].start_byte, pair[1].end_byte))
        yield from found


SyntaxNode.model_rebuild()  # necessary for recursive types


def span_key(node: SyntaxNode) -> str:
    return f"{node.start_byte}:{node.end_byte}"


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    message_id: MessageId
    message: str
    data: dict[str, str] = Field(default_factory=dict)
    node_type: str
    start_byte: int
    end_byte: int
    start_point: Position
    end_point: Position
    anchor: SyntaxNode = Field(exclude=True, repr=False)

    @property
    def line(self) -> int:
        return self.start_point.row + 1

    @property
    def column(self) -> int:
        return self.start_point.column + 1
