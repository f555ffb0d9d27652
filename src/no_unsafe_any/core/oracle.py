from __future__ import annotations

import logging
import re
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from no_unsafe_any.models import SyntaxNode, span_key

if TYPE_CHECKING:
    from no_unsafe_any.core.ports.types import TypeResolver

logger = logging.getLogger(__name__)


class TypeFlag(str, Enum):
    ANY = "any"
    UNKNOWN = "unknown"
    NEVER = "never"
    ARRAY = "array"
    OTHER = "other"


class TypeCategory(str, Enum):
    CONCRETE = "concrete"
    DYNAMIC = "dynamic"
    DYNAMIC_ARRAY = "dynamic_array"


class TypeDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    flag: TypeFlag = TypeFlag.OTHER
    type_arguments: tuple[TypeDescriptor, ...] = ()
    readonly: bool = False

    @classmethod
    def any(cls) -> TypeDescriptor:
        return cls(name="any", flag=TypeFlag.ANY)

    @classmethod
    def concrete(cls, name: str = "unresolved") -> TypeDescriptor:
        return cls(name=name, flag=TypeFlag.OTHER)

    @classmethod
    def array_of(cls, element: TypeDescriptor, readonly: bool = False) -> TypeDescriptor:
        name = f"{element.name}[]"
        return cls(
            name=f"readonly {name}" if readonly else name,
            flag=TypeFlag.ARRAY,
            type_arguments=(element,),
            readonly=readonly,
        )

    @property
    def category(self) -> TypeCategory:
        if self.flag is TypeFlag.ANY:
            return TypeCategory.DYNAMIC
        if (
            self.flag is TypeFlag.ARRAY
            and len(self.type_arguments) == 1
            and self.type_arguments[0].flag is TypeFlag.ANY
        ):
            return TypeCategory.DYNAMIC_ARRAY
        return TypeCategory.CONCRETE


TypeDescriptor.model_rebuild()

_KEYWORD_FLAGS = {"any": TypeFlag.ANY, "unknown": TypeFlag.UNKNOWN, "never": TypeFlag.NEVER}
_GENERIC_ARRAY = re.compile(r"^(Readonly)?Array<(?P<element>.+)>$")


def parse_type_text(text: str) -> TypeDescriptor:
    """Parse a printed TypeScript type (``any[]``, ``ReadonlyArray<any>``, ...) into a descriptor.

    Only the shapes the policies distinguish are recognised; everything else is
    an opaque concrete type carrying its printed name.
    """
    cleaned = text.strip()
    while cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = cleaned[1:-1].strip()

    if cleaned in _KEYWORD_FLAGS:
        return TypeDescriptor(name=cleaned, flag=_KEYWORD_FLAGS[cleaned])

    readonly = False
    if cleaned.startswith("readonly "):
        readonly = True
        cleaned = cleaned[len("readonly ") :].strip()

    if cleaned.endswith("[]"):
        return TypeDescriptor.array_of(parse_type_text(cleaned[:-2]), readonly=readonly)

    match = _GENERIC_ARRAY.match(cleaned)
    if match:
        element = parse_type_text(match.group("element"))
        return TypeDescriptor.array_of(element, readonly=readonly or match.group(1) is not None)

    return TypeDescriptor.concrete(text.strip())


class TypeOracle:
    """Classifies syntax positions using an external :class:`TypeResolver`.

    Unresolvable positions count as concrete, so only confirmed dynamic flow is reported.
    """

    def __init__(self, resolver: TypeResolver) -> None:
        self._resolver = resolver

    def resolve_type(self, node: SyntaxNode) -> TypeDescriptor:
        descriptor = self._resolver.resolve_type(node)
        if descriptor is None:
            logger.debug("No type for %s at %s, treating as concrete", node.type, span_key(node))
            return TypeDescriptor.concrete()
        return descriptor

    def is_dynamic(self, node: SyntaxNode) -> bool:
        return self.resolve_type(node).category is TypeCategory.DYNAMIC

    def is_dynamic_array(self, node: SyntaxNode) -> bool:
        return self.resolve_type(node).category is TypeCategory.DYNAMIC_ARRAY

    def is_dynamic_or_dynamic_array(self, node: SyntaxNode) -> bool:
        return self.resolve_type(node).category is not TypeCategory.CONCRETE
