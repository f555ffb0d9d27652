"""Span-keyed type table: a :class:`TypeResolver` fed by an external type checker.

The file format is a JSON object listing the printed type of every source span the
checker resolved::

    {"types": [{"start": 6, "end": 9, "type": "any"}]}

Offsets are UTF-8 byte offsets into the checked file.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ValidationError, model_validator

from no_unsafe_any.core.oracle import TypeDescriptor, parse_type_text
from no_unsafe_any.errors import TypeTableError
from no_unsafe_any.models import SyntaxNode

logger = logging.getLogger(__name__)


class TypeEntry(BaseModel):
    start: int
    end: int
    type: str

    @model_validator(mode="after")
    def _check_span(self) -> "TypeEntry":
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span {self.start}:{self.end}")
        return self


class TypeTableFile(BaseModel):
    types: list[TypeEntry] = []


class TypeTable:
    """Resolves a node to the type recorded for its exact span, or ``None``."""

    def __init__(self, entries: Iterable[TypeEntry] = ()) -> None:
        self._types: dict[tuple[int, int], TypeDescriptor] = {}
        for entry in entries:
            self._types[(entry.start, entry.end)] = parse_type_text(entry.type)

    def __len__(self) -> int:
        return len(self._types)

    def resolve_type(self, node: SyntaxNode) -> TypeDescriptor | None:
        return self._types.get((node.start_byte, node.end_byte))

    @classmethod
    def from_mapping(cls, raw: object) -> "TypeTable":
        try:
            parsed = TypeTableFile.model_validate(raw)
        except ValidationError as exc:
            raise TypeTableError(f"Invalid type table: {exc.error_count()} error(s): {exc.errors()[0]['msg']}") from exc
        return cls(parsed.types)


def load_type_table(path: str | Path) -> TypeTable:
    table_path = Path(path)
    try:
        raw = json.loads(table_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise TypeTableError(f"Type table not found: {path}") from None
    except json.JSONDecodeError as exc:
        raise TypeTableError(f"Type table {path} is not valid JSON: {exc.msg}") from exc
    table = TypeTable.from_mapping(raw)
    logger.info("Loaded %d type(s) from %s", len(table), table_path)
    return table
