"""Declarative field tables used by the table-driven decoder."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


class FieldFormat(enum.Enum):
    """Storage format of a field. Integers are big-endian unsigned."""
    STRING = "string"     # fixed length, text up to the first NUL
    UINT8 = "int8u"
    UINT16 = "int16u"
    UINT32 = "int32u"
    UNDEF = "undef"       # fixed length, opaque bytes
    TEXT = "text"         # variable length, whatever the container gives us

    @property
    def fixed_size(self) -> Optional[int]:
        return _FIXED_SIZES.get(self)

    @property
    def is_text(self) -> bool:
        return self in (FieldFormat.STRING, FieldFormat.TEXT)


_FIXED_SIZES = {
    FieldFormat.UINT8: 1,
    FieldFormat.UINT16: 2,
    FieldFormat.UINT32: 4,
}


@dataclass(frozen=True)
class FieldSpec:
    """One entry of a HeaderTable."""
    name: str
    format: Optional[FieldFormat] = None    # None: the table default
    count: int = 0                          # byte length for STRING/UNDEF
    raw_conv: Optional[Callable[[Any], Any]] = None
    value_conv: Optional[Callable[[Any], Any]] = None
    print_conv: dict | Callable[[Any], Any] | None = None   # dict: lookup, unmapped values pass through
    is_list: bool = False
    publish: Optional[str] = None           # ParseContext key receiving the raw value

    def resolve_format(self, table: "HeaderTable") -> FieldFormat:
        return self.format or table.default_format

    def size(self, table: "HeaderTable") -> Optional[int]:
        """Byte width of the field, or None for variable-length text."""
        fixed = self.resolve_format(table).fixed_size
        return fixed if fixed is not None else (self.count or None)


@dataclass(frozen=True)
class HeaderTable:
    """Fields keyed by element position (or tag id for tagged tables)."""
    name: str
    group: str
    default_format: FieldFormat
    fields: dict[int, FieldSpec] = field(default_factory=dict)
    tagged: bool = False    # keys are tag ids, not positions

    @property
    def element_size(self) -> int:
        return self.default_format.fixed_size or 1

    def get(self, key: int) -> Optional[FieldSpec]:
        return self.fields.get(key)

    def offset_of(self, position: int) -> int:
        return position * self.element_size
