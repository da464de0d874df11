"""Buffers, parse context and result containers for Palm database parsing."""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from pdbmeta.pdb.constants import DEFAULT_ENCODING
from pdbmeta.pdb.errors import FieldOutOfBounds

log = logging.getLogger(__name__)

_UINT16 = struct.Struct(">H")
_UINT32 = struct.Struct(">I")


@dataclass(slots=True)
class RawBuffer:
    """Bytes read from the stream, plus where they came from."""
    data: bytes
    position: int = 0      # absolute offset of data[0] in the stream

    def __len__(self) -> int:
        return len(self.data)

    def _check(self, offset: int, size: int) -> None:
        if offset < 0 or size < 0 or offset + size > len(self.data):
            raise FieldOutOfBounds(
                f"bytes [{offset}, {offset + size}) outside buffer of {len(self.data)} bytes"
            )

    def span(self, offset: int, size: int) -> bytes:
        self._check(offset, size)
        return self.data[offset:offset + size]

    def uint8(self, offset: int) -> int:
        self._check(offset, 1)
        return self.data[offset]

    def uint16(self, offset: int) -> int:
        """Decode a big-endian unsigned 16-bit integer."""
        self._check(offset, 2)
        return _UINT16.unpack_from(self.data, offset)[0]

    def uint32(self, offset: int) -> int:
        """Decode a big-endian unsigned 32-bit integer."""
        self._check(offset, 4)
        return _UINT32.unpack_from(self.data, offset)[0]


@dataclass(slots=True)
class ParseContext:
    """Scratch state shared by the stages of a single parse call."""
    print_conv: bool = True
    unknown: bool = False
    encoding: str = DEFAULT_ENCODING
    published: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def code_page(self) -> Optional[int]:
        return self.published.get("code_page")

    def publish(self, key: str, value: Any) -> None:
        self.published[key] = value

    def warn(self, message: str) -> None:
        log.debug("warning: %s", message)
        self.warnings.append(message)


class ExtractedValues:
    """Decoded values keyed by field name, in decode order.

    A name stored as a list field keeps collecting values; scalar names are
    overwritten by later stores.
    """

    def __init__(self):
        self._values: dict[str, Any] = {}
        self.groups: dict[str, str] = {}
        self.tag_ids: dict[str, int] = {}

    def store(self, name: str, value: Any, is_list: bool = False,
              group: str = "", tag_id: Optional[int] = None) -> None:
        existing = self._values.get(name)
        if isinstance(existing, list):
            existing.append(value)
        elif is_list:
            self._values[name] = [value]
        else:
            self._values[name] = value
        if group:
            self.groups.setdefault(name, group)
        if tag_id is not None:
            self.tag_ids.setdefault(name, tag_id)

    def replace_last(self, name: str, value: Any) -> None:
        """Overwrite the most recently stored value for a name."""
        existing = self._values[name]
        if isinstance(existing, list):
            existing[-1] = value
        else:
            self._values[name] = value

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def items(self):
        return self._values.items()

    def as_dict(self) -> dict[str, Any]:
        return {k: list(v) if isinstance(v, list) else v for k, v in self._values.items()}


@dataclass
class ParseResult:
    """Everything extracted from one file."""
    file_type: str          # 'PDB' or 'MOBI'
    palm_type: str          # label from the signature table
    values: ExtractedValues
    warnings: list[str] = field(default_factory=list)

    @property
    def is_mobi(self) -> bool:
        return self.file_type == "MOBI"

    def as_dict(self) -> dict[str, Any]:
        return {
            "file_type": self.file_type,
            "palm_type": self.palm_type,
            "values": self.values.as_dict(),
            "warnings": list(self.warnings),
        }
