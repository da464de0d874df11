"""Exceptions raised while reading Palm database files."""
from __future__ import annotations


class NotRecognized(Exception):
    """The stream is not a Palm database this package understands."""


class ShortRead(Exception):
    """Fewer bytes were available than requested."""

    def __init__(self, offset: int, wanted: int, got: int):
        super().__init__(f"short read at offset {offset}: wanted {wanted} bytes, got {got}")
        self.offset = offset
        self.wanted = wanted
        self.got = got


class FieldOutOfBounds(IndexError):
    """A field's byte range does not fit inside its buffer."""
