"""The 32-bit task state segment and its packed binary layout."""

from __future__ import annotations

import struct
from dataclasses import dataclass, fields

__all__ = ["TSS_SIZE", "TaskStateSegment"]

# Field names in memory order; None marks a reserved slot written as zero.
_LAYOUT = (
    "link", None,
    "esp0", "ss0", None,
    "esp1", "ss1", None,
    "esp2", "ss2", None,
    "cr3", "eip", "eflags",
    "eax", "ecx", "edx", "ebx", "esp", "ebp", "esi", "edi",
    "es", None, "cs", None, "ss", None, "ds", None, "fs", None, "gs", None,
    "ldtr", None,
    "iobp_offset",
)  # fmt: skip

_STRUCT = struct.Struct("<HHIHHIHHIHHIII8I12HHIH")

#: Size in bytes of a packed task state segment.
TSS_SIZE = _STRUCT.size


@dataclass
class TaskStateSegment:
    """A 32-bit task state segment; reserved fields are always zero."""

    link: int = 0
    esp0: int = 0
    ss0: int = 0
    esp1: int = 0
    ss1: int = 0
    esp2: int = 0
    ss2: int = 0
    cr3: int = 0
    eip: int = 0
    eflags: int = 0
    eax: int = 0
    ecx: int = 0
    edx: int = 0
    ebx: int = 0
    esp: int = 0
    ebp: int = 0
    esi: int = 0
    edi: int = 0
    es: int = 0
    cs: int = 0
    ss: int = 0
    ds: int = 0
    fs: int = 0
    gs: int = 0
    ldtr: int = 0
    iobp_offset: int = TSS_SIZE

    def pack(self) -> bytes:
        """The segment in its packed little-endian in-memory form."""
        values = [0 if name is None else getattr(self, name) for name in _LAYOUT]
        try:
            return _STRUCT.pack(*values)
        except struct.error as exc:
            raise ValueError(f"field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> TaskStateSegment:
        """Read a segment from its packed form; reserved bytes are ignored."""
        if len(data) != TSS_SIZE:
            raise ValueError(f"expected {TSS_SIZE} bytes, got {len(data)}")
        values = _STRUCT.unpack(bytes(data))
        known = {f.name for f in fields(cls)}
        return cls(
            **{name: value for name, value in zip(_LAYOUT, values) if name in known}
        )