"""IA-32 (non-PAE) page directory and page table entries."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from functools import reduce
from operator import or_

from .addr32 import BASE_PAGE_SIZE, PAddr, VAddr

__all__ = [
    "PAGE_SIZE_ENTRIES",
    "pd_index",
    "pt_index",
    "PDFlags",
    "PDEntry",
    "PTFlags",
    "PTEntry",
]

#: Number of entries in a page directory or page table.
PAGE_SIZE_ENTRIES = 1024

_U32_MASK = 0xFFFF_FFFF
# Masks to find the physical address in a 4 KiB and a 4 MiB entry.
_ADDRESS_MASK = ~0xFFF & _U32_MASK
_ADDRESS_MASK_PSE = ~0x3F_FFFF & _U32_MASK
_INDEX_MASK = 0b11_1111_1111


def pd_index(addr: VAddr | int) -> int:
    """Index of the page directory entry that maps ``addr``."""
    return (int(addr) >> 22) & _INDEX_MASK


def pt_index(addr: VAddr | int) -> int:
    """Index of the page table entry that maps ``addr``."""
    return (int(addr) >> 12) & _INDEX_MASK


class PDFlags(enum.IntFlag):
    """Flag bits of a page directory entry."""

    P = 1 << 0
    RW = 1 << 1
    US = 1 << 2
    PWT = 1 << 3
    PCD = 1 << 4
    A = 1 << 5
    D = 1 << 6
    PS = 1 << 7
    G = 1 << 8
    PAT = 1 << 12


class PTFlags(enum.IntFlag):
    """Flag bits of a page table entry."""

    P = 1 << 0
    RW = 1 << 1
    US = 1 << 2
    PWT = 1 << 3
    PCD = 1 << 4
    A = 1 << 5
    D = 1 << 6
    PAT = 1 << 7
    G = 1 << 8


_PD_ALL = reduce(or_, (int(f) for f in PDFlags), 0)
_PT_ALL = reduce(or_, (int(f) for f in PTFlags), 0)


def _check_entry_value(value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"entry must be an int, not {type(value).__name__}")
    if not 0 <= value <= _U32_MASK:
        raise OverflowError(f"entry {value:#x} does not fit in 32 bits")


def _checked_address(addr: PAddr, mask: int) -> int:
    value = int(addr)
    if value & mask != value:
        raise ValueError(f"address {value:#x} has bits outside the entry's address field")
    if value % BASE_PAGE_SIZE != 0:
        raise ValueError(f"address {value:#x} is not aligned to a base page")
    return value


@dataclass(frozen=True)
class PDEntry:
    """A page directory entry: an address and a set of flags.

    PSE-36 and PSE-40 are not supported.
    """

    value: int

    def __post_init__(self) -> None:
        _check_entry_value(self.value)

    @classmethod
    def new(cls, pt: PAddr, flags: PDFlags) -> PDEntry:
        """Build an entry pointing at ``pt`` (a page table, or a 4 MiB page if PS is set)."""
        mask = _ADDRESS_MASK_PSE if PDFlags.PS in flags else _ADDRESS_MASK
        return cls(_checked_address(pt, mask) | int(flags))

    def address(self) -> PAddr:
        """The physical address held in this entry."""
        mask = _ADDRESS_MASK_PSE if self.is_page() else _ADDRESS_MASK
        return PAddr(self.value & mask)

    def flags(self) -> PDFlags:
        """The known flag bits of this entry."""
        return PDFlags(self.value & _PD_ALL)

    def _has(self, flag: PDFlags) -> bool:
        return self.value & flag == flag

    def is_present(self) -> bool:
        return self._has(PDFlags.P)

    def is_writeable(self) -> bool:
        return self._has(PDFlags.RW)

    def is_user_mode_allowed(self) -> bool:
        return self._has(PDFlags.US)

    def is_page_write_through(self) -> bool:
        return self._has(PDFlags.PWT)

    def is_page_level_cache_disabled(self) -> bool:
        return self._has(PDFlags.PCD)

    def is_accessed(self) -> bool:
        return self._has(PDFlags.A)

    def is_dirty(self) -> bool:
        return self._has(PDFlags.D)

    def is_page(self) -> bool:
        """Whether this entry maps a 4 MiB page rather than a page table."""
        return self._has(PDFlags.PS)

    def is_global(self) -> bool:
        return self._has(PDFlags.G)

    def is_pat(self) -> bool:
        return self._has(PDFlags.PAT)

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"PDEntry {{ {self.address():#x}, {self.flags()!r} }}"


@dataclass(frozen=True)
class PTEntry:
    """A page table entry: the address of a 4 KiB page and a set of flags."""

    value: int

    def __post_init__(self) -> None:
        _check_entry_value(self.value)

    @classmethod
    def new(cls, page: PAddr, flags: PTFlags) -> PTEntry:
        """Build an entry mapping the 4 KiB page at ``page``."""
        return cls(_checked_address(page, _ADDRESS_MASK) | int(flags))

    def address(self) -> PAddr:
        """The physical address held in this entry."""
        return PAddr(self.value & _ADDRESS_MASK)

    def flags(self) -> PTFlags:
        """The known flag bits of this entry."""
        return PTFlags(self.value & _PT_ALL)

    def _has(self, flag: PTFlags) -> bool:
        return self.value & flag == flag

    def is_present(self) -> bool:
        return self._has(PTFlags.P)

    def is_writeable(self) -> bool:
        return self._has(PTFlags.RW)

    def is_user_mode_allowed(self) -> bool:
        return self._has(PTFlags.US)

    def is_page_write_through(self) -> bool:
        return self._has(PTFlags.PWT)

    def is_page_level_cache_disabled(self) -> bool:
        return self._has(PTFlags.PCD)

    def is_accessed(self) -> bool:
        return self._has(PTFlags.A)

    def is_dirty(self) -> bool:
        return self._has(PTFlags.D)

    def is_pat(self) -> bool:
        return self._has(PTFlags.PAT)

    def is_global(self) -> bool:
        return self._has(PTFlags.G)

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"PTEntry {{ {self.address():#x}, {self.flags()!r} }}"