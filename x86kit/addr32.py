"""32-bit physical, IO and virtual address types with page alignment helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeVar

__all__ = [
    "BASE_PAGE_SHIFT",
    "BASE_PAGE_SIZE",
    "LARGE_PAGE_SIZE",
    "CACHE_LINE_SIZE",
    "align_down",
    "align_up",
    "Address32",
    "PAddr",
    "IOAddr",
    "VAddr",
]

#: Log2 of the base page size.
BASE_PAGE_SHIFT = 12
#: Size of a base page (4 KiB).
BASE_PAGE_SIZE = 4096
#: Size of a large page (4 MiB).
LARGE_PAGE_SIZE = 1024 * 1024 * 4
#: Size of a cache line.
CACHE_LINE_SIZE = 64

_U32_MASK = 0xFFFF_FFFF

_A = TypeVar("_A", bound="Address32")


def _checked_u32(value: int) -> int:
    if not 0 <= value <= _U32_MASK:
        raise OverflowError(f"value {value:#x} does not fit in 32 bits")
    return value


def _is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


def align_down(addr: int, align: int) -> int:
    """Return the greatest x aligned to ``align`` with x <= addr.

    ``align`` must be a power of two.
    """
    if align <= 0:
        raise ValueError("alignment must be positive")
    return addr & ~(align - 1) & _U32_MASK


def align_up(addr: int, align: int) -> int:
    """Return the smallest x aligned to ``align`` with x >= addr.

    ``align`` must be a power of two; raises OverflowError past 32 bits.
    """
    if align <= 0:
        raise ValueError("alignment must be positive")
    mask = align - 1
    if addr & mask == 0:
        return addr
    return _checked_u32((addr | mask) + 1)


@dataclass(frozen=True, order=True)
class Address32:
    """A 32-bit address; the value is truncated to 32 bits on construction."""

    value: int

    # Whether ``addr & int`` and ``addr | int`` keep the address type.
    _BITOPS_KEEP_TYPE: ClassVar[bool] = False

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"address must be an int, not {type(self.value).__name__}")
        object.__setattr__(self, "value", self.value & _U32_MASK)

    @classmethod
    def zero(cls: type[_A]) -> _A:
        """The zero address."""
        return cls(0)

    def as_u32(self) -> int:
        return self.value

    def as_usize(self) -> int:
        return self.value

    def is_zero(self) -> bool:
        return self.value == 0

    def _align_up(self: _A, align: int) -> _A:
        return type(self)(align_up(self.value, align))

    def _align_down(self: _A, align: int) -> _A:
        return type(self)(align_down(self.value, align))

    def base_page_offset(self) -> int:
        """Offset within the 4 KiB page."""
        return self.value & (BASE_PAGE_SIZE - 1)

    def large_page_offset(self) -> int:
        """Offset within the 4 MiB page."""
        return self.value & (LARGE_PAGE_SIZE - 1)

    def align_down_to_base_page(self: _A) -> _A:
        return self._align_down(BASE_PAGE_SIZE)

    def align_down_to_large_page(self: _A) -> _A:
        return self._align_down(LARGE_PAGE_SIZE)

    def align_up_to_base_page(self: _A) -> _A:
        return self._align_up(BASE_PAGE_SIZE)

    def align_up_to_large_page(self: _A) -> _A:
        return self._align_up(LARGE_PAGE_SIZE)

    def is_base_page_aligned(self) -> bool:
        return self._align_down(BASE_PAGE_SIZE) == self

    def is_large_page_aligned(self) -> bool:
        return self._align_down(LARGE_PAGE_SIZE) == self

    def is_aligned(self, align: int) -> bool:
        """Whether the address is aligned to ``align``; False unless a power of two."""
        if not _is_power_of_two(align):
            return False
        return self._align_down(align) == self

    # -- conversions -------------------------------------------------------

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{self.value:#x}"

    def __format__(self, spec: str) -> str:
        if not spec:
            return str(self)
        return format(self.value, spec)

    # -- arithmetic --------------------------------------------------------

    def _operand(self, other: object) -> int | None:
        if type(other) is type(self):
            return other.value  # type: ignore[attr-defined]
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        return None

    def __add__(self: _A, other: object) -> _A:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return type(self)(_checked_u32(self.value + rhs))

    def __sub__(self: _A, other: object) -> _A:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return type(self)(_checked_u32(self.value - rhs))

    def __mod__(self, other: object):
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        result = self.value % rhs
        return type(self)(result) if isinstance(other, Address32) else result

    def __and__(self, other: object):
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        result = self.value & rhs & _U32_MASK
        if isinstance(other, Address32) or self._BITOPS_KEEP_TYPE:
            return type(self)(result)
        return result

    def __or__(self, other: object):
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        if not isinstance(other, Address32):
            rhs &= _U32_MASK
        result = self.value | rhs
        if isinstance(other, Address32) or self._BITOPS_KEEP_TYPE:
            return type(self)(result)
        return result

    def __rshift__(self, other: object) -> int:
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        return self.value >> other


@dataclass(frozen=True, order=True, repr=False)
class PAddr(Address32):
    """A physical address."""


@dataclass(frozen=True, order=True, repr=False)
class IOAddr(Address32):
    """An IO address (IOVA / DMA address for devices)."""


@dataclass(frozen=True, order=True, repr=False)
class VAddr(Address32):
    """A virtual address."""

    _BITOPS_KEEP_TYPE: ClassVar[bool] = True

    @classmethod
    def from_u32(cls, value: int) -> VAddr:
        return cls(value)

    @classmethod
    def from_usize(cls, value: int) -> VAddr:
        return cls(value)

    def __str__(self) -> str:
        return f"{self.value:#x}"