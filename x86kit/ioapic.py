"""Driver for an I/O APIC, which routes hardware interrupts to local APICs."""

from __future__ import annotations

import enum
from typing import Protocol

__all__ = [
    "REG_ID",
    "REG_VER",
    "REG_TABLE",
    "T_IRQ0",
    "RegisterWindow",
    "RedirectionEntry",
    "IoApic",
]

#: Register index: ID.
REG_ID = 0x00
#: Register index: version.
REG_VER = 0x01
#: Base of the redirection table.
REG_TABLE = 0x10
#: Vector of IRQ 0.
T_IRQ0 = 32

# Byte offsets of the index and data registers in the MMIO window.
_REG_SELECT = 0x00
_REG_DATA = 0x10

_U32_MASK = 0xFFFF_FFFF


class RegisterWindow(Protocol):
    """32-bit access to the I/O APIC's memory-mapped registers."""

    def read32(self, offset: int) -> int:
        """Read the 32-bit register at byte ``offset``."""

    def write32(self, offset: int, value: int) -> None:
        """Write the 32-bit register at byte ``offset``."""


class RedirectionEntry(enum.IntFlag):
    """Configuration bits of the low register of a redirection table entry."""

    NONE = 0x0000_0000
    DISABLED = 0x0001_0000
    LEVEL = 0x0000_8000
    ACTIVELOW = 0x0000_2000
    LOGICAL = 0x0000_0800


class IoApic:
    """An I/O APIC accessed through its index/data register pair."""

    def __init__(self, window: RegisterWindow) -> None:
        self._window = window

    def _read(self, reg: int) -> int:
        self._window.write32(_REG_SELECT, reg)
        return self._window.read32(_REG_DATA) & _U32_MASK

    def _write(self, reg: int, data: int) -> None:
        self._window.write32(_REG_SELECT, reg)
        self._window.write32(_REG_DATA, data & _U32_MASK)

    def _write_irq(self, irq: int, flags: RedirectionEntry, dest: int) -> None:
        low = REG_TABLE + 2 * irq
        if irq < 0 or low + 1 > 0xFF or T_IRQ0 + irq > 0xFF:
            raise ValueError(f"irq {irq} is outside the redirection table")
        if not 0 <= dest <= 0xFF:
            raise ValueError(f"destination {dest} does not fit in 8 bits")
        self._write(low, (T_IRQ0 + irq) | int(flags))
        self._write(low + 1, dest << 24)

    def disable_all(self) -> None:
        """Mark every interrupt edge-triggered, active high, disabled and unrouted."""
        for irq in range(self.supported_interrupts()):
            self._write_irq(irq, RedirectionEntry.DISABLED, 0)

    def enable(self, irq: int, cpunum: int) -> None:
        """Route ``irq`` edge-triggered, active high, to the CPU with APIC ID ``cpunum``."""
        self._write_irq(irq, RedirectionEntry.NONE, cpunum)

    def id(self) -> int:
        return (self._read(REG_ID) >> 24) & 0xF

    def version(self) -> int:
        return self._read(REG_VER) & 0xFF

    def supported_interrupts(self) -> int:
        """Number of interrupts this I/O APIC handles (max redirection entry + 1)."""
        return (((self._read(REG_VER) >> 16) & 0xFF) + 1) & 0xFF