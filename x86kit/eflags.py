"""Processor state bits held in the 32-bit EFLAGS register."""

from __future__ import annotations

import enum

__all__ = ["EFlags"]


class EFlags(enum.IntFlag):
    """The EFLAGS register."""

    FLAGS_ID = 1 << 21
    FLAGS_VIP = 1 << 20
    FLAGS_VIF = 1 << 19
    FLAGS_AC = 1 << 18
    FLAGS_VM = 1 << 17
    FLAGS_RF = 1 << 16
    FLAGS_NT = 1 << 14
    FLAGS_IOPL0 = 0b00 << 12
    FLAGS_IOPL1 = 0b01 << 12
    FLAGS_IOPL2 = 0b10 << 12
    FLAGS_IOPL3 = 0b11 << 12
    FLAGS_OF = 1 << 11
    FLAGS_DF = 1 << 10
    FLAGS_IF = 1 << 9
    FLAGS_TF = 1 << 8
    FLAGS_SF = 1 << 7
    FLAGS_ZF = 1 << 6
    FLAGS_AF = 1 << 4
    FLAGS_PF = 1 << 2
    FLAGS_A1 = 1 << 1
    FLAGS_CF = 1 << 0

    @classmethod
    def new(cls) -> EFlags:
        """A fresh flags value with the always-set bit 1 on."""
        return cls.FLAGS_A1

    @classmethod
    def from_priv(cls, iopl: int) -> EFlags:
        """Flags holding only the given I/O privilege level (ring 0 to 3)."""
        ring = int(iopl)
        if not 0 <= ring <= 3:
            raise ValueError(f"privilege level must be 0..3, not {ring}")
        return cls(ring << 12)