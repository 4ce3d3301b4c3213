"""Local APIC interrupt command register encoding and the common APIC interface."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass
from typing import Callable, ClassVar

__all__ = [
    "DeliveryMode",
    "DestinationMode",
    "DeliveryStatus",
    "Level",
    "TriggerMode",
    "DestinationShorthand",
    "ApicKind",
    "ApicId",
    "Icr",
    "ApicControl",
]

_U32_MASK = 0xFFFF_FFFF


class DeliveryMode(enum.IntEnum):
    """IPI delivery mode."""

    FIXED = 0b000
    LOWEST_PRIORITY = 0b001
    SMI = 0b010
    RESERVED = 0b011
    NMI = 0b100
    INIT = 0b101
    STARTUP = 0b110


class DestinationMode(enum.IntEnum):
    PHYSICAL = 0
    LOGICAL = 1


class DeliveryStatus(enum.IntEnum):
    IDLE = 0
    SEND_PENDING = 1


class Level(enum.IntEnum):
    DEASSERT = 0
    ASSERT = 1


class TriggerMode(enum.IntEnum):
    EDGE = 0
    LEVEL = 1


class DestinationShorthand(enum.IntEnum):
    NO_SHORTHAND = 0b00
    MYSELF = 0b01
    ALL_INCLUDING_SELF = 0b10
    ALL_EXCLUDING_SELF = 0b11


class ApicKind(enum.Enum):
    """How a core's APIC ID is encoded."""

    XAPIC = "xapic"
    X2APIC = "x2apic"


_ID_LIMITS = {ApicKind.XAPIC: 0xFF, ApicKind.X2APIC: _U32_MASK}


@dataclass(frozen=True)
class ApicId:
    """The id of a core, as an 8-bit xAPIC ID or a 32-bit x2APIC ID."""

    kind: ApicKind
    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ApicKind):
            raise TypeError(f"kind must be an ApicKind, not {type(self.kind).__name__}")
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"id must be an int, not {type(self.value).__name__}")
        if not 0 <= self.value <= _ID_LIMITS[self.kind]:
            raise ValueError(f"{self.value:#x} is not a valid {self.kind.value} ID")

    @classmethod
    def xapic(cls, value: int) -> ApicId:
        return cls(ApicKind.XAPIC, value)

    @classmethod
    def x2apic(cls, value: int) -> ApicId:
        return cls(ApicKind.X2APIC, value)

    def x2apic_logical_id(self) -> int:
        """The logical x2APIC ID: (ID[19:4] << 16) | (1 << ID[3:0])."""
        return (
            (self.x2apic_logical_cluster_id() << 16)
            | (1 << self.x2apic_logical_cluster_address())
        ) & _U32_MASK

    def x2apic_logical_cluster_address(self) -> int:
        """The address of this core within its x2APIC cluster."""
        return self.value & 0xF

    def x2apic_logical_cluster_id(self) -> int:
        """The x2APIC cluster this core belongs to."""
        return (self.value >> 4) & 0xFFFF

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value


def _xapic_destination(destination: ApicId) -> int:
    # xAPIC destinations live in bits 56..63.
    if destination.kind is not ApicKind.XAPIC:
        raise ValueError("x2APIC IDs are not supported for xAPIC (use the x2APIC controller)")
    return destination.value << 56


def _x2apic_destination(destination: ApicId) -> int:
    # x2APIC destinations live in bits 32..63; xAPIC IDs are accepted as-is.
    return destination.value << 32


@dataclass(frozen=True)
class Icr:
    """A 64-bit interrupt command register value."""

    value: int

    @classmethod
    def _build(
        cls,
        encode: Callable[[ApicId], int],
        vector: int,
        destination: ApicId,
        destination_shorthand: DestinationShorthand,
        delivery_mode: DeliveryMode,
        destination_mode: DestinationMode,
        delivery_status: DeliveryStatus,
        level: Level,
        trigger_mode: TriggerMode,
    ) -> Icr:
        if not 0 <= vector <= 0xFF:
            raise ValueError(f"vector {vector} does not fit in 8 bits")
        return cls(
            encode(destination)
            | DestinationShorthand(destination_shorthand) << 18
            | TriggerMode(trigger_mode) << 15
            | Level(level) << 14
            | DeliveryStatus(delivery_status) << 12
            | DestinationMode(destination_mode) << 11
            | DeliveryMode(delivery_mode) << 8
            | vector
        )

    @classmethod
    def for_x2apic(
        cls, vector, destination, destination_shorthand, delivery_mode,
        destination_mode, delivery_status, level, trigger_mode,
    ) -> Icr:
        """An ICR value for an x2APIC controller."""
        return cls._build(
            _x2apic_destination, vector, destination, destination_shorthand,
            delivery_mode, destination_mode, delivery_status, level, trigger_mode,
        )

    @classmethod
    def for_xapic(
        cls, vector, destination, destination_shorthand, delivery_mode,
        destination_mode, delivery_status, level, trigger_mode,
    ) -> Icr:
        """An ICR value for an xAPIC controller; the destination must be an xAPIC ID."""
        return cls._build(
            _xapic_destination, vector, destination, destination_shorthand,
            delivery_mode, destination_mode, delivery_status, level, trigger_mode,
        )

    def lower(self) -> int:
        """The lower 32 bits."""
        return self.value & _U32_MASK

    def upper(self) -> int:
        """The upper 32 bits."""
        return (self.value >> 32) & _U32_MASK


class ApicControl(abc.ABC):
    """Common interface of local APIC devices (xAPIC, x2APIC).

    Subclasses set ``kind`` to pick how IPI destinations are encoded.
    """

    kind: ClassVar[ApicKind]

    @abc.abstractmethod
    def bsp(self) -> bool:
        """Whether this is the bootstrap processor."""

    @abc.abstractmethod
    def id(self) -> int:
        """The APIC ID."""

    @abc.abstractmethod
    def logical_id(self) -> int:
        """The logical APIC ID."""

    @abc.abstractmethod
    def version(self) -> int:
        """The APIC version."""

    @abc.abstractmethod
    def eoi(self) -> None:
        """Acknowledge interrupt delivery."""

    @abc.abstractmethod
    def tsc_enable(self, vector: int) -> None:
        """Enable the TSC deadline timer on ``vector``."""

    @abc.abstractmethod
    def tsc_set(self, value: int) -> None:
        """Set the TSC deadline."""

    @abc.abstractmethod
    def send_ipi(self, icr: Icr) -> None:
        """Send a generic IPI."""

    def _icr(self, *args) -> Icr:
        factory = Icr.for_x2apic if self.kind is ApicKind.X2APIC else Icr.for_xapic
        return factory(*args)

    def ipi_init(self, core: ApicId) -> None:
        """Send an INIT IPI to a core."""
        self.send_ipi(self._icr(
            0, core, DestinationShorthand.NO_SHORTHAND, DeliveryMode.INIT,
            DestinationMode.PHYSICAL, DeliveryStatus.IDLE, Level.ASSERT, TriggerMode.LEVEL,
        ))

    def ipi_init_deassert(self) -> None:
        """Deassert INIT; always broadcast to every core including this one."""
        self.send_ipi(self._icr(
            0, ApicId(self.kind, 0), DestinationShorthand.ALL_INCLUDING_SELF,
            DeliveryMode.INIT, DestinationMode.PHYSICAL, DeliveryStatus.IDLE,
            Level.DEASSERT, TriggerMode.LEVEL,
        ))

    def ipi_startup(self, core: ApicId, start_page: int) -> None:
        """Send a STARTUP IPI pointing the core at ``start_page``."""
        self.send_ipi(self._icr(
            start_page, core, DestinationShorthand.NO_SHORTHAND, DeliveryMode.STARTUP,
            DestinationMode.PHYSICAL, DeliveryStatus.IDLE, Level.ASSERT, TriggerMode.EDGE,
        ))