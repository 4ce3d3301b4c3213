# x86kit

Pure-Python models of x86 hardware data structures, for building, inspecting
and testing the values an operating-system kernel hands to the processor.

## What it covers

- `x86kit.addr32`: 32-bit physical, I/O and virtual addresses (`PAddr`,
  `IOAddr`, `VAddr`, all built on `Address32`) with 4 KiB / 4 MiB page
  alignment helpers, plus the plain `align_up` and `align_down` functions and
  the constants `BASE_PAGE_SHIFT`, `BASE_PAGE_SIZE`, `LARGE_PAGE_SIZE` and
  `CACHE_LINE_SIZE`. Values are truncated to 32 bits on construction;
  arithmetic that leaves the 32-bit range raises `OverflowError`.
- `x86kit.paging32`: IA-32 (non-PAE) page directory and page table entries
  (`PDEntry`, `PTEntry`), their flag sets (`PDFlags`, `PTFlags`),
  `PAGE_SIZE_ENTRIES`, and the `pd_index` / `pt_index` helpers for virtual
  addresses. `PDEntry.new` and `PTEntry.new` raise `ValueError` for an address
  that is not page aligned or has bits outside the entry's address field.
- `x86kit.eflags`: the `EFlags` register flags, with `EFlags.new()` (bit 1
  set) and `EFlags.from_priv(ring)` for an I/O privilege level 0 to 3.
- `x86kit.task32`: the 32-bit `TaskStateSegment`, packed to and unpacked from
  its 104-byte (`TSS_SIZE`) little-endian layout. `iobp_offset` defaults to
  the segment size; reserved fields are written as zero.
- `x86kit.apic`: interrupt command register encoding (`Icr`), APIC IDs
  (`ApicId`, of kind `ApicKind.XAPIC` or `ApicKind.X2APIC`), the IPI
  enumerations (`DeliveryMode`, `DestinationMode`, `DeliveryStatus`, `Level`,
  `TriggerMode`, `DestinationShorthand`), and the abstract `ApicControl`
  interface a local APIC driver implements.
- `x86kit.ioapic`: an `IoApic` driver that programs the redirection table
  through any object offering `read32(offset)` and `write32(offset, value)`
  (the `RegisterWindow` protocol), with the `RedirectionEntry` flags.

## Examples

Page alignment:

```python
from x86kit.addr32 import PAddr

addr = PAddr(0x1001)
addr.base_page_offset()        # 1
addr.align_up_to_base_page()   # PAddr at 0x2000
addr.is_aligned(4)             # False
```

Page table entries:

```python
from x86kit.addr32 import PAddr, VAddr
from x86kit.paging32 import PTEntry, PTFlags, pd_index, pt_index

entry = PTEntry.new(PAddr(0x5000), PTFlags.P | PTFlags.RW)
entry.is_present()             # True
entry.address() == PAddr(0x5000)   # True

va = VAddr(0x00401000)
pd_index(va), pt_index(va)     # (1, 1)
```

Building an interrupt command register value:

```python
from x86kit.apic import (
    ApicId, DeliveryMode, DeliveryStatus, DestinationMode,
    DestinationShorthand, Icr, Level, TriggerMode,
)

icr = Icr.for_x2apic(
    0x08, ApicId.x2apic(3),
    DestinationShorthand.NO_SHORTHAND, DeliveryMode.STARTUP,
    DestinationMode.PHYSICAL, DeliveryStatus.IDLE,
    Level.ASSERT, TriggerMode.EDGE,
)
icr.lower(), icr.upper()       # (0x608, 3)
```

`Icr.for_xapic` puts the destination in bits 56 to 63 and raises
`ValueError` for an x2APIC ID.

Implementing `ApicControl`: a subclass sets the class attribute `kind` and
provides `bsp`, `id`, `logical_id`, `version`, `eoi`, `tsc_enable`, `tsc_set`
and `send_ipi`; `ipi_init`, `ipi_init_deassert` and `ipi_startup` are then
built on `send_ipi`.

Programming an I/O APIC through a register window:

```python
from x86kit.ioapic import IoApic

class Window:
    def __init__(self):
        self.select = 0
        self.regs = {0x01: 0x0017_0011}

    def read32(self, offset):
        return self.regs.get(self.select, 0)

    def write32(self, offset, value):
        if offset == 0x00:
            self.select = value
        else:
            self.regs[self.select] = value

ioapic = IoApic(Window())
ioapic.supported_interrupts()  # 24
ioapic.enable(1, cpunum=0)
```

A task state segment:

```python
from x86kit.task32 import TaskStateSegment

tss = TaskStateSegment(esp0=0x9000, ss0=0x10)
raw = tss.pack()
TaskStateSegment.unpack(raw) == tss   # True
```

## What it does not do

The package only models and encodes values. It does not touch real hardware:
there is no access to model-specific registers, no reading or writing of the
live EFLAGS register, no loading of segment registers, and no concrete xAPIC
or x2APIC driver. A local APIC driver is something you write against
`ApicControl`, and an `IoApic` talks only to the register window you give it.

## Running the tests

```
pip install -e ".[test]"
pytest
```