"""Models of x86 32-bit addresses, paging entries, EFLAGS, task state segments and APIC registers."""

__version__ = "0.1.0"

__all__ = ["addr32", "paging32", "eflags", "task32", "apic", "ioapic"]