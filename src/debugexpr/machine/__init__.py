"""Machine state collaborators for expression evaluation.

- RegisterFile: RISC-V integer registers looked up by ``$name`` references
- GuestMemory: byte-addressable guest memory read by dereference
"""

from debugexpr.machine.base import RegisterBackend, MemoryBackend
from debugexpr.machine.registers import RegisterFile, GPR_NAMES
from debugexpr.machine.memory import (
    GuestMemory,
    DEFAULT_MEMORY_BASE,
    DEFAULT_MEMORY_SIZE,
)

__all__ = [
    "RegisterBackend",
    "MemoryBackend",
    "RegisterFile",
    "GPR_NAMES",
    "GuestMemory",
    "DEFAULT_MEMORY_BASE",
    "DEFAULT_MEMORY_SIZE",
]
