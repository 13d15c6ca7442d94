"""RISC-V integer register file.

Holds the values the debugger exposes through ``$name`` references. Names
follow the ABI mnemonics; the zero register is spelled ``$0``.
"""

from __future__ import annotations

from typing import Optional

from debugexpr.machine.base import RegisterBackend

# Integer registers x0..x31 in index order
GPR_NAMES: tuple[str, ...] = (
    "$0", "ra", "sp", "gp", "tp", "t0", "t1", "t2",
    "s0", "s1", "a0", "a1", "a2", "a3", "a4", "a5",
    "a6", "a7", "s2", "s3", "s4", "s5", "s6", "s7",
    "s8", "s9", "s10", "s11", "t3", "t4", "t5", "t6",
)

# Common aliases accepted by get/set (not by the expression lexer)
REGISTER_ALIASES: dict[str, str] = {
    "zero": "$0",
    "x0": "$0",
    "fp": "s0",
}

ZERO_REGISTER = "$0"
PC_REGISTER = "pc"


class RegisterFile(RegisterBackend):
    """Integer register file of an RV32/RV64 hart.

    Values are stored as unsigned ``xlen``-bit words. Writes to the zero
    register are dropped.
    """

    def __init__(self, xlen: int = 32, pc: int = 0):
        if xlen not in (32, 64):
            raise ValueError(f"xlen must be 32 or 64, got {xlen}")
        self.xlen = xlen
        self.mask = (1 << xlen) - 1
        self._gpr = [0] * len(GPR_NAMES)
        self._index = {name: i for i, name in enumerate(GPR_NAMES)}
        self.pc = pc & self.mask

    @classmethod
    def from_dict(cls, values: dict[str, int], xlen: int = 32) -> "RegisterFile":
        """Create a register file from a ``{name: value}`` mapping.

        Raises:
            KeyError: If a name is not a register
        """
        regs = cls(xlen=xlen)
        for name, value in values.items():
            regs.set(name, value)
        return regs

    def _canonical(self, name: str) -> Optional[str]:
        name = name.lower()
        name = REGISTER_ALIASES.get(name, name)
        if name in self._index or name == PC_REGISTER:
            return name
        return None

    def __contains__(self, name: str) -> bool:
        return self._canonical(name) is not None

    def get(self, name: str) -> int:
        """Read a register.

        Raises:
            KeyError: If name is not a register
        """
        canonical = self._canonical(name)
        if canonical is None:
            raise KeyError(name)
        if canonical == PC_REGISTER:
            return self.pc
        return self._gpr[self._index[canonical]]

    def set(self, name: str, value: int) -> None:
        """Write a register, truncating to xlen bits.

        Raises:
            KeyError: If name is not a register
        """
        canonical = self._canonical(name)
        if canonical is None:
            raise KeyError(name)
        if canonical == PC_REGISTER:
            self.pc = value & self.mask
        elif canonical != ZERO_REGISTER:
            self._gpr[self._index[canonical]] = value & self.mask

    def lookup_register(self, name: str) -> tuple[int, bool]:
        canonical = self._canonical(name)
        if canonical is None:
            return 0, False
        return self.get(canonical), True

    def snapshot(self) -> dict[str, int]:
        """Return all registers in index order, followed by pc."""
        state = dict(zip(GPR_NAMES, self._gpr))
        state[PC_REGISTER] = self.pc
        return state
