"""Machine state interfaces consumed by the evaluator."""

from __future__ import annotations

from abc import ABC, abstractmethod


class RegisterBackend(ABC):
    """Abstract source of register values."""

    @abstractmethod
    def lookup_register(self, name: str) -> tuple[int, bool]:
        """Look up a register by name (without sigil).

        Returns:
            (value, ok); ok is False if the register does not exist
        """
        pass


class MemoryBackend(ABC):
    """Abstract source of guest memory contents."""

    @abstractmethod
    def read_memory(self, address: int, width: int) -> int:
        """Read an unsigned little-endian value of ``width`` bytes."""
        pass
