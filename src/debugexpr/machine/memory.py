"""Guest physical memory backed by a numpy byte array."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np

from debugexpr.errors import MemoryAccessError
from debugexpr.machine.base import MemoryBackend

# Default guest memory map
DEFAULT_MEMORY_BASE = 0x80000000
DEFAULT_MEMORY_SIZE = 0x8000000  # 128 MiB

SUPPORTED_WIDTHS = (1, 2, 4, 8)


class GuestMemory(MemoryBackend):
    """Contiguous little-endian guest memory mapped at ``base``.

    Attributes:
        base: First mapped guest address
        size: Number of mapped bytes
    """

    def __init__(self, base: int = DEFAULT_MEMORY_BASE, size: int = DEFAULT_MEMORY_SIZE):
        if size <= 0:
            raise ValueError(f"memory size must be positive, got {size}")
        if base < 0:
            raise ValueError(f"memory base must be non-negative, got {base:#x}")
        self.base = base
        self.size = size
        self._data = np.zeros(size, dtype=np.uint8)

    @property
    def end(self) -> int:
        """One past the last mapped guest address."""
        return self.base + self.size

    def in_bounds(self, address: int, width: int = 1) -> bool:
        return self.base <= address and address + width <= self.end

    def _offset(self, address: int, width: int) -> int:
        if not self.in_bounds(address, width):
            raise MemoryAccessError(address, width)
        return address - self.base

    def read_memory(self, address: int, width: int) -> int:
        if width not in SUPPORTED_WIDTHS:
            raise ValueError(f"unsupported access width {width}")
        offset = self._offset(address, width)
        return int.from_bytes(self._data[offset : offset + width].tobytes(), "little")

    def write_memory(self, address: int, width: int, value: int) -> None:
        """Store the low ``width`` bytes of value, little-endian."""
        if width not in SUPPORTED_WIDTHS:
            raise ValueError(f"unsupported access width {width}")
        offset = self._offset(address, width)
        value &= (1 << (8 * width)) - 1
        self._data[offset : offset + width] = np.frombuffer(
            value.to_bytes(width, "little"), dtype=np.uint8
        )

    def read_bytes(self, address: int, length: int) -> bytes:
        offset = self._offset(address, length)
        return self._data[offset : offset + length].tobytes()

    def load(self, data: bytes, address: int) -> None:
        """Copy raw bytes into memory starting at address."""
        offset = self._offset(address, len(data))
        self._data[offset : offset + len(data)] = np.frombuffer(data, dtype=np.uint8)

    def load_image(self, path: Union[str, Path], address: int) -> int:
        """Load a raw binary image file.

        Returns:
            Number of bytes loaded
        """
        data = Path(path).read_bytes()
        self.load(data, address)
        return len(data)
