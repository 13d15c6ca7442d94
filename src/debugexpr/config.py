"""Session configuration for debugexpr.

A session describes the machine state expressions are evaluated against
(register values, guest memory map and images) and the evaluator limits.
Sessions are usually loaded from YAML:

    xlen: 32
    word_bits: 32
    registers:
      sp: 0x80001000
      a0: 42
    memory_base: 0x80000000
    memory_size: 0x100000
    memory_images:
      - path: build/image.bin
        address: 0x80000000
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Union

from debugexpr.errors import ConfigError, MemoryAccessError
from debugexpr.machine.memory import DEFAULT_MEMORY_BASE, DEFAULT_MEMORY_SIZE, GuestMemory
from debugexpr.machine.registers import RegisterFile
from debugexpr.tokenization.tokenizer import TokenizerConfig
from debugexpr.utils.logging import get_logger, normalize_level

logger = get_logger(__name__)


@dataclass
class MemoryImage:
    """A raw binary file loaded into guest memory."""

    path: str
    address: int = DEFAULT_MEMORY_BASE


@dataclass
class SessionConfig:
    """Configuration of an evaluation session.

    Attributes:
        xlen: Register width in bits (32 or 64)
        word_bits: Wrap results to this many bits; None keeps exact integers
        registers: Initial register values by name
        memory_base: First guest memory address
        memory_size: Guest memory size in bytes
        memory_images: Raw images loaded at startup
        max_tokens: Token limit per expression (None = unbounded)
        max_literal_length: Captured text limit per token (None = unbounded)
        log_level: loguru level for the CLI
        log_file: Optional file receiving a copy of the log
    """

    xlen: int = 32
    word_bits: Optional[int] = None
    registers: dict[str, int] = field(default_factory=dict)
    memory_base: int = DEFAULT_MEMORY_BASE
    memory_size: int = DEFAULT_MEMORY_SIZE
    memory_images: list[MemoryImage] = field(default_factory=list)
    max_tokens: Optional[int] = None
    max_literal_length: Optional[int] = None
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.xlen not in (32, 64):
            raise ConfigError(f"xlen must be 32 or 64, got {self.xlen}")
        if self.word_bits is not None and self.word_bits not in (32, 64):
            raise ConfigError(f"word_bits must be 32, 64 or null, got {self.word_bits}")
        if not isinstance(self.memory_size, int) or self.memory_size <= 0:
            raise ConfigError(f"memory_size must be a positive integer, got {self.memory_size!r}")
        if not isinstance(self.memory_base, int) or self.memory_base < 0:
            raise ConfigError(
                f"memory_base must be a non-negative integer, got {self.memory_base!r}"
            )
        for name in ("max_tokens", "max_literal_length"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or value <= 0):
                raise ConfigError(f"{name} must be a positive integer or null, got {value!r}")
        if not isinstance(self.registers, dict):
            raise ConfigError(f"registers must be a mapping, got {self.registers!r}")
        for name, value in self.registers.items():
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"register {name} must be an integer, got {value!r}")
        try:
            self.log_level = normalize_level(self.log_level)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ConfigError(f"log_file must be a path string, got {self.log_file!r}")
        try:
            self.memory_images = [
                image if isinstance(image, MemoryImage) else MemoryImage(**image)
                for image in self.memory_images
            ]
        except TypeError as e:
            raise ConfigError(f"invalid memory_images entry: {e}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionConfig":
        """Create a configuration from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(sorted(unknown))}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SessionConfig":
        """Load a configuration from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or is invalid
        """
        import yaml

        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot load config {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must be a mapping")

        logger.debug(f"Loaded session config from {path}")
        return cls.from_dict(data)

    def tokenizer_config(self) -> TokenizerConfig:
        return TokenizerConfig(
            max_tokens=self.max_tokens,
            max_literal_length=self.max_literal_length,
        )

    def build_machine(self) -> tuple[RegisterFile, GuestMemory]:
        """Create the register file and guest memory described by this config.

        Raises:
            ConfigError: On unknown register names, a bad memory map or
                unloadable images
        """
        try:
            registers = RegisterFile.from_dict(self.registers, xlen=self.xlen)
        except KeyError as e:
            raise ConfigError(f"unknown register {e}") from e
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid register values: {e}") from e

        try:
            memory = GuestMemory(base=self.memory_base, size=self.memory_size)
        except ValueError as e:
            raise ConfigError(f"invalid memory map: {e}") from e
        for image in self.memory_images:
            try:
                n = memory.load_image(image.path, image.address)
            except (OSError, TypeError, MemoryAccessError) as e:
                raise ConfigError(f"cannot load memory image {image.path}: {e}") from e
            logger.info(f"Loaded {n} bytes from {image.path} at {image.address:#x}")

        return registers, memory

    def build_evaluator(self):
        """Create an evaluator bound to a fresh machine for this session."""
        from debugexpr.evaluation.evaluator import ExprEvaluator

        registers, memory = self.build_machine()
        return ExprEvaluator(
            registers=registers,
            memory=memory,
            word_bits=self.word_bits,
            tokenizer_config=self.tokenizer_config(),
        )
