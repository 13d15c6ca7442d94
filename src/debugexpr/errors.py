"""Error types for debugexpr."""

from __future__ import annotations

from typing import Optional


class DebugExprError(Exception):
    """Base error for debugexpr."""

    pass


class ExprError(DebugExprError):
    """An expression could not be tokenized or evaluated."""

    pass


class LexError(ExprError):
    """No tokenizer rule matches at some position of the input."""

    def __init__(self, position: int, text: str):
        self.position = position
        self.text = text
        super().__init__(
            f"no match at position {position}\n{text}\n{' ' * position}^"
        )

    @property
    def remaining(self) -> str:
        """Unconsumed input starting at the failing position."""
        return self.text[self.position :]


class TokenOverflowError(ExprError):
    """Token count or captured literal length exceeds the configured limit."""

    pass


class ParseError(ExprError):
    """A token range is empty or has no resolvable main operator."""

    def __init__(self, message: str, start: Optional[int] = None, end: Optional[int] = None):
        self.start = start
        self.end = end
        if start is not None and end is not None:
            message = f"{message} (tokens {start}..{end})"
        super().__init__(message)


class UnknownRegisterError(ExprError):
    """A register reference names no register of the machine."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown register '{name}'")


class DivisionByZeroError(ExprError):
    """Integer division by zero.

    Emulated machine division by zero has no defined value, so evaluation
    stops instead of producing one.
    """

    pass


class MemoryAccessError(DebugExprError):
    """Guest memory access outside the mapped range."""

    def __init__(self, address: int, width: int):
        self.address = address
        self.width = width
        super().__init__(f"address {address:#x} (width {width}) is out of bound")


class RuleCompilationError(DebugExprError):
    """A tokenizer rule pattern failed to compile."""

    pass


class ConfigError(DebugExprError):
    """Invalid session configuration."""

    pass
