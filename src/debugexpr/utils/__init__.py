"""Utility functions and common types for debugexpr."""

from debugexpr.utils.types import TokenKind, Token, UNARY_FORMS
from debugexpr.utils.logging import setup_logging, get_logger, normalize_level

__all__ = [
    "TokenKind",
    "Token",
    "UNARY_FORMS",
    "setup_logging",
    "get_logger",
    "normalize_level",
]
