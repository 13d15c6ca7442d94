"""
debugexpr: expression evaluator for an emulated RISC-V debugger

Evaluates debugger expressions such as ``*($sp + 4) == 0x1A && $a0 != 0``
against register and memory state.

Key Components:
    - tokenization: ordered regex rule table and tokenizer
    - evaluation: span matching, main-operator selection, recursive evaluator
    - machine: register file and guest memory collaborators
    - config: YAML session configuration
    - cli: command-line front-end

Example:
    >>> from debugexpr import ExprEvaluator, RegisterFile
    >>> regs = RegisterFile.from_dict({"a0": 40})
    >>> ExprEvaluator(registers=regs).expr("$a0 + 2")
    (42, True)
"""

__version__ = "0.1.0"

from debugexpr.errors import (
    DebugExprError,
    ExprError,
    LexError,
    TokenOverflowError,
    ParseError,
    UnknownRegisterError,
    DivisionByZeroError,
    MemoryAccessError,
    ConfigError,
)
from debugexpr.utils.types import Token, TokenKind
from debugexpr.tokenization import ExprTokenizer, TokenizerConfig, tokenize
from debugexpr.evaluation import ExprEvaluator, evaluate, expr
from debugexpr.machine import RegisterFile, GuestMemory
from debugexpr.config import SessionConfig

__all__ = [
    # Errors
    "DebugExprError",
    "ExprError",
    "LexError",
    "TokenOverflowError",
    "ParseError",
    "UnknownRegisterError",
    "DivisionByZeroError",
    "MemoryAccessError",
    "ConfigError",
    # Tokens
    "Token",
    "TokenKind",
    "ExprTokenizer",
    "TokenizerConfig",
    "tokenize",
    # Evaluation
    "ExprEvaluator",
    "evaluate",
    "expr",
    # Machine
    "RegisterFile",
    "GuestMemory",
    # Configuration
    "SessionConfig",
]
