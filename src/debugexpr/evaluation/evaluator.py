"""Recursive expression evaluator.

Reduces an inclusive token range to a value without building a parse tree:

1. An empty range is an error.
2. A single token is a literal or a register reference.
3. A range wrapped in one enclosing parenthesis pair evaluates its interior.
4. Otherwise the range splits at its main operator. The right side is
   evaluated first, then the left side (binary operators only). Both sides
   are always evaluated; ``&&`` does not short-circuit. A prefix operator
   chosen as the main operator must open its range.

Division truncates toward zero. Division by zero raises
``DivisionByZeroError``: the emulated machine gives it no defined value.
Recursion depth grows with operator chains and parenthesis nesting; input
deeper than the interpreter allows fails with ``TokenOverflowError``.
"""

from __future__ import annotations

from typing import Optional, Sequence

from debugexpr.errors import (
    DebugExprError,
    DivisionByZeroError,
    ParseError,
    TokenOverflowError,
    UnknownRegisterError,
)
from debugexpr.evaluation.spans import find_main_operator_index, is_paired
from debugexpr.machine.base import MemoryBackend, RegisterBackend
from debugexpr.machine.memory import GuestMemory
from debugexpr.machine.registers import RegisterFile
from debugexpr.tokenization.tokenizer import ExprTokenizer, TokenizerConfig
from debugexpr.utils.logging import get_logger
from debugexpr.utils.types import Token, TokenKind

logger = get_logger(__name__)

# Width in bytes of a dereference
DEREF_WIDTH = 4


class ExprEvaluator:
    """Evaluator for debugger expressions.

    Each call tokenizes into a fresh token list, so an evaluator holds no
    per-expression state and may be shared.

    Args:
        registers: Register value source for ``$name`` references
        memory: Memory source for dereference
        word_bits: If set, wrap every intermediate result to an unsigned
            word of this many bits; if None, integers are unbounded
        tokenizer_config: Optional tokenizer limits
    """

    def __init__(
        self,
        registers: Optional[RegisterBackend] = None,
        memory: Optional[MemoryBackend] = None,
        word_bits: Optional[int] = None,
        tokenizer_config: Optional[TokenizerConfig] = None,
    ):
        if word_bits is not None and word_bits <= 0:
            raise ValueError(f"word_bits must be positive, got {word_bits}")
        self.registers = registers if registers is not None else RegisterFile()
        self.memory = memory if memory is not None else GuestMemory()
        self.word_bits = word_bits
        self.tokenizer = ExprTokenizer(tokenizer_config)

    def evaluate(self, text: str) -> int:
        """Evaluate an expression.

        Args:
            text: Expression text, e.g. ``"*($sp + 4) == 0x1A"``

        Returns:
            Expression value

        Raises:
            ExprError: On lexical, syntax, register or division errors
            MemoryAccessError: If a dereference leaves guest memory
        """
        tokens = self.tokenizer.tokenize(text)
        try:
            return self.eval_range(tokens, 0, len(tokens) - 1)
        except RecursionError as e:
            raise TokenOverflowError(
                f"expression nested too deeply ({len(tokens)} tokens)"
            ) from e

    def expr(self, text: str) -> tuple[int, bool]:
        """Evaluate an expression, reporting failure as a flag.

        Returns:
            (value, ok); value is 0 when ok is False
        """
        try:
            return self.evaluate(text), True
        except DebugExprError as e:
            logger.warning(f"cannot evaluate '{text}': {e}")
            return 0, False

    def eval_range(self, tokens: Sequence[Token], p: int, q: int) -> int:
        """Evaluate the inclusive token range ``[p, q]``."""
        if p > q:
            raise ParseError("empty expression", p, q)

        if p == q:
            return self._eval_operand(tokens[p])

        if is_paired(tokens, p, q):
            return self.eval_range(tokens, p + 1, q - 1)

        op_index = find_main_operator_index(tokens, p, q)
        if op_index is None:
            logger.warning(f"can't find main operator in tokens {p}..{q}")
            raise ParseError("can't find main operator", p, q)

        op = tokens[op_index].kind
        if op.is_unary and op_index != p:
            raise ParseError(f"unexpected tokens before '{op.value}'", p, op_index - 1)
        right = self.eval_range(tokens, op_index + 1, q)

        if op is TokenKind.DEREF:
            return self._wrap(self.memory.read_memory(right, DEREF_WIDTH))
        if op is TokenKind.NEG:
            return self._wrap(-right)

        left = self.eval_range(tokens, p, op_index - 1)
        return self._apply(op, left, right)

    def _eval_operand(self, token: Token) -> int:
        if token.kind is TokenKind.HEX:
            return self._wrap(int(token.text, 16))
        if token.kind is TokenKind.UINT:
            return self._wrap(int(token.text, 10))
        if token.kind is TokenKind.REG:
            name = token.register_name
            value, ok = self.registers.lookup_register(name)
            if not ok:
                raise UnknownRegisterError(name)
            return self._wrap(value)
        raise ParseError(f"unexpected token '{token}' at position {token.position}")

    def _apply(self, op: TokenKind, left: int, right: int) -> int:
        if op is TokenKind.ADD:
            return self._wrap(left + right)
        if op is TokenKind.SUB:
            return self._wrap(left - right)
        if op is TokenKind.MUL:
            return self._wrap(left * right)
        if op is TokenKind.DIV:
            if right == 0:
                raise DivisionByZeroError(f"division by zero: {left} / 0")
            return self._wrap(truncating_div(left, right))
        if op is TokenKind.EQ:
            return int(left == right)
        if op is TokenKind.NE:
            return int(left != right)
        if op is TokenKind.AND:
            return int(bool(left) and bool(right))
        raise ValueError(f"{op.value} is not a binary operator")

    def _wrap(self, value: int) -> int:
        if self.word_bits is None:
            return value
        return value & ((1 << self.word_bits) - 1)


def truncating_div(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


_default_evaluator: Optional[ExprEvaluator] = None


def _get_default_evaluator() -> ExprEvaluator:
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = ExprEvaluator()
    return _default_evaluator


def evaluate(text: str) -> int:
    """Evaluate an expression against a zeroed machine, raising on failure."""
    return _get_default_evaluator().evaluate(text)


def expr(text: str) -> tuple[int, bool]:
    """Evaluate an expression against a zeroed machine.

    Returns:
        (value, ok)
    """
    return _get_default_evaluator().expr(text)
