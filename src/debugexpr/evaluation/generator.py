"""Random expression generator for evaluator self-tests.

Builds random expression trees, renders them with the minimum parentheses
implied by operator priority and left associativity, and computes the
expected value alongside. Lines of ``<value> <expression>`` produced by
:func:`generate_corpus` can be replayed with ``debugexpr check``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterator, Optional

from debugexpr.evaluation.evaluator import truncating_div
from debugexpr.evaluation.spans import OPERATOR_PRIORITY
from debugexpr.utils.types import TokenKind

BINARY_OPERATORS = (
    TokenKind.ADD,
    TokenKind.SUB,
    TokenKind.MUL,
    TokenKind.DIV,
    TokenKind.EQ,
    TokenKind.NE,
    TokenKind.AND,
)

# Operand nodes never need parentheses
ATOM_PRIORITY = 5


@dataclass
class GeneratorConfig:
    """Configuration for random expression generation."""

    max_depth: int = 4
    max_literal: int = 100
    hex_probability: float = 0.25
    negation_probability: float = 0.15
    whitespace_probability: float = 0.2
    seed: Optional[int] = None


@dataclass
class GeneratedExpr:
    """An expression with its expected value."""

    text: str
    value: int
    priority: int = ATOM_PRIORITY


def _compute(op: TokenKind, left: int, right: int) -> int:
    if op is TokenKind.ADD:
        return left + right
    if op is TokenKind.SUB:
        return left - right
    if op is TokenKind.MUL:
        return left * right
    if op is TokenKind.DIV:
        return truncating_div(left, right)
    if op is TokenKind.EQ:
        return int(left == right)
    if op is TokenKind.NE:
        return int(left != right)
    return int(bool(left) and bool(right))


@dataclass
class ExpressionGenerator:
    """Generates random expressions with known values."""

    config: GeneratorConfig = field(default_factory=GeneratorConfig)

    def __post_init__(self):
        self.rng = random.Random(self.config.seed)

    def generate(self) -> GeneratedExpr:
        return self._gen(self.config.max_depth)

    def __iter__(self) -> Iterator[GeneratedExpr]:
        while True:
            yield self.generate()

    def _space(self) -> str:
        return " " if self.rng.random() < self.config.whitespace_probability else ""

    def _literal(self) -> GeneratedExpr:
        value = self.rng.randint(0, self.config.max_literal)
        if self.rng.random() < self.config.hex_probability:
            return GeneratedExpr(f"{value:#x}", value)
        return GeneratedExpr(str(value), value)

    def _paren(self, child: GeneratedExpr) -> GeneratedExpr:
        return GeneratedExpr(f"({self._space()}{child.text}{self._space()})", child.value)

    def _gen(self, depth: int) -> GeneratedExpr:
        if depth <= 0 or self.rng.random() < 0.25:
            return self._literal()

        if self.rng.random() < self.config.negation_probability:
            child = self._gen(depth - 1)
            # A prefix operator may not directly follow another one
            if child.priority <= OPERATOR_PRIORITY[TokenKind.NEG]:
                child = self._paren(child)
            return GeneratedExpr(
                f"-{child.text}", -child.value, OPERATOR_PRIORITY[TokenKind.NEG]
            )

        op = self.rng.choice(BINARY_OPERATORS)
        prio = OPERATOR_PRIORITY[op]
        left = self._gen(depth - 1)
        right = self._gen(depth - 1)
        if op is TokenKind.DIV:
            while right.value == 0:
                right = self._gen(depth - 1)

        if left.priority < prio:
            left = self._paren(left)
        if right.priority <= prio:
            right = self._paren(right)

        text = f"{left.text}{self._space()}{op.value}{self._space()}{right.text}"
        return GeneratedExpr(text, _compute(op, left.value, right.value), prio)


def generate_corpus(count: int, config: Optional[GeneratorConfig] = None) -> list[str]:
    """Generate ``count`` lines of ``<value> <expression>``."""
    generator = ExpressionGenerator(config or GeneratorConfig())
    lines = []
    for _ in range(count):
        generated = generator.generate()
        lines.append(f"{generated.value} {generated.text}")
    return lines


def parse_corpus_line(line: str) -> tuple[int, str]:
    """Split a corpus line into (expected value, expression).

    Raises:
        ValueError: If the line has no expression or a malformed value
    """
    value, sep, text = line.strip().partition(" ")
    if not sep or not text.strip():
        raise ValueError(f"malformed corpus line: {line!r}")
    return int(value, 0), text
