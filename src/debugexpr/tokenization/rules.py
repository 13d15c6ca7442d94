"""Ordered lexical rule table for debugger expressions.

Rules are tried in declaration order and the first rule matching at the
current position wins, so specific patterns must precede the generic ones
they overlap with (hex before decimal). The table is compiled once per
process and is read-only afterwards.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from debugexpr.errors import RuleCompilationError
from debugexpr.utils.types import TokenKind

# Register sigil accepted by the lexer
REGISTER_SIGIL = "$"

# Register names accepted after the sigil. Python alternation is first-match,
# so s10/s11 come before s[0-9].
REGISTER_PATTERN = r"\$(\$0|ra|sp|gp|tp|t[0-6]|s1[01]|s[0-9]|a[0-7])"


@dataclass(frozen=True)
class Rule:
    """A (pattern, token kind) pair of the rule table."""

    pattern: str
    kind: TokenKind


RULES: tuple[Rule, ...] = (
    Rule(r"\s+", TokenKind.WHITESPACE),
    Rule(r"\+", TokenKind.ADD),
    Rule(r"==", TokenKind.EQ),
    Rule(r"-", TokenKind.SUB),
    Rule(r"\*", TokenKind.MUL),
    Rule(r"/", TokenKind.DIV),
    Rule(r"\(", TokenKind.LPAREN),
    Rule(r"\)", TokenKind.RPAREN),
    Rule(r"0x[0-9a-fA-F]+", TokenKind.HEX),
    Rule(r"[0-9]+", TokenKind.UINT),
    Rule(r"!=", TokenKind.NE),
    Rule(r"&&", TokenKind.AND),
    Rule(REGISTER_PATTERN, TokenKind.REG),
)


@dataclass(frozen=True)
class CompiledRule:
    """A rule together with its compiled pattern."""

    index: int
    rule: Rule
    regex: re.Pattern

    @property
    def kind(self) -> TokenKind:
        return self.rule.kind


def compile_rules(rules: tuple[Rule, ...] = RULES) -> tuple[CompiledRule, ...]:
    """Compile a rule table.

    Args:
        rules: Ordered rules to compile

    Returns:
        Compiled rules in the same order

    Raises:
        RuleCompilationError: If any pattern is not a valid regular expression
    """
    compiled = []
    for i, rule in enumerate(rules):
        try:
            regex = re.compile(rule.pattern)
        except re.error as e:
            raise RuleCompilationError(
                f"regex compilation failed: {e}\n{rule.pattern}"
            ) from e
        compiled.append(CompiledRule(index=i, rule=rule, regex=regex))
    return tuple(compiled)


@lru_cache(maxsize=1)
def get_compiled_rules() -> tuple[CompiledRule, ...]:
    """Return the process-wide compiled rule table, compiling it on first use."""
    return compile_rules(RULES)
