"""Core type definitions for debugexpr.

Defines the token kinds recognized by the expression lexer and the token
record passed between the tokenizer and the evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TokenKind(str, Enum):
    """Kind tag of a lexical token.

    Values are the printable spelling used in diagnostics and token dumps.
    """

    # Recognized by the rule table but never stored in a token sequence
    WHITESPACE = "WS"

    # Operands
    UINT = "UINT"
    HEX = "HEX"
    REG = "REG"

    # Binary operators
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    EQ = "=="
    NE = "!="
    AND = "&&"

    # Unary operators (produced only by disambiguation)
    DEREF = "DEREF"
    NEG = "NEG"

    # Grouping
    LPAREN = "("
    RPAREN = ")"

    @property
    def is_operand(self) -> bool:
        """Check if this kind is a literal or register reference."""
        return self in {TokenKind.UINT, TokenKind.HEX, TokenKind.REG}

    @property
    def captures_text(self) -> bool:
        """Check if tokens of this kind keep their matched text."""
        return self.is_operand

    @property
    def is_unary(self) -> bool:
        return self in {TokenKind.DEREF, TokenKind.NEG}

    @property
    def is_binary(self) -> bool:
        return self in {
            TokenKind.ADD,
            TokenKind.SUB,
            TokenKind.MUL,
            TokenKind.DIV,
            TokenKind.EQ,
            TokenKind.NE,
            TokenKind.AND,
        }

    @property
    def is_operator(self) -> bool:
        return self.is_unary or self.is_binary

    @property
    def expects_operand(self) -> bool:
        """Check if an operand (not an operator) must follow this kind.

        A ``*`` or ``-`` that follows such a token is a prefix operator.
        """
        return self.is_binary or self is TokenKind.LPAREN


# Prefix forms of the context-free ``*`` and ``-`` lexemes
UNARY_FORMS: dict[TokenKind, TokenKind] = {
    TokenKind.MUL: TokenKind.DEREF,
    TokenKind.SUB: TokenKind.NEG,
}


@dataclass(frozen=True)
class Token:
    """A classified lexical unit.

    Attributes:
        kind: Token kind tag
        text: Matched text for literal and register tokens, None otherwise
        position: Offset of the token in the source expression
    """

    kind: TokenKind
    text: Optional[str] = None
    position: int = 0

    def __str__(self) -> str:
        if self.text is not None:
            return f"{self.kind.value}({self.text})"
        return self.kind.value

    @property
    def register_name(self) -> str:
        """Register name without the leading sigil."""
        if self.kind is not TokenKind.REG or not self.text:
            raise ValueError(f"not a register token: {self}")
        return self.text[1:]
