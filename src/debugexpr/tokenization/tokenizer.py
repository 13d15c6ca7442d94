"""Expression tokenizer.

Scans an expression left to right against the ordered rule table and
produces a fresh token list per call. The context-free ``*`` and ``-``
lexemes are reclassified as dereference / negation when they appear where
only an operand can start.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from debugexpr.errors import LexError, TokenOverflowError
from debugexpr.tokenization.rules import CompiledRule, get_compiled_rules
from debugexpr.utils.logging import get_logger
from debugexpr.utils.types import Token, TokenKind, UNARY_FORMS

logger = get_logger(__name__)


@dataclass
class TokenizerConfig:
    """Configuration for expression tokenization."""

    # Maximum number of tokens per expression (None = unbounded)
    max_tokens: Optional[int] = None

    # Maximum length of captured literal / register text (None = unbounded)
    max_literal_length: Optional[int] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.max_literal_length is not None and self.max_literal_length <= 0:
            raise ValueError(
                f"max_literal_length must be positive, got {self.max_literal_length}"
            )

    @classmethod
    def bounded(cls) -> "TokenizerConfig":
        """Fixed-buffer limits: 32 tokens of at most 31 characters."""
        return cls(max_tokens=32, max_literal_length=31)


class ExprTokenizer:
    """Tokenizer for debugger expressions.

    The compiled rule table is shared; all per-call state lives in the
    returned token list, so one tokenizer may serve concurrent callers.
    """

    def __init__(
        self,
        config: Optional[TokenizerConfig] = None,
        rules: Optional[tuple[CompiledRule, ...]] = None,
    ):
        self.config = config or TokenizerConfig()
        self.rules = rules if rules is not None else get_compiled_rules()

    def tokenize(self, text: str) -> list[Token]:
        """Tokenize an expression.

        Args:
            text: Expression text

        Returns:
            Token list with whitespace removed

        Raises:
            LexError: If no rule matches at some position
            TokenOverflowError: If a configured limit is exceeded
        """
        tokens: list[Token] = []
        position = 0

        while position < len(text):
            matched = self._match_at(text, position)
            if matched is None:
                error = LexError(position, text)
                logger.warning(str(error))
                raise error

            rule, length = matched
            lexeme = text[position : position + length]
            logger.debug(
                f'match rules[{rule.index}] = "{rule.rule.pattern}" at position '
                f"{position} with len {length}: {lexeme}"
            )

            if rule.kind is not TokenKind.WHITESPACE:
                tokens.append(self._make_token(tokens, rule.kind, lexeme, position))
            position += length

        return tokens

    def try_tokenize(self, text: str) -> tuple[list[Token], bool]:
        """Tokenize, reporting failure as a flag instead of raising.

        Returns:
            (tokens, ok); tokens is empty when ok is False
        """
        try:
            return self.tokenize(text), True
        except (LexError, TokenOverflowError):
            return [], False

    def _match_at(self, text: str, position: int) -> Optional[tuple[CompiledRule, int]]:
        """Find the first rule matching exactly at position."""
        for rule in self.rules:
            m = rule.regex.match(text, position)
            # An empty match would never advance the scan
            if m is not None and m.end() > position:
                return rule, m.end() - position
        return None

    def _make_token(
        self,
        tokens: list[Token],
        kind: TokenKind,
        lexeme: str,
        position: int,
    ) -> Token:
        """Build the token for a match, applying unary disambiguation."""
        max_tokens = self.config.max_tokens
        if max_tokens is not None and len(tokens) >= max_tokens:
            raise TokenOverflowError(
                f"expression has more than {max_tokens} tokens (at position {position})"
            )

        text = None
        if kind.captures_text:
            max_len = self.config.max_literal_length
            if max_len is not None and len(lexeme) > max_len:
                raise TokenOverflowError(
                    f"token '{lexeme}' at position {position} is longer than "
                    f"{max_len} characters"
                )
            text = lexeme

        if kind in UNARY_FORMS and (not tokens or tokens[-1].kind.expects_operand):
            kind = UNARY_FORMS[kind]

        return Token(kind=kind, text=text, position=position)


_default_tokenizer: Optional[ExprTokenizer] = None


def tokenize(text: str) -> list[Token]:
    """Tokenize an expression with the default configuration."""
    global _default_tokenizer
    if _default_tokenizer is None:
        _default_tokenizer = ExprTokenizer()
    return _default_tokenizer.tokenize(text)
