"""Expression tokenization for debugexpr.

Provides the ordered regular-expression rule table and the tokenizer that
turns expression text into a token list:
- First matching rule wins at each position
- Whitespace is recognized and dropped
- Prefix ``*`` / ``-`` become dereference / negation
"""

from debugexpr.tokenization.rules import (
    Rule,
    RULES,
    REGISTER_SIGIL,
    compile_rules,
    get_compiled_rules,
)
from debugexpr.tokenization.tokenizer import ExprTokenizer, TokenizerConfig, tokenize

__all__ = [
    "Rule",
    "RULES",
    "REGISTER_SIGIL",
    "compile_rules",
    "get_compiled_rules",
    "ExprTokenizer",
    "TokenizerConfig",
    "tokenize",
]
