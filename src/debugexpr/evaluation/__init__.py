"""Expression evaluation for debugexpr.

Evaluates token sequences recursively over index ranges:
- Span matching strips one enclosing parenthesis pair
- Main-operator selection implements precedence and left associativity
- The evaluator resolves literals, registers and memory dereferences
"""

from debugexpr.evaluation.spans import (
    OPERATOR_PRIORITY,
    priority,
    is_paired,
    find_main_operator_index,
)
from debugexpr.evaluation.evaluator import (
    ExprEvaluator,
    DEREF_WIDTH,
    truncating_div,
    evaluate,
    expr,
)
from debugexpr.evaluation.generator import (
    ExpressionGenerator,
    GeneratorConfig,
    GeneratedExpr,
    generate_corpus,
    parse_corpus_line,
)

__all__ = [
    "OPERATOR_PRIORITY",
    "priority",
    "is_paired",
    "find_main_operator_index",
    "ExprEvaluator",
    "DEREF_WIDTH",
    "truncating_div",
    "evaluate",
    "expr",
    "ExpressionGenerator",
    "GeneratorConfig",
    "GeneratedExpr",
    "generate_corpus",
    "parse_corpus_line",
]
