"""Parenthesis matching and main-operator selection over token ranges.

Both functions work on inclusive index ranges ``[p, q]`` of a token list
and only look at the tokens at the outermost nesting level of the range.
"""

from __future__ import annotations

from typing import Optional, Sequence

from debugexpr.utils.types import Token, TokenKind

# Lower value = binds looser = evaluated later
OPERATOR_PRIORITY: dict[TokenKind, int] = {
    TokenKind.AND: 0,
    TokenKind.EQ: 1,
    TokenKind.NE: 1,
    TokenKind.ADD: 2,
    TokenKind.SUB: 2,
    TokenKind.MUL: 3,
    TokenKind.DIV: 3,
    TokenKind.DEREF: 4,
    TokenKind.NEG: 4,
}


def priority(kind: TokenKind) -> int:
    """Return the priority of an operator kind.

    Raises:
        ValueError: If kind is not an operator
    """
    try:
        return OPERATOR_PRIORITY[kind]
    except KeyError:
        raise ValueError(f"{kind.value} is not an operator") from None


def is_paired(tokens: Sequence[Token], p: int, q: int) -> bool:
    """Check whether ``[p, q]`` is wrapped in one enclosing parenthesis pair.

    True iff tokens[p] is ``(``, tokens[q] is ``)`` and the interior is
    balanced without its depth ever going negative. ``(1)+(2)`` is not
    paired: its first ``)`` closes the leading ``(``.
    """
    if tokens[p].kind is not TokenKind.LPAREN or tokens[q].kind is not TokenKind.RPAREN:
        return False

    depth = 0
    for i in range(p + 1, q):
        kind = tokens[i].kind
        if kind is TokenKind.LPAREN:
            depth += 1
        elif kind is TokenKind.RPAREN:
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def find_main_operator_index(tokens: Sequence[Token], p: int, q: int) -> Optional[int]:
    """Locate the operator of ``[p, q]`` that is evaluated last.

    Only operators outside any parentheses are candidates. The candidate
    with the lowest priority wins; a later candidate replaces an earlier one
    of equal priority, so ``10-3-2`` splits at its second ``-`` and groups
    as ``(10-3)-2``.

    Returns:
        Token index of the main operator, or None if the range has no
        operator at depth 0
    """
    main_index: Optional[int] = None
    main_priority = 0
    depth = 0

    for i in range(p, q + 1):
        kind = tokens[i].kind
        if kind is TokenKind.LPAREN:
            depth += 1
        elif kind is TokenKind.RPAREN:
            depth -= 1
        elif kind.is_operator and depth == 0:
            prio = priority(kind)
            if main_index is None or prio <= main_priority:
                main_index = i
                main_priority = prio

    return main_index
