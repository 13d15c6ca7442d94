"""Unit tests for expression evaluation."""

import pytest

from debugexpr.errors import (
    DivisionByZeroError,
    LexError,
    MemoryAccessError,
    ParseError,
    TokenOverflowError,
    UnknownRegisterError,
)
from debugexpr.evaluation import ExprEvaluator, evaluate, expr, truncating_div
from debugexpr.machine import GuestMemory, RegisterBackend, RegisterFile
from debugexpr.tokenization import TokenizerConfig, tokenize

BASE = 0x80000000


class RecordingRegisters(RegisterBackend):
    """Register backend that records lookup order."""

    def __init__(self, values):
        self.values = values
        self.lookups = []

    def lookup_register(self, name):
        self.lookups.append(name)
        if name in self.values:
            return self.values[name], True
        return 0, False


@pytest.fixture
def memory():
    mem = GuestMemory(base=BASE, size=0x1000)
    mem.write_memory(BASE + 0x10, 4, 0xDEADBEEF)
    mem.write_memory(BASE + 0x20, 4, BASE + 0x10)
    return mem


@pytest.fixture
def registers():
    return RegisterFile.from_dict({"sp": BASE + 0xC, "a0": 40, "a1": 2, "s10": 7})


@pytest.fixture
def evaluator(registers, memory):
    return ExprEvaluator(registers=registers, memory=memory)


class TestLiterals:
    """Test single-token ranges."""

    def test_decimal(self, evaluator):
        assert evaluator.evaluate("42") == 42

    def test_hex(self, evaluator):
        """Test '0x1A' evaluates to 26."""
        assert evaluator.expr("0x1A") == (26, True)

    def test_register(self, evaluator):
        assert evaluator.evaluate("$a0") == 40
        assert evaluator.evaluate("$s10") == 7

    def test_zero_register(self, evaluator):
        assert evaluator.evaluate("$$0") == 0

    def test_unknown_register(self):
        """Test a register unknown to the backend fails."""
        evaluator = ExprEvaluator(registers=RecordingRegisters({}))

        with pytest.raises(UnknownRegisterError) as exc_info:
            evaluator.evaluate("$a0 + 1")

        assert exc_info.value.name == "a0"
        assert evaluator.expr("$a0") == (0, False)


class TestArithmetic:
    """Test operators, precedence and associativity."""

    def test_sum(self, evaluator):
        """Test '12+3' evaluates to 15."""
        assert evaluator.expr("12+3") == (15, True)

    def test_precedence(self, evaluator):
        assert evaluator.evaluate("2+3*4") == 14
        assert evaluator.evaluate("(2+3)*4") == 20

    def test_left_associative(self, evaluator):
        """Test chains of equal priority group to the left."""
        assert evaluator.evaluate("10-3-2") == 5
        assert evaluator.evaluate("100/10/5") == 2
        assert evaluator.evaluate("2*6/4") == 3

    def test_negation(self, evaluator):
        assert evaluator.expr("-3") == (-3, True)
        assert evaluator.evaluate("4-3") == 1
        assert evaluator.evaluate("-3+4") == 1
        assert evaluator.evaluate("2*-3") == -6
        assert evaluator.evaluate("2--3") == 5
        assert evaluator.evaluate("-(-3)") == 3
        assert evaluator.evaluate("-(2+3)*2") == -10

    def test_truncating_division(self, evaluator):
        """Test division rounds toward zero."""
        assert evaluator.evaluate("7/2") == 3
        assert evaluator.evaluate("-7/2") == -3
        assert evaluator.evaluate("7/-2") == -3
        assert evaluator.evaluate("-7/-2") == 3

    def test_comparisons(self, evaluator):
        assert evaluator.evaluate("1==1") == 1
        assert evaluator.evaluate("1==2") == 0
        assert evaluator.evaluate("1!=2") == 1
        assert evaluator.evaluate("3!=3") == 0

    def test_logical_and(self, evaluator):
        """Test '1==1&&2!=3' evaluates to 1."""
        assert evaluator.expr("1==1&&2!=3") == (1, True)
        assert evaluator.evaluate("2 && 3") == 1
        assert evaluator.evaluate("3 && 0") == 0
        assert evaluator.evaluate("0 && 0") == 0

    def test_parenthesized_groups(self, evaluator):
        assert evaluator.evaluate("(1)+(2)") == 3
        assert evaluator.evaluate("((1+2))*((3))") == 9

    def test_registers_in_expressions(self, evaluator):
        assert evaluator.evaluate("$a0 + $a1") == 42
        assert evaluator.evaluate("$a0 / $a1 == 20") == 1

    def test_whitespace(self, evaluator):
        assert evaluator.evaluate("  1 +\t2 ") == 3


class TestEvaluationOrder:
    """Test right-then-left evaluation without short circuit."""

    def test_right_operand_first(self):
        """Test the right operand is resolved before the left one."""
        regs = RecordingRegisters({"a0": 1, "a1": 2})
        evaluator = ExprEvaluator(registers=regs)

        assert evaluator.evaluate("$a0 + $a1") == 3
        assert regs.lookups == ["a1", "a0"]

    def test_and_evaluates_both_sides(self):
        """Test '&&' resolves its right side even when the left is 0."""
        regs = RecordingRegisters({"a0": 5})
        evaluator = ExprEvaluator(registers=regs)

        assert evaluator.evaluate("0 && $a0") == 0
        assert regs.lookups == ["a0"]

    def test_left_failure_after_right(self):
        """Test a failing left side still fails after the right side ran."""
        regs = RecordingRegisters({"a1": 2})
        evaluator = ExprEvaluator(registers=regs)

        assert evaluator.expr("$a0 + $a1") == (0, False)
        assert regs.lookups == ["a1", "a0"]


class TestDereference:
    """Test memory dereference."""

    def test_deref_literal(self, evaluator):
        assert evaluator.evaluate("*0x80000010") == 0xDEADBEEF

    def test_deref_register_offset(self, evaluator):
        assert evaluator.evaluate("*($sp + 4)") == 0xDEADBEEF

    def test_nested_deref(self, evaluator):
        assert evaluator.evaluate("*(*0x80000020)") == 0xDEADBEEF

    def test_deref_in_comparison(self, evaluator):
        assert evaluator.evaluate("*($sp+4) == 0xdeadbeef && $a0 != 0") == 1

    def test_deref_reads_four_bytes(self, memory):
        memory.write_memory(BASE, 8, 0x1122334455667788)
        evaluator = ExprEvaluator(memory=memory)

        assert evaluator.evaluate("*0x80000000") == 0x55667788

    def test_deref_out_of_range(self, evaluator):
        with pytest.raises(MemoryAccessError):
            evaluator.evaluate("*0")
        assert evaluator.expr("*0") == (0, False)


class TestErrors:
    """Test evaluation failures."""

    def test_whitespace_only(self, evaluator):
        """Test an empty token range fails."""
        with pytest.raises(ParseError):
            evaluator.evaluate("   ")
        assert evaluator.expr("") == (0, False)

    def test_unmatched_parenthesis(self, evaluator):
        """Test '(1+2' fails: its only operator is nested."""
        with pytest.raises(ParseError) as exc_info:
            evaluator.evaluate("(1+2")

        assert "can't find main operator" in str(exc_info.value)

    def test_unmatched_close(self, evaluator):
        with pytest.raises(ParseError):
            evaluator.evaluate("1+2)")

    def test_adjacent_literals(self, evaluator):
        """Test two literals without an operator fail."""
        with pytest.raises(ParseError) as exc_info:
            evaluator.evaluate("1 2")

        assert "can't find main operator" in str(exc_info.value)

    def test_lone_operator(self, evaluator):
        with pytest.raises(ParseError):
            evaluator.evaluate("+")

    def test_empty_parentheses(self, evaluator):
        with pytest.raises(ParseError):
            evaluator.evaluate("()")

    def test_missing_operand(self, evaluator):
        with pytest.raises(ParseError):
            evaluator.evaluate("1+")

    def test_stacked_prefix_operators(self, evaluator):
        """Test '--3' fails: the second '-' is a binary subtract."""
        with pytest.raises(ParseError):
            evaluator.evaluate("--3")

    def test_lex_error_never_evaluates(self):
        """Test an unrecognized character fails before evaluation."""
        regs = RecordingRegisters({"a0": 1})
        evaluator = ExprEvaluator(registers=regs)

        with pytest.raises(LexError):
            evaluator.evaluate("$a0 + @")
        assert regs.lookups == []

    def test_division_by_zero(self, evaluator):
        """Test division by zero is reported, not masked."""
        with pytest.raises(DivisionByZeroError):
            evaluator.evaluate("10/0")
        with pytest.raises(DivisionByZeroError):
            evaluator.evaluate("1/(2-2)")
        assert evaluator.expr("10/0") == (0, False)

    def test_token_overflow_is_recoverable(self):
        evaluator = ExprEvaluator(tokenizer_config=TokenizerConfig.bounded())

        with pytest.raises(TokenOverflowError):
            evaluator.evaluate("+".join(["1"] * 17))
        assert evaluator.expr("+".join(["1"] * 17)) == (0, False)
        assert evaluator.expr("+".join(["1"] * 16)) == (16, True)

    def test_long_chain_is_recoverable(self, evaluator):
        """Test a chain deeper than the recursion limit fails cleanly."""
        text = "+".join(["1"] * 1500)

        with pytest.raises(TokenOverflowError) as exc_info:
            evaluator.evaluate(text)

        assert "nested too deeply" in str(exc_info.value)
        assert evaluator.expr(text) == (0, False)

    def test_deep_parentheses_are_recoverable(self, evaluator):
        text = "(" * 1200 + "1" + ")" * 1200

        with pytest.raises(TokenOverflowError):
            evaluator.evaluate(text)
        assert evaluator.expr(text) == (0, False)

    def test_moderate_nesting_still_evaluates(self, evaluator):
        assert evaluator.evaluate("+".join(["1"] * 200)) == 200
        assert evaluator.evaluate("(" * 100 + "7" + ")" * 100) == 7

    def test_tokens_before_prefix_operator(self, evaluator):
        """Test a prefix main operator with tokens to its left fails."""
        with pytest.raises(ParseError) as exc_info:
            evaluator.evaluate("1)(-3")

        assert "unexpected tokens before" in str(exc_info.value)
        assert evaluator.expr("1)(*0x80000010") == (0, False)


class TestWordWidth:
    """Test wrapping to machine words."""

    def test_unbounded_by_default(self, evaluator):
        assert evaluator.evaluate("0xffffffff + 1") == 0x100000000

    def test_wrap_32(self):
        evaluator = ExprEvaluator(word_bits=32)

        assert evaluator.evaluate("-3") == 0xFFFFFFFD
        assert evaluator.evaluate("0 - 1") == 0xFFFFFFFF
        assert evaluator.evaluate("0xffffffff + 1") == 0
        assert evaluator.evaluate("0x10000 * 0x10000") == 0

    def test_wrap_32_unsigned_division(self):
        """Test division of wrapped values is unsigned."""
        evaluator = ExprEvaluator(word_bits=32)

        assert evaluator.evaluate("-4/2") == 0x7FFFFFFE

    def test_wrap_64(self):
        evaluator = ExprEvaluator(word_bits=64)

        assert evaluator.evaluate("-1") == 0xFFFFFFFFFFFFFFFF

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            ExprEvaluator(word_bits=0)


class TestRangeEvaluation:
    """Test evaluation over explicit token ranges."""

    def test_eval_sub_range(self, evaluator):
        tokens = tokenize("1+2*3")

        assert evaluator.eval_range(tokens, 2, 4) == 6
        assert evaluator.eval_range(tokens, 0, 0) == 1

    def test_empty_range(self, evaluator):
        tokens = tokenize("1")

        with pytest.raises(ParseError):
            evaluator.eval_range(tokens, 1, 0)

    def test_idempotent(self, evaluator):
        """Test repeated evaluation yields identical results."""
        first = evaluator.expr("*($sp+4) - $a0 * 2")
        second = evaluator.expr("*($sp+4) - $a0 * 2")

        assert first == second
        assert first[1] is True

    def test_no_residual_state(self, evaluator):
        """Test a failing call does not affect the next one."""
        assert evaluator.expr("1 2 3 4 5 6 7 8")[1] is False
        assert evaluator.expr("1+1") == (2, True)


class TestModuleFunctions:
    """Test module-level conveniences."""

    def test_expr(self):
        assert expr("2+3*4") == (14, True)
        assert expr("@") == (0, False)

    def test_evaluate(self):
        assert evaluate("$a0") == 0
        with pytest.raises(ParseError):
            evaluate("")

    def test_truncating_div(self):
        assert truncating_div(-7, 2) == -3
        assert truncating_div(7, 2) == 3
