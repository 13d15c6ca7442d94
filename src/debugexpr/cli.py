"""Command-line interface for debugexpr.

Provides commands for:
- Evaluating expressions against a configured machine
- Inspecting token sequences
- An interactive debugger prompt
- Replaying generated expression corpora
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from debugexpr.config import SessionConfig
from debugexpr.errors import ConfigError, DebugExprError
from debugexpr.evaluation.evaluator import ExprEvaluator
from debugexpr.evaluation.generator import parse_corpus_line
from debugexpr.machine.registers import RegisterFile
from debugexpr.utils.logging import setup_logging

app = typer.Typer(
    name="debugexpr",
    help="Expression evaluator for an emulated RISC-V debugger",
    add_completion=False,
)

console = Console()

PROMPT = "(debugexpr) "

REPL_HELP = """\
p EXPR        evaluate EXPR
x N EXPR      dump N 4-byte words starting at address EXPR
tokens EXPR   show the token sequence of EXPR
info r        print registers
help          show this help
q             quit"""


def _load_session(config: Optional[str], log_level: Optional[str]) -> SessionConfig:
    session = SessionConfig.from_yaml(config) if config else SessionConfig()
    try:
        setup_logging(level=log_level or session.log_level, log_file=session.log_file)
    except (ValueError, OSError) as e:
        raise ConfigError(f"cannot set up logging: {e}") from e
    return session


def _exit_on_config_error(e: DebugExprError) -> None:
    console.print(f"[red]{escape(str(e))}[/red]")
    raise typer.Exit(code=2)


def _format_hex(value: int, bits: int) -> str:
    return f"{value & ((1 << bits) - 1):#0{bits // 4 + 2}x}"


def _print_tokens(evaluator: ExprEvaluator, text: str) -> None:
    tokens = evaluator.tokenizer.tokenize(text)
    table = Table(title=escape(f"Tokens of {text!r}"))
    table.add_column("Index", justify="right")
    table.add_column("Kind")
    table.add_column("Text")
    table.add_column("Position", justify="right")
    for i, token in enumerate(tokens):
        table.add_row(str(i), token.kind.name, token.text or "", str(token.position))
    console.print(table)


def _scan_memory(evaluator: ExprEvaluator, count: int, text: str) -> None:
    address = evaluator.evaluate(text)
    for i in range(count):
        addr = address + 4 * i
        value = evaluator.memory.read_memory(addr, 4)
        console.print(f"{addr:#010x}: {value:#010x}")


def _print_registers(evaluator: ExprEvaluator, bits: int) -> None:
    registers = evaluator.registers
    if not isinstance(registers, RegisterFile):
        console.print("[yellow]Register dump not supported by this backend[/yellow]")
        return
    table = Table(title="Registers")
    table.add_column("Name")
    table.add_column("Hex", justify="right")
    table.add_column("Decimal", justify="right")
    for name, value in registers.snapshot().items():
        table.add_row(name, _format_hex(value, bits), str(value))
    console.print(table)


def run_command(evaluator: ExprEvaluator, line: str, bits: int = 32) -> bool:
    """Execute one debugger prompt command.

    Returns:
        False when the prompt should exit
    """
    cmd, _, args = line.strip().partition(" ")
    args = args.strip()

    if not cmd:
        return True
    if cmd in ("q", "quit"):
        return False
    if cmd == "help":
        console.print(REPL_HELP)
        return True

    try:
        if cmd == "p":
            value, ok = evaluator.expr(args)
            if ok:
                console.print(f"{value} ({_format_hex(value, bits)})")
            else:
                console.print(f"[red]Bad expression: {escape(args)}[/red]")
        elif cmd == "x":
            count_text, _, text = args.partition(" ")
            if not count_text.isdigit() or not text.strip():
                console.print("[red]Usage: x N EXPR[/red]")
            else:
                _scan_memory(evaluator, int(count_text), text)
        elif cmd == "tokens":
            _print_tokens(evaluator, args)
        elif cmd == "info" and args == "r":
            _print_registers(evaluator, bits)
        else:
            console.print(f"[red]Unknown command '{escape(line.strip())}'[/red]")
    except DebugExprError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
    return True


@app.command("eval")
def eval_cmd(
    expressions: List[str] = typer.Argument(..., help="Expressions to evaluate"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Session YAML file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
):
    """Evaluate one or more expressions."""
    try:
        session = _load_session(config, log_level)
        evaluator = session.build_evaluator()
    except DebugExprError as e:
        _exit_on_config_error(e)

    bits = session.word_bits or session.xlen

    table = Table(title="Results")
    table.add_column("Expression")
    table.add_column("Value", justify="right")
    table.add_column("Hex", justify="right")
    table.add_column("Status")

    failures = 0
    for text in expressions:
        try:
            value = evaluator.evaluate(text)
        except DebugExprError as e:
            failures += 1
            table.add_row(escape(text), "", "", f"[red]{type(e).__name__}[/red]")
            continue
        table.add_row(escape(text), str(value), _format_hex(value, bits), "[green]ok[/green]")

    console.print(table)
    if failures:
        raise typer.Exit(code=1)


@app.command()
def tokens(
    expression: str = typer.Argument(..., help="Expression to tokenize"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
):
    """Show the token sequence of an expression."""
    try:
        session = _load_session(None, log_level)
    except DebugExprError as e:
        _exit_on_config_error(e)
    evaluator = ExprEvaluator(tokenizer_config=session.tokenizer_config())
    try:
        _print_tokens(evaluator, expression)
    except DebugExprError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command()
def repl(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Session YAML file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
):
    """Run an interactive debugger prompt."""
    try:
        session = _load_session(config, log_level)
        evaluator = session.build_evaluator()
    except DebugExprError as e:
        _exit_on_config_error(e)

    bits = session.word_bits or session.xlen
    console.print("Type 'help' for commands.")
    while True:
        try:
            line = console.input(PROMPT)
        except EOFError:
            break
        if not run_command(evaluator, line, bits):
            break


@app.command()
def check(
    corpus: str = typer.Argument(..., help="File of '<value> <expression>' lines"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
):
    """Replay a generated corpus and report mismatches."""
    try:
        session = _load_session(None, log_level)
    except DebugExprError as e:
        _exit_on_config_error(e)
    evaluator = ExprEvaluator(tokenizer_config=session.tokenizer_config())

    table = Table(title="Mismatches")
    table.add_column("Line", justify="right")
    table.add_column("Expression")
    table.add_column("Expected", justify="right")
    table.add_column("Got", justify="right")

    total = 0
    failures = 0
    for lineno, line in enumerate(Path(corpus).read_text().splitlines(), 1):
        if not line.strip():
            continue
        total += 1
        try:
            expected, text = parse_corpus_line(line)
        except ValueError:
            failures += 1
            table.add_row(str(lineno), escape(line), "", "malformed")
            continue
        value, ok = evaluator.expr(text)
        if not ok or value != expected:
            failures += 1
            table.add_row(str(lineno), escape(text), str(expected), str(value) if ok else "error")

    if failures:
        console.print(table)
        console.print(f"[red]{failures}/{total} expressions failed[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]All {total} expressions passed[/green]")


@app.command()
def info():
    """Show debugexpr version and accepted syntax."""
    from debugexpr import __version__
    from debugexpr.machine.registers import GPR_NAMES
    from debugexpr.tokenization.rules import RULES

    console.print(f"debugexpr v{__version__}")
    console.print()
    console.print("Operators (loosest first): &&  == !=  + -  * /  unary * -")
    console.print(f"Registers: {', '.join('$' + name for name in GPR_NAMES)}")
    console.print()
    console.print("Tokenizer rules (first match wins):")
    for i, rule in enumerate(RULES):
        console.print(f"  {i:2d}  {rule.kind.name:<10} {rule.pattern}", markup=False)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
