#!/usr/bin/env python3
"""Random expression corpus generator.

Writes lines of ``<expected value> <expression>`` for replay with
``debugexpr check``.

Usage:
    python scripts/gen_expr.py --count 1000 --output corpus.txt
    python scripts/gen_expr.py --count 10 --seed 42 --max-depth 6

    debugexpr check corpus.txt
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

app = typer.Typer(help="debugexpr corpus generator")
console = Console()


@app.command()
def generate(
    count: int = typer.Option(100, "--count", "-n", help="Number of expressions"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file (default: stdout)"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
    max_depth: int = typer.Option(4, "--max-depth", help="Maximum expression tree depth"),
    max_literal: int = typer.Option(100, "--max-literal", help="Largest literal value"),
):
    """Generate a corpus of random expressions with expected values."""
    from debugexpr.evaluation.generator import GeneratorConfig, generate_corpus

    config = GeneratorConfig(max_depth=max_depth, max_literal=max_literal, seed=seed)
    lines = generate_corpus(count, config)

    if output:
        Path(output).write_text("\n".join(lines) + "\n")
        console.print(f"Wrote {len(lines)} expressions to {output}")
    else:
        for line in lines:
            print(line)


if __name__ == "__main__":
    app()
