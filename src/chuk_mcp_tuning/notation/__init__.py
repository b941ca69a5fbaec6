"""
Interval notation - text in, exact quantities out.

The pipeline:
    text → parse (syntax tree) → Evaluator (Quantity)
    lines → evaluate_lines (EvaluationContext) → derive_scale (Scale)
    Quantity → format_quantity (text)
"""

from chuk_mcp_tuning.notation.context import EvaluationContext
from chuk_mcp_tuning.notation.evaluator import Evaluator, evaluate, evaluate_interval
from chuk_mcp_tuning.notation.formatting import (
    format_interval,
    format_monzo,
    format_quantity,
    formatted_exactly,
)
from chuk_mcp_tuning.notation.parser import Parser, parse, parse_expression
from chuk_mcp_tuning.notation.sequence import derive_scale, evaluate_lines, temper

__all__ = [
    # Parsing
    "Parser",
    "parse",
    "parse_expression",
    # Evaluation
    "EvaluationContext",
    "Evaluator",
    "evaluate",
    "evaluate_interval",
    # Sequencing
    "derive_scale",
    "evaluate_lines",
    "temper",
    # Formatting
    "format_interval",
    "format_monzo",
    "format_quantity",
    "formatted_exactly",
]
