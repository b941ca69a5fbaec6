"""
Notation tools - MCP tools for evaluating and writing intervals.

Tools for evaluating single expressions, whole scales written one
interval per line, and respelling intervals with formatting preferences.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_tuning.core.quantity import Quantity
from chuk_mcp_tuning.errors import NotationSyntaxError, TuningError
from chuk_mcp_tuning.models.options import FormattingOptions
from chuk_mcp_tuning.models.settings import NotationSettings
from chuk_mcp_tuning.notation.evaluator import Evaluator
from chuk_mcp_tuning.notation.formatting import format_quantity, formatted_exactly
from chuk_mcp_tuning.notation.sequence import evaluate_lines

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def describe_quantity(quantity: Quantity, options: FormattingOptions) -> dict[str, Any]:
    """JSON-ready summary of a quantity. Vals have no size of their own."""
    value = quantity.value
    summary: dict[str, Any] = {
        "text": format_quantity(quantity, options),
        "domain": quantity.domain.value,
        "exponent": str(quantity.exponent),
    }
    if quantity.is_val:
        return summary
    fraction = value.try_fraction()
    summary["value"] = value.value_of()
    summary["fraction"] = str(fraction) if fraction is not None else None
    if quantity.is_interval:
        summary["cents"] = value.total_cents()
    return summary


def _error(e: Exception) -> str:
    payload: dict[str, Any] = {"status": "error", "message": str(e)}
    if isinstance(e, NotationSyntaxError):
        payload["line"] = e.line
        payload["column"] = e.column
    return json.dumps(payload)


def register_notation_tools(
    mcp: ChukMCPServer,
    settings: NotationSettings,
    options: FormattingOptions | None = None,
) -> dict[str, Any]:
    """
    Register notation tools with the MCP server.

    Args:
        mcp: The MCP server instance
        settings: Evaluation settings
        options: Default formatting preferences

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}
    default_options = options or FormattingOptions()

    @mcp.tool  # type: ignore[arg-type]
    async def tuning_evaluate_expression(expression: str) -> str:
        """
        Evaluate one expression of the interval notation.

        Supports ratios (3/2), equal divisions (7\\12, 1\\13<3>), monzos
        ([-4 4 -1>), vals (<12 19 28]), interval names (M3^5), note names
        (Bb4), warts (17c@), frequencies (440 Hz) and cents (701.955c).

        Args:
            expression: Expression to evaluate

        Returns:
            JSON string with the result's spelling, dimension and size

        Example:
            tuning_evaluate_expression(expression="M3^5")
        """
        try:
            evaluator = Evaluator(settings.create_context())
            result = evaluator.evaluate_text(expression)
            if result is None:
                return json.dumps(
                    {"status": "error", "message": "Statements do not produce a value"}
                )
            return json.dumps(
                {"status": "success", "result": describe_quantity(result, default_options)}
            )
        except TuningError as e:
            return _error(e)
        except Exception as e:
            logger.exception("Failed to evaluate expression")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tuning_evaluate_expression"] = tuning_evaluate_expression

    @mcp.tool  # type: ignore[arg-type]
    async def tuning_evaluate_scale(
        lines: list[str],
        base_frequency: float | None = None,
    ) -> str:
        """
        Evaluate a scale written one interval per line.

        Lines may refer to earlier degrees ($, $1, $-2), declare variables
        ($fifth = 3/2), map over the degrees so far (= $ * 2) or temper
        everything with a val (12@). The last degree is the equave.

        Args:
            lines: One interval per line, blank and // lines are skipped
            base_frequency: Frequency of the unison in Hz

        Returns:
            JSON string with every degree's spelling, cents and frequency

        Example:
            tuning_evaluate_scale(lines=["9/8", "5/4", "3/2", "2"])
        """
        try:
            active = settings
            if base_frequency is not None:
                active = settings.model_copy(update={"base_frequency": base_frequency})
            context = evaluate_lines(lines, active.create_context())
            base = context.base_frequency
            base_hz = base.value.value_of() if base is not None else active.base_frequency

            degrees = []
            for index, degree in enumerate(context.degrees(), start=1):
                ratio = degree.value.value_of()
                degrees.append(
                    {
                        "index": index,
                        "text": format_quantity(degree, default_options),
                        "cents": degree.value.total_cents(),
                        "ratio": ratio,
                        "frequency": base_hz * ratio,
                    }
                )

            return json.dumps(
                {
                    "status": "success",
                    "base_frequency": base_hz,
                    "degrees": degrees,
                    "count": len(degrees),
                }
            )
        except TuningError as e:
            return _error(e)
        except Exception as e:
            logger.exception("Failed to evaluate scale")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tuning_evaluate_scale"] = tuning_evaluate_scale

    @mcp.tool  # type: ignore[arg-type]
    async def tuning_format_interval(
        expression: str,
        preferred_numerator: int | None = None,
        preferred_denominator: int | None = None,
        preferred_et_denominator: int | None = None,
        preferred_et_equave: str | None = None,
        forbid_monzo: bool | None = None,
        forbid_composite: bool | None = None,
    ) -> str:
        """
        Respell an interval with formatting preferences.

        Args:
            expression: Interval to respell
            preferred_numerator: Expand ratios to this numerator
            preferred_denominator: Expand ratios to this denominator
            preferred_et_denominator: Expand equal divisions to this many steps
            preferred_et_equave: Equave for equal divisions, e.g. "3"
            forbid_monzo: Write cents instead of monzos
            forbid_composite: Write cents instead of composite forms

        Returns:
            JSON string with the new spelling and whether it is lossless

        Example:
            tuning_format_interval(expression="3/2", preferred_denominator=4)
        """
        try:
            formatting = default_options.merge(
                preferred_numerator=preferred_numerator,
                preferred_denominator=preferred_denominator,
                preferred_et_denominator=preferred_et_denominator,
                preferred_et_equave=preferred_et_equave,
                forbid_monzo=forbid_monzo,
                forbid_composite=forbid_composite,
            )
            evaluator = Evaluator(settings.create_context())
            result = evaluator.evaluate_text(expression)
            if result is None:
                return json.dumps(
                    {"status": "error", "message": "Statements do not produce a value"}
                )
            text = format_quantity(result, formatting)
            return json.dumps(
                {
                    "status": "success",
                    "text": text,
                    "exact": formatted_exactly(result, text),
                }
            )
        except TuningError as e:
            return _error(e)
        except Exception as e:
            logger.exception("Failed to format interval")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tuning_format_interval"] = tuning_format_interval

    return tools
