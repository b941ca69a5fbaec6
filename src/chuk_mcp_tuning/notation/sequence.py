"""
Line sequencing - evaluate a scale written one interval per line.

Each line sees the degrees accumulated so far through $, $1, $-1, #
and friends. Results are converted to relative pitches and appended;
a val result instead tempers every accumulated degree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from fractions import Fraction

from chuk_mcp_tuning.constants import (
    DEFAULT_BASE_FREQUENCY,
    DEFAULT_NUMBER_OF_COMPONENTS,
    ErrorMessages,
)
from chuk_mcp_tuning.core.fjs import CommaCache
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.core.quantity import Quantity, pitch
from chuk_mcp_tuning.core.scale import Scale
from chuk_mcp_tuning.errors import ExponentMismatchError, NonRepresentableError, SequenceError
from chuk_mcp_tuning.notation.ast import PitchAssignment
from chuk_mcp_tuning.notation.context import EvaluationContext
from chuk_mcp_tuning.notation.evaluator import Evaluator
from chuk_mcp_tuning.notation.parser import parse

logger = logging.getLogger(__name__)


def _is_blank(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("//")


def temper(context: EvaluationContext, val: Quantity) -> None:
    """
    Replace every degree p with (val . p) steps of the octave division.

    Raises:
        NonRepresentableError: If the val does not map the octave
    """
    octave_steps = val.value.vector[0] if val.value.vector else Fraction(0)
    if octave_steps == 0:
        raise NonRepresentableError(
            ErrorMessages.NON_REPRESENTABLE.format(detail="val does not map the octave")
        )
    step = ExtendedMonzo.from_equal_temperament(
        1 / octave_steps, 2, context.number_of_components
    )
    for index, degree in enumerate(context.degrees(), start=1):
        steps = val.mul(degree).value.to_fraction()
        context.assign_degree(index, Quantity.interval(step.scale(steps)))
    logger.debug(f"Tempered {context.size - 1} degrees by a {octave_steps}-step val")


def evaluate_lines(
    lines: Iterable[str],
    context: EvaluationContext | None = None,
    commas: CommaCache | None = None,
) -> EvaluationContext:
    """
    Evaluate a sequence of lines into a context.

    Raises:
        SequenceError: If a pitch assignment is not on the first line
        NotationSyntaxError: For malformed lines
    """
    context = context if context is not None else EvaluationContext()
    evaluator = Evaluator(context, commas)
    seen_content = False
    for line_index, line in enumerate(lines):
        if _is_blank(line):
            continue
        context.refresh(index=line_index)
        node = parse(line)
        if isinstance(node, PitchAssignment) and seen_content:
            raise SequenceError(ErrorMessages.MISPLACED_PITCH_ASSIGNMENT)
        seen_content = True

        result = evaluator.evaluate(node)
        if result is None:
            continue
        if result.is_val:
            temper(context, result)
            continue
        interval = pitch(result, context.base_frequency)
        if interval.exponent != 1:
            raise ExponentMismatchError(
                ErrorMessages.EXPONENT_MISMATCH.format(left=interval.exponent, right=1)
            )
        context.append_degree(interval)
    return context


def derive_scale(
    lines: Iterable[str],
    base_frequency: float = DEFAULT_BASE_FREQUENCY,
    base_index: int = 0,
    number_of_components: int = DEFAULT_NUMBER_OF_COMPONENTS,
    names: list[str] | None = None,
) -> Scale:
    """
    Evaluate lines and build the resulting Scale.

    A pitch assignment on the first line overrides base_frequency.

    Example:
        derive_scale(["9/8", "5/4", "3/2", "2"]).ratios -> (1.0, 1.125, 1.25, 1.5)
    """
    context = EvaluationContext(
        number_of_components,
        Quantity.hertz(base_frequency, number_of_components),
    )
    evaluate_lines(lines, context)
    degrees = [degree.value.value_of() for degree in context.degrees()]
    base = context.base_frequency
    frequency = base.value.value_of() if base is not None else base_frequency
    return Scale.from_degrees(degrees, frequency, base_index, names)
