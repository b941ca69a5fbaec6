"""
Formatting - write quantities back as notation.

Intervals are spelled in order of preference:

    3/2              ratio
    7\\12, 1\\13<3>    equal division of an equave
    [-4, 4, -1>      monzo (with a residual term when one is left)

followed by a cents offset such as " + 1.955c" when the value carries
one. Pure cents are written as 701.955c. Whatever is written parses back
with the notation parser; formatted_exactly() checks that no precision
was lost along the way.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction

from chuk_mcp_tuning.constants import Domain
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.core.quantity import Quantity, pitch
from chuk_mcp_tuning.errors import NonRepresentableError
from chuk_mcp_tuning.models.options import FormattingOptions
from chuk_mcp_tuning.notation.context import EvaluationContext
from chuk_mcp_tuning.notation.evaluator import Evaluator
from chuk_mcp_tuning.notation.parser import parse_expression

logger = logging.getLogger(__name__)

# Largest power tried when rewriting an equave as the preferred one
MAX_EQUAVE_POWER = 9

# Largest prime exponent of an equave written out as an equal division
MAX_EQUAVE_EXPONENT = 16

# Size difference (cents) under which a re-parsed value counts as identical
EXACT_TOLERANCE_CENTS = 1e-9


def format_fraction(
    fraction: Fraction,
    preferred_numerator: int | None = None,
    preferred_denominator: int | None = None,
    integers: bool = False,
) -> str:
    """
    Write a fraction, expanded towards a preferred numerator or denominator.

    Examples:
        format_fraction(Fraction(3, 2), preferred_denominator=4) -> "6/4"
        format_fraction(Fraction(5, 4), preferred_numerator=10) -> "10/8"
        format_fraction(Fraction(3), integers=True) -> "3"
    """
    numerator, denominator = fraction.numerator, fraction.denominator
    multiplier = 1
    if preferred_numerator is not None:
        if numerator and preferred_numerator % abs(numerator) == 0:
            multiplier = preferred_numerator // abs(numerator)
    elif preferred_denominator is not None and preferred_denominator % denominator == 0:
        multiplier = preferred_denominator // denominator
    if integers and denominator == 1 and multiplier == 1:
        return str(numerator)
    return f"{numerator * multiplier}/{denominator * multiplier}"


def format_cents(cents: float, options: FormattingOptions | None = None) -> str:
    """
    Write a cents value as a number of cents.

    Whole numbers keep a trailing point so they read as cents, not steps.

    Examples:
        format_cents(701.955) -> "701.955c"
        format_cents(100.0) -> "100.c"
    """
    return _cents_number(cents, options or FormattingOptions()) + "c"


def _cents_number(cents: float, options: FormattingOptions) -> str:
    if cents == round(cents):
        return f"{int(cents)}."
    return f"{cents:.{options.cents_fraction_digits}f}".rstrip("0")


def _cents_offset(cents: float, options: FormattingOptions) -> str:
    if round(cents, options.cents_fraction_digits) == 0:
        return ""
    operation = " - " if cents < 0 else " + "
    return operation + format_cents(abs(cents), options)


def format_decimal(value: float, options: FormattingOptions | None = None) -> str:
    """
    Write a real number as a hard decimal.

    Example:
        format_decimal(2 ** 0.5) -> "1.414214!"
    """
    options = options or FormattingOptions()
    text = f"{value:.{options.decimal_fraction_digits}f}".rstrip("0")
    if text.endswith("."):
        text += "0"
    if "." not in text:
        text += ".0"
    return text + "!"


def format_monzo(monzo: ExtendedMonzo) -> str:
    """
    Write the prime exponent vector, trailing zeros dropped.

    Example:
        format_monzo(ExtendedMonzo([-4, 4, -1])) -> "[-4, 4, -1>"
    """
    components = list(monzo.vector)
    while components and components[-1] == 0:
        components.pop()
    return "[" + ", ".join(str(component) for component in components) + ">"


def format_val(monzo: ExtendedMonzo) -> str:
    """
    Write a val, trailing zeros dropped.

    Raises:
        NonRepresentableError: If the val has a residual or cents offset
    """
    if not monzo.is_equal_temperament():
        raise NonRepresentableError("Only pure prime mappings can be written as vals")
    components = list(monzo.vector)
    while components and components[-1] == 0:
        components.pop()
    return "<" + " ".join(str(component) for component in components) + "]"


def format_equal_temperament(monzo: ExtendedMonzo, options: FormattingOptions | None = None) -> str:
    """
    Write a pure prime vector as steps of an equal division.

    The preferred equave is used when the natural one is a power or a
    root of it; the octave is left implicit.

    Examples:
        format_equal_temperament(ExtendedMonzo([Fraction(7, 12)])) -> "7\\12"
        format_equal_temperament(ExtendedMonzo([0, Fraction(1, 13)])) -> "1\\13<3>"
    """
    options = options or FormattingOptions()
    preferred_equave = options.get_et_equave() or Fraction(2)
    fraction, equave = monzo.to_equal_temperament()
    if equave == 1:
        equave = preferred_equave
    else:
        for power in range(2, MAX_EQUAVE_POWER + 1):
            if equave**power == preferred_equave:
                fraction, equave = fraction / power, preferred_equave
                break
            if preferred_equave**power == equave:
                fraction, equave = fraction * power, preferred_equave
                break

    text = format_fraction(
        abs(fraction), preferred_denominator=options.preferred_et_denominator
    ).replace("/", "\\")
    if fraction < 0:
        text = "-" + text
    if equave == 2:
        return text
    return f"{text}<{format_fraction(equave, integers=True)}>"


def _has_simple_equave(monzo: ExtendedMonzo) -> bool:
    """True when the equave of the equal division has small prime exponents."""
    components = [component for component in monzo.vector if component]
    if not components:
        return True
    denominator = math.lcm(*(component.denominator for component in components))
    numerator = math.gcd(*((component * denominator).numerator for component in components))
    step = Fraction(numerator, denominator)
    return all(abs(component / step) <= MAX_EQUAVE_EXPONENT for component in components)


def format_interval(monzo: ExtendedMonzo, options: FormattingOptions | None = None) -> str:
    """
    Write a relative pitch.

    Examples:
        format_interval(ExtendedMonzo.from_fraction(Fraction(3, 2), 3)) -> "3/2"
        format_interval(ExtendedMonzo.from_cents(701.955, 3)) -> "701.955c"
    """
    options = options or FormattingOptions()
    if monzo.is_cents() and monzo.cents != 0:
        return format_cents(monzo.cents, options)

    offset = _cents_offset(monzo.cents, options)
    if offset and options.forbid_composite:
        logger.warning("Composite interval written as cents")
        return format_cents(monzo.total_cents(), options)
    exact = ExtendedMonzo(monzo.vector, monzo.residual)

    if exact.is_fractional():
        text = format_fraction(
            exact.to_fraction(), options.preferred_numerator, options.preferred_denominator
        )
        return f"pitch({text}){offset}" if offset else text

    if exact.is_equal_temperament() and _has_simple_equave(exact):
        return format_equal_temperament(exact, options) + offset

    if options.forbid_monzo:
        logger.warning("Monzo written as cents")
        return format_cents(monzo.total_cents(), options)
    if exact.residual == 1:
        return format_monzo(exact) + offset
    if options.forbid_composite:
        logger.warning("Monzo with a residual written as cents")
        return format_cents(monzo.total_cents(), options)
    if exact.residual <= 0:
        logger.warning(f"Residual {exact.residual} cannot be written, using cents")
        return format_cents(monzo.total_cents(), options)

    logger.warning("Interval needs a residual term")
    residual = format_fraction(
        exact.residual, options.preferred_numerator, options.preferred_denominator
    )
    unit = ExtendedMonzo(exact.vector)
    return f"{format_monzo(unit)} + pitch({residual}){offset}"


def format_scalar(monzo: ExtendedMonzo, options: FormattingOptions | None = None) -> str:
    """
    Write a dimensionless number: exact when rational, hard decimal otherwise.

    Examples:
        format_scalar(ExtendedMonzo.from_fraction(3, 3)) -> "3"
        format_scalar(ExtendedMonzo.from_cents(1200 / 2, 3)) -> "1.414214!"
    """
    options = options or FormattingOptions()
    fraction = monzo.try_fraction()
    if fraction is not None:
        return format_fraction(
            fraction, options.preferred_numerator, options.preferred_denominator, integers=True
        )
    return format_decimal(monzo.value_of(), options)


def format_quantity(quantity: Quantity, options: FormattingOptions | None = None) -> str:
    """
    Write any supported quantity.

    Raises:
        NonRepresentableError: For dimensions the notation has no spelling for
    """
    options = options or FormattingOptions()
    if quantity.domain == Domain.SCALAR:
        return format_scalar(quantity.value, options)
    if quantity.domain == Domain.PITCH:
        if quantity.exponent == 1:
            return format_interval(quantity.value, options)
        if quantity.exponent == -1:
            return format_val(quantity.value)
    if quantity.domain == Domain.TIME:
        if quantity.exponent == -1:
            return f"{format_scalar(quantity.value, options)} Hz"
        if quantity.exponent == 1:
            return f"{format_scalar(quantity.value, options)} s"
    raise NonRepresentableError(
        f"No notation for {quantity.domain.value}^{quantity.exponent} quantities"
    )


def formatted_exactly(quantity: Quantity, text: str) -> bool:
    """
    Check that text evaluates back to the quantity without loss.

    Dimensions must match exactly; sizes within EXACT_TOLERANCE_CENTS.
    """
    context = EvaluationContext(quantity.value.number_of_components)
    result = Evaluator(context).evaluate_expression(parse_expression(text))
    if quantity.is_interval and result.is_scalar:
        # Bare numbers read as intervals, as on a scale line
        result = pitch(result)
    if (result.domain, result.exponent) != (quantity.domain, quantity.exponent):
        return False
    if (result.value.residual < 0) != (quantity.value.residual < 0):
        return False
    left, right = result.value.total_cents(), quantity.value.total_cents()
    if left == right:
        return True
    return abs(left - right) < EXACT_TOLERANCE_CENTS
