"""
Tests for expression evaluation.

Tests cover:
- Literals, names and units
- Operators across domains
- Variables, functions and pitch assignment
"""

from fractions import Fraction

import pytest

from chuk_mcp_tuning.errors import (
    DomainMismatchError,
    MissingBaseFrequencyError,
    NonRepresentableError,
    UnboundVariableError,
)
from chuk_mcp_tuning.notation.context import EvaluationContext
from chuk_mcp_tuning.notation.evaluator import Evaluator, evaluate, evaluate_interval
from chuk_mcp_tuning.notation.parser import parse


class TestLiterals:
    """Tests for literal evaluation."""

    def test_fraction_is_scalar(self) -> None:
        result = evaluate("3/2")
        assert result.is_scalar
        assert result.value.to_fraction() == Fraction(3, 2)

    def test_decimal_is_exact(self) -> None:
        assert evaluate("1.25").value.to_fraction() == Fraction(5, 4)

    def test_hard_decimal_is_approximate(self) -> None:
        result = evaluate("1.5!")
        assert result.value.is_cents()
        assert result.value.value_of() == pytest.approx(1.5)

    def test_zero_denominator(self) -> None:
        with pytest.raises(NonRepresentableError):
            evaluate("1/0")

    def test_edo_step(self) -> None:
        result = evaluate("7\\12")
        assert result.is_interval
        assert result.value.to_equal_temperament() == (Fraction(7, 12), 2)

    def test_edji_with_equave(self) -> None:
        result = evaluate("1\\13<3>")
        assert result.value.to_equal_temperament() == (Fraction(1, 13), 3)

    def test_monzo(self) -> None:
        result = evaluate("[-4 4 -1>")
        assert result.is_interval
        assert result.value.to_fraction() == Fraction(81, 80)

    def test_val(self) -> None:
        assert evaluate("<12 19 28]").is_val

    def test_warts_val(self) -> None:
        result = evaluate("17c@2.3.5")
        assert result.is_val
        assert result.value.vector[:3] == (17, 27, 40)


class TestNames:
    """Tests for FJS names."""

    def test_fjs_interval(self) -> None:
        result = evaluate("M3^5")
        assert result.is_interval
        assert result.value.to_fraction() == Fraction(5, 4)

    def test_pythagorean_interval(self) -> None:
        assert evaluate("P5").value.to_fraction() == Fraction(3, 2)

    def test_half_degree(self) -> None:
        """Interordinal degrees accept the ½ sign."""
        assert evaluate("n2.5").value.strict_equals(evaluate("n2½").value)

    def test_note_relative_to_c4(self) -> None:
        """Without a pitch assignment notes are measured from C4."""
        assert evaluate("E4^5").value.to_fraction() == Fraction(5, 4)


class TestUnits:
    """Tests for units."""

    def test_hertz(self) -> None:
        result = evaluate("440 Hz")
        assert result.is_frequency
        assert result.value.to_fraction() == 440

    def test_kilohertz(self) -> None:
        assert evaluate("1 kHz").value.to_fraction() == 1000

    def test_cents_are_exact(self) -> None:
        """100 cents is a 12-EDO semitone."""
        result = evaluate("100 c")
        assert result.is_interval
        assert result.value.to_equal_temperament() == (Fraction(1, 12), 2)

    def test_decimal_cents(self) -> None:
        assert evaluate("1.955c").value.total_cents() == pytest.approx(1.955)

    def test_hard_cents(self) -> None:
        result = evaluate("5c!")
        assert result.value.is_cents()
        assert result.value.total_cents() == pytest.approx(5.0)


class TestOperators:
    """Tests for operators."""

    def test_val_maps_interval(self) -> None:
        """12@ maps the fifth to seven steps."""
        assert evaluate("12@ * pitch(3/2)").value.to_fraction() == 7

    def test_tempered_interval(self) -> None:
        """A val, an interval and an edo step compose into a tempered interval."""
        result = evaluate("<12 19 28] * pitch(15/8) * \\12")
        assert result.is_interval
        assert result.value.to_equal_temperament() == (Fraction(11, 12), 2)

    def test_interval_plus_cents(self) -> None:
        result = evaluate("pitch(3/2) + 2c")
        assert result.value.total_cents() == pytest.approx(703.955, abs=1e-3)

    def test_scalar_plus_interval(self) -> None:
        with pytest.raises(DomainMismatchError):
            evaluate("3/2 + P5")

    def test_power(self) -> None:
        assert evaluate("2^3").value.to_fraction() == 8

    def test_negative_power(self) -> None:
        """Negation applies after exponentiation."""
        assert evaluate("-2^2").value.to_fraction() == -4

    def test_modulo(self) -> None:
        assert evaluate("7 mod 3").value.to_fraction() == 1
        assert evaluate("pitch(3) mod pitch(2)").value.to_fraction() == Fraction(3, 2)

    def test_reduce(self) -> None:
        assert evaluate("3 reduce 2").value.to_fraction() == Fraction(3, 2)

    def test_inversion(self) -> None:
        assert evaluate("%pitch(3/2)").is_val


class TestFunctions:
    """Tests for built-in functions."""

    def test_frequency(self, context: EvaluationContext) -> None:
        result = evaluate("frequency(pitch(3/2))", context)
        assert result.is_frequency
        assert result.value.to_fraction() == 660

    def test_ratio(self, context: EvaluationContext) -> None:
        assert evaluate("ratio(660 Hz)", context).value.to_fraction() == Fraction(3, 2)

    def test_ratio_without_base(self) -> None:
        with pytest.raises(MissingBaseFrequencyError):
            evaluate("ratio(660 Hz)")

    def test_mtof(self) -> None:
        assert evaluate("mtof(69)").value.to_fraction() == 440

    def test_sqrt(self) -> None:
        assert evaluate("sqrt(9/4)").value.to_fraction() == Fraction(3, 2)

    def test_statement_has_no_value(self) -> None:
        with pytest.raises(NonRepresentableError):
            Evaluator().evaluate_expression(parse("$x = 1"))


class TestVariables:
    """Tests for variables and pitch assignment."""

    def test_declare_and_use(self, context: EvaluationContext) -> None:
        evaluator = Evaluator(context)
        assert evaluator.evaluate_text("$x = 3/2") is None
        assert evaluator.evaluate_text("$x * 2").value.to_fraction() == 3

    def test_quoted_names(self, context: EvaluationContext) -> None:
        evaluator = Evaluator(context)
        evaluator.evaluate_text('"my fifth" = P5')
        assert evaluator.evaluate_text('"my fifth"').value.to_fraction() == Fraction(3, 2)

    def test_unbound(self) -> None:
        with pytest.raises(UnboundVariableError):
            evaluate("$missing")

    def test_pitch_assignment(self, context: EvaluationContext) -> None:
        """Notes are measured from the assigned pitch."""
        evaluator = Evaluator(context)
        evaluator.evaluate_text("A4 = 432 Hz")
        assert context.base_frequency.value.to_fraction() == 432
        assert evaluator.evaluate_text("C5_5").value.to_fraction() == Fraction(6, 5)
        assert evaluator.evaluate_text("a4").value.to_fraction() == 1

    def test_evaluate_interval(self, context: EvaluationContext) -> None:
        """Numbers and frequencies are read as intervals."""
        assert evaluate_interval("3/2").is_interval
        result = evaluate_interval("660 Hz", context)
        assert result.is_interval
        assert result.value.to_fraction() == Fraction(3, 2)
