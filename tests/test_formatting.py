"""
Tests for writing quantities as notation.

Tests cover:
- FormattingOptions validation
- Fraction, cents, decimal, monzo and val spellings
- Interval spelling preferences
- Lossless round trips through the parser
"""

from fractions import Fraction

import pytest
from pydantic import ValidationError

from chuk_mcp_tuning.constants import Domain
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.core.quantity import Quantity
from chuk_mcp_tuning.errors import NonRepresentableError
from chuk_mcp_tuning.models.options import FormattingOptions
from chuk_mcp_tuning.notation.formatting import (
    format_cents,
    format_decimal,
    format_equal_temperament,
    format_fraction,
    format_interval,
    format_monzo,
    format_quantity,
    format_scalar,
    format_val,
    formatted_exactly,
)

F = Fraction


class TestFormattingOptions:
    """Tests for the options model."""

    def test_defaults(self) -> None:
        options = FormattingOptions()
        assert options.preferred_numerator is None
        assert options.cents_fraction_digits == 3
        assert not options.forbid_monzo

    def test_equave_parsed(self) -> None:
        assert FormattingOptions(preferred_et_equave="3/2").get_et_equave() == F(3, 2)

    def test_invalid_equave(self) -> None:
        with pytest.raises(ValidationError):
            FormattingOptions(preferred_et_equave="1")
        with pytest.raises(ValidationError):
            FormattingOptions(preferred_et_equave="tritave")

    def test_positive_preferences(self) -> None:
        with pytest.raises(ValidationError):
            FormattingOptions(preferred_denominator=0)

    def test_frozen(self) -> None:
        options = FormattingOptions()
        with pytest.raises(ValidationError):
            options.forbid_monzo = True

    def test_merge_skips_none(self) -> None:
        options = FormattingOptions(forbid_monzo=True)
        merged = options.merge(preferred_denominator=4, forbid_monzo=None)
        assert merged.preferred_denominator == 4
        assert merged.forbid_monzo
        assert options.preferred_denominator is None


class TestPrimitives:
    """Tests for the building block spellings."""

    def test_fraction(self) -> None:
        assert format_fraction(F(3, 2)) == "3/2"
        assert format_fraction(F(3)) == "3/1"
        assert format_fraction(F(3), integers=True) == "3"

    def test_preferred_denominator(self) -> None:
        assert format_fraction(F(3, 2), preferred_denominator=4) == "6/4"
        assert format_fraction(F(3, 2), preferred_denominator=5) == "3/2"

    def test_preferred_numerator(self) -> None:
        assert format_fraction(F(3, 2), preferred_numerator=9) == "9/6"
        assert format_fraction(F(5, 4), preferred_numerator=7) == "5/4"

    def test_cents(self) -> None:
        assert format_cents(701.955) == "701.955c"
        assert format_cents(1.5) == "1.5c"

    def test_whole_cents_keep_point(self) -> None:
        assert format_cents(100.0) == "100.c"

    def test_cents_digits(self) -> None:
        options = FormattingOptions(cents_fraction_digits=1)
        assert format_cents(701.955, options) == "702.c"

    def test_decimal(self) -> None:
        assert format_decimal(2**0.5) == "1.414214!"
        assert format_decimal(2.0) == "2.0!"

    def test_monzo(self) -> None:
        assert format_monzo(ExtendedMonzo([-4, 4, -1, 0])) == "[-4, 4, -1>"
        assert format_monzo(ExtendedMonzo([0, F(1, 2)])) == "[0, 1/2>"

    def test_val(self) -> None:
        assert format_val(ExtendedMonzo([12, 19, 28, 0])) == "<12 19 28]"

    def test_val_with_residual(self) -> None:
        with pytest.raises(NonRepresentableError):
            format_val(ExtendedMonzo([12, 19], 5))


class TestEqualTemperament:
    """Tests for equal division spellings."""

    def test_octave_division(self) -> None:
        assert format_equal_temperament(ExtendedMonzo([F(7, 12)])) == "7\\12"

    def test_tritave_division(self) -> None:
        assert format_equal_temperament(ExtendedMonzo([0, F(1, 13)])) == "1\\13<3>"

    def test_descending(self) -> None:
        assert format_equal_temperament(ExtendedMonzo([F(-7, 12)])) == "-7\\12"

    def test_preferred_denominator(self) -> None:
        options = FormattingOptions(preferred_et_denominator=24)
        assert format_equal_temperament(ExtendedMonzo([F(7, 12)]), options) == "14\\24"

    def test_preferred_equave_power(self) -> None:
        """An equave that is a root of the preferred one is rewritten."""
        options = FormattingOptions(preferred_et_equave="9")
        assert format_equal_temperament(ExtendedMonzo([0, F(2, 13)]), options) == "1\\13<9>"

    def test_preferred_equave_root(self) -> None:
        options = FormattingOptions(preferred_et_equave="4")
        assert format_equal_temperament(ExtendedMonzo([F(1, 2)]), options) == "1\\4<4>"


class TestIntervals:
    """Tests for interval spelling."""

    def test_ratio(self) -> None:
        assert format_interval(ExtendedMonzo.from_fraction(F(3, 2), 3)) == "3/2"

    def test_unison(self) -> None:
        assert format_interval(ExtendedMonzo.from_fraction(1, 3)) == "1/1"

    def test_pure_cents(self) -> None:
        assert format_interval(ExtendedMonzo.from_cents(701.955, 3)) == "701.955c"

    def test_ratio_with_offset(self) -> None:
        monzo = ExtendedMonzo([-1, 1, 0], 1, 1.955)
        assert format_interval(monzo) == "pitch(3/2) + 1.955c"

    def test_negligible_offset_dropped(self) -> None:
        """Offsets that round to zero cents are not written."""
        monzo = ExtendedMonzo([-1, 1, 0], 1, 1e-7)
        assert format_interval(monzo) == "3/2"

    def test_ratio_with_negative_offset(self) -> None:
        monzo = ExtendedMonzo([-1, 1, 0], 1, -2.0)
        assert format_interval(monzo) == "pitch(3/2) - 2.c"

    def test_forbid_composite(self) -> None:
        monzo = ExtendedMonzo([-1, 1, 0], 1, 1.955)
        options = FormattingOptions(forbid_composite=True)
        assert format_interval(monzo, options) == "703.91c"

    def test_equal_temperament(self) -> None:
        assert format_interval(ExtendedMonzo([F(7, 12)])) == "7\\12"

    def test_equal_temperament_with_offset(self) -> None:
        assert format_interval(ExtendedMonzo([F(1, 12)], 1, 5.0)) == "1\\12 + 5.c"

    def test_monzo_with_residual(self) -> None:
        monzo = ExtendedMonzo([F(1, 2), 0, 0], 7)
        assert format_interval(monzo) == "[1/2> + pitch(7/1)"

    def test_monzo_with_large_equave(self) -> None:
        """Equal divisions of unwieldy equaves are written as monzos."""
        monzo = ExtendedMonzo([F(-239609, 240000), 1])
        assert format_interval(monzo) == "[-239609/240000, 1>"

    def test_forbid_monzo(self) -> None:
        monzo = ExtendedMonzo([F(1, 2), 0, 0], 7)
        text = format_interval(monzo, FormattingOptions(forbid_monzo=True))
        assert text.endswith("c")
        assert float(text[:-1]) == pytest.approx(monzo.total_cents(), abs=1e-3)


class TestQuantities:
    """Tests for quantities of every dimension."""

    def test_scalar(self) -> None:
        assert format_scalar(ExtendedMonzo.from_fraction(3, 3)) == "3"
        assert format_scalar(ExtendedMonzo.from_fraction(F(3, 2), 3)) == "3/2"

    def test_irrational_scalar(self) -> None:
        assert format_scalar(ExtendedMonzo([F(1, 2)])) == "1.414214!"

    def test_frequency(self) -> None:
        assert format_quantity(Quantity.hertz(440, 3)) == "440 Hz"

    def test_period(self) -> None:
        period = Quantity(ExtendedMonzo.from_fraction(F(1, 440), 3), Domain.TIME, 1)
        assert format_quantity(period) == "1/440 s"

    def test_val(self) -> None:
        val = Quantity(ExtendedMonzo([12, 19, 28]), Domain.PITCH, -1)
        assert format_quantity(val) == "<12 19 28]"

    def test_unsupported_dimension(self) -> None:
        squared = Quantity(ExtendedMonzo.from_fraction(4, 3), Domain.TIME, -2)
        with pytest.raises(NonRepresentableError):
            format_quantity(squared)


class TestFormattedExactly:
    """Tests for lossless round trips."""

    def test_ratio_round_trip(self) -> None:
        fifth = Quantity.interval(ExtendedMonzo.from_fraction(F(3, 2), 3))
        assert formatted_exactly(fifth, format_quantity(fifth))

    def test_composite_round_trip(self) -> None:
        quantity = Quantity.interval(ExtendedMonzo([-1, 1, 0], 1, 1.955))
        assert formatted_exactly(quantity, format_quantity(quantity))

    def test_residual_round_trip(self) -> None:
        quantity = Quantity.interval(ExtendedMonzo([F(1, 2), 0, 0], 7))
        assert formatted_exactly(quantity, format_quantity(quantity))

    def test_tritave_round_trip(self) -> None:
        quantity = Quantity.interval(ExtendedMonzo([0, F(1, 13), 0]))
        assert formatted_exactly(quantity, format_quantity(quantity))

    def test_rounded_cents_are_lossy(self) -> None:
        fifth = Quantity.interval(ExtendedMonzo.from_fraction(F(3, 2), 3))
        assert not formatted_exactly(fifth, "701.955c")

    def test_hard_decimal_is_lossy(self) -> None:
        root = Quantity(ExtendedMonzo([F(1, 2)]))
        assert not formatted_exactly(root, format_quantity(root))

    def test_dimension_must_match(self) -> None:
        fifth = Quantity.interval(ExtendedMonzo.from_fraction(F(3, 2), 3))
        assert not formatted_exactly(fifth, "440 Hz")
