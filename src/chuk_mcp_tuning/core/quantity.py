"""
Quantity - an exact value tagged with a domain and a fractional exponent.

The domain/exponent pair is the dimension of the value:

    pitch^1   interval (e.g. 3/2 as a fifth)
    pitch^-1  val, a linear map from intervals to steps
    time^1    duration in seconds
    time^-1   frequency in hertz
    scalar^0  plain number

Pitch-domain values combine in pitch space (adding intervals multiplies
frequencies); scalar and time values use ordinary arithmetic.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from fractions import Fraction

from chuk_mcp_tuning.constants import (
    A4_FREQUENCY,
    A4_MIDI_INDEX,
    DEFAULT_NUMBER_OF_COMPONENTS,
    SPEED_OF_LIGHT,
    Domain,
    ErrorMessages,
)
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.errors import (
    CannotExponentiatePitchError,
    DomainMismatchError,
    ExponentMismatchError,
    IncompatibleDomainsError,
    MissingBaseFrequencyError,
)

HALF = Fraction(1, 2)
THIRD = Fraction(1, 3)


@dataclass(frozen=True)
class Quantity:
    """
    Dimensional quantity.

    A zero exponent always means the scalar domain; a scalar with a
    non-zero exponent is rejected.
    """

    value: ExtendedMonzo
    domain: Domain = Domain.SCALAR
    exponent: Fraction = field(default=Fraction(0))

    def __post_init__(self) -> None:
        """Normalize the dimension."""
        object.__setattr__(self, "exponent", Fraction(self.exponent))
        object.__setattr__(self, "domain", Domain(self.domain))
        if self.exponent == 0:
            object.__setattr__(self, "domain", Domain.SCALAR)
        elif self.domain == Domain.SCALAR:
            raise ValueError(ErrorMessages.SCALAR_EXPONENT.format(exponent=self.exponent))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def scalar(
        cls, value: Fraction | int | float, number_of_components: int = DEFAULT_NUMBER_OF_COMPONENTS
    ) -> Quantity:
        """Plain number, exact unless a non-integral float is given."""
        if isinstance(value, float):
            return cls(ExtendedMonzo.from_value(value, number_of_components))
        return cls(ExtendedMonzo.from_fraction(value, number_of_components))

    @classmethod
    def interval(cls, value: ExtendedMonzo) -> Quantity:
        """Relative pitch."""
        return cls(value, Domain.PITCH, Fraction(1))

    @classmethod
    def hertz(
        cls, value: Fraction | int | float, number_of_components: int = DEFAULT_NUMBER_OF_COMPONENTS
    ) -> Quantity:
        """Frequency."""
        return cls(cls.scalar(value, number_of_components).value, Domain.TIME, Fraction(-1))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_scalar(self) -> bool:
        return self.domain == Domain.SCALAR

    @property
    def is_interval(self) -> bool:
        return self.domain == Domain.PITCH and self.exponent == 1

    @property
    def is_val(self) -> bool:
        return self.domain == Domain.PITCH and self.exponent == -1

    @property
    def is_frequency(self) -> bool:
        return self.domain == Domain.TIME and self.exponent == -1

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _require_same_dimension(self, other: Quantity) -> None:
        if self.domain != other.domain:
            raise DomainMismatchError(
                ErrorMessages.DOMAIN_MISMATCH.format(
                    left=self.domain.value, right=other.domain.value
                )
            )
        if self.exponent != other.exponent:
            raise ExponentMismatchError(
                ErrorMessages.EXPONENT_MISMATCH.format(left=self.exponent, right=other.exponent)
            )

    def neg(self) -> Quantity:
        """Descending interval for pitch, arithmetic negation otherwise."""
        if self.domain == Domain.PITCH:
            return Quantity(self.value.neg(), self.domain, self.exponent)
        return Quantity(self.value.numeric_neg(), self.domain, self.exponent)

    def inverse(self) -> Quantity:
        """
        Flip the exponent.

        Pitch values use the geometric inverse (interval <-> val), other
        domains take the reciprocal.
        """
        if self.domain == Domain.PITCH:
            return Quantity(self.value.geometric_inverse(), self.domain, -self.exponent)
        return Quantity(self.value.neg(), self.domain, -self.exponent)

    def add(self, other: Quantity) -> Quantity:
        self._require_same_dimension(other)
        if self.domain == Domain.PITCH:
            return Quantity(self.value.add(other.value), self.domain, self.exponent)
        return Quantity(self.value.numeric_add(other.value), self.domain, self.exponent)

    def sub(self, other: Quantity) -> Quantity:
        return self.add(other.neg())

    def mul(self, other: Quantity) -> Quantity:
        """
        Multiply.

        pitch * scalar repeats the interval, val * interval is a dot
        product giving a scalar step count.
        """
        if self.domain == Domain.PITCH:
            if other.exponent == 0:
                return Quantity(self.value.pow(other.value), self.domain, self.exponent)
            if other.domain != Domain.PITCH:
                raise IncompatibleDomainsError(
                    ErrorMessages.INCOMPATIBLE_DOMAINS.format(
                        left=self.domain.value, right=other.domain.value
                    )
                )
            if self.exponent + other.exponent != 0:
                raise ExponentMismatchError(
                    ErrorMessages.DOT_EXPONENTS.format(left=self.exponent, right=other.exponent)
                )
            dot = self.value.dot(other.value)
            return Quantity(ExtendedMonzo.from_fraction(dot, self.value.number_of_components))
        if other.domain == Domain.PITCH:
            return other.mul(self)
        if (
            self.domain != Domain.SCALAR
            and other.domain != Domain.SCALAR
            and self.domain != other.domain
        ):
            raise IncompatibleDomainsError(
                ErrorMessages.INCOMPATIBLE_DOMAINS.format(
                    left=self.domain.value, right=other.domain.value
                )
            )
        domain = other.domain if self.domain == Domain.SCALAR else self.domain
        return Quantity(
            self.value.add(other.value),
            domain,
            self.exponent + other.exponent,
        )

    def div(self, other: Quantity) -> Quantity:
        """Divide. pitch / pitch of equal exponent is the ratio of sizes."""
        if (
            self.domain == Domain.PITCH
            and other.domain == Domain.PITCH
            and self.exponent == other.exponent
        ):
            return _log_quantity(self.value.log(other.value), self.value.number_of_components)
        return self.mul(other.inverse())

    def pow(self, other: Quantity) -> Quantity:
        """
        Exponentiate by a scalar.

        Raises:
            IncompatibleDomainsError: If the exponent is not a scalar
            CannotExponentiatePitchError: If the base is a pitch
        """
        if other.domain != Domain.SCALAR:
            raise IncompatibleDomainsError(
                ErrorMessages.SCALAR_EXPONENT_ONLY.format(domain=other.domain.value)
            )
        if self.domain == Domain.PITCH:
            raise CannotExponentiatePitchError(ErrorMessages.CANNOT_EXPONENTIATE_PITCH)
        exponent = self.exponent
        if exponent != 0:
            exponent = exponent * other.value.to_fraction()
        return Quantity(self.value.pow(other.value), self.domain, exponent)

    def log(self, other: Quantity) -> Quantity:
        """Logarithm of one dimensionless value in the base of another."""
        if self.exponent != 0 or other.exponent != 0:
            raise IncompatibleDomainsError(
                ErrorMessages.DIMENSIONLESS_ONLY.format(operation="log")
            )
        return _log_quantity(self.value.log(other.value), self.value.number_of_components)

    def mod(self, other: Quantity) -> Quantity:
        """Reduce intervals geometrically, numbers arithmetically."""
        self._require_same_dimension(other)
        if self.domain == Domain.PITCH:
            return Quantity(self.value.reduce(other.value), self.domain, self.exponent)
        return Quantity(self.value.numeric_mod(other.value), self.domain, self.exponent)

    def reduce(self, other: Quantity) -> Quantity:
        """Geometric reduction of one number by another."""
        if self.domain != Domain.SCALAR or other.domain != Domain.SCALAR:
            raise IncompatibleDomainsError(
                ErrorMessages.DIMENSIONLESS_ONLY.format(operation="reduce")
            )
        return Quantity(self.value.reduce(other.value))

    def __neg__(self) -> Quantity:
        return self.neg()

    def __add__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.mul(other)

    def __truediv__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.div(other)

    def __pow__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.pow(other)

    def __mod__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.mod(other)

    def __str__(self) -> str:
        if self.domain == Domain.SCALAR:
            return f"{self.value.value_of():g}"
        return f"{self.value.value_of():g} {self.domain.value}^{self.exponent}"


def _log_quantity(result: Fraction | float, number_of_components: int) -> Quantity:
    if isinstance(result, Fraction):
        return Quantity(ExtendedMonzo.from_fraction(result, number_of_components))
    return Quantity(ExtendedMonzo.from_value(result, number_of_components))


# ----------------------------------------------------------------------
# Domain conversions
# ----------------------------------------------------------------------


def normalize_frequency(quantity: Quantity) -> Quantity:
    """
    Express a time-domain quantity as a frequency (time^-1).

    Seconds become hertz by taking the reciprocal.
    """
    if quantity.domain != Domain.TIME:
        raise IncompatibleDomainsError(ErrorMessages.TIME_DOMAIN_ONLY)
    value = quantity.value.scale(-1 / quantity.exponent)
    return Quantity(value, Domain.TIME, Fraction(-1))


def ratio(quantity: Quantity, base_frequency: Quantity | None = None) -> Quantity:
    """Dimensionless frequency ratio of a quantity relative to the base."""
    if quantity.domain == Domain.PITCH:
        return Quantity(quantity.value)
    if quantity.exponent == 0:
        return quantity
    if base_frequency is None:
        raise MissingBaseFrequencyError(
            ErrorMessages.MISSING_BASE_FREQUENCY.format(
                domain=quantity.domain.value, target="a ratio"
            )
        )
    return normalize_frequency(quantity).div(normalize_frequency(base_frequency))


def frequency(quantity: Quantity, base_frequency: Quantity | None = None) -> Quantity:
    """Absolute frequency in hertz."""
    if quantity.domain == Domain.TIME:
        return normalize_frequency(quantity)
    if base_frequency is None:
        raise MissingBaseFrequencyError(
            ErrorMessages.MISSING_BASE_FREQUENCY.format(
                domain=quantity.domain.value, target="a frequency"
            )
        )
    return normalize_frequency(base_frequency).mul(ratio(quantity, base_frequency))


def pitch(quantity: Quantity, base_frequency: Quantity | None = None) -> Quantity:
    """Relative pitch (interval) of a quantity."""
    if quantity.domain == Domain.PITCH:
        return quantity
    if quantity.exponent == 0:
        return Quantity(quantity.value, Domain.PITCH, Fraction(1))
    return pitch(ratio(quantity, base_frequency), base_frequency)


def mtof(index: Quantity) -> Quantity:
    """MIDI note number to frequency (A4 = 69 = 440 Hz)."""
    if index.domain != Domain.SCALAR:
        raise IncompatibleDomainsError(ErrorMessages.DIMENSIONLESS_ONLY.format(operation="mtof"))
    number_of_components = index.value.number_of_components
    offset = index.value.try_fraction()
    if offset is None:
        steps = ExtendedMonzo.from_cents((index.value.value_of() - A4_MIDI_INDEX) * 100, 1)
    else:
        steps = ExtendedMonzo.from_equal_temperament(
            Fraction(offset - A4_MIDI_INDEX, 12), 2, number_of_components
        )
    base = ExtendedMonzo.from_value(A4_FREQUENCY, number_of_components)
    return Quantity(base.add(steps), Domain.TIME, Fraction(-1))


def ftom(quantity: Quantity, base_frequency: Quantity | None = None) -> Quantity:
    """Frequency (or anything convertible to one) to fractional MIDI note number."""
    hertz = frequency(quantity, base_frequency).value.value_of()
    index = A4_MIDI_INDEX + 12 * math.log2(hertz / A4_FREQUENCY)
    return Quantity(ExtendedMonzo.from_value(index, quantity.value.number_of_components))


def nmtof(wavelength: Quantity) -> Quantity:
    """Wavelength in nanometres to frequency."""
    if wavelength.domain != Domain.SCALAR:
        raise IncompatibleDomainsError(ErrorMessages.DIMENSIONLESS_ONLY.format(operation="nmtof"))
    number_of_components = wavelength.value.number_of_components
    light = ExtendedMonzo.from_fraction(int(SPEED_OF_LIGHT), number_of_components)
    return Quantity(light.sub(wavelength.value), Domain.TIME, Fraction(-1))


def sqrt(quantity: Quantity) -> Quantity:
    return quantity.pow(Quantity(ExtendedMonzo.from_fraction(HALF, 1)))


def cbrt(quantity: Quantity) -> Quantity:
    return quantity.pow(Quantity(ExtendedMonzo.from_fraction(THIRD, 1)))
