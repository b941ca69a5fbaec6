"""
ExtendedMonzo - exact representation of a pitch or frequency value.

A value is split into three parts:
- vector: fractional exponents over the first N primes (2, 3, 5, ...)
- residual: the rational part the first N primes cannot absorb
- cents: an irrational offset in cents

    value = 2^(cents/1200) * residual * prod(prime_i ^ vector_i)

Operations named after pitch arithmetic (add, sub, neg, scale) act in
pitch space, i.e. they multiply, divide, invert and exponentiate in
frequency space. The numeric_* helpers implement plain arithmetic on the
value for dimensionless and time-domain quantities.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from fractions import Fraction
from functools import total_ordering

from chuk_mcp_tuning.constants import PRIME_CENTS, PRIMES, ErrorMessages
from chuk_mcp_tuning.core.primes import (
    cents_to_value,
    fraction_cents,
    fraction_pow,
    prime_limit,
    to_monzo,
    to_monzo_and_residual,
    value_to_cents,
)
from chuk_mcp_tuning.errors import (
    IrrationalError,
    ModuloByUnisonError,
    NonRepresentableError,
)

Rational = Fraction | int

# Remainder below which a continued fraction expansion of a float stops
CONTINUED_FRACTION_EPSILON = 1e-9


@total_ordering
class ExtendedMonzo:
    """
    Exact hybrid pitch value.

    Comparison operators and equals() compare sizes (total cents);
    strict_equals() compares the three parts exactly.

    Immutable - every operation returns a new instance.
    """

    __slots__ = ("_vector", "_residual", "_cents")
    _vector: tuple[Fraction, ...]
    _residual: Fraction
    _cents: float

    def __init__(
        self,
        vector: Iterable[Rational],
        residual: Rational = 1,
        cents: float = 0.0,
    ) -> None:
        """Create a monzo. Cents must not be NaN."""
        cents = float(cents)
        if math.isnan(cents):
            raise ValueError(ErrorMessages.NAN_CENTS)
        self._vector = tuple(Fraction(component) for component in vector)
        self._residual = Fraction(residual)
        self._cents = cents

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_fraction(cls, fraction: Rational | str, number_of_components: int) -> ExtendedMonzo:
        """Factor a rational number over the first primes."""
        vector, residual = to_monzo_and_residual(Fraction(fraction), number_of_components)
        return cls(vector, residual)

    @classmethod
    def from_cents(cls, cents: float, number_of_components: int) -> ExtendedMonzo:
        """A pure cents offset."""
        return cls([0] * number_of_components, 1, cents)

    @classmethod
    def from_equal_temperament(
        cls,
        fraction_of_equave: Rational,
        equave: Rational = 2,
        number_of_components: int | None = None,
    ) -> ExtendedMonzo:
        """
        A fraction of an equave, e.g. 7 steps of 12 per octave.

        The equave must factor completely over the first
        number_of_components primes.

        Raises:
            NonRepresentableError: If the equave leaves a residual
        """
        equave = Fraction(equave)
        if number_of_components is None:
            number_of_components = prime_limit(equave, as_ordinal=True)
        vector, residual = to_monzo_and_residual(equave, number_of_components)
        if residual != 1:
            raise NonRepresentableError(
                ErrorMessages.NON_REPRESENTABLE.format(
                    detail=f"equave {equave} does not factor over "
                    f"the first {number_of_components} primes"
                )
            )
        fraction = Fraction(fraction_of_equave)
        return cls([component * fraction for component in vector])

    @classmethod
    def from_value(cls, value: float, number_of_components: int) -> ExtendedMonzo:
        """Convert a real number. Integral values are factored exactly."""
        value = float(value)
        if value.is_integer() and abs(value) < 2**53:
            return cls.from_fraction(int(value), number_of_components)
        if value < 0:
            return cls([0] * number_of_components, -1, value_to_cents(-value))
        return cls.from_cents(value_to_cents(value), number_of_components)

    # ------------------------------------------------------------------
    # Parts
    # ------------------------------------------------------------------

    @property
    def vector(self) -> tuple[Fraction, ...]:
        """Prime exponents."""
        return self._vector

    @property
    def residual(self) -> Fraction:
        """Rational part outside the prime basis."""
        return self._residual

    @property
    def cents(self) -> float:
        """Irrational offset in cents."""
        return self._cents

    @property
    def number_of_components(self) -> int:
        return len(self._vector)

    def with_components(self, number_of_components: int) -> ExtendedMonzo:
        """
        Re-express the value with a different vector length.

        Dropped integer exponents move into the residual, dropped
        fractional exponents into the cents offset.
        """
        if number_of_components >= len(self._vector):
            padding = [Fraction(0)] * (number_of_components - len(self._vector))
            return ExtendedMonzo(self._vector + tuple(padding), self._residual, self._cents)
        residual = self._residual
        cents = self._cents
        for index in range(number_of_components, len(self._vector)):
            component = self._vector[index]
            if component.denominator == 1:
                residual *= Fraction(PRIMES[index]) ** component.numerator
            else:
                cents += float(component) * PRIME_CENTS[index]
        return ExtendedMonzo(self._vector[:number_of_components], residual, cents)

    def _widen(self, other: ExtendedMonzo) -> tuple[list[Fraction], list[Fraction]]:
        """Zero-extend both vectors to the longer length."""
        length = max(len(self._vector), len(other._vector))
        zero = Fraction(0)
        left = list(self._vector) + [zero] * (length - len(self._vector))
        right = list(other._vector) + [zero] * (length - len(other._vector))
        return left, right

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def total_cents(self) -> float:
        """Size in cents. The number zero is minus infinity."""
        if self._residual == 0:
            return -math.inf
        total = self._cents
        if abs(self._residual) != 1:
            total += fraction_cents(abs(self._residual))
        for index, component in enumerate(self._vector):
            if component:
                total += float(component) * PRIME_CENTS[index]
        return total

    def to_cents(self) -> float:
        return self.total_cents()

    def value_of(self) -> float:
        """Value in frequency space as a float."""
        if self._residual == 0:
            return 0.0
        magnitude = cents_to_value(self.total_cents())
        return -magnitude if self._residual < 0 else magnitude

    def __float__(self) -> float:
        return self.value_of()

    def to_fraction(self) -> Fraction:
        """
        Exact rational value.

        Raises:
            IrrationalError: If there is a cents offset or an irrational prime power
        """
        if self._cents != 0:
            raise IrrationalError(ErrorMessages.IRRATIONAL.format(detail="non-zero cents offset"))
        result = self._residual
        for index, component in enumerate(self._vector):
            if not component:
                continue
            power = fraction_pow(Fraction(PRIMES[index]), component)
            if power is None:
                raise IrrationalError(
                    ErrorMessages.IRRATIONAL.format(detail=f"{PRIMES[index]}^({component})")
                )
            result *= power
        return result

    def try_fraction(self) -> Fraction | None:
        """Exact rational value, or None when irrational."""
        try:
            return self.to_fraction()
        except IrrationalError:
            return None

    def to_equal_temperament(self) -> tuple[Fraction, Fraction]:
        """
        Express as (fraction_of_equave, equave).

        An all-zero vector gives (0, 1). Equaves below 1 are flipped so that
        the fraction carries the sign.

        Raises:
            IrrationalError: If there is a cents offset
            NonRepresentableError: If the residual is not 1
        """
        if self._cents != 0:
            raise IrrationalError(ErrorMessages.NON_ALGEBRAIC)
        if self._residual != 1:
            raise NonRepresentableError(
                ErrorMessages.NON_REPRESENTABLE.format(detail=f"residual {self._residual}")
            )
        if not any(self._vector):
            return Fraction(0), Fraction(1)
        denominator = math.lcm(*(component.denominator for component in self._vector))
        numerator = math.gcd(*((component * denominator).numerator for component in self._vector))
        fraction = Fraction(numerator, denominator)
        equave = self.scale_inverse(fraction).to_fraction()
        if equave < 1:
            return -fraction, 1 / equave
        return fraction, equave

    def to_integer_monzo(self) -> list[int]:
        """
        Full integer prime exponent list, residual included.

        Raises:
            IrrationalError: If the value is not a fraction
        """
        if not self.is_fractional():
            raise IrrationalError(ErrorMessages.IRRATIONAL.format(detail="not a fraction"))
        if self._residual <= 0:
            raise NonRepresentableError(
                ErrorMessages.NON_REPRESENTABLE.format(detail="non-positive value")
            )
        result = [int(component) for component in self._vector]
        for index, exponent in enumerate(to_monzo(self._residual)):
            if index < len(result):
                result[index] += exponent
            else:
                result.append(exponent)
        return result

    # ------------------------------------------------------------------
    # Type predicates
    # ------------------------------------------------------------------

    def is_fractional(self) -> bool:
        """Integer exponents and no cents offset."""
        return self._cents == 0 and all(c.denominator == 1 for c in self._vector)

    def is_equal_temperament(self) -> bool:
        """Prime exponents only."""
        return self._cents == 0 and self._residual == 1

    def is_cents(self) -> bool:
        """Nothing but a cents offset."""
        return self._residual == 1 and not any(self._vector)

    def is_composite(self) -> bool:
        """Needs more than one of the simple forms to be written down."""
        return not (self.is_fractional() or self.is_equal_temperament() or self.is_cents())

    def is_power_of_two(self) -> bool:
        if self._cents != 0 or self._residual != 1:
            return False
        if not self._vector:
            return True
        return self._vector[0].denominator == 1 and not any(self._vector[1:])

    # ------------------------------------------------------------------
    # Pitch-space arithmetic
    # ------------------------------------------------------------------

    def neg(self) -> ExtendedMonzo:
        """Reciprocal in frequency space (descending interval)."""
        if self._residual == 0:
            raise NonRepresentableError(
                ErrorMessages.NON_REPRESENTABLE.format(detail="reciprocal of zero")
            )
        return ExtendedMonzo([-c for c in self._vector], 1 / self._residual, -self._cents)

    def add(self, other: ExtendedMonzo) -> ExtendedMonzo:
        """Stack intervals (multiply in frequency space)."""
        left, right = self._widen(other)
        return ExtendedMonzo(
            [a + b for a, b in zip(left, right, strict=True)],
            self._residual * other._residual,
            self._cents + other._cents,
        )

    def sub(self, other: ExtendedMonzo) -> ExtendedMonzo:
        """Difference of intervals (divide in frequency space)."""
        if other._residual == 0:
            raise NonRepresentableError(
                ErrorMessages.NON_REPRESENTABLE.format(detail="division by zero")
            )
        left, right = self._widen(other)
        return ExtendedMonzo(
            [a - b for a, b in zip(left, right, strict=True)],
            self._residual / other._residual,
            self._cents - other._cents,
        )

    def scale(self, scalar: Rational | float) -> ExtendedMonzo:
        """
        Multiply in pitch space (exponentiate in frequency space).

        Rational factors keep the vector exact. When the residual would
        become irrational its size moves into the cents offset. Real
        factors fold the whole value into cents.
        """
        if isinstance(scalar, float):
            if not scalar.is_integer():
                if self._residual <= 0:
                    raise NonRepresentableError(
                        ErrorMessages.NON_REPRESENTABLE.format(
                            detail="real power of a non-positive number"
                        )
                    )
                return ExtendedMonzo.from_cents(
                    self.total_cents() * scalar, len(self._vector)
                )
            scalar = int(scalar)
        scalar = Fraction(scalar)
        vector = [component * scalar for component in self._vector]
        cents = self._cents * float(scalar)
        residual = fraction_pow(self._residual, scalar)
        if residual is None:
            if self._residual <= 0:
                raise NonRepresentableError(
                    ErrorMessages.NON_REPRESENTABLE.format(
                        detail=f"({self._residual})^({scalar})"
                    )
                )
            cents += fraction_cents(self._residual) * float(scalar)
            residual = Fraction(1)
        return ExtendedMonzo(vector, residual, cents)

    def scale_inverse(self, scalar: Rational | float) -> ExtendedMonzo:
        """Divide in pitch space (take a root in frequency space)."""
        if isinstance(scalar, float) and not scalar.is_integer():
            return self.scale(1 / scalar)
        return self.scale(1 / Fraction(scalar))

    def stretch(self, factor: float) -> ExtendedMonzo:
        """Stretch the size by a real factor, keeping the exact parts."""
        return ExtendedMonzo(
            self._vector,
            self._residual,
            self._cents + self.total_cents() * (factor - 1),
        )

    def abs(self) -> ExtendedMonzo:
        """Ascending version of the interval."""
        return self.neg() if self.total_cents() < 0 else self

    def _modulus_cents(self, other: ExtendedMonzo) -> float:
        other_cents = other.total_cents()
        if other_cents == 0:
            raise ModuloByUnisonError(ErrorMessages.MODULO_BY_UNISON)
        return other_cents

    def mod(self, other: ExtendedMonzo) -> ExtendedMonzo:
        """Truncated modulo in pitch space (result keeps the sign of self)."""
        multiplier = math.trunc(self.total_cents() / self._modulus_cents(other))
        return self.sub(other.scale(multiplier))

    def mmod(self, other: ExtendedMonzo) -> ExtendedMonzo:
        """
        Floored modulo in pitch space, e.g. octave reduction.

        Raises:
            ModuloByUnisonError: If other has zero size
        """
        multiplier = math.floor(self.total_cents() / self._modulus_cents(other))
        return self.sub(other.scale(multiplier))

    def reduce(self, other: ExtendedMonzo) -> ExtendedMonzo:
        """Reduce by a period (geometric modulo)."""
        return self.mmod(other)

    # ------------------------------------------------------------------
    # Frequency-space arithmetic
    # ------------------------------------------------------------------

    def numeric_neg(self) -> ExtendedMonzo:
        """Negative of the value."""
        return ExtendedMonzo(self._vector, -self._residual, self._cents)

    def numeric_add(self, other: ExtendedMonzo) -> ExtendedMonzo:
        """Sum of values, exact when both are rational."""
        number_of_components = max(len(self._vector), len(other._vector))
        left = self.try_fraction()
        right = other.try_fraction()
        if left is not None and right is not None:
            return ExtendedMonzo.from_fraction(left + right, number_of_components)
        return ExtendedMonzo.from_value(self.value_of() + other.value_of(), number_of_components)

    def numeric_mod(self, other: ExtendedMonzo) -> ExtendedMonzo:
        """Floored modulo of values."""
        number_of_components = max(len(self._vector), len(other._vector))
        left = self.try_fraction()
        right = other.try_fraction()
        if right == 0 or other._residual == 0:
            raise ModuloByUnisonError(ErrorMessages.MODULO_BY_UNISON)
        if left is not None and right is not None:
            return ExtendedMonzo.from_fraction(left % right, number_of_components)
        dividend = self.value_of()
        divisor = other.value_of()
        return ExtendedMonzo.from_value(
            dividend - divisor * math.floor(dividend / divisor), number_of_components
        )

    def pow(self, other: ExtendedMonzo) -> ExtendedMonzo:
        """Raise the value to the (dimensionless) value of other."""
        exponent = other.try_fraction()
        if exponent is None:
            return self.scale(other.value_of())
        return self.scale(exponent)

    def dot(self, other: ExtendedMonzo) -> Fraction:
        """
        Exact dot product of prime exponent vectors.

        Raises:
            NonRepresentableError: If either side has a residual or cents offset
        """
        for operand in (self, other):
            if not operand.is_equal_temperament():
                raise NonRepresentableError(
                    ErrorMessages.NON_REPRESENTABLE.format(
                        detail="dot product needs pure prime exponents"
                    )
                )
        left, right = self._widen(other)
        return sum((a * b for a, b in zip(left, right, strict=True)), Fraction(0))

    def geometric_inverse(self) -> ExtendedMonzo:
        """
        Vector divided by its squared length, so that v . inverse(v) == 1.

        Raises:
            NonRepresentableError: For values with a residual, cents or zero size
        """
        magnitude = self.dot(self)
        if magnitude == 0:
            raise NonRepresentableError(
                ErrorMessages.NON_REPRESENTABLE.format(detail="geometric inverse of unison")
            )
        return ExtendedMonzo([component / magnitude for component in self._vector])

    def log(self, other: ExtendedMonzo) -> Fraction | float:
        """
        Logarithm of self in the base of other.

        Exact when both are pure prime vectors pointing the same way.
        """
        other_cents = other.total_cents()
        if other_cents == 0:
            raise ModuloByUnisonError(ErrorMessages.MODULO_BY_UNISON)
        if self.is_equal_temperament() and other.is_equal_temperament():
            left, right = self._widen(other)
            pivot = next(index for index, component in enumerate(right) if component)
            ratio = left[pivot] / right[pivot]
            if all(a == ratio * b for a, b in zip(left, right, strict=True)):
                return ratio
        return self.total_cents() / other_cents

    # ------------------------------------------------------------------
    # Approximation
    # ------------------------------------------------------------------

    def approximate_harmonic(self, denominator: int) -> ExtendedMonzo:
        """Nearest harmonic over a fixed denominator."""
        numerator = round(self.value_of() * denominator)
        return ExtendedMonzo.from_fraction(Fraction(numerator, denominator), len(self._vector))

    def approximate_subharmonic(self, numerator: int) -> ExtendedMonzo:
        """Nearest subharmonic under a fixed numerator."""
        denominator = round(numerator / self.value_of())
        return ExtendedMonzo.from_fraction(Fraction(numerator, denominator), len(self._vector))

    def approximate_simple(self, epsilon: float = 1e-3) -> ExtendedMonzo:
        """First convergent within a relative error of epsilon."""
        target = self.value_of()
        convergent = self.get_convergent(0)
        for depth in range(len(self.to_continued())):
            convergent = self.get_convergent(depth)
            if abs(float(convergent) / target - 1) < epsilon:
                break
        return ExtendedMonzo.from_fraction(convergent, len(self._vector))

    def to_continued(self, max_terms: int = 32) -> list[int]:
        """Continued fraction coefficients of the value."""
        exact = self.try_fraction()
        coefficients: list[int] = []
        if exact is not None:
            while len(coefficients) < max_terms:
                whole = math.floor(exact)
                coefficients.append(whole)
                exact -= whole
                if exact == 0:
                    break
                exact = 1 / exact
            return coefficients
        value = self.value_of()
        while len(coefficients) < max_terms:
            whole = math.floor(value)
            coefficients.append(whole)
            value -= whole
            if value < CONTINUED_FRACTION_EPSILON:
                break
            value = 1 / value
        return coefficients

    def get_convergent(self, depth: int) -> Fraction:
        """Continued fraction convergent at the given depth."""
        coefficients = self.to_continued()[: depth + 1]
        result = Fraction(coefficients[-1])
        for coefficient in reversed(coefficients[:-1]):
            result = coefficient + 1 / result
        return result

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def strict_equals(self, other: ExtendedMonzo) -> bool:
        """All three parts equal (vectors compared zero-extended)."""
        left, right = self._widen(other)
        return left == right and self._residual == other._residual and self._cents == other._cents

    def equals(self, other: ExtendedMonzo) -> bool:
        """Same size."""
        return self.total_cents() == other.total_cents()

    def compare(self, other: ExtendedMonzo) -> float:
        """Negative, zero or positive like a sort key difference."""
        return self.total_cents() - other.total_cents()

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------

    def __add__(self, other: ExtendedMonzo) -> ExtendedMonzo:
        if not isinstance(other, ExtendedMonzo):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: ExtendedMonzo) -> ExtendedMonzo:
        if not isinstance(other, ExtendedMonzo):
            return NotImplemented
        return self.sub(other)

    def __neg__(self) -> ExtendedMonzo:
        return self.neg()

    def __mul__(self, scalar: Rational | float) -> ExtendedMonzo:
        if not isinstance(scalar, int | Fraction | float):
            return NotImplemented
        return self.scale(scalar)

    def __rmul__(self, scalar: Rational | float) -> ExtendedMonzo:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: Rational | float) -> ExtendedMonzo:
        if not isinstance(scalar, int | Fraction | float):
            return NotImplemented
        return self.scale_inverse(scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtendedMonzo):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other: ExtendedMonzo) -> bool:
        if not isinstance(other, ExtendedMonzo):
            return NotImplemented
        return self.total_cents() < other.total_cents()

    def __hash__(self) -> int:
        return hash(self.total_cents())

    def __repr__(self) -> str:
        components = ", ".join(str(component) for component in self._vector)
        return f"ExtendedMonzo([{components}], {self._residual}, {self._cents!r})"
