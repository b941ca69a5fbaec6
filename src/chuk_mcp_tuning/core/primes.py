"""
Prime factorization and exact power helpers.

Everything here works on Python ints and Fractions so that rational
arithmetic stays exact; floats only appear in the cents conversions.
"""

from __future__ import annotations

import math
from fractions import Fraction

from chuk_mcp_tuning.constants import PRIMES, ErrorMessages
from chuk_mcp_tuning.errors import OutOfPrimesError

_PRIME_SET = frozenset(PRIMES)


def value_to_cents(value: float) -> float:
    """Size of a frequency ratio in cents."""
    return 1200 * math.log2(value)


def cents_to_value(cents: float) -> float:
    """Frequency ratio of a size in cents."""
    return 2 ** (cents / 1200)


def fraction_cents(fraction: Fraction) -> float:
    """Size of a positive fraction in cents, precise for huge terms."""
    return 1200 * (math.log2(fraction.numerator) - math.log2(fraction.denominator))


def is_prime(n: int) -> bool:
    """Check primality (table lookup, trial division beyond it)."""
    if n < 2:
        return False
    if n <= PRIMES[-1]:
        return n in _PRIME_SET
    return all(n % p for p in range(2, math.isqrt(n) + 1))


def _factor(n: int, number_of_components: int) -> tuple[list[int], int]:
    """Split a positive int into prime exponents and an unfactored remainder."""
    vector = [0] * number_of_components
    for i in range(number_of_components):
        if n == 1:
            break
        p = PRIMES[i]
        while n % p == 0:
            n //= p
            vector[i] += 1
    return vector, n


def to_monzo_and_residual(
    value: Fraction | int, number_of_components: int
) -> tuple[list[int], Fraction]:
    """
    Factor a rational number over the first primes.

    Returns the exponent vector and whatever is left over. Signs and zero
    are carried by the residual.

    Examples:
        to_monzo_and_residual(Fraction(45, 4), 3) -> ([-2, 2, 1], 1)
        to_monzo_and_residual(Fraction(-11, 3), 2) -> ([0, -1], -11)
    """
    if number_of_components > len(PRIMES):
        raise OutOfPrimesError(
            ErrorMessages.OUT_OF_PRIMES.format(index=number_of_components, count=len(PRIMES))
        )
    value = Fraction(value)
    if value == 0:
        return [0] * number_of_components, Fraction(0)
    sign = -1 if value < 0 else 1
    numerator_vector, numerator = _factor(abs(value.numerator), number_of_components)
    denominator_vector, denominator = _factor(value.denominator, number_of_components)
    vector = [a - b for a, b in zip(numerator_vector, denominator_vector, strict=True)]
    return vector, Fraction(sign * numerator, denominator)


def to_monzo(value: Fraction | int) -> list[int]:
    """
    Fully factor a positive rational number.

    Raises:
        OutOfPrimesError: If a prime factor lies beyond the prime table
    """
    value = Fraction(value)
    vector, residual = to_monzo_and_residual(value, len(PRIMES))
    if residual != 1:
        raise OutOfPrimesError(
            ErrorMessages.OUT_OF_PRIMES.format(index=len(PRIMES), count=len(PRIMES))
        )
    while vector and vector[-1] == 0:
        vector.pop()
    return vector


def prime_limit(value: Fraction | int, as_ordinal: bool = False) -> int:
    """
    Largest prime factor of a rational number.

    With as_ordinal the one-based index of that prime is returned instead,
    which is the number of monzo components needed to represent the value.
    """
    vector = to_monzo(value)
    if not vector:
        return 0 if as_ordinal else 1
    return len(vector) if as_ordinal else PRIMES[len(vector) - 1]


def integer_root(value: int, degree: int) -> int | None:
    """Exact non-negative integer root, or None when there is none."""
    if value < 0:
        return None
    if value < 2:
        return value
    guess = 1 << -(-value.bit_length() // degree)
    while True:
        better = ((degree - 1) * guess + value // guess ** (degree - 1)) // degree
        if better >= guess:
            break
        guess = better
    return guess if guess**degree == value else None


def fraction_pow(base: Fraction, exponent: Fraction) -> Fraction | None:
    """
    Raise a fraction to a fractional power exactly.

    Returns None when the result is irrational, not real or undefined.
    """
    base = Fraction(base)
    exponent = Fraction(exponent)
    if exponent.denominator == 1:
        if base == 0 and exponent < 0:
            return None
        return base ** exponent.numerator
    if base == 0:
        return Fraction(0) if exponent > 0 else None
    if base < 0:
        if exponent.denominator % 2 == 0:
            return None
        magnitude = fraction_pow(-base, exponent)
        if magnitude is None:
            return None
        return -magnitude if exponent.numerator % 2 else magnitude
    numerator = integer_root(base.numerator, exponent.denominator)
    denominator = integer_root(base.denominator, exponent.denominator)
    if numerator is None or denominator is None:
        return None
    return Fraction(numerator, denominator) ** exponent.numerator
