"""
Constants and enums for the tuning system.

No magic strings - use enums and module-level tables for constrained values.
"""

from __future__ import annotations

import math
from enum import Enum
from fractions import Fraction


def _sieve(limit: int) -> tuple[int, ...]:
    """Primes strictly below limit."""
    flags = bytearray([1]) * limit
    flags[0] = flags[1] = 0
    for n in range(2, math.isqrt(limit - 1) + 1):
        if flags[n]:
            flags[n * n :: n] = bytearray(len(range(n * n, limit, n)))
    return tuple(n for n, flag in enumerate(flags) if flag)


# The first 1000 primes (7919 is the 1000th)
PRIMES: tuple[int, ...] = _sieve(7920)

# Size of each prime in cents
PRIME_CENTS: tuple[float, ...] = tuple(1200 * math.log2(p) for p in PRIMES)

# Default length of monzo vectors produced by the evaluator
DEFAULT_NUMBER_OF_COMPONENTS = 25

# Reference tuning
DEFAULT_BASE_FREQUENCY = 440.0
A4_MIDI_INDEX = 69
A4_FREQUENCY = 440.0

# Nanometres per second, for wavelength -> frequency conversion
SPEED_OF_LIGHT = 299792458e9


class Domain(str, Enum):
    """
    Physical domain of a quantity.

    Together with a fractional exponent this gives the dimension:
    pitch^1 is an interval, pitch^-1 a val, time^-1 a frequency.
    """

    TIME = "time"
    SCALAR = "scalar"
    PITCH = "pitch"


# SI prefixes accepted in front of Hz and s
METRIC_PREFIXES: dict[str, Fraction] = {
    "Q": Fraction(10) ** 30,
    "R": Fraction(10) ** 27,
    "Y": Fraction(10) ** 24,
    "Z": Fraction(10) ** 21,
    "E": Fraction(10) ** 18,
    "P": Fraction(10) ** 15,
    "T": Fraction(10) ** 12,
    "G": Fraction(10) ** 9,
    "M": Fraction(10) ** 6,
    "k": Fraction(10) ** 3,
    "h": Fraction(10) ** 2,
    "da": Fraction(10),
    "": Fraction(1),
    "d": Fraction(10) ** -1,
    "c": Fraction(10) ** -2,
    "m": Fraction(10) ** -3,
    "µ": Fraction(10) ** -6,
    "n": Fraction(10) ** -9,
    "p": Fraction(10) ** -12,
    "f": Fraction(10) ** -15,
    "a": Fraction(10) ** -18,
    "z": Fraction(10) ** -21,
    "y": Fraction(10) ** -24,
    "r": Fraction(10) ** -27,
    "q": Fraction(10) ** -30,
}

# Functions callable from the notation
NOTATION_FUNCTIONS: tuple[str, ...] = (
    "sqrt",
    "cbrt",
    "frequency",
    "ratio",
    "pitch",
    "mtof",
    "ftom",
    "nmtof",
)

# Reserved evaluation context keys
SIZE_KEY = "#"
INDEX_KEY = "##"
ROOT_KEY = "#root"
BASE_FREQUENCY_KEY = "0"
PREVIOUS_KEY = ""


class ErrorMessages:
    """Standardized error messages."""

    NAN_CENTS = "Cents offset must be a number, got NaN."
    IRRATIONAL = "Value is irrational: {detail}"
    NON_ALGEBRAIC = "Cents offset is non-zero; the value is not an equal temperament step."
    NON_REPRESENTABLE = "Value is not representable: {detail}"
    MODULO_BY_UNISON = "Modulo by unison."
    OUT_OF_PRIMES = "Out of primes: index {index} exceeds the table of {count} primes."
    INVALID_PRIME_LIMIT = "Invalid prime limit: {limit}"
    UNRECOGNIZED_ACCIDENTAL = "Unrecognized accidental: '{accidental}'"
    UNRECOGNIZED_NOMINAL = "Unrecognized nominal: '{nominal}'"
    UNRECOGNIZED_WART = "Unrecognized wart: '{wart}'"
    UNRECOGNIZED_QUALITY = "Unrecognized interval quality: '{quality}'"
    NFJS_REGION = "Unable to locate neutral comma region for {cents:.3f} cents."
    DOMAIN_MISMATCH = "Domains must match: {left} vs {right}"
    EXPONENT_MISMATCH = "Exponents must match: {left} vs {right}"
    DOT_EXPONENTS = "Exponents must add up to zero in a dot product: {left} + {right}"
    INCOMPATIBLE_DOMAINS = "Incompatible domains: {left} and {right}"
    SCALAR_EXPONENT_ONLY = "Only scalar exponents are supported, got {domain}."
    CANNOT_EXPONENTIATE_PITCH = "Cannot exponentiate in the pitch domain."
    SCALAR_EXPONENT = "Scalar domain requires a zero exponent, got {exponent}."
    DIMENSIONLESS_ONLY = "Operation '{operation}' requires dimensionless operands."
    TIME_DOMAIN_ONLY = "Only time-domain quantities can be normalized to a frequency."
    MISSING_BASE_FREQUENCY = "A base frequency is required to convert {domain} to {target}."
    UNBOUND_VARIABLE = "Unbound variable: '{name}'"
    RESERVED_NAME = "Cannot declare reserved name: '{name}'"
    MISPLACED_PITCH_ASSIGNMENT = "A pitch assignment is only allowed on the first line."
    UNKNOWN_FUNCTION = "Unknown function '{name}'"
    EMPTY_SCALE = "Scale has no degrees."
