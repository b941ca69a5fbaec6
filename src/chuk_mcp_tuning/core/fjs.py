"""
Functional Just System (FJS) commas.

Each prime p >= 5 gets a "formal comma": p divided by the Pythagorean
interval closest to it, found by walking the chain of fifths until the
remainder falls within the radius of tolerance. Neutral FJS uses a second
family of commas searched over whole and half fifths.

FJS names then read as a Pythagorean skeleton times commas:
M3^5 = 81/64 * 80/81 = 5/4.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from fractions import Fraction

from chuk_mcp_tuning.constants import PRIME_CENTS, PRIMES, ErrorMessages
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.core.primes import to_monzo, value_to_cents
from chuk_mcp_tuning.core.pythagorean import absolute_from_parts, from_parts
from chuk_mcp_tuning.errors import NeutralRegionError, OutOfPrimesError

logger = logging.getLogger(__name__)

RADIUS_OF_TOLERANCE = value_to_cents(65 / 63)
NFJS_RADIUS = 13.5 * PRIME_CENTS[0] - 8.5 * PRIME_CENTS[1]
FIFTH = PRIME_CENTS[1] - PRIME_CENTS[0]

# Whole and half fifths searched by the neutral algorithm
NEUTRAL_SEARCH_DEPTH = 6


def distance(a: float, b: float) -> float:
    """Circular distance between two sizes modulo the octave."""
    return abs((a - b + 600) % 1200 - 600)


def master_algorithm(prime_cents: float) -> int:
    """Number of fifths whose octave-reduced size is closest to a prime."""
    pythagoras = 0.0
    if distance(prime_cents, pythagoras) < RADIUS_OF_TOLERANCE:
        return 0
    k = 0
    while True:
        pythagoras += FIFTH
        k += 1
        if distance(prime_cents, pythagoras) < RADIUS_OF_TOLERANCE:
            return k
        if distance(prime_cents, -pythagoras) < RADIUS_OF_TOLERANCE:
            return -k


def neutral_master(prime_cents: float) -> Fraction:
    """
    Number of (possibly half) fifths locating a prime for neutral FJS.

    Raises:
        NeutralRegionError: If no region within the search depth matches
    """
    pythagoras = 0.0
    if distance(prime_cents, pythagoras) < NFJS_RADIUS:
        return Fraction(0)
    for k in range(1, NEUTRAL_SEARCH_DEPTH + 1):
        pythagoras += FIFTH
        if distance(prime_cents, pythagoras) < NFJS_RADIUS:
            return Fraction(k)
        if distance(prime_cents, -pythagoras) < NFJS_RADIUS:
            return Fraction(-k)
    pythagoras = 0.5 * FIFTH
    for k in range(1, NEUTRAL_SEARCH_DEPTH + 1):
        if distance(prime_cents, pythagoras) < NFJS_RADIUS:
            return Fraction(2 * k - 1, 2)
        if distance(prime_cents, -pythagoras) < NFJS_RADIUS:
            return Fraction(1 - 2 * k, 2)
        pythagoras += FIFTH
    raise NeutralRegionError(ErrorMessages.NFJS_REGION.format(cents=prime_cents))


def _comma(index: int, master: Callable[[float], int | Fraction]) -> ExtendedMonzo:
    """Comma for the prime at index: prime / nearest Pythagorean, folded into +-600 cents."""
    threes = -Fraction(master(PRIME_CENTS[index]))
    twos = threes
    comma_cents = (
        PRIME_CENTS[index] + float(twos) * PRIME_CENTS[0] + float(threes) * PRIME_CENTS[1]
    )
    while comma_cents > 600:
        comma_cents -= PRIME_CENTS[0]
        twos -= 1
    while comma_cents < -600:
        comma_cents += PRIME_CENTS[0]
        twos += 1
    vector = [Fraction(0)] * (index + 1)
    vector[0] = twos
    vector[1] = threes
    vector[index] = Fraction(1)
    return ExtendedMonzo(vector)


class CommaSequence:
    """
    Lazily extended, append-only list of commas for one search algorithm.

    Indices 0 and 1 (primes 2 and 3) are unison. Extension is guarded by
    a lock so concurrent readers never observe a partially grown list.
    """

    def __init__(self, name: str, master: Callable[[float], int | Fraction]) -> None:
        self.name = name
        self._master = master
        self._commas: list[ExtendedMonzo] = [ExtendedMonzo([]), ExtendedMonzo([])]
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._commas)

    def get(self, index: int) -> ExtendedMonzo:
        """
        Comma for the prime at index.

        Raises:
            OutOfPrimesError: If index is beyond the prime table
        """
        if index < len(self._commas):
            return self._commas[index]
        if index >= len(PRIMES):
            raise OutOfPrimesError(
                ErrorMessages.OUT_OF_PRIMES.format(index=index, count=len(PRIMES))
            )
        with self._lock:
            while index >= len(self._commas):
                self._commas.append(_comma(len(self._commas), self._master))
            logger.debug(f"Extended {self.name} commas to {len(self._commas)} primes")
        return self._commas[index]


class CommaCache:
    """Formal and neutral comma sequences."""

    def __init__(self) -> None:
        self.formal = CommaSequence("formal", master_algorithm)
        self.neutral = CommaSequence("neutral", neutral_master)

    def get_formal_comma(self, index: int) -> ExtendedMonzo:
        return self.formal.get(index)

    def get_neutral_comma(self, index: int) -> ExtendedMonzo:
        return self.neutral.get(index)


DEFAULT_COMMA_CACHE = CommaCache()


def get_formal_comma(index: int) -> ExtendedMonzo:
    """Formal comma of the prime at index (2 -> 80/81, 3 -> 63/64, ...)."""
    return DEFAULT_COMMA_CACHE.get_formal_comma(index)


def get_neutral_comma(index: int) -> ExtendedMonzo:
    """Neutral comma of the prime at index."""
    return DEFAULT_COMMA_CACHE.get_neutral_comma(index)


def _inflect(
    result: ExtendedMonzo,
    superscripts: Sequence[int],
    subscripts: Sequence[int],
    cache: CommaCache,
) -> ExtendedMonzo:
    """Multiply by the commas of superscripts and divide by those of subscripts."""
    neutral = result.vector[0].denominator > 1 and result.vector[1].denominator > 1
    get_comma = cache.get_neutral_comma if neutral else cache.get_formal_comma
    for superscript in superscripts:
        for index, exponent in enumerate(to_monzo(superscript)):
            if exponent:
                result = result.add(get_comma(index).scale(exponent))
    for subscript in subscripts:
        for index, exponent in enumerate(to_monzo(subscript)):
            if exponent:
                result = result.sub(get_comma(index).scale(exponent))
    return result


def to_just_intonation(
    quality: str,
    degree: Fraction | int,
    superscripts: Sequence[int] = (),
    subscripts: Sequence[int] = (),
    cache: CommaCache | None = None,
) -> ExtendedMonzo:
    """
    Just interval of a relative FJS name.

    Examples:
        to_just_intonation("M", 3, [5]) -> 5/4
        to_just_intonation("m", 7, [7]) -> 7/4
    """
    return _inflect(
        from_parts(quality, degree), superscripts, subscripts, cache or DEFAULT_COMMA_CACHE
    )


def absolute_to_just_intonation(
    nominal: str,
    accidentals: Sequence[str],
    octave: int,
    superscripts: Sequence[int] = (),
    subscripts: Sequence[int] = (),
    cache: CommaCache | None = None,
) -> ExtendedMonzo:
    """Just pitch of an absolute FJS note name relative to C4."""
    return _inflect(
        absolute_from_parts(nominal, accidentals, octave),
        superscripts,
        subscripts,
        cache or DEFAULT_COMMA_CACHE,
    )
