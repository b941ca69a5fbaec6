"""
Patent vals from wart notation.

"17c@2.3.5" reads as: 17 steps to the equave (2 by default) over the
subgroup 2.3.5, rounding each basis element to its nearest step count
except for the ones marked by warts. The wart letters a, b, c, ... name
the primes 2, 3, 5, ... in order; letters from q onwards name the
non-prime elements of the subgroup in order.

A wart applied once picks the second-best mapping for its element,
twice the third-best, and so on.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from fractions import Fraction

from chuk_mcp_tuning.constants import PRIMES, ErrorMessages
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.core.primes import is_prime, prime_limit
from chuk_mcp_tuning.errors import InvalidPrimeLimitError, UnrecognizedWartError

# Letter index of the first non-prime wart ('q'); 'p' is unused
_PRIME_WART_COUNT = 15
_NON_PRIME_WART_OFFSET = 16


def wart_to_basis(wart: str, non_primes: Sequence[Fraction]) -> Fraction:
    """
    Basis element named by a wart letter. The empty wart is the octave.

    Raises:
        UnrecognizedWartError: For letters outside a..o and the non-prime range
    """
    if not wart:
        return Fraction(PRIMES[0])
    index = ord(wart[0]) - ord("a")
    if len(wart) == 1 and 0 <= index < _PRIME_WART_COUNT:
        return Fraction(PRIMES[index])
    if len(wart) == 1 and 0 <= index - _NON_PRIME_WART_OFFSET < len(non_primes):
        return non_primes[index - _NON_PRIME_WART_OFFSET]
    raise UnrecognizedWartError(ErrorMessages.UNRECOGNIZED_WART.format(wart=wart))


def parse_subgroup(
    subgroup: str, number_of_components: int
) -> tuple[list[Fraction], list[Fraction]]:
    """
    Parse "2.3.7/5" style subgroups or a prime limit such as "19".

    An empty string means the first number_of_components primes.

    Returns:
        (basis elements, non-prime basis elements)
    """
    basis: list[Fraction] = []
    if subgroup:
        if "." in subgroup or "/" in subgroup:
            basis = [Fraction(element) for element in subgroup.split(".")]
        else:
            limit = int(subgroup)
            if not is_prime(limit) or limit > PRIMES[-1]:
                raise InvalidPrimeLimitError(ErrorMessages.INVALID_PRIME_LIMIT.format(limit=limit))
            basis = [Fraction(p) for p in PRIMES[: PRIMES.index(limit) + 1]]

    non_primes = [
        element
        for element in basis
        if element.denominator > 1 or not is_prime(element.numerator)
    ]

    if not basis:
        basis = [Fraction(p) for p in PRIMES[:number_of_components]]

    return basis, non_primes


def infer_equave(equave: str, subgroup: str, number_of_components: int) -> Fraction:
    """Equave named by the equave wart of a warts val."""
    _, non_primes = parse_subgroup(subgroup, number_of_components)
    return wart_to_basis(equave, non_primes)


def warts_to_val(
    equave: str,
    edo: int,
    warts: Sequence[str],
    subgroup: str,
    number_of_components: int,
) -> ExtendedMonzo:
    """
    Patent val with wart corrections, expressed over the prime basis.

    The result maps an interval monzo to a step count through the dot
    product: for 12@ and 3/2 the count is 7.
    """
    basis, non_primes = parse_subgroup(subgroup, number_of_components)

    equave_fraction = wart_to_basis(equave, non_primes)
    if equave_fraction in basis:
        basis.remove(equave_fraction)
        basis.insert(0, equave_fraction)

    scale = edo / math.log(basis[0])
    scaled_logs = [scale * math.log(element) for element in basis]
    val = [round(scaled_log) for scaled_log in scaled_logs]

    modifications = [0] * len(basis)
    for wart in warts:
        wart_fraction = wart_to_basis(wart, non_primes)
        for index, element in enumerate(basis):
            if element == wart_fraction:
                modifications[index] += 1

    for index, modification in enumerate(modifications):
        delta = math.ceil(modification * 0.5)
        if modification % 2 == 0:
            delta = -delta
        if scaled_logs[index] - val[index] > 0:
            val[index] += delta
        else:
            val[index] -= delta

    components = max(prime_limit(element, as_ordinal=True) for element in basis)
    result = ExtendedMonzo([0] * components)
    for element, steps in zip(basis, val, strict=True):
        mapping = ExtendedMonzo.from_fraction(element, components).geometric_inverse()
        result = result.add(mapping.scale(steps))
    return result
