"""
Pythagorean skeletons of FJS interval and note names.

Every relative interval (quality + degree) and every absolute note
(nominal + accidentals + octave) maps onto a 2.3 monzo. Neutral and
semiquartal names use half-integer exponents; quarter accidentals use
quarter-integer ones.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from fractions import Fraction

from chuk_mcp_tuning.constants import ErrorMessages
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.errors import (
    UnrecognizedAccidentalError,
    UnrecognizedNominalError,
    UnrecognizedQualityError,
)

F = Fraction
Vector = tuple[Fraction, Fraction]

# Perfect and neutral prototypes for degree spans 0..6 (unison..seventh)
PYTH_VECTORS: tuple[Vector, ...] = (
    (F(0), F(0)),
    (F(5, 2), F(-3, 2)),
    (F(-1, 2), F(1, 2)),
    (F(2), F(-1)),
    (F(-1), F(1)),
    (F(3, 2), F(-1, 2)),
    (F(-3, 2), F(3, 2)),
)

# Interordinals half a fourth away, for degrees like 2.5 (semiquartal)
TONESPLITTER_VECTORS: tuple[Vector, ...] = (
    (F(-3, 2), F(1)),
    (F(-9, 2), F(3)),
    (F(7, 2), F(-2)),
    (F(1, 2), F(0)),
    (F(-5, 2), F(2)),
    (F(11, 2), F(-3)),
    (F(5, 2), F(-1)),
)

NOMINAL_VECTORS: dict[str, Vector] = {
    "F": (F(2), F(-1)),
    "C": (F(0), F(0)),
    "G": (F(-1), F(1)),
    "D": (F(-3), F(2)),
    "A": (F(-4), F(3)),
    "a": (F(-4), F(3)),
    "E": (F(-6), F(4)),
    "B": (F(-7), F(5)),
}

_SHARP: Vector = (F(-11), F(7))
_FLAT: Vector = (F(11), F(-7))
_SEMISHARP: Vector = (F(-11, 2), F(7, 2))
_SEMIFLAT: Vector = (F(11, 2), F(-7, 2))

ACCIDENTAL_VECTORS: dict[str, Vector] = {
    "♮": (F(0), F(0)),
    "=": (F(0), F(0)),
    "♯": _SHARP,
    "#": _SHARP,
    "♭": _FLAT,
    "b": _FLAT,
    "𝄪": (F(-22), F(14)),
    "x": (F(-22), F(14)),
    "𝄫": (F(22), F(-14)),
    "𝄲": _SEMISHARP,
    "‡": _SEMISHARP,
    "t": _SEMISHARP,
    "𝄳": _SEMIFLAT,
    "d": _SEMIFLAT,
}

# Fractional prefixes for sharps and flats: s/½ semi, q/¼ demisemi, Q/¾ sesqui
_ACCIDENTAL_PREFIXES: dict[str, Fraction] = {
    "½": F(1, 2),
    "s": F(1, 2),
    "¼": F(1, 4),
    "q": F(1, 4),
    "¾": F(3, 4),
    "Q": F(3, 4),
}

for _accidental in "♯#♭b":
    for _prefix, _factor in _ACCIDENTAL_PREFIXES.items():
        _twos, _threes = ACCIDENTAL_VECTORS[_accidental]
        ACCIDENTAL_VECTORS[_prefix + _accidental] = (_twos * _factor, _threes * _factor)

# Quality prefixes consumed before the plain A/d run, in matching order
_QUALITY_PREFIXES: tuple[tuple[tuple[str, ...], Vector], ...] = (
    (("qA", "¼A"), (F(-11, 4), F(7, 4))),
    (("qd", "¼d"), (F(11, 4), F(-7, 4))),
    (("QA", "¾A"), (F(-33, 4), F(21, 4))),
    (("Qd", "¾d"), (F(33, 4), F(-21, 4))),
    (("sA", "½A"), _SEMISHARP),
    (("sd", "½d"), _SEMIFLAT),
)

# Qualities left once the augmented/diminished run has been consumed
_QUALITY_REMAINDERS: dict[str, Vector] = {
    "": (F(0), F(0)),
    "P": (F(0), F(0)),
    "n": (F(0), F(0)),
    "M": _SEMISHARP,
    "m": _SEMIFLAT,
    "sM": (F(-11, 4), F(7, 4)),
    "sm": (F(11, 4), F(-7, 4)),
}


def from_parts(quality: str, degree: Fraction | int) -> ExtendedMonzo:
    """
    Pythagorean monzo of a relative interval name.

    Args:
        quality: Quality such as "P", "M", "m", "n", "A", "dd", "sA", "qd"
        degree: Interval degree, negative for descending, may be half-integer

    Examples:
        from_parts("M", 3) -> [-6, 4>  (81/64)
        from_parts("n", 3) -> [-1/2, 1/2>  (neutral third)
    """
    degree = Fraction(degree)
    original_quality = quality
    span = abs(degree) - 1
    prototype = span % 7
    if prototype.denominator == 1:
        twos, threes = PYTH_VECTORS[int(prototype)]
    else:
        twos, threes = TONESPLITTER_VECTORS[int(prototype - F(1, 2))]

    # Non-perfect prototypes need an extra half-augmented widening
    if (twos.denominator != 1 or threes.denominator != 1) and quality:
        if quality[-1] == "A":
            twos, threes = twos + _SEMISHARP[0], threes + _SEMISHARP[1]
        elif quality[-1] == "d":
            twos, threes = twos + _SEMIFLAT[0], threes + _SEMIFLAT[1]

    twos += math.floor(span / 7)

    for prefixes, (delta_twos, delta_threes) in _QUALITY_PREFIXES:
        if quality.startswith(prefixes):
            quality = quality[2:]
            twos += delta_twos
            threes += delta_threes

    while quality.startswith("A"):
        quality = quality[1:]
        twos += _SHARP[0]
        threes += _SHARP[1]
    while quality.startswith("d"):
        quality = quality[1:]
        twos += _FLAT[0]
        threes += _FLAT[1]

    if quality not in _QUALITY_REMAINDERS:
        raise UnrecognizedQualityError(
            ErrorMessages.UNRECOGNIZED_QUALITY.format(quality=original_quality)
        )
    delta_twos, delta_threes = _QUALITY_REMAINDERS[quality]
    result = ExtendedMonzo([twos + delta_twos, threes + delta_threes])
    if degree < 0:
        return result.neg()
    return result


def absolute_from_parts(nominal: str, accidentals: Sequence[str], octave: int) -> ExtendedMonzo:
    """
    Pythagorean monzo of an absolute note relative to C4.

    Raises:
        UnrecognizedNominalError: If the nominal is not a note letter
        UnrecognizedAccidentalError: If an accidental is unknown
    """
    if nominal not in NOMINAL_VECTORS:
        raise UnrecognizedNominalError(ErrorMessages.UNRECOGNIZED_NOMINAL.format(nominal=nominal))
    twos, threes = NOMINAL_VECTORS[nominal]
    for accidental in accidentals:
        if accidental not in ACCIDENTAL_VECTORS:
            raise UnrecognizedAccidentalError(
                ErrorMessages.UNRECOGNIZED_ACCIDENTAL.format(accidental=accidental)
            )
        delta_twos, delta_threes = ACCIDENTAL_VECTORS[accidental]
        twos += delta_twos
        threes += delta_threes
    twos += octave - 4
    return ExtendedMonzo([twos, threes])
