"""
Syntax tree of the interval notation.

One immutable node type per grammar production. Literal payloads are
kept as the source text (components, degrees, prefixes) so that the tree
is a faithful, evaluation-free reading of the input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

UnaryOperator = Literal["-", "+", "%"]
BinaryOperator = Literal["+", "-", "*", "×", "/", "÷", "^", "mod", "reduce", "log"]


@dataclass(frozen=True)
class PlainLiteral:
    """Whole number, e.g. 81."""

    value: int


@dataclass(frozen=True)
class DecimalLiteral:
    """Decimal number such as 1.5, 2., .4 or 1.23e-45, read exactly."""

    text: str


@dataclass(frozen=True)
class FractionLiteral:
    """Fraction token such as 81/80. Binds tighter than any operator."""

    numerator: int
    denominator: int


@dataclass(frozen=True)
class HardDecimal:
    """Decimal marked with ! to be taken as a float, e.g. 3.14!."""

    text: str


@dataclass(frozen=True)
class EdjiFraction:
    """
    Equal division of an equave, e.g. 7\\12 or 6\\13<3>.

    numerator is None for the short form \\12.
    """

    numerator: str | None
    denominator: str
    equave: Expression | None = None


@dataclass(frozen=True)
class Monzo:
    """Prime exponent vector [a b c>."""

    components: tuple[str, ...]


@dataclass(frozen=True)
class Val:
    """Val (mapping) <a b c]."""

    components: tuple[str, ...]


@dataclass(frozen=True)
class Warts:
    """Patent val in wart notation, e.g. 12@, a17c@2.3.5 or 12@19."""

    equave: str
    edo: int
    warts: tuple[str, ...]
    subgroup: str


@dataclass(frozen=True)
class FJS:
    """Relative FJS interval such as M3^5, n3 or sd2.5_7."""

    quality: str
    degree: str
    superscripts: tuple[int, ...] = ()
    subscripts: tuple[int, ...] = ()


@dataclass(frozen=True)
class AbsoluteFJS:
    """Absolute note such as Bb4^7, a4 or Esb4."""

    nominal: str
    accidentals: tuple[str, ...]
    octave: int
    superscripts: tuple[int, ...] = ()
    subscripts: tuple[int, ...] = ()


@dataclass(frozen=True)
class Hertz:
    """Unit of frequency with an SI prefix, e.g. kHz. hard marks Hz!."""

    prefix: str = ""
    hard: bool = False


@dataclass(frozen=True)
class Second:
    """Unit of time with an SI prefix, e.g. ms."""

    prefix: str = ""
    hard: bool = False


@dataclass(frozen=True)
class Cent:
    """One cent. hard marks c! (a float offset instead of 1\\1200)."""

    hard: bool = False


@dataclass(frozen=True)
class InverseCent:
    """The val dual to the cent (€)."""


@dataclass(frozen=True)
class FunctionCall:
    """Built-in function applied to one argument."""

    name: str
    argument: Expression


@dataclass(frozen=True)
class UnaryExpression:
    """Negation, identity or inversion (%)."""

    operator: UnaryOperator
    operand: Expression


@dataclass(frozen=True)
class BinaryExpression:
    """Arithmetic between two expressions, including implicit unit products."""

    operator: BinaryOperator
    left: Expression
    right: Expression


@dataclass(frozen=True)
class VariableAccess:
    """
    $name, $3, $-1, $ or "quoted name".

    name is the text after the $ (empty for the bare $) or the quoted text.
    """

    name: str
    quoted: bool = False


@dataclass(frozen=True)
class VariableDeclaration:
    """$name = expression or "quoted" = expression."""

    name: str
    value: Expression
    quoted: bool = False


@dataclass(frozen=True)
class PitchAssignment:
    """A4 = 440 Hz. Fixes the reference pitch and base frequency."""

    pitch: AbsoluteFJS
    value: Expression


@dataclass(frozen=True)
class MapDeclaration:
    """= expression, applied to every accumulated degree with $ bound to it."""

    value: Expression


Expression = (
    PlainLiteral
    | DecimalLiteral
    | FractionLiteral
    | HardDecimal
    | EdjiFraction
    | Monzo
    | Val
    | Warts
    | FJS
    | AbsoluteFJS
    | Hertz
    | Second
    | Cent
    | InverseCent
    | FunctionCall
    | UnaryExpression
    | BinaryExpression
    | VariableAccess
)

Statement = VariableDeclaration | PitchAssignment | MapDeclaration

Node = Expression | Statement
