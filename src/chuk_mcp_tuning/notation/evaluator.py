"""
Evaluator - turns syntax trees into quantities.

Each node kind has one rule; the dispatch in Evaluator.evaluate is a
closed isinstance chain over the node union. Errors raised by the
arithmetic layer propagate unchanged.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import assert_never

from chuk_mcp_tuning.constants import METRIC_PREFIXES, Domain
from chuk_mcp_tuning.core import quantity as conversions
from chuk_mcp_tuning.core.fjs import (
    DEFAULT_COMMA_CACHE,
    CommaCache,
    absolute_to_just_intonation,
    to_just_intonation,
)
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.core.quantity import Quantity
from chuk_mcp_tuning.core.warts import warts_to_val
from chuk_mcp_tuning.errors import NonRepresentableError
from chuk_mcp_tuning.notation.ast import (
    FJS,
    AbsoluteFJS,
    BinaryExpression,
    Cent,
    DecimalLiteral,
    EdjiFraction,
    FractionLiteral,
    FunctionCall,
    HardDecimal,
    Hertz,
    InverseCent,
    MapDeclaration,
    Monzo,
    Node,
    PitchAssignment,
    PlainLiteral,
    Second,
    UnaryExpression,
    Val,
    VariableAccess,
    VariableDeclaration,
    Warts,
)
from chuk_mcp_tuning.notation.context import EvaluationContext
from chuk_mcp_tuning.notation.parser import parse

logger = logging.getLogger(__name__)

CENT = Fraction(1, 1200)


def _degree(text: str) -> Fraction:
    return Fraction(text.replace("½", ".5"))


class Evaluator:
    """
    Evaluates syntax trees against a caller-owned context.

    Statements (declarations, pitch assignments, map declarations) update
    the context and evaluate to None; expressions evaluate to a Quantity.
    """

    def __init__(
        self,
        context: EvaluationContext | None = None,
        commas: CommaCache | None = None,
    ) -> None:
        self.context = context if context is not None else EvaluationContext()
        self.commas = commas or DEFAULT_COMMA_CACHE

    @property
    def number_of_components(self) -> int:
        return self.context.number_of_components

    def evaluate_text(self, text: str) -> Quantity | None:
        """Parse and evaluate one line."""
        return self.evaluate(parse(text))

    def evaluate(self, node: Node) -> Quantity | None:
        """Evaluate a statement or expression."""
        if isinstance(node, VariableDeclaration):
            value = self.evaluate_expression(node.value)
            self.context.declare(node.name, value)
            logger.debug(f"Declared {node.name!r}")
            return None
        if isinstance(node, PitchAssignment):
            self._assign_pitch(node)
            return None
        if isinstance(node, MapDeclaration):
            self._map_degrees(node)
            return None
        return self.evaluate_expression(node)

    def evaluate_expression(self, node: Node) -> Quantity:
        """Evaluate a node that must produce a value."""
        n = self.number_of_components
        if isinstance(node, PlainLiteral):
            return Quantity(ExtendedMonzo.from_fraction(node.value, n))
        if isinstance(node, DecimalLiteral):
            return Quantity(ExtendedMonzo.from_fraction(Fraction(node.text), n))
        if isinstance(node, FractionLiteral):
            if node.denominator == 0:
                raise NonRepresentableError(f"Fraction {node.numerator}/0 has a zero denominator")
            return Quantity(
                ExtendedMonzo.from_fraction(Fraction(node.numerator, node.denominator), n)
            )
        if isinstance(node, HardDecimal):
            return Quantity(ExtendedMonzo.from_value(float(node.text), n))
        if isinstance(node, EdjiFraction):
            return Quantity.interval(self._edji(node))
        if isinstance(node, Monzo):
            return Quantity.interval(self._components(node.components))
        if isinstance(node, Val):
            return Quantity(self._components(node.components), Domain.PITCH, Fraction(-1))
        if isinstance(node, Warts):
            val = warts_to_val(node.equave, node.edo, node.warts, node.subgroup, n)
            return Quantity(val.with_components(max(n, val.number_of_components)), Domain.PITCH, -1)
        if isinstance(node, FJS):
            monzo = to_just_intonation(
                node.quality,
                _degree(node.degree),
                node.superscripts,
                node.subscripts,
                self.commas,
            )
            return Quantity.interval(self._pad(monzo))
        if isinstance(node, AbsoluteFJS):
            return Quantity.interval(self._absolute(node).sub(self.context.root))
        if isinstance(node, Hertz):
            return Quantity(self._prefixed(node.prefix, node.hard), Domain.TIME, Fraction(-1))
        if isinstance(node, Second):
            return Quantity(self._prefixed(node.prefix, node.hard), Domain.TIME, Fraction(1))
        if isinstance(node, Cent):
            if node.hard:
                return Quantity.interval(ExtendedMonzo.from_cents(1, n))
            return Quantity.interval(ExtendedMonzo.from_equal_temperament(CENT, 2, n))
        if isinstance(node, InverseCent):
            cent = Quantity.interval(ExtendedMonzo.from_equal_temperament(CENT, 2, n))
            return cent.inverse()
        if isinstance(node, FunctionCall):
            return self._call(node)
        if isinstance(node, UnaryExpression):
            operand = self.evaluate_expression(node.operand)
            if node.operator == "-":
                return operand.neg()
            if node.operator == "%":
                return operand.inverse()
            return operand
        if isinstance(node, BinaryExpression):
            return self._binary(node)
        if isinstance(node, VariableAccess):
            return self.context.lookup(node.name, node.quoted)
        if isinstance(node, VariableDeclaration | PitchAssignment | MapDeclaration):
            raise NonRepresentableError(f"{type(node).__name__} does not produce a value")
        assert_never(node)

    # ------------------------------------------------------------------
    # Node rules
    # ------------------------------------------------------------------

    def _pad(self, monzo: ExtendedMonzo) -> ExtendedMonzo:
        return monzo.with_components(max(self.number_of_components, monzo.number_of_components))

    def _components(self, components: tuple[str, ...]) -> ExtendedMonzo:
        return self._pad(ExtendedMonzo([Fraction(component) for component in components]))

    def _absolute(self, node: AbsoluteFJS) -> ExtendedMonzo:
        monzo = absolute_to_just_intonation(
            node.nominal,
            node.accidentals,
            node.octave,
            node.superscripts,
            node.subscripts,
            self.commas,
        )
        return self._pad(monzo)

    def _prefixed(self, prefix: str, hard: bool) -> ExtendedMonzo:
        factor = METRIC_PREFIXES[prefix]
        if hard:
            return ExtendedMonzo.from_value(float(factor), self.number_of_components)
        return ExtendedMonzo.from_fraction(factor, self.number_of_components)

    def _edji(self, node: EdjiFraction) -> ExtendedMonzo:
        """
        Equal division of an equave.

        A rational equave stays exact; anything else falls back to a cents
        value proportional to the equave's size.
        """
        fraction = Fraction(node.numerator or 1) / Fraction(node.denominator)
        if node.equave is None:
            return ExtendedMonzo.from_equal_temperament(fraction, 2, self.number_of_components)
        equave = self.evaluate_expression(node.equave)
        if equave.domain == Domain.SCALAR:
            equave_fraction = equave.value.try_fraction()
            if equave_fraction is not None and equave_fraction > 0:
                try:
                    return ExtendedMonzo.from_equal_temperament(
                        fraction, equave_fraction, self.number_of_components
                    )
                except NonRepresentableError:
                    logger.debug(f"Equave {equave_fraction} leaves a residual, using cents")
        return ExtendedMonzo.from_cents(
            equave.value.total_cents() * float(fraction), self.number_of_components
        )

    def _call(self, node: FunctionCall) -> Quantity:
        argument = self.evaluate_expression(node.argument)
        base = self.context.base_frequency
        match node.name:
            case "sqrt":
                return conversions.sqrt(argument)
            case "cbrt":
                return conversions.cbrt(argument)
            case "frequency":
                return conversions.frequency(argument, base)
            case "ratio":
                return conversions.ratio(argument, base)
            case "pitch":
                return conversions.pitch(argument, base)
            case "mtof":
                return conversions.mtof(argument)
            case "ftom":
                return conversions.ftom(argument, base)
            case "nmtof":
                return conversions.nmtof(argument)
        raise NonRepresentableError(f"Unknown function '{node.name}'")

    def _binary(self, node: BinaryExpression) -> Quantity:
        left = self.evaluate_expression(node.left)
        right = self.evaluate_expression(node.right)
        match node.operator:
            case "+":
                return left.add(right)
            case "-":
                return left.sub(right)
            case "*" | "×":
                return left.mul(right)
            case "/" | "÷":
                return left.div(right)
            case "^":
                return left.pow(right)
            case "mod":
                return left.mod(right)
            case "reduce":
                return left.reduce(right)
            case "log":
                return left.log(right)
        assert_never(node.operator)

    def _assign_pitch(self, node: PitchAssignment) -> None:
        """Make the note the reference pitch sounding at the given frequency."""
        value = self.evaluate_expression(node.value)
        root = self._absolute(node.pitch)
        base = conversions.frequency(value, self.context.base_frequency)
        self.context.set_root(Quantity.interval(root))
        self.context.set_base_frequency(base)
        logger.debug(f"Assigned {node.pitch.nominal}{node.pitch.octave} = {base}")

    def _map_degrees(self, node: MapDeclaration) -> None:
        """
        Rewrite every degree with $ bound to its current value.

        Degrees are rewritten in ascending order and in place, so later
        iterations see the new values of earlier degrees. If any degree
        fails, all of them are put back as they were.
        """
        base = self.context.base_frequency
        original = self.context.degrees()
        try:
            for index in range(1, self.context.size):
                self.context.bind_previous(self.context[str(index)])
                result = self.evaluate_expression(node.value)
                self.context.assign_degree(index, conversions.pitch(result, base))
        except Exception:
            self.context.restore_degrees(original)
            raise
        finally:
            self.context.unbind_previous()


def evaluate(text: str, context: EvaluationContext | None = None) -> Quantity | None:
    """
    Evaluate one line of notation.

    Examples:
        evaluate("3/2").value.to_fraction() -> Fraction(3, 2)
        evaluate("M3^5").value.to_fraction() -> Fraction(5, 4)
    """
    return Evaluator(context).evaluate_text(text)


def evaluate_interval(text: str, context: EvaluationContext | None = None) -> Quantity:
    """
    Evaluate an expression as a relative pitch.

    Plain numbers and frequencies are converted to intervals the same way
    a line of a scale is.
    """
    evaluator = Evaluator(context)
    result = evaluator.evaluate_expression(parse(text))
    return conversions.pitch(result, evaluator.context.base_frequency)
