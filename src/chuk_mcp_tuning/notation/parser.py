"""
Recursive descent parser for the interval notation.

The grammar is scannerless: each primary is tried in priority order
directly against the input, which keeps context-sensitive tokens (FJS
names versus note names, fractions versus division, units after values)
unambiguous. Parsing never evaluates anything.

Precedence, loosest first:

    additive        a + b, a - b
    multiplicative  a * b, a × b, a / b, a ÷ b, a mod b, a reduce b, a log b
    unary           -a, +a, %a
    power           a ^ b (right-binding, tighter than unary: -2^2 = -(2^2))
    unit            220 Hz, 9.8 c, (1+2) kHz
    primary

Line level statements:

    A4 = 440 Hz     pitch assignment (A4 read as a note name here)
    = $ * 2         map over the accumulated degrees
    $name = expr    variable declaration ("quoted name" = expr also works)
"""

from __future__ import annotations

import re

from chuk_mcp_tuning.constants import METRIC_PREFIXES, NOTATION_FUNCTIONS, ErrorMessages
from chuk_mcp_tuning.errors import NotationSyntaxError
from chuk_mcp_tuning.notation.ast import (
    FJS,
    AbsoluteFJS,
    BinaryExpression,
    Cent,
    DecimalLiteral,
    EdjiFraction,
    Expression,
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

_WHITESPACE = re.compile(r"(?:\s+|//[^\n]*)*")

# Statements
_NAME = r"[^\s\d$\"(){}\[\]<>+\-*/×÷^%,=\\!][^\s$\"(){}\[\]<>+\-*/×÷^%,=\\!]*"
_ASSIGN = r"\s*=(?!=)"
_MAP_DECLARATION = re.compile(r"=(?!=)")
_DECLARATION = re.compile(rf"\$(?P<name>{_NAME}){_ASSIGN}")
_QUOTED_DECLARATION = re.compile(rf'"(?P<name>[^"]*)"{_ASSIGN}')

# Note and interval names
_INFLECTIONS = r"(?:\^(?P<sup>\d+(?:,\d+)*))?(?:_(?P<sub>\d+(?:,\d+)*))?"
_ACCIDENTAL = r"[sq½¼¾Q]?[♯#♭b]|𝄪|x|𝄫|𝄲|‡|t|𝄳|d|♮|="
_ACCIDENTALS = re.compile(_ACCIDENTAL)
_ABSOLUTE = (
    rf"(?P<nominal>[A-Ga])(?P<accidentals>(?:{_ACCIDENTAL})*)(?P<octave>-?\d+){_INFLECTIONS}"
)
_PITCH_ASSIGNMENT = re.compile(rf"{_ABSOLUTE}{_ASSIGN}")
_ABSOLUTE_FJS = re.compile(rf"{_ABSOLUTE}(?![\w.])")
_FJS = re.compile(
    r"(?P<quality>[sqQ½¼¾]?(?:A+|d+)|sM|sm|P|n|M|m)"
    rf"(?P<degree>-?\d+(?:\.5|½)?){_INFLECTIONS}(?![\w.])"
)
_WARTS = re.compile(
    r"(?P<equave>[a-z]?)(?P<edo>\d+)(?P<warts>[a-z]*)@"
    r"(?P<subgroup>\d+(?:/\d+)?(?:\.\d+(?:/\d+)?)*)?"
)

# Numbers
_HARD_DECIMAL = re.compile(r"(?P<text>(?:\d+\.\d*|\.\d+)(?:[eE][-+]?\d+)?)!")
_EDJI = re.compile(r"(?P<numerator>\d+)?\\(?P<denominator>-?\d+(?:\.\d+)?)")
_FRACTION = re.compile(r"(?P<numerator>\d+)/(?P<denominator>\d+)(?![\d.])")
_DECIMAL = re.compile(r"(?:\d+\.\d*|\.\d+)(?:[eE][-+]?\d+)?|\d+[eE][-+]?\d+")
_INTEGER = re.compile(r"\d+")
_MONZO = re.compile(r"\[(?P<components>[^\]>]*)>")
_VAL = re.compile(r"<(?P<components>[^\]>]*)\]")
_COMPONENT = re.compile(r"-?\d+(?:[./]\d+)?")
_COMPONENT_SEPARATOR = re.compile(r"[\s,]+")

# Units
_PREFIX = "|".join(
    re.escape(prefix) for prefix in sorted(METRIC_PREFIXES, key=len, reverse=True) if prefix
)
_HERTZ = re.compile(rf"(?P<prefix>{_PREFIX})?Hz(?P<hard>!)?(?!\w)")
_SECOND = re.compile(rf"(?P<prefix>{_PREFIX})?s(?P<hard>!)?(?!\w)")
_CENT = re.compile(r"c(?P<hard>!)?(?!\w)")
_INVERSE_CENT = re.compile(r"€")

# Names and punctuation
_FUNCTION = re.compile(r"(?P<name>[A-Za-z_]\w*)\s*\(")
_VARIABLE = re.compile(rf"\$(?P<name>-?\d+|{_NAME})?")
_QUOTED = re.compile(r'"(?P<name>[^"]*)"')
_ADDITIVE = re.compile(r"[+-]")
_MULTIPLICATIVE = re.compile(r"[*×/÷]|(?:mod|reduce|log)(?!\w)")
_UNARY = re.compile(r"[-+%]")
_POWER = re.compile(r"\^")


def _inflections(match: re.Match[str]) -> tuple[tuple[int, ...], tuple[int, ...]]:
    sup = match.group("sup")
    sub = match.group("sub")
    superscripts = tuple(int(s) for s in sup.split(",")) if sup else ()
    subscripts = tuple(int(s) for s in sub.split(",")) if sub else ()
    return superscripts, subscripts


def _absolute(match: re.Match[str]) -> AbsoluteFJS:
    superscripts, subscripts = _inflections(match)
    return AbsoluteFJS(
        nominal=match.group("nominal"),
        accidentals=tuple(_ACCIDENTALS.findall(match.group("accidentals"))),
        octave=int(match.group("octave")),
        superscripts=superscripts,
        subscripts=subscripts,
    )


class Parser:
    """Single-use parser over one piece of text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # ------------------------------------------------------------------
    # Scanning helpers
    # ------------------------------------------------------------------

    def _skip(self) -> None:
        match = _WHITESPACE.match(self.text, self.pos)
        if match:
            self.pos = match.end()

    def _match(self, pattern: re.Pattern[str]) -> re.Match[str] | None:
        """Consume pattern after whitespace, or leave the position alone."""
        self._skip()
        match = pattern.match(self.text, self.pos)
        if match:
            self.pos = match.end()
        return match

    def _expect(self, literal: str) -> None:
        self._skip()
        if not self.text.startswith(literal, self.pos):
            raise self._error(f"Expected '{literal}'")
        self.pos += len(literal)

    def _error(self, message: str) -> NotationSyntaxError:
        if self.pos >= len(self.text):
            return NotationSyntaxError(f"{message}, found end of input", self.text, self.pos)
        return NotationSyntaxError(
            f"{message}, found '{self.text[self.pos]}'", self.text, self.pos
        )

    def _at_end(self) -> bool:
        self._skip()
        return self.pos >= len(self.text)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse(self) -> Node:
        """Parse one line: a statement or an expression."""
        node = self._statement()
        if not self._at_end():
            raise self._error("Unexpected input")
        return node

    def parse_expression(self) -> Expression:
        """Parse text that must be a bare expression."""
        node = self._expression()
        if not self._at_end():
            raise self._error("Unexpected input")
        return node

    def _statement(self) -> Node:
        if self._match(_MAP_DECLARATION):
            return MapDeclaration(self._expression())
        match = self._match(_DECLARATION)
        if match:
            return VariableDeclaration(match.group("name"), self._expression())
        match = self._match(_QUOTED_DECLARATION)
        if match:
            return VariableDeclaration(match.group("name"), self._expression(), quoted=True)
        match = self._match(_PITCH_ASSIGNMENT)
        if match:
            return PitchAssignment(_absolute(match), self._expression())
        return self._expression()

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expression(self) -> Expression:
        left = self._multiplicative()
        while match := self._match(_ADDITIVE):
            left = BinaryExpression(match.group(), left, self._multiplicative())  # type: ignore[arg-type]
        return left

    def _multiplicative(self) -> Expression:
        left = self._unary()
        while match := self._match(_MULTIPLICATIVE):
            left = BinaryExpression(match.group(), left, self._unary())  # type: ignore[arg-type]
        return left

    def _unary(self) -> Expression:
        match = self._match(_UNARY)
        if match:
            return UnaryExpression(match.group(), self._unary())  # type: ignore[arg-type]
        return self._power()

    def _power(self) -> Expression:
        base = self._unit()
        if self._match(_POWER):
            return BinaryExpression("^", base, self._unary())
        return base

    def _unit(self) -> Expression:
        """Primary followed by any number of juxtaposed units."""
        node = self._primary()
        while (unit := self._unit_token()) is not None:
            node = BinaryExpression("×", node, unit)
        return node

    def _unit_token(self) -> Expression | None:
        match = self._match(_HERTZ)
        if match:
            return Hertz(match.group("prefix") or "", bool(match.group("hard")))
        match = self._match(_SECOND)
        if match:
            return Second(match.group("prefix") or "", bool(match.group("hard")))
        match = self._match(_CENT)
        if match:
            return Cent(bool(match.group("hard")))
        if self._match(_INVERSE_CENT):
            return InverseCent()
        return None

    def _primary(self) -> Expression:
        self._skip()
        if self.text.startswith("(", self.pos):
            self.pos += 1
            node = self._expression()
            self._expect(")")
            return node

        match = self._match(_FUNCTION)
        if match:
            name = match.group("name")
            if name not in NOTATION_FUNCTIONS:
                self.pos = match.start()
                raise NotationSyntaxError(
                    ErrorMessages.UNKNOWN_FUNCTION.format(name=name), self.text, self.pos
                )
            argument = self._expression()
            self._expect(")")
            return FunctionCall(name, argument)

        match = self._match(_HARD_DECIMAL)
        if match:
            return HardDecimal(match.group("text"))

        match = self._match(_WARTS)
        if match:
            return Warts(
                equave=match.group("equave"),
                edo=int(match.group("edo")),
                warts=tuple(match.group("warts")),
                subgroup=match.group("subgroup") or "",
            )

        match = self._match(_FJS)
        if match:
            superscripts, subscripts = _inflections(match)
            return FJS(match.group("quality"), match.group("degree"), superscripts, subscripts)

        match = self._match(_ABSOLUTE_FJS)
        if match:
            return _absolute(match)

        match = self._match(_MONZO)
        if match:
            return Monzo(self._components(match))

        match = self._match(_VAL)
        if match:
            return Val(self._components(match))

        match = self._match(_EDJI)
        if match:
            equave = None
            if self.text.startswith("<", self.pos):
                self.pos += 1
                equave = self._expression()
                self._expect(">")
            return EdjiFraction(match.group("numerator"), match.group("denominator"), equave)

        match = self._match(_FRACTION)
        if match:
            return FractionLiteral(int(match.group("numerator")), int(match.group("denominator")))

        match = self._match(_DECIMAL)
        if match:
            return DecimalLiteral(match.group())

        match = self._match(_INTEGER)
        if match:
            return PlainLiteral(int(match.group()))

        unit = self._unit_token()
        if unit is not None:
            return unit

        match = self._match(_VARIABLE)
        if match:
            return VariableAccess(match.group("name") or "")

        match = self._match(_QUOTED)
        if match:
            return VariableAccess(match.group("name"), quoted=True)

        raise self._error("Expected an expression")

    def _components(self, match: re.Match[str]) -> tuple[str, ...]:
        body = match.group("components").strip()
        if not body:
            return ()
        components = tuple(_COMPONENT_SEPARATOR.split(body.strip(", ")))
        for component in components:
            if not _COMPONENT.fullmatch(component):
                self.pos = match.start()
                raise NotationSyntaxError(
                    f"Invalid component '{component}'", self.text, match.start()
                )
        return components


def parse(text: str) -> Node:
    """
    Parse one line of notation into a syntax tree.

    Raises:
        NotationSyntaxError: With the offset, line and column of the failure

    Examples:
        parse("3/2") -> FractionLiteral(3, 2)
        parse("A4 = 440 Hz") -> PitchAssignment(...)
    """
    return Parser(text).parse()


def parse_expression(text: str) -> Expression:
    """Parse text that must be a single expression (no statements)."""
    return Parser(text).parse_expression()
