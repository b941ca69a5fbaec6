"""
Exception hierarchy for notation parsing and exact pitch arithmetic.

Every error is a ValueError so callers validating user input can catch
the broad class, while the MCP tools can report the specific kind.
"""

from __future__ import annotations


class TuningError(ValueError):
    """Base class for all tuning errors."""


class NotationSyntaxError(TuningError):
    """
    Malformed notation text.

    Carries the zero-based character offset of the failure along with
    the one-based line and column for display.
    """

    def __init__(self, message: str, text: str = "", offset: int = 0) -> None:
        self.message = message
        self.text = text
        self.offset = offset
        self.line = text.count("\n", 0, offset) + 1
        self.column = offset - (text.rfind("\n", 0, offset) + 1) + 1
        super().__init__(f"{message} (line {self.line}, column {self.column})")


class IrrationalError(TuningError):
    """An exact rational result was requested from an irrational value."""


class NonRepresentableError(TuningError):
    """The value cannot be expressed in the requested form."""


class ModuloByUnisonError(TuningError):
    """Modulo or reduction by an interval of zero size."""


class OutOfPrimesError(TuningError):
    """A prime index beyond the prime table was requested."""


class InvalidPrimeLimitError(TuningError):
    """A subgroup prime limit that is not a prime number."""


class UnrecognizedAccidentalError(TuningError):
    """Unknown accidental in an absolute note name."""


class UnrecognizedNominalError(TuningError):
    """Unknown nominal letter in an absolute note name."""


class UnrecognizedWartError(TuningError):
    """Unknown wart letter in a warts val."""


class UnrecognizedQualityError(TuningError):
    """Unknown interval quality in a relative FJS name."""


class NeutralRegionError(TuningError):
    """No neutral FJS region could be found for a prime."""


class DomainMismatchError(TuningError):
    """Additive or modular operation between different domains."""


class ExponentMismatchError(TuningError):
    """Additive or modular operation between different exponents."""


class IncompatibleDomainsError(TuningError):
    """Multiplicative operation between domains that cannot combine."""


class CannotExponentiatePitchError(TuningError):
    """Raising a pitch-domain quantity to a power."""


class UnboundVariableError(TuningError):
    """Lookup of a name that is not in the evaluation context."""


class ReservedNameError(TuningError):
    """Declaration of a name the evaluation context keeps for itself."""


class MissingBaseFrequencyError(TuningError):
    """A domain conversion needed a base frequency and none was set."""


class SequenceError(TuningError):
    """A statement appeared where the line sequence does not allow it."""
