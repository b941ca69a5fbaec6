"""
Core tuning primitives - exact pitch arithmetic.

These are the values everything else composes on:
- ExtendedMonzo: Prime exponent vector + rational residual + cents offset
- Quantity: ExtendedMonzo tagged with a dimension (scalar, pitch, time)
- CommaCache: Formal and neutral FJS comma sequences
- Scale: Periodic set of frequency ratios anchored to a base frequency
"""

from chuk_mcp_tuning.core.fjs import (
    DEFAULT_COMMA_CACHE,
    CommaCache,
    CommaSequence,
    get_formal_comma,
    get_neutral_comma,
)
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.core.quantity import Quantity
from chuk_mcp_tuning.core.scale import Scale
from chuk_mcp_tuning.core.warts import warts_to_val

__all__ = [
    # Values
    "ExtendedMonzo",
    "Quantity",
    # Commas
    "CommaCache",
    "CommaSequence",
    "DEFAULT_COMMA_CACHE",
    "get_formal_comma",
    "get_neutral_comma",
    # Vals
    "warts_to_val",
    # Scales
    "Scale",
]
