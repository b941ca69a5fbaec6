"""
Notation settings - how a scale is evaluated and anchored.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from chuk_mcp_tuning.constants import (
    A4_MIDI_INDEX,
    DEFAULT_BASE_FREQUENCY,
    DEFAULT_NUMBER_OF_COMPONENTS,
    PRIMES,
)
from chuk_mcp_tuning.core.quantity import Quantity
from chuk_mcp_tuning.notation.context import EvaluationContext


class NotationSettings(BaseModel):
    """Evaluation settings shared by the tools and the scale library."""

    number_of_components: int = Field(
        default=DEFAULT_NUMBER_OF_COMPONENTS,
        ge=1,
        le=len(PRIMES),
        description="Number of primes tracked exactly",
    )
    base_frequency: float = Field(
        default=DEFAULT_BASE_FREQUENCY,
        gt=0,
        description="Frequency of the unison in Hz",
    )
    base_index: int = Field(
        default=A4_MIDI_INDEX,
        ge=0,
        le=127,
        description="MIDI note number the unison is mapped to",
    )

    model_config = {"frozen": True}

    def create_context(self) -> EvaluationContext:
        """Fresh evaluation context with the base frequency bound."""
        return EvaluationContext(
            self.number_of_components,
            Quantity.hertz(self.base_frequency, self.number_of_components),
        )
