"""
Formatting options - preferences for writing quantities back as notation.

Every field is optional; unset preferences fall back to the simplest
spelling of the value.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any

from pydantic import BaseModel, Field, field_validator


class FormattingOptions(BaseModel):
    """How an interval should be spelled when converted to text."""

    preferred_numerator: int | None = Field(
        default=None,
        gt=0,
        description="Expand ratios to this numerator when it is a multiple",
    )
    preferred_denominator: int | None = Field(
        default=None,
        gt=0,
        description="Expand ratios to this denominator when it is a multiple",
    )
    preferred_et_denominator: int | None = Field(
        default=None,
        gt=0,
        description="Expand equal divisions to this number of steps",
    )
    preferred_et_equave: str | None = Field(
        default=None,
        description="Equave to write equal divisions against, e.g. '3' or '3/2'",
    )
    cents_fraction_digits: int = Field(
        default=3,
        ge=0,
        le=12,
        description="Digits after the point in cents offsets",
    )
    decimal_fraction_digits: int = Field(
        default=6,
        ge=0,
        le=15,
        description="Digits after the point in hard decimals",
    )
    forbid_monzo: bool = Field(False, description="Use cents instead of a monzo")
    forbid_composite: bool = Field(False, description="Use cents instead of composite forms")

    model_config = {"frozen": True}

    @field_validator("preferred_et_equave")
    @classmethod
    def validate_equave(cls, v: str | None) -> str | None:
        """Equave must be a fraction above one."""
        if v is None:
            return v
        try:
            equave = Fraction(v)
        except (ValueError, ZeroDivisionError) as e:
            raise ValueError(f"Invalid equave: {v}") from e
        if equave <= 1:
            raise ValueError(f"Equave must be greater than 1, got {v}")
        return v

    def get_et_equave(self) -> Fraction | None:
        """Parsed preferred equave."""
        if self.preferred_et_equave is None:
            return None
        return Fraction(self.preferred_et_equave)

    def merge(self, **overrides: Any) -> FormattingOptions:
        """Copy with the non-None overrides applied."""
        updates = {key: value for key, value in overrides.items() if value is not None}
        return self.model_validate({**self.model_dump(), **updates})
