"""
Scale - a periodic set of frequency ratios anchored to a base frequency.

Degree 0 is the unison at base_index; indices above and below wrap
around the equave.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chuk_mcp_tuning.constants import ErrorMessages


@dataclass(frozen=True)
class Scale:
    """
    Repeating tuning.

    ratios holds one equave worth of degrees starting with the unison;
    the equave itself is kept separately.

    Example:
        Scale(ratios=(1.0, 1.25, 1.5), equave_ratio=2.0, base_frequency=440.0)
    """

    ratios: tuple[float, ...]
    equave_ratio: float = 2.0
    base_frequency: float = 440.0
    base_index: int = 0
    names: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate."""
        if not self.ratios:
            raise ValueError(ErrorMessages.EMPTY_SCALE)
        if self.equave_ratio <= 0:
            raise ValueError(f"Equave ratio must be positive, got {self.equave_ratio}")
        if self.base_frequency <= 0:
            raise ValueError(f"Base frequency must be positive, got {self.base_frequency}")

    @classmethod
    def from_degrees(
        cls,
        degrees: list[float],
        base_frequency: float = 440.0,
        base_index: int = 0,
        names: list[str] | None = None,
    ) -> Scale:
        """
        Build from the degree list of a scale file.

        The last degree is the equave and the unison is implied.
        """
        if not degrees:
            raise ValueError(ErrorMessages.EMPTY_SCALE)
        return cls(
            ratios=(1.0, *degrees[:-1]),
            equave_ratio=degrees[-1],
            base_frequency=base_frequency,
            base_index=base_index,
            names=tuple(names or ()),
        )

    @property
    def size(self) -> int:
        """Degrees per equave."""
        return len(self.ratios)

    def get_ratio(self, index: int) -> float:
        """Ratio of a scale index relative to the base, across equaves."""
        equaves, degree = divmod(index - self.base_index, self.size)
        return self.ratios[degree] * self.equave_ratio**equaves

    def get_frequency(self, index: int) -> float:
        return self.base_frequency * self.get_ratio(index)

    def get_frequency_range(self, start: int, end: int) -> list[float]:
        """Frequencies of indices start (inclusive) to end (exclusive)."""
        return [self.get_frequency(index) for index in range(start, end)]
