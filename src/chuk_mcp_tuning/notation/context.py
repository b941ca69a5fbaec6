"""
Evaluation context - the mutable state shared by a sequence of lines.

Keys are plain strings:
- "0"              base frequency (time^-1)
- "1", "2", ...    accumulated scale degrees
- "#"              current size (number of degree slots including "0")
- "##"             zero-based index of the line being evaluated
- "#root"          absolute reference pitch set by a pitch assignment
- ""               value bound to $ while a map declaration runs
- anything else    user variables

Reads go through the Mapping interface; every write has its own method so
the places where state changes are easy to find.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from fractions import Fraction

from chuk_mcp_tuning.constants import (
    BASE_FREQUENCY_KEY,
    DEFAULT_NUMBER_OF_COMPONENTS,
    INDEX_KEY,
    PREVIOUS_KEY,
    ROOT_KEY,
    SIZE_KEY,
    ErrorMessages,
)
from chuk_mcp_tuning.core.monzo import ExtendedMonzo
from chuk_mcp_tuning.core.quantity import Quantity
from chuk_mcp_tuning.errors import ReservedNameError, UnboundVariableError

# Keys only the context itself may write
RESERVED_KEYS = frozenset({SIZE_KEY, INDEX_KEY, ROOT_KEY, PREVIOUS_KEY})


class EvaluationContext(Mapping[str, Quantity]):
    """
    Caller-owned ordered mapping from names to quantities.

    Example:
        context = EvaluationContext()
        context.declare("fifth", Quantity.interval(ExtendedMonzo([-1, 1])))
        context["fifth"].value.to_fraction() -> Fraction(3, 2)
    """

    def __init__(
        self,
        number_of_components: int = DEFAULT_NUMBER_OF_COMPONENTS,
        base_frequency: Quantity | None = None,
    ) -> None:
        self.number_of_components = number_of_components
        self._values: dict[str, Quantity] = {}
        self._size = 1
        if base_frequency is not None:
            self._values[BASE_FREQUENCY_KEY] = base_frequency
        self.refresh(size=1, index=0)

    # ------------------------------------------------------------------
    # Mapping interface
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Quantity:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def lookup(self, name: str, quoted: bool = False) -> Quantity:
        """
        Resolve a variable access.

        $ is the map binding if one is active, otherwise the previous
        degree. Unquoted names starting with "-" count back from the
        current size; quoted names are always literal keys.

        Raises:
            UnboundVariableError: If nothing is bound to the name
        """
        key = name
        if not quoted:
            if name == PREVIOUS_KEY and PREVIOUS_KEY not in self._values:
                key = str(self.size - 1)
            elif name.startswith("-") and name[1:].isdigit():
                key = str(self.size - int(name[1:]))
        if key not in self._values:
            raise UnboundVariableError(ErrorMessages.UNBOUND_VARIABLE.format(name=name))
        return self._values[key]

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of degree slots, counting the base at "0"."""
        return self._size

    @property
    def index(self) -> int:
        return int(self._values[INDEX_KEY].value.to_fraction())

    @property
    def root(self) -> ExtendedMonzo:
        """Absolute reference pitch; unison until a pitch assignment."""
        if ROOT_KEY in self._values:
            return self._values[ROOT_KEY].value
        return ExtendedMonzo([0] * self.number_of_components)

    @property
    def base_frequency(self) -> Quantity | None:
        return self._values.get(BASE_FREQUENCY_KEY)

    def degrees(self) -> list[Quantity]:
        """Accumulated degrees "1" .. size-1 in order."""
        return [self._values[str(index)] for index in range(1, self.size)]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _counter(self, value: int) -> Quantity:
        return Quantity(ExtendedMonzo.from_fraction(Fraction(value), self.number_of_components))

    def refresh(self, size: int | None = None, index: int | None = None) -> None:
        """Update the # and ## counters. # is always rewritten from the size."""
        if size is not None:
            self._size = size
        self._values[SIZE_KEY] = self._counter(self._size)
        if index is not None:
            self._values[INDEX_KEY] = self._counter(index)

    def declare(self, name: str, value: Quantity) -> None:
        """
        Bind a user variable.

        Raises:
            ReservedNameError: For the counters, the root and the map binding
        """
        if name in RESERVED_KEYS:
            raise ReservedNameError(ErrorMessages.RESERVED_NAME.format(name=name))
        self._values[name] = value

    def append_degree(self, value: Quantity) -> None:
        """Store a new degree after the last one and grow the size."""
        size = self.size
        self._values[str(size)] = value
        self.refresh(size=size + 1)

    def assign_degree(self, index: int, value: Quantity) -> None:
        """Replace an existing degree."""
        self._values[str(index)] = value

    def restore_degrees(self, degrees: list[Quantity]) -> None:
        """Put back degrees 1 .. len(degrees) taken earlier with degrees()."""
        for index, value in enumerate(degrees, start=1):
            self._values[str(index)] = value

    def bind_previous(self, value: Quantity) -> None:
        """Bind $ for the duration of a map declaration."""
        self._values[PREVIOUS_KEY] = value

    def unbind_previous(self) -> None:
        self._values.pop(PREVIOUS_KEY, None)

    def set_root(self, value: Quantity) -> None:
        """Set the absolute reference pitch."""
        self._values[ROOT_KEY] = value

    def set_base_frequency(self, value: Quantity) -> None:
        self._values[BASE_FREQUENCY_KEY] = value
