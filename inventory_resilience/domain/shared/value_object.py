"""Base ValueObject class.

ValueObject - immutable об'єкт, який порівнюється за значенням атрибутів.
Metrics і stats snapshots повертаються як value objects, щоб caller
не міг випадково змінити internal counters.
"""

from abc import ABC
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, eq=True)
class ValueObject(ABC):
    """Base class for all value objects.

    Example:
        >>> @dataclass(frozen=True)
        ... class Ratio(ValueObject):
        ...     value: float

        >>> Ratio(0.5) == Ratio(0.5)  # True (same value)
        >>> Ratio(0.5).value = 1.0  # FrozenInstanceError!
    """

    def to_dict(self) -> dict[str, Any]:
        """Convert value object to plain dict (JSON-ready for primitives)."""
        return asdict(self)
