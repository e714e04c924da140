"""Shared Kernel - base classes для всієї domain layer.

- ValueObject: Immutable об'єкт порівнюваний за значенням
- DomainException: base для всіх errors цього пакету
"""

from .exceptions import (
    CircuitOpenError,
    DatabaseUnavailableError,
    DomainException,
    ResilienceError,
)
from .value_object import ValueObject

__all__ = [
    # Base classes
    "ValueObject",
    # Exceptions
    "DomainException",
    "ResilienceError",
    "CircuitOpenError",
    "DatabaseUnavailableError",
]
