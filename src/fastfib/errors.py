"""Error types raised by the fastfib package.

All errors derive from :class:`FibonacciError` and additionally from the
closest built-in exception, so callers may catch either.
"""

from __future__ import annotations


class FibonacciError(Exception):
    """Base class for all fastfib errors."""


class InvalidArgumentError(FibonacciError, ValueError):
    """Raised for an index that is not a non-negative integer, or an unknown backend."""


class FibonacciOverflowError(FibonacciError, OverflowError):
    """Raised when a fixed-width backend cannot hold an intermediate value."""


class PrecisionLossError(FibonacciError, ArithmeticError):
    """Raised in strict mode when a floating backend cannot return an exact result."""
