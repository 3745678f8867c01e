"""Top-level package for fastfib.

This package computes Fibonacci numbers by fast exponentiation of the
symmetric recurrence matrix, over a choice of numeric backends.
"""

# Public API re-exports
from .backends import (
    BigIntBackend,
    FloatBackend,
    Int64Backend,
    NumericBackend,
    available_backends,
    get_backend,
)
from .engine import FibonacciEngine, LadderState, PowerLadder, fibonacci
from .errors import FibonacciError, FibonacciOverflowError, InvalidArgumentError, PrecisionLossError
from .matrix import SymmetricMatrix2x2, multiply, square

__all__ = [
    "BigIntBackend",
    "FibonacciEngine",
    "FibonacciError",
    "FibonacciOverflowError",
    "FloatBackend",
    "Int64Backend",
    "InvalidArgumentError",
    "LadderState",
    "NumericBackend",
    "PowerLadder",
    "PrecisionLossError",
    "SymmetricMatrix2x2",
    "available_backends",
    "fibonacci",
    "get_backend",
    "multiply",
    "square",
]
