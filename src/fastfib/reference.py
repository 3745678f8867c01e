"""Straight-line Fibonacci by repeated addition.

Shares nothing with the matrix engine: no backends, no matrices, only exact
Python ints. The test-suite checks the engine against it, and the CLI exposes
it as ``--method iterative`` for comparing the two on the command line.
"""

from __future__ import annotations

from fastfib.errors import InvalidArgumentError


def fibonacci_iterative(n: int) -> int:
    """Return F(n) after n additions.

    Args:
        n: Index in the Fibonacci sequence (0-indexed). Must be >= 0.

    Raises:
        InvalidArgumentError: If ``n`` is negative.
    """
    if n < 0:
        raise InvalidArgumentError("n must be >= 0")
    previous, current = 0, 1
    for _ in range(n):
        previous, current = current, previous + current
    return previous
