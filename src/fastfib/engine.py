"""Fibonacci numbers by fast exponentiation of the recurrence matrix.

Base^m = | F(m+1)  F(m)   |
         | F(m)    F(m-1) |

so F(n) is the off-diagonal entry of Base^n. The power is built by scanning
the bits of the exponent from least to most significant, squaring a running
power-of-two matrix and multiplying it into an accumulator whenever the bit
is set. That is O(log n) matrix products instead of O(n) additions.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional, Union

import numpy as np

from fastfib.backends import NumericBackend, get_backend
from fastfib.errors import InvalidArgumentError, PrecisionLossError
from fastfib.matrix import SymmetricMatrix2x2, multiply, square

logger = logging.getLogger(__name__)


def _check_index(n: Any, what: str = "n") -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidArgumentError(f"{what} must be an integer, got {type(n).__name__}")
    n = int(n)
    if n < 0:
        raise InvalidArgumentError(f"{what} must be >= 0, got {n}")
    return n


class LadderState(enum.Enum):
    ACCUMULATE_IF_BIT_SET = "accumulate_if_bit_set"
    SHIFT_AND_CHECK_DONE = "shift_and_check_done"
    SQUARE_BASE = "square_base"
    DONE = "done"


class PowerLadder:
    """Step-wise computation of Base^(1 + exponent).

    Both the accumulator and the running base start as the recurrence matrix,
    so the ladder yields Base^(1 + exponent); the engine runs it on
    ``exponent = n - 1``.

    - ACCUMULATE_IF_BIT_SET: multiply the base into the accumulator if the low
      bit of the remaining exponent is set.
    - SHIFT_AND_CHECK_DONE: drop the low bit; finish when nothing is left, so
      the last power of two is never squared needlessly.
    - SQUARE_BASE: square the base to the next power of two.

    After every step ``accumulator == Base^(1 + consumed)`` and
    ``base == Base^(2**squarings)``.
    """

    def __init__(self, exponent: int, backend: NumericBackend) -> None:
        self.exponent: int = _check_index(exponent, "exponent")
        self.backend: NumericBackend = backend
        self.remaining: int = self.exponent
        self.accumulator: SymmetricMatrix2x2 = SymmetricMatrix2x2.base(backend)
        self.base: SymmetricMatrix2x2 = SymmetricMatrix2x2.base(backend)
        self.state: LadderState = LadderState.ACCUMULATE_IF_BIT_SET
        self.squarings: int = 0
        self.multiplications: int = 0
        self.consumed: int = 0

    @property
    def done(self) -> bool:
        return self.state is LadderState.DONE

    def step(self) -> LadderState:
        """Advance exactly one state and return the new state."""
        if self.state is LadderState.ACCUMULATE_IF_BIT_SET:
            if self.remaining & 1:
                self.accumulator = multiply(self.accumulator, self.base, self.backend)
                self.multiplications += 1
                self.consumed += 1 << self.squarings
            self.state = LadderState.SHIFT_AND_CHECK_DONE
        elif self.state is LadderState.SHIFT_AND_CHECK_DONE:
            self.remaining >>= 1
            self.state = LadderState.SQUARE_BASE if self.remaining else LadderState.DONE
        elif self.state is LadderState.SQUARE_BASE:
            self.base = square(self.base, self.backend)
            self.squarings += 1
            self.state = LadderState.ACCUMULATE_IF_BIT_SET
        else:
            raise RuntimeError("ladder is already done")
        return self.state

    def run(self) -> SymmetricMatrix2x2:
        """Step until done and return the accumulator."""
        while not self.done:
            self.step()
        return self.accumulator


class FibonacciEngine:
    """Computes F(n) over a chosen numeric backend.

    The engine keeps no state between calls; every computation builds its own
    matrices, so one engine can be shared freely.

    Args:
        backend: A backend instance or registry name. Defaults to ``"bigint"``.
        strict: If True, raise :class:`PrecisionLossError` instead of returning
            an approximate value from an inexact backend.
    """

    def __init__(self, backend: Union[NumericBackend, str, None] = None, strict: bool = False) -> None:
        if backend is None:
            backend = "bigint"
        if isinstance(backend, str):
            backend = get_backend(backend)
        self.backend: NumericBackend = backend
        self.strict: bool = strict

    def __repr__(self) -> str:
        return f"FibonacciEngine(backend={self.backend.name!r}, strict={self.strict})"

    def _check_precision(self, n: int) -> None:
        if self.backend.exact:
            return
        limit: Optional[int] = self.backend.max_exact_index
        if limit is None or n <= limit:
            return
        message = (
            f"F({n}) exceeds the exact range of the {self.backend.name} backend "
            f"(max exact index {limit})"
        )
        if self.strict:
            raise PrecisionLossError(message)
        logger.warning("%s; returning an approximate value", message)

    def compute(self, n: int) -> Any:
        """Return F(n) as a backend value.

        Args:
            n: Index in the Fibonacci sequence (0-indexed). Must be >= 0.

        Raises:
            InvalidArgumentError: If ``n`` is negative or not an integer.
            FibonacciOverflowError: If a fixed-width backend overflows.
            PrecisionLossError: In strict mode, if the backend cannot be exact.
        """
        n = _check_index(n)
        if n == 0:
            return self.backend.from_int(0)
        if n == 1:
            return self.backend.from_int(1)
        self._check_precision(n)

        ladder = PowerLadder(n - 1, self.backend)
        result = ladder.run().b
        logger.debug(
            "F(%d) on %s: %d squarings, %d multiplications",
            n,
            self.backend.name,
            ladder.squarings,
            ladder.multiplications,
        )
        return result

    def power(self, k: int) -> SymmetricMatrix2x2:
        """Return Base^k; its ``b`` entry is F(k)."""
        k = _check_index(k, "k")
        if k == 0:
            one, zero = self.backend.from_int(1), self.backend.from_int(0)
            return SymmetricMatrix2x2(one, zero, one)
        return PowerLadder(k - 1, self.backend).run()

    def sequence(self, start: int, stop: int) -> list[Any]:
        """F(i) for i in ``range(start, stop)``."""
        start = _check_index(start, "start")
        stop = _check_index(stop, "stop")
        return [self.compute(i) for i in range(start, stop)]


def fibonacci(n: int, backend: Union[NumericBackend, str] = "bigint", strict: bool = False) -> Any:
    """Compute the n-th Fibonacci number.

    Uses matrix exponentiation with O(log n) arithmetic operations.

    Args:
        n: Index in the Fibonacci sequence (0-indexed). Must be >= 0.
        backend: Numeric backend instance or name, see
            :func:`fastfib.backends.available_backends`.
        strict: Raise instead of returning an approximate float.

    Returns:
        The n-th Fibonacci number.

    Raises:
        InvalidArgumentError: If ``n`` is negative.
    """
    return FibonacciEngine(backend, strict=strict).compute(n)
