"""Numeric backends for the Fibonacci engine.

The engine only ever needs three things from its scalar type: construction
from a small integer literal, addition and multiplication. A backend bundles
those operations together with what it knows about its own exact range, so
the same matrix code runs over exact big integers, checked 64-bit integers or
numpy floating point.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import numpy as np

from fastfib.errors import FibonacciOverflowError, InvalidArgumentError

_INT64 = np.iinfo(np.int64)


def max_index_within(limit: int) -> int:
    """Largest n such that every value computed for F(n) stays <= ``limit``.

    The accumulator of the power ladder ends at Base^n, whose largest entry is
    F(n+1), and every intermediate product is bounded by the entry it feeds.
    So the bound is the largest n with F(n+1) <= limit.
    """
    k, current, following = 0, 0, 1
    while following <= limit:
        k += 1
        current, following = following, current + following
    return k - 1


class NumericBackend(ABC):
    """Abstract scalar arithmetic used by the matrix routines.

    Attributes:
        name: Registry key of the backend (e.g. ``"bigint"``).
        exact: True when every result the backend returns is exact.
    """

    name: str = ""
    exact: bool = True

    @abstractmethod
    def from_int(self, value: int) -> Any:
        """Construct a backend value from a small integer literal."""
        raise NotImplementedError("Subclasses must implement `from_int`")

    @abstractmethod
    def add(self, x: Any, y: Any) -> Any:
        raise NotImplementedError("Subclasses must implement `add`")

    @abstractmethod
    def multiply(self, x: Any, y: Any) -> Any:
        raise NotImplementedError("Subclasses must implement `multiply`")

    @property
    def max_exact_index(self) -> Optional[int]:
        """Largest index whose Fibonacci number is computed exactly, None if unbounded."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class BigIntBackend(NumericBackend):
    """Arbitrary-precision Python integers. No ceiling, never overflows."""

    name = "bigint"

    def from_int(self, value: int) -> int:
        return int(value)

    def add(self, x: int, y: int) -> int:
        return x + y

    def multiply(self, x: int, y: int) -> int:
        return x * y


class Int64Backend(NumericBackend):
    """Signed 64-bit integer semantics with overflow checks.

    Values are held as Python ints and every result is checked against the
    ``numpy.int64`` range, so an out-of-range value raises
    :class:`FibonacciOverflowError` instead of silently wrapping around.
    """

    name = "int64"

    def __init__(self) -> None:
        self.min_value: int = int(_INT64.min)
        self.max_value: int = int(_INT64.max)

    def _check(self, value: int, operation: str) -> int:
        if value < self.min_value or value > self.max_value:
            raise FibonacciOverflowError(f"{operation} result {value} does not fit in int64")
        return value

    def from_int(self, value: int) -> int:
        return self._check(int(value), "literal")

    def add(self, x: int, y: int) -> int:
        return self._check(x + y, "add")

    def multiply(self, x: int, y: int) -> int:
        return self._check(x * y, "multiply")

    @property
    def max_exact_index(self) -> int:
        return max_index_within(self.max_value)


class FloatBackend(NumericBackend):
    """numpy floating point scalars (``float64`` or ``longdouble``).

    Integers are exact up to ``2**(nmant + 1)``; past that the low digits of
    the result are lost. The ceiling depends on the platform's long double:
    n = 77 for float64 and n = 92 for an 80-bit x87 long double. A result
    that leaves the finite range raises :class:`FibonacciOverflowError`.
    """

    exact = False

    def __init__(self, dtype: type[np.floating] = np.float64, name: Optional[str] = None) -> None:
        self.dtype: type[np.floating] = dtype
        self.name = name or np.dtype(dtype).name
        self.mantissa_bits: int = int(np.finfo(dtype).nmant) + 1

    def _check(self, value: np.floating, operation: str) -> np.floating:
        if not np.isfinite(value):
            raise FibonacciOverflowError(f"{operation} result exceeds the finite range of {self.name}")
        return value

    def from_int(self, value: int) -> np.floating:
        return self.dtype(value)

    def add(self, x: np.floating, y: np.floating) -> np.floating:
        with np.errstate(over="ignore", invalid="ignore"):
            return self._check(x + y, "add")

    def multiply(self, x: np.floating, y: np.floating) -> np.floating:
        with np.errstate(over="ignore", invalid="ignore"):
            return self._check(x * y, "multiply")

    @property
    def max_exact_index(self) -> int:
        return max_index_within(2**self.mantissa_bits)


_REGISTRY: dict[str, Callable[[], NumericBackend]] = {
    "bigint": BigIntBackend,
    "int64": Int64Backend,
    "float64": lambda: FloatBackend(np.float64, name="float64"),
    "longdouble": lambda: FloatBackend(np.longdouble, name="longdouble"),
}


def available_backends() -> list[str]:
    """Names accepted by :func:`get_backend`."""
    return list(_REGISTRY)


def get_backend(name: str) -> NumericBackend:
    """Return a fresh backend instance for ``name``.

    Raises:
        InvalidArgumentError: If ``name`` is not a known backend.
    """
    try:
        factory = _REGISTRY[name]
    except KeyError:
        known = ", ".join(_REGISTRY)
        raise InvalidArgumentError(f"unknown backend {name!r} (expected one of: {known})") from None
    return factory()
