"""Symmetric 2x2 matrices and the two products the power ladder needs.

Every matrix the engine builds is a power of the recurrence matrix

    | 1 1 |
    | 1 0 |

and powers of a symmetric matrix commute with each other, so their products
are symmetric too. That lets a matrix be stored as three scalars and lets the
products skip the redundant off-diagonal entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from fastfib.backends import NumericBackend


@dataclass(frozen=True)
class SymmetricMatrix2x2:
    """The matrix ``[[a, b], [b, c]]``.

    Attributes:
        a: Upper-left entry, F(k+1) for Base^k.
        b: Off-diagonal entry, F(k) for Base^k.
        c: Lower-right entry, F(k-1) for Base^k.
    """

    a: Any
    b: Any
    c: Any

    @classmethod
    def base(cls, backend: NumericBackend) -> SymmetricMatrix2x2:
        """The Fibonacci recurrence matrix ``[[1, 1], [1, 0]]`` in ``backend`` values."""
        return cls(backend.from_int(1), backend.from_int(1), backend.from_int(0))

    def to_array(self) -> NDArray[np.object_]:
        """Full 2x2 array, object dtype so big integers stay exact."""
        return np.array([[self.a, self.b], [self.b, self.c]], dtype=object)


def square(m: SymmetricMatrix2x2, backend: NumericBackend) -> SymmetricMatrix2x2:
    """Return ``m * m`` using four multiplications.

    x = a**2 + b**2
    y = a*b + b*c = b*(a + c)
    z = b**2 + c**2

    with b**2 computed once and y factored.
    """
    mul, add = backend.multiply, backend.add
    b2 = mul(m.b, m.b)
    return SymmetricMatrix2x2(
        add(mul(m.a, m.a), b2),
        mul(m.b, add(m.a, m.c)),
        add(b2, mul(m.c, m.c)),
    )


def multiply(m1: SymmetricMatrix2x2, m2: SymmetricMatrix2x2, backend: NumericBackend) -> SymmetricMatrix2x2:
    """Return ``m1 * m2`` using five multiplications.

    For ``[[a, b], [b, c]] * [[d, e], [e, f]]`` the full product is

        x = a*d + b*e    y = a*e + b*f
        z = b*d + c*e    w = b*e + c*f

    Both operands must be powers of the same symmetric matrix, in which case
    z == y and it is not computed.
    """
    mul, add = backend.multiply, backend.add
    be = mul(m1.b, m2.b)
    return SymmetricMatrix2x2(
        add(mul(m1.a, m2.a), be),
        add(mul(m1.a, m2.b), mul(m1.b, m2.c)),
        add(be, mul(m1.c, m2.c)),
    )
