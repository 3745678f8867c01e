import numpy as np
import pytest

from fastfib.backends import BigIntBackend, FloatBackend, Int64Backend
from fastfib.matrix import SymmetricMatrix2x2, multiply, square

BACKENDS = [BigIntBackend(), Int64Backend(), FloatBackend(np.float64), FloatBackend(np.longdouble)]


def test_base_matrix_entries():
    base = SymmetricMatrix2x2.base(BigIntBackend())
    assert (base.a, base.b, base.c) == (1, 1, 0)
    assert np.array_equal(base.to_array(), np.array([[1, 1], [1, 0]], dtype=object))


def test_square_of_base():
    backend = BigIntBackend()
    # [[1,1],[1,0]]^2 = [[2,1],[1,1]]
    assert square(SymmetricMatrix2x2.base(backend), backend) == SymmetricMatrix2x2(2, 1, 1)


def test_multiply_matches_full_matrix_product():
    backend = BigIntBackend()
    m = SymmetricMatrix2x2.base(backend)
    m2 = square(m, backend)
    m4 = square(m2, backend)
    product = multiply(m4, m2, backend)

    expected = m4.to_array().astype(np.int64) @ m2.to_array().astype(np.int64)
    # The skipped lower-left entry equals the upper-right one for powers of the base
    assert expected[1, 0] == expected[0, 1]
    assert np.array_equal(product.to_array().astype(np.int64), expected)


@pytest.mark.parametrize("backend", BACKENDS, ids=lambda b: b.name)
def test_square_agrees_with_multiply_on_every_power_of_two(backend):
    m = SymmetricMatrix2x2.base(backend)
    # 2**6 = 64 keeps every entry inside the exact range of all backends
    for _ in range(6):
        assert square(m, backend) == multiply(m, m, backend)
        m = square(m, backend)


def test_square_uses_four_multiplications():
    calls = []

    class CountingBackend(BigIntBackend):
        def multiply(self, x, y):
            calls.append((x, y))
            return super().multiply(x, y)

    backend = CountingBackend()
    m = SymmetricMatrix2x2.base(backend)
    square(m, backend)
    assert len(calls) == 4

    calls.clear()
    multiply(m, m, backend)
    assert len(calls) == 5
