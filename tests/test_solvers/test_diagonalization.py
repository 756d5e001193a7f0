"""
Unit tests for the Hermitian eigen-solver.
"""

import numpy as np
import pytest

from tightbinding.core.errors import DiagonalizationError
from tightbinding.solvers.diagonalization import (
    check_hermiticity,
    eigh_upper,
    hermitian_from_upper,
)


class TestEighUpper:
    """Test eigen-decomposition from the upper triangle."""

    def test_lower_triangle_is_ignored(self):
        matrix = np.array([[1.0, 2.0], [999.0, 3.0]])
        values, _ = eigh_upper(matrix)

        expected = np.linalg.eigvalsh(np.array([[1.0, 2.0], [2.0, 3.0]]))
        assert np.allclose(values, expected)

    def test_complex_upper_triangle(self):
        matrix = np.array([[0.0, 1.0 - 1.0j], [0.0, 0.0]])
        values, vectors = eigh_upper(matrix)
        full = hermitian_from_upper(matrix)

        assert np.allclose(values, [-np.sqrt(2), np.sqrt(2)])
        assert np.allclose(full @ vectors, vectors * values)

    def test_ascending_order(self):
        rng = np.random.default_rng(7)
        a = rng.normal(size=(5, 5)) + 1j * rng.normal(size=(5, 5))
        values, _ = eigh_upper(a + a.conj().T)

        assert np.all(np.diff(values) >= 0)

    def test_eigenvectors_are_columns(self):
        matrix = np.diag([3.0, 1.0, 2.0])
        values, vectors = eigh_upper(matrix)

        assert np.allclose(values, [1.0, 2.0, 3.0])
        assert np.allclose(np.abs(vectors[:, 0]), [0.0, 1.0, 0.0])

    def test_nan_in_lower_triangle_is_ignored(self):
        matrix = np.array([[1.0, 0.0], [np.nan, 1.0]])
        values, _ = eigh_upper(matrix)
        assert np.allclose(values, [1.0, 1.0])

    def test_non_square_raises(self):
        with pytest.raises(DiagonalizationError, match="square"):
            eigh_upper(np.zeros((2, 3)))

    def test_non_finite_raises(self):
        with pytest.raises(DiagonalizationError, match="non-finite"):
            eigh_upper(np.array([[1.0, np.inf], [0.0, 1.0]]))

    def test_complex_diagonal_raises(self):
        with pytest.raises(DiagonalizationError, match="not Hermitian"):
            eigh_upper(np.array([[1.0 + 0.5j]]))

    def test_error_is_runtime_error(self):
        with pytest.raises(RuntimeError):
            eigh_upper(np.array([[1.0j]]))


class TestHermitianHelpers:
    """Test Hermiticity helpers."""

    def test_hermitian_from_upper(self):
        matrix = np.array([[1.0, 2.0 + 1.0j], [5.0, 3.0]])
        full = hermitian_from_upper(matrix)

        assert np.allclose(full, [[1.0, 2.0 + 1.0j], [2.0 - 1.0j, 3.0]])
        assert check_hermiticity(full)

    def test_check_hermiticity(self):
        assert check_hermiticity(np.array([[1.0, 1.0j], [-1.0j, 2.0]]))
        assert not check_hermiticity(np.array([[1.0, 1.0j], [1.0j, 2.0]]))


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
