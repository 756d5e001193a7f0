"""
Hermitian eigen-solvers.

The upper triangle (including the diagonal) of a Bloch matrix is authoritative:
entry ``[to, from]`` with ``to <= from`` is read, the strictly lower triangle is
never looked at. Callers therefore do not need to fill both halves.
"""

import logging
from typing import Tuple

import numpy as np
import scipy.linalg

from ..core.errors import DiagonalizationError

logger = logging.getLogger(__name__)

TOLERANCE_DEFAULT = 1e-10


def check_hermiticity(matrix: np.ndarray, tolerance: float = TOLERANCE_DEFAULT) -> bool:
    """True if the full matrix equals its conjugate transpose within tolerance."""
    matrix = np.asarray(matrix)
    return np.allclose(matrix - matrix.conj().T, 0, atol=tolerance)


def hermitian_from_upper(matrix: np.ndarray) -> np.ndarray:
    """Hermitian completion of the upper triangle; the diagonal is made real."""
    matrix = np.asarray(matrix, dtype=complex)
    upper = np.triu(matrix, k=1)
    return upper + upper.conj().T + np.diag(matrix.diagonal().real)


def eigh_upper(matrix: np.ndarray, tolerance: float = TOLERANCE_DEFAULT) -> Tuple[np.ndarray, np.ndarray]:
    """
    Eigen-decomposition of a Hermitian matrix given by its upper triangle.

    Parameters
    ----------
    matrix : np.ndarray, shape (n, n)
    tolerance : float
        Largest imaginary part tolerated on the diagonal.

    Returns
    -------
    eigenvalues : np.ndarray, shape (n,)
        Ascending.
    eigenvectors : np.ndarray, shape (n, n)
        Column ``i`` belongs to ``eigenvalues[i]``.

    Raises
    ------
    DiagonalizationError
        If the matrix is not square, contains non-finite entries, has a complex
        diagonal, or LAPACK fails.
    """
    matrix = np.asarray(matrix, dtype=complex)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise DiagonalizationError(f"Expected a square matrix, got shape {matrix.shape}")

    upper = np.triu(matrix)
    if not np.all(np.isfinite(upper)):
        raise DiagonalizationError("Matrix contains non-finite entries")

    diag_imag = np.abs(matrix.diagonal().imag)
    if diag_imag.size and diag_imag.max() > tolerance:
        raise DiagonalizationError(
            f"Matrix is not Hermitian: diagonal has imaginary part {diag_imag.max():.3e}"
        )

    try:
        eigenvalues, eigenvectors = scipy.linalg.eigh(upper, lower=False, check_finite=False)
    except (np.linalg.LinAlgError, ValueError) as e:
        raise DiagonalizationError(f"Eigen-decomposition failed: {e}") from e

    return eigenvalues, eigenvectors
