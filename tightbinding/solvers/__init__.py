"""Eigen-solvers for numeric Bloch Hamiltonians."""

from .diagonalization import check_hermiticity, eigh_upper, hermitian_from_upper

__all__ = [
    'check_hermiticity',
    'eigh_upper',
    'hermitian_from_upper',
]
