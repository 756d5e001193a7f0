"""
Crystal geometry of a tight-binding model.

This module holds the purely geometric part of a model: basis vectors,
sublattice positions, the unit-cell volume and the reciprocal basis. It contains
NO information about hoppings or parameters.

Conventions
-----------
- Vectors are stored one per row: ``basis_vectors[i]`` is ``a_{i+1}``.
- Sublattice positions are in crystal coordinates (multiples of the basis).
- Sites are integer tuples ``(di, dj[, dk], sub)``: a unit-cell offset followed
  by a 1-based sublattice label.
- Reciprocal vectors satisfy ``a_i . b_j = 2π δ_ij``.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Sequence, Tuple

import numpy as np

from ..errors import DimensionError, DegenerateGeometryError
from ...io.config import as_model_input

logger = logging.getLogger(__name__)

# relative to the product of the basis-vector lengths
VOLUME_TOLERANCE = 1e-12


class Dimension(IntEnum):
    """Supported model dimensions."""
    TWO = 2
    THREE = 3

    @classmethod
    def from_value(cls, dim: Any) -> "Dimension":
        """
        Validate a dimension.

        Raises
        ------
        DimensionError
            If ``dim`` is not 2 or 3.
        """
        try:
            value = int(dim)
        except (TypeError, ValueError):
            value = None
        if value is None or value != dim or value not in (2, 3):
            raise DimensionError(f"Dimension Error: dim={dim!r}, only 2 and 3 are supported")
        return cls(value)


def _embed_in_3d(basis_vectors: np.ndarray, dim: Dimension) -> np.ndarray:
    """Return a 3x3 basis; 2D bases get a zero z-coordinate and a unit z-axis."""
    if dim == Dimension.THREE:
        return basis_vectors
    embedded = np.zeros((3, 3))
    embedded[:2, :2] = basis_vectors
    embedded[2] = [0.0, 0.0, 1.0]
    return embedded


def _as_basis(basis_vectors: Sequence, dim: Dimension) -> np.ndarray:
    basis = np.array(basis_vectors, dtype=float)
    if basis.shape != (dim, dim):
        raise DimensionError(
            f"Expected {int(dim)} basis vectors of length {int(dim)}, got shape {basis.shape}"
        )
    return basis


def unit_cell_volume(basis_vectors: Sequence, dim: int) -> float:
    """
    Signed unit-cell volume ``a1 . (a2 x a3)``.

    For 2D models this is the signed area, obtained by embedding the basis in 3D
    with a synthetic unit z-axis.
    """
    dim = Dimension.from_value(dim)
    a = _embed_in_3d(_as_basis(basis_vectors, dim), dim)
    return float(np.dot(a[0], np.cross(a[1], a[2])))


def reciprocal_vectors(basis_vectors: Sequence, dim: int) -> np.ndarray:
    """
    Reciprocal basis vectors.

    Parameters
    ----------
    basis_vectors : array_like, shape (dim, dim)
        Real-space basis, one vector per row.
    dim : int
        2 or 3.

    Returns
    -------
    vectors : np.ndarray, shape (dim, dim)
        ``b_i = 2π (a_{i+1} x a_{i+2}) / V`` with cyclic indices. 2D bases are
        embedded in 3D with a unit z-axis and the result is truncated back to
        the first two vectors and coordinates.

    Raises
    ------
    DimensionError
        If ``dim`` is not 2 or 3 or the basis has the wrong shape.
    DegenerateGeometryError
        If the unit-cell volume vanishes.
    """
    dim = Dimension.from_value(dim)
    a = _embed_in_3d(_as_basis(basis_vectors, dim), dim)
    volume = float(np.dot(a[0], np.cross(a[1], a[2])))
    scale = float(np.prod(np.linalg.norm(a, axis=1)))
    if scale == 0.0 or abs(volume) < VOLUME_TOLERANCE * scale:
        raise DegenerateGeometryError(f"Basis vectors are degenerate (unit-cell volume {volume:g})")

    b = np.empty((3, 3))
    for i in range(3):
        b[i] = np.cross(a[(i + 1) % 3], a[(i + 2) % 3])
    b *= 2 * np.pi / volume
    return b[:dim, :dim]


def site_position(site: Sequence[int], sublattice_positions: Sequence) -> np.ndarray:
    """
    Crystal-coordinate position of a site.

    Parameters
    ----------
    site : sequence of int
        ``(di, dj[, dk], sub)`` with a 1-based sublattice label.
    sublattice_positions : array_like, shape (nsub, dim)

    Returns
    -------
    position : np.ndarray, shape (dim,)
        Unit-cell offset plus the intra-cell sublattice offset.
    """
    positions = np.asarray(sublattice_positions, dtype=float)
    offset = np.asarray(site[:-1], dtype=float)
    sub = int(site[-1])
    if not 1 <= sub <= positions.shape[0]:
        raise ValueError(f"Sublattice label {sub} out of range 1..{positions.shape[0]}")
    if offset.shape[0] != positions.shape[1]:
        raise ValueError(f"Site {tuple(site)} does not match dimension {positions.shape[1]}")
    return offset + positions[sub - 1]


@dataclass(frozen=True)
class ModelGeometry:
    """
    Geometry of a tight-binding model.

    Attributes
    ----------
    dim : Dimension
    basis_vectors : np.ndarray, shape (dim, dim)
    sublattice_positions : np.ndarray, shape (nsub, dim)
        Crystal coordinates.
    atom_name_list : tuple of str
    unit_cell_volume : float
        Signed volume (area in 2D) of the unit cell.
    reciprocal_basis_vectors : np.ndarray, shape (dim, dim)
    atom_names_normalized : bool
        True when the supplied atom names did not match ``nsub`` and were
        replaced by empty strings.

    Notes
    -----
    Use :meth:`from_vectors` to build an instance; the derived fields are
    computed there, so they always match the basis. Arrays are read-only.
    """
    dim: Dimension
    basis_vectors: np.ndarray
    sublattice_positions: np.ndarray
    atom_name_list: Tuple[str, ...]
    unit_cell_volume: float
    reciprocal_basis_vectors: np.ndarray
    atom_names_normalized: bool = False

    @classmethod
    def from_vectors(cls,
                     basis_vectors: Sequence,
                     sublattice_positions: Sequence,
                     atom_name_list: Sequence[str] = (),
                     dim: Any = None) -> "ModelGeometry":
        """
        Validate the raw geometry and derive volume and reciprocal vectors.

        ``dim`` defaults to the length of the first sublattice position.
        """
        if len(sublattice_positions) == 0:
            raise ValueError("At least one sublattice position is required")
        if dim is None:
            dim = len(sublattice_positions[0])
        dim = Dimension.from_value(dim)

        basis = _as_basis(basis_vectors, dim)
        lengths = [len(p) for p in sublattice_positions]
        if any(n != dim for n in lengths):
            raise DimensionError(
                f"Sublattice positions must have length {int(dim)}, got lengths {lengths}"
            )
        positions = np.array(sublattice_positions, dtype=float)
        nsub = positions.shape[0]

        names = tuple(str(a) for a in atom_name_list)
        normalized = len(names) != nsub
        if normalized:
            logger.warning("atom_name_list has %d entries for %d sublattices; using empty names",
                           len(names), nsub)
            names = ("",) * nsub

        recip = reciprocal_vectors(basis, dim)
        volume = unit_cell_volume(basis, dim)

        for arr in (basis, positions, recip):
            arr.setflags(write=False)

        return cls(dim=dim,
                   basis_vectors=basis,
                   sublattice_positions=positions,
                   atom_name_list=names,
                   unit_cell_volume=volume,
                   reciprocal_basis_vectors=recip,
                   atom_names_normalized=normalized)

    @property
    def nsub(self) -> int:
        """Number of sublattices."""
        return self.sublattice_positions.shape[0]

    def site_position(self, site: Sequence[int]) -> np.ndarray:
        """Crystal-coordinate position of ``site``."""
        return site_position(site, self.sublattice_positions)

    def crystal_to_cartesian(self, position: Sequence[float]) -> np.ndarray:
        """Convert crystal coordinates (n1, n2[, n3]) to a real-space position."""
        return np.asarray(position, dtype=float) @ self.basis_vectors

    def cartesian_to_crystal(self, position: Sequence[float]) -> np.ndarray:
        """Solve ``position = sum_i n_i a_i`` for the crystal coordinates."""
        return np.linalg.solve(self.basis_vectors.T, np.asarray(position, dtype=float))

    @property
    def momentum_transform(self) -> np.ndarray:
        """
        Matrix ``U = 2π B^-1`` with ``k_crystal = U k_cartesian``.

        ``B`` holds the reciprocal vectors as columns, so ``U`` equals the basis
        matrix with one vector per row.
        """
        return 2 * np.pi * np.linalg.inv(self.reciprocal_basis_vectors.T)

    def k_cartesian_to_crystal(self, k: Sequence[float]) -> np.ndarray:
        return self.momentum_transform @ np.asarray(k, dtype=float)

    def k_crystal_to_cartesian(self, k: Sequence[float]) -> np.ndarray:
        return self.reciprocal_basis_vectors.T @ np.asarray(k, dtype=float) / (2 * np.pi)

    def __repr__(self) -> str:
        return (f"ModelGeometry(dim={int(self.dim)}, nsub={self.nsub}, "
                f"volume={self.unit_cell_volume:.3f})")


def build_geometry(model_input) -> ModelGeometry:
    """
    Build the geometry from a model input record.

    Parameters
    ----------
    model_input : ModelInput or dict
        Must provide ``basis_vectors``, ``sublattice_positions`` and
        optionally ``atom_name_list``.

    Raises
    ------
    DimensionError
        If the dimension is not 2 or 3 or vector lengths disagree with it.
    DegenerateGeometryError
        If the basis spans zero volume.
    """
    model_input = as_model_input(model_input)
    return ModelGeometry.from_vectors(model_input.basis_vectors,
                                      model_input.sublattice_positions,
                                      model_input.atom_name_list)
