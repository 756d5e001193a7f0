"""
Finite-size tight-binding samples.

States are labelled by the 1-based tuple ``(i, j, k, sub)`` with
``1 <= i <= Lx``, ``1 <= j <= Ly``, ``1 <= k <= Lz`` and ``1 <= sub <= nsub``.
For 2D models the third index is kept (``Lz = 1`` by convention) so that every
sample uses the same labels.

Crystal momentum of a state, with boundary flux ``phi``:

    k_c = ((index_c - 1) * 2π + phi_c) / L_c,    c = x, y, z

Each distinct momentum is diagonalized once. State ``(i, j, k, sub)`` receives
the ``sub``-th eigenpair (ascending order) at its momentum. This is a positional
convention: the eigenpair index equals the sublattice label, which is not a
band assignment across momenta.
"""

import itertools
import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from .errors import InvalidSampleSizeError
from .lattice import Dimension
from .model import TBModel
from ..io.config import SampleSettings, as_triple

logger = logging.getLogger(__name__)

State = Tuple[int, int, int, int]
Cell = Tuple[int, int, int]


def momentum_grid(sample_size: Sequence[int],
                  boundary_flux: Sequence[int] = (0, 0, 0)) -> Dict[Cell, np.ndarray]:
    """
    Crystal momentum of every unit cell of a sample.

    Returns
    -------
    grid : dict
        ``(i, j, k) -> array([kx, ky, kz])`` in enumeration order.

    Raises
    ------
    InvalidSampleSizeError
        If any extent is not positive.
    """
    L = as_triple(sample_size, "sample_size")
    flux = as_triple(boundary_flux, "boundary_flux")
    if any(l <= 0 for l in L):
        raise InvalidSampleSizeError(f"Sample size must be positive along every direction, got {L}")

    grid = {}
    for cell in itertools.product(*(range(1, l + 1) for l in L)):
        grid[cell] = np.array([((n - 1) * 2 * np.pi + phi) / l
                               for n, phi, l in zip(cell, flux, L)])
    return grid


class TBSample:
    """
    Finite lattice realization of a :class:`TBModel`.

    Attributes
    ----------
    tb_model : TBModel
    sample_size : tuple of int
        ``(Lx, Ly, Lz)``.
    boundary_flux : tuple of int
    temperature : float
        Stored for downstream consumers; not used here.
    state_to_r_crystal : Mapping
        ``state -> crystal position`` (length ``dim``).
    state_to_k_crystal : Mapping
        ``state -> crystal momentum`` (always length 3).
    state_to_eigs : Mapping
        ``state -> (eigenvalue, eigenvector)``.

    Notes
    -----
    The mappings are read-only views and the stored arrays are not writeable.
    """

    def __init__(self,
                 tb_model: TBModel,
                 sample_size: Tuple[int, int, int],
                 boundary_flux: Tuple[int, int, int],
                 temperature: float,
                 state_to_r_crystal: Dict[State, np.ndarray],
                 state_to_k_crystal: Dict[State, np.ndarray],
                 state_to_eigs: Dict[State, Tuple[float, np.ndarray]]):
        self.tb_model = tb_model
        self.sample_size = tuple(sample_size)
        self.boundary_flux = tuple(boundary_flux)
        self.temperature = float(temperature)
        self.state_to_r_crystal: Mapping = MappingProxyType(state_to_r_crystal)
        self.state_to_k_crystal: Mapping = MappingProxyType(state_to_k_crystal)
        self.state_to_eigs: Mapping = MappingProxyType(state_to_eigs)

    @property
    def size(self) -> Tuple[int, int, int]:
        """Alias of ``sample_size``."""
        return self.sample_size

    @property
    def flux(self) -> Tuple[int, int, int]:
        """Alias of ``boundary_flux``."""
        return self.boundary_flux

    @property
    def model(self) -> TBModel:
        """Alias of ``tb_model``."""
        return self.tb_model

    @property
    def states(self) -> List[State]:
        """All state labels in enumeration order."""
        return list(self.state_to_k_crystal)

    @property
    def num_states(self) -> int:
        return len(self.state_to_k_crystal)

    def eigenvalues(self) -> np.ndarray:
        """Eigenvalue of every state, in enumeration order."""
        return np.array([self.state_to_eigs[s][0] for s in self.state_to_k_crystal])

    def momenta(self) -> np.ndarray:
        """Distinct crystal momenta, shape (Lx*Ly*Lz, 3), in enumeration order."""
        seen = {}
        for (i, j, k, _), kvec in self.state_to_k_crystal.items():
            seen.setdefault((i, j, k), kvec)
        return np.array(list(seen.values()))

    def __len__(self) -> int:
        return self.num_states

    def __repr__(self) -> str:
        return (f"TBSample(model={self.tb_model.model_name!r}, size={self.sample_size}, "
                f"flux={self.boundary_flux}, states={self.num_states})")


def generate_sample(tb_model: TBModel,
                    sample_size: Sequence[int] = (6, 6, 6),
                    boundary_flux: Sequence[int] = (0, 0, 0),
                    temperature: float = 1.0e-6,
                    progress: bool = False) -> TBSample:
    """
    Realize a finite-size sample of a tight-binding model.

    Parameters
    ----------
    tb_model : TBModel
    sample_size : sequence of 3 int
        ``(Lx, Ly, Lz)``; use ``Lz = 1`` for 2D models.
    boundary_flux : sequence of 3 int
        Flux threaded through each periodic direction, in units of the flux
        quantum.
    temperature : float
    progress : bool
        Show a progress bar over the momentum points.

    Returns
    -------
    sample : TBSample
        One entry per state in each mapping, ``Lx*Ly*Lz*nsub`` in total.

    Raises
    ------
    InvalidSampleSizeError
        If any extent is not positive.
    DiagonalizationError
        If any eigen-decomposition fails. No partial sample is returned.
    """
    grid = momentum_grid(sample_size, boundary_flux)
    L = as_triple(sample_size, "sample_size")
    flux = as_triple(boundary_flux, "boundary_flux")
    dim = Dimension.from_value(tb_model.dim)
    nsub = tb_model.nsub
    geometry = tb_model.geometry

    if dim == Dimension.TWO and L[2] != 1:
        logger.warning("2D model sampled with Lz=%d; states differing only in k share positions", L[2])

    state_to_k_crystal: Dict[State, np.ndarray] = {}
    state_to_r_crystal: Dict[State, np.ndarray] = {}
    for (i, j, k), kvec in grid.items():
        kvec.setflags(write=False)
        for sub in range(1, nsub + 1):
            state = (i, j, k, sub)
            state_to_k_crystal[state] = kvec
            if dim == Dimension.TWO:
                r = geometry.site_position((i, j, sub))
            else:
                r = geometry.site_position((i, j, k, sub))
            r.setflags(write=False)
            state_to_r_crystal[state] = r

    # momentum depends on (i, j, k) only; 2D models ignore the third component
    eigensystems: Dict[Tuple[int, ...], Tuple[np.ndarray, np.ndarray]] = {}
    for cell, kvec in tqdm(grid.items(), desc="Diagonalizing", total=len(grid), disable=not progress):
        key = cell[:dim]
        if key not in eigensystems:
            eigensystems[key] = tb_model.eigen_k_crystal(kvec)
            logger.debug("k=%s eigenvalues=%s", kvec[:dim], eigensystems[key][0])

    state_to_eigs: Dict[State, Tuple[float, np.ndarray]] = {}
    for state in state_to_k_crystal:
        values, vectors = eigensystems[state[:dim]]
        sub = state[-1]
        vec = vectors[:, sub - 1].copy()
        vec.setflags(write=False)
        state_to_eigs[state] = (float(values[sub - 1]), vec)

    logger.info("Sample %s with flux %s: %d states, %d momentum points",
                L, flux, len(state_to_eigs), len(eigensystems))

    return TBSample(tb_model=tb_model,
                    sample_size=L,
                    boundary_flux=flux,
                    temperature=temperature,
                    state_to_r_crystal=state_to_r_crystal,
                    state_to_k_crystal=state_to_k_crystal,
                    state_to_eigs=state_to_eigs)


def generate_sample_from_settings(tb_model: TBModel, settings: SampleSettings,
                                  progress: bool = False) -> TBSample:
    """Run :func:`generate_sample` with a :class:`SampleSettings` record."""
    return generate_sample(tb_model,
                           sample_size=settings.sample_size,
                           boundary_flux=settings.boundary_flux,
                           temperature=settings.temperature,
                           progress=progress)
