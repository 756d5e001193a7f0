"""
Symbolic Bloch Hamiltonian assembly.

A hopping term ``[c^dagger]_{to_site} . amplitude . [c]_{from_site}`` contributes

    H_crystal[to.sub, from.sub] += amplitude * exp(-i <r_to - r_from, k_crystal>)

where ``r`` are crystal-coordinate site positions and ``k_crystal = (k1, k2[, k3])``.
The Cartesian companion matrix follows from substituting
``k_crystal = U k_cartesian`` with ``U = 2π B^-1`` (``B``: reciprocal vectors as
columns). Both matrices stay symbolic in the model parameters.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np
import sympy as sp

from .lattice import ModelGeometry, build_geometry
from .symbols import SymbolTable, K_CRYSTAL, K_CARTESIAN
from ..io.config import as_model_input

logger = logging.getLogger(__name__)

Site = Tuple[int, ...]
HoppingKey = Tuple[Site, Site]


@dataclass(frozen=True)
class HoppingTerm:
    """
    One real-space hopping term.

    Attributes
    ----------
    to_site, from_site : tuple of int
        ``(di, dj[, dk], sub)`` with a 1-based sublattice label.
    amplitude : sympy.Expr
        Amplitude over the model parameters.
    """
    to_site: Site
    from_site: Site
    amplitude: sp.Expr

    @property
    def key(self) -> HoppingKey:
        return (self.to_site, self.from_site)


def _as_sympy_number(x: float) -> sp.Expr:
    """Integers stay exact so that on-site phases vanish identically."""
    x = float(x)
    if x.is_integer():
        return sp.Integer(int(x))
    return sp.Float(x)


def _linear_form(coefficients: Iterable[float], variables: Iterable[sp.Symbol]) -> sp.Expr:
    return sp.Add(*[_as_sympy_number(c) * v
                    for c, v in zip(coefficients, variables) if c != 0])


def _check_site(site: Site, geometry: ModelGeometry) -> Site:
    site = tuple(int(x) for x in site)
    if len(site) != geometry.dim + 1:
        raise ValueError(f"Site {site} must have {geometry.dim + 1} entries "
                         f"(unit-cell offset and sublattice) for a {int(geometry.dim)}D model")
    if not 1 <= site[-1] <= geometry.nsub:
        raise ValueError(f"Sublattice label {site[-1]} in {site} out of range 1..{geometry.nsub}")
    return site


def _as_hopping_term(term: Any, geometry: ModelGeometry, symbols: SymbolTable) -> HoppingTerm:
    if isinstance(term, HoppingTerm):
        to_site, from_site, amplitude = term.to_site, term.from_site, term.amplitude
    else:
        if len(term) != 3:
            raise ValueError(f"Hopping term must be (to_site, from_site, amplitude), got {term!r}")
        to_site, from_site, amplitude = term
    return HoppingTerm(to_site=_check_site(to_site, geometry),
                       from_site=_check_site(from_site, geometry),
                       amplitude=symbols.resolve(amplitude))


def hopping_phase(term: HoppingTerm, geometry: ModelGeometry) -> sp.Expr:
    """Bloch factor ``exp(-i <r_to - r_from, k_crystal>)`` of one hopping term."""
    displacement = geometry.site_position(term.to_site) - geometry.site_position(term.from_site)
    phi = _linear_form(displacement, K_CRYSTAL[:geometry.dim])
    return sp.exp(-sp.I * phi)


def crystal_momentum_substitution(geometry: ModelGeometry) -> Dict[sp.Symbol, sp.Expr]:
    """Map ``k_i -> (U k_cartesian)_i`` for the model's dimension."""
    U = geometry.momentum_transform
    k_cart = K_CARTESIAN[:geometry.dim]
    return {K_CRYSTAL[i]: _linear_form(U[i], k_cart) for i in range(geometry.dim)}


def assemble_hamiltonian(geometry: ModelGeometry,
                         hopping_terms: Iterable,
                         symbols: Optional[SymbolTable] = None
                         ) -> Tuple[sp.Matrix, sp.Matrix, Dict[HoppingKey, sp.Expr]]:
    """
    Build the symbolic Hamiltonian in crystal and Cartesian momentum.

    Parameters
    ----------
    geometry : ModelGeometry
    hopping_terms : iterable
        ``HoppingTerm`` instances or ``(to_site, from_site, amplitude)``
        triples. Amplitude strings are parsed through ``symbols``.
    symbols : SymbolTable, optional
        Registry for parameter names; a fresh one is used if omitted.

    Returns
    -------
    H_crystal : sympy.Matrix, shape (nsub, nsub)
    H_cartesian : sympy.Matrix, shape (nsub, nsub)
    hopping_map : dict
        ``(to_site, from_site) -> amplitude``. A repeated key replaces the
        earlier amplitude (last write wins) and only the surviving amplitude
        enters the matrices.
    """
    if symbols is None:
        symbols = SymbolTable()

    hopping_map: Dict[HoppingKey, sp.Expr] = {}
    for raw in hopping_terms:
        term = _as_hopping_term(raw, geometry, symbols)
        if term.key in hopping_map:
            logger.debug("Hopping %s -> %s redefined; keeping the last amplitude",
                         term.from_site, term.to_site)
        hopping_map[term.key] = term.amplitude

    nsub = geometry.nsub
    H_crystal = sp.zeros(nsub, nsub)
    for (to_site, from_site), amplitude in hopping_map.items():
        term = HoppingTerm(to_site, from_site, amplitude)
        H_crystal[to_site[-1] - 1, from_site[-1] - 1] += amplitude * hopping_phase(term, geometry)

    H_cartesian = H_crystal.subs(crystal_momentum_substitution(geometry), simultaneous=True)
    return H_crystal, H_cartesian, hopping_map


class TBModelWithParameter:
    """
    Tight-binding model whose Hamiltonian is still symbolic in its parameters.

    Parameters
    ----------
    model_name : str
    symbols : SymbolTable
        Registry holding every parameter the model mentions.
    geometry : ModelGeometry
    hopping_map : dict
        ``(to_site, from_site) -> amplitude``.
    H_crystal, H_cartesian : sympy.Matrix

    Attributes
    ----------
    k_crystal, k_cartesian : tuple of sympy.Symbol
        Momentum variables truncated to the model dimension.
    """

    def __init__(self,
                 model_name: str,
                 symbols: SymbolTable,
                 geometry: ModelGeometry,
                 hopping_map: Dict[HoppingKey, sp.Expr],
                 H_crystal: sp.Matrix,
                 H_cartesian: sp.Matrix):
        self.model_name = model_name
        self.symbols = symbols
        self.geometry = geometry
        self.hopping_map = dict(hopping_map)
        self.H_crystal = H_crystal
        self.H_cartesian = H_cartesian
        self.k_crystal = tuple(K_CRYSTAL[:geometry.dim])
        self.k_cartesian = tuple(K_CARTESIAN[:geometry.dim])

    @property
    def parameter_list(self) -> List[sp.Symbol]:
        return self.symbols.symbols

    @property
    def dim(self) -> int:
        return int(self.geometry.dim)

    @property
    def nsub(self) -> int:
        return self.geometry.nsub

    @property
    def basis_vectors(self) -> np.ndarray:
        return self.geometry.basis_vectors

    @property
    def sublattice_positions(self) -> np.ndarray:
        return self.geometry.sublattice_positions

    @property
    def atom_name_list(self) -> Tuple[str, ...]:
        return self.geometry.atom_name_list

    @property
    def unit_cell_volume(self) -> float:
        return self.geometry.unit_cell_volume

    @property
    def reciprocal_basis_vectors(self) -> np.ndarray:
        return self.geometry.reciprocal_basis_vectors

    def __repr__(self) -> str:
        return (f"TBModelWithParameter(name={self.model_name!r}, dim={self.dim}, "
                f"nsub={self.nsub}, parameters={self.symbols.names}, "
                f"hoppings={len(self.hopping_map)})")


def build_model(model_input, symbols: Optional[SymbolTable] = None) -> TBModelWithParameter:
    """
    Construct a parametrized model from a structured model input.

    Declared parameters are registered first (in order), then the geometry is
    validated, then the hopping terms are assembled. Names that only appear in
    hopping amplitudes are registered as they are met.

    Parameters
    ----------
    model_input : ModelInput or dict
    symbols : SymbolTable, optional

    Returns
    -------
    model : TBModelWithParameter

    Raises
    ------
    DimensionError
        Raised before any assembly when the dimension is not 2 or 3.
    DegenerateGeometryError
    """
    model_input = as_model_input(model_input)
    if symbols is None:
        symbols = SymbolTable()
    symbols.register_all(model_input.parameter_names)

    geometry = build_geometry(model_input)
    H_crystal, H_cartesian, hopping_map = assemble_hamiltonian(geometry, model_input.hopping_terms, symbols)

    logger.info("Model Name: %s", model_input.model_name)
    logger.info("Parameters: %s", symbols.names)

    return TBModelWithParameter(model_name=model_input.model_name,
                                symbols=symbols,
                                geometry=geometry,
                                hopping_map=hopping_map,
                                H_crystal=H_crystal,
                                H_cartesian=H_cartesian)
