"""
Preset model inputs for common tight-binding lattices.

Each factory returns a :class:`~tightbinding.io.config.ModelInput` whose
hoppings are symbolic in the named parameters, so the same preset can be bound
to many parameter sets. Every hopping is listed in both directions, which keeps
the assembled Hamiltonian Hermitian.

- Square lattice
- Triangular lattice
- Honeycomb lattice
- Simple cubic lattice
"""

from typing import Callable, Dict, List, Tuple

import numpy as np

from ...io.config import ModelInput


def _nearest_neighbor_pairs(offsets: List[Tuple[int, ...]], sub: int = 1,
                            amplitude: str = "-t") -> List[tuple]:
    """Hoppings from the origin cell to each offset and back, on one sublattice."""
    origin = (0,) * len(offsets[0])
    terms = []
    for d in offsets:
        terms.append((d + (sub,), origin + (sub,), amplitude))
        terms.append((origin + (sub,), d + (sub,), amplitude))
    return terms


def square_lattice(lattice_constant: float = 1.0) -> ModelInput:
    """
    Square lattice with one orbital per site.

    Geometry
    --------
    a1 = a * [1, 0]
    a2 = a * [0, 1]

    Hamiltonian
    -----------
    H(k) = mu - 2t (cos k1 + cos k2)

    Parameters
    ----------
    lattice_constant : float, optional
        Lattice constant 'a' (default: 1.0)
    """
    if lattice_constant <= 0:
        raise ValueError("Lattice constant must be positive")
    a = lattice_constant
    hoppings = [((0, 0, 1), (0, 0, 1), "mu")]
    hoppings += _nearest_neighbor_pairs([(1, 0), (0, 1)])
    return ModelInput(parameter_names=("t", "mu"),
                      model_name="square",
                      basis_vectors=[[a, 0.0], [0.0, a]],
                      sublattice_positions=[[0.0, 0.0]],
                      atom_name_list=["A"],
                      hopping_terms=hoppings)


def triangular_lattice(lattice_constant: float = 1.0) -> ModelInput:
    """
    Triangular (hexagonal) Bravais lattice with one orbital per site.

    Geometry
    --------
    a1 = a * [1, 0]
    a2 = a * [1/2, √3/2]

    Each site has 6 nearest neighbors at offsets ±(1, 0), ±(0, 1), ±(-1, 1).

    Hamiltonian
    -----------
    H(k) = mu - 2t (cos k1 + cos k2 + cos(k2 - k1))
    """
    if lattice_constant <= 0:
        raise ValueError("Lattice constant must be positive")
    a = lattice_constant
    hoppings = [((0, 0, 1), (0, 0, 1), "mu")]
    hoppings += _nearest_neighbor_pairs([(1, 0), (0, 1), (-1, 1)])
    return ModelInput(parameter_names=("t", "mu"),
                      model_name="triangular",
                      basis_vectors=[[a, 0.0], [a / 2.0, a * np.sqrt(3) / 2.0]],
                      sublattice_positions=[[0.0, 0.0]],
                      atom_name_list=["A"],
                      hopping_terms=hoppings)


def honeycomb_lattice(lattice_constant: float = 1.0) -> ModelInput:
    """
    Honeycomb lattice (two-site basis) with a staggered sublattice mass.

    Geometry
    --------
    a1 = a * [1, 0]
    a2 = a * [1/2, √3/2]
    A at (0, 0), B at (1/3, 1/3) in crystal coordinates.

    Each A site couples to the B sites in cells (0, 0), (-1, 0) and (0, -1).

    Hamiltonian
    -----------
    H(k) = [[ m,     f(k)* ],
            [ f(k), -m     ]],   f(k) = -t sum_d exp(-i d.k)

    The gap at the K point (k1, k2) = (2π/3, -2π/3) is 2|m|.
    """
    if lattice_constant <= 0:
        raise ValueError("Lattice constant must be positive")
    a = lattice_constant
    hoppings = [((0, 0, 1), (0, 0, 1), "m"),
                ((0, 0, 2), (0, 0, 2), "-m")]
    for d in [(0, 0), (-1, 0), (0, -1)]:
        hoppings.append((d + (2,), (0, 0, 1), "-t"))
        hoppings.append(((0, 0, 1), d + (2,), "-t"))
    return ModelInput(parameter_names=("t", "m"),
                      model_name="honeycomb",
                      basis_vectors=[[a, 0.0], [a / 2.0, a * np.sqrt(3) / 2.0]],
                      sublattice_positions=[[0.0, 0.0], [1.0 / 3.0, 1.0 / 3.0]],
                      atom_name_list=["A", "B"],
                      hopping_terms=hoppings)


def cubic_lattice(lattice_constant: float = 1.0) -> ModelInput:
    """
    Simple cubic lattice with one orbital per site.

    Hamiltonian
    -----------
    H(k) = mu - 2t (cos k1 + cos k2 + cos k3)
    """
    if lattice_constant <= 0:
        raise ValueError("Lattice constant must be positive")
    a = lattice_constant
    hoppings = [((0, 0, 0, 1), (0, 0, 0, 1), "mu")]
    hoppings += _nearest_neighbor_pairs([(1, 0, 0), (0, 1, 0), (0, 0, 1)])
    return ModelInput(parameter_names=("t", "mu"),
                      model_name="cubic",
                      basis_vectors=[[a, 0.0, 0.0], [0.0, a, 0.0], [0.0, 0.0, a]],
                      sublattice_positions=[[0.0, 0.0, 0.0]],
                      atom_name_list=["A"],
                      hopping_terms=hoppings)


# Preset registry for name-based construction
PRESET_REGISTRY: Dict[str, Callable[..., ModelInput]] = {
    'square': square_lattice,
    'triangular': triangular_lattice,
    'honeycomb': honeycomb_lattice,
    'cubic': cubic_lattice,
}


def create_preset(lattice_type: str, **kwargs) -> ModelInput:
    """
    Factory function to create preset model inputs from string names.

    Parameters
    ----------
    lattice_type : str
        One of the keys of ``PRESET_REGISTRY``.
    **kwargs
        Passed to the preset (e.g., lattice_constant=1.5).

    Examples
    --------
    >>> model_input = create_preset('honeycomb', lattice_constant=1.42)
    >>> model_input.nsub
    2

    Raises
    ------
    ValueError
        If lattice_type is not recognized
    """
    if lattice_type not in PRESET_REGISTRY:
        available = ', '.join(PRESET_REGISTRY.keys())
        raise ValueError(f"Unknown lattice type '{lattice_type}'. "
                         f"Available types: {available}")

    return PRESET_REGISTRY[lattice_type](**kwargs)
