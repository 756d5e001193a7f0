"""
Lattice geometry module.

This module provides the geometry engine (basis, sublattices, reciprocal
vectors, site positions) and ready-made model inputs for common lattices:
- square_lattice: one orbital per site, nearest-neighbor hopping
- triangular_lattice: one orbital per site, nearest-neighbor hopping
- honeycomb_lattice: two sublattices with a staggered mass
- cubic_lattice: simple cubic, nearest-neighbor hopping
"""

from .base import (
    Dimension,
    ModelGeometry,
    build_geometry,
    reciprocal_vectors,
    site_position,
    unit_cell_volume,
)
from .presets import (
    square_lattice,
    triangular_lattice,
    honeycomb_lattice,
    cubic_lattice,
    PRESET_REGISTRY,
    create_preset,
)

__all__ = [
    'Dimension',
    'ModelGeometry',
    'build_geometry',
    'reciprocal_vectors',
    'site_position',
    'unit_cell_volume',
    'square_lattice',
    'triangular_lattice',
    'honeycomb_lattice',
    'cubic_lattice',
    'PRESET_REGISTRY',
    'create_preset',
]
