"""
Core domain models for the tightbinding package.

This module contains the model-construction pipeline:
- symbols: parameter registry (Symbol Table)
- lattice: crystal geometry (basis, sublattices, reciprocal vectors)
- hamiltonian: symbolic Bloch Hamiltonian from hopping terms
- model: numeric parameter binding and Hamiltonian evaluators
- sample: finite samples with boundary flux and per-state eigenpairs

Data flows strictly in that order.
"""

from .errors import (
    TightBindingError,
    DimensionError,
    DegenerateGeometryError,
    UnboundParameterError,
    NonNumericEvaluationError,
    InvalidSampleSizeError,
    DiagonalizationError,
)

from .symbols import SymbolTable, K_CRYSTAL, K_CARTESIAN

from .lattice import (
    Dimension,
    ModelGeometry,
    build_geometry,
    reciprocal_vectors,
    site_position,
    unit_cell_volume,
    PRESET_REGISTRY,
    create_preset,
)

from .hamiltonian import (
    HoppingTerm,
    TBModelWithParameter,
    assemble_hamiltonian,
    build_model,
)

from .model import Bilinear, TBModel, bind_parameters

from .sample import TBSample, generate_sample, generate_sample_from_settings, momentum_grid

__all__ = [
    # Errors
    'TightBindingError',
    'DimensionError',
    'DegenerateGeometryError',
    'UnboundParameterError',
    'NonNumericEvaluationError',
    'InvalidSampleSizeError',
    'DiagonalizationError',

    # Symbols
    'SymbolTable',
    'K_CRYSTAL',
    'K_CARTESIAN',

    # Geometry
    'Dimension',
    'ModelGeometry',
    'build_geometry',
    'reciprocal_vectors',
    'site_position',
    'unit_cell_volume',
    'PRESET_REGISTRY',
    'create_preset',

    # Hamiltonian
    'HoppingTerm',
    'TBModelWithParameter',
    'assemble_hamiltonian',
    'build_model',

    # Parametrized model
    'Bilinear',
    'TBModel',
    'bind_parameters',

    # Sample
    'TBSample',
    'generate_sample',
    'generate_sample_from_settings',
    'momentum_grid',
]
