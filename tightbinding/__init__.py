"""
tightbinding: parametrized tight-binding models on finite lattice samples.

A Python package for assembling symbolic Bloch Hamiltonians from real-space
hopping terms, binding numeric parameters, and diagonalizing the resulting
models on finite samples with twisted periodic boundary conditions.

Main Components
---------------
core : Model pipeline (symbols, lattice geometry, Hamiltonian, model, sample)
solvers : Hermitian eigen-solvers
io : Model input record and sample settings
utils : Logging setup

Quick Start
-----------
>>> from tightbinding import create_preset, build_model, bind_parameters, generate_sample
>>>
>>> # Honeycomb lattice with hopping t and staggered mass m
>>> model_input = create_preset('honeycomb')
>>> model = build_model(model_input)
>>> tb_model = bind_parameters(model, {'t': 1.0, 'm': 0.2})
>>>
>>> # 6 x 6 sample, periodic boundaries
>>> sample = generate_sample(tb_model, sample_size=(6, 6, 1))
>>> len(sample)
72
"""

__version__ = "0.1.0"

# High-level API exports
from .core import (
    # Errors
    TightBindingError,
    DimensionError,
    DegenerateGeometryError,
    UnboundParameterError,
    NonNumericEvaluationError,
    InvalidSampleSizeError,
    DiagonalizationError,

    # Pipeline
    SymbolTable,
    ModelGeometry,
    build_geometry,
    HoppingTerm,
    TBModelWithParameter,
    assemble_hamiltonian,
    build_model,
    Bilinear,
    TBModel,
    bind_parameters,
    TBSample,
    generate_sample,
    create_preset,
)
from .io import ModelInput, SampleSettings

__all__ = [
    # Version info
    '__version__',

    # Errors
    'TightBindingError',
    'DimensionError',
    'DegenerateGeometryError',
    'UnboundParameterError',
    'NonNumericEvaluationError',
    'InvalidSampleSizeError',
    'DiagonalizationError',

    # Pipeline
    'SymbolTable',
    'ModelGeometry',
    'build_geometry',
    'HoppingTerm',
    'TBModelWithParameter',
    'assemble_hamiltonian',
    'build_model',
    'Bilinear',
    'TBModel',
    'bind_parameters',
    'TBSample',
    'generate_sample',
    'create_preset',

    # Input records
    'ModelInput',
    'SampleSettings',
]
