"""
Exception taxonomy for model construction and sample generation.

Every error is fatal to the operation that raised it. Nothing is retried
internally; callers may retry with corrected input.
"""

from typing import Iterable, Optional


class TightBindingError(Exception):
    """Base class for all errors raised by the tightbinding package."""


class DimensionError(TightBindingError, ValueError):
    """Model dimension is not 2 or 3, or vector lengths disagree with it."""


class DegenerateGeometryError(TightBindingError, ValueError):
    """Basis vectors span zero unit-cell volume."""


class UnboundParameterError(TightBindingError, ValueError):
    """
    Free parameters remain after binding numeric values.

    Attributes
    ----------
    symbols : tuple of str
        Names of the symbols that are still free, sorted.
    """

    def __init__(self, symbols: Iterable, message: Optional[str] = None):
        self.symbols = tuple(sorted(str(s) for s in symbols))
        if message is None:
            message = (f"Some parameters are not set yet: {', '.join(self.symbols)}")
        super().__init__(message)


class NonNumericEvaluationError(TightBindingError, TypeError):
    """An evaluated Hamiltonian entry or amplitude is not a finite complex number."""


class InvalidSampleSizeError(TightBindingError, ValueError):
    """Sample extent is not positive along every direction."""


class DiagonalizationError(TightBindingError, RuntimeError):
    """Hermitian eigen-decomposition failed."""
