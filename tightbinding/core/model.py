"""
Tight-binding model with all parameters set.

``bind_parameters`` substitutes numeric values into the symbolic Hamiltonians of
a :class:`TBModelWithParameter`. Once nothing but crystal momentum is left free,
the matrices are compiled into numeric evaluators ``Hk_crystal(k1, k2[, k3])``
and ``Hk_cartesian(kx, ky[, kz])`` returning complex ``nsub x nsub`` arrays.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

import numpy as np
import sympy as sp

from .errors import NonNumericEvaluationError, UnboundParameterError
from .hamiltonian import TBModelWithParameter, Site
from ..solvers.diagonalization import eigh_upper

logger = logging.getLogger(__name__)

Bindings = Union[Mapping, Iterable[Tuple[Any, float]]]


@dataclass(frozen=True)
class Bilinear:
    """Numeric hopping term ``[c^dagger]_{to_site} . amplitude . [c]_{from_site}``."""
    to_site: Site
    from_site: Site
    amplitude: complex


class MatrixEvaluator:
    """
    Numeric evaluator of a symbolic matrix in the momentum variables.

    Parameters
    ----------
    matrix : sympy.Matrix
        Matrix whose only free symbols are (a subset of) ``variables``.
    variables : tuple of sympy.Symbol
        Momentum variables, in call order.
    """

    def __init__(self, matrix: sp.Matrix, variables: Sequence[sp.Symbol]):
        self.matrix = matrix
        self.variables = tuple(variables)
        self.shape = matrix.shape
        self._func = sp.lambdify(self.variables, matrix, modules="numpy")

    def __call__(self, *k) -> np.ndarray:
        if len(k) != len(self.variables):
            raise ValueError(f"Expected {len(self.variables)} momentum components, got {len(k)}")
        try:
            values = np.array(self._func(*k), dtype=complex)
        except (TypeError, ValueError) as e:
            raise NonNumericEvaluationError(
                f"Hamiltonian at k={k} does not evaluate to complex numbers: {e}"
            ) from e
        if values.shape != self.shape:
            raise NonNumericEvaluationError(
                f"Hamiltonian at k={k} has shape {values.shape}, expected {self.shape}"
            )
        if not np.all(np.isfinite(values)):
            raise NonNumericEvaluationError(f"Hamiltonian at k={k} has non-finite entries")
        return values


def _collect_rules(model: TBModelWithParameter, bindings: Bindings) -> Dict[sp.Symbol, float]:
    items = bindings.items() if isinstance(bindings, Mapping) else bindings
    rules: Dict[sp.Symbol, float] = {}
    for name, value in items:
        # claim the symbol in case the parameter was never declared
        symbol = model.symbols.get_or_create(name)
        try:
            rules[symbol] = float(value)
        except (TypeError, ValueError):
            raise TypeError(f"Parameter '{symbol}' must be bound to a real number, got {value!r}") from None
    return rules


def _amplitude_value(amplitude: sp.Expr, rules: Dict[sp.Symbol, float], key) -> complex:
    value = amplitude.subs(rules)
    try:
        return complex(value)
    except TypeError as e:
        raise NonNumericEvaluationError(f"Hopping amplitude for {key} is not numeric: {value}") from e


class TBModel:
    """
    Tight-binding model with numeric parameters.

    Attributes
    ----------
    model_with_parameter : TBModelWithParameter
    parameter_settings : dict
        ``Symbol -> float`` rules that were substituted.
    Hk_crystal_symbolic, Hk_cartesian_symbolic : sympy.Matrix
        Bound matrices, symbolic only in momentum.
    Hk_crystal, Hk_cartesian : MatrixEvaluator
        Callables returning complex ``nsub x nsub`` arrays.
    hopping_term_list : list of Bilinear
        Numeric hoppings, in hopping-map order.
    """

    def __init__(self,
                 model_with_parameter: TBModelWithParameter,
                 parameter_settings: Dict[sp.Symbol, float],
                 Hk_crystal_symbolic: sp.Matrix,
                 Hk_cartesian_symbolic: sp.Matrix,
                 hopping_term_list: List[Bilinear]):
        self.model_with_parameter = model_with_parameter
        self.parameter_settings = dict(parameter_settings)
        self.Hk_crystal_symbolic = Hk_crystal_symbolic
        self.Hk_cartesian_symbolic = Hk_cartesian_symbolic
        self.Hk_crystal = MatrixEvaluator(Hk_crystal_symbolic, model_with_parameter.k_crystal)
        self.Hk_cartesian = MatrixEvaluator(Hk_cartesian_symbolic, model_with_parameter.k_cartesian)
        self.hopping_term_list = hopping_term_list

    @property
    def geometry(self):
        return self.model_with_parameter.geometry

    @property
    def dim(self) -> int:
        return self.model_with_parameter.dim

    @property
    def nsub(self) -> int:
        return self.model_with_parameter.nsub

    @property
    def model_name(self) -> str:
        return self.model_with_parameter.model_name

    @property
    def parameter_values(self) -> Dict[str, float]:
        """Parameter settings keyed by name."""
        return {s.name: v for s, v in self.parameter_settings.items()}

    def eigen_k_crystal(self, k_crystal_point: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Eigensystem at one crystal momentum.

        Extra components beyond the model dimension are dropped, so the 3-vector
        momenta of a sample can be passed directly for 2D models.
        """
        k = tuple(k_crystal_point)[:self.dim]
        return eigh_upper(self.Hk_crystal(*k))

    def rebind(self, bindings: Bindings) -> "TBModel":
        """Return a new model with ``bindings`` applied on top of the current settings."""
        merged = dict(self.parameter_values)
        merged.update({str(name): value for name, value in
                       (bindings.items() if isinstance(bindings, Mapping) else bindings)})
        return bind_parameters(self.model_with_parameter, merged)

    def __repr__(self) -> str:
        return (f"TBModel(name={self.model_name!r}, dim={self.dim}, nsub={self.nsub}, "
                f"parameters={self.parameter_values})")


def bind_parameters(model: TBModelWithParameter, bindings: Bindings = ()) -> TBModel:
    """
    Set numeric parameter values and build the numeric evaluators.

    Parameters
    ----------
    model : TBModelWithParameter
    bindings : mapping or iterable of (name, value) pairs
        Parameter names (or symbols) to real numbers. Names never declared are
        registered on the fly. Binding a name twice to the same value changes
        nothing; for different values the last one wins.

    Returns
    -------
    model : TBModel

    Raises
    ------
    UnboundParameterError
        If any symbol other than crystal momentum remains free after
        substitution. No evaluator is built in that case.
    NonNumericEvaluationError
        If a hopping amplitude does not reduce to a number.
    """
    rules = _collect_rules(model, bindings)
    logger.info("Parameter Settings: %s", {s.name: v for s, v in rules.items()})

    Hk_crystal_symbolic = model.H_crystal.subs(rules)
    Hk_cartesian_symbolic = model.H_cartesian.subs(rules)

    # momentum-independent (on-site only) matrices have fewer free symbols
    free = set(Hk_crystal_symbolic.free_symbols)
    for amplitude in model.hopping_map.values():
        free |= amplitude.subs(rules).free_symbols
    unbound = free - set(model.k_crystal)
    if unbound:
        raise UnboundParameterError(unbound)

    hopping_term_list = [
        Bilinear(to_site, from_site, _amplitude_value(amplitude, rules, (to_site, from_site)))
        for (to_site, from_site), amplitude in model.hopping_map.items()
    ]

    return TBModel(model_with_parameter=model,
                   parameter_settings=rules,
                   Hk_crystal_symbolic=Hk_crystal_symbolic,
                   Hk_cartesian_symbolic=Hk_cartesian_symbolic,
                   hopping_term_list=hopping_term_list)
