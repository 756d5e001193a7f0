"""
Input records and run settings.

This module only defines dataclasses and light validation. No physics is
computed here.

- ModelInput: the structured record handed over by a model-file reader
  (parameter names, model name, geometry, hopping terms).
- SampleSettings: finite-sample size, boundary flux and temperature, with a
  JSON round trip so runs can be reproduced.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Sequence, Tuple
import json
import math


Site = Tuple[int, ...]
RawHopping = Tuple[Site, Site, Any]


@dataclass(frozen=True)
class ModelInput:
    """
    Structured model definition.

    Attributes
    ----------
    parameter_names : tuple of str
        Declared parameter names, in order.
    model_name : str
    basis_vectors : tuple of tuple of float
        ``dim`` real-space basis vectors of length ``dim``.
    sublattice_positions : tuple of tuple of float
        ``nsub`` positions in crystal coordinates, length ``dim`` each.
    atom_name_list : tuple of str
        One name per sublattice. Any other length is replaced by empty names
        when the geometry is built.
    hopping_terms : tuple
        ``(to_site, from_site, amplitude)`` triples. Sites are integer tuples
        ``(di, dj[, dk], sublattice)`` with a 1-based sublattice label. The
        amplitude is a sympy expression, a number or an expression string.
    """
    parameter_names: Tuple[str, ...] = ()
    model_name: str = ""
    basis_vectors: Tuple[Tuple[float, ...], ...] = ()
    sublattice_positions: Tuple[Tuple[float, ...], ...] = ()
    atom_name_list: Tuple[str, ...] = ()
    hopping_terms: Tuple[RawHopping, ...] = ()

    def __post_init__(self):
        # nested sequences are stored as tuples
        object.__setattr__(self, "parameter_names", tuple(str(p) for p in self.parameter_names))
        object.__setattr__(self, "basis_vectors",
                           tuple(tuple(float(x) for x in v) for v in self.basis_vectors))
        object.__setattr__(self, "sublattice_positions",
                           tuple(tuple(float(x) for x in v) for v in self.sublattice_positions))
        object.__setattr__(self, "atom_name_list", tuple(str(a) for a in self.atom_name_list))
        hoppings = []
        for term in self.hopping_terms:
            if len(term) != 3:
                raise ValueError(f"Hopping term must be (to_site, from_site, amplitude), got {term!r}")
            to_site, from_site, amplitude = term
            hoppings.append((tuple(int(x) for x in to_site),
                             tuple(int(x) for x in from_site),
                             amplitude))
        object.__setattr__(self, "hopping_terms", tuple(hoppings))

    @property
    def dim(self) -> int:
        """Dimension implied by the first sublattice position."""
        if not self.sublattice_positions:
            raise ValueError("Model input has no sublattice positions")
        return len(self.sublattice_positions[0])

    @property
    def nsub(self) -> int:
        return len(self.sublattice_positions)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["hopping_terms"] = [
            [list(to_site), list(from_site), str(amplitude)]
            for to_site, from_site, amplitude in self.hopping_terms
        ]
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ModelInput":
        return ModelInput(
            parameter_names=d.get("parameter_names", ()),
            model_name=d.get("model_name", ""),
            basis_vectors=d.get("basis_vectors", ()),
            sublattice_positions=d.get("sublattice_positions", ()),
            atom_name_list=d.get("atom_name_list", ()),
            hopping_terms=d.get("hopping_terms", ()),
        )


@dataclass(frozen=True)
class SampleSettings:
    """
    Settings for a finite lattice sample.

    Notes
    -----
    - ``sample_size`` is ``(Lx, Ly, Lz)``; keep ``Lz = 1`` for 2D models.
    - ``boundary_flux`` is in integer units of the flux quantum and shifts the
      allowed momenta by ``flux / L``.
    - ``temperature`` is carried along for downstream consumers only.
    """
    sample_size: Tuple[int, int, int] = (6, 6, 6)
    boundary_flux: Tuple[int, int, int] = (0, 0, 0)
    temperature: float = 1.0e-6

    def __post_init__(self):
        size = as_triple(self.sample_size, "sample_size")
        flux = as_triple(self.boundary_flux, "boundary_flux")
        if not math.isfinite(float(self.temperature)):
            raise ValueError("temperature must be finite")
        object.__setattr__(self, "sample_size", size)
        object.__setattr__(self, "boundary_flux", flux)
        object.__setattr__(self, "temperature", float(self.temperature))

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["sample_size"] = list(self.sample_size)
        d["boundary_flux"] = list(self.boundary_flux)
        return d

    def to_json(self, path: str) -> None:
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, sort_keys=True)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "SampleSettings":
        return SampleSettings(**d)

    @staticmethod
    def from_json(path: str) -> "SampleSettings":
        with open(path, "r") as f:
            d = json.load(f)
        return SampleSettings.from_dict(d)


def as_model_input(model_input: Any) -> ModelInput:
    """Accept a ModelInput or a mapping with the same fields."""
    if isinstance(model_input, ModelInput):
        return model_input
    if isinstance(model_input, dict):
        return ModelInput.from_dict(model_input)
    raise TypeError(f"Expected ModelInput or dict, got {type(model_input).__name__}")


def as_triple(values: Sequence, name: str) -> Tuple[int, int, int]:
    """
    Validate a length-3 integer sequence (sample size or flux).

    Integral floats such as ``2.0`` are accepted; anything else that does not
    equal its integer part raises ``ValueError`` instead of being truncated.
    """
    values = tuple(values)
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 entries, got {len(values)}")
    triple = []
    for v in values:
        try:
            n = int(v)
        except (TypeError, ValueError):
            raise ValueError(f"{name} must contain integers, got {values}") from None
        if n != v:
            raise ValueError(f"{name} must contain integers, got {values}")
        triple.append(n)
    return tuple(triple)
