"""
Parameter registry.

Model parameters are sympy symbols created on first mention and reused by name
afterwards. The registry is passed explicitly through the pipeline instead of
living in module globals, so two models never share parameters by accident.
"""

import logging
import re
from typing import Dict, Iterable, List, Union

import sympy as sp
from sympy.parsing.sympy_parser import parse_expr, standard_transformations

logger = logging.getLogger(__name__)

# Crystal and Cartesian momentum variables
K_CRYSTAL_NAMES = ('k1', 'k2', 'k3')
K_CARTESIAN_NAMES = ('kx', 'ky', 'kz')
RESERVED_NAMES = frozenset(K_CRYSTAL_NAMES + K_CARTESIAN_NAMES)

K_CRYSTAL = sp.symbols(K_CRYSTAL_NAMES, real=True)
K_CARTESIAN = sp.symbols(K_CARTESIAN_NAMES, real=True)

# names kept as sympy constants when parsing amplitude strings
CONSTANT_NAMES = frozenset({"I", "pi"})

# identifier not preceded by a digit, letter or dot and not followed by a call
_BARE_NAME = re.compile(r"(?<![\w.])[A-Za-z_]\w*(?!\w)(?!\s*\()")


class SymbolTable:
    """
    Append-only map from parameter names to sympy symbols.

    Parameters
    ----------
    names : iterable of str, optional
        Parameter names to register immediately, in order.
    real : bool, optional
        Create the symbols with the ``real=True`` assumption (default).

    Examples
    --------
    >>> table = SymbolTable(['t', 'mu'])
    >>> table.get_or_create('t') is table['t']
    True
    >>> table.names
    ['t', 'mu']
    """

    def __init__(self, names: Iterable[str] = (), real: bool = True):
        self._real = real
        self._symbols: Dict[str, sp.Symbol] = {}
        self.register_all(names)

    def get_or_create(self, name: Union[str, sp.Symbol]) -> sp.Symbol:
        """
        Return the symbol bound to ``name``, creating it on first use.

        Raises
        ------
        ValueError
            If ``name`` is empty, not an identifier, or a reserved momentum name.
        """
        if isinstance(name, sp.Symbol):
            name = name.name
        if not isinstance(name, str) or not name.isidentifier():
            raise ValueError(f"Invalid parameter name: {name!r}")
        if name in RESERVED_NAMES:
            raise ValueError(f"'{name}' is reserved for momentum variables")

        symbol = self._symbols.get(name)
        if symbol is None:
            symbol = sp.Symbol(name, real=self._real)
            self._symbols[name] = symbol
            logger.debug("Registered parameter %s", name)
        return symbol

    def register_all(self, names: Iterable[str]) -> List[sp.Symbol]:
        """Register every name in order and return the matching symbols."""
        return [self.get_or_create(name) for name in names]

    def resolve(self, expression) -> sp.Expr:
        """
        Convert ``expression`` into a sympy expression over registered symbols.

        Strings are parsed with sympy (``I`` is the imaginary unit, ``pi`` the
        constant). Every other bare name, including ones sympy would read as a
        builtin (``N``, ``S``, ``E``), is mapped through :meth:`get_or_create`,
        so undeclared names become parameters. Write ``exp(1)`` for Euler's number.
        """
        if isinstance(expression, str):
            local_dict = dict(self._symbols)
            local_dict.update({s.name: s for s in K_CRYSTAL + K_CARTESIAN})
            # bare names shadow sympy builtins such as N, S, Q and E
            for match in _BARE_NAME.finditer(expression):
                name = match.group()
                if name not in local_dict and name not in CONSTANT_NAMES:
                    local_dict[name] = self.get_or_create(name)
            expr = parse_expr(expression, local_dict=local_dict,
                              transformations=standard_transformations)
        else:
            expr = sp.sympify(expression)

        momenta = {s.name: s for s in K_CRYSTAL + K_CARTESIAN}
        replacements = {}
        for s in expr.free_symbols:
            if s.name in momenta:
                handle = momenta[s.name]
            else:
                handle = self.get_or_create(s.name)
            if handle is not s:
                replacements[s] = handle
        if replacements:
            expr = expr.xreplace(replacements)
        return expr

    @property
    def names(self) -> List[str]:
        """Parameter names in registration order."""
        return list(self._symbols)

    @property
    def symbols(self) -> List[sp.Symbol]:
        """Parameter symbols in registration order."""
        return list(self._symbols.values())

    def __getitem__(self, name: str) -> sp.Symbol:
        return self._symbols[name]

    def __contains__(self, name) -> bool:
        if isinstance(name, sp.Symbol):
            name = name.name
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self):
        return iter(self._symbols)

    def __repr__(self) -> str:
        return f"SymbolTable({self.names})"
