"""Value-semantics wrapper around an expression tree.

A SymExp owns exactly one tree root. Every operator and method clones what it needs into a fresh tree,
so you can reuse the same SymExp in as many expressions as you like without them stepping on each other.

```
x, y = symbols("x y")
f = x * x / y
f.derive(x).evaluate([x, y], [5, 2]).simplify().value()  # 5.0
```
"""

import time
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Union

from .expr import Add, Div, Exp, Expr, Literal, Log, Mul, Neg, Power, Sub, Symbol, _cast
from .simplify import simplify, simplify_fully
from .utils import count_nodes

if TYPE_CHECKING:
    from .debug.logger import Logger


class ArityMismatch(ValueError):
    """The list of variables and the list of values don't have the same length."""


def logged(func):
    """Decorator to time a SymExp method and report it to SymExp.logger, if there is one."""

    def wrapper(self: "SymExp", *args, **kwargs):
        if self.logger is None:
            return func(self, *args, **kwargs)

        start = time.perf_counter()
        result = func(self, *args, **kwargs)
        end = time.perf_counter()
        self.logger.log(func.__name__, self, result, end - start)
        return result

    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper


def _root_of(x) -> Expr:
    """Cloned tree of a SymExp or a number, ready to be put in a new tree."""
    if isinstance(x, SymExp):
        return x._root.clone()
    return _cast(x)


def _name_of(var: Union["Var", "SymExp", str]) -> str:
    if isinstance(var, str):
        return var
    if isinstance(var, SymExp) and isinstance(var._root, Symbol):
        return var._root.name
    raise ValueError(f"{var} is not a variable")


class SymExp:
    """A symbolic expression."""

    # Set this to a debug.logger.Logger to record derive & simplify calls. Class-wide.
    logger: Optional["Logger"] = None

    __slots__ = ("_root",)

    def __init__(self, value: Union[float, str, Expr]):
        if isinstance(value, str):
            self._root = Symbol(value)
        elif isinstance(value, Expr):
            self._root = value
        else:
            self._root = _cast(value)

    def __copy__(self) -> "SymExp":
        new = object.__new__(self.__class__)
        new._root = self._root.clone()
        return new

    def __deepcopy__(self, memo) -> "SymExp":
        return self.__copy__()

    @property
    def root(self) -> Expr:
        """A clone of the underlying tree. Mutating it won't affect this SymExp."""
        return self._root.clone()

    def evaluate(
        self,
        var: Union["Var", str, Sequence[Union["Var", str]], Dict[Union["Var", str], float]],
        value: Union[float, Sequence[float], None] = None,
    ) -> "SymExp":
        """Substitute values into variables.

        evaluate(x, 3) substitutes a single variable.
        evaluate([x, y], [3, 4]) substitutes one at a time, in order.
        evaluate({x: 3, y: 4}) same thing, in insertion order.

        The result doesn't have to be a number; other symbols are left alone.
        """
        if isinstance(var, dict):
            if value is not None:
                raise TypeError("evaluate() takes no values when given a mapping")
            return self.evaluate(list(var.keys()), list(var.values()))

        if isinstance(var, (list, tuple)):
            if value is None or len(var) != len(value):
                n_values = "no" if value is None else len(value)
                raise ArityMismatch(f"Got {len(var)} variables but {n_values} values")
            tree = self._root
            for v, c in zip(var, value):
                tree = tree.subs(_name_of(v), float(c))
            return SymExp(tree if tree is not self._root else tree.clone())

        if value is None:
            raise TypeError(f"evaluate() needs a value for {var}")
        return SymExp(self._root.subs(_name_of(var), float(value)))

    @logged
    def derive(self, var: Union["Var", str, Sequence[Union["Var", str]]]) -> Union["SymExp", List["SymExp"]]:
        """Partial derivative(s). Not simplified; call simplify() on the result if you want it compact.

        A list of variables gives a list of independent derivatives, in the same order.
        """
        if isinstance(var, (list, tuple)):
            return [SymExp(self._root.diff(_name_of(v))) for v in var]
        return SymExp(self._root.diff(_name_of(var)))

    @logged
    def simplify(self) -> "SymExp":
        """One simplification pass."""
        return SymExp(simplify(self._root))

    @logged
    def simplify_fully(self, max_passes: int = 100) -> "SymExp":
        """Simplify until nothing changes."""
        return SymExp(simplify_fully(self._root, max_passes=max_passes))

    def to_string(self) -> str:
        return self._root.to_string()

    def has_value(self) -> bool:
        return self._root.has_value()

    def value(self) -> float:
        """The number, if this is a literal. Raises InvalidValueAccess otherwise."""
        return self._root.value()

    def size(self) -> int:
        return count_nodes(self._root)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_string()})"

    def __neg__(self) -> "SymExp":
        return SymExp(Neg(_root_of(self)))

    def __add__(self, other) -> "SymExp":
        return SymExp(Add(_root_of(self), _root_of(other)))

    def __radd__(self, other) -> "SymExp":
        return SymExp(Add(_root_of(other), _root_of(self)))

    def __sub__(self, other) -> "SymExp":
        return SymExp(Sub(_root_of(self), _root_of(other)))

    def __rsub__(self, other) -> "SymExp":
        return SymExp(Sub(_root_of(other), _root_of(self)))

    def __mul__(self, other) -> "SymExp":
        return SymExp(Mul(_root_of(self), _root_of(other)))

    def __rmul__(self, other) -> "SymExp":
        return SymExp(Mul(_root_of(other), _root_of(self)))

    def __truediv__(self, other) -> "SymExp":
        return SymExp(Div(_root_of(self), _root_of(other)))

    def __rtruediv__(self, other) -> "SymExp":
        return SymExp(Div(_root_of(other), _root_of(self)))

    def __pow__(self, other) -> "SymExp":
        return SymExp(Power(_root_of(self), _root_of(other)))

    def __rpow__(self, other) -> "SymExp":
        return SymExp(Power(_root_of(other), _root_of(self)))


class Var(SymExp):
    """A variable to evaluate or differentiate with respect to.

    Var() is a fresh anonymous symbol ($0, $1, ...), Var("x") is the symbol x, Var(2.5) is the constant 2.5.
    """

    __slots__ = ()

    def __init__(self, value: Union[float, str, None] = None):
        if value is None:
            super().__init__(Symbol())
        elif isinstance(value, str):
            super().__init__(value)
        else:
            super().__init__(Literal(float(value)))


def power(base, exponent) -> SymExp:
    return SymExp(Power(_root_of(base), _root_of(exponent)))


def exp(x) -> SymExp:
    return SymExp(Exp(_root_of(x)))


def log(x) -> SymExp:
    """Natural log."""
    return SymExp(Log(_root_of(x)))


def symbols(symbols: str) -> Union[Var, List[Var]]:
    """Creates variables from a string of names seperated by spaces."""
    symbols = [Var(s) for s in symbols.split(" ")]
    return symbols if len(symbols) > 1 else symbols[0]
