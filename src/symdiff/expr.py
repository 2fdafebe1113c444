"""RULES OF EXPRs:

1. Exprs shall NOT be mutated in place after construction. Every operation returns a brand new tree.
2. A node owns its children. If a subexpression has to show up twice in a new tree, clone it.
The derivative rules below do this all the time (product rule, quotient rule, powers).

3. subs rebuilds a node from its substituted children and folds it to a Literal once all of those are Literals,
so substituting every symbol gives back a single number.

Note on equality: (expr1 == expr2) compares **structure**, not value. Literal(1) * x != x.
If you want to compare values, simplify first.
"""

import itertools
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Type

import numpy as np


class InvalidValueAccess(AssertionError):
    """value() was called on something that isn't a literal. This is a bug in the caller."""


def _cast(x):
    """Cast x to an Expr if possible."""
    if isinstance(x, Expr):
        return x
    # bool is an int but you almost certainly didn't mean it
    if isinstance(x, (int, float)) and not isinstance(x, bool):
        return Literal(float(x))

    raise NotImplementedError(f"Cannot cast {x!r} to Expr")


class Expr(ABC):
    """Base class for all expressions."""

    @abstractmethod
    def clone(self) -> "Expr":
        """Deep, fully independent copy of the subtree."""
        pass

    @abstractmethod
    def subs(self, name: str, value: float) -> "Expr":
        """Replace every Symbol called `name` with Literal(value)."""
        pass

    @abstractmethod
    def diff(self, name: str) -> "Expr":
        """Partial derivative with respect to the symbol called `name`. Not simplified."""
        pass

    @abstractmethod
    def children(self) -> List["Expr"]:
        raise NotImplementedError(f"Cannot get children of {self.__class__.__name__}")

    @abstractmethod
    def to_string(self) -> str:
        raise NotImplementedError(f"Cannot represent {self.__class__.__name__}")

    def simplify(self) -> "Expr":
        from .simplify import simplify

        return simplify(self)

    def has_value(self) -> bool:
        return False

    def value(self) -> float:
        raise InvalidValueAccess(f"{self.__class__.__name__} {self.to_string()} has no numeric value")

    def contains(self, name: str) -> bool:
        is_var = isinstance(self, Symbol) and self.name == name
        return is_var or any(c.contains(name) for c in self.children())

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class Literal(Expr):
    """A number."""

    number: float

    def clone(self) -> "Literal":
        return Literal(self.number)

    def subs(self, name: str, value: float) -> "Literal":
        return self.clone()

    def diff(self, name: str) -> "Literal":
        return Literal(0.0)

    def children(self) -> List[Expr]:
        return []

    def to_string(self) -> str:
        # fixed six decimals, same as printf's %f.
        return f"{self.number:f}"

    def has_value(self) -> bool:
        return True

    def value(self) -> float:
        return self.number


_symbol_counter = itertools.count()
_symbol_counter_lock = threading.Lock()


def _anonymous_name() -> str:
    """Next "$<n>" name. The counter starts at 0, is process-wide and never hands out a number twice."""
    with _symbol_counter_lock:
        n = next(_symbol_counter)
    return f"${n}"


@dataclass
class Symbol(Expr):
    """A symbol. A variable. Two symbols with the same name are the same variable."""

    name: str = field(default_factory=_anonymous_name)

    def __post_init__(self):
        assert len(self.name) > 0, "Symbol name cannot be empty"

    def clone(self) -> "Symbol":
        return Symbol(self.name)

    def subs(self, name: str, value: float) -> Expr:
        return Literal(value) if self.name == name else self.clone()

    def diff(self, name: str) -> Literal:
        return Literal(1.0) if self.name == name else Literal(0.0)

    def children(self) -> List[Expr]:
        return []

    def to_string(self) -> str:
        return self.name


@dataclass
class UnaryOp(Expr):
    """A node with a single child. Subclasses set _label."""

    inner: Expr

    _label = None

    def clone(self) -> "UnaryOp":
        return self.__class__(self.inner.clone())

    def subs(self, name: str, value: float) -> Expr:
        inner = self.inner.subs(name, value)
        if isinstance(inner, Literal):
            return fold(self.__class__, inner.number)
        return self.__class__(inner)

    def children(self) -> List[Expr]:
        return [self.inner]

    def to_string(self) -> str:
        return f"{self._label}({self.inner.to_string()})"


@dataclass
class BinaryOp(Expr):
    """A node with a left and a right child."""

    left: Expr
    right: Expr

    _symbol = None

    def clone(self) -> "BinaryOp":
        return self.__class__(self.left.clone(), self.right.clone())

    def subs(self, name: str, value: float) -> Expr:
        left = self.left.subs(name, value)
        right = self.right.subs(name, value)
        if isinstance(left, Literal) and isinstance(right, Literal):
            return fold(self.__class__, left.number, right.number)
        return self.__class__(left, right)

    def children(self) -> List[Expr]:
        return [self.left, self.right]

    def to_string(self) -> str:
        return f"({self.left.to_string()} {self._symbol} {self.right.to_string()})"


class Neg(UnaryOp):
    _label = "-"

    def diff(self, name: str) -> Expr:
        return Neg(self.inner.diff(name))


class Add(BinaryOp):
    _symbol = "+"

    def diff(self, name: str) -> Expr:
        return Add(self.left.diff(name), self.right.diff(name))


class Sub(BinaryOp):
    _symbol = "-"

    def diff(self, name: str) -> Expr:
        return Sub(self.left.diff(name), self.right.diff(name))


class Mul(BinaryOp):
    _symbol = "*"

    def diff(self, name: str) -> Expr:
        # (ab)' = a'b + ab'
        return Add(
            Mul(self.left.diff(name), self.right.clone()),
            Mul(self.left.clone(), self.right.diff(name)),
        )


class Div(BinaryOp):
    _symbol = "/"

    def diff(self, name: str) -> Expr:
        # (a/b)' = (a'b - ab') / b^2
        numerator = Sub(
            Mul(self.left.diff(name), self.right.clone()),
            Mul(self.left.clone(), self.right.diff(name)),
        )
        return Div(numerator, Mul(self.right.clone(), self.right.clone()))


class Power(BinaryOp):
    """base ^ exponent. Rendered as pow(base, exponent)."""

    @property
    def base(self) -> Expr:
        return self.left

    @property
    def exponent(self) -> Expr:
        return self.right

    def to_string(self) -> str:
        return f"pow({self.base.to_string()}, {self.exponent.to_string()})"

    def diff(self, name: str) -> Expr:
        if not self.exponent.contains(name):
            # b * a^(b-1) * a'
            return Mul(
                Mul(self.exponent.clone(), Power(self.base.clone(), Sub(self.exponent.clone(), Literal(1.0)))),
                self.base.diff(name),
            )

        # a^b * (b' ln(a) + b a' / a)
        return Mul(
            self.clone(),
            Add(
                Mul(self.exponent.diff(name), Log(self.base.clone())),
                Div(Mul(self.exponent.clone(), self.base.diff(name)), self.base.clone()),
            ),
        )


class Exp(UnaryOp):
    _label = "exp"

    def diff(self, name: str) -> Expr:
        return Mul(Exp(self.inner.clone()), self.inner.diff(name))


class Log(UnaryOp):
    """Natural log."""

    _label = "log"

    def diff(self, name: str) -> Expr:
        return Div(self.inner.diff(name), self.inner.clone())


# numpy floats so 1/0, log(-1), exp(1000), (-8)^(1/3) come out as inf/nan instead of raising.
_FOLDS: Dict[Type[Expr], Callable[..., float]] = {
    Neg: lambda a: np.subtract(0.0, a),  # 0 - a so that -(0) is +0 and not -0
    Exp: np.exp,
    Log: np.log,
    Add: np.add,
    Sub: np.subtract,
    Mul: np.multiply,
    Div: np.divide,
    Power: np.power,
}


def fold(cls: Type[Expr], *values: float) -> Literal:
    """Constant folding: apply the operator of cls to numbers. No domain checks."""
    with np.errstate(all="ignore"):
        result = _FOLDS[cls](*(np.float64(v) for v in values))
    return Literal(float(result))
