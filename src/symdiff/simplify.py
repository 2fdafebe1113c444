"""One bottom-up pass of local rewrite rules.

Children get simplified first, then the rules for the current node look at the (already simplified) children.
First rule that hits wins. If nothing hits, the node is rebuilt from its simplified children.
Each node is visited once per pass, so one pass is not always a fixed point for deeply nested redundant stuff.
Use simplify_fully if you need that.
"""

import warnings
from typing import Callable, Dict, Optional, Type

from .expr import Add, BinaryOp, Div, Exp, Expr, Literal, Log, Mul, Neg, Power, Sub, Symbol, UnaryOp, fold


def _is(expr: Expr, number: float) -> bool:
    return isinstance(expr, Literal) and expr.number == number


def _neg(inner: Expr) -> Expr:
    if isinstance(inner, Literal):
        return fold(Neg, inner.number)
    if isinstance(inner, Neg):
        return inner.inner
    return Neg(inner)


def _exp(inner: Expr) -> Expr:
    if isinstance(inner, Literal):
        return fold(Exp, inner.number)
    if isinstance(inner, Log):
        return inner.inner
    return Exp(inner)


def _log(inner: Expr) -> Expr:
    if isinstance(inner, Literal):
        return fold(Log, inner.number)
    if isinstance(inner, Exp):
        return inner.inner
    return Log(inner)


def _add(left: Expr, right: Expr) -> Optional[Expr]:
    if _is(right, 0):
        return left
    if _is(left, 0):
        return right


def _sub(left: Expr, right: Expr) -> Optional[Expr]:
    if _is(right, 0):
        return left
    if _is(left, 0):
        # goes through the negation rules too, 0 - -(a) is a
        return _neg(right)


def _mul(left: Expr, right: Expr) -> Optional[Expr]:
    if _is(right, 0) or _is(left, 0):
        return Literal(0.0)
    if _is(right, 1):
        return left
    if _is(left, 1):
        return right


def _div(left: Expr, right: Expr) -> Optional[Expr]:
    # x / 0 stays as is.
    if _is(right, 1):
        return left
    if _is(left, 0):
        return Literal(0.0)


def _power(base: Expr, exponent: Expr) -> Optional[Expr]:
    if _is(exponent, 1):
        return base
    if _is(exponent, 0) or _is(base, 1):
        return Literal(1.0)


_UNARY_RULES: Dict[Type[UnaryOp], Callable[[Expr], Expr]] = {
    Neg: _neg,
    Exp: _exp,
    Log: _log,
}

_BINARY_RULES: Dict[Type[BinaryOp], Callable[[Expr, Expr], Optional[Expr]]] = {
    Add: _add,
    Sub: _sub,
    Mul: _mul,
    Div: _div,
    Power: _power,
}


def simplify(expr: Expr) -> Expr:
    """Simplify expr with one bottom-up pass. Returns a new tree, expr is left alone."""
    if isinstance(expr, (Literal, Symbol)):
        return expr.clone()

    if isinstance(expr, UnaryOp):
        return _UNARY_RULES[type(expr)](simplify(expr.inner))

    if isinstance(expr, BinaryOp):
        cls = type(expr)
        left = simplify(expr.left)
        right = simplify(expr.right)
        if isinstance(left, Literal) and isinstance(right, Literal):
            return fold(cls, left.number, right.number)
        ans = _BINARY_RULES[cls](left, right)
        if ans is not None:
            return ans
        return cls(left, right)

    raise NotImplementedError(f"Cannot simplify {expr.__class__.__name__}")


def simplify_fully(expr: Expr, max_passes: int = 100) -> Expr:
    """Keep simplifying until the rendered string stops changing.

    Warns and returns the latest tree if max_passes runs out first.
    """
    current = expr
    previous = expr.to_string()
    for _ in range(max_passes):
        current = simplify(current)
        rendered = current.to_string()
        if rendered == previous:
            return current
        previous = rendered

    warnings.warn(f"simplify_fully: no fixed point after {max_passes} passes, returning {previous}")
    return current
