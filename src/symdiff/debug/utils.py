from ..expr import BinaryOp, Expr, Literal, Symbol, UnaryOp


def debug_repr(expr: Expr) -> str:
    """Shows the class of every node, so you can tell Literal(1) * x from x * 1 and Neg from Sub(0, ...).

    >>> debug_repr(Mul(Literal(2.0), Symbol("x")))
    'Mul(Literal(2.0), Symbol(x))'
    """
    name = expr.__class__.__name__
    if isinstance(expr, Literal):
        return f"{name}({expr.number!r})"
    if isinstance(expr, Symbol):
        return f"{name}({expr.name})"
    if isinstance(expr, UnaryOp):
        return f"{name}({debug_repr(expr.inner)})"
    if isinstance(expr, BinaryOp):
        return f"{name}({debug_repr(expr.left)}, {debug_repr(expr.right)})"

    raise NotImplementedError(f"Cannot debug repr {name}")
