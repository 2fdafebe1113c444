from typing import Callable

from .expr import Expr, Symbol

ExprCondition = Callable[[Expr], bool]


def general_count(expr: Expr, condition: ExprCondition) -> int:
    """Number of nodes in expr (including expr itself) that satisfy condition."""
    return int(condition(expr)) + sum(general_count(c, condition) for c in expr.children())


def count_nodes(expr: Expr) -> int:
    return general_count(expr, lambda _: True)


def count_symbols(expr: Expr) -> int:
    return general_count(expr, lambda e: isinstance(e, Symbol))


def depth(expr: Expr) -> int:
    """Longest root-to-leaf path, counted in nodes. A leaf has depth 1.

    Every operation recurses this deep, so keep it under sys.getrecursionlimit() (1000 by default).
    """
    if not expr.children():
        return 1
    return 1 + max(depth(c) for c in expr.children())
