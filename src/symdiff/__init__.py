from .expr import Add, Div, Exp, Expr, InvalidValueAccess, Literal, Log, Mul, Neg, Power, Sub, Symbol
from .simplify import simplify, simplify_fully
from .symexp import ArityMismatch, SymExp, Var, exp, log, power, symbols
