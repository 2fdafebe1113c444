import copy
import os

import pytest

from symdiff import *
from symdiff.debug.logger import Logger
from symdiff.debug.test_utils import assert_str, x, y


def test_var_constructors():
    assert_str(Var("x"), "x")
    assert_str(Var(2.5), "2.500000")
    assert_str(Var(3), "3.000000")
    assert Var(2.5).has_value()
    assert Var(2.5).value() == 2.5
    assert not Var("x").has_value()

    anonymous = Var()
    assert anonymous.to_string().startswith("$")
    assert Var().to_string() != anonymous.to_string()
    assert isinstance(anonymous, SymExp)


def test_symbols():
    a, b, c = symbols("a b c")
    assert_str(a + b * c, "(a + (b * c))")
    single = symbols("t")
    assert isinstance(single, Var)
    assert_str(single, "t")


def test_operators():
    assert_str(-x, "-(x)")
    assert_str(x + y, "(x + y)")
    assert_str(x - y, "(x - y)")
    assert_str(x * y, "(x * y)")
    assert_str(x / y, "(x / y)")
    assert_str(x**y, "pow(x, y)")
    assert_str(power(x, y), "pow(x, y)")
    assert_str(exp(x), "exp(x)")
    assert_str(log(x), "log(x)")


def test_operators_with_numbers():
    assert_str(x + 1, "(x + 1.000000)")
    assert_str(1 + x, "(1.000000 + x)")
    assert_str(2 - x, "(2.000000 - x)")
    assert_str(2 * x, "(2.000000 * x)")
    assert_str(1 / x, "(1.000000 / x)")
    assert_str(x**2, "pow(x, 2.000000)")
    assert_str(2**x, "pow(2.000000, x)")
    assert_str(power(2, 3), "pow(2.000000, 3.000000)")
    assert_str(exp(0), "exp(0.000000)")


def test_bad_operand():
    with pytest.raises(NotImplementedError):
        x + "y"


def test_str_and_repr():
    assert str(x * y) == "(x * y)"
    assert repr(x * y) == "SymExp((x * y))"
    assert repr(Var("x")) == "Var(x)"


def test_evaluate():
    assert (x * x).evaluate(x, 3).value() == 9
    assert_str((x * y).evaluate(x, 3), "(3.000000 * y)")
    assert_str((x * y).evaluate(Var("z"), 3), "(x * y)")
    assert_str((x * y).evaluate("y", 2), "(x * 2.000000)")


def test_evaluate_many():
    f = x * x + y
    assert f.evaluate([x, y], [3, 1]).value() == 10
    assert f.evaluate((x, y), (3, 1)).value() == 10
    assert f.evaluate({x: 3, y: 1}).value() == 10
    assert_str(f.evaluate([], []), f.to_string())


def test_evaluate_is_sequential():
    f = x - y
    assert f.evaluate([x, y], [5, 2]).value() == 3
    assert f.evaluate([y, x], [5, 2]).value() == -3
    # the same variable twice: the first one wins, there's nothing left for the second
    assert (x * 2).evaluate([x, x], [1, 100]).value() == 2


def test_evaluate_arity_mismatch():
    with pytest.raises(ArityMismatch):
        (x + y).evaluate([x, y], [1, 2, 3])
    with pytest.raises(ArityMismatch):
        (x + y).evaluate([x, y], [1])
    with pytest.raises(ArityMismatch):
        (x + y).evaluate([x, y])
    # recoverable, unlike value()
    assert issubclass(ArityMismatch, ValueError)


def test_evaluate_needs_a_variable():
    with pytest.raises(ValueError):
        (x + y).evaluate(Var(2), 3)
    with pytest.raises(ValueError):
        (x + y).evaluate(x + y, 3)
    with pytest.raises(TypeError):
        (x + y).evaluate(x)
    with pytest.raises(TypeError):
        (x + y).evaluate({x: 1}, 2)


def test_value_of_non_literal():
    with pytest.raises(InvalidValueAccess):
        (x + 1).value()
    with pytest.raises(InvalidValueAccess):
        (Var(1) + Var(2)).value()
    assert (Var(1) + Var(2)).simplify().value() == 3


def test_derive_many():
    f = x * y
    derivatives = f.derive([x, y, Var("z")])
    assert [d.simplify().to_string() for d in derivatives] == ["y", "x", "0.000000"]
    assert f.derive([]) == []


def test_operands_are_not_shared():
    h = x * y
    a = h + 1
    b = h * exp(h)
    b.derive(x).simplify()
    assert_str(h, "(x * y)")
    assert_str(a, "((x * y) + 1.000000)")
    assert h._root is not a._root.left
    assert b._root.left is not b._root.right.inner


def test_root_is_a_copy():
    h = x * y
    root = h.root
    root.left = Symbol("z")
    assert_str(h, "(x * y)")


def test_copy():
    h = x * y
    for c in (copy.copy(h), copy.deepcopy(h)):
        assert_str(c, "(x * y)")
        assert c._root is not h._root
        assert c._root == h._root

    v = copy.copy(x)
    assert isinstance(v, Var)
    assert_str(v, "x")


def test_size():
    assert x.size() == 1
    assert (x * y + 1).size() == 5


def test_logger(tmp_path):
    logger = Logger(path=os.path.join(tmp_path, "log"))
    SymExp.logger = logger
    try:
        f = x / y
        d = f.derive(x)
        d.simplify()
        f.derive([x, y])
        f.evaluate(x, 1)  # not logged
    finally:
        SymExp.logger = None

    assert [datum.operation for datum in logger.data] == ["derive", "simplify", "derive"]
    first = logger.data[0]
    assert first.expr == "(x / y)"
    assert first.size_before == 3
    assert first.size_after == d.size()
    assert logger.data[1].size_after == (d.simplify()).size()
    assert all(datum.time_spent >= 0 for datum in logger.data)

    logger.dump()
    with open(os.path.join(tmp_path, "log.txt")) as f:
        dumped = f.read()
    assert "derive: (x / y)" in dumped

    logger.clear()
    assert logger.data == []


def test_logger_off_by_default():
    assert SymExp.logger is None
    assert_str(x.derive(x), "1.000000")
