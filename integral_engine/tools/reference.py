"""Closed-form reference integrals for cross-checking numeric results."""

from __future__ import annotations

from typing import Any, Dict

import sympy as sp

from integral_engine.engine.errors import IntegrationError
from integral_engine.engine.evaluator import compile_expression
from integral_engine.engine.parser import BinaryOp, Call, Constant, Node, UnaryOp, Variable
from integral_engine.engine.service import check_bounds
from integral_engine.engine.validator import validate

T = sp.Symbol("t", real=True)

_SYMPY_FUNCTIONS = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "atan2": sp.atan2,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "asinh": sp.asinh,
    "acosh": sp.acosh,
    "atanh": sp.atanh,
    "sqrt": sp.sqrt,
    "abs": sp.Abs,
    "exp": sp.exp,
    "log": sp.log,
    "log10": lambda x: sp.log(x, 10),
    "log2": lambda x: sp.log(x, 2),
    "pow": sp.Pow,
    "sign": sp.sign,
    "floor": sp.floor,
    "ceil": sp.ceiling,
    "min": sp.Min,
    "max": sp.Max,
    "mod": sp.Mod,
}


class UnsupportedSymbolicError(ValueError):
    """Raised when an expression has no symbolic counterpart (e.g. random)."""


def _cbrt(x: sp.Expr) -> sp.Expr:
    return sp.real_root(x, 3)


def _exact(value: float) -> sp.Expr:
    value = float(value)
    if value.is_integer():
        return sp.Integer(int(value))
    return sp.Rational(repr(value))


def to_sympy(node: Node) -> sp.Expr:
    """Converts a parsed expression tree to a sympy expression in ``t``."""
    if isinstance(node, Constant):
        return _exact(node.value)
    if isinstance(node, Variable):
        if node.name == "t":
            return T
        if node.name == "pi":
            return sp.pi
        return sp.E
    if isinstance(node, UnaryOp):
        operand = to_sympy(node.operand)
        return -operand if node.op == "-" else operand
    if isinstance(node, BinaryOp):
        left = to_sympy(node.left)
        right = to_sympy(node.right)
        if node.op == "+":
            return left + right
        if node.op == "-":
            return left - right
        if node.op == "*":
            return left * right
        if node.op == "/":
            return left / right
        return left**right
    if isinstance(node, Call):
        args = [to_sympy(arg) for arg in node.args]
        if node.name == "cbrt":
            return _cbrt(args[0])
        if node.name == "round":
            raise UnsupportedSymbolicError("round() has no symbolic counterpart")
        fn = _SYMPY_FUNCTIONS.get(node.name)
        if fn is None:
            raise UnsupportedSymbolicError("{}() has no symbolic counterpart".format(node.name))
        return fn(*args)
    raise UnsupportedSymbolicError("Unsupported expression component.")


def _ok(result: Any, method: str, **metadata: Any) -> Dict[str, Any]:
    return {"ok": True, "result": result, "method": method, "metadata": metadata}


def _error(message: str, method: str, **metadata: Any) -> Dict[str, Any]:
    return {"ok": False, "error": message, "method": method, "metadata": metadata}


def reference_integral(expression: str, t1: float, t2: float) -> Dict[str, Any]:
    """Integrates ``expression`` exactly over ``[t1, t2]`` with sympy.

    The expression goes through the same validator and parser as the numeric
    engine; sympy only ever sees the converted tree, never the raw text.
    """
    try:
        check_bounds(expression, float(t1), float(t2))
        function = compile_expression(validate(expression))
        expr = to_sympy(function.tree)
        integral = sp.integrate(expr, (T, _exact(t1), _exact(t2)))
        if integral.has(sp.Integral):
            return _error("No closed form found.", "reference_integral", expression=expression)
        value = float(sp.N(integral))
        return _ok(value, "sympy", expression=expression, exact=str(integral))
    except (IntegrationError, UnsupportedSymbolicError, TypeError, NotImplementedError) as exc:
        return _error(str(exc), "reference_integral", expression=expression)
