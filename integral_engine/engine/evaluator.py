"""Compiles expressions once and evaluates them with a tree-walking interpreter."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .errors import CompileError, EvalError
from .parser import BinaryOp, Call, Constant, Node, UnaryOp, Variable, parse
from .validator import ALLOWED_VARIABLES

CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

FREE_VARIABLE = "t"


def _sign(x: float) -> float:
    if x > 0:
        return 1.0
    if x < 0:
        return -1.0
    return 0.0


def _cbrt(x: float) -> float:
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def _round(x: float, digits: float = 0.0) -> float:
    # Half away from zero; the builtin round() uses banker's rounding.
    factor = 10.0 ** int(digits)
    return math.copysign(math.floor(abs(x) * factor + 0.5) / factor, x)


def _log(x: float, base: Optional[float] = None) -> float:
    if base is None:
        return math.log(x)
    return math.log(x, base)


def _mod(a: float, b: float) -> float:
    return a - b * math.floor(a / b)


def _min(*values: float) -> float:
    return min(values)


def _max(*values: float) -> float:
    return max(values)


def _random(low: Optional[float] = None, high: Optional[float] = None) -> float:
    if low is None:
        return random.random()
    if high is None:
        return random.uniform(0.0, low)
    return random.uniform(low, high)


@dataclass(frozen=True)
class FunctionSpec:
    impl: Callable[..., float]
    min_args: int
    max_args: Optional[int]


FUNCTIONS: Dict[str, FunctionSpec] = {
    "sin": FunctionSpec(math.sin, 1, 1),
    "cos": FunctionSpec(math.cos, 1, 1),
    "tan": FunctionSpec(math.tan, 1, 1),
    "asin": FunctionSpec(math.asin, 1, 1),
    "acos": FunctionSpec(math.acos, 1, 1),
    "atan": FunctionSpec(math.atan, 1, 1),
    "atan2": FunctionSpec(math.atan2, 2, 2),
    "sinh": FunctionSpec(math.sinh, 1, 1),
    "cosh": FunctionSpec(math.cosh, 1, 1),
    "tanh": FunctionSpec(math.tanh, 1, 1),
    "asinh": FunctionSpec(math.asinh, 1, 1),
    "acosh": FunctionSpec(math.acosh, 1, 1),
    "atanh": FunctionSpec(math.atanh, 1, 1),
    "sqrt": FunctionSpec(math.sqrt, 1, 1),
    "cbrt": FunctionSpec(_cbrt, 1, 1),
    "abs": FunctionSpec(abs, 1, 1),
    "exp": FunctionSpec(math.exp, 1, 1),
    "log": FunctionSpec(_log, 1, 2),
    "log10": FunctionSpec(math.log10, 1, 1),
    "log2": FunctionSpec(math.log2, 1, 1),
    "pow": FunctionSpec(math.pow, 2, 2),
    "sign": FunctionSpec(_sign, 1, 1),
    "floor": FunctionSpec(math.floor, 1, 1),
    "ceil": FunctionSpec(math.ceil, 1, 1),
    "round": FunctionSpec(_round, 1, 2),
    "min": FunctionSpec(_min, 1, None),
    "max": FunctionSpec(_max, 1, None),
    "mod": FunctionSpec(_mod, 2, 2),
    "random": FunctionSpec(_random, 0, 2),
}


def _check_tree(node: Node, expression: str) -> None:
    """Resolves every name at compile time so evaluation cannot hit an unknown one."""
    if isinstance(node, Constant):
        return
    if isinstance(node, Variable):
        if node.name in FUNCTIONS:
            raise CompileError(
                "Function '{}' must be called with arguments in expression: {}".format(node.name, expression),
                expression=expression,
            )
        if node.name not in ALLOWED_VARIABLES:
            raise CompileError(
                "Unknown identifier '{}' in expression: {}".format(node.name, expression),
                expression=expression,
            )
        return
    if isinstance(node, UnaryOp):
        _check_tree(node.operand, expression)
        return
    if isinstance(node, BinaryOp):
        _check_tree(node.left, expression)
        _check_tree(node.right, expression)
        return
    if isinstance(node, Call):
        signature = FUNCTIONS.get(node.name)
        if signature is None:
            if node.name in ALLOWED_VARIABLES:
                raise CompileError(
                    "'{}' is not a function in expression: {}".format(node.name, expression),
                    expression=expression,
                )
            raise CompileError(
                "Function '{}' is not allowed in expression: {}".format(node.name, expression),
                expression=expression,
            )
        count = len(node.args)
        if count < signature.min_args or (signature.max_args is not None and count > signature.max_args):
            raise CompileError(
                "Function '{}' got {} argument(s) in expression: {}".format(node.name, count, expression),
                expression=expression,
            )
        for arg in node.args:
            _check_tree(arg, expression)
        return
    raise CompileError("Unsupported expression component in expression: {}".format(expression), expression=expression)


class CompiledFunction:
    """Callable view over a parsed expression of the free variable ``t``."""

    def __init__(self, expression: str, tree: Node) -> None:
        self.expression = expression
        self.tree = tree

    def __call__(self, t: float) -> float:
        return self.evaluate(t)

    def __repr__(self) -> str:
        return "CompiledFunction({!r})".format(self.expression)

    def evaluate(self, t: float) -> float:
        """Evaluates the expression at ``t``.

        Raises:
            EvalError: On a math domain error, division by zero, overflow or a
                non-finite result.
        """
        try:
            value = float(self._eval(self.tree, float(t)))
        except ZeroDivisionError as exc:
            raise EvalError(
                "Division by zero at t={} in expression: {}".format(t, self.expression),
                expression=self.expression,
                t=t,
            ) from exc
        except (ValueError, OverflowError, TypeError) as exc:
            raise EvalError(
                "Evaluation failed at t={} in expression: {} ({})".format(t, self.expression, exc),
                expression=self.expression,
                t=t,
            ) from exc

        if not math.isfinite(value):
            raise EvalError(
                "Non-finite result {} at t={} in expression: {}".format(value, t, self.expression),
                expression=self.expression,
                t=t,
            )
        return value

    def _eval(self, node: Node, t: float) -> float:
        if isinstance(node, Constant):
            return node.value
        if isinstance(node, Variable):
            if node.name == FREE_VARIABLE:
                return t
            return CONSTANTS[node.name]
        if isinstance(node, UnaryOp):
            value = self._eval(node.operand, t)
            return -value if node.op == "-" else value
        if isinstance(node, BinaryOp):
            left = self._eval(node.left, t)
            right = self._eval(node.right, t)
            if node.op == "+":
                return left + right
            if node.op == "-":
                return left - right
            if node.op == "*":
                return left * right
            if node.op == "/":
                return left / right
            if node.op == "^":
                result = left ** right
                if isinstance(result, complex):
                    raise ValueError("complex result for {} ^ {}".format(left, right))
                return result
            raise ValueError("unsupported operator '{}'".format(node.op))
        if isinstance(node, Call):
            args = [self._eval(arg, t) for arg in node.args]
            return FUNCTIONS[node.name].impl(*args)
        raise ValueError("unsupported expression component")


def compile_expression(expression: str) -> CompiledFunction:
    """Parses an expression once into a reusable :class:`CompiledFunction`.

    Raises:
        CompileError: If the text is malformed, references an unknown name or
            calls a function with the wrong number of arguments.
    """
    tree = parse(expression)
    _check_tree(tree, expression)
    return CompiledFunction(expression, tree)
