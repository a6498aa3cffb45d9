"""Tokenizer and recursive-descent parser producing an expression tree."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union

from .errors import CompileError


@dataclass(frozen=True)
class Constant:
    value: float


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple["Node", ...]


Node = Union[Constant, Variable, UnaryOp, BinaryOp, Call]

Token = Tuple[str, str]

TOKEN_REGEX = re.compile(
    r"\s*(?:"
    r"(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>\*\*|[+\-*/^(),])"
    r")"
)

_EOF: Token = ("EOF", "")


def tokenize(expression: str) -> Iterator[Token]:
    """Splits an expression into ``(kind, text)`` tokens.

    Raises:
        CompileError: On a character that starts no token.
    """
    position = 0
    length = len(expression)
    while position < length:
        if expression[position:].strip() == "":
            return
        match = TOKEN_REGEX.match(expression, position)
        if match is None or match.end() == position:
            raise CompileError(
                "Unexpected character '{}' at position {} in expression: {}".format(
                    expression[position], position, expression
                ),
                expression=expression,
            )
        kind = match.lastgroup or "op"
        text = match.group(kind)
        if kind == "op" and text == "**":
            text = "^"
        yield (kind, text)
        position = match.end()


class Parser:
    """Recursive-descent parser for the arithmetic grammar.

    Precedence from lowest to highest: ``+ -``, ``* /`` (and implicit
    multiplication such as ``2t``), unary sign, right-associative ``^``.
    """

    def __init__(self, expression: str) -> None:
        self.expression = expression
        self.tokens: List[Token] = list(tokenize(expression))
        self.pos = 0

    def parse(self) -> Node:
        if not self.tokens:
            raise self._error("Expression is empty")
        node = self._expr()
        if self._peek() != _EOF:
            raise self._error("Unexpected token '{}'".format(self._peek()[1]))
        return node

    def _error(self, message: str) -> CompileError:
        return CompileError("{} in expression: {}".format(message, self.expression), expression=self.expression)

    def _peek(self) -> Token:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else _EOF

    def _consume(self) -> Token:
        token = self._peek()
        self.pos += 1
        return token

    def _expect(self, text: str) -> None:
        kind, value = self._consume()
        if kind != "op" or value != text:
            found = value or "end of input"
            raise self._error("Expected '{}' but found '{}'".format(text, found))

    def _expr(self) -> Node:
        node = self._term()
        while self._peek() in (("op", "+"), ("op", "-")):
            op = self._consume()[1]
            node = BinaryOp(op, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while True:
            kind, value = self._peek()
            if kind == "op" and value in ("*", "/"):
                self._consume()
                node = BinaryOp(value, node, self._unary())
            elif kind in ("number", "name") or (kind == "op" and value == "("):
                node = BinaryOp("*", node, self._power())
            else:
                return node

    def _unary(self) -> Node:
        if self._peek() in (("op", "-"), ("op", "+")):
            op = self._consume()[1]
            return UnaryOp(op, self._unary())
        return self._power()

    def _power(self) -> Node:
        base = self._atom()
        if self._peek() == ("op", "^"):
            self._consume()
            return BinaryOp("^", base, self._unary())
        return base

    def _atom(self) -> Node:
        kind, value = self._consume()

        if kind == "number":
            return Constant(float(value))

        if kind == "name":
            if self._peek() == ("op", "("):
                self._consume()
                return Call(value, tuple(self._arguments()))
            return Variable(value)

        if (kind, value) == ("op", "("):
            node = self._expr()
            self._expect(")")
            return node

        if kind == "EOF":
            raise self._error("Unexpected end of input")
        raise self._error("Unexpected token '{}'".format(value))

    def _arguments(self) -> List[Node]:
        args: List[Node] = []
        if self._peek() == ("op", ")"):
            self._consume()
            return args

        args.append(self._expr())
        while self._peek() == ("op", ","):
            self._consume()
            args.append(self._expr())
        self._expect(")")
        return args


def parse(expression: str) -> Node:
    """Parses expression text into its tree representation."""
    try:
        return Parser(expression).parse()
    except RecursionError as exc:
        raise CompileError("Expression is nested too deeply: {}".format(expression), expression=expression) from exc
