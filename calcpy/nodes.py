"""Expression tree produced by the parser.

Nodes are immutable and own their children exclusively. Every node keeps the
token it was built from, so diagnostics and printing can refer back to the
source text.
"""
from dataclasses import dataclass
from typing import Callable, TypeVar

from calcpy.tokenizer import Token

T = TypeVar("T")


@dataclass(frozen=True)
class IntegerLiteral:
    token: Token
    value: int


@dataclass(frozen=True)
class FloatLiteral:
    token: Token
    value: float


@dataclass(frozen=True)
class UnaryOperation:
    operator: Token
    operand: "Expression"


@dataclass(frozen=True)
class BinaryOperation:
    left: "Expression"
    operator: Token
    right: "Expression"


Literal = IntegerLiteral | FloatLiteral
Expression = IntegerLiteral | FloatLiteral | UnaryOperation | BinaryOperation


@dataclass
class MalformedTreeError(Exception):
    errmsg: str

    def __str__(self) -> str:
        return self.errmsg


def fold(
    expression: Expression,
    on_literal: Callable[[Literal], T],
    on_unary: Callable[[UnaryOperation, T], T],
    on_binary: Callable[[BinaryOperation, T, T], T],
) -> T:
    """Post-order reduction of the tree, left operand before right.

    Uses an explicit stack instead of recursion: a chain like "1 + 1 + ... + 1"
    parses into a left-leaning tree as deep as the chain is long.
    """
    results: list[T] = []
    stack: list[tuple[Expression, bool]] = [(expression, False)]
    while stack:
        node, children_done = stack.pop()
        if isinstance(node, (IntegerLiteral, FloatLiteral)):
            results.append(on_literal(node))
        elif isinstance(node, UnaryOperation):
            if children_done:
                operand = results.pop()
                results.append(on_unary(node, operand))
            else:
                stack.append((node, True))
                stack.append((node.operand, False))
        elif isinstance(node, BinaryOperation):
            if children_done:
                right = results.pop()
                left = results.pop()
                results.append(on_binary(node, left, right))
            else:
                stack.append((node, True))
                stack.append((node.right, False))
                stack.append((node.left, False))
        else:
            raise MalformedTreeError(f"Unexpected expression type: {node!r}")
    return results.pop()


def format_expression(expression: Expression) -> str:
    """Fully parenthesized infix form, e.g. "-2 ** 2" => "((-2) ** 2)" """
    return fold(
        expression,
        on_literal=lambda literal: literal.token.text,
        on_unary=lambda node, operand: f"({node.operator.text}{operand})",
        on_binary=lambda node, left, right: f"({left} {node.operator.text} {right})",
    )
