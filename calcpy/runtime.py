import logging
import math
from dataclasses import dataclass
from typing import Callable

from calcpy.nodes import BinaryOperation, Expression, IntegerLiteral, Literal, MalformedTreeError, UnaryOperation, fold
from calcpy.tokenizer import TokenKind

logger = logging.getLogger(__name__)


@dataclass
class EvaluationError(Exception):
    errmsg: str

    def __str__(self) -> str:
        return f"[Evaluation error] {self.errmsg}"


def evaluate(expression: Expression) -> float:
    try:
        result = fold(expression, on_literal=_eval_literal, on_unary=_eval_unary, on_binary=_eval_binary)
    except MalformedTreeError as e:
        raise EvaluationError(f"Internal error, {e}") from e
    logger.debug("Evaluated to %r", result)
    return result


def _eval_literal(literal: Literal) -> float:
    if isinstance(literal, IntegerLiteral):
        try:
            return float(literal.value)
        except OverflowError:
            return math.inf
    return literal.value


def _eval_unary(node: UnaryOperation, operand: float) -> float:
    if node.operator.kind is TokenKind.PLUS:
        return operand
    elif node.operator.kind is TokenKind.MINUS:
        return -operand
    else:
        raise EvaluationError(f"Internal error, unexpected unary operator: {node.operator.kind}")


def _eval_binary(node: BinaryOperation, left: float, right: float) -> float:
    impl = binary_impls.get(node.operator.kind)
    if impl is None:
        raise EvaluationError(f"Internal error, unexpected binary operator: {node.operator.kind}")
    return impl(left, right)


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and math.fmod(x, 2.0) != 0.0


def divide(a: float, b: float) -> float:
    """IEEE division: a zero divisor gives a signed infinity, or NaN for 0/0"""
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def floor_divide(a: float, b: float) -> float:
    quotient = divide(a, b)
    # math.floor returns an int, which would drop the sign of -0.0
    if quotient == 0.0 or not math.isfinite(quotient):
        return quotient
    return float(math.floor(quotient))


def power(a: float, b: float) -> float:
    """IEEE pow; math.pow raises where pow(3) returns NaN or an infinity"""
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0.0 and _is_odd_integer(b):
            return -math.inf
        return math.inf
    except ValueError:
        if a == 0.0 and b < 0.0:
            if _is_odd_integer(b):
                return math.copysign(math.inf, a)
            return math.inf
        return math.nan


def remainder(a: float, b: float) -> float:
    """Truncating remainder, sign follows the dividend: -7 % 2 => -1"""
    try:
        return math.fmod(a, b)
    except ValueError:
        return math.nan


binary_impls: dict[TokenKind, Callable[[float, float], float]] = {
    TokenKind.PLUS: lambda a, b: a + b,
    TokenKind.MINUS: lambda a, b: a - b,
    TokenKind.STAR: lambda a, b: a * b,
    TokenKind.SLASH: divide,
    TokenKind.DOUBLE_SLASH: floor_divide,
    TokenKind.DOUBLE_STAR: power,
    TokenKind.PERCENT: remainder,
}
