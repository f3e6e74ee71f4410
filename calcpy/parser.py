import logging
from dataclasses import dataclass

from calcpy.nodes import BinaryOperation, Expression, FloatLiteral, IntegerLiteral, UnaryOperation, format_expression
from calcpy.tokenizer import LexError, Lexer, Token, TokenKind
from calcpy.utils import point_at

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 200


@dataclass
class ParserError(Exception):
    errmsg: str
    position: int
    code: str = ""

    def __str__(self) -> str:
        return "\n".join([f"[Parser error] {self.errmsg}", point_at(self.code, self.position)])


EXPR_OPERATORS = (TokenKind.PLUS, TokenKind.MINUS)
TERM_OPERATORS = (
    TokenKind.STAR,
    TokenKind.SLASH,
    TokenKind.DOUBLE_SLASH,
    TokenKind.DOUBLE_STAR,
    TokenKind.PERCENT,
)
UNARY_OPERATORS = (TokenKind.PLUS, TokenKind.MINUS)


class Parser:
    """Recursive descent parser over a lexer, with one token of lookahead.

    Grammar, lowest precedence first:

        expr   := term ( (PLUS|MINUS) term )*
        term   := unary ( (STAR|SLASH|DOUBLE_SLASH|DOUBLE_STAR|PERCENT) unary )*
        unary  := (PLUS|MINUS) unary | BRACKET_OPEN expr BRACKET_CLOSE | number
        number := INTEGER | FLOAT

    All term-level operators share one precedence level and group to the left,
    power included: "2 ** 3 ** 2" is "(2 ** 3) ** 2" and "-2 ** 2" is "(-2) ** 2".
    """

    def __init__(self, lexer: Lexer, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.lexer = lexer
        self.max_depth = max_depth
        self._depth = 0
        self.current_token = self._next_token()

    def parse(self) -> Expression:
        try:
            expression = self._expr()
        except RecursionError as e:
            # max_depth set above what the interpreter stack can hold
            raise self._error("Expression is nested too deeply") from e
        if self.current_token.kind is not TokenKind.EOF:
            raise self._error(f"Unexpected {self.current_token.kind} after the end of expression")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Parsed %r into %s", self.lexer.code, format_expression(expression))
        return expression

    def eat(self, expected: TokenKind) -> Token:
        if self.current_token.kind is not expected:
            raise self._error(f"Expected {expected} but received {self.current_token.kind}")
        eaten = self.current_token
        self.current_token = self._next_token()
        return eaten

    def _next_token(self) -> Token:
        try:
            return self.lexer.next_token()
        except LexError as e:
            raise ParserError(f"Syntax error: {e.errmsg}", position=e.position, code=self.lexer.code) from e

    def _error(self, errmsg: str) -> ParserError:
        return ParserError(errmsg, position=self.current_token.position, code=self.lexer.code)

    def _expr(self) -> Expression:
        result = self._term()
        while self.current_token.kind in EXPR_OPERATORS:
            operator = self.eat(self.current_token.kind)
            right = self._term()
            result = BinaryOperation(left=result, operator=operator, right=right)
        return result

    def _term(self) -> Expression:
        result = self._unary()
        while self.current_token.kind in TERM_OPERATORS:
            operator = self.eat(self.current_token.kind)
            right = self._unary()
            result = BinaryOperation(left=result, operator=operator, right=right)
        return result

    def _unary(self) -> Expression:
        if self._depth >= self.max_depth:
            raise self._error("Expression is nested too deeply")
        self._depth += 1
        try:
            if self.current_token.kind in UNARY_OPERATORS:
                operator = self.eat(self.current_token.kind)
                return UnaryOperation(operator=operator, operand=self._unary())
            elif self.current_token.kind is TokenKind.BRACKET_OPEN:
                self.eat(TokenKind.BRACKET_OPEN)
                inner = self._expr()
                self.eat(TokenKind.BRACKET_CLOSE)
                return inner
            elif self.current_token.kind in (TokenKind.INTEGER, TokenKind.FLOAT):
                return self._number()
            else:
                raise self._error(f"Expected a number or '(' but received {self.current_token.kind}")
        finally:
            self._depth -= 1

    def _number(self) -> Expression:
        token = self.eat(self.current_token.kind)
        try:
            if token.kind is TokenKind.INTEGER:
                try:
                    return IntegerLiteral(token=token, value=int(token.text))
                except ValueError:
                    # past the interpreter's int digit limit, so far past float range too
                    return FloatLiteral(token=token, value=float(token.text))
            else:
                return FloatLiteral(token=token, value=float(token.text))
        except ValueError as e:
            raise ParserError(
                f"Internal error, malformed numeric literal {token.text!r}", position=token.position, code=self.lexer.code
            ) from e


def parse(code: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Expression:
    return Parser(Lexer(code), max_depth=max_depth).parse()
