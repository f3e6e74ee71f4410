import enum
import logging
from dataclasses import dataclass

from calcpy.utils import PrintableEnum, point_at

logger = logging.getLogger(__name__)


@dataclass
class LexError(Exception):
    character: str  # empty when the line ended where a character was required
    position: int
    code: str = ""

    @property
    def errmsg(self) -> str:
        if not self.character:
            return f"Unexpected end of input at {self.position}"
        return f"Unexpected character {self.character!r} at {self.position}"

    def __str__(self) -> str:
        return "\n".join([f"[Lexer error] {self.errmsg}", point_at(self.code, self.position)])


class TokenKind(PrintableEnum):
    EOF = enum.auto()
    INTEGER = enum.auto()
    FLOAT = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    DOUBLE_SLASH = enum.auto()
    DOUBLE_STAR = enum.auto()
    PERCENT = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int

    def __str__(self) -> str:
        return f"<{self.kind}>{self.text}"


WHITESPACE = " \t\n\r\f"
DIGITS = "0123456789"

DOUBLE_CHAR_TOKENS = {
    "**": TokenKind.DOUBLE_STAR,
    "//": TokenKind.DOUBLE_SLASH,
}

SINGLE_CHAR_TOKENS = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "(": TokenKind.BRACKET_OPEN,
    ")": TokenKind.BRACKET_CLOSE,
}


def _is_digit(s: str) -> bool:
    # str.isdigit() would also accept non-ASCII digits like "²"
    return s != "" and s in DIGITS


class Lexer:
    """Produces tokens from a single line of text, one per next_token() call"""

    def __init__(self, code: str) -> None:
        self.code = code
        self.position = 0

    def next_token(self) -> Token:
        self._skip_whitespace()

        if self.position >= len(self.code):
            return Token(kind=TokenKind.EOF, text="", position=self.position)

        start = self.position
        char = self.code[start]

        if _is_digit(char):
            return self._scan_number()

        pair = self.code[start : start + 2]
        if pair in DOUBLE_CHAR_TOKENS:
            self.position += 2
            return Token(kind=DOUBLE_CHAR_TOKENS[pair], text=pair, position=start)

        if char in SINGLE_CHAR_TOKENS:
            self.position += 1
            return Token(kind=SINGLE_CHAR_TOKENS[char], text=char, position=start)

        raise LexError(character=char, position=start, code=self.code)

    def _peek(self) -> str:
        if self.position < len(self.code):
            return self.code[self.position]
        return ""

    def _skip_whitespace(self) -> None:
        while self.position < len(self.code) and self.code[self.position] in WHITESPACE:
            self.position += 1

    def _consume_digits(self) -> None:
        while _is_digit(self._peek()):
            self.position += 1

    def _scan_number(self) -> Token:
        start = self.position
        is_float = False

        self._consume_digits()

        if self._peek() == ".":
            is_float = True
            self.position += 1
            self._consume_digits()

        if self._peek() in ("e", "E"):
            is_float = True
            self.position += 1
            if self._peek() in ("+", "-"):
                self.position += 1
            if not _is_digit(self._peek()):
                raise LexError(character=self._peek(), position=self.position, code=self.code)
            self._consume_digits()

        return Token(
            kind=TokenKind.FLOAT if is_float else TokenKind.INTEGER,
            text=self.code[start : self.position],
            position=start,
        )


def tokenize(code: str) -> list[Token]:
    """Drains a lexer over `code`; the last token is always EOF"""
    lexer = Lexer(code)
    tokens: list[Token] = []
    while True:
        token = lexer.next_token()
        tokens.append(token)
        if token.kind is TokenKind.EOF:
            break
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Tokenized %r: %s", code, " ".join(str(t) for t in tokens))
    return tokens
