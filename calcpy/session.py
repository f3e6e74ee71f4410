import logging
import math
from typing import Iterable

from rich.console import Console

from calcpy.nodes import format_expression
from calcpy.parser import DEFAULT_MAX_DEPTH, Parser, ParserError
from calcpy.runtime import EvaluationError, evaluate
from calcpy.tokenizer import LexError, Lexer, tokenize

logger = logging.getLogger(__name__)

QUIT_DIRECTIVES = ("/quit", "/exit")


def is_quit_directive(line: str) -> bool:
    return line.startswith(QUIT_DIRECTIVES)


def calculate(code: str, max_depth: int = DEFAULT_MAX_DEPTH) -> float:
    return evaluate(Parser(Lexer(code), max_depth=max_depth).parse())


def format_result(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0.0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def _emit(console: Console, text: str) -> None:
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


class Session:
    """Reads lines, prints one result per line; stops at a quit directive or end of input"""

    def __init__(
        self,
        stdout: Console,
        stderr: Console,
        exit_on_error: bool = False,
        show_tokens: bool = False,
        show_ast: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.exit_on_error = exit_on_error
        self.show_tokens = show_tokens
        self.show_ast = show_ast
        self.max_depth = max_depth

    def run(self, lines: Iterable[str]) -> int:
        """Returns the process exit code"""
        for line in lines:
            line = line.rstrip("\r\n")
            if is_quit_directive(line):
                logger.debug("Quit directive %r", line)
                return 0
            if not line.strip():
                continue

            try:
                self.process_line(line)
            except ParserError as e:
                _emit(self.stderr, str(e))
                if self.exit_on_error:
                    return 1
            except EvaluationError as e:
                _emit(self.stderr, str(e))
                return 1
        return 0

    def process_line(self, line: str) -> float:
        if self.show_tokens:
            try:
                tokens = tokenize(line)
            except LexError:
                # the parser reports the same failure with its own diagnostic
                tokens = []
            if tokens:
                _emit(self.stdout, "tokens: " + " ".join(str(t) for t in tokens))

        expression = Parser(Lexer(line), max_depth=self.max_depth).parse()
        if self.show_ast:
            _emit(self.stdout, "ast: " + format_expression(expression))

        result = evaluate(expression)
        _emit(self.stdout, format_result(result))
        return result
