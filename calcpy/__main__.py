"""Line-oriented arithmetic calculator.

Usage:
    python -m calcpy                       # Evaluate stdin line by line
    echo "(2 + 3) * 4" | python -m calcpy  # -> 20
    python -m calcpy --show-tokens --show-ast
    python -m calcpy --exit-on-error       # Stop at the first bad line, exit code 1

Type /quit or /exit to leave an interactive session.
"""

import logging
import sys
from typing import Iterator

import typer
from rich.console import Console
from rich.logging import RichHandler

from calcpy.parser import DEFAULT_MAX_DEPTH
from calcpy.session import Session

app = typer.Typer(
    name="calcpy",
    help="Evaluate arithmetic expressions, one per line",
    add_completion=False,
)


def _read_lines(prompt: str) -> Iterator[str]:
    if not sys.stdin.isatty():
        yield from sys.stdin
        return
    while True:
        try:
            yield input(prompt)
        except (EOFError, KeyboardInterrupt):
            return


@app.command()
def cmd_run(
    exit_on_error: bool = typer.Option(
        False, "--exit-on-error/--continue-on-error", help="Stop at the first line that fails to parse"
    ),
    show_tokens: bool = typer.Option(False, "--show-tokens", help="Print the token stream of every line"),
    show_ast: bool = typer.Option(False, "--show-ast", help="Print the parsed expression of every line"),
    max_depth: int = typer.Option(
        DEFAULT_MAX_DEPTH, "--max-depth", envvar="CALCPY_MAX_DEPTH", min=1, help="Maximum nesting of signs and parentheses"
    ),
    prompt: str = typer.Option("> ", "--prompt", help="Prompt shown in interactive sessions"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr"),
) -> None:
    stderr = Console(stderr=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=stderr, show_path=False)],
    )

    session = Session(
        stdout=Console(),
        stderr=stderr,
        exit_on_error=exit_on_error,
        show_tokens=show_tokens,
        show_ast=show_ast,
        max_depth=max_depth,
    )
    raise typer.Exit(session.run(_read_lines(prompt)))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
