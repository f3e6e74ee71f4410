import pytest
from typer.testing import CliRunner

import calcpy.__main__ as cli_module
from calcpy.__main__ import app

runner = CliRunner()


def test_evaluates_stdin_lines() -> None:
    result = runner.invoke(app, [], input="2 + 3\n(2 + 3) * 4\n")
    assert result.exit_code == 0
    assert result.output.splitlines() == ["5", "20"]


def test_quit_directive() -> None:
    result = runner.invoke(app, [], input="/quit\n1 + 1\n")
    assert result.exit_code == 0
    assert result.output == ""


def test_continues_after_error() -> None:
    result = runner.invoke(app, [], input="2 $ 3\n1\n")
    assert result.exit_code == 0
    assert "[Parser error]" in result.output
    assert result.output.splitlines()[-1] == "1"


def test_exit_on_error() -> None:
    result = runner.invoke(app, ["--exit-on-error"], input="2 $ 3\n1\n")
    assert result.exit_code == 1


def test_show_ast() -> None:
    result = runner.invoke(app, ["--show-ast"], input="1 + 2 * 3\n")
    assert result.exit_code == 0
    assert result.output.splitlines() == ["ast: (1 + (2 * 3))", "7"]


def test_max_depth_from_environment() -> None:
    result = runner.invoke(app, [], input="(((1)))\n", env={"CALCPY_MAX_DEPTH": "2"})
    assert result.exit_code == 0
    assert "nested too deeply" in result.output


class _Terminal:
    def isatty(self) -> bool:
        return True


@pytest.mark.parametrize("interruption", [EOFError, KeyboardInterrupt])
def test_interactive_input_ends_cleanly(monkeypatch: pytest.MonkeyPatch, interruption: type) -> None:
    answers = iter(["1 + 1"])

    def fake_input(prompt: str) -> str:
        assert prompt == "> "
        for answer in answers:
            return answer
        raise interruption()

    monkeypatch.setattr(cli_module.sys, "stdin", _Terminal())
    monkeypatch.setattr("builtins.input", fake_input)
    assert list(cli_module._read_lines("> ")) == ["1 + 1"]
