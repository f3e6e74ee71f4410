import io
import math

import pytest
from rich.console import Console

from calcpy import session as session_module
from calcpy.runtime import EvaluationError
from calcpy.session import Session, calculate, format_result, is_quit_directive


def make_session(**kwargs) -> tuple[Session, io.StringIO, io.StringIO]:
    out, err = io.StringIO(), io.StringIO()
    session = Session(stdout=Console(file=out), stderr=Console(file=err), **kwargs)
    return session, out, err


@pytest.mark.parametrize(
    "value, expected_str",
    [
        pytest.param(5.0, "5"),
        pytest.param(-4.0, "-4"),
        pytest.param(3.5, "3.5"),
        pytest.param(0.1, "0.1"),
        pytest.param(0.0, "0"),
        pytest.param(-0.0, "-0"),
        pytest.param(1e20, "1e+20"),
        pytest.param(math.inf, "inf"),
        pytest.param(-math.inf, "-inf"),
        pytest.param(math.nan, "NaN"),
    ],
)
def test_format_result(value: float, expected_str: str) -> None:
    assert format_result(value) == expected_str


@pytest.mark.parametrize(
    "line, is_quit",
    [
        pytest.param("/quit", True),
        pytest.param("/exit", True),
        pytest.param("/quit now", True),
        pytest.param(" /quit", False),
        pytest.param("quit", False),
        pytest.param("1 + 1", False),
    ],
)
def test_is_quit_directive(line: str, is_quit: bool) -> None:
    assert is_quit_directive(line) is is_quit


def test_calculate() -> None:
    assert calculate("2 ** 10") == 1024.0


def test_run_prints_one_result_per_line() -> None:
    session, out, err = make_session()
    assert session.run(["2 + 3\n", "7 / 2\n", "\n", "   \n", "-7 // 2\r\n"]) == 0
    assert out.getvalue() == "5\n3.5\n-4\n"
    assert err.getvalue() == ""


@pytest.mark.parametrize("directive", ["/quit", "/exit"])
def test_run_stops_at_quit_directive(directive: str) -> None:
    session, out, _ = make_session()
    assert session.run(["1", directive, "2"]) == 0
    assert out.getvalue() == "1\n"


def test_run_continues_after_error_by_default() -> None:
    session, out, err = make_session()
    assert session.run(["2 $ 3", "1 + 1"]) == 0
    assert out.getvalue() == "2\n"
    assert "[Parser error] Syntax error: Unexpected character '$' at 2" in err.getvalue()


def test_run_exits_on_error_when_asked() -> None:
    session, out, err = make_session(exit_on_error=True)
    assert session.run(["2 +", "1"]) == 1
    assert out.getvalue() == ""
    assert "Expected a number or '(' but received EOF" in err.getvalue()


def test_run_shows_tokens_and_ast() -> None:
    session, out, _ = make_session(show_tokens=True, show_ast=True)
    assert session.run(["-2 ** 2"]) == 0
    assert out.getvalue().splitlines() == [
        "tokens: <MINUS>- <INTEGER>2 <DOUBLE_STAR>** <INTEGER>2 <EOF>",
        "ast: ((-2) ** 2)",
        "4",
    ]


def test_run_show_tokens_with_lex_error() -> None:
    session, out, err = make_session(show_tokens=True)
    assert session.run(["1 # 2"]) == 0
    assert out.getvalue() == ""
    assert "'#'" in err.getvalue()


def test_run_respects_max_depth() -> None:
    session, out, err = make_session(max_depth=2)
    assert session.run(["((1))", "(1)"]) == 0
    assert out.getvalue() == "1\n"
    assert "nested too deeply" in err.getvalue()


def test_run_stops_on_internal_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_evaluate(expression):
        raise EvaluationError("Internal error, broken")

    monkeypatch.setattr(session_module, "evaluate", broken_evaluate)
    session, out, err = make_session()
    assert session.run(["1", "2"]) == 1
    assert out.getvalue() == ""
    assert "[Evaluation error] Internal error, broken" in err.getvalue()


def test_run_prints_negative_zero_from_floor_division() -> None:
    session, out, _ = make_session()
    assert session.run(["0 // -3", "0 // 3"]) == 0
    assert out.getvalue() == "-0\n0\n"


def test_run_reports_nesting_past_interpreter_stack() -> None:
    session, out, err = make_session(max_depth=100000)
    assert session.run(["(" * 3000 + "1" + ")" * 3000, "1 + 1"]) == 0
    assert out.getvalue() == "2\n"
    assert "Expression is nested too deeply" in err.getvalue()
