"""Compares calcpy against Python's own eval() on random short expressions, printing disagreements"""
import math
import random
import re
import string
import warnings

from calcpy.parser import ParserError
from calcpy.session import calculate

warnings.filterwarnings("ignore")


def eval_py(code: str) -> float | str:
    try:
        return eval(code)
    except Exception as e:
        return str(e)


def eval_my(code: str) -> float | str:
    try:
        return calculate(code)
    except ParserError as e:
        return str(e)


if __name__ == "__main__":
    # "%" is left out: Python's modulo follows the divisor's sign, calcpy's follows the dividend's
    alphabet = string.digits + ".()+-*/ "

    def generate(length: int) -> str:
        return "".join(random.choices(alphabet, k=length))

    while True:
        code = generate(10)

        if re.findall(r"\*\s*\*", code):
            continue  # powers group differently (2**3**2 is (2**3)**2 here)

        if re.findall(r"(^|[^\d\s])\s*\.", code):
            continue  # calcpy numbers always start with a digit (.5 is an error)

        res_py = eval_py(code)
        res_my = eval_my(code)
        if isinstance(res_py, float) and isinstance(res_my, float) and math.isclose(res_my, res_py):
            continue
        if isinstance(res_py, int) and isinstance(res_my, float) and math.isclose(float(res_py), res_my):
            continue
        if isinstance(res_py, str) and isinstance(res_my, str):
            continue
        if isinstance(res_py, str) and "division by zero" in res_py and isinstance(res_my, float):
            continue  # IEEE semantics: inf or nan instead of an exception
        if isinstance(res_py, str) and res_py.startswith("leading zeros in decimal integer literals are not permitted"):
            continue
        print(f"{code!r}\npy: {res_py}\nmy: {res_my}\n\n")
