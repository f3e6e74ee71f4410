from calcpy.nodes import format_expression
from calcpy.parser import ParserError, parse
from calcpy.runtime import evaluate
from calcpy.session import format_result
from calcpy.tokenizer import LexError, tokenize

for code in [
    "5",
    "-1",
    "1 + 1",
    "-1 + 1",
    "1 + -1",
    "4 + 6 * 3",
    "(4 + 6)",
    "(4+6) * 3",
    "80225/+2",
    "7/6/2000",
    "5**2",
    "-2 ** 2",
    "2 ** 3 ** 2",
    "-7 // 2",
    "-7 % 2",
    "1.5e3 / 0",
    "8 - 3 - 2",
    "(1 + 14 * (54**2))",
    "2 $ 3",
    "2 + ",
    "1e+",
]:
    print("=" * 10)
    print(f"code: {code!r}")
    try:
        tokens = tokenize(code)
    except LexError as e:
        print(e)
        continue

    print(f"tokens: {' '.join(str(t) for t in tokens)}")

    try:
        expression = parse(code)
    except ParserError as e:
        print(e)
        continue
    print(f"ast: {format_expression(expression)}")
    print(f"result: {format_result(evaluate(expression))}")
