"""
Calculator front end: reads expressions, evaluates them with the engine and
prints the result.

    $ arbnum
    calc> x = 1/3
    x = 0.(3)
    calc> x * 3
        = 1.0
"""
from __future__ import annotations
from typing import Callable, Dict, List, Optional, Tuple, Union
import logging
import sys

from errors import ErrorCode, NumericError, message_for
from parsing import parse_float_strict, parse_hex, parse_int_strict, parse_radix
from values import INFINITY, NAN, Float, Integer, imaginary_unit
import engine
import rendering
import transcendental

logger = logging.getLogger(__name__)

VERSION = "0.1.0"
PROMPT = "calc> "

Number = Union[Integer, Float]

# precedence, right-associative
_BINARY = {
    "==": (1, False), "!=": (1, False), "<": (1, False), ">": (1, False), "<=": (1, False), ">=": (1, False),
    "+": (2, False), "-": (2, False),
    "*": (3, False), "/": (3, False), "%": (3, False),
    "^": (5, True),
}
_NEGATE = "neg"
_NEGATE_PRECEDENCE = 4
_TWO_CHAR = ("==", "!=", ">=", "<=")


def _to_float(x: Number) -> Float:
    return Float.of(x)


def _compare(test: Callable[[int], bool]) -> Callable[[Number, Number], Integer]:
    return lambda a, b: Integer(1 if test(engine.compare(a, b)) else 0)


_OPERATIONS: Dict[str, Callable[[Number, Number], Number]] = {
    "+": engine.add,
    "-": engine.sub,
    "*": engine.mul,
    # the calculator divides exactly: 7/2 is 3.5, 1/3 is 0.(3)
    "/": lambda a, b: engine.div(_to_float(a), _to_float(b)),
    "%": lambda a, b: engine.mod(_to_float(a), _to_float(b)),
    "^": engine.power,
    "==": lambda a, b: Integer(1 if engine.equals(a, b) else 0),
    "!=": lambda a, b: Integer(0 if engine.equals(a, b) else 1),
    "<": _compare(lambda c: c < 0),
    ">": _compare(lambda c: c > 0),
    "<=": _compare(lambda c: c <= 0),
    ">=": _compare(lambda c: c >= 0),
}


def _places(n: Number) -> int:
    if not isinstance(n, Integer):
        raise NumericError(ErrorCode.INVALID_FORMAT, "decimal places must be an integer")
    return n.value


FUNCTIONS: Dict[str, Tuple[int, Callable]] = {
    "sqrt": (1, engine.sqrt),
    "abs": (1, engine.absolute),
    "sin": (1, engine.sin),
    "cos": (1, engine.cos),
    "tan": (1, engine.tan),
    "ln": (1, engine.ln),
    "exp": (1, engine.exp),
    "log10": (1, engine.log10),
    "log": (2, engine.log),
    "floor": (1, lambda x: engine.floor(_to_float(x))),
    "ceil": (1, lambda x: engine.ceil(_to_float(x))),
    "round": (2, lambda x, n: engine.round_to(_to_float(x), _places(n))),
    "trunc": (2, lambda x, n: engine.truncate(_to_float(x), _places(n))),
    "conj": (1, engine.conj),
}


def constant(name: str) -> Optional[Number]:
    key = name.lower()
    if key in ("pi", "e", "phi", "sqrt2"):
        return transcendental.constant(key)
    if key in ("inf", "infinity"):
        return INFINITY
    if key == "nan":
        return NAN
    if key == "i":
        return imaginary_unit()
    return None


def tokenize(text: str) -> List[str]:
    tokens = []
    i, n = 0, len(text)
    while i < n:
        c = text[i]
        if c.isspace():
            i += 1
            continue
        if text[i:i + 2] in _TWO_CHAR:
            tokens.append(text[i:i + 2])
            i += 2
            continue
        if c in "+-*/%^()<>,":
            tokens.append(c)
            i += 1
            continue
        if c.isdigit() or c == ".":
            start = i
            if text[i:i + 2].lower() in ("0x", "0b", "0o"):
                i += 2
                while i < n and (text[i].isalnum() or text[i] == "_"):
                    i += 1
            else:
                while i < n and (text[i].isdigit() or text[i] == "."):
                    i += 1
                if i < n and text[i] == "(":
                    close = text.find(")", i)
                    if close != -1 and text[i + 1:close].isdigit():
                        i = close + 1
                if i < n and text[i] in "eE":
                    j = i + 1
                    if j < n and text[j] in "+-":
                        j += 1
                    if j < n and text[j].isdigit():
                        i = j
                        while i < n and text[i].isdigit():
                            i += 1
                if i < n and text[i] == "i" and not (i + 1 < n and (text[i + 1].isalnum() or text[i + 1] == "_")):
                    i += 1
            tokens.append(text[start:i])
            continue
        if c.isalpha() or c == "_":
            start = i
            while i < n and (text[i].isalnum() or text[i] == "_"):
                i += 1
            tokens.append(text[start:i])
            continue
        raise NumericError(ErrorCode.INVALID_FORMAT, f"unexpected character {c!r} at position {i}")
    return tokens


def parse_literal(token: str) -> Number:
    """A numeric token: integers stay Integer, everything else becomes a Float."""
    lower = token.lower()
    if lower.startswith("0x"):
        return parse_hex(token)
    if lower.startswith("0b"):
        return parse_radix(token[2:], 2)
    if lower.startswith("0o"):
        return parse_radix(token[2:], 8)
    if token.isdigit():
        return parse_int_strict(token)
    return parse_float_strict(token)


def _is_name(token: str) -> bool:
    return token[0].isalpha() or token[0] == "_"


def to_rpn(tokens: List[str]) -> List:
    """
    Shunting-yard: infix tokens -> postfix items. Items are value tokens,
    operator strings, _NEGATE, or ("call", name, argc).
    """
    output, stack, arg_counts = [], [], []
    expect_operand = True
    for idx, tok in enumerate(tokens):
        nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None
        if expect_operand and tok in ("+", "-"):
            if tok == "-":
                stack.append(_NEGATE)
            continue
        if tok in _BINARY:
            precedence, right = _BINARY[tok]
            while stack and stack[-1] != "(" and not isinstance(stack[-1], tuple):
                top = stack[-1]
                top_precedence = _NEGATE_PRECEDENCE if top == _NEGATE else _BINARY[top][0]
                if top_precedence > precedence or (top_precedence == precedence and not right):
                    output.append(stack.pop())
                else:
                    break
            stack.append(tok)
            expect_operand = True
        elif _is_name(tok) and nxt == "(" and tok.lower() in FUNCTIONS:
            stack.append(("call", tok.lower()))
            expect_operand = True
        elif tok == "(":
            if stack and isinstance(stack[-1], tuple):
                arg_counts.append(0 if nxt == ")" else 1)
            stack.append("(")
            expect_operand = True
        elif tok == ",":
            while stack and stack[-1] != "(":
                output.append(stack.pop())
            if not stack or not arg_counts:
                raise NumericError(ErrorCode.INVALID_FORMAT, "',' outside a function call")
            arg_counts[-1] += 1
            expect_operand = True
        elif tok == ")":
            while stack and stack[-1] != "(":
                output.append(stack.pop())
            if not stack:
                raise NumericError(ErrorCode.INVALID_FORMAT, "unbalanced ')'")
            stack.pop()
            if stack and isinstance(stack[-1], tuple):
                _, name = stack.pop()
                output.append(("call", name, arg_counts.pop()))
            expect_operand = False
        else:
            output.append(tok)
            expect_operand = False
    while stack:
        top = stack.pop()
        if top == "(" or isinstance(top, tuple):
            raise NumericError(ErrorCode.INVALID_FORMAT, "unbalanced '('")
        output.append(top)
    return output


class Calculator:
    def __init__(self):
        self.variables: Dict[str, Number] = {}

    def lookup(self, token: str) -> Number:
        if _is_name(token):
            if token in self.variables:
                return self.variables[token]
            value = constant(token)
            if value is None:
                raise NumericError(ErrorCode.INVALID_FORMAT, f"unknown name {token!r}")
            return value
        return parse_literal(token)

    def evaluate(self, expression: str) -> Number:
        """
        Evaluate an infix expression.

        Raises:
            NumericError: malformed expression or failed operation
        """
        rpn = to_rpn(tokenize(expression))
        if not rpn:
            raise NumericError(ErrorCode.INVALID_FORMAT, "empty expression")
        stack: List[Number] = []
        for item in rpn:
            if isinstance(item, tuple):
                _, name, argc = item
                arity, fn = FUNCTIONS[name]
                if argc != arity or len(stack) < argc:
                    raise NumericError(ErrorCode.INVALID_FORMAT, f"{name} takes {arity} argument(s)")
                args = stack[len(stack) - argc:]
                del stack[len(stack) - argc:]
                stack.append(fn(*args))
            elif item == _NEGATE:
                if not stack:
                    raise NumericError(ErrorCode.INVALID_FORMAT, "missing operand for '-'")
                stack.append(engine.negate(stack.pop()))
            elif item in _OPERATIONS:
                if len(stack) < 2:
                    raise NumericError(ErrorCode.INVALID_FORMAT, f"missing operand for {item!r}")
                rhs, lhs = stack.pop(), stack.pop()
                stack.append(_OPERATIONS[item](lhs, rhs))
            else:
                stack.append(self.lookup(item))
        if len(stack) != 1:
            raise NumericError(ErrorCode.INVALID_FORMAT, "malformed expression")
        return stack[0]

    def info(self, value: Number) -> str:
        if isinstance(value, Integer):
            lines = ["Type: Integer",
                     f"    Value: {value}",
                     f"    Negative: {value.is_negative}",
                     f"    Zero: {value.is_zero}"]
            return "\n".join(lines)
        lines = ["Type: Float", f"    Value: {value}"]
        if value.is_nan:
            lines.append("    Special: NaN (Not a Number)")
        elif value.is_infinite:
            lines.append("    Special: Infinity")
            lines.append(f"    Negative: {value.is_negative}")
        else:
            if value.is_complex:
                kind = "Complex"
            elif value.is_irrational:
                kind = "Irrational"
            elif value.is_recurring:
                kind = "Recurring Decimal"
            else:
                kind = "Real"
            lines.append(f"    Type: {kind}")
            if not value.is_zero:
                lines.append(f"    Negative: {value.is_negative}")
        return "\n".join(lines)

    def _radix(self, value: Number, radix: int, prefix: str, name: str) -> str:
        if not isinstance(value, Integer):
            return f"{name} display only available for integers"
        text = rendering.to_radix(value, radix)
        if text.startswith("-"):
            return f"-{prefix}{text[1:]}"
        return prefix + text

    def _special(self, line: str) -> Optional[str]:
        for name, radix, prefix, label in (("hex", 16, "0x", "Hexadecimal"),
                                           ("bin", 2, "0b", "Binary"),
                                           ("oct", 8, "0o", "Octal")):
            if line.startswith(name + "(") and line.endswith(")"):
                return self._radix(self.evaluate(line[len(name) + 1:-1]), radix, prefix, label)
        if line.startswith("info(") and line.endswith(")"):
            return self.info(self.evaluate(line[5:-1]))
        return None

    def execute(self, line: str) -> Optional[str]:
        """Run one input line; returns the text to show, None for blank input."""
        line = line.strip()
        if not line:
            return None
        if line in ("help", "?"):
            return help_text()
        if line == "clear":
            self.variables.clear()
            return "All variables cleared."
        if line == "vars":
            if not self.variables:
                return "No variables defined."
            return "\n".join(["Variables:"] + [f"  {k} = {v}" for k, v in self.variables.items()])

        try:
            eq = line.find("=")
            if 0 < eq < len(line) - 1 and line[eq + 1] != "=" and line[eq - 1] not in "!<>=":
                name, expression = line[:eq].strip(), line[eq + 1:].strip()
                if name.isidentifier():
                    value = self.evaluate(expression)
                    self.variables[name] = value
                    return f"{name} = {value}"
            special = self._special(line)
            if special is not None:
                return special
            return f"    = {self.evaluate(line)}"
        except NumericError as e:
            logger.debug("%s: %s", line, e)
            return f"error [{int(e.code)}]: {message_for(e.code)}"


def help_text() -> str:
    return "\n".join([
        f"arbnum calculator v{VERSION}",
        "Operators:  + - * / % ^   == != < > <= >=   ( )",
        "Functions:  sqrt abs sin cos tan ln exp log10 log(x, base) floor ceil",
        "            round(x, n) trunc(x, n) conj",
        "Numbers:    123  123.45  0.1(6)  1.5e10  3+4i  2i  0x1F  0b1010  0o17",
        "Constants:  pi e phi sqrt2 inf nan i",
        "Variables:  x = 42",
        "Commands:   info(x) hex(x) bin(x) oct(x) vars clear help quit",
    ])


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    if "--verbose" in argv:
        argv.remove("--verbose")
        logging.basicConfig(level=logging.DEBUG)

    calc = Calculator()
    if argv:
        if len(argv) != 2 or argv[0] not in ("-e", "--eval"):
            print(f"Usage: {sys.argv[0]} [--verbose] [-e <expression>]")
            sys.exit(1)
        output = calc.execute(argv[1])
        if output is not None:
            print(output)
        sys.exit(1 if output is not None and output.startswith("error") else 0)

    print(f"arbnum calculator v{VERSION}")
    print("Type 'help' for assistance, 'quit' to exit")
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            break
        if line.strip() in ("quit", "exit"):
            print("Exiting!")
            break
        output = calc.execute(line)
        if output is not None:
            print(output)


if __name__ == "__main__":
    main()
