from __future__ import annotations
from enum import IntEnum
from typing import Any, Callable, Optional, Tuple


class ErrorCode(IntEnum):
    UNIMPLEMENTED = -1
    INVALID_FORMAT = 1
    DIV_BY_ZERO = 2
    NEGATIVE_RESULT = 3
    NEGATIVE_SQRT = 4
    NUMBER_TOO_LARGE = 5
    INFINITE_RESULT = 6


UNKNOWN_MESSAGE = "Unknown error"

_MESSAGES = {
    ErrorCode.UNIMPLEMENTED:    "Operation not implemented",
    ErrorCode.INVALID_FORMAT:   "Invalid format",
    ErrorCode.DIV_BY_ZERO:      "Division by zero",
    ErrorCode.NEGATIVE_RESULT:  "Negative result",
    ErrorCode.NEGATIVE_SQRT:    "Square root of a negative number",
    ErrorCode.NUMBER_TOO_LARGE: "Number too large",
    ErrorCode.INFINITE_RESULT:  "Infinite result",
}


def message_for(code: int) -> str:
    try:
        return _MESSAGES[ErrorCode(code)]
    except ValueError:
        return UNKNOWN_MESSAGE


def code_for(message: str) -> int:
    """Reverse lookup of `message_for`; unknown messages map to 0."""
    key = message.strip().lower()
    for code, text in _MESSAGES.items():
        if text.lower() == key:
            return int(code)
    return 0


class NumericError(ArithmeticError):
    """A failed numeric operation, tagged with its `ErrorCode`."""

    def __init__(self, code: ErrorCode, detail: str = ""):
        self.code = ErrorCode(code)
        self.detail = detail
        text = message_for(code)
        super().__init__(f"{text}: {detail}" if detail else text)


def checked(fn: Callable[..., Any], *args, **kwargs) -> Tuple[Any, Optional[ErrorCode]]:
    """
    Run `fn` and report failures as a value instead of an exception.

    Returns (result, None) on success and (None, code) when `fn` raised a
    NumericError. Other exceptions propagate.
    """
    try:
        return fn(*args, **kwargs), None
    except NumericError as e:
        return None, e.code
