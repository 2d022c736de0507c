"""Structured error types and the per-thread last-error slot."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from .lexer import ParseError


class CalcError(Exception):
    """Base class for structured calculator errors."""


@dataclass(frozen=True)
class CalcParseError(CalcError):
    """Wraps lexer/parser failures with the byte span they point at."""

    message: str
    start: int
    end: int

    @classmethod
    def from_parse_error(cls, err: ParseError) -> "CalcParseError":
        return cls(message=err.message, start=err.start, end=err.end)

    def __str__(self) -> str:
        return self.message


class CalcRuntimeError(CalcError):
    """Evaluation failure after a successful parse."""


def classify_runtime_exception(err: BaseException) -> CalcRuntimeError:
    if isinstance(err, CalcRuntimeError):
        return err
    if isinstance(err, ZeroDivisionError):
        return CalcRuntimeError("Division by zero")
    if isinstance(err, RecursionError):
        return CalcRuntimeError("Expression nested too deeply")
    if isinstance(err, MemoryError):
        return CalcRuntimeError("Out of memory")
    return CalcRuntimeError(str(err) or type(err).__name__)


_slot = threading.local()


def last_error() -> str | None:
    """Message of the failure in this thread's latest ``calculate`` call, if any."""
    return getattr(_slot, "message", None)


def set_last_error(message: str) -> None:
    if last_error() is None:
        _slot.message = message


def clear_last_error() -> None:
    _slot.message = None
