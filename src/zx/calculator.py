"""Top-level entry points: parse and evaluate one expression."""

from __future__ import annotations

import logging

import mpmath

from .config import CalcConfig
from .errors import (
    CalcError,
    CalcParseError,
    CalcRuntimeError,
    classify_runtime_exception,
    clear_last_error,
    set_last_error,
)
from .evaluator import evaluate
from .lexer import ParseError
from .parser import parse
from .values import Value

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = CalcConfig.from_env()


def calculate_with_errors(
    expression: str | bytes,
    prev: Value | None = None,
    *,
    precision: int | None = None,
) -> Value:
    """Evaluate ``expression``, raising ``CalcParseError``/``CalcRuntimeError`` on failure.

    ``$`` in the expression stands for ``prev``. Float literals and float
    arithmetic run at ``precision`` bits (the configured default when None).
    """
    config = _DEFAULT_CONFIG.with_precision(precision)
    with mpmath.workprec(config.precision):
        try:
            tree = parse(expression, Value.zero() if prev is None else prev)
        except ParseError as err:
            raise CalcParseError.from_parse_error(err) from err
        except (ArithmeticError, ValueError, RecursionError, MemoryError) as err:
            raise classify_runtime_exception(err) from err
        try:
            return evaluate(tree)
        except CalcRuntimeError:
            raise
        except (ArithmeticError, ValueError, RecursionError, MemoryError) as err:
            raise classify_runtime_exception(err) from err


def calculate(
    expression: str | bytes,
    prev: Value | None = None,
    *,
    precision: int | None = None,
) -> Value:
    """Evaluate ``expression``; on failure return a zero ``Value`` and record ``last_error()``."""
    clear_last_error()
    try:
        return calculate_with_errors(expression, prev, precision=precision)
    except CalcError as err:
        logger.debug("calculate(%r) failed: %s", expression, err)
        set_last_error(str(err))
        return Value.zero()
