"""zx public API."""

__version__ = "1.1.0"

from .ast import Branch, Expr, Leaf
from .calculator import calculate, calculate_with_errors
from .config import CalcConfig
from .errors import CalcError, CalcParseError, CalcRuntimeError, last_error
from .evaluator import evaluate
from .formatting import format_value
from .lexer import ParseError, Token, tokenize
from .operators import Assoc, Opcode, Operator
from .parser import parse
from .values import Value

__all__ = [
    "__version__",
    "calculate",
    "calculate_with_errors",
    "last_error",
    "parse",
    "evaluate",
    "tokenize",
    "format_value",
    "Value",
    "Leaf",
    "Branch",
    "Expr",
    "Token",
    "Operator",
    "Opcode",
    "Assoc",
    "CalcConfig",
    "ParseError",
    "CalcError",
    "CalcParseError",
    "CalcRuntimeError",
]
