"""Operator lexicon: precedence, associativity and opcode per lexeme."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


class Assoc(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UNARY = "unary"


class Opcode(str, Enum):
    OR = "or"
    XOR = "xor"
    AND = "and"
    SHL = "shl"
    SHR = "shr"
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    NEG = "neg"
    POS = "pos"
    NOT = "not"
    POW = "pow"
    SQRT = "sqrt"
    COS = "cos"
    SIN = "sin"
    TAN = "tan"
    FLOOR = "floor"
    CEIL = "ceil"
    ROUND = "round"


@dataclass(frozen=True)
class Operator:
    lexeme: str
    prec: int
    assoc: Assoc
    opcode: Opcode

    @property
    def is_unary(self) -> bool:
        return self.assoc is Assoc.UNARY

    @property
    def right_prec(self) -> int:
        """Minimum precedence for the right operand of a binary operator."""
        return self.prec + 1 if self.assoc is Assoc.LEFT else self.prec


OPERATORS: Final[tuple[Operator, ...]] = (
    Operator("|", 0, Assoc.LEFT, Opcode.OR),
    Operator("^", 1, Assoc.LEFT, Opcode.XOR),
    Operator("&", 2, Assoc.LEFT, Opcode.AND),
    Operator("<<", 3, Assoc.LEFT, Opcode.SHL),
    Operator(">>", 3, Assoc.LEFT, Opcode.SHR),
    Operator("+", 4, Assoc.LEFT, Opcode.ADD),
    Operator("-", 4, Assoc.LEFT, Opcode.SUB),
    Operator("*", 5, Assoc.LEFT, Opcode.MUL),
    Operator("/", 5, Assoc.LEFT, Opcode.DIV),
    Operator("%", 5, Assoc.LEFT, Opcode.MOD),
    Operator("-", 5, Assoc.UNARY, Opcode.NEG),
    Operator("+", 5, Assoc.UNARY, Opcode.POS),
    Operator("~", 6, Assoc.UNARY, Opcode.NOT),
    Operator("**", 7, Assoc.RIGHT, Opcode.POW),
    Operator("sqrt", 8, Assoc.UNARY, Opcode.SQRT),
    Operator("cos", 8, Assoc.UNARY, Opcode.COS),
    Operator("sin", 8, Assoc.UNARY, Opcode.SIN),
    Operator("tan", 8, Assoc.UNARY, Opcode.TAN),
    Operator("floor", 8, Assoc.UNARY, Opcode.FLOOR),
    Operator("ceil", 8, Assoc.UNARY, Opcode.CEIL),
    Operator("round", 8, Assoc.UNARY, Opcode.ROUND),
)

UNARY_OPS: Final[dict[bytes, Operator]] = {
    op.lexeme.encode("ascii"): op for op in OPERATORS if op.is_unary
}
BINARY_OPS: Final[dict[bytes, Operator]] = {
    op.lexeme.encode("ascii"): op for op in OPERATORS if not op.is_unary
}

LPAREN: Final[bytes] = b"("
RPAREN: Final[bytes] = b")"
QUOTE: Final[bytes] = b"'"

# Every lexeme that can end a run of literal text.
TERMINATORS: Final[tuple[bytes, ...]] = tuple(
    dict.fromkeys([*(op.lexeme.encode("ascii") for op in OPERATORS), LPAREN, RPAREN, QUOTE])
)


def unary_operator(text: bytes) -> Operator | None:
    return UNARY_OPS.get(text)


def binary_operator(text: bytes) -> Operator | None:
    return BINARY_OPS.get(text)
