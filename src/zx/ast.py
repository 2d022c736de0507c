"""Expression tree nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .operators import Operator
from .values import Value


@dataclass(frozen=True)
class Leaf:
    value: Value


@dataclass(frozen=True)
class Branch:
    op: Operator
    left: "Expr"
    right: "Expr | None" = None

    def __post_init__(self) -> None:
        if self.op.is_unary != (self.right is None):
            raise ValueError(f"operator {self.op.lexeme!r} has the wrong number of operands")


Expr = Union[Leaf, Branch]
