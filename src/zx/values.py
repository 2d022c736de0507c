"""Tagged integer/float scalar used by the lexer, evaluator and printer."""

from __future__ import annotations

from dataclasses import dataclass, field

import mpmath

from .config import MAX_INT_BITS

_REPR_BITS = 4096


def _zero_float() -> mpmath.mpf:
    return mpmath.mpf(0)


@dataclass(frozen=True, eq=False)
class Value:
    """Arbitrary-precision scalar.

    ``is_float`` selects the live payload: ``f`` (an ``mpmath.mpf``) when set,
    ``z`` (a Python ``int``) otherwise. The inactive payload is always a valid
    number, so consumers may read either field.
    """

    is_float: bool = False
    z: int = 0
    f: mpmath.mpf = field(default_factory=_zero_float)

    @classmethod
    def zero(cls) -> "Value":
        return cls()

    @classmethod
    def integer(cls, z: int) -> "Value":
        return cls(is_float=False, z=int(z))

    @classmethod
    def floating(cls, f) -> "Value":
        return cls(is_float=True, f=mpmath.mpf(f))

    @property
    def live(self) -> int | mpmath.mpf:
        return self.f if self.is_float else self.z

    def as_float(self) -> mpmath.mpf:
        """Live payload promoted to a float at the current working precision."""
        if self.is_float:
            return self.f
        return mpmath.mpf(self.z)

    def as_int(self) -> int:
        """Live payload truncated toward zero."""
        if self.is_float:
            return truncate(self.f)
        return self.z

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self.is_float != other.is_float:
            return False
        if self.is_float:
            return self.f == other.f or (mpmath.isnan(self.f) and mpmath.isnan(other.f))
        return self.z == other.z

    def __hash__(self) -> int:
        return hash((self.is_float, self.live))

    def __repr__(self) -> str:
        if self.is_float:
            return f"Value(float, {mpmath.nstr(self.f, 20)})"
        if self.z.bit_length() > _REPR_BITS:
            return f"Value(int, <{self.z.bit_length()} bits>)"
        return f"Value(int, {self.z})"


def truncate(f: mpmath.mpf) -> int:
    if not mpmath.isfinite(f):
        raise ValueError("Cannot convert inf or nan to an integer")
    if mpmath.mag(f) > MAX_INT_BITS:
        raise OverflowError("Integer result too large")
    return int(f)
