"""Environment-driven settings for the calculator core and front end."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final


def _env_int(name: str, default: int, *, minimum: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(minimum, int(raw))
    except ValueError:
        return default


MIN_PRECISION: Final[int] = 2
DEFAULT_PRECISION: Final[int] = _env_int("ZX_PRECISION", 128, minimum=MIN_PRECISION)
HISTORY_FILE: Final[str | None] = os.environ.get("ZX_HISTORY_FILE") or None
# Largest integer result, in bits, that shifts and float-to-integer conversions may produce.
MAX_INT_BITS: Final[int] = _env_int("ZX_MAX_INT_BITS", 1 << 24, minimum=64)


@dataclass(frozen=True)
class CalcConfig:
    """Per-call settings; ``precision`` is the float mantissa width in bits."""

    precision: int = DEFAULT_PRECISION

    def __post_init__(self) -> None:
        if self.precision < MIN_PRECISION:
            raise ValueError(f"precision must be at least {MIN_PRECISION} bits, got {self.precision}")

    @classmethod
    def from_env(cls) -> "CalcConfig":
        return cls(precision=_env_int("ZX_PRECISION", DEFAULT_PRECISION, minimum=MIN_PRECISION))

    def with_precision(self, precision: int | None) -> "CalcConfig":
        if precision is None:
            return self
        return CalcConfig(precision=precision)
