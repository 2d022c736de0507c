"""Rendering of ``Value`` results in decimal, hex, octal or binary."""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Final

import mpmath

from .config import DEFAULT_PRECISION
from .values import Value

BASE_PREFIXES: Final[dict[int, str]] = {10: "", 16: "0x", 8: "0o", 2: "0b"}
_INT_FORMATS: Final[dict[int, str]] = {10: "d", 16: "x", 8: "o", 2: "b"}

# Fixed notation is used while the decimal point sits within this many
# digits of the significant digits.
_FIXED_SPAN: Final[int] = 8

_CHUNK_BITS: Final[int] = 8192
_LOG10_2: Final[float] = math.log10(2)
_EXACT_EXPONENT_BITS: Final[int] = 1 << 16


def _decimal_string(n: int) -> str:
    # str() refuses very long results, so split around a power of ten.
    if n.bit_length() <= _CHUNK_BITS:
        return str(n)
    half = int(n.bit_length() * _LOG10_2) // 2
    high, low = divmod(n, 10**half)
    return _decimal_string(high) + _decimal_string(low).rjust(half, "0")


def _to_base(n: int, base: int) -> str:
    if base == 10:
        return _decimal_string(n)
    return format(n, _INT_FORMATS[base])


def significant_digits(precision: int, base: int) -> int:
    return max(1, round(precision / math.log2(base)) - 1)


def _exact_fraction(f: mpmath.mpf, precision: int) -> Fraction:
    mantissa, exponent = mpmath.frexp(abs(f))
    bits = max(precision, 64)
    scaled = mpmath.ldexp(mantissa, bits)
    while not mpmath.isint(scaled):
        bits *= 2
        scaled = mpmath.ldexp(mantissa, bits)
    return Fraction(int(scaled), 1 << bits) * Fraction(2) ** int(exponent)


def _exact_digits(f: mpmath.mpf, base: int, count: int, exp: int, precision: int) -> tuple[int, int]:
    x = _exact_fraction(f, precision)
    # Settle exp so that base**(exp - 1) <= x < base**exp.
    while Fraction(base) ** exp <= x:
        exp += 1
    while Fraction(base) ** (exp - 1) > x:
        exp -= 1
    return round(x * Fraction(base) ** (count - exp)), exp


def _approximate_digits(f: mpmath.mpf, base: int, count: int, exp: int, precision: int) -> tuple[int, int]:
    with mpmath.workprec(precision + 4 * count + 64):
        x = abs(f)
        while mpmath.power(base, exp) <= x:
            exp += 1
        while mpmath.power(base, exp - 1) > x:
            exp -= 1
        return int(mpmath.nint(x * mpmath.power(base, count - exp))), exp


def float_digits(f: mpmath.mpf, base: int, precision: int) -> tuple[bool, str, int]:
    """Split ``f`` into ``(negative, digits, exp)`` with ``|f| == 0.DIGITS * base**exp``.

    At most ``significant_digits(precision, base)`` digits are produced,
    rounded half to even, with trailing zeros stripped. Zero has no digits.
    Values whose binary exponent exceeds ``_EXACT_EXPONENT_BITS`` are scaled
    at raised precision instead of exactly.
    """
    negative = f < 0
    if f == 0:
        return False, "", 0

    count = significant_digits(precision, base)
    _, binary_exp = mpmath.frexp(abs(f))
    binary_exp = int(binary_exp)
    exp = math.floor(binary_exp / math.log2(base))
    if abs(binary_exp) <= _EXACT_EXPONENT_BITS:
        scaled, exp = _exact_digits(f, base, count, exp, precision)
    else:
        scaled, exp = _approximate_digits(f, base, count, exp, precision)

    if scaled >= base**count:
        scaled //= base
        exp += 1
    return negative, _to_base(scaled, base).rstrip("0"), exp


def _format_float(f: mpmath.mpf, base: int, precision: int) -> str:
    if mpmath.isnan(f):
        return "nan"
    if mpmath.isinf(f):
        return "-inf" if f < 0 else "inf"

    negative, digits, exp = float_digits(f, base, precision)
    out = ["-" if negative else "", BASE_PREFIXES[base]]
    length = len(digits)
    if exp == 0 and length == 0:
        out.append("0")

    if exp - length > _FIXED_SPAN or exp - length < -_FIXED_SPAN:
        out.append(f"{digits[0]}.{digits[1:]}")
        if exp - 1:
            out.append(f"e{exp - 1}")
    elif exp < 0:
        out.append("0." + "0" * -exp + digits)
    else:
        out.append(digits[:exp])
        if exp > length:
            out.append("0" * (exp - length))
        out.append(".")
        out.append(digits[exp:])
    return "".join(out)


def _format_int(z: int, base: int) -> str:
    sign = "-" if z < 0 else ""
    return f"{sign}{BASE_PREFIXES[base]}{_to_base(abs(z), base)}"


def utf8_bytes(code: int) -> bytes:
    """Encode ``code`` with the 1-4 byte UTF-8 layout, without range checks."""
    v = code & 0xFFFFFFFF
    if v < 0x80:
        raw = [v]
    elif v < 0x800:
        raw = [0xC0 | (v >> 6), 0x80 | (v & 0x3F)]
    elif v < 0x10000:
        raw = [0xE0 | (v >> 12), 0x80 | ((v >> 6) & 0x3F), 0x80 | (v & 0x3F)]
    else:
        raw = [0xF0 | (v >> 18), 0x80 | ((v >> 12) & 0x3F), 0x80 | ((v >> 6) & 0x3F), 0x80 | (v & 0x3F)]
    return bytes(b & 0xFF for b in raw)


def _code_point(value: Value) -> int:
    if not value.is_float:
        return abs(value.z)
    if not mpmath.isfinite(value.f):
        return 0
    man, exp = (int(part) for part in value.f.man_exp)
    if exp >= 32:
        # Only the low 32 bits are encoded, and those are all zero.
        return 0
    return abs(man) << exp if exp >= 0 else abs(man) >> -exp


def format_char(value: Value) -> str:
    # Output stops at the first NUL byte.
    raw = utf8_bytes(_code_point(value)).split(b"\0", 1)[0]
    return raw.decode("utf-8", errors="replace")


def format_value(
    value: Value,
    base: int = 10,
    *,
    unicode: bool = False,
    precision: int = DEFAULT_PRECISION,
) -> str:
    """Render ``value`` the way the interactive prompt prints results."""
    if base not in BASE_PREFIXES:
        raise ValueError(f"unsupported output base {base}")
    prefix = f"'{format_char(value)}' " if unicode else ""
    if value.is_float:
        return prefix + _format_float(value.f, base, precision)
    return prefix + _format_int(value.z, base)
