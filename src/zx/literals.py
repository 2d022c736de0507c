"""Numeric and character literal lexing.

Both lexers read the reader's bytes directly rather than going through the
tokenizer, and leave the cursor just past the literal.
"""

from __future__ import annotations

import re
from typing import Final

import mpmath

from .config import MAX_INT_BITS
from .lexer import ParseError, Reader
from .values import Value

_DECIMAL_RE: Final = re.compile(
    rb"""
    (?P<int>[0-9]*)
    (?:\.(?P<frac>[0-9]*))?
    (?:[eE](?P<exp>[+-]?[0-9]+))?
    """,
    re.VERBOSE,
)
_HEX_RE: Final = re.compile(
    rb"""
    0[xX]
    (?P<int>[0-9a-fA-F]*)
    (?:\.(?P<frac>[0-9a-fA-F]*))?
    """,
    re.VERBOSE,
)

_SIMPLE_ESCAPES: Final[dict[int, int]] = {
    ord("a"): 0x07,
    ord("b"): 0x08,
    ord("f"): 0x0C,
    ord("n"): 0x0A,
    ord("r"): 0x0D,
    ord("t"): 0x09,
    ord("v"): 0x0B,
    ord("\\"): 0x5C,
    ord("'"): 0x27,
}
_HEX_ESCAPES: Final = frozenset(b"xuU")
_HEX_DIGITS: Final = frozenset(b"0123456789abcdefABCDEF")
_OCTAL_DIGITS: Final = frozenset(b"01234567")

_CHUNK_DIGITS: Final = 1000
# Decimal exponents up to this size are scaled with exact integer arithmetic.
_EXACT_EXPONENT_LIMIT: Final = 10_000


def _unknown(reader: Reader) -> ParseError:
    byte = reader.peek()
    shown = "" if byte is None else chr(byte)
    return ParseError(f"Unknown '{shown}'", reader.pos)


def _scan_radix_digits(reader: Reader, base: int) -> int:
    value = 0
    while True:
        byte = reader.peek()
        if byte is None or not (0x30 <= byte < 0x30 + base):
            return value
        value = value * base + (byte - 0x30)
        reader.pos += 1


def decimal_digits_to_int(digits: bytes) -> int:
    """Convert an ASCII digit run of any length, splitting it into halves
    so that no single ``int()`` call exceeds the interpreter's digit limit."""
    if len(digits) <= _CHUNK_DIGITS:
        return int(digits or b"0")
    split = len(digits) // 2
    low = digits[split:]
    return decimal_digits_to_int(digits[:split]) * 10 ** len(low) + decimal_digits_to_int(low)


def _scaled_decimal(mantissa: int, exp10: int) -> mpmath.mpf:
    """``mantissa * 10**exp10`` rounded to the working precision."""
    if 0 <= exp10 <= _EXACT_EXPONENT_LIMIT:
        return mpmath.mpf(mantissa * 10**exp10)
    if -_EXACT_EXPONENT_LIMIT <= exp10 < 0:
        return mpmath.fdiv(mantissa, 10**-exp10)
    with mpmath.extraprec(64):
        scaled = mpmath.mpf(mantissa) * mpmath.power(10, exp10)
    return +scaled


def _decimal_literal(reader: Reader) -> Value:
    # Every group is optional, so this always matches (possibly empty).
    m = _DECIMAL_RE.match(reader.source, reader.pos, reader.end)
    int_digits = m.group("int")
    frac_digits = m.group("frac") or b""
    if not int_digits and not frac_digits:
        raise _unknown(reader)

    reader.pos = m.end()
    exp_text = m.group("exp") or b"0"
    exponent = decimal_digits_to_int(exp_text.lstrip(b"+-"))
    if exp_text.startswith(b"-"):
        exponent = -exponent
    has_dot = m.group("frac") is not None

    if not has_dot and exponent == 0:
        return Value.integer(decimal_digits_to_int(int_digits))

    mantissa = decimal_digits_to_int(int_digits + frac_digits)
    number = _scaled_decimal(mantissa, exponent - len(frac_digits))
    if not has_dot and mpmath.isint(number) and mpmath.mag(number) <= MAX_INT_BITS:
        return Value.integer(int(number))
    return Value.floating(number)


def _hex_literal(reader: Reader) -> Value | None:
    m = _HEX_RE.match(reader.source, reader.pos, reader.end)
    if m is None:
        return None
    int_digits = m.group("int")
    frac_digits = m.group("frac")
    if not int_digits and not frac_digits:
        return None

    reader.pos = m.end()
    mantissa = int(int_digits or b"0", 16)
    if frac_digits is None:
        return Value.integer(mantissa)
    if frac_digits:
        mantissa = (mantissa << (4 * len(frac_digits))) | int(frac_digits, 16)
    return Value.floating(mpmath.ldexp(mpmath.mpf(mantissa), -4 * len(frac_digits)))


def parse_number(reader: Reader, prev: Value) -> Value:
    """Lex a numeric leaf: ``$``, ``pi``, ``0b``/``0o``/``0x`` or decimal."""
    if reader.startswith(b"$"):
        reader.pos += 1
        return prev

    if reader.startswith(b"pi"):
        reader.pos += 2
        return Value.floating(+mpmath.pi)

    if reader.startswith(b"0b") or reader.startswith(b"0o"):
        base = 2 if reader.peek(1) == ord("b") else 8
        reader.pos += 2
        return Value.integer(_scan_radix_digits(reader, base))

    if reader.startswith(b"0x") or reader.startswith(b"0X"):
        value = _hex_literal(reader)
        if value is not None:
            return value

    return _decimal_literal(reader)


def _utf8_code_point(reader: Reader) -> int:
    lead = reader.source[reader.pos]
    nibble = lead & 0xF0
    if nibble == 0xF0:
        mask, count = 0x0F, 4
    elif nibble == 0xE0:
        mask, count = 0x0F, 3
    elif nibble in (0xC0, 0xD0):
        mask, count = 0x1F, 2
    else:
        # ASCII, or a stray continuation byte taken as-is.
        reader.pos += 1
        return lead

    value = lead & mask
    for offset in range(1, count):
        byte = reader.peek(offset)
        value = (value << 6) | ((byte or 0) & 0x3F)
    reader.pos = min(reader.pos + count, reader.end)
    return value


def _escape_code_point(reader: Reader) -> int:
    # Cursor is on the byte after the backslash.
    byte = reader.peek()
    if byte is None:
        raise ParseError("Unclosed '", reader.pos)

    simple = _SIMPLE_ESCAPES.get(byte)
    if simple is not None:
        reader.pos += 1
        return simple

    if byte in _HEX_ESCAPES:
        reader.pos += 1
        value = 0
        while (digit := reader.peek()) is not None and digit in _HEX_DIGITS:
            value = value * 16 + int(chr(digit), 16)
            reader.pos += 1
        return value

    value = 0
    while (digit := reader.peek()) is not None and digit in _OCTAL_DIGITS:
        value = value * 8 + (digit - 0x30)
        reader.pos += 1
    return value


def parse_char(reader: Reader) -> Value:
    """Lex the body of a character literal; the closing quote is left in place."""
    byte = reader.peek()
    if byte is None or byte == ord("'"):
        return Value.integer(0)
    if byte == ord("\\"):
        reader.pos += 1
        return Value.integer(_escape_code_point(reader))
    return Value.integer(_utf8_code_point(reader))
