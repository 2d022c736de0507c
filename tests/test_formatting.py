from __future__ import annotations

import unittest

import mpmath

from zx import Value, calculate, format_value
from zx.formatting import float_digits, significant_digits, utf8_bytes
from zx.literals import decimal_digits_to_int


class IntegerFormattingTests(unittest.TestCase):
    def test_bases_and_prefixes(self) -> None:
        cases = [
            (255, 10, "255"),
            (255, 16, "0xff"),
            (8, 8, "0o10"),
            (5, 2, "0b101"),
            (0, 16, "0x0"),
            (-256, 16, "-0x100"),
            (-5, 2, "-0b101"),
        ]
        for z, base, text in cases:
            with self.subTest(z=z, base=base):
                self.assertEqual(format_value(Value.integer(z), base), text)

    def test_decimal_output_past_the_string_conversion_limit(self) -> None:
        self.assertEqual(format_value(Value.integer(10**5000)), "1" + "0" * 5000)
        self.assertEqual(format_value(Value.integer(-(10**6000 - 1))), "-" + "9" * 6000)

        text = format_value(Value.integer(1 << 20000))
        self.assertEqual(decimal_digits_to_int(text.encode("ascii")), 1 << 20000)
        self.assertEqual(len(text), 6021)

    def test_long_output_in_power_of_two_bases(self) -> None:
        self.assertEqual(format_value(Value.integer(1 << 20000), 16), "0x1" + "0" * 5000)

    def test_unsupported_base(self) -> None:
        with self.assertRaises(ValueError):
            format_value(Value.integer(1), 3)


class FloatFormattingTests(unittest.TestCase):
    def _printed(self, source: str, base: int = 10, precision: int = 128) -> str:
        value = calculate(source, precision=precision)
        self.assertTrue(value.is_float, msg=source)
        return format_value(value, base, precision=precision)

    def test_fixed_notation(self) -> None:
        cases = {
            "2.5": "2.5",
            "-2.5": "-2.5",
            "1024.": "1024.",
            "0.": "0.",
            ".5": ".5",
            "0.001": "0.001",
            "1e8 + 0.": "100000000.",
        }
        for source, text in cases.items():
            with self.subTest(source=source):
                self.assertEqual(self._printed(source), text)

    def test_scientific_notation_far_from_the_point(self) -> None:
        self.assertEqual(self._printed("1e20 + 0."), "1.e20")
        self.assertEqual(self._printed("1e9 + 0."), "1.e9")
        self.assertEqual(self._printed("1e-10"), "1.e-10")
        self.assertEqual(self._printed("-1.5e30"), "-1.5e30")

    def test_non_finite_values(self) -> None:
        self.assertEqual(format_value(Value.floating(mpmath.nan)), "nan")
        self.assertEqual(format_value(Value.floating(mpmath.inf)), "inf")
        self.assertEqual(format_value(Value.floating(-mpmath.inf)), "-inf")

    def test_float_in_other_bases(self) -> None:
        self.assertEqual(self._printed("2.5", 16), "0x2.8")
        self.assertEqual(self._printed("0.5", 2), "0b.1")

    def test_digit_count_follows_precision(self) -> None:
        self.assertEqual(significant_digits(64, 10), 18)
        self.assertEqual(significant_digits(128, 10), 38)
        self.assertEqual(self._printed("1. / 3", precision=64), "." + "3" * 18)

    def test_extreme_exponents_print_in_scientific_notation(self) -> None:
        self.assertEqual(self._printed("1e100000000000"), "1.e100000000000")
        self.assertEqual(self._printed("-2.5e-100000000000"), "-2.5e-100000000000")
        self.assertEqual(self._printed("1" * 5000 + ".")[:3], "1.1")

    def test_many_significant_digits(self) -> None:
        text = self._printed("1. / 3", precision=20000)
        self.assertEqual(text, "." + "3" * significant_digits(20000, 10))

    def test_float_digits_split(self) -> None:
        with mpmath.workprec(64):
            self.assertEqual(float_digits(mpmath.mpf(-12.5), 10, 64), (True, "125", 2))
            self.assertEqual(float_digits(mpmath.mpf(0), 10, 64), (False, "", 0))


class UnicodeFormattingTests(unittest.TestCase):
    def test_character_prefix(self) -> None:
        cases = [
            (65, "'A' 65"),
            (0x20AC, "'€' 8364"),
            (0x1F600, "'😀' 128512"),
            (0, "'' 0"),
        ]
        for code, text in cases:
            with self.subTest(code=code):
                self.assertEqual(format_value(Value.integer(code), unicode=True), text)

    def test_float_values_use_their_integer_part(self) -> None:
        self.assertEqual(format_value(Value.floating(65.9), unicode=True, precision=128)[:4], "'A' ")

    def test_large_floats_keep_only_the_low_bits(self) -> None:
        self.assertEqual(format_value(Value.floating(mpmath.mpf(2) ** 40 + 65), unicode=True)[:4], "'A' ")
        self.assertTrue(format_value(Value.floating(mpmath.mpf(10) ** 100000000), unicode=True).startswith("'' "))

    def test_utf8_layout(self) -> None:
        self.assertEqual(utf8_bytes(0x41), b"A")
        self.assertEqual(utf8_bytes(0xE9), "é".encode("utf-8"))
        self.assertEqual(utf8_bytes(0x20AC), b"\xe2\x82\xac")
        self.assertEqual(utf8_bytes(0x1F600), "😀".encode("utf-8"))


if __name__ == "__main__":
    unittest.main()
