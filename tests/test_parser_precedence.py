from __future__ import annotations

import unittest

from zx.ast import Branch, Leaf
from zx.operators import BINARY_OPS, OPERATORS, UNARY_OPS, Assoc, Opcode
from zx.parser import ParseError, parse
from zx.values import Value


def _n(value: int) -> Leaf:
    return Leaf(Value.integer(value))


def _bin(lexeme: str, left, right) -> Branch:
    return Branch(BINARY_OPS[lexeme.encode()], left, right)


def _un(lexeme: str, operand) -> Branch:
    return Branch(UNARY_OPS[lexeme.encode()], operand)


class OperatorTableTests(unittest.TestCase):
    def test_table_shape(self) -> None:
        self.assertEqual(len(OPERATORS), 21)
        self.assertEqual({op.opcode for op in OPERATORS}, set(Opcode))
        self.assertEqual(len(UNARY_OPS) + len(BINARY_OPS), 21)

    def test_minus_and_plus_live_in_both_namespaces(self) -> None:
        self.assertEqual(BINARY_OPS[b"-"].opcode, Opcode.SUB)
        self.assertEqual(UNARY_OPS[b"-"].opcode, Opcode.NEG)
        self.assertEqual(BINARY_OPS[b"+"].prec, 4)
        self.assertEqual(UNARY_OPS[b"+"].prec, 5)

    def test_right_operand_precedence(self) -> None:
        self.assertEqual(BINARY_OPS[b"-"].right_prec, 5)
        self.assertEqual(BINARY_OPS[b"**"].assoc, Assoc.RIGHT)
        self.assertEqual(BINARY_OPS[b"**"].right_prec, 7)


class ParserPrecedenceTests(unittest.TestCase):
    def test_higher_precedence_binds_tighter(self) -> None:
        self.assertEqual(parse("1 + 2 * 3"), _bin("+", _n(1), _bin("*", _n(2), _n(3))))
        self.assertEqual(parse("1 | 2 ^ 3 & 4"), _bin("|", _n(1), _bin("^", _n(2), _bin("&", _n(3), _n(4)))))
        self.assertEqual(parse("1 << 2 + 3"), _bin("<<", _n(1), _bin("+", _n(2), _n(3))))

    def test_lower_precedence_after_higher(self) -> None:
        self.assertEqual(parse("2 * 3 + 1"), _bin("+", _bin("*", _n(2), _n(3)), _n(1)))

    def test_left_associative_operators_bracket_left_to_right(self) -> None:
        self.assertEqual(parse("1 - 2 - 3"), _bin("-", _bin("-", _n(1), _n(2)), _n(3)))
        self.assertEqual(parse("8 / 4 % 3"), _bin("%", _bin("/", _n(8), _n(4)), _n(3)))
        self.assertEqual(parse("1 << 2 >> 3"), _bin(">>", _bin("<<", _n(1), _n(2)), _n(3)))

    def test_power_is_right_associative(self) -> None:
        self.assertEqual(parse("2 ** 3 ** 2"), _bin("**", _n(2), _bin("**", _n(3), _n(2))))

    def test_function_keywords_bind_tighter_than_power(self) -> None:
        self.assertEqual(parse("sqrt 2 ** 2"), _bin("**", _un("sqrt", _n(2)), _n(2)))

    def test_unary_minus_takes_a_power_operand(self) -> None:
        self.assertEqual(parse("-2 ** 2"), _un("-", _bin("**", _n(2), _n(2))))
        self.assertEqual(parse("-1 + 2"), _bin("+", _un("-", _n(1)), _n(2)))

    def test_binary_minus_followed_by_unary_minus(self) -> None:
        self.assertEqual(parse("5 - -3"), _bin("-", _n(5), _un("-", _n(3))))
        self.assertEqual(parse("5--3"), _bin("-", _n(5), _un("-", _n(3))))

    def test_nested_unary_operators(self) -> None:
        self.assertEqual(parse("~-1"), _un("~", _un("-", _n(1))))
        self.assertEqual(parse("floor ceil 1"), _un("floor", _un("ceil", _n(1))))

    def test_parentheses_reset_precedence(self) -> None:
        self.assertEqual(parse("(1 + 2) * 3"), _bin("*", _bin("+", _n(1), _n(2)), _n(3)))
        self.assertEqual(parse(" ( ( 7 ) ) "), _n(7))

    def test_char_literal_is_a_leaf(self) -> None:
        self.assertEqual(parse("'a' + 1"), _bin("+", _n(97), _n(1)))

    def test_previous_result_is_captured_at_parse_time(self) -> None:
        prev = Value.integer(41)
        self.assertEqual(parse("$ + 1", prev), _bin("+", Leaf(prev), _n(1)))
        self.assertEqual(parse("$"), Leaf(Value.zero()))


class ParserErrorTests(unittest.TestCase):
    def _error(self, source: str) -> ParseError:
        with self.assertRaises(ParseError) as ctx:
            parse(source)
        return ctx.exception

    def test_error_messages(self) -> None:
        cases = {
            "": "Unexpected end",
            "   ": "Unexpected end",
            "1 +": "Unexpected end",
            "-": "Unexpected end",
            "(1": "Expected ')'",
            "(1 + 2": "Expected ')'",
            "1 2": "Expected operator",
            "1 )": "Expected operator",
            "2 sqrt 3": "Expected operator",
            "pizza": "Expected operator",
            "5e": "Expected operator",
            "#": "Unknown '#'",
            "1 + x": "Unknown 'x'",
            "*3": "Unknown '*'",
        }
        for source, message in cases.items():
            with self.subTest(source=source):
                self.assertEqual(self._error(source).message, message)

    def test_error_offsets(self) -> None:
        self.assertEqual(self._error("(1").start, 2)
        self.assertEqual(self._error("1 + x").start, 4)
        err = self._error("1 2")
        self.assertEqual((err.start, err.end), (2, 3))


if __name__ == "__main__":
    unittest.main()
