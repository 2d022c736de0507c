"""Precedence-climbing parser producing ``Leaf``/``Branch`` trees."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ast import Branch, Expr, Leaf
from .lexer import ParseError, Reader, Token, consume, expect, next_token
from .literals import parse_char, parse_number
from .operators import LPAREN, QUOTE, RPAREN, binary_operator, unary_operator
from .values import Value


@dataclass
class _Parser:
    reader: Reader
    prev: Value = field(default_factory=Value.zero)

    def parse_expression_only(self) -> Expr:
        tree = self._parse(0)
        if not self.reader.at_end:
            raise ParseError("Expected operator", self.reader.pos, self.reader.end)
        return tree

    def _peek(self) -> Token:
        return next_token(self.reader)

    def _parse(self, min_prec: int) -> Expr:
        tree = self._primary()
        token = self._peek()
        while (op := binary_operator(token.text)) is not None and op.prec >= min_prec:
            consume(self.reader, token)
            right = self._parse(op.right_prec)
            tree = Branch(op, tree, right)
            token = self._peek()
        return tree

    def _primary(self) -> Expr:
        token = self._peek()
        if not token:
            raise ParseError("Unexpected end", token.pos)

        op = unary_operator(token.text)
        if op is not None:
            consume(self.reader, token)
            return Branch(op, self._parse(op.prec))

        if token.startswith(LPAREN):
            consume(self.reader, token)
            tree = self._parse(0)
            expect(self.reader, RPAREN)
            return tree

        if token.startswith(QUOTE):
            consume(self.reader, token)
            leaf = Leaf(parse_char(self.reader))
            expect(self.reader, QUOTE)
            return leaf

        return Leaf(parse_number(self.reader, self.prev))


def parse(expression: str | bytes, prev: Value | None = None) -> Expr:
    """Parse one complete expression; ``$`` leaves take the value ``prev``."""
    parser = _Parser(reader=Reader.from_text(expression), prev=Value.zero() if prev is None else prev)
    return parser.parse_expression_only()
