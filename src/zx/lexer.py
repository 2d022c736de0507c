"""Byte reader and terminator-driven tokenizer."""

from __future__ import annotations

from dataclasses import dataclass

from .operators import TERMINATORS

_WHITESPACE = frozenset(b" \t\n\v\f\r")


class ParseError(SyntaxError):
    def __init__(self, message: str, start: int, end: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = start if end is None else end

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Token:
    text: bytes
    pos: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.pos

    def __bool__(self) -> bool:
        return self.end > self.pos

    def startswith(self, prefix: bytes) -> bool:
        return self.text.startswith(prefix)


@dataclass
class Reader:
    """Cursor over the UTF-8 bytes of one expression."""

    source: bytes
    pos: int = 0
    end: int = -1

    def __post_init__(self) -> None:
        if self.end < 0:
            self.end = len(self.source)

    @classmethod
    def from_text(cls, expression: str | bytes) -> "Reader":
        if isinstance(expression, str):
            expression = expression.encode("utf-8")
        return cls(bytes(expression))

    @property
    def at_end(self) -> bool:
        return self.pos >= self.end

    def peek(self, offset: int = 0) -> int | None:
        """Byte at ``pos + offset``, or None past the end."""
        i = self.pos + offset
        if i < self.end:
            return self.source[i]
        return None

    def startswith(self, prefix: bytes) -> bool:
        return self.source.startswith(prefix, self.pos, self.end)

    def skip_whitespace(self) -> None:
        while self.pos < self.end and self.source[self.pos] in _WHITESPACE:
            self.pos += 1


def next_token(reader: Reader) -> Token:
    """Peek the next lexeme.

    Leading whitespace is skipped (the cursor moves past it) but the token
    itself is left in place for ``consume``. The earliest terminator wins;
    ties go to the longest lexeme. Text before that terminator, or the whole
    remainder when there is none, is returned as a single run.
    """
    reader.skip_whitespace()
    start = reader.pos
    if reader.at_end:
        return Token(b"", start, start)

    best_pos = -1
    best_len = 0
    for lexeme in TERMINATORS:
        found = reader.source.find(lexeme, start, reader.end)
        if found < 0:
            continue
        if best_pos < 0 or found < best_pos:
            best_pos = found
            best_len = len(lexeme)
        elif found == best_pos and len(lexeme) > best_len:
            best_len = len(lexeme)

    if best_pos < 0:
        end = reader.end
    elif best_pos == start:
        end = start + best_len
    else:
        end = best_pos
    return Token(reader.source[start:end], start, end)


def consume(reader: Reader, token: Token) -> None:
    reader.pos = token.end


def expect(reader: Reader, expected: bytes) -> None:
    """Consume ``expected`` at the cursor; whitespace is not skipped."""
    if not reader.startswith(expected):
        raise ParseError(f"Expected '{expected.decode('ascii')}'", reader.pos)
    reader.pos += len(expected)


def tokenize(expression: str | bytes) -> list[Token]:
    """Split ``expression`` into the lexemes the parser would see, in order."""
    reader = Reader.from_text(expression)
    tokens: list[Token] = []
    while True:
        token = next_token(reader)
        if not token:
            return tokens
        tokens.append(token)
        consume(reader, token)
