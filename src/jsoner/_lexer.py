"""
Pull-based JSON tokenizer.

Reads a text stream lazily, one chunk at a time, and hands out one token per
`next_token()` call. Tracks character position, line and column so every
error can say where it happened.
"""

from dataclasses import dataclass
from enum import Enum
from typing import IO
from typing import Any

from ._errors import JSONParseError
from ._errors import Position
from ._errors import Problem
from ._profiling import ProfileContext

_CHUNK_SIZE = 8192

_WHITESPACE = frozenset(" \t\n\r")
_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_EXPONENT_MARKERS = frozenset("eE")
_SIGNS = frozenset("+-")

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_LITERALS: dict[str, tuple[str, bool | None]] = {
    "t": ("true", True),
    "f": ("false", False),
    "n": ("null", None),
}


class TokenKind(Enum):
    """Token categories; punctuation kinds carry their source character."""

    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    LEFT_SQUARE = "["
    RIGHT_SQUARE = "]"
    COMMA = ","
    COLON = ":"
    DATUM = "datum"
    END = "end"


_PUNCTUATION = {
    kind.value: kind
    for kind in TokenKind
    if kind not in (TokenKind.DATUM, TokenKind.END)
}


@dataclass(frozen=True)
class JsonToken:
    """
    A lexical unit: punctuation, a scalar datum, or the end marker.

    `value` is only meaningful for DATUM tokens, where it holds the decoded
    None, bool, int, float or str.
    """

    kind: TokenKind
    value: Any = None
    start: Position = 0

    def __str__(self) -> str:
        if self.kind is TokenKind.DATUM:
            return f"DATUM({self.value!r})"
        return f"{self.kind.name}"


class JsonLexer:
    """
    Tokenizes JSON text read from a stream.

    The stream is consumed in `chunk_size` pieces and never closed; whoever
    opened it stays responsible for it.
    """

    def __init__(self, reader: IO[str], chunk_size: int = _CHUNK_SIZE):
        if not hasattr(reader, "read"):
            raise TypeError("reader must have a read() method")

        self.reader = reader
        self.chunk_size = chunk_size
        self.pos: Position = 0
        self.lineno = 1
        self.token_start: Position = 0
        self.token_lineno = 1
        self.token_colno = 1
        self._buffer = ""
        self._index = 0
        self._line_start: Position = 0
        self._exhausted = False

    @property
    def colno(self) -> int:
        return self.pos - self._line_start + 1

    def _fill(self) -> bool:
        """Makes sure an unread character is buffered; False at end of input."""
        if self._index < len(self._buffer):
            return True
        if self._exhausted:
            return False

        chunk = self.reader.read(self.chunk_size)
        if not chunk:
            self._exhausted = True
            self._buffer = ""
            self._index = 0
            return False
        if not isinstance(chunk, str):
            raise TypeError(
                f"the JSON stream must be text, not {type(chunk).__name__}"
            )

        self._buffer = chunk
        self._index = 0
        return True

    def peek(self) -> str:
        """Returns current character without advancing, "" at end of input."""
        return self._buffer[self._index] if self._fill() else ""

    def advance(self) -> str:
        """Returns current character and advances position."""
        char = self.peek()
        if char:
            self._index += 1
            self.pos += 1
            if char == "\n":
                self.lineno += 1
                self._line_start = self.pos
        return char

    def error(
        self, problem: Problem, unexpected: Any = None, *, at_token: bool = False
    ) -> JSONParseError:
        """Builds an error at the current character or the current token."""
        if at_token:
            return JSONParseError(
                problem,
                self.token_start,
                unexpected,
                self.token_lineno,
                self.token_colno,
            )
        return JSONParseError(
            problem, self.pos, unexpected, self.lineno, self.colno
        )

    def _malformed(self, message: str) -> JSONParseError:
        cause = ValueError(message)
        error = self.error(Problem.UNEXPECTED_EXCEPTION, cause)
        error.__cause__ = cause
        return error

    def skip_whitespace(self) -> None:
        while self.peek() in _WHITESPACE:
            self.advance()

    def next_token(self) -> JsonToken:
        """Returns the next token, or an END token once input is exhausted."""
        self.skip_whitespace()

        start = self.pos
        self.token_start = start
        self.token_lineno = self.lineno
        self.token_colno = self.colno

        char = self.peek()
        if not char:
            return JsonToken(TokenKind.END, None, start)

        if char in _PUNCTUATION:
            self.advance()
            return JsonToken(_PUNCTUATION[char], None, start)
        elif char == '"':
            return JsonToken(TokenKind.DATUM, self.scan_string(), start)
        elif char in _DIGITS or char == "-":
            return JsonToken(TokenKind.DATUM, self.scan_number(), start)
        elif char in _LITERALS:
            return JsonToken(TokenKind.DATUM, self.scan_literal(), start)

        raise self.error(Problem.UNEXPECTED_CHARACTER, char)

    def scan_string(self) -> str:
        """Scans a quoted string and decodes its escape sequences."""
        with ProfileContext("scan_string") as profile:
            start = self.pos
            self.advance()

            chars: list[str] = []
            has_surrogates = False
            while True:
                char = self.advance()
                if not char:
                    raise self._malformed(
                        f"Unterminated string starting at {start}"
                    )
                if char == '"':
                    break
                if char == "\\":
                    char = self._scan_escape()
                    if "\ud800" <= char <= "\udfff":
                        has_surrogates = True
                chars.append(char)

            profile.chars = self.pos - start
            text = "".join(chars)
            if has_surrogates:
                # Pair up escaped UTF-16 halves; lone halves survive as-is.
                text = text.encode("utf-16-le", "surrogatepass").decode(
                    "utf-16-le", "surrogatepass"
                )
            return text

    def _scan_escape(self) -> str:
        char = self.advance()
        if char in _ESCAPES:
            return _ESCAPES[char]
        if char == "u":
            hex_digits = "".join(self.advance() for _ in range(4))
            if len(hex_digits) != 4 or not _HEX_DIGITS.issuperset(hex_digits):
                raise self._malformed(
                    f"Invalid unicode escape sequence: \\u{hex_digits}"
                )
            return chr(int(hex_digits, 16))
        if not char:
            raise self._malformed("Incomplete escape sequence")
        raise self._malformed(f"Invalid escape sequence: \\{char}")

    def _scan_integer_part(self, digits: list[str]) -> None:
        if self.peek() not in _DIGITS:
            raise self._malformed("Invalid number: expected digit")

        if self.peek() == "0":
            digits.append(self.advance())
        else:
            while self.peek() in _DIGITS:
                digits.append(self.advance())

    def _scan_decimal_part(self, digits: list[str]) -> bool:
        if self.peek() != ".":
            return False
        digits.append(self.advance())
        if self.peek() not in _DIGITS:
            raise self._malformed("Invalid number: expected fraction digits")
        while self.peek() in _DIGITS:
            digits.append(self.advance())
        return True

    def _scan_exponent_part(self, digits: list[str]) -> bool:
        if self.peek() not in _EXPONENT_MARKERS:
            return False
        digits.append(self.advance())
        if self.peek() in _SIGNS:
            digits.append(self.advance())
        if self.peek() not in _DIGITS:
            raise self._malformed("Invalid number: expected exponent digits")
        while self.peek() in _DIGITS:
            digits.append(self.advance())
        return True

    def scan_number(self) -> int | float:
        """Scans a number; int unless it has a fraction or an exponent."""
        with ProfileContext("scan_number") as profile:
            start = self.pos
            digits: list[str] = []
            if self.peek() == "-":
                digits.append(self.advance())

            self._scan_integer_part(digits)
            has_fraction = self._scan_decimal_part(digits)
            has_exponent = self._scan_exponent_part(digits)

            profile.chars = self.pos - start
            text = "".join(digits)
            try:
                if has_fraction or has_exponent:
                    return float(text)
                return int(text)
            except ValueError as exc:
                error = self.error(Problem.UNEXPECTED_EXCEPTION, exc)
                raise error from exc

    def scan_literal(self) -> bool | None:
        """Scans true, false or null."""
        word, value = _LITERALS[self.peek()]
        for expected in word:
            if self.advance() != expected:
                raise self._malformed(f"Invalid literal: expected {word!r}")
        return value
