"""Minimal JSON tokenizer and tree parser tuned for haversine pair input."""

from __future__ import annotations

import enum
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass, field
from itertools import islice

from pairprof.profiler import Profiler

_WHITESPACE = frozenset(b" \t\n\r")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_MINUS = ord("-")
_PLUS = ord("+")
_ZERO = ord("0")
_DOT = ord(".")
_EXPONENT = frozenset(b"eE")
_NUMBER_START = frozenset(b"-0123456789")


class TokenType(enum.Enum):
    """Kinds of token produced by the tokenizer."""

    END_OF_STREAM = enum.auto()
    ERROR = enum.auto()
    OPEN_BRACE = enum.auto()
    OPEN_BRACKET = enum.auto()
    CLOSE_BRACE = enum.auto()
    CLOSE_BRACKET = enum.auto()
    COMMA = enum.auto()
    COLON = enum.auto()
    STRING_LITERAL = enum.auto()
    NUMBER = enum.auto()
    TRUE = enum.auto()
    FALSE = enum.auto()
    NULL = enum.auto()


_PUNCTUATION = {
    ord("{"): TokenType.OPEN_BRACE,
    ord("["): TokenType.OPEN_BRACKET,
    ord("}"): TokenType.CLOSE_BRACE,
    ord("]"): TokenType.CLOSE_BRACKET,
    ord(","): TokenType.COMMA,
    ord(":"): TokenType.COLON,
}

_KEYWORDS = {
    ord("f"): (b"alse", TokenType.FALSE),
    ord("n"): (b"ull", TokenType.NULL),
    ord("t"): (b"rue", TokenType.TRUE),
}

_SCALARS = frozenset(
    {
        TokenType.STRING_LITERAL,
        TokenType.TRUE,
        TokenType.FALSE,
        TokenType.NULL,
        TokenType.NUMBER,
    }
)


@dataclass(frozen=True)
class Token:
    """A token and the raw bytes it covers."""

    type: TokenType
    value: bytes = b""


@dataclass
class Element:
    """A node of the parsed tree: an optional label, its raw value and children."""

    label: bytes
    value: bytes
    children: list[Element] = field(default_factory=list)


@dataclass(frozen=True)
class HaversinePair:
    """Two points given as (x, y) coordinates in degrees."""

    x0: float
    y0: float
    x1: float
    y1: float


class JSONParseError(ValueError):
    """Raised when the input holds a token the parser did not expect."""

    def __init__(self, token: Token, message: str) -> None:
        text = token.value.decode("utf-8", errors="replace")
        super().__init__(f'"{text}" - {message}')
        self.token = token
        self.message = message


class JSONParser:
    """Turns a byte string into a tree of :class:`Element` nodes."""

    def __init__(self, source: bytes | bytearray | memoryview | str) -> None:
        if isinstance(source, str):
            source = source.encode("utf-8")
        self.source = bytes(source)
        self.at = 0

    def _is_parsing(self) -> bool:
        return self.at < len(self.source)

    def next_token(self) -> Token:
        """Read the next token, advancing the position past it."""
        src = self.source
        n = len(src)
        at = self.at
        while at < n and src[at] in _WHITESPACE:
            at += 1

        if at >= n:
            self.at = at
            return Token(TokenType.END_OF_STREAM)

        start = at
        ch = src[at]
        at += 1
        token_type = TokenType.ERROR
        value = src[start:at]

        if ch in _PUNCTUATION:
            token_type = _PUNCTUATION[ch]
        elif ch in _KEYWORDS:
            rest, keyword_type = _KEYWORDS[ch]
            if src.startswith(rest, at):
                at += len(rest)
                token_type = keyword_type
                value = src[start:at]
        elif ch == _QUOTE:
            token_type = TokenType.STRING_LITERAL
            string_start = at
            while at < n and src[at] != _QUOTE:
                if src[at] == _BACKSLASH and at + 1 < n and src[at + 1] == _QUOTE:
                    at += 1
                at += 1
            value = src[string_start:at]
            if at < n:
                at += 1
        elif ch in _NUMBER_START:
            token_type = TokenType.NUMBER
            if ch == _MINUS and at < n:
                ch = src[at]
                at += 1
            if ch != _ZERO:
                at = _skip_digits(src, at)
            if at < n and src[at] == _DOT:
                at = _skip_digits(src, at + 1)
            if at < n and src[at] in _EXPONENT:
                at += 1
                if at < n and src[at] in (_PLUS, _MINUS):
                    at += 1
                at = _skip_digits(src, at)
            value = src[start:at]

        self.at = at
        return Token(token_type, value)

    def parse(self) -> Element | None:
        """Parse one value from the source; ``None`` if it does not start one."""
        return self._element(b"", self.next_token())

    def _element(self, label: bytes, token: Token) -> Element | None:
        if token.type is TokenType.OPEN_BRACKET:
            children = self._list(TokenType.CLOSE_BRACKET, has_labels=False)
        elif token.type is TokenType.OPEN_BRACE:
            children = self._list(TokenType.CLOSE_BRACE, has_labels=True)
        elif token.type in _SCALARS:
            children = []
        else:
            return None
        return Element(label, token.value, children)

    def _list(self, end: TokenType, has_labels: bool) -> list[Element]:
        children: list[Element] = []
        while self._is_parsing():
            label = b""
            value = self.next_token()
            if has_labels:
                if value.type is TokenType.STRING_LITERAL:
                    label = value.value
                    colon = self.next_token()
                    if colon.type is not TokenType.COLON:
                        raise JSONParseError(colon, "Expected colon after field name")
                    value = self.next_token()
                elif value.type is not end:
                    raise JSONParseError(value, "Unexpected token in JSON")

            element = self._element(label, value)
            if element is not None:
                children.append(element)
            elif value.type is end:
                break
            else:
                raise JSONParseError(value, "Unexpected token in JSON")

            comma = self.next_token()
            if comma.type is end:
                break
            if comma.type is not TokenType.COMMA:
                raise JSONParseError(comma, "Unexpected token in JSON")
        return children


def _skip_digits(src: bytes, at: int) -> int:
    while at < len(src) and 0 <= src[at] - _ZERO < 10:
        at += 1
    return at


def _timed(profiler: Profiler | None, label: str) -> AbstractContextManager:
    return profiler.block(label) if profiler is not None else nullcontext()


def _as_bytes(name: bytes | str) -> bytes:
    return name.encode("utf-8") if isinstance(name, str) else name


def parse_json(
    source: bytes | bytearray | memoryview | str, profiler: Profiler | None = None
) -> Element | None:
    """Parse ``source`` into an element tree."""
    with _timed(profiler, "parse_json"):
        return JSONParser(source).parse()


def lookup_element(obj: Element | None, name: bytes | str) -> Element | None:
    """Return the first child of ``obj`` labelled ``name``."""
    if obj is None:
        return None
    key = _as_bytes(name)
    return next((child for child in obj.children if child.label == key), None)


def _convert_sign(src: bytes, at: int) -> tuple[float, int]:
    if at < len(src) and src[at] == _MINUS:
        return -1.0, at + 1
    return 1.0, at


def _convert_digits(src: bytes, at: int) -> tuple[float, int]:
    result = 0.0
    while at < len(src):
        digit = src[at] - _ZERO
        if not 0 <= digit < 10:
            break
        result = 10.0 * result + digit
        at += 1
    return result, at


def convert_element_to_f64(obj: Element | None, name: bytes | str) -> float:
    """Convert the child ``name`` of ``obj`` to a float; 0.0 if it is missing."""
    element = lookup_element(obj, name)
    if element is None:
        return 0.0

    src = element.value
    n = len(src)
    sign, at = _convert_sign(src, 0)
    number, at = _convert_digits(src, at)

    if at < n and src[at] == _DOT:
        at += 1
        scale = 1.0 / 10.0
        while at < n:
            digit = src[at] - _ZERO
            if not 0 <= digit < 10:
                break
            number = number + scale * digit
            scale *= 1.0 / 10.0
            at += 1

    if at < n and src[at] in _EXPONENT:
        at += 1
        if at < n and src[at] == _PLUS:
            at += 1
        exponent_sign, at = _convert_sign(src, at)
        exponent, at = _convert_digits(src, at)
        number *= pow(10.0, exponent_sign * exponent)

    return sign * number


def parse_haversine_pairs(
    source: bytes | bytearray | memoryview | str,
    max_pair_count: int,
    profiler: Profiler | None = None,
) -> list[HaversinePair]:
    """Read up to ``max_pair_count`` pairs from the ``pairs`` array of ``source``."""
    with _timed(profiler, "parse_haversine_pairs"):
        tree = parse_json(source, profiler)
        pairs_array = lookup_element(tree, b"pairs")
        pairs: list[HaversinePair] = []
        if pairs_array is not None:
            with _timed(profiler, "Lookup and Convert"):
                pairs = [
                    HaversinePair(
                        convert_element_to_f64(element, b"x0"),
                        convert_element_to_f64(element, b"y0"),
                        convert_element_to_f64(element, b"x1"),
                        convert_element_to_f64(element, b"y1"),
                    )
                    for element in islice(pairs_array.children, max(max_pair_count, 0))
                ]
        return pairs