"""Tokens produced by the lexer: their kinds, source locations and values."""

from __future__ import annotations

import enum
import functools
import math
import re
from dataclasses import dataclass, field
from typing import Optional, Union

_FLOAT_PREFIX = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_SPECIAL_FLOAT = re.compile(r"\s*[+-]?(?:inf(?:inity)?|nan)", re.IGNORECASE)
_INT_DIGITS = {2: "01", 10: "0-9", 16: "0-9a-fA-F"}


class ConversionError(ValueError):
    """Raised when a token's text cannot be read as the requested value."""


@dataclass(frozen=True, order=True)
class Location:
    """A position in a named buffer; only buffer and offset take part in comparisons."""

    buffer: str = ""
    pos: int = 0
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"{self.buffer}:{self.line + 1}:{self.col + 1}:"


class _LabelledEnum(enum.IntEnum):
    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __str__(self) -> str:
        return self.label


def _decode_label(members, text: str):
    wanted = text.lower()
    for member in members:
        if member.label.lower() == wanted:
            return member
    return None


class KindTag(_LabelledEnum):
    """The broad category of a token."""

    NULL = 0
    COMMENT = 1
    EOF = 2
    IDENTIFIER = 3
    KEYWORD = 4
    NEWLINE = 5
    NUMBER = 6
    STRING = 7
    SYMBOL = 8
    WHITESPACE = 9

    @classmethod
    def decode(cls, text: str) -> Optional["KindTag"]:
        """Return the tag whose label equals ``text`` ignoring case, or None."""
        return _decode_label(cls, text)


class NumberType(_LabelledEnum):
    """The notation of a number token."""

    BINARY = 0
    FLOAT = 1
    HEX = 2
    INT = 3

    @classmethod
    def decode(cls, text: str) -> Optional["NumberType"]:
        """Return the notation whose label equals ``text`` ignoring case, or None."""
        return _decode_label(cls, text)


TokenValue = Union[None, str, NumberType]


@functools.total_ordering
@dataclass(frozen=True)
class TokenKind:
    """A kind tag together with the payload some tags carry.

    Comment carries its marker, Keyword the keyword, Number its notation,
    String the quote character and Symbol the symbol character.
    """

    tag: KindTag = KindTag.NULL
    value: TokenValue = None

    def _key(self) -> tuple:
        present = self.value is not None
        return (int(self.tag), present, self.value if present else 0)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TokenKind):
            return NotImplemented
        return self._key() < other._key()

    def _payload(self, tag: KindTag):
        if self.tag != tag:
            raise ValueError(f"token kind {self.tag.label} is not {tag.label}")
        return self.value

    @property
    def symbol(self) -> str:
        return self._payload(KindTag.SYMBOL)

    @property
    def quote(self) -> str:
        return self._payload(KindTag.STRING)

    @property
    def keyword(self) -> str:
        return self._payload(KindTag.KEYWORD)

    @property
    def comment_marker(self) -> str:
        return self._payload(KindTag.COMMENT)

    @property
    def number_type(self) -> NumberType:
        return self._payload(KindTag.NUMBER)

    def __str__(self) -> str:
        if self.tag == KindTag.KEYWORD:
            return f'"{self.value}"'
        if self.tag == KindTag.STRING:
            return f"#QString({self.value})"
        if self.tag == KindTag.SYMBOL:
            return f"'{self.value}'"
        if self.tag == KindTag.NUMBER:
            return f"#{self.value.label}"
        return f"#{self.tag.label}"


@dataclass(frozen=True, eq=False)
class Token:
    """A piece of source text with its kind and location.

    Tokens compare by kind and location; the text does not take part.
    """

    kind: TokenKind = field(default_factory=TokenKind)
    text: str = ""
    location: Location = field(default_factory=Location)

    @property
    def tag(self) -> KindTag:
        return self.kind.tag

    def is_kind(self, tag: KindTag) -> bool:
        """Tell whether the token's kind tag is ``tag``."""
        return self.kind.tag == tag

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind == other.kind and self.location == other.location

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        if self.kind != other.kind:
            return self.kind < other.kind
        return self.location < other.location

    def __hash__(self) -> int:
        return hash((self.kind, self.location))

    def as_int(self) -> int:
        """Read the leading integer of a number token in its notation's base."""
        if self.kind.tag != KindTag.NUMBER:
            raise ConversionError(f"token '{self.text}' is not a number")
        text = self.text
        base = 10
        number_type = self.kind.number_type
        if number_type == NumberType.BINARY:
            if len(text) > 2 and text[0] == "0" and text[1] in "bB":
                text = text[2:]
            base = 2
        elif number_type == NumberType.HEX:
            if len(text) > 2 and text[0] == "0" and text[1] in "xX":
                text = text[2:]
            base = 16
        match = re.match(rf"-?[{_INT_DIGITS[base]}]+", text)
        if match is None:
            raise ConversionError(f"token '{self.text}' is not an integer")
        return int(match.group(), base)

    def as_float(self) -> float:
        """Read the leading floating point number of the token's text."""
        match = _FLOAT_PREFIX.match(self.text)
        if match is None:
            raise ConversionError(f"token '{self.text}' is not a floating point number")
        literal = match.group().strip()
        value = float(literal)
        if _SPECIAL_FLOAT.fullmatch(literal) is None:
            if math.isinf(value):
                raise ConversionError(f"token '{self.text}' is out of range")
            mantissa = re.split(r"[eE]", literal)[0]
            if value == 0.0 and any(ch in "123456789" for ch in mantissa):
                raise ConversionError(f"token '{self.text}' is out of range")
        return value

    def __str__(self) -> str:
        return f"{self.text} [{self.kind}]"


def decode_token(text: str) -> Token:
    """Build a token from a ``Tag:value`` description.

    Without a recognised tag the whole text is an identifier. Comments and
    numbers accept ``marker;text`` and ``NumberType;text`` respectively.
    """
    value = text
    tag = KindTag.IDENTIFIER
    colon = text.find(":")
    if colon >= 0:
        value = text[colon + 1:]
        decoded = KindTag.decode(text[:colon])
        if decoded is not None:
            tag = decoded
    if tag in (KindTag.NULL, KindTag.EOF, KindTag.IDENTIFIER, KindTag.NEWLINE, KindTag.WHITESPACE):
        return Token(TokenKind(tag), value)
    if tag == KindTag.COMMENT:
        marker = "//"
        semicolon = value.find(";")
        if semicolon >= 0:
            marker, value = value[:semicolon], value[semicolon + 1:]
        return Token(TokenKind(KindTag.COMMENT, marker), value)
    if tag == KindTag.KEYWORD:
        return Token(TokenKind(KindTag.KEYWORD, value), value)
    if tag == KindTag.NUMBER:
        number_type = NumberType.INT
        semicolon = value.find(";")
        if semicolon >= 0:
            decoded_type = NumberType.decode(value[:semicolon])
            if decoded_type is not None:
                number_type = decoded_type
            value = value[semicolon + 1:]
        return Token(TokenKind(KindTag.NUMBER, number_type), value)
    if tag == KindTag.STRING:
        return Token(TokenKind(KindTag.STRING, value[0] if value else '"'), value)
    if not value:
        raise ConversionError("symbol token description has no symbol")
    return Token(TokenKind(KindTag.SYMBOL, value[0]), value)