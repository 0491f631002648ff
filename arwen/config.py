"""Lexer configuration: which scanners are enabled and how each one behaves."""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from arwen.tokens import KindTag, Location, NumberType, Token, TokenKind

Scanned = tuple[Token, Location]

_HEX_DIGITS = frozenset(string.hexdigits)
_DEC_DIGITS = frozenset(string.digits)


class ConfigError(ValueError):
    """Raised for a malformed lexer configuration string."""


def _iequals(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def _flag(value: Optional[str]) -> bool:
    return value is None or _iequals(value, "true")


def _build_token(source: str, location: Location, length: int, kind: TokenKind) -> Scanned:
    token = Token(kind, source[:length], location)
    after = replace(location, pos=location.pos + length, col=location.col + length)
    return token, after


class Scanner(enum.Enum):
    """The scanners a lexer can run."""

    COMMENT = "Comment"
    IDENTIFIER = "Identifier"
    KEYWORDS = "Keywords"
    NUMBER = "Number"
    QSTRING = "QString"
    WHITESPACE = "Whitespace"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def decode(cls, text: str) -> Optional[Scanner]:
        """Return the scanner whose name equals ``text`` ignoring case, or None."""
        for member in cls:
            if _iequals(member.value, text):
                return member
        return None


@dataclass(frozen=True)
class BlockMarker:
    """The opening and closing markers of a block comment."""

    start: str = ""
    end: str = ""


@dataclass
class CommentConfig:
    """Settings of the comment scanner."""

    on: bool = False
    ignore: bool = False
    hashpling: bool = True
    block_marker: list[BlockMarker] = field(default_factory=list)
    eol_marker: list[str] = field(default_factory=list)

    def configure(self, key: str, value: Optional[str]) -> None:
        if _iequals(key, "marker"):
            if value is None:
                raise ConfigError("Malformed lexer configuration string: 'marker' without value")
            v = value.strip()
            space = v.find(" ")
            if space >= 0:
                self.block_marker.append(BlockMarker(v[:space], v[space + 1:].strip()))
            else:
                self.eol_marker.append(v)
        if _iequals(key, "ignore"):
            self.ignore = _flag(value)

    def scan(self, source: str, location: Location) -> Optional[Scanned]:
        """Scan a comment at the start of ``source``; return the token and the location after it."""
        if location.pos == 0 and self.hashpling and source.startswith("#!"):
            newline = source.find("\n")
            length = newline if newline >= 0 else len(source)
            token, after = _build_token(source, location, length, TokenKind(KindTag.COMMENT, "#!"))
            return token, replace(after, line=1, col=0)
        for marker in self.eol_marker:
            if source.startswith(marker):
                newline = source.find("\n")
                length = newline if newline >= 0 else len(source)
                kind = TokenKind(KindTag.COMMENT, source[:length])
                token, after = _build_token(source, location, length, kind)
                return token, replace(after, line=after.line + 1, col=0)
        for block in self.block_marker:
            if source.startswith(block.start):
                end = source.find(block.end)
                length = end if end >= 0 else len(source)
                kind = TokenKind(KindTag.COMMENT, source[:length])
                token, after = _build_token(source, location, length, kind)
                body = source[:length]
                newlines = body.count("\n")
                if newlines > 0:
                    last = body.rfind("\n")
                    after = replace(after, line=after.line + newlines, col=length - last)
                return token, after
        return None


@dataclass
class IdentifierConfig:
    """Settings of the identifier scanner."""

    on: bool = False

    def configure(self, key: str, value: Optional[str]) -> None:
        """The identifier scanner takes no settings."""


class MatchResult(enum.Enum):
    """How a piece of text relates to the configured keywords."""

    NO_MATCH = enum.auto()
    EXACT_MATCH = enum.auto()
    PREFIX = enum.auto()
    PREFIX_AND_EXACT = enum.auto()
    MATCH_LOST = enum.auto()


@dataclass
class KeywordsConfig:
    """Settings of the keyword scanner and the set of keywords."""

    on: bool = True
    keywords: set[str] = field(default_factory=set)

    def has(self, kw: str) -> bool:
        return kw in self.keywords

    def add(self, kw: str) -> None:
        self.keywords.add(kw)

    def add_all(self, keywords: Iterable[str]) -> None:
        for kw in keywords:
            self.add(kw)

    def match(self, text: str) -> MatchResult:
        """Classify ``text`` as a keyword, a keyword prefix, both, or past any keyword."""
        prefix_matches = 0
        lost_matches = 0
        matched = False
        for kw in self.keywords:
            if text == kw:
                matched = True
            elif len(text) < len(kw):
                if kw.startswith(text):
                    prefix_matches += 1
            elif text.startswith(kw):
                lost_matches += 1
        if matched:
            return MatchResult.PREFIX_AND_EXACT if prefix_matches else MatchResult.EXACT_MATCH
        if prefix_matches:
            return MatchResult.PREFIX
        if lost_matches:
            return MatchResult.MATCH_LOST
        return MatchResult.NO_MATCH

    def configure(self, key: str, value: Optional[str]) -> None:
        if _iequals(key, "kw") and value is not None:
            self.keywords.add(value.strip())


@dataclass
class NumberConfig:
    """Settings of the number scanner."""

    on: bool = False
    signed_numbers: bool = False
    decimal: bool = False
    binary: bool = False
    hex: bool = False

    def scan(self, source: str, location: Location) -> Optional[Scanned]:
        """Scan a number at the start of ``source``; return the token and the location after it."""
        number_type = NumberType.INT
        p = 0
        size = len(source)
        if source and source[0] in "+-":
            if not self.signed_numbers:
                return None
            p = 1
        digit_found = False
        if p < size and source[p] == "0":
            p += 1
            if p < size and source[p] in "xX":
                if not self.hex:
                    return _build_token(source, location, p, TokenKind(KindTag.NUMBER, NumberType.INT))
                p += 1
                number_type = NumberType.HEX
            elif p < size and source[p] in "bB":
                if not self.binary:
                    return _build_token(source, location, p, TokenKind(KindTag.NUMBER, NumberType.INT))
                p += 1
                number_type = NumberType.BINARY
            else:
                digit_found = True
        if number_type == NumberType.BINARY:
            digits = frozenset("01")
        elif number_type == NumberType.HEX:
            digits = _HEX_DIGITS
        else:
            digits = _DEC_DIGITS
        while p < size and source[p] in digits:
            digit_found = True
            p += 1
        if self.decimal and p < size and number_type == NumberType.INT and source[p] == ".":
            p += 1
            number_type = NumberType.FLOAT
            while p < size and source[p] in _DEC_DIGITS:
                digit_found = True
                p += 1
        if digit_found:
            return _build_token(source, location, p, TokenKind(KindTag.NUMBER, number_type))
        return None

    def configure(self, key: str, value: Optional[str]) -> None:
        if _iequals(key, "signed") or _iequals(key, "signed_numbers"):
            self.signed_numbers = _flag(value)
        if _iequals(key, "decimal") or _iequals(key, "float"):
            self.decimal = _flag(value)
        if _iequals(key, "binary") or _iequals(key, "base2"):
            self.binary = _flag(value)
        if _iequals(key, "hex") or _iequals(key, "base16"):
            self.hex = _flag(value)


@dataclass
class QStringConfig:
    """Settings of the quoted string scanner."""

    on: bool = False
    quotes: str = "\"'`"

    def configure(self, key: str, value: Optional[str]) -> None:
        if _iequals(key, "quotes"):
            if value is None:
                raise ConfigError("Malformed lexer configuration string: 'quotes' without value")
            self.quotes = value


@dataclass
class WhitespaceConfig:
    """Settings of the whitespace scanner."""

    on: bool = False
    ignore_ws: bool = False
    ignore_nl: bool = False

    def configure(self, key: str, value: Optional[str]) -> None:
        if _iequals(key, "ignore_ws"):
            self.ignore_ws = _flag(value)
        if _iequals(key, "ignore_nl"):
            self.ignore_nl = _flag(value)
        if _iequals(key, "ignoreall"):
            self.ignore_nl = self.ignore_ws = _flag(value)


@dataclass
class Config:
    """The complete lexer configuration, one section per scanner."""

    comment: CommentConfig = field(default_factory=CommentConfig)
    identifier: IdentifierConfig = field(default_factory=IdentifierConfig)
    keywords: KeywordsConfig = field(default_factory=KeywordsConfig)
    number: NumberConfig = field(default_factory=NumberConfig)
    qstring: QStringConfig = field(default_factory=QStringConfig)
    whitespace: WhitespaceConfig = field(default_factory=WhitespaceConfig)

    def section(self, scanner: Scanner):
        """Return the settings object of ``scanner``."""
        return {
            Scanner.COMMENT: self.comment,
            Scanner.IDENTIFIER: self.identifier,
            Scanner.KEYWORDS: self.keywords,
            Scanner.NUMBER: self.number,
            Scanner.QSTRING: self.qstring,
            Scanner.WHITESPACE: self.whitespace,
        }[scanner]

    def configure(self, scanner: str, scanner_config: Optional[str] = None) -> None:
        """Enable ``scanner`` and apply settings written as ``key=value;flag;...``."""
        decoded = Scanner.decode(scanner)
        if decoded is None:
            raise ConfigError(f"Malformed lexer configuration string: Unknown scanner '{scanner}'")
        section = self.section(decoded)
        section.on = True
        if not scanner_config:
            return
        rest = scanner_config
        while rest:
            cut = min((ix for ix in (rest.find("="), rest.find(";")) if ix >= 0), default=len(rest))
            was_eq = cut < len(rest) and rest[cut] == "="
            key = rest[:cut].strip()
            rest = rest[cut + 1:]
            value: Optional[str] = None
            if was_eq:
                semi = rest.find(";")
                if semi < 0:
                    semi = len(rest)
                value = rest[:semi].strip()
                rest = rest[semi + 1:]
            section.configure(key, value)