import pytest

from arwen.tokens import (
    ConversionError,
    KindTag,
    Location,
    NumberType,
    Token,
    TokenKind,
    decode_token,
)


def number(text, number_type=NumberType.INT):
    return Token(TokenKind(KindTag.NUMBER, number_type), text)


@pytest.mark.parametrize("tag", list(KindTag))
def test_kind_tag_decode_round_trip(tag):
    assert KindTag.decode(tag.label) is tag
    assert KindTag.decode(tag.label.upper()) is tag


def test_kind_tag_values_and_unknown():
    assert int(KindTag.NULL) == 0
    assert int(KindTag.WHITESPACE) == 9
    assert str(KindTag.IDENTIFIER) == "Identifier"
    assert KindTag.decode("bogus") is None


@pytest.mark.parametrize("number_type", list(NumberType))
def test_number_type_decode_round_trip(number_type):
    assert NumberType.decode(number_type.label.lower()) is number_type


def test_number_type_unknown():
    assert NumberType.decode("octal") is None


def test_token_kind_str():
    assert str(TokenKind(KindTag.KEYWORD, "if")) == '"if"'
    assert str(TokenKind(KindTag.STRING, "'")) == "#QString(')"
    assert str(TokenKind(KindTag.SYMBOL, "+")) == "'+'"
    assert str(TokenKind(KindTag.NUMBER, NumberType.HEX)) == "#Hex"
    assert str(TokenKind(KindTag.IDENTIFIER)) == "#Identifier"


def test_token_kind_accessors():
    assert TokenKind(KindTag.SYMBOL, "(").symbol == "("
    assert TokenKind(KindTag.NUMBER, NumberType.FLOAT).number_type is NumberType.FLOAT
    with pytest.raises(ValueError):
        TokenKind(KindTag.IDENTIFIER).symbol


def test_token_kind_ordering_follows_tag():
    kinds = [
        TokenKind(KindTag.SYMBOL, "+"),
        TokenKind(KindTag.IDENTIFIER),
        TokenKind(KindTag.NUMBER, NumberType.INT),
    ]
    assert [k.tag for k in sorted(kinds)] == [KindTag.IDENTIFIER, KindTag.NUMBER, KindTag.SYMBOL]
    assert TokenKind(KindTag.SYMBOL, "+") < TokenKind(KindTag.SYMBOL, "-")


def test_location_comparison_ignores_line_and_col():
    assert Location("a", 5, 1, 2) == Location("a", 5, 7, 8)
    assert Location("a", 5) < Location("a", 6)
    assert Location("a", 9) < Location("b", 0)


def test_location_str():
    assert str(Location("file", 0, 2, 4)) == "file:3:5:"


def test_token_equality_ignores_text():
    kind = TokenKind(KindTag.IDENTIFIER)
    assert Token(kind, "foo", Location("x", 3)) == Token(kind, "bar", Location("x", 3))
    assert Token(kind, "foo", Location("x", 3)) != Token(kind, "foo", Location("x", 4))
    assert hash(Token(kind, "foo")) == hash(Token(kind, "bar"))


def test_token_ordering():
    ident = Token(TokenKind(KindTag.IDENTIFIER), "a", Location("x", 10))
    sym = Token(TokenKind(KindTag.SYMBOL, "+"), "+", Location("x", 0))
    assert ident < sym
    assert Token(TokenKind(KindTag.IDENTIFIER), "a", Location("x", 1)) < ident


def test_token_is_kind_and_str():
    tok = Token(TokenKind(KindTag.SYMBOL, ";"), ";")
    assert tok.is_kind(KindTag.SYMBOL)
    assert not tok.is_kind(KindTag.KEYWORD)
    assert tok.tag is KindTag.SYMBOL
    assert str(tok) == "; [';']"


@pytest.mark.parametrize("value", [0, 7, 255, 123456789])
def test_as_int_round_trips(value):
    assert number(str(value)).as_int() == value
    assert number(hex(value), NumberType.HEX).as_int() == value
    assert number(hex(value).upper().replace("0X", "0x"), NumberType.HEX).as_int() == value
    assert number(bin(value), NumberType.BINARY).as_int() == value


def test_as_int_reads_leading_digits():
    assert number("12.5", NumberType.FLOAT).as_int() == 12
    assert number("-42").as_int() == -42


def test_as_int_errors():
    with pytest.raises(ConversionError):
        Token(TokenKind(KindTag.IDENTIFIER), "12").as_int()
    with pytest.raises(ConversionError):
        number("0xZZ", NumberType.HEX).as_int()
    with pytest.raises(ConversionError):
        number("+5").as_int()


def test_as_float():
    assert number("2.5", NumberType.FLOAT).as_float() == 2.5
    assert number("1e3", NumberType.FLOAT).as_float() == 1e3
    assert number("0.0", NumberType.FLOAT).as_float() == 0.0


def test_as_float_errors():
    with pytest.raises(ConversionError):
        number("abc").as_float()
    with pytest.raises(ConversionError):
        number("1e999", NumberType.FLOAT).as_float()
    with pytest.raises(ConversionError):
        number("1e-999", NumberType.FLOAT).as_float()


def test_decode_token_identifier_default():
    tok = decode_token("hello")
    assert tok.kind == TokenKind(KindTag.IDENTIFIER)
    assert tok.text == "hello"


def test_decode_token_unknown_tag_is_identifier():
    tok = decode_token("weird:value")
    assert tok.kind.tag is KindTag.IDENTIFIER
    assert tok.text == "value"


def test_decode_token_symbol_and_keyword():
    sym = decode_token("symbol:+")
    assert sym.kind.symbol == "+"
    kw = decode_token("Keyword:while")
    assert kw.kind.keyword == "while"
    assert kw.text == "while"


def test_decode_token_number():
    tok = decode_token("Number:hex;0x1F")
    assert tok.kind.number_type is NumberType.HEX
    assert tok.text == "0x1F"
    assert tok.as_int() == int("1F", 16)
    plain = decode_token("number:17")
    assert plain.kind.number_type is NumberType.INT
    assert plain.as_int() == 17


def test_decode_token_comment_and_string():
    comment = decode_token("comment:#;# note")
    assert comment.kind.comment_marker == "#"
    assert comment.text == "# note"
    assert decode_token("comment:text").kind.comment_marker == "//"
    assert decode_token("string:'abc'").kind.quote == "'"
    assert decode_token("string:").kind.quote == '"'


def test_decode_token_empty_symbol_raises():
    with pytest.raises(ConversionError):
        decode_token("symbol:")