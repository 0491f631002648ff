import pytest

from arwen.grammar import Grammar
from arwen.symbols import EMPTY, GrammarAction, GrammarError, GrammarErrorKind, Symbol
from arwen.tokens import KindTag, NumberType, TokenKind

PLUS = TokenKind(KindTag.SYMBOL, "+")
MINUS = TokenKind(KindTag.SYMBOL, "-")
STAR = TokenKind(KindTag.SYMBOL, "*")
SLASH = TokenKind(KindTag.SYMBOL, "/")
LPAREN = TokenKind(KindTag.SYMBOL, "(")
RPAREN = TokenKind(KindTag.SYMBOL, ")")
INT = TokenKind(KindTag.NUMBER, NumberType.INT)


def t(kind):
    return Symbol.of_terminal(kind)


def build_test_grammar():
    grammar = Grammar()
    grammar.lexer.number.on = True
    grammar.lexer.number.signed_numbers = False
    grammar.entry_point = "E"
    grammar.add_rule("E", "T", "Eopt")
    rule = grammar.add_rule("Eopt", PLUS, "T", "Eopt")
    rule.add_sequence(MINUS, "T", "Eopt")
    rule.add_sequence()
    grammar.add_rule("T", "F", "Topt")
    rule = grammar.add_rule("Topt", STAR, "F", "Topt")
    rule.add_sequence(SLASH, "F", "Topt")
    rule.add_sequence()
    rule = grammar.add_rule("F", INT)
    rule.add_sequence(LPAREN, "E", RPAREN)
    return grammar


def test_build_grammar_with_actions():
    grammar = Grammar()
    grammar.add_rule("program", GrammarAction("init"), "statements", GrammarAction("done"))
    rule = grammar.add_rule("statements", GrammarAction("stmt_start"), "statement",
                            GrammarAction("stmt_end"), "statements")
    rule.add_sequence()
    assert len(grammar.rules["statements"].sequences) == 2
    assert str(grammar.rules["statements"].sequences[1]) == " ε"
    assert grammar.rules["program"].sequences[0].symbols[1] == Symbol.of_non_terminal("statements")


def test_firsts():
    grammar = build_test_grammar()
    grammar.build_firsts()
    assert grammar.rules["E"].firsts == {t(INT), t(LPAREN)}
    assert grammar.rules["T"].firsts == {t(INT), t(LPAREN)}
    assert grammar.rules["Eopt"].firsts == {t(PLUS), t(MINUS), EMPTY}
    assert grammar.rules["Topt"].firsts == {t(STAR), t(SLASH), EMPTY}
    assert all(not r.firsts_in_progress for r in grammar.rules.values())


def test_follows():
    grammar = build_test_grammar()
    grammar.build_firsts()
    grammar.build_follows()
    end = Symbol.end()
    assert grammar.rules["E"].follows == {end, t(RPAREN)}
    assert grammar.rules["Eopt"].follows == {end, t(RPAREN)}
    assert grammar.rules["T"].follows == {t(PLUS), t(MINUS), end, t(RPAREN)}
    assert grammar.rules["F"].follows == {t(STAR), t(SLASH), t(PLUS), t(MINUS), end, t(RPAREN)}
    assert all(EMPTY not in r.follows for r in grammar.rules.values())


def test_analyze_accepts_ll1():
    grammar = build_test_grammar()
    grammar.analyze()
    assert Symbol.end() in grammar.rules["E"].follows


def test_parse_table():
    grammar = build_test_grammar()
    grammar.build_parse_table()
    assert grammar.rules["F"].parse_table == {t(INT): 0, t(LPAREN): 1}
    assert grammar.rules["Eopt"].parse_table == {
        t(PLUS): 0, t(MINUS): 1, Symbol.end(): 2, t(RPAREN): 2,
    }
    assert EMPTY not in grammar.rules["Topt"].parse_table


def test_dump_parse_table(capsys):
    grammar = build_test_grammar()
    grammar.build_parse_table()
    grammar.dump_parse_table()
    lines = capsys.readouterr().out.splitlines()
    assert "F: #Int =>  #Int" in lines
    assert len(lines) == sum(len(r.parse_table) for r in grammar.rules.values())


def test_dump_mentions_rules(capsys):
    grammar = build_test_grammar()
    grammar.build_parse_table()
    grammar.dump()
    out = capsys.readouterr().out
    for name in grammar.rules:
        assert f"{name} :=" in out


def test_str():
    grammar = Grammar()
    grammar.add_rule("A", TokenKind(KindTag.SYMBOL, "x"))
    grammar.rules["A"].add_sequence()
    assert str(grammar.rules["A"]) == "A := 'x' | ε "
    assert str(grammar) == "A := 'x' | ε \n"


def test_add_rule_twice_extends():
    grammar = Grammar()
    first = grammar.add_rule("A", "B")
    second = grammar.add_rule("A", "C")
    assert first is second
    assert len(first.sequences) == 2


def test_rule_without_sequences_derives_empty():
    grammar = Grammar()
    grammar.add_rule("A")
    grammar.build_firsts()
    assert grammar.rules["A"].firsts == {EMPTY}


def test_missing_rule():
    grammar = Grammar()
    grammar.add_rule("A", "Missing")
    with pytest.raises(GrammarError) as info:
        grammar.build_firsts()
    assert info.value.kind == GrammarErrorKind.RULE_NOT_FOUND


def test_missing_rule_in_follows():
    grammar = Grammar()
    grammar.add_rule("A", TokenKind(KindTag.SYMBOL, "a"), "Missing")
    with pytest.raises(GrammarError) as info:
        grammar.build_follows()
    assert info.value.kind == GrammarErrorKind.RULE_NOT_FOUND


def test_not_ll1():
    a = TokenKind(KindTag.SYMBOL, "a")
    b = TokenKind(KindTag.SYMBOL, "b")
    grammar = Grammar(entry_point="A")
    rule = grammar.add_rule("A", a)
    rule.add_sequence(a, b)
    with pytest.raises(GrammarError) as info:
        grammar.build_parse_table()
    assert info.value.kind == GrammarErrorKind.GRAMMAR_NOT_LL1


def test_configure():
    grammar = Grammar()
    grammar.configure("PREFIX", "calc_")
    grammar.configure("library", "libcalc")
    grammar.configure("lexer", "Number: signed")
    grammar.configure("parser", "foo: bar")
    grammar.configure("parser", "foo: baz")
    assert grammar.resolver.prefix == "calc_"
    assert grammar.resolver.lib == "libcalc"
    assert grammar.lexer.number.on is True
    assert grammar.lexer.number.signed_numbers is True
    assert grammar.parser_config == {"foo": "bar"}


def test_configure_lexer_without_settings():
    grammar = Grammar()
    grammar.configure("lexer", "Identifier")
    assert grammar.lexer.identifier.on is True
    assert grammar.lexer.number.on is False