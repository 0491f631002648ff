"""Context-free grammars: rules, first and follow sets, LL(1) checks and parse tables."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Iterable, Optional

from arwen.config import Config
from arwen.symbols import (
    EMPTY,
    GrammarError,
    GrammarErrorKind,
    Sequence,
    Symbol,
    SymbolType,
    firsts,
)


def _iequals(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def _split_setting(value: str) -> tuple[str, str]:
    key, colon, rest = value.partition(":")
    if not colon:
        return key.strip(), ""
    return key.strip(), rest.strip()


def _format_set(symbols: Iterable[Symbol]) -> str:
    return "{ " + ", ".join(str(sym) for sym in sorted(symbols)) + " }"


@dataclass
class _ResolverSettings:
    """Where parser actions are looked up: a name prefix and a library."""

    prefix: str = ""
    lib: str = ""


@dataclass(eq=False)
class Rule:
    """All alternatives for one non-terminal, with its analysis results."""

    grammar: Grammar = field(repr=False)
    non_terminal: str
    sequences: list[Sequence] = field(default_factory=list)
    parse_table: dict[Symbol, int] = field(default_factory=dict)
    firsts: set[Symbol] = field(default_factory=set)
    follows: set[Symbol] = field(default_factory=set)
    firsts_in_progress: bool = False
    follows_in_progress: bool = False

    def add_sequence(self, *args: object) -> Sequence:
        """Append an alternative made of ``args`` and return it."""
        seq = Sequence(self.grammar)
        seq.add_symbols(*args)
        self.sequences.append(seq)
        return seq

    def update_firsts(self) -> int:
        """Grow this rule's first set from its sequences; return how much changed."""
        if self.firsts_in_progress:
            return 0
        self.firsts_in_progress = True
        count = 0
        for seq in self.sequences:
            count += seq.build_firsts()
            size = len(self.firsts)
            self.firsts |= seq.firsts
            count += len(self.firsts) - size
        if not self.firsts:
            self.firsts.add(EMPTY)
            count += 1
        return count

    def update_follows(self) -> int:
        """Grow the follow sets of the non-terminals this rule uses; return how much changed."""
        if self.follows_in_progress:
            return 0
        self.follows_in_progress = True
        count = 0
        for seq in self.sequences:
            for ix, symbol in enumerate(seq.symbols):
                if symbol.type != SymbolType.NON_TERMINAL:
                    continue
                name = symbol.non_terminal
                target = self.grammar.rules.get(name)
                if target is None:
                    message = f"build_follows(): rule for non-terminal '{name}' not found"
                    print(message + "\n", file=sys.stderr)
                    raise GrammarError(GrammarErrorKind.RULE_NOT_FOUND, message)
                following: set[Symbol] = set()
                firsts(seq.symbols, ix + 1, self.grammar, following)
                if EMPTY in following:
                    size = len(target.follows)
                    target.follows |= set(self.follows)
                    count += len(target.follows) - size
                    following.discard(EMPTY)
                size = len(target.follows)
                target.follows |= following
                count += len(target.follows) - size
        return count

    def check_LL1(self) -> None:
        """Raise ``GrammarError`` unless this rule's alternatives can be chosen by one token."""
        has_empty = False
        for i, seq in enumerate(self.sequences):
            j = seq.check_LL1(seq.firsts, self.sequences[i + 1:], i + 1)
            if j is not None:
                message = (
                    f"LL1 check: first sets {i} ({_format_set(seq.firsts)}) and {j} "
                    f"({_format_set(self.sequences[j].firsts)}) of non-terminal "
                    f"'{self.non_terminal}' are not disjoint"
                )
                print(message + "\n", file=sys.stderr)
                raise GrammarError(GrammarErrorKind.GRAMMAR_NOT_LL1, message)
            if len(self.sequences) > 1 and EMPTY in seq.firsts:
                if has_empty:
                    message = (
                        f"LL1 check: non-terminal '{self.non_terminal}' has more than one "
                        "sequence deriving the Empty symbol"
                    )
                    print(message + "\n", file=sys.stderr)
                    raise GrammarError(GrammarErrorKind.GRAMMAR_NOT_LL1, message)
                has_empty = True
                if seq.firsts & self.follows:
                    message = (
                        f"LL1 check: follow set and first set {i} of non-terminal "
                        f"'{self.non_terminal}' are not disjoint"
                    )
                    print(message + "\n", file=sys.stderr)
                    raise GrammarError(GrammarErrorKind.GRAMMAR_NOT_LL1, message)

    def add_transition(self, symbol: Symbol, ix: int) -> None:
        """Map ``symbol`` to alternative ``ix``; the empty symbol maps the follow set instead."""
        if symbol.type == SymbolType.EMPTY:
            for follow in sorted(self.follows):
                self.add_transition(follow, ix)
        else:
            self.parse_table.setdefault(symbol, ix)

    def build_parse_table(self) -> None:
        """Fill the parse table from the first sets of the alternatives."""
        for ix, seq in enumerate(self.sequences):
            for symbol in sorted(seq.firsts):
                self.add_transition(symbol, ix)

    def dump_parse_table(self) -> None:
        """Print one line per parse table entry."""
        for symbol in sorted(self.parse_table):
            print(f"{self.non_terminal}: {symbol} => {self.sequences[self.parse_table[symbol]]}")

    def __str__(self) -> str:
        return f"{self.non_terminal} :=" + "|".join(f"{seq} " for seq in self.sequences)


@dataclass(eq=False)
class Grammar:
    """A set of rules keyed by non-terminal, plus lexer and parser settings."""

    lexer: Config = field(default_factory=Config)
    resolver: _ResolverSettings = field(default_factory=_ResolverSettings)
    rules: dict[str, Rule] = field(default_factory=dict)
    entry_point: Optional[str] = None
    parser_config: dict[str, str] = field(default_factory=dict)
    build_func: Optional[str] = None

    def _sorted_rules(self) -> list[Rule]:
        return [self.rules[name] for name in sorted(self.rules)]

    def add_rule(self, non_terminal: str, *args: object) -> Rule:
        """Return the rule for ``non_terminal``, creating it; ``args`` become a new alternative."""
        rule = self.rules.setdefault(non_terminal, Rule(self, non_terminal))
        if args:
            rule.add_sequence(*args)
        return rule

    def configure(self, name: str, value: str) -> None:
        """Apply one ``name: value`` setting from a grammar's configuration section."""
        if _iequals(name, "prefix"):
            self.resolver.prefix = value
        if _iequals(name, "library"):
            self.resolver.lib = value
        if _iequals(name, "lexer"):
            key, setting = _split_setting(value)
            self.lexer.configure(key, setting)
        if _iequals(name, "parser"):
            key, setting = _split_setting(value)
            self.parser_config.setdefault(key, setting)

    def _reset(self, flag: str) -> None:
        for rule in self.rules.values():
            setattr(rule, flag, False)

    def build_firsts(self) -> None:
        """Compute the first sets of all rules until nothing changes."""
        try:
            while True:
                self._reset("firsts_in_progress")
                count = sum(rule.update_firsts() for rule in self._sorted_rules())
                if count <= 0:
                    break
        finally:
            self._reset("firsts_in_progress")

    def build_follows(self) -> None:
        """Compute the follow sets of all rules until nothing changes."""
        if self.entry_point is not None and self.entry_point in self.rules:
            self.rules[self.entry_point].follows.add(Symbol.end())
        try:
            while True:
                self._reset("follows_in_progress")
                count = sum(rule.update_follows() for rule in self._sorted_rules())
                if count == 0:
                    break
        finally:
            self._reset("follows_in_progress")

    def analyze(self) -> None:
        """Compute first and follow sets and check that the grammar is LL(1)."""
        self.build_firsts()
        self.build_follows()
        self.check_LL1()

    def check_LL1(self) -> None:
        """Raise ``GrammarError`` if any rule violates the LL(1) conditions."""
        for rule in self._sorted_rules():
            rule.check_LL1()

    def build_parse_table(self) -> None:
        """Analyse the grammar and fill every rule's parse table."""
        self.analyze()
        for rule in self._sorted_rules():
            rule.build_parse_table()

    def dump_parse_table(self) -> None:
        """Print the parse tables of all rules."""
        for rule in self._sorted_rules():
            rule.dump_parse_table()

    def dump(self) -> None:
        """Print every rule with its alternatives, first and follow sets and parse table."""
        for rule in self._sorted_rules():
            print(f"\n{rule.non_terminal} :=")
            for seq in rule.sequences:
                print(f"    {seq} {_format_set(seq.firsts)} ")
            print(f"firsts {_format_set(rule.firsts)} follows {_format_set(rule.follows)}")
            print("Parse table:")
            rule.dump_parse_table()
        print("")

    def __str__(self) -> str:
        return "".join(f"{rule}\n" for rule in self._sorted_rules())