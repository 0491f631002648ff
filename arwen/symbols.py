"""Grammar symbols and sequences, and the computation of first sets."""

from __future__ import annotations

import enum
import functools
import sys
from collections.abc import Iterable, Mapping, MutableSet, Sequence as SequenceABC
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Union

from arwen.tokens import TokenKind


class GrammarErrorKind(enum.Enum):
    """The ways building or analysing a grammar can fail."""

    ACTION_UNRESOLVED = "ActionUnresolved"
    GRAMMAR_NOT_LL1 = "GrammarNotLL1"
    RULE_NOT_FOUND = "RuleNotFound"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def decode(cls, text: str) -> Optional[GrammarErrorKind]:
        """Return the member whose name equals ``text`` ignoring case, or None."""
        wanted = text.lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


class GrammarError(Exception):
    """Raised when a grammar cannot be built or analysed."""

    def __init__(self, kind: GrammarErrorKind, message: Optional[str] = None) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message if message is not None else str(kind))

    def __str__(self) -> str:
        return str(self.kind) if self.message is None else f"{self.kind}: {self.message}"


class SymbolType(enum.IntEnum):
    """The kind of a grammar symbol, in the order symbols sort by."""

    EMPTY = 0
    END = 1
    ACTION = 2
    TERMINAL = 3
    NON_TERMINAL = 4

    @property
    def label(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))

    def __str__(self) -> str:
        return self.label

    @classmethod
    def decode(cls, text: str) -> Optional[SymbolType]:
        """Return the member whose label equals ``text`` ignoring case, or None."""
        wanted = text.lower()
        for member in cls:
            if member.label.lower() == wanted:
                return member
        return None


@functools.total_ordering
@dataclass(frozen=True)
class GrammarAction:
    """A named parser action with optional data, invoked during parsing."""

    full_name: str = ""
    data: Any = None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, GrammarAction):
            return NotImplemented
        if self.full_name != other.full_name:
            return self.full_name < other.full_name
        if other.data is None:
            return False
        if self.data is None:
            return True
        return self.data < other.data


SymbolValue = Union[None, GrammarAction, TokenKind, str]


@functools.total_ordering
@dataclass(frozen=True)
class Symbol:
    """One element of a grammar sequence: empty, end, action, terminal or non-terminal."""

    type: SymbolType = SymbolType.EMPTY
    value: SymbolValue = None

    @classmethod
    def empty(cls) -> Symbol:
        return cls()

    @classmethod
    def end(cls) -> Symbol:
        return cls(SymbolType.END)

    @classmethod
    def of_action(cls, action: GrammarAction) -> Symbol:
        return cls(SymbolType.ACTION, action)

    @classmethod
    def of_terminal(cls, kind: TokenKind) -> Symbol:
        return cls(SymbolType.TERMINAL, kind)

    @classmethod
    def of_non_terminal(cls, name: str) -> Symbol:
        return cls(SymbolType.NON_TERMINAL, name)

    def _payload(self, expected: SymbolType):
        if self.type != expected:
            raise ValueError(f"symbol of type {self.type} is not {expected}")
        return self.value

    @property
    def action(self) -> GrammarAction:
        return self._payload(SymbolType.ACTION)

    @property
    def terminal(self) -> TokenKind:
        return self._payload(SymbolType.TERMINAL)

    @property
    def non_terminal(self) -> str:
        return self._payload(SymbolType.NON_TERMINAL)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Symbol):
            return NotImplemented
        if self.type != other.type:
            return int(self.type) < int(other.type)
        if self.value is None or other.value is None:
            return False
        return self.value < other.value

    def __str__(self) -> str:
        if self.type == SymbolType.EMPTY:
            return "ε"
        if self.type == SymbolType.END:
            return "☐"
        if self.type == SymbolType.ACTION:
            return f"[ {self.value.full_name} ]"
        return str(self.value)


EMPTY = Symbol()


class _RuleLike(Protocol):
    firsts: MutableSet[Symbol]

    def update_firsts(self) -> int: ...


class _GrammarLike(Protocol):
    rules: Mapping[str, _RuleLike]


def firsts(
    symbols: SequenceABC[Symbol],
    ix: int,
    grammar: _GrammarLike,
    found: MutableSet[Symbol],
) -> int:
    """Add the first set of ``symbols[ix:]`` to ``found``; return how much changed.

    The count is the number of symbols added to ``found`` plus whatever the
    first-set updates of referenced rules reported.
    """
    start_size = len(found)
    count = 0
    for head in symbols[ix:]:
        found.discard(EMPTY)
        if head.type in (SymbolType.END, SymbolType.EMPTY, SymbolType.TERMINAL):
            found.add(head)
            return count + len(found) - start_size
        if head.type == SymbolType.NON_TERMINAL:
            rule = grammar.rules.get(head.value)
            if rule is None:
                print(f"Rule '{head.value}' not found", file=sys.stderr)
                raise GrammarError(GrammarErrorKind.RULE_NOT_FOUND, f"Rule '{head.value}' not found")
            count += rule.update_firsts()
            found |= rule.firsts
            return count + len(found) - start_size
        if not found:
            found.add(EMPTY)
        if EMPTY not in found:
            return count + len(found) - start_size
    found.add(EMPTY)
    return count + len(found) - start_size


def _as_symbol(item: object) -> Symbol:
    if isinstance(item, Symbol):
        return item
    if isinstance(item, str):
        return Symbol.of_non_terminal(item)
    if isinstance(item, GrammarAction):
        return Symbol.of_action(item)
    if isinstance(item, TokenKind):
        return Symbol.of_terminal(item)
    raise TypeError(f"cannot make a grammar symbol from {item!r}")


@dataclass(eq=False)
class Sequence:
    """One alternative of a rule: a list of symbols and its first set."""

    grammar: Any = field(repr=False)
    symbols: list[Symbol] = field(default_factory=list)
    firsts: set[Symbol] = field(default_factory=set)

    def add_symbols(self, *args: object) -> None:
        """Append symbols; strings become non-terminals, actions and token kinds are wrapped."""
        self.symbols.extend(_as_symbol(arg) for arg in args)

    def build_firsts(self) -> int:
        """Update this sequence's first set; return how much changed."""
        return firsts(self.symbols, 0, self.grammar, self.firsts)

    def check_LL1(self, f_i: Iterable[Symbol], tail: Iterable[Sequence], j: int) -> Optional[int]:
        """Return the number of the first sequence in ``tail`` whose first set meets ``f_i``.

        Sequences in ``tail`` are numbered from ``j``; None means all are disjoint.
        """
        wanted = set(f_i)
        for offset, seq in enumerate(tail):
            if seq.firsts & wanted:
                return j + offset
        return None

    def __str__(self) -> str:
        if not self.symbols:
            return " ε"
        return "".join(f" {sym}" for sym in self.symbols)