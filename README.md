# arwen

Building blocks for the front end of a small compiler. The package has no
third-party dependencies.

| Module | What it holds |
| --- | --- |
| `arwen.tokens` | `Token`, `TokenKind`, `KindTag`, `NumberType`, `Location`, `ConversionError`, `decode_token` |
| `arwen.config` | `Config` and one settings class per scanner, the comment and number scanners, `KeywordsConfig.match` |
| `arwen.symbols` | `Symbol`, `SymbolType`, `GrammarAction`, `Sequence`, `firsts`, `GrammarError`, `GrammarErrorKind` |
| `arwen.grammar` | `Grammar` and `Rule`: first and follow sets, LL(1) checks, parse tables |
| `arwen.logsupport` | `Logger`, `LogCategory`, `LogLevel`, `LogMessage`, `FatalError` |
| `arwen.errors` | `LibCError`, an exception carrying an errno value, its symbolic name and a description; `describe_errno` |
| `arwen.filebuffer` | `FileBuffer` and `SimpleBufferLocator`, which read a whole file as text |

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Grammars

```python
from arwen.grammar import Grammar
from arwen.tokens import KindTag, NumberType, TokenKind

grammar = Grammar()
grammar.entry_point = "E"
grammar.add_rule("E", "T", "Eopt")
rule = grammar.add_rule("Eopt", TokenKind(KindTag.SYMBOL, "+"), "T", "Eopt")
rule.add_sequence()                      # the empty alternative
grammar.add_rule("T", TokenKind(KindTag.NUMBER, NumberType.INT))

grammar.build_parse_table()   # raises GrammarError if the grammar is not LL(1)
grammar.dump_parse_table()
print(grammar)
```

Arguments to `add_rule` and `add_sequence` become symbols. A string is a
non-terminal, a `TokenKind` is a terminal, and a `GrammarAction` is an action.
`Symbol` objects are used as they are. `Grammar.analyze()` computes first and
follow sets and runs the LL(1) check. `Grammar.dump()` prints every rule with
its sets and parse table. A missing rule or an LL(1) conflict raises
`GrammarError`. Its `kind` is a `GrammarErrorKind`.

`Grammar.configure(name, value)` applies one setting:

- `prefix` and `library` record where actions are to be looked up.
- `lexer` takes `"Scanner: settings"` and passes it to `Config.configure`.
- `parser` stores `key: value` in `parser_config`.

## Lexer configuration and tokens

```python
from arwen.config import Config, NumberConfig
from arwen.tokens import Location

config = Config()
config.configure("Number", "signed;hex=true")   # enables the scanner and sets options

scanned = NumberConfig(on=True, hex=True).scan("0x1F rest", Location("buf"))
token, after = scanned
token.as_int()      # 31
```

`Config.configure` raises `ConfigError` for an unknown scanner name. It also
raises it for a `marker` or `quotes` setting that has no value.

`CommentConfig.scan` and `NumberConfig.scan` each take the remaining source and
the current `Location`. Each returns a `(Token, Location)` pair, or `None` when
nothing matches. `KeywordsConfig.match` returns a `MatchResult`, which tells
whether the text is a keyword, the prefix of a keyword, both, or has run past
one.

`decode_token("Number:Hex;0x10")` builds a token from a `Tag:value` description.
`Token.as_int()` and `Token.as_float()` raise `ConversionError` when the text
cannot be converted.

## Logging

`Logger.get_logger()` returns a process-wide logger built by
`Logger.from_environment()`. It reads these environment variables:

- `EDDY_LOGLEVEL`: the lowest level shown (`None`, `Trace`, `Info`, `Warning`,
  `Error`, `Fatal`).
- `EDDY_TRACE`: the categories to show, separated by `;`, `,` or `:`. The value
  `all` enables every category.
- `EDDY_LOGFILE`: stored in `Logger.logfile`.

Messages go to standard error, or to the `stream` given to `Logger`. A message
with a category is written only if that category is enabled.

- `Logger.error_msg` exits with status 1.
- `Logger.fatal_msg` raises `FatalError`.
- `Logger.assert_msg` raises `FatalError` when its condition is false.
- `LogCategory.start()` and `LogCategory.log_duration()` trace the processor
  time that has elapsed.

## What the package does not do

- It provides no complete lexer. Only the comment and number scanners exist.
  Identifier, keyword, quoted-string and whitespace scanning is configuration
  only.
- It does not read grammars from text.
- It does not run parser actions.
- It has no command-line program.
- Logging never writes to `logfile`. It always writes to a stream.