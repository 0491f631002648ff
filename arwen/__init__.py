"""Tokens, lexer configuration, LL(1) grammar analysis, logging, errno errors and file loading."""

__version__ = "0.1.0"