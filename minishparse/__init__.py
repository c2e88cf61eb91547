"""Tokenizing, syntax checking, expansion and redirection handling for shell command lines."""

__version__ = "0.1.0"
__all__ = ["console", "expansion", "lexer", "parser", "syntax", "tokens"]