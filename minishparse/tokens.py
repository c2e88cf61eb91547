"""Token kinds, lexer states and character classification for shell input."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence


class TokenType(IntEnum):
    """Kind of a lexical token; single-character kinds carry that character's code."""

    WORD = -1
    HERE_DOC = -2
    DREDIR_OUT = -3
    NULL_TER = 0
    NEW_LINE = ord("\n")
    WHITE_SPACE = ord(" ")
    QUOTE = ord("'")
    DQUOTE = ord('"')
    ESCAPE = ord("\\")
    ENV = ord("$")
    PIPE_LINE = ord("|")
    REDIR_OUT = ord(">")
    REDIR_IN = ord("<")


class State(IntEnum):
    """Quoting context a token was read in."""

    GENERAL = 0
    INQUOTE = 1
    INDQUOTE = 2
    ENV_STRING = 3


@dataclass(frozen=True)
class Token:
    """One lexical token of a command line."""

    content: str
    type: TokenType = TokenType.WORD
    state: State = State.GENERAL


_QUOTES = {"'": TokenType.QUOTE, '"': TokenType.DQUOTE}
_WHITESPACE = {" ": TokenType.WHITE_SPACE, "\n": TokenType.NEW_LINE}
_SPECIALS = {"\\": TokenType.ESCAPE, "$": TokenType.ENV, "|": TokenType.PIPE_LINE}


def classify(text: str, index: int) -> TokenType:
    """Return the token kind that starts at ``text[index]``.

    Positions at or past the end of ``text`` (or holding a NUL) are the
    terminator.  ``>>`` and ``<<`` are recognised by looking one character ahead.
    """
    char = text[index] if index < len(text) else "\0"
    if char in _QUOTES:
        return _QUOTES[char]
    if char in _WHITESPACE:
        return _WHITESPACE[char]
    if char == "\0":
        return TokenType.NULL_TER
    if char in _SPECIALS:
        return _SPECIALS[char]
    following = text[index + 1] if index + 1 < len(text) else ""
    if char == ">":
        return TokenType.DREDIR_OUT if following == ">" else TokenType.REDIR_OUT
    if char == "<":
        return TokenType.HERE_DOC if following == "<" else TokenType.REDIR_IN
    return TokenType.WORD


def first_non_space(tokens: Sequence[Token], start: int = 0) -> int | None:
    """Return the index of the first non-whitespace token from ``start`` on, or None."""
    for index, token in enumerate(tokens[start:], start):
        if token.type is not TokenType.WHITE_SPACE:
            return index
    return None


def is_allowed(c: str) -> bool:
    """Tell whether ``c`` is a lowercase ASCII letter or a decimal digit."""
    return len(c) == 1 and ("a" <= c <= "z" or "0" <= c <= "9")