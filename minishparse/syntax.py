"""Syntax checks on a token stream: pipes, quotes and redirections."""

from __future__ import annotations

from typing import Sequence

from .tokens import Token, TokenType, first_non_space

_REDIRECTIONS = frozenset(
    {
        TokenType.REDIR_OUT,
        TokenType.REDIR_IN,
        TokenType.HERE_DOC,
        TokenType.DREDIR_OUT,
    }
)
_QUOTES = frozenset({TokenType.QUOTE, TokenType.DQUOTE})


class ShellSyntaxError(ValueError):
    """A command line that the shell refuses to run."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _is_redirection(token: Token) -> bool:
    return token.type in _REDIRECTIONS


def _check_redirection(tokens: Sequence[Token], index: int) -> int:
    token = tokens[index]
    following = tokens[index + 1] if index + 1 < len(tokens) else None
    if _is_redirection(token):
        if (
            following is not None
            and token.type is TokenType.REDIR_IN
            and following.type is TokenType.REDIR_OUT
        ):
            raise ShellSyntaxError("syntax error  `newline'")
        if following is None:
            raise ShellSyntaxError("syntax error `newline'")
        if following.type is TokenType.PIPE_LINE:
            raise ShellSyntaxError("syntax error `|'")
        if _is_redirection(following):
            raise ShellSyntaxError(f"syntax error '{following.content}'")
    elif token.type is TokenType.PIPE_LINE:
        if following is None or _is_redirection(following):
            raise ShellSyntaxError("syntax error `newline'")
    return index


def _check_quote(tokens: Sequence[Token], index: int) -> int:
    quote = tokens[index].type
    if quote in _QUOTES:
        index += 1
        while index < len(tokens) and tokens[index].type is not quote:
            index += 1
        if index >= len(tokens):
            raise ShellSyntaxError('syntax error "unclosed quotes"')
    return _check_redirection(tokens, index)


def _check_pipe(tokens: Sequence[Token], index: int) -> int:
    if tokens[index].type is TokenType.PIPE_LINE:
        if index == 0:
            raise ShellSyntaxError("syntax error '|'")
        following = first_non_space(tokens, index + 1)
        if following is None:
            raise ShellSyntaxError("syntax error '|'")
        if tokens[following].type is TokenType.PIPE_LINE:
            raise ShellSyntaxError("syntax error '||'")
        index = following
    return _check_quote(tokens, index)


def check_syntax(tokens: Sequence[Token]) -> Sequence[Token]:
    """Validate ``tokens`` and return them unchanged.

    Raises ShellSyntaxError for a leading, trailing or doubled pipe, an
    unclosed quote, or a redirection without a usable target.
    """
    index = 0
    while index < len(tokens):
        index = _check_pipe(tokens, index) + 1
    return tokens