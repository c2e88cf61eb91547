"""Turn a token stream into commands with their arguments and redirections."""

from __future__ import annotations

import contextlib
import os
import sys
import tempfile
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional, Sequence

from .expansion import expand_double_quoted, expand_heredoc_line, expand_word
from .lexer import tokenize
from .syntax import ShellSyntaxError, check_syntax
from .tokens import State, Token, TokenType, first_non_space

_QUOTES = frozenset({TokenType.QUOTE, TokenType.DQUOTE})
_REDIRECTIONS = frozenset(
    {
        TokenType.REDIR_IN,
        TokenType.REDIR_OUT,
        TokenType.HERE_DOC,
        TokenType.DREDIR_OUT,
    }
)
_WORD_BREAKS = _REDIRECTIONS | {TokenType.WHITE_SPACE, TokenType.PIPE_LINE}
_QUOTED_STATES = frozenset({State.INQUOTE, State.INDQUOTE, State.ENV_STRING})
_MISSING_TARGET = "syntax error `newline'"
_FILE_MODE = 0o644


class RedirectionError(Exception):
    """A redirection whose file could not be opened or named."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass
class Command:
    """One pipeline stage: its arguments and the descriptors it reads and writes."""

    argv: list[str] = field(default_factory=list)
    in_file: Optional[int] = None
    out_file: Optional[int] = None


def _close(fd: Optional[int]) -> None:
    if fd is not None:
        with contextlib.suppress(OSError):
            os.close(fd)


def _in_word(token: Token) -> bool:
    return (
        token.type is TokenType.WORD
        or token.state in _QUOTED_STATES
        or token.type in _QUOTES
    )


def _heredoc_lines(delimiter: str) -> Iterator[str]:
    while True:
        try:
            line = input("> ")
        except EOFError:
            print(
                "minishell: warning: line delimited by end-of-file "
                f"(wanted `{delimiter}`)",
                file=sys.stderr,
            )
            return
        if line == delimiter:
            return
        yield line


class _Parser:
    def __init__(
        self,
        tokens: Sequence[Token],
        env: Mapping[str, Optional[str]],
        exit_status: int,
    ) -> None:
        self.tokens = list(tokens)
        self.env = env
        self.exit_status = exit_status
        self.commands: list[Command] = []
        self._reset()

    def _reset(self) -> None:
        self.words: list[str] = []
        self.in_file: Optional[int] = None
        self.out_file: Optional[int] = None

    def _at(self, index: int) -> Optional[Token]:
        return self.tokens[index] if 0 <= index < len(self.tokens) else None

    def run(self) -> list[Command]:
        try:
            position: Optional[int] = 0
            while position is not None and position < len(self.tokens):
                position = self._expand(position)
                if position is not None:
                    position += 1
            self._flush()
        except BaseException:
            self._discard()
            raise
        return self.commands

    def _discard(self) -> None:
        for command in self.commands:
            _close(command.in_file)
            _close(command.out_file)
        _close(self.in_file)
        _close(self.out_file)
        self.commands = []

    def _flush(self) -> None:
        if self.words:
            self.commands.append(Command(list(self.words), self.in_file, self.out_file))
            self._reset()
            return
        # A stage without words drops every command gathered so far.
        self._discard()
        self._reset()

    def _set_in(self, fd: int) -> None:
        _close(self.in_file)
        self.in_file = fd

    def _set_out(self, fd: int) -> None:
        _close(self.out_file)
        self.out_file = fd

    def _expand(self, position: int) -> Optional[int]:
        start = first_non_space(self.tokens, position)
        if start is None:
            return None
        token = self.tokens[start]
        kind = token.type
        if kind is TokenType.PIPE_LINE:
            self._flush()
            return start
        if kind is TokenType.REDIR_IN:
            return self._redirect_in(start)
        if kind is TokenType.HERE_DOC:
            return self._heredoc(start)
        if kind in (TokenType.DREDIR_OUT, TokenType.REDIR_OUT):
            return self._redirect_out(start)
        if self._standalone_env(start):
            self._split_env(token)
            return start
        if (
            kind in _QUOTES
            or kind is TokenType.WORD
            or token.state in (State.INDQUOTE, State.ENV_STRING)
        ):
            return self._word(start)
        return start

    def _redirect_in(self, position: int) -> int:
        target = first_non_space(self.tokens, position + 1)
        if target is None:
            raise RedirectionError(_MISSING_TARGET)
        try:
            fd = os.open(self.tokens[target].content, os.O_RDONLY)
        except OSError as error:
            raise RedirectionError(f"minishell: {error.strerror}") from error
        self._set_in(fd)
        return target

    def _redirect_out(self, position: int) -> int:
        append = self.tokens[position].type is not TokenType.REDIR_OUT
        target = next(
            (
                index
                for index in range(position + 1, len(self.tokens))
                if self.tokens[index].type is TokenType.WORD
            ),
            None,
        )
        if target is None:
            raise RedirectionError(_MISSING_TARGET)
        filename = self.tokens[target].content
        flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
        try:
            fd = os.open(filename, flags, _FILE_MODE)
        except OSError as error:
            raise RedirectionError(
                f"minishell: {filename}: {error.strerror}"
            ) from error
        self._set_out(fd)
        following = first_non_space(self.tokens, position + 1)
        return target if following is None else following

    def _heredoc(self, position: int) -> int:
        head = position + 1
        token = self._at(head)
        if token is not None and token.type is TokenType.WHITE_SPACE:
            head += 1
            token = self._at(head)
        quoted = False
        if token is not None and token.type in _QUOTES:
            quoted = True
            head += 1
            token = self._at(head)
        if token is None:
            raise ShellSyntaxError(_MISSING_TARGET)
        self._set_in(self._read_heredoc(token.content, quoted))
        return self._skip_delimiter(head)

    def _read_heredoc(self, delimiter: str, quoted: bool) -> int:
        with tempfile.TemporaryFile() as buffer:
            for line in _heredoc_lines(delimiter):
                if not quoted:
                    line = expand_heredoc_line(line, self.env)
                buffer.write(f"{line}\n".encode())
            buffer.flush()
            buffer.seek(0)
            return os.dup(buffer.fileno())

    def _skip_delimiter(self, index: int) -> int:
        if index + 1 >= len(self.tokens):
            return index
        index += 1
        while True:
            token = self.tokens[index]
            following = self._at(index + 1)
            if (
                following is None
                or following.type is TokenType.PIPE_LINE
                or token.type in (TokenType.PIPE_LINE, TokenType.WHITE_SPACE)
            ):
                return index
            index += 1

    def _standalone_env(self, index: int) -> bool:
        if self.tokens[index].state is not State.ENV_STRING:
            return False
        following = self._at(index + 1)
        return following is None or following.type in _WORD_BREAKS

    def _split_env(self, token: Token) -> None:
        expanded = expand_word(token.content, self.env, self.exit_status)
        self.words.extend(part for part in expanded.split(" ") if part)

    def _word(self, start: int) -> int:
        current = start
        if self.tokens[current].type in _QUOTES:
            current += 1
        value, current = self._gather(current)
        if value:
            self.words.append(value)
        token = self._at(current)
        if token is None:
            return start
        if token.type is TokenType.PIPE_LINE:
            self._flush()
        return current

    def _gather(self, current: int) -> tuple[str, int]:
        parts: list[str] = []
        while (token := self._at(current)) is not None and _in_word(token):
            if token.type in _QUOTES:
                current += 1
                continue
            text, current = self._token_value(current)
            parts.append(text)
            if current + 1 >= len(self.tokens):
                break
            current += 1
            if self._ends_word(current):
                break
        return "".join(parts), current

    def _ends_word(self, index: int) -> bool:
        token = self.tokens[index]
        if token.type in _QUOTES:
            peek = self._at(index + 1)
            return not (
                peek is not None
                and (peek.type is TokenType.WORD or peek.state in _QUOTED_STATES)
            )
        return token.type in _WORD_BREAKS

    def _token_value(self, index: int) -> tuple[str, int]:
        token = self.tokens[index]
        if token.state is State.ENV_STRING:
            return expand_word(token.content, self.env, self.exit_status), index
        if token.state is State.INDQUOTE:
            text = token.content
            following = index + 1
            while (
                self._at(following) is not None
                and self.tokens[following].type is TokenType.DQUOTE
            ):
                following += 1
            joined = self._at(following)
            if joined is not None and joined.state is State.INDQUOTE:
                text += joined.content
                index = following
            return expand_double_quoted(text, self.env, self.exit_status), index
        if token.state is State.INQUOTE:
            return token.content, index
        if token.state is State.GENERAL and token.type is TokenType.WORD:
            return token.content, index
        return "", index


def parse(
    tokens: Sequence[Token],
    env: Mapping[str, Optional[str]],
    exit_status: int = 0,
) -> list[Command]:
    """Expand ``tokens`` and group them into pipeline commands.

    Here-documents are read from standard input.  Raises RedirectionError when
    a redirection file cannot be opened and ShellSyntaxError on a malformed
    expansion; descriptors opened so far are closed before raising.
    """
    return _Parser(tokens, env, exit_status).run()


def parse_line(
    line: str,
    env: Mapping[str, Optional[str]],
    exit_status: int = 0,
) -> list[Command]:
    """Tokenize, syntax-check and parse one command line."""
    tokens = tokenize(line)
    check_syntax(tokens)
    return parse(tokens, env, exit_status)