"""Split a command line into shell tokens."""

from __future__ import annotations

from .tokens import State, Token, TokenType, classify

_ENV_STOP = frozenset(
    {
        TokenType.WHITE_SPACE,
        TokenType.PIPE_LINE,
        TokenType.DQUOTE,
        TokenType.QUOTE,
        TokenType.REDIR_OUT,
        TokenType.REDIR_IN,
        TokenType.HERE_DOC,
        TokenType.DREDIR_OUT,
    }
)

_SPACE = " "


class _Lexer:
    def __init__(self, line: str) -> None:
        self.text = line
        self.pos = 0
        self.tokens: list[Token] = []

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _char(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _emit(self, content: str, kind: TokenType, state: State = State.GENERAL) -> None:
        self.tokens.append(Token(content, kind, state))

    def _emit_space(self) -> None:
        self._emit(_SPACE, TokenType.WHITE_SPACE)

    def run(self) -> list[Token]:
        while not self._at_end():
            self._skip_spaces()
            self._dispatch()
            if self._at_end():
                break
            self.pos += 1
        return self.tokens

    def _skip_spaces(self) -> None:
        if self._char() == _SPACE:
            self._emit_space()
        while self._char() == _SPACE:
            self.pos += 1

    def _dispatch(self) -> None:
        kind = classify(self.text, self.pos)
        if kind is TokenType.ENV:
            self._env()
        elif kind in (TokenType.DREDIR_OUT, TokenType.HERE_DOC):
            self._double_redirect(kind)
        elif kind is TokenType.WORD:
            self._word()
        elif kind in (TokenType.QUOTE, TokenType.DQUOTE):
            self._quote(kind)
        elif kind is TokenType.NULL_TER:
            self._emit("", kind)
        else:
            self._emit(self._char(), kind)

    def _double_redirect(self, kind: TokenType) -> None:
        self._emit(">>" if kind is TokenType.DREDIR_OUT else "<<", kind)
        self.pos += 1

    def _env(self) -> None:
        start = self.pos
        while not self._at_end() and classify(self.text, self.pos) not in _ENV_STOP:
            self.pos += 1
        self._emit(self.text[start:self.pos], TokenType.WORD, State.ENV_STRING)
        self.pos -= 1

    def _word(self) -> None:
        start = self.pos
        self.pos += 1
        while not self._at_end() and classify(self.text, self.pos) is TokenType.WORD:
            self.pos += 1
        self._emit(self.text[start:self.pos], TokenType.WORD)
        self.pos -= 1
        self._space_after()

    def _space_after(self) -> None:
        if self._at_end():
            return
        if self._char(1) == _SPACE:
            self._emit_space()
            self.pos += 1

    def _quote(self, kind: TokenType) -> None:
        quote = self._char()
        self._emit(quote, kind)
        self.pos += 1
        if self._char() == quote:
            self._emit(quote, kind)
            return
        close = self.text.find(quote, self.pos)
        if close < 0:
            # An unclosed quote keeps only its opening token.
            self.pos = len(self.text)
            return
        state = State.INDQUOTE if kind is TokenType.DQUOTE else State.INQUOTE
        self._emit(self.text[self.pos:close], TokenType.WORD, state)
        self._emit(quote, kind)
        self.pos = close
        self._space_after()


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into tokens; text after an embedded NUL is ignored."""
    return _Lexer(line.split("\0", 1)[0]).run()