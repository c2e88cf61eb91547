"""Variable expansion for unquoted words, double-quoted text and here-documents."""

from __future__ import annotations

from typing import Mapping, Optional

from .syntax import ShellSyntaxError

_UNCLOSED_PARENTHESES = 'syntax error "unclosed parentheses"'


def _is_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _is_name_char(char: str) -> bool:
    return _is_alnum(char) or char == "_"


def _char_at(text: str, index: int) -> str:
    return text[index] if 0 <= index < len(text) else ""


def _name_end(text: str, start: int) -> int:
    end = start
    while end < len(text) and _is_name_char(text[end]):
        end += 1
    return end


def _skip_spaces(text: str, index: int) -> int:
    while index < len(text) and text[index] == " ":
        index += 1
    return index


def _prefix_variable(
    text: str, index: int, env: Mapping[str, Optional[str]]
) -> tuple[Optional[str], int]:
    """Find the first variable whose name starts ``text`` at ``index``.

    A name followed directly by a letter or digit is not a match: the rest of
    that word and the spaces after it are consumed and no value is returned.
    """
    for key, value in env.items():
        if not text.startswith(key, index):
            continue
        index += len(key)
        if _is_alnum(_char_at(text, index)):
            index += 1
            while index < len(text) and text[index] != " ":
                index += 1
            return None, _skip_spaces(text, index)
        return value, index
    return None, index


def expand_word(
    text: str, env: Mapping[str, Optional[str]], exit_status: int = 0
) -> str:
    """Expand ``$NAME``, ``$?`` and ``$$`` in an unquoted word.

    Names are matched as prefixes in the order of ``env``.  An unknown name is
    dropped together with the spaces that follow it.
    """
    pieces: list[str] = []
    index = 0
    while index < len(text):
        if text[index] != "$":
            pieces.append(text[index])
            index += 1
            continue
        index += 1
        following = _char_at(text, index)
        if following == "?":
            pieces.append(str(exit_status))
            index += 1
        elif following in ("$", ""):
            pieces.append("$")
        else:
            value, index = _prefix_variable(text, index, env)
            if value is not None:
                pieces.append(value)
            else:
                while index < len(text) and _is_alnum(text[index]):
                    index += 1
                index = _skip_spaces(text, index)
    return "".join(pieces)


def _parenthesised(text: str, dollar: int, pieces: list[str]) -> int:
    if not check_parentheses(text[dollar:]):
        raise ShellSyntaxError(_UNCLOSED_PARENTHESES)
    opening = dollar + 1
    if _char_at(text, opening + 1) == "(":
        close = text.find("))", opening + 2)
        if close < 0:
            raise ShellSyntaxError(_UNCLOSED_PARENTHESES)
        pieces.append("0")
        return close + 2
    close = text.find(")", opening + 1)
    if close < 0:
        raise ShellSyntaxError(_UNCLOSED_PARENTHESES)
    pieces.append(text[opening + 1:close])
    return close + 1


def expand_double_quoted(
    text: str, env: Mapping[str, Optional[str]], exit_status: int = 0
) -> str:
    """Expand the content of a double-quoted string.

    ``$NAME`` takes its exact value (empty when unset), ``$?`` the exit status,
    ``$$`` stays as is, ``$((...))`` becomes ``0`` and ``$(...)`` its inner text.
    Raises ShellSyntaxError on unbalanced parentheses.
    """
    pieces: list[str] = []
    index = 0
    while index < len(text):
        if text[index] != "$":
            pieces.append(text[index])
            index += 1
            continue
        following = _char_at(text, index + 1)
        if following == "$":
            pieces.append("$$")
            index += 2
        elif following == "?":
            pieces.append(str(exit_status))
            index += 2
        elif following in (" ", ""):
            pieces.append("$")
            index += 1
        elif following == "(":
            index = _parenthesised(text, index, pieces)
        else:
            end = _name_end(text, index + 1)
            if end > index + 1:
                pieces.append(env.get(text[index + 1:end]) or "")
                index = end
            else:
                pieces.append("$")
                index += 1
    return "".join(pieces)


def expand_heredoc_line(line: str, env: Mapping[str, Optional[str]]) -> str:
    """Expand ``$NAME`` in a here-document line; unknown names vanish."""
    pieces: list[str] = []
    index = 0
    while index < len(line):
        if line[index] != "$":
            pieces.append(line[index])
            index += 1
            continue
        index += 1
        end = _name_end(line, index)
        if end > index:
            value = env.get(line[index:end])
            if value is not None:
                pieces.append(value)
            index = end
        else:
            pieces.append("$")
    return "".join(pieces)


def matches_env_name(s1: str, s2: str, n: int) -> bool:
    """Compare ``s1`` with ``s2`` up to ``n - 1`` characters.

    The character of ``s2`` at position ``n - 1`` must end the name: a space,
    a non-alphanumeric character or the end of the string.
    """
    if n == 0:
        return True
    index = 0
    while _char_at(s1, index) or _char_at(s2, index):
        left, right = _char_at(s1, index), _char_at(s2, index)
        if left != right or index >= n - 1:
            if (right == " " or not _is_alnum(right)) and index == n - 1:
                return True
            return False
        index += 1
    return True


def check_parentheses(text: str) -> bool:
    """Tell whether the closing parentheses in ``text`` balance the opening ones."""
    depth = text.count("(")
    for char in text:
        if depth < 0:
            break
        if char == ")":
            depth -= 1
    return depth == 0