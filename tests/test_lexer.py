import pytest

from minishparse.lexer import tokenize
from minishparse.tokens import State, Token, TokenType

SPACE = Token(" ", TokenType.WHITE_SPACE)


def test_empty_line():
    assert tokenize("") == []


def test_simple_command():
    assert tokenize("ls -la") == [Token("ls"), SPACE, Token("-la")]


def test_double_quoted_content():
    tokens = tokenize('echo "a b"')
    assert tokens == [
        Token("echo"),
        SPACE,
        Token('"', TokenType.DQUOTE),
        Token("a b", TokenType.WORD, State.INDQUOTE),
        Token('"', TokenType.DQUOTE),
    ]


def test_single_quoted_content_keeps_dollar():
    tokens = tokenize("'$HOME'x")
    assert tokens == [
        Token("'", TokenType.QUOTE),
        Token("$HOME", TokenType.WORD, State.INQUOTE),
        Token("'", TokenType.QUOTE),
        Token("x"),
    ]


def test_empty_quotes():
    assert tokenize('""') == [
        Token('"', TokenType.DQUOTE),
        Token('"', TokenType.DQUOTE),
    ]


def test_unclosed_quote_drops_content():
    tokens = tokenize('echo "abc')
    assert tokens == [Token("echo"), SPACE, Token('"', TokenType.DQUOTE)]


def test_env_token():
    tokens = tokenize("$HOME/x")
    assert tokens == [Token("$HOME/x", TokenType.WORD, State.ENV_STRING)]


def test_env_token_spans_several_dollars():
    tokens = tokenize("$a$b c")
    assert tokens == [
        Token("$a$b", TokenType.WORD, State.ENV_STRING),
        SPACE,
        Token("c"),
    ]


def test_env_token_stops_at_pipe():
    tokens = tokenize("$a|b")
    assert [t.type for t in tokens] == [
        TokenType.WORD,
        TokenType.PIPE_LINE,
        TokenType.WORD,
    ]
    assert tokens[0].state is State.ENV_STRING


def test_heredoc_and_append():
    assert tokenize("<<EOF") == [Token("<<", TokenType.HERE_DOC), Token("EOF")]
    assert tokenize(">>out") == [Token(">>", TokenType.DREDIR_OUT), Token("out")]


def test_single_redirections():
    assert tokenize("<in") == [Token("<", TokenType.REDIR_IN), Token("in")]
    assert tokenize(">out") == [Token(">", TokenType.REDIR_OUT), Token("out")]


def test_pipe_between_words():
    assert tokenize("a|b") == [
        Token("a"),
        Token("|", TokenType.PIPE_LINE),
        Token("b"),
    ]


def test_backslash_is_own_token():
    assert tokenize("a\\b") == [
        Token("a"),
        Token("\\", TokenType.ESCAPE),
        Token("b"),
    ]


def test_tab_belongs_to_word():
    assert tokenize("a\tb") == [Token("a\tb")]


def test_two_spaces_give_two_space_tokens():
    tokens = tokenize("a  b")
    assert [t.type for t in tokens].count(TokenType.WHITE_SPACE) == 2
    assert tokens[-1] == Token("b")


def test_trailing_spaces_end_with_terminator():
    tokens = tokenize("ls  ")
    assert tokens[0] == Token("ls")
    assert tokens[-1].type is TokenType.NULL_TER


def test_only_spaces():
    tokens = tokenize("   ")
    assert [t.type for t in tokens] == [TokenType.WHITE_SPACE, TokenType.NULL_TER]


def test_single_trailing_space():
    assert tokenize("ls ") == [Token("ls"), SPACE]


def test_embedded_nul_truncates():
    assert tokenize("ls\0rm") == tokenize("ls")


@pytest.mark.parametrize(
    "line",
    [
        "echo 'hi there' | cat > out",
        "cat << EOF",
        "grep $USER file >> log",
        'echo "x"y z',
        "a|b|c",
    ],
)
def test_round_trip_for_single_spaced_lines(line):
    assert "".join(t.content for t in tokenize(line)) == line


@pytest.mark.parametrize("line", ["echo 'a'", 'x "y z" w', "'q' \"r\""])
def test_quote_tokens_come_in_pairs(line):
    tokens = tokenize(line)
    assert sum(t.type is TokenType.QUOTE for t in tokens) % 2 == 0
    assert sum(t.type is TokenType.DQUOTE for t in tokens) % 2 == 0