import os
from unittest.mock import patch

import pytest

from minishparse.lexer import tokenize
from minishparse.parser import Command, RedirectionError, parse, parse_line
from minishparse.syntax import ShellSyntaxError


def _read_fd(fd):
    try:
        return os.read(fd, 4096)
    finally:
        os.close(fd)


def test_simple_words():
    assert parse_line("echo hello world", {}) == [Command(["echo", "hello", "world"])]


def test_parse_matches_parse_line():
    line = "ls -l | wc -c"
    assert parse(tokenize(line), {}) == parse_line(line, {})


def test_pipeline_splits_commands():
    commands = parse_line("ls -l | wc -c", {})
    assert [command.argv for command in commands] == [["ls", "-l"], ["wc", "-c"]]


def test_pipe_without_spaces():
    commands = parse_line("ls|wc", {})
    assert [command.argv for command in commands] == [["ls"], ["wc"]]


def test_empty_line_gives_no_commands():
    assert parse_line("", {}) == []


def test_variable_expansion():
    commands = parse_line("echo $HOME", {"HOME": "/home/user"})
    assert commands[0].argv == ["echo", "/home/user"]


def test_unquoted_variable_is_split_on_spaces():
    commands = parse_line("echo $V", {"V": "a b  c"})
    assert commands[0].argv == ["echo", "a", "b", "c"]


def test_unset_variable_vanishes():
    assert parse_line("echo $NOPE", {})[0].argv == ["echo"]


def test_exit_status_expansion():
    assert parse_line("echo $?", {}, 42)[0].argv == ["echo", "42"]


def test_variable_before_pipe():
    commands = parse_line("echo $A|wc", {"A": "x"})
    assert [command.argv for command in commands] == [["echo", "x"], ["wc"]]


def test_single_quotes_keep_text():
    commands = parse_line("echo '$HOME'", {"HOME": "/home/user"})
    assert commands[0].argv == ["echo", "$HOME"]


def test_double_quotes_expand_as_one_word():
    commands = parse_line('echo "hi $USER"', {"USER": "alice"})
    assert commands[0].argv == ["echo", "hi alice"]


def test_adjacent_double_quotes_join():
    assert parse_line('"a""b"', {})[0].argv == ["ab"]


def test_unbalanced_parentheses_in_quotes():
    with pytest.raises(ShellSyntaxError):
        parse_line('echo "$(a"', {})


def test_leading_pipe_is_syntax_error():
    with pytest.raises(ShellSyntaxError):
        parse_line("| ls", {})


def test_redirect_out_truncates(tmp_path):
    target = tmp_path / "out.txt"
    target.write_bytes(b"old content")
    commands = parse_line(f"echo hi > {target}", {})
    assert commands[0].argv == ["echo", "hi"]
    assert commands[0].in_file is None
    fd = commands[0].out_file
    try:
        os.write(fd, b"new")
    finally:
        os.close(fd)
    assert target.read_bytes() == b"new"


def test_redirect_out_appends(tmp_path):
    target = tmp_path / "log.txt"
    target.write_bytes(b"a")
    commands = parse_line(f"echo hi >> {target}", {})
    fd = commands[0].out_file
    try:
        os.write(fd, b"b")
    finally:
        os.close(fd)
    assert target.read_bytes() == b"ab"


def test_redirect_out_to_missing_directory(tmp_path):
    with pytest.raises(RedirectionError):
        parse_line(f"echo hi > {tmp_path / 'nodir' / 'file'}", {})


def test_redirect_in_reads_file(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes(b"data")
    commands = parse_line(f"cat < {source}", {})
    assert commands[0].argv == ["cat"]
    assert commands[0].out_file is None
    assert _read_fd(commands[0].in_file) == b"data"


def test_redirect_in_missing_file(tmp_path):
    with pytest.raises(RedirectionError):
        parse_line(f"cat < {tmp_path / 'missing'}", {})


def test_redirection_without_words_gives_nothing(tmp_path):
    target = tmp_path / "created.txt"
    assert parse_line(f"> {target}", {}) == []
    assert target.exists()


def test_heredoc_expands_variables():
    with patch("builtins.input", side_effect=["line $NAME", "EOF"]):
        commands = parse_line("cat << EOF", {"NAME": "x"})
    assert commands[0].argv == ["cat"]
    assert _read_fd(commands[0].in_file) == b"line x\n"


def test_quoted_heredoc_delimiter_keeps_text():
    with patch("builtins.input", side_effect=["$NAME", "EOF"]):
        commands = parse_line('cat << "EOF"', {"NAME": "x"})
    assert commands[0].argv == ["cat"]
    assert _read_fd(commands[0].in_file) == b"$NAME\n"


def test_heredoc_end_of_file_warns(capsys):
    with patch("builtins.input", side_effect=["a", EOFError()]):
        commands = parse_line("cat << EOF", {})
    assert _read_fd(commands[0].in_file) == b"a\n"
    assert "wanted `EOF`" in capsys.readouterr().err