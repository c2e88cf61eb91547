# minishparse

`minishparse` turns a line of shell input into the commands a small
shell would run. It covers the front half of such a shell: splitting
the line into tokens, checking the syntax, expanding variables and
quotes, reading here-documents, and opening the files named by
redirections.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Using it

The quickest way in is `parse_line`, which tokenizes, checks and parses
a line in one call:

```python
from minishparse.parser import parse_line

env = {"HOME": "/home/user", "NAME": "world"}
commands = parse_line('echo "hello $NAME" | cat', env, exit_status=0)

for command in commands:
    print(command.argv, command.in_file, command.out_file)
```

Each `Command` holds `argv`, the list of expanded arguments, and
`in_file` / `out_file`, the file descriptors opened by its
redirections (`None` where there is none). The caller owns these
descriptors and should close them when done. A pipeline stage that ends
up with no arguments drops every command gathered for the line.

The steps can also be taken one at a time:

```python
from minishparse.lexer import tokenize
from minishparse.syntax import check_syntax, ShellSyntaxError
from minishparse.parser import parse, RedirectionError

tokens = tokenize("ls -l > out.txt")
try:
    check_syntax(tokens)
    commands = parse(tokens, {}, exit_status=0)
except (ShellSyntaxError, RedirectionError) as error:
    print(error)
```

`parse` raises `RedirectionError` when a redirection's file cannot be
opened or has no target, and `ShellSyntaxError` on malformed
expansions such as unbalanced `$(`; descriptors opened so far are
closed before it raises. Here-documents (`<< DELIM`) are read from
standard input with a `> ` prompt; an unquoted delimiter expands
`$NAME` in each line.

### Modules

- `minishparse.tokens`: the `TokenType` and `State` enumerations, the
  frozen `Token` record, `classify(text, index)` for the token kind at a
  position, `first_non_space(tokens, start)` and `is_allowed(c)`.
- `minishparse.lexer`: `tokenize(line)` returns the list of tokens.
- `minishparse.syntax`: `check_syntax(tokens)` raises `ShellSyntaxError`
  for leading, trailing or doubled pipes, unclosed quotes and
  redirections without a usable target.
- `minishparse.expansion`:
  - `expand_word(text, env, exit_status)` for unquoted words: `$NAME`
    (names matched as prefixes in the order of `env`) and `$?`;
  - `expand_double_quoted(text, env, exit_status)` for double-quoted
    text: `$NAME` (empty when unset), `$?`, `$((...))` becomes `0` and
    `$(...)` its inner text;
  - `expand_heredoc_line(line, env)` for here-document lines;
  - `matches_env_name(s1, s2, n)` and `check_parentheses(text)` helpers.
- `minishparse.parser`: `parse` and `parse_line` build `Command`
  objects; `RedirectionError` reports redirection failures.
- `minishparse.console`: `has_content(line)` tells whether a line holds
  anything but spaces, `shell_prompt(env)` builds a `<cwd> $> ` prompt
  (falling back to `PWD` or `..`), and the `saved_stdio()` context
  manager duplicates standard input and output and restores them when
  the block ends.

## What it does not do

This package stops at producing commands. It does not run them: there
is no process launching, no pipe wiring between stages, no built-in
commands such as `cd`, `export` or `exit`, no signal handling, and no
interactive read–eval loop or command-line program. Environment
variables are passed in as a plain mapping; the package does not manage
or export them.