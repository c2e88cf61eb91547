"""Interactive-loop helpers: blank-line detection, prompt and stdio saving."""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from typing import Iterator, Mapping

_PROMPT_SUFFIX = " $> "


def has_content(line: str) -> bool:
    """Tell whether ``line`` holds anything other than spaces."""
    return any(char != " " for char in line)


def shell_prompt(env: Mapping[str, str]) -> str:
    """Build the prompt from the working directory, falling back to PWD or ``..``."""
    try:
        cwd = os.getcwd()
    except OSError:
        cwd = env.get("PWD") or ".."
    return f"{cwd}{_PROMPT_SUFFIX}"


def _restore(saved_in: int, saved_out: int) -> None:
    try:
        for saved, target in ((saved_in, 0), (saved_out, 1)):
            try:
                os.dup2(saved, target)
            except OSError as error:
                print(f"dup2 : {error.strerror}", file=sys.stderr)
    finally:
        os.close(saved_in)
        os.close(saved_out)


@contextmanager
def saved_stdio() -> Iterator[tuple[int, int]]:
    """Duplicate stdin and stdout, yield the copies, and put them back on exit."""
    saved_in = os.dup(0)
    try:
        saved_out = os.dup(1)
    except OSError:
        os.close(saved_in)
        raise
    try:
        yield saved_in, saved_out
    finally:
        _restore(saved_in, saved_out)