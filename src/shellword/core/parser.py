"""
Shell word parsing: unquoting and splitting command lines.

Both operations follow the same quoting rules a POSIX shell applies when it
reads a word, without performing any expansion:

- A backslash escapes the next character, except inside single quotes.
- Double quotes toggle unless inside single quotes.
- Single quotes toggle unless inside double quotes.
"""

from __future__ import annotations

from enum import Enum

from shellword.core.errors import ShellSyntaxError

WHITESPACE = frozenset(" \t\n\r\f\v")


class ScanState(Enum):
    """Quoting state of the scanner."""

    BARE = "bare"
    SINGLE = "single"
    DOUBLE = "double"
    ESCAPED = "escaped"  # one character only, then back to the previous state


def _scan(text: str, split_words: bool) -> list[str]:
    """Run the quote state machine over text.

    Returns a single-element list when split_words is False.
    Raises ShellSyntaxError if a quote is left open.
    """
    words: list[str] = []
    word: list[str] = []
    # A word exists once anything (even an empty pair of quotes) is seen
    in_word = False
    state = ScanState.BARE
    resume = ScanState.BARE

    for c in text:
        if state is ScanState.ESCAPED:
            word.append(c)
            in_word = True
            state = resume
            continue

        if c == "\\" and state is not ScanState.SINGLE:
            resume, state = state, ScanState.ESCAPED
        elif c == '"' and state is not ScanState.SINGLE:
            state = ScanState.BARE if state is ScanState.DOUBLE else ScanState.DOUBLE
            in_word = True
        elif c == "'" and state is not ScanState.DOUBLE:
            state = ScanState.BARE if state is ScanState.SINGLE else ScanState.SINGLE
            in_word = True
        elif split_words and state is ScanState.BARE and c in WHITESPACE:
            if in_word:
                words.append("".join(word))
                word.clear()
                in_word = False
        else:
            word.append(c)
            in_word = True

    # A trailing backslash (state ESCAPED) has nothing to escape and is dropped
    if state is ScanState.SINGLE or state is ScanState.DOUBLE or (
        state is ScanState.ESCAPED and resume is ScanState.DOUBLE
    ):
        op = "split" if split_words else "unquote"
        raise ShellSyntaxError(f"{op} {text!r}: mismatched quotes", fragment=text)

    if not split_words:
        return ["".join(word)]
    if in_word:
        words.append("".join(word))
    return words


def unquote(text: str) -> str:
    """Remove quoting and escapes from a string the way a shell would.

    Variables and command substitutions are not handled.
    Raises ShellSyntaxError on mismatched quotes.
    """
    return _scan(text, split_words=False)[0]


def split(text: str) -> list[str]:
    """Split a command line into words, resolving quotes and escapes.

    Empty or whitespace-only input gives an empty list.
    Raises ShellSyntaxError on mismatched quotes.
    """
    return _scan(text, split_words=True)
