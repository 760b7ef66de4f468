"""Quoting utilities for building shell command lines."""

from __future__ import annotations

from dataclasses import dataclass

# Characters that carry meaning to a POSIX shell when left unquoted
SPECIAL_CHARS = frozenset(" \t\n\r\f\v$&\"|;<>()*?[]#~%!{}\\")


@dataclass(frozen=True)
class QuoteClass:
    """What a string contains, as far as quoting is concerned."""

    empty: bool
    has_single_quote: bool
    has_special: bool


def classify(s: str) -> QuoteClass:
    """Classify a string for quoting.

    Stops scanning as soon as both a single quote and a special
    character have been seen.
    """
    if not s:
        return QuoteClass(empty=True, has_single_quote=False, has_special=False)
    single_quote = False
    special = False
    for c in s:
        if c == "'":
            single_quote = True
        elif c in SPECIAL_CHARS:
            special = True
        if single_quote and special:
            break
    return QuoteClass(empty=False, has_single_quote=single_quote, has_special=special)


def quote(s: str) -> str:
    """Quote a string for safe use in a shell command line.

    Uses single quotes (safest), with escape handling for embedded single quotes.
    Returns '' for empty strings. Returns unquoted if no special chars.
    """
    cls = classify(s)
    if cls.empty:
        return "''"
    if not cls.has_single_quote and not cls.has_special:
        return s
    if not cls.has_single_quote:
        return "'" + s + "'"
    # Close the quote, emit a double-quoted ', reopen
    return "'" + s.replace("'", "'\"'\"'") + "'"


def join(tokens: list[str]) -> str:
    """Join tokens into a command string with proper quoting."""
    return " ".join(quote(t) for t in tokens)


def strip_unsafe(s: str) -> str:
    """Remove non-printable characters (control codes, DEL) from a string."""
    return "".join(c for c in s if c.isprintable())
