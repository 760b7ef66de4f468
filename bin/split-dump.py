#!/usr/bin/env python3
"""
Debug helper comparing shellword.split with bashlex.

Usage:
    python bin/split-dump.py 'command to split'

Prints the words shellword produces next to the words bashlex finds in the
first simple command, which helps when a split result looks wrong.
"""

import sys

try:
    import bashlex
except ImportError:
    print("Error: bashlex not installed. Run: pip install bashlex")
    sys.exit(1)

from shellword import ShellSyntaxError, split


def bashlex_words(command):
    """Return the word values of the first command node bashlex parses."""
    for part in bashlex.parse(command):
        if part.kind == "command":
            return [p.word for p in part.parts if p.kind == "word"]
    return []


def main():
    if len(sys.argv) < 2:
        print("Usage: split-dump.py 'command'")
        print("Example: split-dump.py \"echo 'hello world'\"")
        sys.exit(1)

    command = sys.argv[1]
    print(f"Splitting: {command!r}")
    print("-" * 40)

    try:
        ours = split(command)
    except ShellSyntaxError as e:
        print(f"shellword: {e}")
        sys.exit(1)
    print(f"shellword: {ours!r}")

    try:
        theirs = bashlex_words(command)
    except bashlex.errors.ParsingError as e:
        print(f"bashlex:   parse error: {e}")
        sys.exit(1)
    print(f"bashlex:   {theirs!r}")

    print("match" if ours == theirs else "MISMATCH")
    sys.exit(0 if ours == theirs else 1)


if __name__ == "__main__":
    main()
