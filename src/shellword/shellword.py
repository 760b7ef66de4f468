"""shellword command-line interface.

Usage:
    shellword quote ARG
    shellword join ARG...
    shellword unquote STRING
    shellword split STRING
    shellword expand [--param] [--exec] [--no-dollar-vars] [--error-unset] [--] STRING

Settings are read from ~/.shellword/config, the nearest .shellword file and
the file named by $SHELLWORD_CONFIG. Flags given to expand switch options on
top of those settings. Split prints a JSON array, everything else prints the
resulting string.

Exit codes:
- 0: Success. Result on stdout.
- 1: Input or config could not be processed. Message on stderr.
- 2: Usage error.
"""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path

from shellword.core.config import configure_logging, load_config, log_event
from shellword.core.errors import ShellwordError
from shellword.core.expand import ExpandOptions, expand
from shellword.core.parser import split, unquote
from shellword.core.quote import join, quote

USAGE = __doc__.split("\n\n")[1]

OPERATIONS = ("quote", "join", "unquote", "split", "expand")

# expand flag -> (ExpandOptions field, value)
EXPAND_FLAGS = {
    "--param": ("param_expansion", True),
    "--exec": ("command_substitution", True),
    "--no-dollar-vars": ("dollar_vars", False),
    "--error-unset": ("error_on_unset", True),
}


def _usage_error(message: str) -> int:
    print(f"shellword: {message}", file=sys.stderr)
    print(USAGE, file=sys.stderr)
    return 2


def _parse_expand_args(args: list[str], options: ExpandOptions) -> tuple[str, ExpandOptions]:
    """Apply expand flags to options. Returns (input, options)."""
    text = None
    options_done = False
    for arg in args:
        if not options_done and arg == "--":
            options_done = True
            continue
        if not options_done and arg in EXPAND_FLAGS:
            name, value = EXPAND_FLAGS[arg]
            options = replace(options, **{name: value})
        elif not options_done and arg.startswith("--"):
            raise ValueError(f"unknown option {arg}")
        elif text is None:
            text = arg
        else:
            raise ValueError("expand takes a single string")
    if text is None:
        raise ValueError("expand requires a string")
    return text, options


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        return _usage_error("missing operation")
    op, args = argv[0], argv[1:]
    if op not in OPERATIONS:
        return _usage_error(f"unknown operation '{op}'")

    try:
        config = load_config(Path.cwd())
    except ValueError as e:
        print(f"shellword: config: {e}", file=sys.stderr)
        return 1
    configure_logging(config)

    try:
        if op == "quote":
            if len(args) != 1:
                return _usage_error("quote takes a single string")
            result = quote(args[0])
        elif op == "join":
            result = join(args)
        elif op == "unquote":
            if len(args) != 1:
                return _usage_error("unquote takes a single string")
            result = unquote(args[0])
        elif op == "split":
            if len(args) != 1:
                return _usage_error("split takes a single string")
            result = json.dumps(split(args[0]))
        elif op == "expand":
            try:
                text, options = _parse_expand_args(args, config.expand_options())
            except ValueError as e:
                return _usage_error(str(e))
            result = expand(text, options, env=config.environment())
    except ShellwordError as e:
        log_event("failed", op=op, error=str(e))
        print(f"shellword: {e}", file=sys.stderr)
        return 1

    log_event("done", op=op)
    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
