"""
shellword - shell word quoting, splitting and expansion.

Builds command lines that are safe to hand to a remote shell, and reads them
back the way the shell would.
"""

from __future__ import annotations

__version__ = "0.1.0"

from shellword.core.command import CommandBuilder, command
from shellword.core.errors import (
    ShellSyntaxError,
    ShellwordError,
    SubstitutionError,
    UnsetVariableError,
    UnsupportedExpansionError,
)
from shellword.core.expand import Environment, ExpandOptions, expand, run_command
from shellword.core.parser import split, unquote
from shellword.core.quote import QuoteClass, classify, join, quote, strip_unsafe

__all__ = [
    "CommandBuilder",
    "Environment",
    "ExpandOptions",
    "QuoteClass",
    "ShellSyntaxError",
    "ShellwordError",
    "SubstitutionError",
    "UnsetVariableError",
    "UnsupportedExpansionError",
    "__version__",
    "classify",
    "command",
    "expand",
    "join",
    "quote",
    "run_command",
    "split",
    "strip_unsafe",
    "unquote",
]
