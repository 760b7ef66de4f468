"""Exceptions raised by the shell-word engine."""

from __future__ import annotations


class ShellwordError(Exception):
    """Base class for all shellword errors."""


class ShellSyntaxError(ShellwordError, ValueError):
    """Input could not be parsed (quotes, ${, $( or an operator)."""

    def __init__(self, message: str, fragment: str | None = None):
        super().__init__(message)
        self.fragment = fragment


class UnsupportedExpansionError(ShellSyntaxError):
    """A parameter expansion operator that is recognised but not implemented."""


class UnsetVariableError(ShellwordError, LookupError):
    """A variable was required but is not set."""

    def __init__(self, name: str):
        super().__init__(f"expand: variable {name!r} not set")
        self.name = name


class SubstitutionError(ShellwordError, RuntimeError):
    """Running the command of a $(...) substitution failed."""

    def __init__(
        self,
        command: str,
        reason: str,
        returncode: int | None = None,
        stderr: str = "",
    ):
        super().__init__(f"eval {command!r}: {reason}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
