"""Chainable builder for shell command lines.

Arguments and redirect targets are quoted, raw fragments are not:

    >>> str(CommandBuilder("echo").arg("foo").pipe("grep", "-q").arg("foo"))
    'echo foo | grep -q foo'
"""

from __future__ import annotations

from shellword.core.quote import join, quote


def command(cmd: str, *args: str) -> str:
    """Return a quoted command line, e.g. command("echo", "a b") -> "echo 'a b'"."""
    if not args:
        return quote(cmd)
    return join([cmd, *args])


class CommandBuilder(str):
    """An immutable command line. Every method returns a new builder.

    The initial string is used as is, so it may already contain shell syntax.
    """

    def _append(self, fragment: str) -> CommandBuilder:
        return CommandBuilder(str(self) + fragment)

    def pipe(self, cmd: str, *args: str) -> CommandBuilder:
        """Pipe the output into another command."""
        return self._append(" | " + command(cmd, *args))

    def arg(self, arg: str) -> CommandBuilder:
        return self._append(" " + quote(arg))

    def args(self, *args: str) -> CommandBuilder:
        builder = self
        for a in args:
            builder = builder.arg(a)
        return builder

    def raw(self, fragment: str) -> CommandBuilder:
        """Append a fragment without quoting."""
        return self._append(" " + fragment)

    def err_to_null(self) -> CommandBuilder:
        return self._append(" 2>/dev/null")

    def out_to_null(self) -> CommandBuilder:
        return self._append(" >/dev/null")

    def err_to_out(self) -> CommandBuilder:
        return self._append(" 2>&1")

    def out_to_file(self, path: str) -> CommandBuilder:
        return self._append(" >" + quote(path))

    def err_to_file(self, path: str) -> CommandBuilder:
        return self._append(" 2>" + quote(path))

    def append_out_to_file(self, path: str) -> CommandBuilder:
        return self._append(" >>" + quote(path))

    def append_err_to_file(self, path: str) -> CommandBuilder:
        return self._append(" 2>>" + quote(path))
