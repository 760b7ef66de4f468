"""
Parameter expansion and command substitution.

Expands $VAR, ${VAR}, ${VAR:op...} and $(command) in a string the way a POSIX
shell would. Arithmetic expansion, tilde expansion, globbing and backticks are
not supported.

The scanner keeps an explicit stack of frames, one per unresolved $, ${ or $(
context. Characters are appended to the frame on top of the stack; when a
context closes, its frame is popped and the resolved text is spliced into the
frame below it.
"""

from __future__ import annotations

import os
import re
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from shellword.core.config import log_event
from shellword.core.errors import (
    ShellSyntaxError,
    SubstitutionError,
    UnsetVariableError,
    UnsupportedExpansionError,
)
from shellword.core.parser import split
from shellword.core.quote import quote

_INT_RE = re.compile(r"\s*-?\d+\s*")

Runner = Callable[[list[str]], str]


@dataclass(frozen=True)
class ExpandOptions:
    """Which expansions are performed."""

    dollar_vars: bool = True
    """Expand bare $VAR. When off, $VAR is left as is (${VAR} still expands)."""

    param_expansion: bool = False
    """Enable ${VAR:op...} operators. When off, only ${VAR} is supported."""

    command_substitution: bool = False
    """Enable $(command)."""

    error_on_unset: bool = False
    """Raise UnsetVariableError instead of expanding unset variables to ''."""

    timeout: float | None = None  # seconds, per substituted command
    max_depth: int = 32  # nesting of ${ and $(


class Environment:
    """Read-only view of the variables available to expansion.

    Wraps any string mapping. The default is the live process environment.
    """

    def __init__(self, mapping: Mapping[str, str] | None = None):
        self._mapping = os.environ if mapping is None else mapping

    def lookup(self, name: str) -> str | None:
        return self._mapping.get(name)

    def names(self) -> list[str]:
        return list(self._mapping)

    def to_dict(self) -> dict[str, str]:
        return dict(self._mapping)


def run_command(
    argv: list[str],
    *,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Run a program and return its standard output.

    The program is executed directly, never through a shell.
    Raises SubstitutionError if it can't be started, fails or times out.
    """
    command = " ".join(argv)
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        raise SubstitutionError(
            command,
            f"exit status {e.returncode}",
            returncode=e.returncode,
            stderr=e.stderr or "",
        ) from e
    except subprocess.TimeoutExpired as e:
        raise SubstitutionError(command, f"timed out after {e.timeout}s") from e
    except OSError as e:
        raise SubstitutionError(command, str(e)) from e
    return result.stdout


class _Form(Enum):
    """Kind of context a frame collects text for."""

    ROOT = "root"
    DOLLAR = "dollar"  # after $, collecting a bare name
    BRACE = "brace"  # ${...}
    PAREN = "paren"  # $(...)


@dataclass
class _Frame:
    form: _Form
    buf: list[str] = field(default_factory=list)
    depth: int = 0  # open parentheses, PAREN only
    quote: str | None = None  # open quote character, PAREN only

    def text(self) -> str:
        return "".join(self.buf)


def _is_name_char(c: str, first: bool) -> bool:
    if c == "_" or ("a" <= c <= "z") or ("A" <= c <= "Z"):
        return True
    return not first and "0" <= c <= "9"


def _is_name(s: str) -> bool:
    return bool(s) and all(_is_name_char(c, i == 0) for i, c in enumerate(s))


class _Expander:
    """State for a single expand() call."""

    def __init__(self, text: str, options: ExpandOptions, env: Environment, runner: Runner):
        self.text = text
        self.options = options
        self.env = env
        self.runner = runner
        self.stack = [_Frame(_Form.ROOT)]
        self.escaped = False

    # === Scanning ===

    def run(self) -> str:
        i = 0
        while i < len(self.text):
            if self._feed(self.text[i]):
                i += 1

        top = self.stack[-1]
        if top.form is _Form.DOLLAR:
            self._finish_dollar()
        if len(self.stack) > 1:
            raise ShellSyntaxError(
                f"expand: unclosed ${{ or $( in {self.text!r}", fragment=self.text
            )
        return self.stack[0].text()

    def _feed(self, c: str) -> bool:
        """Process one character. Returns False if it must be fed again."""
        top = self.stack[-1]

        if self.escaped:
            top.buf.append(c)
            self.escaped = False
            return True

        if top.form is _Form.DOLLAR:
            return self._feed_dollar(top, c)
        elif top.form is _Form.BRACE:
            self._feed_brace(top, c)
        elif top.form is _Form.PAREN:
            self._feed_paren(top, c)
        elif top.form is _Form.ROOT:
            if c == "\\":
                self.escaped = True
            elif c == "$":
                self._push(_Form.DOLLAR)
            else:
                top.buf.append(c)
        else:
            raise AssertionError(f"unhandled frame form {top.form}")
        return True

    def _feed_dollar(self, top: _Frame, c: str) -> bool:
        if not top.buf:
            if c == "$":
                self.stack.pop()
                self.stack[-1].buf.append("$")
                return True
            if c == "{":
                top.form = _Form.BRACE
                return True
            if c == "(" and self.options.command_substitution:
                top.form = _Form.PAREN
                top.depth = 1
                return True
        if _is_name_char(c, first=not top.buf):
            top.buf.append(c)
            return True
        self._finish_dollar()
        return False

    def _feed_brace(self, top: _Frame, c: str) -> None:
        if c == "\\":
            self.escaped = True
        elif c == "}":
            self.stack.pop()
            self._splice(self._expand_brace(top.text()))
        elif c == "$":
            self._push(_Form.DOLLAR)
        else:
            top.buf.append(c)

    def _feed_paren(self, top: _Frame, c: str) -> None:
        # Quotes and escapes stay in the payload for split() to resolve
        if top.quote == "'":
            if c == "'":
                top.quote = None
            top.buf.append(c)
            return
        if c == "\\":
            top.buf.append(c)
            self.escaped = True
        elif c == "$":
            self._push(_Form.DOLLAR)
        elif top.quote == '"':
            if c == '"':
                top.quote = None
            top.buf.append(c)
        elif c in "'\"":
            top.quote = c
            top.buf.append(c)
        elif c == "(":
            top.depth += 1
            top.buf.append(c)
        elif c == ")":
            top.depth -= 1
            if top.depth:
                top.buf.append(c)
                return
            self.stack.pop()
            self._splice(self._substitute(top.text()))
        else:
            top.buf.append(c)

    def _push(self, form: _Form) -> None:
        if len(self.stack) > self.options.max_depth:
            raise ShellSyntaxError(
                f"expand: nesting deeper than {self.options.max_depth} in {self.text!r}",
                fragment=self.text,
            )
        self.stack.append(_Frame(form))

    def _finish_dollar(self) -> None:
        """Resolve a bare $NAME frame into its parent."""
        name = self.stack.pop().text()
        parent = self.stack[-1]
        if not name:
            parent.buf.append("$")
        elif not self.options.dollar_vars:
            parent.buf.append("$" + name)
        else:
            self._splice(self._lookup(name))

    def _splice(self, value: str) -> None:
        """Append an expansion result to the frame on top of the stack.

        Inside a $(...) payload the value is quoted so that it stays one
        literal word when the payload is split.
        """
        top = self.stack[-1]
        if top.form is _Form.PAREN:
            if top.quote == '"':
                value = value.replace("\\", "\\\\").replace('"', '\\"')
            elif value:
                value = quote(value)
        top.buf.append(value)

    # === Evaluation ===

    def _lookup(self, name: str) -> str:
        value = self.env.lookup(name)
        if value is None:
            if self.options.error_on_unset:
                raise UnsetVariableError(name)
            return ""
        return value

    def _substitute(self, payload: str) -> str:
        """Run a $(...) payload and return its output minus one trailing newline."""
        try:
            argv = split(payload)
        except ShellSyntaxError as e:
            raise ShellSyntaxError(f"eval: split {payload!r}: {e}", fragment=payload) from e
        if not argv:
            return ""
        log_event("substitution", level="debug", argv=argv)
        try:
            output = self.runner(argv)
        except SubstitutionError as e:
            log_event("substitution_failed", level="warning", argv=argv, error=str(e))
            raise
        return output.removesuffix("\n")

    def _expand_brace(self, payload: str) -> str:
        if not self.options.param_expansion:
            return self._lookup(payload)
        return self._expand_param(payload)

    def _expand_param(self, payload: str) -> str:
        """Evaluate the body of ${...} with parameter expansion enabled."""
        if not payload:
            return ""

        if payload[0] == "#":
            # ${#parameter} - length of the value
            if len(payload) == 1:
                raise ShellSyntaxError(
                    f"bad substitution (${{{payload}}}) - lone '#'", fragment=payload
                )
            return str(len(self.env.lookup(payload[1:]) or ""))

        if payload[0] == "!":
            return self._expand_indirect(payload[1:])

        idx = 0
        while idx < len(payload) and _is_name_char(payload[idx], idx == 0):
            idx += 1

        if idx == len(payload):
            return self._lookup(payload)
        if idx == 0:
            raise ShellSyntaxError(
                f"bad substitution (${{{payload}}}) - operator at beginning",
                fragment=payload,
            )

        name = payload[:idx]
        op = payload[idx]
        if op != ":":
            raise UnsupportedExpansionError(
                f"support for pattern ${{{payload}}} not implemented", fragment=payload
            )
        return self._expand_colon(name, payload[idx + 1 :], payload)

    def _expand_colon(self, name: str, pattern: str, payload: str) -> str:
        if not pattern:
            raise ShellSyntaxError(
                f"bad substitution (${{{payload}}}) - empty pattern after ':'",
                fragment=payload,
            )
        value = self.env.lookup(name) or ""

        if pattern[0] == "-":
            # ${parameter:-word}
            return value if value else pattern[1:]
        if pattern[0] == "+":
            # ${parameter:+word}
            return pattern[1:] if value else ""
        if pattern[0] in "=?":
            raise UnsupportedExpansionError(
                f"support for pattern ${{{payload}}} not implemented", fragment=payload
            )

        # ${parameter:offset} or ${parameter:offset:length}
        offset_str, sep, length_str = pattern.partition(":")
        offset = self._parse_int(offset_str, "offset", payload)
        length = self._parse_int(length_str, "length", payload) if sep else None
        return _substring(value, offset, length)

    @staticmethod
    def _parse_int(s: str, what: str, payload: str) -> int:
        if not _INT_RE.fullmatch(s):
            raise ShellSyntaxError(
                f"bad substitution (${{{payload}}}) - invalid {what} {s!r}",
                fragment=payload,
            )
        return int(s)

    def _expand_indirect(self, rest: str) -> str:
        if rest and rest[-1] in "*@":
            # ${!prefix*} or ${!prefix@} - names of variables with the prefix
            prefix = rest[:-1]
            names = sorted(n for n in self.env.names() if n.startswith(prefix))
            ifs = self.env.lookup("IFS")
            sep = ifs[0] if ifs else " "
            return sep.join(names)
        if not _is_name(rest):
            raise ShellSyntaxError(
                f"bad substitution (${{!{rest}}})", fragment="!" + rest
            )
        # ${!name} - value of the variable named by name's value
        target = self._lookup(rest)
        if not _is_name(target):
            return ""
        return self._lookup(target)


def _substring(value: str, offset: int, length: int | None) -> str:
    """Slice value like ${parameter:offset:length}. Out of range gives ''."""
    n = len(value)
    if offset < 0:
        offset += n
        if offset < 0:
            return ""
    if offset > n:
        return ""
    if length is None:
        return value[offset:]
    end = offset + length if length >= 0 else n + length
    if end < offset:
        return ""
    return value[offset:end]


def expand(
    text: str,
    options: ExpandOptions | None = None,
    *,
    env: Environment | None = None,
    runner: Runner | None = None,
) -> str:
    """Expand variables and command substitutions in text.

    Args:
        text: Input string.
        options: Which expansions to perform (defaults: $VAR and ${VAR} only).
        env: Variable source, defaults to the process environment.
        runner: Called with the argv of each $(...) and returns its output.
            Defaults to run_command with the options' timeout.

    Raises ShellSyntaxError, UnsetVariableError or SubstitutionError. No
    partial result is returned on error.
    """
    if options is None:
        options = ExpandOptions()
    if env is None:
        env = Environment()
    if runner is None:
        # Copy the environment only when a command actually runs
        def _run(argv: list[str]) -> str:
            return run_command(argv, timeout=options.timeout, env=env.to_dict())

        runner = _run

    return _Expander(text, options, env, runner).run()
