"""Tests for the command builder."""

from shellword.core.command import CommandBuilder, command


class TestCommand:
    def test_no_args(self):
        assert command("echo") == "echo"
        assert command("my prog") == "'my prog'"

    def test_args(self):
        assert command("echo", "foo") == "echo foo"
        assert command("echo", "foo", "bar") == "echo foo bar"
        assert command("echo", "foo bar") == "echo 'foo bar'"


class TestCommandBuilder:
    def test_pipe(self):
        cmd = CommandBuilder("echo").arg("foo").pipe("grep", "-q").arg("foo")
        assert cmd == "echo foo | grep -q foo"

    def test_args(self):
        assert CommandBuilder("echo").args("foo", "bar baz") == "echo foo 'bar baz'"

    def test_args_empty(self):
        assert CommandBuilder("true").args() == "true"

    def test_initial_is_raw(self):
        assert CommandBuilder("sudo -n ls").arg("a b") == "sudo -n ls 'a b'"

    def test_raw(self):
        assert CommandBuilder("echo").raw("$HOME") == "echo $HOME"

    def test_redirects(self):
        base = CommandBuilder("echo").arg("foo")
        assert base.err_to_null() == "echo foo 2>/dev/null"
        assert base.out_to_null() == "echo foo >/dev/null"
        assert base.err_to_out() == "echo foo 2>&1"
        assert base.out_to_file("file") == "echo foo >file"
        assert base.err_to_file("file") == "echo foo 2>file"
        assert base.append_out_to_file("file") == "echo foo >>file"
        assert base.append_err_to_file("file") == "echo foo 2>>file"

    def test_redirect_target_quoted(self):
        assert CommandBuilder("ls").out_to_file("my log.txt") == "ls >'my log.txt'"

    def test_immutable(self):
        base = CommandBuilder("echo")
        base.arg("foo")
        assert base == "echo"

    def test_returns_builder(self):
        assert isinstance(CommandBuilder("echo").arg("x").err_to_out(), CommandBuilder)
        assert str(CommandBuilder("echo").arg("x")) == "echo x"
