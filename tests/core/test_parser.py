"""
Tests for unquoting and splitting.
"""

import pytest

from shellword.core.errors import ShellSyntaxError
from shellword.core.parser import split, unquote


class TestUnquote:
    """Tests for unquote."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ('"value"', "value"),
            ("'value'", "value"),
            ('"value \\"with\\" quotes"', 'value "with" quotes'),
            ("'value \"with\" quotes'", 'value "with" quotes'),
            ("'value 'with' quotes'", "value with quotes"),
            ("value", "value"),
            ("", ""),
            ("\"\"''\"'\"'\"'\\'", "'\"'"),
            ("a\\ b", "a b"),
            ('"a\\\\b"', "a\\b"),
        ],
    )
    def test_unquote(self, text, expected):
        assert unquote(text) == expected

    def test_whitespace_is_kept(self):
        assert unquote("  a  b  ") == "  a  b  "

    def test_backslash_literal_in_single_quotes(self):
        assert unquote("'a\\'") == "a\\"

    def test_trailing_backslash_dropped(self):
        assert unquote("abc\\") == "abc"

    def test_escaped_single_quote_in_single_quotes(self):
        """The backslash is literal, so the second quote closes the string."""
        with pytest.raises(ShellSyntaxError):
            unquote("'escaped \\'single\\' quote'")

    @pytest.mark.parametrize("text", ['"value', "'value", "'a\"", '"a\\"', "x'"])
    def test_mismatched_quotes(self, text):
        with pytest.raises(ShellSyntaxError) as exc:
            unquote(text)
        assert "mismatched quotes" in str(exc.value)
        assert repr(text) in str(exc.value)
        assert exc.value.fragment == text

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            unquote('"value')


class TestSplit:
    """Tests for split."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ('"value"', ["value"]),
            ("value", ["value"]),
            ("value1 value2", ["value1", "value2"]),
            ("value1 'value2 with quotes'", ["value1", "value2 with quotes"]),
            ('value1 "value2 with quotes"', ["value1", "value2 with quotes"]),
            ("value1 'value2 \"with\" quotes'", ["value1", 'value2 "with" quotes']),
            ("git log --oneline -n 10", ["git", "log", "--oneline", "-n", "10"]),
            ("pre\"fix\"'suf'", ["prefixsuf"]),
            ("a\\ b c", ["a b", "c"]),
            ('echo "a \\" b"', ["echo", 'a " b']),
        ],
    )
    def test_split(self, text, expected):
        assert split(text) == expected

    def test_empty(self):
        assert split("") == []

    def test_whitespace_only(self):
        assert split("  \t\n ") == []

    def test_no_empty_words_from_whitespace(self):
        assert split("  a \t\n  b  ") == ["a", "b"]

    def test_quoted_empty_word(self):
        assert split("a '' b \"\"") == ["a", "", "b", ""]

    def test_quoted_whitespace_kept(self):
        assert split("'  a  '") == ["  a  "]

    def test_backslash_literal_in_single_quotes(self):
        assert split("x 'a\\' y") == ["x", "a\\", "y"]

    def test_escaped_single_quote_in_single_quotes(self):
        """Backslash is literal inside single quotes, leaving the last quote open."""
        with pytest.raises(ShellSyntaxError):
            split("value1 'escaped \\'single\\' quote'")

    def test_trailing_backslash(self):
        assert split("a \\") == ["a"]

    @pytest.mark.parametrize("text", ["key='unterminated", 'a "b', "a 'b\" c"])
    def test_mismatched_quotes(self, text):
        with pytest.raises(ShellSyntaxError) as exc:
            split(text)
        assert exc.value.fragment == text

    def test_agrees_with_unquote(self):
        for text in ["'a b'", '"a\\"b"', "a\\ b", "''"]:
            assert split(text) == [unquote(text)]
