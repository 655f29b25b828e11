"""Unit tests for escape_argument on both quoting branches."""

from __future__ import annotations

import shlex

import pytest

from duskbench.server.shell import escape_argument


class TestPosixEscaping:

    @pytest.mark.parametrize(
        "argument",
        [
            "/usr/bin/php",
            "it's here",
            "with space and 'quotes'",
            "nul\0byte it's",
            "$HOME `id` \"double\"",
        ],
    )
    def test_round_trips_through_shell_parsing(self, argument):
        assert shlex.split(escape_argument(argument, windows=False)) == [argument]

    def test_empty_string_is_one_empty_argument(self):
        escaped = escape_argument("", windows=False)
        assert escaped == "''"
        assert shlex.split(f"php {escaped}") == ["php", ""]

    def test_single_quote_escaping(self):
        assert escape_argument("a'b", windows=False) == "'a'\\''b'"


class TestWindowsEscaping:

    def test_empty_string(self):
        assert escape_argument("", windows=True) == '""'

    def test_plain_argument_is_unchanged(self):
        assert escape_argument("php.exe", windows=True) == "php.exe"

    def test_nul_is_replaced(self):
        assert escape_argument("a\0b", windows=True) == "a?b"

    def test_spaces_are_quoted(self):
        assert escape_argument(r"C:\Program Files\php\php.exe", windows=True) == (
            r'"C:\Program Files\php\php.exe"'
        )

    def test_trailing_backslashes_are_doubled(self):
        assert escape_argument("C:\\my dir\\", windows=True) == '"C:\\my dir\\\\"'

    def test_special_characters(self):
        assert escape_argument('say "hi" 100% ^ !', windows=True) == (
            '"say ""hi"" 100"^%" "^^" "^!""'
        )

    def test_newline(self):
        assert escape_argument("a\nb", windows=True) == '"a!LF!b"'
