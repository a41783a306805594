"""Tests for dotme.patterns."""

import pytest

from dotme.patterns import (
    FilterConfig,
    is_dotfile,
    matches,
    parse_patterns,
    should_include,
)


class TestMatches:
    @pytest.mark.parametrize(
        ("name", "pattern", "expected"),
        [
            (".gitconfig", ".gitconfig", True),
            (".gitconfig", ".git*", True),
            (".git", ".git*", True),
            (".vimrc", ".vim?", False),
            (".vimr", ".vim?", True),
            (".bshrc", ".[bz]shrc", True),
            (".bashrc", ".[bz]shrc", False),
            (".zshrc", ".[bz]shrc", True),
            (".kshrc", ".[bz]shrc", False),
            (".DS_Store", ".DS_*", True),
            (".ds_store", ".DS_*", False),
            ("README.md", "README.*", True),
            ("README", "README.*", False),
        ],
    )
    def test_glob_matching(self, name: str, pattern: str, expected: bool) -> None:
        assert matches(name, pattern) is expected

    @pytest.mark.parametrize("pattern", ["[", ".vim[", "[abc"])
    def test_unclosed_bracket_matches_only_itself(self, pattern: str) -> None:
        assert matches(pattern, pattern) is True
        assert matches(pattern + "x", pattern) is False


class TestIsDotfile:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            (".gitconfig", True),
            (".vscode", True),
            (".", True),
            ("..", True),
            ("", False),
            ("README.md", False),
            ("dir/.hidden", False),
            ("./file", True),
        ],
    )
    def test_is_dotfile(self, name: str, expected: bool) -> None:
        assert is_dotfile(name) is expected


class TestParsePatterns:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (".gitconfig, .vimrc , .bashrc", [".gitconfig", ".vimrc", ".bashrc"]),
            (".gitconfig,,.vimrc,", [".gitconfig", ".vimrc"]),
            (".vscode", [".vscode"]),
            ("", []),
            ("   ", []),
            (",,,", []),
            (" , \t, ", []),
        ],
    )
    def test_parse(self, raw: str, expected: list[str]) -> None:
        assert parse_patterns(raw) == expected

    def test_none_is_empty(self) -> None:
        assert parse_patterns(None) == []

    def test_preserves_order_and_duplicates(self) -> None:
        assert parse_patterns("b,a,b") == ["b", "a", "b"]


class TestShouldInclude:
    @pytest.mark.parametrize(
        ("name", "include", "exclude", "expected"),
        [
            # default: dotfiles only
            (".gitconfig", [], [], True),
            ("README.md", [], [], False),
            # include replaces the dotfile rule
            ("README.md", ["README.*"], [], True),
            (".gitconfig", ["README.*"], [], False),
            (".vscode", [".vscode", ".gitconfig"], [], True),
            # exclude vetoes dotfiles
            (".DS_Store", [], [".DS_*"], False),
            (".gitconfig", [], [".DS_*"], True),
            ("README.md", [], [".DS_*"], False),
            # exclude wins over include
            (".gitconfig", [".git*"], [".git*"], False),
            (".gitignore", [".git*"], [".gitconfig"], True),
            # single-character wildcard
            (".vimrc", [".vim?"], [], False),
            (".vimr", [".vim?"], [], True),
        ],
    )
    def test_decision(
        self,
        name: str,
        include: list[str],
        exclude: list[str],
        expected: bool,
    ) -> None:
        assert should_include(name, include, exclude) is expected

    def test_exclude_not_consulted_when_include_misses(self) -> None:
        # A non-matching include rejects even if exclude would not.
        assert should_include("notes.txt", [".*"], ["*.md"]) is False


class TestFilterConfig:
    def test_default_is_empty(self) -> None:
        config = FilterConfig()
        assert config.is_empty is True
        assert config.should_include(".bashrc") is True
        assert config.should_include("Makefile") is False

    def test_lists_are_stored_as_tuples(self) -> None:
        config = FilterConfig([".vscode"], [".DS_Store"])  # type: ignore[arg-type]
        assert config.include_patterns == (".vscode",)
        assert config.exclude_patterns == (".DS_Store",)

    def test_from_strings(self) -> None:
        config = FilterConfig.from_strings(".vscode, .gitconfig", ".DS_Store,")
        assert config.include_patterns == (".vscode", ".gitconfig")
        assert config.exclude_patterns == (".DS_Store",)
        assert config.is_empty is False

    def test_from_blank_strings_equals_default(self) -> None:
        assert FilterConfig.from_strings(" , ", "") == FilterConfig()

    def test_is_frozen(self) -> None:
        config = FilterConfig()
        with pytest.raises(AttributeError):
            config.include_patterns = (".x",)  # type: ignore[misc]
