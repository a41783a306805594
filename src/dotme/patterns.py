"""Entry filtering: glob matching, dotfile detection and include/exclude rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from fnmatch import translate
from functools import lru_cache


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(translate(pattern))
    except re.error:
        return None


def matches(name: str, pattern: str) -> bool:
    """Return whether *name* matches the shell-style glob *pattern*.

    Matching is case-sensitive and applies to a single path segment.
    A pattern that cannot be compiled is compared by exact equality.

    Args:
        name: Entry name.
        pattern: Glob pattern using ``*``, ``?`` and ``[...]``.

    Returns:
        bool: ``True`` when the name matches.
    """
    compiled = _compile(pattern)
    if compiled is None:
        return name == pattern
    return compiled.match(name) is not None


def is_dotfile(name: str) -> bool:
    """Return whether *name* starts with a dot.

    ``"."`` and ``".."`` count as dotfiles; the empty string does not.
    """
    return name.startswith(".")


def parse_patterns(raw: str | None) -> list[str]:
    """Split a comma-separated pattern string into trimmed, non-empty parts.

    Args:
        raw: Raw option value such as ``".vscode, .gitconfig"``.

    Returns:
        list[str]: Patterns in their original order. Empty when *raw* is
        empty, blank, or made only of commas.
    """
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def should_include(
    name: str,
    include_patterns: list[str] | tuple[str, ...],
    exclude_patterns: list[str] | tuple[str, ...],
) -> bool:
    """Decide whether a top-level entry is copied.

    With no patterns at all only dotfiles are taken. Include patterns,
    when present, replace the dotfile rule as an allowlist. Exclude
    patterns are checked last and veto anything they match.

    Args:
        name: Entry name.
        include_patterns: Allowlist patterns.
        exclude_patterns: Veto patterns.

    Returns:
        bool: ``True`` when the entry should be copied.
    """
    if not include_patterns and not exclude_patterns:
        return is_dotfile(name)

    if include_patterns:
        if not any(matches(name, pat) for pat in include_patterns):
            return False
    elif not is_dotfile(name):
        return False

    return not any(matches(name, pat) for pat in exclude_patterns)


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Include/exclude patterns active for one copy.

    Attributes:
        include_patterns: Allowlist patterns; empty means "dotfiles only".
        exclude_patterns: Patterns that veto an otherwise included entry.
    """

    include_patterns: tuple[str, ...] = field(default=())
    exclude_patterns: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "include_patterns", tuple(self.include_patterns))
        object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))

    @classmethod
    def from_strings(
        cls, include: str | None = None, exclude: str | None = None
    ) -> FilterConfig:
        """Build a config from comma-separated option values."""
        return cls(tuple(parse_patterns(include)), tuple(parse_patterns(exclude)))

    @property
    def is_empty(self) -> bool:
        """Whether neither pattern list is set."""
        return not self.include_patterns and not self.exclude_patterns

    def should_include(self, name: str) -> bool:
        """Return whether *name* passes this filter."""
        return should_include(name, self.include_patterns, self.exclude_patterns)
