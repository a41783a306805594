"""Plain-text rendering of copy reports, alias listings and configuration."""

from __future__ import annotations

from collections.abc import Mapping

from dotme.copier import CopyReport
from dotme.patterns import FilterConfig

_INDENT = "   "


def _format_patterns(patterns: tuple[str, ...]) -> str:
    return ", ".join(patterns)


def _item_lines(items: tuple[str, ...]) -> list[str]:
    return [f"{_INDENT}- {item}" for item in items]


def render_filters(filters: FilterConfig) -> list[str]:
    """Return one line per non-empty pattern list."""
    lines: list[str] = []
    if filters.include_patterns:
        lines.append(
            f"{_INDENT}Include patterns: {_format_patterns(filters.include_patterns)}"
        )
    if filters.exclude_patterns:
        lines.append(
            f"{_INDENT}Exclude patterns: {_format_patterns(filters.exclude_patterns)}"
        )
    return lines


def render_report(report: CopyReport) -> str:
    """Render the copy summary.

    Names are listed in report order. The active filters section appears
    only when at least one pattern list is set.

    Args:
        report: Finished copy report.

    Returns:
        str: Multi-line summary without a trailing newline.
    """
    lines: list[str] = ["Summary:"]
    lines.append(f"Copied {len(report.copied)} items:")
    lines.extend(_item_lines(report.copied))
    lines.append("")
    lines.append(f"Ignored {len(report.ignored)} items:")
    lines.extend(_item_lines(report.ignored))

    if not report.filters.is_empty:
        lines.append("")
        lines.append("Active filters:")
        lines.extend(render_filters(report.filters))

    return "\n".join(lines)


def render_aliases(aliases: Mapping[str, str]) -> str:
    """Render saved aliases, one ``name: url`` per line."""
    if not aliases:
        return "No aliases found. Save one with 'dotme -s <alias> <repository-url>'"
    lines = ["Saved repository aliases:"]
    lines.extend(f"{_INDENT}{name}: {url}" for name, url in aliases.items())
    return "\n".join(lines)


def render_config(aliases: Mapping[str, str], defaults: FilterConfig) -> str:
    """Render the ``config show`` view."""
    lines = ["Repository aliases:"]
    if aliases:
        lines.extend(f"{_INDENT}{name}: {url}" for name, url in aliases.items())
    else:
        lines.append(f"{_INDENT}(none)")

    lines.append("")
    lines.append("Default patterns:")
    if defaults.is_empty:
        lines.append(f"{_INDENT}(none - will include all dotfiles)")
    else:
        lines.extend(render_filters(defaults))
    return "\n".join(lines)
