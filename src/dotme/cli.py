"""CLI entry point for dotme: I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import sys
import tempfile
from collections.abc import Callable
from pathlib import Path

from dotme import DotmeError, __version__
from dotme.config import ConfigStore
from dotme.copier import copy_selected
from dotme.git import clone_repository
from dotme.patterns import FilterConfig
from dotme.report import render_aliases, render_config, render_filters, render_report

logger = logging.getLogger(__name__)

# First-argument words that select a subcommand instead of a repository URL
COMMANDS = frozenset(
    {"version", "list-aliases", "ls", "remove-alias", "rm", "config"}
)

_DESCRIPTION = """\
Apply dotfiles from a git repository to the current directory.

Only files and folders whose names start with a dot (.) at the root of
the repository are copied. --include and --exclude take comma-separated
glob patterns (*, ?, [abc]) that refine the selection."""

_EPILOG = """\
commands:
  version               print the version information
  list-aliases (ls)     list saved repository aliases
  remove-alias (rm)     remove a saved repository alias
  config                manage default patterns and show configuration"""

Handler = Callable[[argparse.Namespace, ConfigStore], str]


def _add_pattern_options(parser: argparse.ArgumentParser, what: str) -> None:
    parser.add_argument(
        "--include",
        default="",
        help=f"Comma-separated list of {what}patterns to include "
        "(e.g. '.vscode,.gitconfig')",
    )
    parser.add_argument(
        "--exclude",
        default="",
        help=f"Comma-separated list of {what}patterns to exclude (e.g. '.DS_Store')",
    )


def _add_verbose_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def _verbose_parent() -> argparse.ArgumentParser:
    """Return a parent parser adding ``-v`` to a subcommand.

    The option is suppressed when absent so a ``-v`` given before the
    subcommand name is not reset.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Enable debug logging",
    )
    return parent


def build_parser() -> argparse.ArgumentParser:
    """Build the parser for applying a repository.

    Returns:
        argparse.ArgumentParser: Parser for ``dotme [URL] [options]``.
    """
    parser = argparse.ArgumentParser(
        prog="dotme",
        description=_DESCRIPTION,
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "repository",
        nargs="?",
        default=None,
        help="Git repository URL (or local path) to apply",
    )
    parser.add_argument(
        "-a",
        "--alias",
        default=None,
        help="Use a saved repository by alias",
    )
    parser.add_argument(
        "-s",
        "--save",
        default=None,
        metavar="ALIAS",
        help="Save the repository with the given alias",
    )
    _add_pattern_options(parser, "")
    parser.add_argument(
        "--dest",
        default=".",
        help="Directory to copy dotfiles into (default: current directory)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"dotme {__version__}",
    )
    _add_verbose_option(parser)
    parser.set_defaults(handler=_cmd_apply)
    return parser


def build_command_parser() -> argparse.ArgumentParser:
    """Build the parser for the management subcommands.

    Returns:
        argparse.ArgumentParser: Parser for ``dotme COMMAND ...``.
    """
    parser = argparse.ArgumentParser(prog="dotme")
    _add_verbose_option(parser)
    commands = parser.add_subparsers(dest="command", required=True)
    verbose = [_verbose_parent()]

    version = commands.add_parser(
        "version", parents=verbose, help="Print the version information"
    )
    version.set_defaults(handler=_cmd_version)

    list_aliases = commands.add_parser(
        "list-aliases",
        aliases=["ls"],
        parents=verbose,
        help="List all saved repository aliases",
    )
    list_aliases.set_defaults(handler=_cmd_list_aliases)

    remove_alias = commands.add_parser(
        "remove-alias",
        aliases=["rm"],
        parents=verbose,
        help="Remove a saved repository alias",
    )
    remove_alias.add_argument("name", help="Alias to remove")
    remove_alias.set_defaults(handler=_cmd_remove_alias)

    config = commands.add_parser(
        "config", parents=verbose, help="Manage configuration settings"
    )
    config_commands = config.add_subparsers(dest="config_command", required=True)

    set_defaults = config_commands.add_parser(
        "set-default-patterns",
        parents=verbose,
        help="Set default include/exclude patterns",
        description="Set default include and exclude patterns used when no "
        "patterns are given on the command line.",
    )
    _add_pattern_options(set_defaults, "default ")
    set_defaults.set_defaults(handler=_cmd_set_default_patterns)

    show = config_commands.add_parser(
        "show", parents=verbose, help="Show current configuration"
    )
    show.set_defaults(handler=_cmd_show_config)
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse *argv* with the apply parser or the command parser.

    Args:
        argv: Command-line argument list without program name.

    Returns:
        argparse.Namespace: Parsed arguments with a ``handler`` attribute.
    """
    words = [arg for arg in argv if arg not in ("-v", "--verbose")]
    if words and words[0] in COMMANDS:
        return build_command_parser().parse_args(argv)
    return build_parser().parse_args(argv)


def run_dotme(argv: list[str] | None = None, store: ConfigStore | None = None) -> str:
    """Run dotme with provided CLI args and return the console output.

    This function is the primary test target for CLI behavior.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments.
        store: Alias/config store. Defaults to the user's config file.

    Returns:
        str: Final rendered output.

    Raises:
        DotmeError: On any user-facing validation or I/O error.
    """
    args = parse_args(sys.argv[1:] if argv is None else argv)
    return _run_with_args(args, store or ConfigStore())


def _run_with_args(args: argparse.Namespace, store: ConfigStore) -> str:
    handler: Handler = args.handler
    return handler(args, store)


def _resolve_dest(directory: str) -> Path:
    """Resolve the destination directory and validate it exists.

    Raises:
        DotmeError: If *directory* is not a directory.
    """
    dest = Path(directory).resolve()
    if not dest.is_dir():
        raise DotmeError(f"'{directory}' is not a directory")
    return dest


def _resolve_filters(args: argparse.Namespace, store: ConfigStore) -> FilterConfig:
    """Build the filter for this run, falling back to saved defaults.

    The fallback applies only when neither ``--include`` nor ``--exclude``
    yields a pattern.
    """
    filters = FilterConfig.from_strings(args.include, args.exclude)
    if filters.is_empty:
        filters = store.get_default_patterns()
        if not filters.is_empty:
            logger.debug("Using default patterns from %s", store.path)
    return filters


def _cmd_apply(args: argparse.Namespace, store: ConfigStore) -> str:
    lines: list[str] = []

    if args.alias:
        url = store.get_alias(args.alias)
        lines.append(f"Using alias '{args.alias}' for repository: {url}")
    elif args.save:
        if not args.repository:
            raise DotmeError("repository URL is required when using --save")
        store.save_alias(args.save, args.repository)
        return f"Repository '{args.repository}' saved with alias '{args.save}'"
    elif not args.repository:
        raise DotmeError("repository URL is required")
    else:
        url = args.repository

    dest = _resolve_dest(args.dest)
    filters = _resolve_filters(args, store)

    def warn_overwrite(path: Path) -> None:
        lines.append(f"Warning: {path} already exists, overwriting")

    lines.append(f"Cloning repository: {url}")
    with tempfile.TemporaryDirectory(prefix="dotme-") as tmp:
        cloned = clone_repository(url, Path(tmp) / "repo")
        if cloned.branch:
            lines.append(f"Repository cloned, using branch: {cloned.branch}")
        lines.append("Scanning for dotfiles...")
        report = copy_selected(cloned.path, dest, filters, on_overwrite=warn_overwrite)

    lines.append("")
    lines.append(render_report(report))
    lines.append("")
    lines.append("Done! Your dotfiles have been applied successfully.")
    return "\n".join(lines)


def _cmd_version(args: argparse.Namespace, store: ConfigStore) -> str:
    return f"dotme version {__version__}"


def _cmd_list_aliases(args: argparse.Namespace, store: ConfigStore) -> str:
    return render_aliases(store.list_aliases())


def _cmd_remove_alias(args: argparse.Namespace, store: ConfigStore) -> str:
    store.delete_alias(args.name)
    return f"Alias '{args.name}' removed successfully"


def _cmd_set_default_patterns(args: argparse.Namespace, store: ConfigStore) -> str:
    filters = FilterConfig.from_strings(args.include, args.exclude)
    store.set_default_patterns(filters)
    lines = ["Default patterns updated successfully", *render_filters(filters)]
    return "\n".join(lines)


def _cmd_show_config(args: argparse.Namespace, store: ConfigStore) -> str:
    return render_config(store.list_aliases(), store.get_default_patterns())


def main() -> None:
    """Run the CLI entry point with process arguments.

    Parses args exactly once and writes output to stdout.
    Exits with code 1 on user-facing errors.
    """
    args = parse_args(sys.argv[1:])  # single parse
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    try:
        output = _run_with_args(args, ConfigStore())
    except DotmeError as exc:
        sys.stderr.write(f"dotme: {exc}\n")
        sys.exit(1)

    sys.stdout.write(output + "\n")


if __name__ == "__main__":
    main()
