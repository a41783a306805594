"""dotme: apply dotfiles from a git repository to the current directory."""

__version__ = "0.1.0"


class DotmeError(Exception):
    """User-facing CLI error.

    Raised for invalid arguments, unknown aliases, failed clones and
    copy failures. The message is printed to stderr and the process
    exits with code 1.
    """
