"""Selective copy of top-level entries using os.scandir with an explicit stack."""

from __future__ import annotations

import os
import shutil
import stat
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from dotme import DotmeError
from dotme.patterns import FilterConfig

# Clone metadata, never treated as a dotfile payload.
GIT_DIR_NAME = ".git"


class CopyError(DotmeError):
    """An I/O failure while listing, creating or copying a path.

    Attributes:
        path: Path the failed operation was acting on.
        operation: Short description of the operation.
    """

    def __init__(self, operation: str, path: Path, cause: OSError) -> None:
        self.operation = operation
        self.path = path
        reason = cause.strerror or str(cause)
        super().__init__(f"failed to {operation} {path}: {reason}")


@dataclass(frozen=True, slots=True)
class CopyReport:
    """Outcome of one selective copy.

    Attributes:
        copied: Copied top-level names; directories end with ``/``.
        ignored: Top-level names rejected by the filter.
        filters: Filter configuration the copy ran with.
        overwritten: Destination files that existed before being replaced.
    """

    copied: tuple[str, ...] = ()
    ignored: tuple[str, ...] = ()
    filters: FilterConfig = field(default_factory=FilterConfig)
    overwritten: tuple[Path, ...] = ()


OverwriteCallback = Callable[[Path], None]


def _list_dir(directory: Path) -> list[os.DirEntry[str]]:
    """Return directory entries sorted by name.

    Raises:
        CopyError: If the directory cannot be listed.
    """
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as exc:
        raise CopyError("read directory", directory, exc) from exc
    entries.sort(key=lambda e: e.name)
    return entries


def _is_dir(dir_entry: os.DirEntry[str]) -> bool:
    try:
        return dir_entry.is_dir()
    except OSError as exc:
        raise CopyError("stat", Path(dir_entry.path), exc) from exc


def _make_dir(path: Path) -> None:
    try:
        path.mkdir(exist_ok=True)
    except OSError as exc:
        raise CopyError("create directory", path, exc) from exc


def _copy_file(src: Path, dst: Path, on_existing: OverwriteCallback) -> None:
    """Copy file bytes and permission bits from *src* to *dst*.

    An existing *dst* is reported to *on_existing*, then truncated and
    replaced.
    """
    if dst.exists():
        on_existing(dst)

    try:
        src_fh = src.open("rb")
    except OSError as exc:
        raise CopyError("open source file", src, exc) from exc

    with src_fh:
        try:
            mode = stat.S_IMODE(os.fstat(src_fh.fileno()).st_mode)
        except OSError as exc:
            raise CopyError("stat source file", src, exc) from exc

        try:
            dst_fh = dst.open("wb")
        except OSError as exc:
            raise CopyError("create destination file", dst, exc) from exc

        with dst_fh:
            try:
                shutil.copyfileobj(src_fh, dst_fh)
            except OSError as exc:
                raise CopyError("copy file content to", dst, exc) from exc

    try:
        os.chmod(dst, mode)
    except OSError as exc:
        raise CopyError("set permissions on", dst, exc) from exc


def _copy_tree(
    src_root: Path, dst_root: Path, on_existing: OverwriteCallback
) -> None:
    """Copy a directory and all of its descendants without filtering."""
    _make_dir(dst_root)

    # Stack items: (source_dir, destination_dir)
    stack: list[tuple[Path, Path]] = [(src_root, dst_root)]

    while stack:
        src_dir, dst_dir = stack.pop()
        child_dirs: list[tuple[Path, Path]] = []

        for dir_entry in _list_dir(src_dir):
            src_path = Path(dir_entry.path)
            dst_path = dst_dir / dir_entry.name

            if _is_dir(dir_entry):
                _make_dir(dst_path)
                child_dirs.append((src_path, dst_path))
            else:
                _copy_file(src_path, dst_path, on_existing)

        stack.extend(child_dirs)


def copy_selected(
    source_root: Path,
    dest_root: Path,
    filters: FilterConfig | None = None,
    on_overwrite: OverwriteCallback | None = None,
) -> CopyReport:
    """Copy the top-level entries of *source_root* that pass *filters*.

    Filtering happens only at the top level; an included directory is
    copied with its whole subtree. A top-level ``.git`` entry is always
    skipped and appears in neither list of the report. Entries are
    processed in name order.

    Args:
        source_root: Directory whose children are considered.
        dest_root: Directory receiving the copies.
        filters: Include/exclude configuration. Defaults to dotfiles only.
        on_overwrite: Called with each destination file that already
            existed, before it is replaced.

    Returns:
        CopyReport: Copied and ignored names with the active filters.

    Raises:
        CopyError: On the first I/O failure. Entries copied before the
            failure stay in place.
    """
    active_filters = filters or FilterConfig()
    copied: list[str] = []
    ignored: list[str] = []
    overwritten: list[Path] = []

    def record_overwrite(path: Path) -> None:
        overwritten.append(path)
        if on_overwrite is not None:
            on_overwrite(path)

    for dir_entry in _list_dir(source_root):
        name = dir_entry.name
        if name == GIT_DIR_NAME:
            continue

        if not active_filters.should_include(name):
            ignored.append(name)
            continue

        src_path = Path(dir_entry.path)
        dst_path = dest_root / name

        if _is_dir(dir_entry):
            _copy_tree(src_path, dst_path, record_overwrite)
            copied.append(name + "/")
        else:
            _copy_file(src_path, dst_path, record_overwrite)
            copied.append(name)

    return CopyReport(
        copied=tuple(copied),
        ignored=tuple(ignored),
        filters=active_filters,
        overwritten=tuple(overwritten),
    )

