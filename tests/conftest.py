"""Shared fixtures for dotme tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from dulwich import porcelain

from dotme.config import ConfigStore


@pytest.fixture
def dotfile_tree(tmp_path: Path) -> Path:
    """Create a source tree shaped like a cloned dotfiles repository.

    Structure::

        source/
        ├── .DS_Store
        ├── .git/
        │   └── HEAD
        ├── .gitconfig          ("git config content")
        ├── .vscode/
        │   └── settings.json   ("vscode settings")
        └── README.md
    """
    root = tmp_path / "source"
    root.mkdir()
    (root / ".gitconfig").write_text("git config content")
    (root / ".vscode").mkdir()
    (root / ".vscode" / "settings.json").write_text("vscode settings")
    (root / ".DS_Store").write_bytes(b"\x00\x01")
    (root / "README.md").write_text("readme")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    return root


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    """Empty destination directory."""
    dest = tmp_path / "dest"
    dest.mkdir()
    return dest


@pytest.fixture
def config_store(tmp_path: Path) -> ConfigStore:
    """Store backed by a config file under a temporary directory."""
    return ConfigStore(tmp_path / "config" / "config.json")


@pytest.fixture
def dotfiles_repo(tmp_path: Path) -> Path:
    """Create a local git repository with committed dotfiles.

    Structure::

        remote/
        ├── .gitconfig
        ├── .vscode/
        │   └── settings.json
        └── README.md
    """
    root = tmp_path / "remote"
    root.mkdir()
    (root / ".gitconfig").write_text("git config content")
    (root / ".vscode").mkdir()
    (root / ".vscode" / "settings.json").write_text("vscode settings")
    (root / "README.md").write_text("readme")

    repo = porcelain.init(str(root))
    try:
        porcelain.add(
            repo,
            paths=[
                str(root / ".gitconfig"),
                str(root / ".vscode" / "settings.json"),
                str(root / "README.md"),
            ],
        )
        porcelain.commit(
            repo,
            message=b"Add dotfiles",
            author=b"Test <test@example.com>",
            committer=b"Test <test@example.com>",
        )
    finally:
        repo.close()
    return root
