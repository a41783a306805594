"""Repository retrieval via dulwich."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from dulwich import porcelain
from dulwich.errors import GitProtocolError, NotGitRepository
from dulwich.repo import Repo

from dotme import DotmeError

logger = logging.getLogger(__name__)


class CloneError(DotmeError):
    """The remote repository could not be cloned."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"failed to clone repository {url}: {reason}")


@dataclass(frozen=True, slots=True)
class ClonedRepository:
    """A working tree checked out from a remote.

    Attributes:
        path: Local directory holding the working tree and ``.git``.
        branch: Short name of the checked-out branch, or ``None`` when
            HEAD is detached.
    """

    path: Path
    branch: str | None


def _active_branch(repo: Repo) -> str | None:
    try:
        return porcelain.active_branch(repo).decode("utf-8")
    except (IndexError, KeyError, ValueError):
        return None


def clone_repository(url: str, target: Path) -> ClonedRepository:
    """Clone *url* into the empty directory *target*.

    Args:
        url: Remote URL or local path of the repository.
        target: Destination directory for the working tree.

    Returns:
        ClonedRepository: Location and checked-out branch.

    Raises:
        CloneError: If the transport or repository fails.
    """
    logger.debug("Cloning %s into %s", url, target)
    errstream = io.BytesIO()
    try:
        repo = porcelain.clone(url, str(target), checkout=True, errstream=errstream)
    except (GitProtocolError, NotGitRepository, OSError) as exc:
        raise CloneError(url, str(exc) or type(exc).__name__) from exc

    with repo:
        branch = _active_branch(repo)
    logger.debug("Clone of %s finished on branch %s", url, branch)
    return ClonedRepository(path=target, branch=branch)
