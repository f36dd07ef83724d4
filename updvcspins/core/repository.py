"""Read-only access to an existing local git repository.

Only the two queries pin resolution needs are exposed: what a ref points
at, and which commit it peels to.  Queries shell out to the ``git`` binary.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from updvcspins.errors import RepositoryError

logger = logging.getLogger(__name__)


@runtime_checkable
class TagRepository(Protocol):
    """Protocol for repository backends used by the pin resolver."""

    def resolve_reference(self, ref: str) -> str | None:
        """Return the object id *ref* points at, or ``None`` if it doesn't exist."""
        ...

    def peel_to_commit(self, ref: str) -> str | None:
        """Return the commit *ref* ultimately points at, or ``None``."""
        ...


class GitRepository:
    """A repository on disk, queried through ``git rev-parse``."""

    def __init__(self, path: Path, git_binary: str = "git") -> None:
        self.path = Path(path)
        self.git_binary = git_binary

    @classmethod
    def open(cls, path: Path, git_binary: str = "git") -> GitRepository:
        """Open the repository at *path*, failing if it isn't one."""
        repo = cls(path, git_binary=git_binary)
        completed = repo._run(["rev-parse", "--git-dir"])
        if completed.returncode != 0:
            raise RepositoryError(
                f"Failed to open repository {str(path)!r}: {completed.stderr.strip()}"
            )
        logger.debug("Opened repository at %s", path)
        return repo

    def resolve_reference(self, ref: str) -> str | None:
        return self._rev_parse(ref)

    def peel_to_commit(self, ref: str) -> str | None:
        return self._rev_parse(f"{ref}^{{commit}}")

    def _rev_parse(self, rev: str) -> str | None:
        completed = self._run(["rev-parse", "--verify", "--quiet", rev])
        if completed.returncode != 0:
            return None
        return completed.stdout.strip() or None

    def _run(self, argv: list[str]) -> subprocess.CompletedProcess[str]:
        command = [self.git_binary, *argv]
        # Never discover an enclosing repository, e.g. the manifest's own checkout.
        env = {**os.environ, "GIT_CEILING_DIRECTORIES": str(self.path.resolve().parent)}
        try:
            return subprocess.run(
                command,
                cwd=self.path,
                env=env,
                check=False,
                text=True,
                capture_output=True,
            )
        except OSError as exc:
            raise RepositoryError(
                f"Failed to run {' '.join(command)!r} in {str(self.path)!r}: {exc}"
            ) from exc
