"""Pin resolution: map a floating tag to its tag object and commit.

Each pin names a git source whose repository must already exist next to
the manifest (``<manifest dir>/<pin filename>``).  Cloning is not
supported; a missing repository is an error.  Resolution is all or
nothing: the first failing pin aborts the whole pass.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from updvcspins.core.repository import GitRepository, TagRepository
from updvcspins.errors import ConfigurationError, PinResolutionError, RepositoryError
from updvcspins.models.pins import ResolvedPin, ResolvedPins
from updvcspins.models.sources import FileSource, GitSource, Input, UrlSource

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[Path], TagRepository]


class PinResolver:
    """Resolves ``vcspins`` entries against local repositories.

    Parameters
    ----------
    repository_factory:
        Opens the repository at a path.  Defaults to :meth:`GitRepository.open`.
    """

    def __init__(self, repository_factory: RepositoryFactory | None = None) -> None:
        self._open = repository_factory or GitRepository.open

    def resolve(self, source: GitSource, repo_path: Path) -> ResolvedPin:
        """Resolve the tag of *source* in the repository at *repo_path*."""
        if not repo_path.exists():
            raise PinResolutionError(
                "Repo does not exist yet, cloning is currently not supported "
                f"{str(repo_path)!r}"
            )

        try:
            repo = self._open(repo_path)
        except RepositoryError as exc:
            raise PinResolutionError(f"Failed to open repository: {exc}") from exc

        tag_name = source.tag
        if tag_name is None:
            raise PinResolutionError(f"No tag configured for {str(source)!r}")

        tag_ref = f"refs/tags/{tag_name}"
        tag_hash = repo.resolve_reference(tag_ref)
        if tag_hash is None:
            raise PinResolutionError(
                f"Failed to find tag {tag_ref!r} in {str(repo_path)!r}"
            )
        logger.info("Resolved tag %r to tag hash: %r", tag_name, tag_hash)

        commit_hash = repo.peel_to_commit(tag_ref)
        if commit_hash is None:
            raise PinResolutionError(
                f"Failed to resolve tag {tag_ref!r} to a commit in {str(repo_path)!r}"
            )
        logger.info("Resolved tag %r to commit hash: %r", tag_name, commit_hash)

        return ResolvedPin(tag_hash=tag_hash, commit_hash=commit_hash, source=source)

    def resolve_all(
        self,
        pins: Iterable[Input],
        folder: Path,
        sources: Iterable[Input] = (),
    ) -> ResolvedPins:
        """Resolve every pin, keyed by filename in declaration order.

        A pin given as a bare name (``vcspins=(repo)``) refers to the git
        entry of *sources* with that filename.
        """
        sources = list(sources)
        declared: dict[str, GitSource] | None = None
        resolved: dict[str, ResolvedPin] = {}
        for pin in pins:
            logger.debug("Processing pin: %s", pin)
            filename = pin.resolved_filename()
            if filename in resolved:
                raise ConfigurationError(f"Pin {filename!r} is declared more than once")

            source = pin.source
            if isinstance(source, FileSource):
                if declared is None:
                    declared = _git_sources_by_filename(sources)
                if filename in declared:
                    source = declared[filename]
                    logger.debug("Pin %r refers to source %s", filename, source)
            if isinstance(source, FileSource):
                raise ConfigurationError(
                    f"File sources are not allowed in vcspins: {str(pin)!r}"
                )
            if isinstance(source, UrlSource):
                raise ConfigurationError(
                    f"Url sources are not allowed in vcspins: {str(pin)!r}"
                )

            resolved[filename] = self.resolve(source, folder / filename)
        return ResolvedPins(resolved.items())


def _git_sources_by_filename(sources: Iterable[Input]) -> dict[str, GitSource]:
    declared: dict[str, GitSource] = {}
    for entry in sources:
        if isinstance(entry.source, GitSource):
            declared.setdefault(entry.resolved_filename(), entry.source)
    return declared
