"""Exception hierarchy for updvcspins.

Every failure is fatal for the run: the updater never writes a partially
pinned manifest.  All exceptions derive from ``UpdvcspinsError`` so the CLI
can report them uniformly.
"""

from __future__ import annotations


class UpdvcspinsError(Exception):
    """Base class for all updvcspins errors."""


class ConfigurationError(UpdvcspinsError):
    """Raised when the manifest declares no usable pins."""


class SourceParseError(UpdvcspinsError, ValueError):
    """Raised when a source entry cannot be parsed or has no filename."""


class ExtractionError(UpdvcspinsError):
    """Raised when evaluating a manifest array in the shell fails."""


class RepositoryError(UpdvcspinsError):
    """Raised when a local repository cannot be opened or queried."""


class PinResolutionError(UpdvcspinsError):
    """Raised when a pin's tag cannot be resolved to a tag/commit pair."""


class ManifestRewriteError(UpdvcspinsError):
    """Raised when the manifest references pins that were not resolved."""


class ManifestIOError(UpdvcspinsError):
    """Raised when the manifest cannot be read, decoded or written."""
