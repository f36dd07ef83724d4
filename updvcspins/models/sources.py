"""Manifest source entries and their URL-embedded VCS metadata.

A manifest ``source=()`` entry is either a bare source or ``name::source``.
Sources are classified by the scheme in front of ``://``:

* ``https``, ``http``, ``ftp``  ->  :class:`UrlSource`
* anything starting with ``git`` (``git``, ``git+https``, ...)  ->  :class:`GitSource`
* no scheme  ->  :class:`FileSource`

``GitSource`` carries its metadata in suffixes appended to the URL::

    <url>[?signed][#commit=<hash>][#tag=<name>]

The string form of every model here is the exact text written back into the
manifest, so ``str()`` must stay stable for fields that were not changed.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from typing import Annotated, Literal, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

from updvcspins.errors import SourceParseError

SIGNED_MARKER = "?signed"
COMMIT_MARKER = "#commit="
TAG_MARKER = "#tag="
FILENAME_SEPARATOR = "::"

URL_SCHEMES = frozenset({"https", "http", "ftp"})


class SourceKind(str, Enum):
    """Provenance of a downloadable artifact."""

    FILE = "file"
    URL = "url"
    GIT = "git"


def _url_filename(url: str) -> str:
    """Return the last path segment of *url* (query and fragment excluded)."""
    try:
        path = urlsplit(url).path
    except ValueError as exc:
        raise SourceParseError(f"Invalid url {url!r}: {exc}") from exc
    if not path:
        raise SourceParseError(f"Url contains no path: {url!r}")
    return path.rsplit("/", 1)[-1]


def _require_filename(filename: str, raw: str) -> str:
    if not filename:
        raise SourceParseError(f"Filename can't be empty: {raw!r}")
    return filename


class FileSource(BaseModel):
    """A path relative to the manifest's directory."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[SourceKind.FILE] = SourceKind.FILE
    path: str

    def filename(self) -> str:
        name = PurePosixPath(self.path).name
        if name == "..":
            name = ""
        return _require_filename(name, self.path)

    def __str__(self) -> str:
        return self.path


class UrlSource(BaseModel):
    """A plain HTTP(S) or FTP download."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[SourceKind.URL] = SourceKind.URL
    url: str

    def filename(self) -> str:
        return _require_filename(_url_filename(self.url), self.url)

    def __str__(self) -> str:
        return self.url


class GitSource(BaseModel):
    """A git-backed source with optional commit, tag and signature flags.

    ``commit`` and ``tag`` are independent; both are emitted when both are
    set, the format does not make them mutually exclusive.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal[SourceKind.GIT] = SourceKind.GIT
    url: str
    commit: str | None = None
    tag: str | None = None
    signed: bool = False

    @classmethod
    def parse(cls, text: str) -> GitSource:
        """Decode ``<url>[?signed][#commit=..][#tag=..]``.

        The signed marker is stripped twice: once from the very end, and
        again after the commit and tag suffixes have been removed, because
        writers disagree on where ``?signed`` goes.
        """
        signed = False
        commit = None
        tag = None

        if text.endswith(SIGNED_MARKER):
            signed = True
            text = text[: -len(SIGNED_MARKER)]

        remaining, sep, value = text.rpartition(COMMIT_MARKER)
        if sep:
            commit = value
            text = remaining

        remaining, sep, value = text.rpartition(TAG_MARKER)
        if sep:
            tag = value
            text = remaining

        if text.endswith(SIGNED_MARKER):
            signed = True
            text = text[: -len(SIGNED_MARKER)]

        return cls(url=text, commit=commit, tag=tag, signed=signed)

    def filename(self) -> str:
        return _require_filename(_url_filename(self.url), self.url)

    def __str__(self) -> str:
        out = self.url
        if self.signed:
            out += SIGNED_MARKER
        if self.commit is not None:
            out += f"{COMMIT_MARKER}{self.commit}"
        if self.tag is not None:
            out += f"{TAG_MARKER}{self.tag}"
        return out


Source = Annotated[
    Union[FileSource, UrlSource, GitSource],
    Field(discriminator="kind"),
]


def parse_source(text: str) -> FileSource | UrlSource | GitSource:
    """Classify *text* by its scheme and parse it into a source model."""
    scheme, sep, _ = text.partition("://")
    if not sep:
        return FileSource(path=text)
    if scheme in URL_SCHEMES:
        return UrlSource(url=text)
    if scheme.startswith("git"):
        return GitSource.parse(text)
    raise SourceParseError(f"Unknown scheme: {scheme!r} in {text!r}")


class Input(BaseModel):
    """One entry of a manifest source array.

    ``filename`` is set only when the entry used the ``name::source``
    syntax; otherwise the filename is derived from the source.
    """

    model_config = ConfigDict(frozen=True)

    source: Source
    filename: str | None = None

    @classmethod
    def parse(cls, line: str) -> Input:
        """Parse a raw array element, splitting on the first ``::`` only."""
        name, sep, rest = line.partition(FILENAME_SEPARATOR)
        if sep:
            return cls(source=parse_source(rest), filename=name)
        return cls(source=parse_source(line))

    def resolved_filename(self) -> str:
        """Return the explicit filename, or the one derived from the source."""
        if self.filename is not None:
            return _require_filename(self.filename, str(self))
        return self.source.filename()

    def with_source(self, source: FileSource | UrlSource | GitSource) -> Input:
        """Return a copy of this entry pointing at *source*."""
        return self.model_copy(update={"source": source})

    def __str__(self) -> str:
        if self.filename is not None:
            return f"{self.filename}{FILENAME_SEPARATOR}{self.source}"
        return str(self.source)
