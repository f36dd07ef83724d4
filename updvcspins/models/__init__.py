"""updvcspins data models — all Pydantic v2, all frozen (immutable)."""

from updvcspins.models.pins import ResolvedPin, ResolvedPins
from updvcspins.models.sources import (
    FileSource,
    GitSource,
    Input,
    Source,
    SourceKind,
    UrlSource,
    parse_source,
)

__all__ = [
    # sources
    "SourceKind",
    "FileSource",
    "UrlSource",
    "GitSource",
    "Source",
    "Input",
    "parse_source",
    # pins
    "ResolvedPin",
    "ResolvedPins",
]
