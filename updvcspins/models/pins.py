"""Resolved pin models: the output of the resolution pass."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from updvcspins.models.sources import Source


class ResolvedPin(BaseModel):
    """The immutable identifiers a floating tag resolved to.

    ``tag_hash`` is the object the tag ref points at (the tag object for an
    annotated tag, the commit for a lightweight one).  ``commit_hash`` is the
    commit reached by peeling the tag.
    """

    model_config = ConfigDict(frozen=True)

    tag_hash: str
    commit_hash: str
    source: Source


class ResolvedPins(Mapping[str, ResolvedPin]):
    """Read-only mapping of pin filename -> :class:`ResolvedPin`.

    Iteration follows the order the pins were declared in ``vcspins``.
    """

    def __init__(self, items: Iterable[tuple[str, ResolvedPin]] = ()) -> None:
        self._pins = MappingProxyType(dict(items))

    def __getitem__(self, filename: str) -> ResolvedPin:
        return self._pins[filename]

    def __iter__(self) -> Iterator[str]:
        return iter(self._pins)

    def __len__(self) -> int:
        return len(self._pins)

    def __repr__(self) -> str:
        return f"ResolvedPins({dict(self._pins)!r})"

    def first(self) -> tuple[str, ResolvedPin] | None:
        """Return the first declared ``(filename, pin)``, or ``None`` if empty."""
        for filename, pin in self._pins.items():
            return filename, pin
        return None
