"""Line-oriented manifest rewrite.

Only three kinds of lines are touched:

* ``_commit...`` becomes ``_commit=<commit hash>``
* ``_tag...`` becomes ``_tag=<tag hash>``
* ``source=(`` through the first line ending in ``)`` is replaced by a
  freshly rendered array built from the evaluated ``source`` entries

Every other line is copied through verbatim, in order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence

from updvcspins.errors import ManifestRewriteError
from updvcspins.models.pins import ResolvedPin, ResolvedPins
from updvcspins.models.sources import GitSource, Input

logger = logging.getLogger(__name__)

COMMIT_PREFIX = "_commit"
TAG_PREFIX = "_tag"
SOURCE_PREFIX = "source="
ARRAY_END = ")"


def pin_input(entry: Input, resolved: ResolvedPins, *, pin_commit: bool = False) -> Input:
    """Return *entry* with its source replaced by the matching pin, if any.

    A pinned git source is encoded as ``#commit=<commit hash>`` (tag cleared)
    when *pin_commit* is set, otherwise as ``#tag=<tag hash>``.
    """
    pin = resolved.get(entry.resolved_filename())
    if pin is None:
        return entry

    source = pin.source
    if isinstance(source, GitSource):
        if pin_commit:
            source = source.model_copy(update={"tag": None, "commit": pin.commit_hash})
        else:
            source = source.model_copy(update={"tag": pin.tag_hash})
    return entry.with_source(source)


class ManifestRewriter:
    """Rewrites manifest text with resolved pins.

    Parameters
    ----------
    resolved:
        The resolved pins, keyed by filename.
    sources:
        The evaluated ``source`` array, rendered in this order.
    pin_commit:
        Pin commit hashes instead of tag object hashes.
    """

    def __init__(
        self,
        resolved: ResolvedPins,
        sources: Sequence[Input],
        *,
        pin_commit: bool = False,
    ) -> None:
        self.resolved = resolved
        self.sources = list(sources)
        self.pin_commit = pin_commit

    def _first_pin(self, variable: str) -> ResolvedPin:
        first = self.resolved.first()
        if first is None:
            raise ManifestRewriteError(f"Can't use {variable}= if no vcspins= is set")
        key, pin = first
        if len(self.resolved) > 1:
            logger.warning(
                "%d pins are configured, using the first one (%r) for %s=",
                len(self.resolved),
                key,
                variable,
            )
        logger.debug("Using repo for %s=: %r", variable, key)
        return pin

    def render_source_array(self) -> list[str]:
        """Render the pinned ``source=(...)`` block as lines."""
        lines = ["source=("]
        for entry in self.sources:
            lines.append(f'    "{pin_input(entry, self.resolved, pin_commit=self.pin_commit)}"')
        lines.append(ARRAY_END)
        return lines

    def rewrite(self, lines: Iterable[str]) -> str:
        """Rewrite *lines* (without line terminators) and return the new text."""
        out: list[str] = []
        numbered = enumerate(lines, start=1)
        for lineno, line in numbered:
            logger.debug("Read line from PKGBUILD: %r", line)

            if line.startswith(COMMIT_PREFIX):
                out.append(f"{COMMIT_PREFIX}={self._first_pin(COMMIT_PREFIX).commit_hash}")
            elif line.startswith(TAG_PREFIX):
                out.append(f"{TAG_PREFIX}={self._first_pin(TAG_PREFIX).tag_hash}")
            elif line.startswith(SOURCE_PREFIX):
                if not line.endswith(ARRAY_END):
                    self._skip_array(numbered, lineno)
                out.extend(self.render_source_array())
            else:
                out.append(line)

        return "".join(f"{line}\n" for line in out)

    @staticmethod
    def _skip_array(numbered: Iterator[tuple[int, str]], start: int) -> None:
        for _, line in numbered:
            if line.endswith(ARRAY_END):
                return
        raise ManifestRewriteError(f"source= array starting on line {start} is never closed")
