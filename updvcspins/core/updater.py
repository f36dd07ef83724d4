"""End-to-end pin update: extract, resolve, rewrite, write back.

The run is all or nothing.  The manifest is read once, and written at most
once, only after every pin resolved and the whole rewrite succeeded.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from updvcspins.core.extraction import BashEvaluator, VariableEvaluator, list_pins, list_sources
from updvcspins.core.resolver import PinResolver
from updvcspins.core.rewriter import ManifestRewriter
from updvcspins.errors import ConfigurationError, ManifestIOError
from updvcspins.models.pins import ResolvedPin
from updvcspins.models.sources import Input

logger = logging.getLogger(__name__)


class UpdateResult(BaseModel):
    """Outcome of one update run."""

    model_config = ConfigDict(frozen=True)

    text: str
    pins: dict[str, ResolvedPin]
    written_to: Path | None = None


class PinUpdater:
    """Runs the full update for one manifest.

    Parameters
    ----------
    evaluator:
        Evaluates manifest arrays.  Defaults to :class:`BashEvaluator`.
    resolver:
        Resolves pins.  Defaults to a :class:`PinResolver` over local git
        repositories.
    """

    def __init__(
        self,
        evaluator: VariableEvaluator | None = None,
        resolver: PinResolver | None = None,
    ) -> None:
        self.evaluator = evaluator or BashEvaluator()
        self.resolver = resolver or PinResolver()

    def resolve(self, pkgbuild: Path) -> dict[str, ResolvedPin]:
        """Resolve every pin declared in *pkgbuild* without rewriting it."""
        pkgbuild = Path(pkgbuild)
        _check_manifest(pkgbuild)
        pins = self._list_pins(pkgbuild)
        sources = list_sources(pkgbuild, self.evaluator)
        return dict(self.resolver.resolve_all(pins, _folder(pkgbuild), sources))

    def run(
        self,
        pkgbuild: Path,
        *,
        output: Path | None = None,
        dry_run: bool = False,
        pin_commit: bool = False,
    ) -> UpdateResult:
        """Pin the manifest at *pkgbuild*.

        The result is written to *output* (or back to *pkgbuild*) unless
        *dry_run* is set, in which case nothing on disk changes.
        """
        pkgbuild = Path(pkgbuild)
        _check_manifest(pkgbuild)

        pins = self._list_pins(pkgbuild)
        sources = list_sources(pkgbuild, self.evaluator)
        logger.debug("Found sources: %s", [str(s) for s in sources])
        resolved = self.resolver.resolve_all(pins, _folder(pkgbuild), sources)

        rewriter = ManifestRewriter(resolved, sources, pin_commit=pin_commit)
        text = rewriter.rewrite(_read_lines(pkgbuild))

        written_to = None
        if dry_run:
            logger.debug("Skipping write back because of dry run")
        else:
            written_to = output or pkgbuild
            logger.debug("Updating PKGBUILD at %s", written_to)
            _write_atomic(written_to, text)

        return UpdateResult(text=text, pins=dict(resolved), written_to=written_to)

    def _list_pins(self, pkgbuild: Path) -> list[Input]:
        pins = list_pins(pkgbuild, self.evaluator)
        logger.debug("Found vcs pins: %s", [str(p) for p in pins])
        if not pins:
            raise ConfigurationError("No vcs pins are configured (vcspins= is empty)")
        return pins


def _folder(pkgbuild: Path) -> Path:
    return pkgbuild.resolve().parent


def _check_manifest(pkgbuild: Path) -> None:
    if not pkgbuild.is_file():
        raise ManifestIOError(f"Failed to access PKGBUILD at {str(pkgbuild)!r}")


def _write_atomic(path: Path, text: str) -> None:
    """Write *text* to a temp file beside *path*, then rename it into place."""
    try:
        fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise ManifestIOError(f"Failed to write to PKGBUILD at {str(path)!r}: {exc}") from exc
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        if path.exists():
            os.chmod(temp_path, path.stat().st_mode & 0o7777)
        os.replace(temp_path, path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise ManifestIOError(f"Failed to write to PKGBUILD at {str(path)!r}: {exc}") from exc


def _read_lines(pkgbuild: Path) -> list[str]:
    try:
        data = pkgbuild.read_bytes()
    except OSError as exc:
        raise ManifestIOError(f"Failed to read PKGBUILD at {str(pkgbuild)!r}: {exc}") from exc
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ManifestIOError(f"Failed to decode line in {str(pkgbuild)!r}: {exc}") from exc
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]
