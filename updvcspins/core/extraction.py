"""Manifest array extraction.

A manifest is a shell script, so its arrays are only reliably known after
the shell has evaluated it.  Evaluation is delegated to a
:class:`VariableEvaluator`; the default one sources the manifest in bash and
echoes each element of the requested array on its own line.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from updvcspins.errors import ExtractionError, SourceParseError
from updvcspins.models.sources import Input

logger = logging.getLogger(__name__)

PINS_VARIABLE = "vcspins"
SOURCES_VARIABLE = "source"


@runtime_checkable
class VariableEvaluator(Protocol):
    """Anything that can list the elements of a manifest array variable."""

    def evaluate(self, path: Path, variable: str) -> list[str]:
        """Return the evaluated elements of *variable*, in order."""
        ...


class BashEvaluator:
    """Evaluate manifest arrays by sourcing the manifest in bash.

    Parameters
    ----------
    shell:
        The bash-compatible interpreter to run.
    """

    def __init__(self, shell: str = "bash") -> None:
        self.shell = shell

    def _script(self, path: Path, variable: str) -> str:
        return f'source {shlex.quote(str(path))};for x in ${{{variable}[@]}}; do echo "$x"; done'

    def evaluate(self, path: Path, variable: str) -> list[str]:
        manifest = Path(path).resolve()
        argv = [self.shell, "-c", self._script(manifest, variable)]
        logger.debug("Evaluating %s from %s", variable, manifest)
        try:
            completed = subprocess.run(argv, capture_output=True, check=False)
        except OSError as exc:
            raise ExtractionError(f"Failed to run {self.shell}: {exc}") from exc

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            raise ExtractionError(
                f"Process ({self.shell}, {variable!r}) exited with error: "
                f"{completed.returncode}: {stderr}"
            )

        try:
            out = completed.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ExtractionError("Shell output contains invalid utf8") from exc
        lines = out.split("\n")
        if lines[-1] == "":
            lines.pop()
        return [line.removesuffix("\r") for line in lines]


def parse_inputs(lines: Iterable[str]) -> list[Input]:
    """Parse evaluated array elements into :class:`Input` entries."""
    inputs: list[Input] = []
    for line in lines:
        try:
            inputs.append(Input.parse(line))
        except SourceParseError as exc:
            raise SourceParseError(f"Failed to parse entry {line!r}: {exc}") from exc
    return inputs


def list_inputs(path: Path, variable: str, evaluator: VariableEvaluator) -> list[Input]:
    """Evaluate *variable* in the manifest at *path* and parse its entries."""
    return parse_inputs(evaluator.evaluate(path, variable))


def list_pins(path: Path, evaluator: VariableEvaluator) -> list[Input]:
    """Return the entries of the manifest's ``vcspins`` array."""
    return list_inputs(path, PINS_VARIABLE, evaluator)


def list_sources(path: Path, evaluator: VariableEvaluator) -> list[Input]:
    """Return the entries of the manifest's ``source`` array."""
    return list_inputs(path, SOURCES_VARIABLE, evaluator)
