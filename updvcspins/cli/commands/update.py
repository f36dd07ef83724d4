"""``updvcspins update`` — pin a PKGBUILD's VCS sources in place.

Resolves every ``vcspins`` entry to its tag object and commit, rewrites
``_commit=``, ``_tag=`` and the ``source=()`` array, and writes the result
back (or to ``--output``).  With ``--dry-run`` nothing is written.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from updvcspins.cli.logsetup import configure_logging
from updvcspins.config import UpdvcspinsConfig, get_config
from updvcspins.core.extraction import BashEvaluator
from updvcspins.core.repository import GitRepository
from updvcspins.core.resolver import PinResolver
from updvcspins.core.updater import PinUpdater
from updvcspins.errors import UpdvcspinsError

console = Console()
err_console = Console(stderr=True)


def build_updater(config: UpdvcspinsConfig) -> PinUpdater:
    """Wire a PinUpdater to the configured shell and git binaries."""
    return PinUpdater(
        evaluator=BashEvaluator(shell=config.shell),
        resolver=PinResolver(
            lambda path: GitRepository.open(path, git_binary=config.git_binary)
        ),
    )


def update_cmd(
    pkgbuild: Path = typer.Option(
        None,
        "--pkgbuild",
        "-p",
        help="Path to PKGBUILD.  [default: PKGBUILD]",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Attempt update but do not write to PKGBUILD.",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Write updated PKGBUILD to this path.",
    ),
    pin_commit: bool = typer.Option(
        False,
        "--pin-commit",
        help="Pin commits instead of tag object hashes.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Turn debugging information on (repeat for more).",
    ),
) -> None:
    """Resolve vcspins tags and pin them in the PKGBUILD."""
    try:
        config = get_config()
        configure_logging(verbose, config.log_level)
        pkgbuild = pkgbuild or config.pkgbuild
        pin_commit = pin_commit or config.pin_commit
        result = build_updater(config).run(
            pkgbuild,
            output=output,
            dry_run=dry_run,
            pin_commit=pin_commit,
        )
    except UpdvcspinsError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1)

    mode = "commit" if pin_commit else "tag"
    for filename, pin in result.pins.items():
        value = pin.commit_hash if pin_commit else pin.tag_hash
        console.print(f"[cyan]{escape(filename)}[/cyan] pinned to {mode} [green]{value}[/green]")

    if result.written_to is None:
        console.print("[dim]Dry run, PKGBUILD left unchanged.[/dim]")
    else:
        console.print(f"[bold green]Updated[/bold green] {result.written_to}")
