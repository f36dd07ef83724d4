"""``updvcspins show`` — print what each pin currently resolves to.

Read-only: the PKGBUILD is evaluated and the repositories are queried, but
nothing is written.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from updvcspins.cli.commands.update import build_updater
from updvcspins.cli.logsetup import configure_logging
from updvcspins.config import get_config
from updvcspins.errors import UpdvcspinsError
from updvcspins.models.sources import GitSource

console = Console()
err_console = Console(stderr=True)


def show_cmd(
    pkgbuild: Path = typer.Option(
        None,
        "--pkgbuild",
        "-p",
        help="Path to PKGBUILD.  [default: PKGBUILD]",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Turn debugging information on (repeat for more).",
    ),
) -> None:
    """Resolve vcspins tags and show the result without touching the PKGBUILD."""
    try:
        config = get_config()
        configure_logging(verbose, config.log_level)
        pkgbuild = pkgbuild or config.pkgbuild
        pins = build_updater(config).resolve(pkgbuild)
    except UpdvcspinsError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1)

    table = Table(title=f"VCS pins in {pkgbuild}")
    table.add_column("Name", style="cyan")
    table.add_column("Tag")
    table.add_column("Tag hash", style="green")
    table.add_column("Commit hash", style="green")

    for filename, pin in pins.items():
        tag = pin.source.tag if isinstance(pin.source, GitSource) else None
        table.add_row(escape(filename), escape(tag or "-"), pin.tag_hash, pin.commit_hash)

    console.print(table)
