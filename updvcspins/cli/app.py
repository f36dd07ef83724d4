"""Main Typer application — registers all CLI commands.

Entry point: ``updvcspins`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from updvcspins.cli.commands.show import show_cmd
from updvcspins.cli.commands.update import update_cmd

app = typer.Typer(
    name="updvcspins",
    help="Pin floating VCS tags in a PKGBUILD to tag object and commit hashes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="update", help="Resolve vcspins and rewrite the PKGBUILD.")(update_cmd)
app.command(name="show", help="Show what each vcspins entry resolves to.")(show_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
