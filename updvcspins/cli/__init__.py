"""updvcspins CLI — Typer-based command-line interface.

Provides the ``updvcspins`` command with subcommands to pin a PKGBUILD's
VCS sources in place and to show what the pins currently resolve to.

All output uses Rich for formatted terminal display.
"""
