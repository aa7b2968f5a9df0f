"""Command: retitle an entry and rename its file or folder."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  sitectl rename src/content/posts/hello.md "Hello Again"
  sitectl --json rename src/content/posts/_draft.md "Ready Now"
  sitectl rename docs/setup/index.md Installation""",
)
@click.argument("path")
@click.argument("title")
@click.pass_obj
def rename(app: AppContext, path: str, title: str) -> None:
    """Set the title of PATH to TITLE and rename it to match."""
    from sitectl.services.rename import RenameService

    app.emit(RenameService(app.vault).rename(path, title))
