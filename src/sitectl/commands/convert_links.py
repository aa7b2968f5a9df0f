"""Command: rewrite internal note links in a file to site URLs."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.command(
    "convert-links",
    cls=SiteCommand,
    examples="""\
  sitectl convert-links src/content/posts/hello.md
  sitectl convert-links src/content/posts/hello.md --dry-run
  sitectl -v convert-links docs/setup/index.md""",
)
@click.argument("path")
@click.option("--dry-run", is_flag=True, help="Count conversions without writing.")
@click.pass_obj
def convert_links(app: AppContext, path: str, dry_run: bool) -> None:
    """Convert wiki and markdown links in the body of PATH."""
    from sitectl.services.links import LinkService

    app.emit(LinkService(app.vault).convert(path, dry_run=dry_run))
