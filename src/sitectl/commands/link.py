"""Command: rewrite a single link reference."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  sitectl link src/content/posts/hello.md
  sitectl link "hello#intro" --source src/content/posts/other.md
  sitectl -q link docs/setup/index.md""",
)
@click.argument("ref")
@click.option("--source", default=None, help="File the reference appears in.")
@click.pass_obj
def link(app: AppContext, ref: str, source: str | None) -> None:
    """Print the site URL for REF (unresolvable references come back unchanged)."""
    from sitectl.services.links import LinkService

    app.emit(LinkService(app.vault).rewrite(ref, source=source))
