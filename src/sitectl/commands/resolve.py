"""Command: show which content type owns a path."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  sitectl resolve src/content/posts/hello.md
  sitectl -v resolve docs/guides/setup/index.md
  sitectl --json resolve notes.md""",
)
@click.argument("path")
@click.pass_obj
def resolve(app: AppContext, path: str) -> None:
    """Resolve PATH to its most specific content type."""
    from sitectl.services.resolve import ResolveService

    app.emit(ResolveService(app.vault).resolve(path))
