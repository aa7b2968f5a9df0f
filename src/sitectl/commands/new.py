"""Command: create a new entry from a content type template."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  sitectl new "Hello World" --type posts
  sitectl new "Getting Started" --type docs --folder docs/guides
  sitectl new "Draft Idea" --from src/content/posts/untitled.md
  sitectl --no-interact new "Release Notes" --type posts""",
)
@click.argument("title", required=False)
@click.option("--type", "type_id", default=None, help="Content type id.")
@click.option("--folder", default=None, help="Target folder (defaults to the type's folder).")
@click.option(
    "--from",
    "source",
    default=None,
    help="Adopt an existing file instead of writing a fresh one.",
)
@click.pass_obj
def new(
    app: AppContext,
    title: str | None,
    type_id: str | None,
    folder: str | None,
    source: str | None,
) -> None:
    """Create an entry titled TITLE.

    Prompts for the title when it is omitted in an interactive session.
    """
    from sitectl.services.create import CreateService

    if title is None and app.interactive:
        title = click.prompt("Title", default="", show_default=False)
    result = CreateService(app.vault).create(
        title or "", type_id=type_id, folder=folder, source=source
    )
    app.emit(result)
