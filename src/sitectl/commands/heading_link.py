"""Command: build a link to the heading at a line."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteCommand
from sitectl.domain.types import HeadingLinkFormat

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.command(
    "heading-link",
    cls=SiteCommand,
    examples="""\
  sitectl heading-link src/content/posts/hello.md --line 12
  sitectl heading-link docs/setup/index.md --line 4 --format site
  sitectl -q heading-link notes.md --line 30 --format markdown""",
)
@click.argument("path")
@click.option("--line", "line", type=click.IntRange(min=1), required=True, help="1-based line.")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([f.value for f in HeadingLinkFormat]),
    default=None,
    help="Link style (defaults to [site] heading_link_format).",
)
@click.pass_obj
def heading_link(app: AppContext, path: str, line: int, fmt: str | None) -> None:
    """Link to the heading at or above LINE in PATH."""
    from sitectl.services.links import LinkService

    link_format = HeadingLinkFormat(fmt) if fmt else None
    app.emit(LinkService(app.vault).heading_link(path, line, fmt=link_format))
