"""Command: list configured content types."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  sitectl types
  sitectl -v types
  sitectl --json types""",
)
@click.pass_obj
def types(app: AppContext) -> None:
    """List content types in declaration order, flagging shared folders."""
    from sitectl.services.resolve import ResolveService

    app.emit(ResolveService(app.vault).list_types())
