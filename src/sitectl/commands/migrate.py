"""Command: convert legacy posts/pages settings into content types."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  sitectl migrate data.json
  sitectl migrate data.json --output content-types.json
  sitectl --json migrate data.json""",
)
@click.argument("legacy_json", type=click.Path(dir_okay=False))
@click.option("--output", default=None, help="Write the content types to this JSON file.")
@click.pass_obj
def migrate(app: AppContext, legacy_json: str, output: str | None) -> None:
    """Convert the legacy settings document LEGACY_JSON."""
    from sitectl.services.migrate import MigrationService

    app.emit(MigrationService(app.vault).migrate(legacy_json, output=output))
