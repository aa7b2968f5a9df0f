"""Command: merge the type template into an existing note's frontmatter."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  sitectl standardize src/content/posts/hello.md
  sitectl standardize src/content/posts/hello.md --dry-run
  sitectl --json standardize docs/setup/index.md""",
)
@click.argument("path")
@click.option("--dry-run", is_flag=True, help="Report what would change without writing.")
@click.pass_obj
def standardize(app: AppContext, path: str, dry_run: bool) -> None:
    """Add missing template properties to PATH, keeping existing values."""
    from sitectl.services.standardize import StandardizeService

    app.emit(StandardizeService(app.vault).standardize(path, dry_run=dry_run))
