"""Subcommand modules for sitectl.

``register_commands()`` imports each command module on registration so
the root group stays a thin shell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every command on the root CLI group."""
    from sitectl.commands.convert_links import convert_links
    from sitectl.commands.heading_link import heading_link
    from sitectl.commands.link import link
    from sitectl.commands.migrate import migrate
    from sitectl.commands.new import new
    from sitectl.commands.rename import rename
    from sitectl.commands.resolve import resolve
    from sitectl.commands.standardize import standardize
    from sitectl.commands.types import types
    from sitectl.commands.watch import watch

    cli.add_command(resolve)
    cli.add_command(types)
    cli.add_command(new)
    cli.add_command(standardize)
    cli.add_command(rename)
    cli.add_command(convert_links)
    cli.add_command(link)
    cli.add_command(heading_link)
    cli.add_command(watch)
    cli.add_command(migrate)
