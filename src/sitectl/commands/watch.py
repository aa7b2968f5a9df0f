"""Command: watch the site for new notes and turn them into entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import structlog

from sitectl.commands._base import SiteCommand

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext
    from sitectl.services.autodetect import AutoCreateService

log = structlog.get_logger(__name__)


def _ask_title(app: AppContext, service: AutoCreateService, rel_path: str) -> str | None:
    """Title for *rel_path*, or None when the prompt is dismissed."""
    suggestion = service.suggested_title(rel_path)
    if not app.interactive:
        return suggestion
    try:
        title: str = click.prompt(f"Title for {rel_path}", default=suggestion)
    except click.Abort:
        click.echo("", err=True)
        return None
    return title


@click.command(
    cls=SiteCommand,
    examples="""\
  sitectl watch
  sitectl --no-interact watch
  sitectl -v watch --timeout 60""",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0),
    default=None,
    help="Stop after this many seconds (default: run until interrupted).",
)
@click.pass_obj
def watch(app: AppContext, timeout: float | None) -> None:
    """Prompt for a title whenever a new note appears, then create the entry.

    Files written by sitectl itself are ignored, as are repeated events for
    the same path inside the debounce window.
    """
    from sitectl.infrastructure.recent import Debouncer
    from sitectl.infrastructure.watcher import SiteWatcher
    from sitectl.services.autodetect import AutoCreateService

    vault = app.vault
    config = app.settings.watch
    service = AutoCreateService(vault)
    debouncer = Debouncer(config.debounce_ms)

    if not app.settings.quiet and not app.settings.json_output:
        click.echo(f"Watching {vault.root} (Ctrl-C to stop)", err=True)

    try:
        with SiteWatcher(vault.root, app.settings.site.alt_extension) as watcher:
            for rel_path in watcher.iter_created(
                poll_interval=config.poll_interval_ms / 1000, timeout=timeout
            ):
                if vault.recent.consume(rel_path):
                    log.debug("watch_self_write", path=rel_path)
                    continue
                if not debouncer.should_fire(rel_path):
                    log.debug("watch_debounced", path=rel_path)
                    continue
                if not vault.is_file(rel_path):
                    continue

                verdict = service.inspect(rel_path, require_recent=True)
                if not verdict.ok or not verdict.data.get("candidate"):
                    log.debug("watch_skipped", path=rel_path, reason=verdict.data.get("reason"))
                    continue

                title = _ask_title(app, service, rel_path)
                if not title or not title.strip():
                    log.info("watch_dismissed", path=rel_path)
                    continue
                app.emit(service.process(rel_path, title), exit_on_error=False)
    except KeyboardInterrupt:
        click.echo("Stopped watching.", err=True)
