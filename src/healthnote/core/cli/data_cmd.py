"""healthnote export / import / clear: backups and data reset."""

from __future__ import annotations

from pathlib import Path

import click

from healthnote.core.utils import run_async_safely
from healthnote.journal.transfer import read_backup, write_backup

from .common import get_context


@click.command()
@click.argument("directory", type=click.Path(file_okay=False), default=".")
@click.pass_context
def export(ctx, directory: str) -> None:
    """Write a JSON backup of your profile and logs into DIRECTORY."""
    app = get_context(ctx)
    path = write_backup(app.store, directory)
    click.echo(f"Exported to {path}")


@click.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_(ctx, path: Path) -> None:
    """Restore a JSON backup. Replaces your profile; replaces logs when the file has valid ones."""
    app = get_context(ctx)
    if not read_backup(app.store, path):
        raise click.ClickException("Import failed. Check the file format.")
    click.echo("Import succeeded.")


@click.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def clear(ctx, yes: bool) -> None:
    """Delete your profile and all logs (remote copy too, when signed in)."""
    if not yes:
        click.confirm("This deletes your profile and every log. Continue?", abort=True)
    app = get_context(ctx)

    async def _run() -> None:
        await app.pipeline.clear_data()
        await app.pipeline.drain()

    run_async_safely(_run())
    click.echo("All data cleared.")
