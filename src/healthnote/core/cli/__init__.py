"""HealthNote CLI: onboarding, logging, summaries and backups."""

import click

from healthnote import __version__


@click.group()
@click.version_option(version=__version__, package_name="healthnote")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), help="Path to config.yaml.")
@click.pass_context
def main(ctx: click.Context, config_file: str | None) -> None:
    """HealthNote: a local-first health journal."""
    ctx.ensure_object(dict)["config_file"] = config_file


# Register subcommands
from .auth_cmd import login, logout
from .data_cmd import clear, export, import_
from .log_cmd import log
from .profile_cmd import init, profile
from .summary_cmd import summary

main.add_command(init)
main.add_command(profile)
main.add_command(log)
main.add_command(summary)
main.add_command(export)
main.add_command(import_)
main.add_command(clear)
main.add_command(login)
main.add_command(logout)
