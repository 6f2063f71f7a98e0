"""healthnote login / logout: Supabase session management."""

from __future__ import annotations

import click

from healthnote.core.exceptions import RemoteError
from healthnote.core.utils import run_async_safely

from .common import get_context


@click.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.option("--sign-up", is_flag=True, help="Create the account first.")
@click.pass_context
def login(ctx, email: str, password: str, sign_up: bool) -> None:
    """Sign in so your journal is mirrored to Supabase."""
    app = get_context(ctx)
    if not app.remote_enabled:
        raise click.ClickException("Supabase is not configured; running in local mode.")

    try:
        if sign_up and app.session.sign_up(email, password) is None:
            click.echo("Check your inbox to confirm the account, then log in.")
            return
        user_id = app.session.sign_in(email, password)
    except RemoteError as e:
        raise click.ClickException(str(e)) from e

    state = run_async_safely(app.pipeline.load())
    click.echo(f"Signed in ({user_id}).")
    if state.needs_onboarding:
        click.echo("No profile found for this account. Run 'healthnote init'.")


@click.command()
@click.pass_context
def logout(ctx) -> None:
    """Sign out and drop the local cached copy."""
    app = get_context(ctx)
    if not app.remote_enabled:
        raise click.ClickException("Supabase is not configured; running in local mode.")
    try:
        run_async_safely(app.pipeline.sign_out())
    except RemoteError as e:
        raise click.ClickException(str(e)) from e
    click.echo("Signed out.")
