"""healthnote init / profile: onboarding and settings."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

import click

from healthnote.core.exceptions import ValidationError
from healthnote.core.utils import run_async_safely
from healthnote.journal import ThemeOption, UserProfile
from healthnote.journal.metrics import ADULT_AGE_YEARS, age_in_years, child_mode_outgrown

from .common import get_context

THEMES = [t.value for t in ThemeOption]


def echo_profile(profile: UserProfile) -> None:
    click.echo(f"Name:       {profile.name}")
    click.echo(f"Birth date: {profile.birth_date.isoformat()} (age {age_in_years(profile.birth_date, date.today())})")
    click.echo(f"Theme:      {profile.theme}")
    click.echo(f"Child mode: {'on' if profile.is_child_mode else 'off'}")
    if child_mode_outgrown(profile, date.today()):
        click.echo(f"            Age {ADULT_AGE_YEARS}+: standard BMI suits better. Use 'healthnote profile --adult'.")
    click.echo(f"Height:     {f'{profile.height:g} cm' if profile.height else '--'}")
    click.echo(f"Weight:     {f'{profile.weight:g} kg' if profile.weight else '--'}")


@click.command()
@click.option("--name", prompt="Your name", help="Display name.")
@click.option("--birth-date", prompt="Birth date (YYYY-MM-DD)", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.option("--child/--adult", default=False, help="Track growth against the reference curve.")
@click.option("--height", type=click.FloatRange(min=0), default=0.0, help="Height in cm.")
@click.option("--weight", type=click.FloatRange(min=0), default=0.0, help="Weight in kg.")
@click.option("--theme", type=click.Choice(THEMES), default=ThemeOption.SYSTEM.value)
@click.pass_context
def init(ctx, name, birth_date, child, height, weight, theme) -> None:
    """Set up your profile (onboarding)."""
    app = get_context(ctx)
    try:
        profile = UserProfile(
            name=name,
            birth_date=birth_date.date(),
            theme=ThemeOption(theme),
            is_child_mode=child,
            height=height,
            weight=weight,
        )
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e

    async def _run() -> None:
        state = await app.pipeline.load()
        if state.profile is not None and not click.confirm("A profile already exists. Replace it?"):
            return
        await app.pipeline.save_profile(profile)
        await app.pipeline.drain()
        click.echo(f"Welcome, {profile.name}!")

    run_async_safely(_run())


@click.command()
@click.option("--name", help="New display name.")
@click.option("--theme", type=click.Choice(THEMES))
@click.option("--child/--adult", default=None, help="Toggle child mode.")
@click.pass_context
def profile(ctx, name, theme, child) -> None:
    """Show your profile, or update it with options."""
    app = get_context(ctx)

    async def _run() -> None:
        state = await app.pipeline.load()
        if state.profile is None:
            raise click.ClickException("No profile yet. Run 'healthnote init' first.")

        updates = {}
        if name is not None:
            updates["name"] = name
        if theme is not None:
            updates["theme"] = ThemeOption(theme)
        if child is not None:
            updates["is_child_mode"] = child

        current = state.profile
        if updates:
            try:
                current = replace(current, **updates)
            except ValidationError as e:
                raise click.BadParameter(str(e)) from e
            await app.pipeline.save_profile(current)
            await app.pipeline.drain()
        echo_profile(current)

    run_async_safely(_run())
