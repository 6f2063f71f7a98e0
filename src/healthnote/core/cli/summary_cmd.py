"""healthnote summary: body stats and the weekly trend."""

from __future__ import annotations

from datetime import date

import click

from healthnote.core.utils import run_async_safely
from healthnote.journal import Category, DailyLog
from healthnote.journal.constants import CATEGORY_LABELS, MOOD_LEVELS
from healthnote.journal.metrics import ADULT_AGE_YEARS, dashboard_summary

from .common import get_context


def _fmt(value: float | None, unit: str = "") -> str:
    return "--" if value is None else f"{value:g}{unit}"


def _describe(log: DailyLog) -> str:
    if log.category == Category.MOOD:
        shown = MOOD_LEVELS.get(int(log.value), _fmt(log.value))
    elif log.category == Category.BODY:
        shown = f"{_fmt(log.body_height, ' cm')} / {_fmt(log.body_weight, ' kg')}"
    else:
        shown = _fmt(log.value)
    line = f"{log.date.isoformat()}  {CATEGORY_LABELS[log.category]:<18} {shown}"
    return f"{line}  ({log.note})" if log.note else line


@click.command()
@click.pass_context
def summary(ctx) -> None:
    """Show BMI (or growth deviation in child mode) and the last 7 days."""
    app = get_context(ctx)

    async def _run() -> None:
        state = await app.pipeline.load()
        if state.profile is None:
            raise click.ClickException("No profile yet. Run 'healthnote init' first.")

        today = date.today()
        result = dashboard_summary(state.profile, state.logs, today)

        click.echo(f"Hello, {state.profile.name}" + ("  (local mode)" if not state.authenticated else ""))
        if result.birthday:
            click.echo("Happy birthday!")
        click.echo(f"Height: {_fmt(result.measures.height, ' cm')}   Weight: {_fmt(result.measures.weight, ' kg')}")

        if state.profile.is_child_mode:
            if result.growth is None:
                click.echo("Growth: --")
            else:
                g = result.growth
                click.echo(
                    f"Growth: {g.label} ({g.percent_diff:+.1f}% vs {g.reference.height:g} cm "
                    f"at {g.reference.age_months} months; approximate)"
                )
        else:
            bmi = "--" if result.bmi is None else f"{result.bmi:.1f}"
            click.echo(f"BMI: {bmi} ({result.bmi_class})")

        if result.child_mode_outgrown:
            click.echo(f"Note: age {ADULT_AGE_YEARS}+; 'healthnote profile --adult' switches to BMI.")

        click.echo("")
        click.echo("Day         Mood  Stress")
        for point in result.trend:
            click.echo(f"{point.day:%a %m-%d}   {_fmt(point.mood):>4}  {_fmt(point.stress):>6}")

        click.echo("")
        click.echo("Recent entries")
        if not result.recent:
            click.echo("  No entries yet. Add one with 'healthnote log'.")
        for log in result.recent:
            click.echo(f"  {_describe(log)}")

    run_async_safely(_run())
