"""healthnote log: record a journal entry."""

from __future__ import annotations

from datetime import date

import click

from healthnote.core.utils import run_async_safely
from healthnote.journal import Category, DailyLog
from healthnote.journal.constants import CATEGORY_LABELS, MOOD_LEVELS, validate_value

from .common import get_context


@click.command()
@click.argument("category", type=click.Choice([c.value for c in Category]))
@click.argument("value", type=float, required=False, default=0.0)
@click.option("--date", "day", type=click.DateTime(formats=["%Y-%m-%d"]), help="Entry date (default: today).")
@click.option("--note", help="Free-text note.")
@click.option("--height", type=click.FloatRange(min=0, min_open=True), help="Body log: height in cm.")
@click.option("--weight", type=click.FloatRange(min=0, min_open=True), help="Body log: weight in kg.")
@click.pass_context
def log(ctx, category, value, day, note, height, weight) -> None:
    """Add an entry. Mood is 1-5, body takes --height/--weight, others 0-10."""
    app = get_context(ctx)
    category = Category(category)

    sub_data = None
    if category == Category.BODY:
        if height is None and weight is None:
            raise click.UsageError("A body log needs --height and/or --weight.")
        sub_data = {"height": height, "weight": weight}
        value = 0.0
    elif not validate_value(category, value):
        raise click.BadParameter(f"{value:g} is out of range for {category}", param_hint="VALUE")

    entry = DailyLog(
        date=day.date() if day else date.today(),
        category=category,
        value=value,
        note=note,
        sub_data=sub_data,
    )

    async def _run() -> None:
        await app.pipeline.load()
        logs = await app.pipeline.add_log(entry)
        await app.pipeline.drain()
        label = CATEGORY_LABELS[category]
        if category == Category.MOOD:
            label = f"{label}: {MOOD_LEVELS[int(value)]}"
        click.echo(f"Saved {label} for {entry.date.isoformat()} ({len(logs)} entries total)")

    run_async_safely(_run())
