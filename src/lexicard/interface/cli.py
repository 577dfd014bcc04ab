"""Lexicard CLI — card management, study queue, rating, and statistics."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError

from lexicard.application.config import resolve_config
from lexicard.application.utils.clock import utc_now
from lexicard.domain.errors import LexicardError
from lexicard.interface._common import (
    _resolve_with_overrides,
    get_card_repository,
    humanize_error,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="lexicard: Spaced-repetition vocabulary trainer.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage lexicard configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_dir: Annotated[
        Path | None, typer.Option("--data-dir", help="Directory holding cards.yaml.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for lexicard."""
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    ctx.obj["verbose_bonus"] = verbose


def _config(ctx: typer.Context, **overrides):
    obj = ctx.obj or {}
    try:
        return _resolve_with_overrides(
            data_dir=obj.get("data_dir"),
            verbose=1 + obj.get("verbose_bonus", 0),
            **overrides,
        )
    except ValidationError as e:
        _fail(e)


def _fail(e: Exception) -> NoReturn:
    typer.secho(humanize_error(e), fg="red", err=True)
    raise typer.Exit(1)


def _card_line(card) -> str:
    due = card.due_date.strftime("%Y-%m-%d %H:%M")
    return (
        f"{card.id}  [{card.status.value:<8}]  {card.front} -> {card.back}"
        f"  (due {due}, {card.interval}d, ease {card.ease:.2f})"
    )


# ---------------------------------------------------------------------------
# Card commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    front: Annotated[str, typer.Argument(help="Word or phrase to learn.")],
    back: Annotated[str, typer.Argument(help="Meaning or translation.")],
    example: Annotated[str | None, typer.Option(help="Example sentence.")] = None,
    deck: Annotated[str | None, typer.Option(help="Deck to file the card under.")] = None,
):
    """[bold green]Add[/bold green] a new card."""
    from lexicard.domain.models import new_card

    front, back = front.strip(), back.strip()
    if not front or not back:
        typer.secho("Both front and back are required.", fg="red", err=True)
        raise typer.Exit(2)

    config = _config(ctx)
    repo = get_card_repository(config)
    card = new_card(front, back, utc_now(), example=example, deck_id=deck)

    try:
        asyncio.run(repo.add(card))
    except LexicardError as e:
        _fail(e)

    typer.secho(f"Added {card.id}", fg="green")


@app.command("list")
def list_cards(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Filter by deck.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List cards with their scheduling state."""
    from lexicard.infrastructure.codec import card_to_dict

    config = _config(ctx)
    repo = get_card_repository(config)

    try:
        cards = asyncio.run(repo.list_cards(deck))
    except LexicardError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps([card_to_dict(c) for c in cards], indent=2, ensure_ascii=False))
        return

    if not cards:
        typer.secho("No cards found.", fg="yellow")
        return
    for card in cards:
        typer.echo(_card_line(card))


@app.command()
def due(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Filter by deck.")] = None,
    new_limit: Annotated[
        int | None, typer.Option("--new-limit", help="Maximum new cards to introduce.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the study queue: due cards first, then new cards."""
    from lexicard.application.queue_builder import build_study_queue

    config = _config(ctx, new_cards_limit=new_limit)
    repo = get_card_repository(config)

    try:
        cards = asyncio.run(repo.list_cards(deck))
    except LexicardError as e:
        _fail(e)

    queue = build_study_queue(cards, utc_now(), config.new_cards_limit)

    if json_output:
        typer.echo(json.dumps([c.id for c in queue], indent=2))
        return

    if not queue:
        typer.secho("All caught up! No cards due right now.", fg="green")
        return

    typer.echo(f"Study queue: {len(queue)} cards")
    for card in queue:
        typer.echo(_card_line(card))


@app.command()
def rate(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card to rate.")],
    rating: Annotated[str, typer.Argument(help="again, hard, good, easy (or 1-4).")],
):
    """Record how well you recalled a card and schedule its next review."""
    from lexicard.application.review_service import ReviewService
    from lexicard.application.scheduler import describe_rating
    from lexicard.domain.models import Rating

    try:
        parsed = Rating.parse(rating)
    except LexicardError as e:
        _fail(e)

    config = _config(ctx)
    service = ReviewService(get_card_repository(config), max_ease=config.max_ease)

    try:
        card = asyncio.run(service.review(card_id, parsed, utc_now()))
    except LexicardError as e:
        _fail(e)

    typer.echo(describe_rating(parsed))
    typer.secho(_card_line(card), fg="green")


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


@app.command()
def stats(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Limit to one deck.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show deck statistics: status breakdown, retention, mastery."""
    from lexicard.application.stats import MetricsCalculator, StatsService

    config = _config(ctx)
    service = StatsService(
        get_card_repository(config),
        MetricsCalculator(upcoming_days=config.upcoming_days),
    )

    try:
        dash = asyncio.run(service.get_dashboard(utc_now(), deck))
    except LexicardError as e:
        _fail(e)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    **dash.stats.to_dict(),
                    "retention": dash.retention,
                    "mastery": round(dash.mastery, 1),
                    "intervals": dash.intervals,
                },
                indent=2,
            )
        )
        return

    s = dash.stats
    typer.echo(f"Total: {s.total}  New: {s.new}  Learning: {s.learning}  Mastered: {s.mastered}")
    typer.echo(f"Due today: {s.due_today}  (review {s.review} + learning {s.learning})")
    if s.overdue:
        typer.secho(f"Overdue: {s.overdue}", fg="yellow")
    typer.echo(f"Retention: {dash.retention}%  Mastery: {dash.mastery:.1f}%")


@app.command()
def upcoming(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Limit to one deck.")] = None,
    days: Annotated[int | None, typer.Option(help="Number of days to show.")] = None,
):
    """Show how many cards fall due on each of the coming days."""
    from lexicard.application.queue_builder import upcoming_schedule

    config = _config(ctx, upcoming_days=days)
    repo = get_card_repository(config)

    try:
        cards = asyncio.run(repo.list_cards(deck))
    except LexicardError as e:
        _fail(e)

    for day in upcoming_schedule(cards, utc_now(), config.upcoming_days):
        typer.echo(f"{day.date.isoformat()}  {day.count}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    try:
        config = resolve_config()
    except ValidationError as e:
        _fail(e)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


def main():
    app()
