"""
Queue builder for study sessions.

Pure selection functions over a collection of cards:
1. Picking cards whose due date has arrived
2. Introducing a bounded number of unseen cards
3. Bucketing due dates by calendar day for the upcoming-reviews view
"""

from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from lexicard.application.utils.clock import calendar_day, day_range
from lexicard.domain.constants import DEFAULT_NEW_CARDS_LIMIT, DEFAULT_UPCOMING_DAYS
from lexicard.domain.models import ACTIVE_STATUSES, Card
from lexicard.domain.stats.models import UpcomingDay


def due_for_review(cards: Iterable[Card], now: datetime) -> list[Card]:
    """
    Cards in learning or review whose due date is at or before ``now``.

    New and mastered cards are never returned, even with a past due date:
    new cards have not entered the queue yet and mastered cards are not
    actively scheduled.
    """
    return [c for c in cards if c.status in ACTIVE_STATUSES and c.due_date <= now]


def new_cards(cards: Iterable[Card], limit: int = DEFAULT_NEW_CARDS_LIMIT) -> list[Card]:
    """Up to ``limit`` cards in the new state, in the order given."""
    if limit <= 0:
        return []

    picked: list[Card] = []
    for card in cards:
        if card.is_new:
            picked.append(card)
            if len(picked) >= limit:
                break
    return picked


def is_overdue(card: Card, now: datetime) -> bool:
    """True if the card is actively scheduled and strictly past its due date."""
    return card.status in ACTIVE_STATUSES and now > card.due_date


def cards_due_on(cards: Iterable[Card], day: date, tz: tzinfo | None = None) -> list[Card]:
    """Cards of any status whose due date falls on ``day``."""
    return [c for c in cards if calendar_day(c.due_date, tz) == day]


def upcoming_schedule(
    cards: Iterable[Card],
    now: datetime,
    days: int = DEFAULT_UPCOMING_DAYS,
) -> list[UpcomingDay]:
    """
    Count cards due on each of the next ``days`` calendar days, starting today.

    Due dates are truncated to calendar days in ``now``'s timezone. Every
    status is counted; the result is for display only.
    """
    tz = now.tzinfo
    counts = Counter(calendar_day(c.due_date, tz) for c in cards)
    return [UpcomingDay(date=day, count=counts.get(day, 0)) for day in day_range(now.date(), days)]


def build_study_queue(
    cards: Iterable[Card],
    now: datetime,
    new_limit: int = DEFAULT_NEW_CARDS_LIMIT,
) -> list[Card]:
    """
    Build the queue for one study session.

    Due cards come first, earliest due date first, followed by up to
    ``new_limit`` new cards in deck order.
    """
    cards = list(cards)
    due = sorted(due_for_review(cards, now), key=lambda c: c.due_date)
    return due + new_cards(cards, new_limit)
