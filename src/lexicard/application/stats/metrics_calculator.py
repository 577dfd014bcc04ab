"""
Metrics calculator for deck dashboards.

This is a pure computation module with no I/O.
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from lexicard.application.queue_builder import is_overdue, upcoming_schedule
from lexicard.application.utils.common import percentage
from lexicard.domain.constants import (
    DEFAULT_INTERVAL_BUCKETS,
    DEFAULT_UPCOMING_DAYS,
    OVERDUE_GRACE,
)
from lexicard.domain.models import Card, CardStatus
from lexicard.domain.stats.models import CollectionOverview, DeckStats, UpcomingDay


def deck_stats(cards: Iterable[Card], now: datetime) -> DeckStats:
    """
    Status breakdown of a deck.

    The review bucket only counts review cards that are due. The learning
    bucket counts every learning card: relearning delays are minutes long,
    so a learning card is effectively due today either way.
    """
    cards = list(cards)
    counts = Counter(c.status for c in cards)
    review_due = sum(1 for c in cards if c.status is CardStatus.REVIEW and c.due_date <= now)
    learning = counts[CardStatus.LEARNING]

    return DeckStats(
        total=len(cards),
        new=counts[CardStatus.NEW],
        learning=learning,
        review=review_due,
        mastered=counts[CardStatus.MASTERED],
        due_today=review_due + learning,
        overdue=sum(1 for c in cards if is_overdue(c, now) and now - c.due_date >= OVERDUE_GRACE),
    )


def retention_rate(cards: Iterable[Card]) -> int:
    """
    Percentage of reviewed cards currently in review or mastered.

    Returns 0 when no card has been reviewed yet.
    """
    cards = list(cards)
    reviewed = sum(1 for c in cards if c.has_been_reviewed)
    retained = sum(1 for c in cards if c.status in (CardStatus.REVIEW, CardStatus.MASTERED))
    return percentage(retained, reviewed)


def mastery_percentage(cards: Iterable[Card]) -> float:
    """Share of the deck that is mastered, in percent (0.0 for an empty deck)."""
    cards = list(cards)
    if not cards:
        return 0.0
    mastered = sum(1 for c in cards if c.status is CardStatus.MASTERED)
    return mastered * 100 / len(cards)


def overdue_count(cards: Iterable[Card], now: datetime) -> int:
    return sum(1 for c in cards if is_overdue(c, now))


def interval_distribution(
    cards: Iterable[Card],
    limit: int = DEFAULT_INTERVAL_BUCKETS,
) -> list[tuple[int, int]]:
    """
    Number of cards per review interval, shortest intervals first.

    Only the first ``limit`` interval buckets are returned.
    """
    counts = Counter(c.interval for c in cards)
    return sorted(counts.items())[:limit]


def collection_overview(
    decks: Mapping[str, Iterable[Card]],
    now: datetime,
) -> CollectionOverview:
    """Totals across all decks, keyed by deck id."""
    total = mastered = due_today = 0
    for cards in decks.values():
        stats = deck_stats(cards, now)
        total += stats.total
        mastered += stats.mastered
        due_today += stats.due_today

    progress = mastered * 100 / total if total else 0.0
    return CollectionOverview(
        total_cards=total,
        mastered=mastered,
        due_today=due_today,
        progress=progress,
    )


@dataclass
class DeckDashboard:
    """
    Everything the dashboard shows for one deck.
    """

    stats: DeckStats
    retention: int
    mastery: float
    overdue: int
    upcoming: list[UpcomingDay]
    intervals: list[tuple[int, int]]


class MetricsCalculator:
    """
    Builds dashboards from a deck's cards.

    Stateless and side-effect free.
    """

    def __init__(
        self,
        upcoming_days: int = DEFAULT_UPCOMING_DAYS,
        interval_buckets: int = DEFAULT_INTERVAL_BUCKETS,
    ):
        self.upcoming_days = upcoming_days
        self.interval_buckets = interval_buckets

    def dashboard(self, cards: Iterable[Card], now: datetime) -> DeckDashboard:
        cards = list(cards)
        return DeckDashboard(
            stats=deck_stats(cards, now),
            retention=retention_rate(cards),
            mastery=mastery_percentage(cards),
            overdue=overdue_count(cards, now),
            upcoming=upcoming_schedule(cards, now, self.upcoming_days),
            intervals=interval_distribution(cards, self.interval_buckets),
        )
