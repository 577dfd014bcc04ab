"""
Domain models for deck statistics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import asdict, dataclass
from datetime import date


@dataclass(frozen=True)
class DeckStats:
    """
    Status breakdown of a deck at a given instant.

    Attributes:
        total: Number of cards in the deck.
        new: Cards never introduced.
        learning: All cards in the learning state, due or not.
        review: Review cards whose due date has passed.
        mastered: Cards promoted to mastered.
        due_today: review + learning.
        overdue: Active cards more than a day past their due date.
    """

    total: int
    new: int
    learning: int
    review: int
    mastered: int
    due_today: int
    overdue: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class UpcomingDay:
    """Number of cards falling due on one calendar day."""

    date: date
    count: int


@dataclass(frozen=True)
class CollectionOverview:
    """Totals across every deck, as shown on the progress page."""

    total_cards: int
    mastered: int
    due_today: int
    progress: float  # mastered / total, in percent
