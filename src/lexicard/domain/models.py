"""
Domain models for Lexicard.

These are pure data structures with no I/O or external dependencies.
Cards are immutable values: the scheduler returns a new Card rather than
mutating the one it was given.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum

from ulid import ULID

from lexicard.application.utils.common import percentage, round_half_up

from .constants import CARD_ID_PREFIX, DEFAULT_EASE, FIRST_INTERVAL
from .errors import InvalidRatingError


class CardStatus(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MASTERED = "mastered"


# Statuses that are actively scheduled (eligible for the review queue).
ACTIVE_STATUSES = frozenset({CardStatus.LEARNING, CardStatus.REVIEW})


class Rating(str, Enum):
    """Recall quality reported by the learner."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @property
    def is_success(self) -> bool:
        return self is not Rating.AGAIN

    @property
    def is_correct(self) -> bool:
        """Whether the answer counts towards session accuracy."""
        return self in (Rating.GOOD, Rating.EASY)

    @classmethod
    def parse(cls, value: "str | int | Rating") -> "Rating":
        """
        Convert user input to a Rating.

        Accepts Rating members, names in any case, and Anki-style button
        numbers (1=Again, 2=Hard, 3=Good, 4=Easy).

        Raises:
            InvalidRatingError: If the value does not name a rating.
        """
        if isinstance(value, Rating):
            return value

        if isinstance(value, bool):
            raise InvalidRatingError(value)

        if isinstance(value, int):
            if 1 <= value <= len(_BUTTON_ORDER):
                return _BUTTON_ORDER[value - 1]
            raise InvalidRatingError(value)

        if isinstance(value, str):
            text = value.strip().lower()
            if text.isdigit():
                number = int(text)
                if 1 <= number <= len(_BUTTON_ORDER):
                    return _BUTTON_ORDER[number - 1]
                raise InvalidRatingError(value)
            try:
                return cls(text)
            except ValueError:
                raise InvalidRatingError(value) from None

        raise InvalidRatingError(value)


_BUTTON_ORDER = (Rating.AGAIN, Rating.HARD, Rating.GOOD, Rating.EASY)


def generate_card_id() -> str:
    """Generate a sortable unique card ID using ULID."""
    return f"{CARD_ID_PREFIX}{ULID()}"


@dataclass(frozen=True)
class Card:
    """
    A schedulable vocabulary card.

    Attributes:
        id: Opaque unique identifier.
        due_date: Earliest instant the card may be shown again.
        interval: Days until the next review (>= 1 once out of 'new').
        ease: Interval growth factor, never below 1.3.
        repetitions: Consecutive successful reviews since the last lapse.
        status: Position in the new -> learning -> review -> mastered lifecycle.
        last_reviewed: Instant of the latest rating, None until first review.
        version: Optimistic-concurrency counter maintained by repositories.
    """

    id: str
    due_date: datetime
    interval: int = FIRST_INTERVAL
    ease: float = DEFAULT_EASE
    repetitions: int = 0
    status: CardStatus = CardStatus.NEW
    last_reviewed: datetime | None = None

    # Content
    front: str = ""
    back: str = ""
    example: str | None = None
    deck_id: str | None = None

    version: int = 0

    @property
    def is_new(self) -> bool:
        return self.status is CardStatus.NEW

    @property
    def has_been_reviewed(self) -> bool:
        return self.last_reviewed is not None

    def with_version(self, version: int) -> "Card":
        return replace(self, version=version)


def new_card(
    front: str,
    back: str,
    now: datetime,
    *,
    example: str | None = None,
    deck_id: str | None = None,
    card_id: str | None = None,
) -> Card:
    """Create a card in the 'new' state with the default scheduling values."""
    return Card(
        id=card_id or generate_card_id(),
        due_date=now,
        front=front,
        back=back,
        example=example,
        deck_id=deck_id,
    )


@dataclass(frozen=True)
class StudySession:
    """
    Summary of one sitting through a study queue.

    A rating counts as correct when it is 'good' or 'easy'.
    """

    deck_id: str | None
    started_at: datetime
    finished_at: datetime
    cards_studied: int = 0
    correct_answers: int = 0

    @property
    def accuracy(self) -> int:
        """Correct answers as a whole-number percentage (0 if nothing studied)."""
        return percentage(self.correct_answers, self.cards_studied)

    @property
    def minutes(self) -> int:
        return round_half_up((self.finished_at - self.started_at).total_seconds() / 60)


@dataclass(frozen=True)
class UserProgress:
    """
    Running study totals for one learner.

    Attributes:
        total_cards_studied: Ratings given across all recorded sessions.
        streak_days: Consecutive calendar days with at least one session.
        last_study_date: Day of the most recent session, None before the first.
        sessions: Every recorded session, oldest first.
    """

    total_cards_studied: int = 0
    streak_days: int = 0
    last_study_date: date | None = None
    sessions: tuple[StudySession, ...] = field(default_factory=tuple)

    def record_session(self, session: StudySession) -> "UserProgress":
        """
        Fold a finished session into the learner's running totals.

        The streak grows by one for a session on the day after the last
        study day, stays put for another session on the same day, and
        restarts at 1 after a gap.
        """
        day = session.finished_at.date()
        last = self.last_study_date

        if last is None or (day - last).days > 1:
            streak = 1
        elif (day - last).days == 1:
            streak = self.streak_days + 1
        else:
            # Same day, or a session timestamped before the last one.
            streak = max(self.streak_days, 1)

        return UserProgress(
            total_cards_studied=self.total_cards_studied + session.cards_studied,
            streak_days=streak,
            last_study_date=max(day, last) if last else day,
            sessions=(*self.sessions, session),
        )
