"""
Review Service — applies learner ratings to stored cards.

Each review is a load -> apply_rating -> save cycle. Reviews of the same
card are serialized in-process with a per-card lock; repositories reject
stale writes from other processes through optimistic versioning.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from lexicard.application.scheduler import apply_rating
from lexicard.domain.models import Card, Rating, StudySession, UserProgress
from lexicard.domain.ports import CardRepository, SessionRepository

logger = logging.getLogger(__name__)


class StudySessionTracker:
    """Accumulates ratings given during one study sitting."""

    def __init__(self, deck_id: str | None, started_at: datetime):
        self.deck_id = deck_id
        self.started_at = started_at
        self.studied = 0
        self.correct = 0

    def record(self, rating: Rating) -> None:
        self.studied += 1
        if rating.is_correct:
            self.correct += 1

    def finish(self, now: datetime) -> StudySession:
        return StudySession(
            deck_id=self.deck_id,
            started_at=self.started_at,
            finished_at=now,
            cards_studied=self.studied,
            correct_answers=self.correct,
        )


class ReviewService:
    """
    Application service for rating cards.

    Follows Dependency Inversion: depends on the repository ports,
    not on concrete storage adapters.
    """

    def __init__(
        self,
        card_repo: CardRepository,
        session_repo: SessionRepository | None = None,
        max_ease: float | None = None,
    ):
        """
        Args:
            card_repo: Where cards are loaded from and saved to.
            session_repo: Optional store for finished study sessions.
            max_ease: Optional cap on ease growth, passed to the scheduler.
        """
        self._cards = card_repo
        self._sessions = session_repo
        self._max_ease = max_ease
        # Entries live only while a review of that card is running or waiting.
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @asynccontextmanager
    async def _card_lock(self, card_id: str):
        lock = self._locks.setdefault(card_id, asyncio.Lock())
        self._lock_users[card_id] = self._lock_users.get(card_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[card_id] -= 1
            if not self._lock_users[card_id]:
                del self._lock_users[card_id]
                del self._locks[card_id]

    async def review(
        self,
        card_id: str,
        rating: Rating | str | int,
        now: datetime,
        tracker: StudySessionTracker | None = None,
    ) -> Card:
        """
        Rate a card and persist its next scheduling state.

        Args:
            card_id: Card to rate.
            rating: Rating or raw user input (validated here, before scheduling).
            now: Review instant.
            tracker: Optional session tracker to credit the answer to.

        Returns:
            The saved card.

        Raises:
            InvalidRatingError: If rating is not a known rating.
            CardNotFoundError: If the card does not exist.
            ConcurrentUpdateError: If the card changed underneath us.
        """
        rating = Rating.parse(rating)

        async with self._card_lock(card_id):
            card = await self._cards.load(card_id)
            updated = apply_rating(card, rating, now, max_ease=self._max_ease)
            saved = await self._cards.save(updated)

        logger.info(
            f"Rated {card_id} '{rating.value}': {card.status.value} -> {saved.status.value}, "
            f"interval={saved.interval}d ease={saved.ease:.2f} due={saved.due_date.isoformat()}"
        )

        if tracker is not None:
            tracker.record(rating)
        return saved

    def start_session(self, now: datetime, deck_id: str | None = None) -> StudySessionTracker:
        return StudySessionTracker(deck_id=deck_id, started_at=now)

    async def finish_session(
        self, tracker: StudySessionTracker, now: datetime
    ) -> tuple[StudySession, UserProgress | None]:
        """
        Close a study session and record it when a session repository is configured.
        """
        session = tracker.finish(now)
        logger.info(
            f"Session finished: {session.cards_studied} cards, "
            f"{session.accuracy}% correct in {session.minutes} min"
        )

        if self._sessions is None:
            return session, None
        progress = await self._sessions.record_session(session)
        return session, progress
