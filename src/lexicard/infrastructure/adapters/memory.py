"""
In-memory repositories.

Useful for tests and for hosts that keep their own storage and only need
the versioning contract.
"""

import asyncio

from lexicard.domain.errors import CardNotFoundError, ConcurrentUpdateError, DuplicateCardError
from lexicard.domain.models import Card, StudySession, UserProgress
from lexicard.domain.ports import CardRepository, SessionRepository


class InMemoryCardRepository(CardRepository):
    def __init__(self, cards: list[Card] | None = None):
        # dicts keep insertion order, which list_cards relies on.
        self._cards: dict[str, Card] = {}
        self._lock = asyncio.Lock()
        for card in cards or []:
            self._cards[card.id] = card

    async def load(self, card_id: str) -> Card:
        try:
            return self._cards[card_id]
        except KeyError:
            raise CardNotFoundError(card_id) from None

    async def save(self, card: Card) -> Card:
        async with self._lock:
            stored = self._cards.get(card.id)
            if stored is None:
                raise CardNotFoundError(card.id)
            if stored.version != card.version:
                raise ConcurrentUpdateError(card.id, card.version, stored.version)

            saved = card.with_version(card.version + 1)
            self._cards[card.id] = saved
            return saved

    async def add(self, card: Card) -> Card:
        async with self._lock:
            if card.id in self._cards:
                raise DuplicateCardError(card.id)
            self._cards[card.id] = card
            return card

    async def delete(self, card_id: str) -> None:
        async with self._lock:
            if self._cards.pop(card_id, None) is None:
                raise CardNotFoundError(card_id)

    async def list_cards(self, deck_id: str | None = None) -> list[Card]:
        cards = list(self._cards.values())
        if deck_id is None:
            return cards
        return [c for c in cards if c.deck_id == deck_id]


class InMemorySessionRepository(SessionRepository):
    def __init__(self, progress: UserProgress | None = None):
        self._progress = progress or UserProgress()
        self._lock = asyncio.Lock()

    async def record_session(self, session: StudySession) -> UserProgress:
        async with self._lock:
            self._progress = self._progress.record_session(session)
            return self._progress

    async def get_progress(self) -> UserProgress:
        return self._progress
