"""
Ports (interfaces) for persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Card, StudySession, UserProgress


class CardRepository(ABC):
    """
    Port for loading and storing cards.

    Implementations must enforce optimistic versioning: ``save`` only
    succeeds when the card's ``version`` matches the stored one, and stores
    it with the version bumped by one.

    Implementations:
        - InMemoryCardRepository: Process-local dict, for tests and embedding.
        - YamlCardRepository: A single YAML document on disk.
    """

    @abstractmethod
    async def load(self, card_id: str) -> Card:
        """
        Fetch a card by id.

        Raises:
            CardNotFoundError: If no card has this id.
        """
        pass

    @abstractmethod
    async def save(self, card: Card) -> Card:
        """
        Persist an updated card.

        Returns:
            The stored card, carrying its new version.

        Raises:
            CardNotFoundError: If the card was never added.
            ConcurrentUpdateError: If the stored version differs from card.version.
        """
        pass

    @abstractmethod
    async def add(self, card: Card) -> Card:
        """Insert a new card. Returns the stored card."""
        pass

    @abstractmethod
    async def delete(self, card_id: str) -> None:
        pass

    @abstractmethod
    async def list_cards(self, deck_id: str | None = None) -> list[Card]:
        """
        List cards, optionally restricted to one deck.

        Cards are returned in insertion order.
        """
        pass


class SessionRepository(ABC):
    """Port for study-session history and the learner's running progress."""

    @abstractmethod
    async def record_session(self, session: StudySession) -> UserProgress:
        """Store a finished session and return the updated progress."""
        pass

    @abstractmethod
    async def get_progress(self) -> UserProgress:
        pass
