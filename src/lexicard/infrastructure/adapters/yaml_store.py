"""
YAML Card Repository — Infrastructure adapter for a single YAML file.

The whole collection lives in one document:

    cards:
      - id: card_01J...
        front: der Hund
        ...

Every write replaces the file atomically, so readers never see a
half-written document.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from lexicard.domain.errors import (
    CardNotFoundError,
    CardValidationError,
    ConcurrentUpdateError,
    DuplicateCardError,
)
from lexicard.domain.models import Card
from lexicard.domain.ports import CardRepository
from lexicard.infrastructure.codec import card_from_dict, card_to_dict

logger = logging.getLogger(__name__)


class YamlCardRepository(CardRepository):
    """
    Stores cards in a YAML file.

    Each operation reads the file fresh, so version checks also catch
    writes made by another process since the card was loaded.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def load(self, card_id: str) -> Card:
        for card in self._read():
            if card.id == card_id:
                return card
        raise CardNotFoundError(card_id)

    async def save(self, card: Card) -> Card:
        async with self._lock:
            cards = self._read()
            for i, stored in enumerate(cards):
                if stored.id != card.id:
                    continue
                if stored.version != card.version:
                    raise ConcurrentUpdateError(card.id, card.version, stored.version)
                saved = card.with_version(card.version + 1)
                cards[i] = saved
                self._write(cards)
                return saved
        raise CardNotFoundError(card.id)

    async def add(self, card: Card) -> Card:
        async with self._lock:
            cards = self._read()
            if any(c.id == card.id for c in cards):
                raise DuplicateCardError(card.id)
            cards.append(card)
            self._write(cards)
        logger.debug(f"Added {card.id} to {self.path}")
        return card

    async def delete(self, card_id: str) -> None:
        async with self._lock:
            cards = self._read()
            remaining = [c for c in cards if c.id != card_id]
            if len(remaining) == len(cards):
                raise CardNotFoundError(card_id)
            self._write(remaining)

    async def list_cards(self, deck_id: str | None = None) -> list[Card]:
        cards = self._read()
        if deck_id is None:
            return cards
        return [c for c in cards if c.deck_id == deck_id]

    def _read(self) -> list[Card]:
        if not self.path.exists():
            return []

        try:
            doc = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise CardValidationError(f"Unreadable card store {self.path}: {e}") from e

        if not isinstance(doc, dict):
            raise CardValidationError(f"Card store {self.path} is not a mapping")

        entries: list[Any] = doc.get("cards") or []
        return [card_from_dict(entry) for entry in entries if isinstance(entry, dict)]

    def _write(self, cards: list[Card]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = yaml.safe_dump(
            {"cards": [card_to_dict(c) for c in cards]},
            allow_unicode=True,
            sort_keys=False,
        )

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".cards-", suffix=".yaml")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
