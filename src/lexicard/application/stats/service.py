"""
Stats Service — Application layer orchestrator.

Coordinates fetching cards from the repository and turning them into dashboards.
"""

import logging
from collections import defaultdict
from datetime import datetime

from lexicard.domain.models import Card
from lexicard.domain.ports import CardRepository
from lexicard.domain.stats.models import CollectionOverview

from .metrics_calculator import DeckDashboard, MetricsCalculator, collection_overview

logger = logging.getLogger(__name__)

UNFILED = "(no deck)"


class StatsService:
    """
    Application service for deck and collection statistics.

    Depends on the CardRepository abstraction, not concrete adapters.
    """

    def __init__(
        self,
        card_repo: CardRepository,
        calculator: MetricsCalculator | None = None,
    ):
        """
        Args:
            card_repo: The repository (port) for fetching cards.
            calculator: Optional custom calculator; uses default if not provided.
        """
        self._repo = card_repo
        self._calc = calculator or MetricsCalculator()

    async def get_dashboard(self, now: datetime, deck_id: str | None = None) -> DeckDashboard:
        """
        Build the dashboard for one deck, or for every card when deck_id is None.
        """
        cards = await self._repo.list_cards(deck_id)
        logger.debug(f"Computing dashboard for deck={deck_id} over {len(cards)} cards")
        return self._calc.dashboard(cards, now)

    async def get_overview(self, now: datetime) -> CollectionOverview:
        """Totals across all decks."""
        by_deck: dict[str, list[Card]] = defaultdict(list)
        for card in await self._repo.list_cards():
            by_deck[card.deck_id or UNFILED].append(card)
        return collection_overview(by_deck, now)
