# Domain Stats Package
from .models import CollectionOverview, DeckStats, UpcomingDay

__all__ = ["DeckStats", "UpcomingDay", "CollectionOverview"]
