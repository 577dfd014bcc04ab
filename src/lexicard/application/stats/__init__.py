# Application Stats Package
from .metrics_calculator import DeckDashboard, MetricsCalculator
from .service import StatsService

__all__ = ["MetricsCalculator", "DeckDashboard", "StatsService"]
