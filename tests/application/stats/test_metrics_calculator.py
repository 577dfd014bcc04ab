from datetime import timedelta

import pytest

from lexicard.application.stats.metrics_calculator import (
    MetricsCalculator,
    collection_overview,
    deck_stats,
    interval_distribution,
    mastery_percentage,
    overdue_count,
    retention_rate,
)
from lexicard.domain.models import CardStatus


@pytest.fixture
def calculator():
    return MetricsCalculator(upcoming_days=3)


@pytest.fixture
def deck(make_card, t0):
    return [
        make_card(status=CardStatus.NEW),
        make_card(status=CardStatus.NEW),
        # Learning but not due for another 10 minutes: still counted
        make_card(status=CardStatus.LEARNING, due_date=t0 + timedelta(minutes=10), last_reviewed=t0),
        make_card(status=CardStatus.REVIEW, due_date=t0 - timedelta(days=2), last_reviewed=t0 - timedelta(days=8)),
        make_card(status=CardStatus.REVIEW, due_date=t0 + timedelta(days=4), last_reviewed=t0),
        make_card(status=CardStatus.MASTERED, interval=42, due_date=t0 + timedelta(days=40), last_reviewed=t0),
    ]


def test_deck_stats_buckets(deck, t0):
    stats = deck_stats(deck, t0)

    assert stats.total == 6
    assert stats.new == 2
    assert stats.learning == 1
    assert stats.review == 1  # only the due review card
    assert stats.mastered == 1
    assert stats.due_today == 2
    assert stats.overdue == 1


def test_deck_stats_overdue_needs_a_full_day(make_card, t0):
    slightly_late = make_card(status=CardStatus.REVIEW, due_date=t0 - timedelta(hours=20))
    stats = deck_stats([slightly_late], t0)

    assert stats.overdue == 0
    assert overdue_count([slightly_late], t0) == 1


def test_deck_stats_empty(t0):
    stats = deck_stats([], t0)
    assert stats.to_dict() == {
        "total": 0,
        "new": 0,
        "learning": 0,
        "review": 0,
        "mastered": 0,
        "due_today": 0,
        "overdue": 0,
    }


def test_retention_rate(deck):
    # 4 reviewed cards; 3 of them are review or mastered
    assert retention_rate(deck) == 75


def test_retention_rate_rounds_half_up(make_card, t0):
    cards = [make_card(status=CardStatus.REVIEW, last_reviewed=t0)]
    cards += [make_card(status=CardStatus.LEARNING, last_reviewed=t0) for _ in range(7)]
    assert retention_rate(cards) == 13  # 12.5%


def test_retention_rate_without_reviews(make_card):
    assert retention_rate([make_card(), make_card()]) == 0
    assert retention_rate([]) == 0


def test_mastery_percentage(deck):
    assert mastery_percentage(deck) == pytest.approx(100 / 6)
    assert mastery_percentage([]) == 0.0


def test_interval_distribution(make_card):
    cards = [make_card(interval=i) for i in (6, 1, 42, 1, 16)]
    assert interval_distribution(cards) == [(1, 2), (6, 1), (16, 1), (42, 1)]
    assert interval_distribution(cards, limit=2) == [(1, 2), (6, 1)]


def test_collection_overview(make_card, t0):
    decks = {
        "german": [make_card(status=CardStatus.MASTERED), make_card()],
        "french": [
            make_card(status=CardStatus.MASTERED),
            make_card(status=CardStatus.REVIEW, due_date=t0 - timedelta(hours=1)),
        ],
    }

    overview = collection_overview(decks, t0)

    assert overview.total_cards == 4
    assert overview.mastered == 2
    assert overview.due_today == 1
    assert overview.progress == 50.0


def test_collection_overview_empty(t0):
    assert collection_overview({}, t0).progress == 0.0


def test_dashboard(calculator, deck, t0):
    dash = calculator.dashboard(deck, t0)

    assert dash.stats == deck_stats(deck, t0)
    assert dash.retention == 75
    assert dash.overdue == 1
    assert len(dash.upcoming) == 3
    assert dash.upcoming[0].date == t0.date()
    assert dash.intervals[0] == (1, 5)
