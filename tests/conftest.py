from dataclasses import replace
from datetime import datetime, timezone

import pytest

from lexicard.domain.models import Card, CardStatus


@pytest.fixture
def t0():
    """A fixed, timezone-aware review instant."""
    return datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_card(t0):
    """Factory for cards; defaults to a fresh 'new' card due at t0."""
    counter = iter(range(1, 10_000))

    def _make(**overrides) -> Card:
        base = Card(id=f"card_{next(counter):04d}", due_date=t0, front="der Hund", back="the dog")
        return replace(base, **overrides)

    return _make


@pytest.fixture
def review_card(make_card, t0):
    """A card in steady review: 30-day interval, reviewed a month ago."""
    return make_card(
        status=CardStatus.REVIEW,
        interval=30,
        ease=2.5,
        repetitions=4,
        due_date=t0,
    )


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files and environment from the developer's machine
    monkeypatch.setenv("HOME", str(home))
    for var in ("LEXICARD_DATA_DIR", "LEXICARD_MAX_EASE", "LEXICARD_NEW_CARDS_LIMIT",
                "LEXICARD_UPCOMING_DAYS", "LEXICARD_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    return home
