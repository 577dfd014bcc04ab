"""Tests for CLI commands: add, list, due, rate, stats, upcoming, config, and humanize_error."""

import json
from datetime import timedelta
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from lexicard.domain.errors import CardNotFoundError, ConcurrentUpdateError, InvalidRatingError
from lexicard.interface._common import humanize_error
from lexicard.interface.cli import app

runner = CliRunner()


@pytest.fixture
def cli(tmp_path, mock_home, t0):
    """Invoke the CLI against a temp data dir with a frozen clock."""
    data_dir = tmp_path / "data"

    def _invoke(*args, now=t0):
        with patch("lexicard.interface.cli.utc_now", return_value=now):
            return runner.invoke(app, ["--data-dir", str(data_dir), *args])

    return _invoke


def _cards(cli) -> list[dict]:
    result = cli("list", "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "lexicard: Spaced-repetition vocabulary trainer" in result.stdout
    for command in ("add", "due", "rate", "stats", "upcoming", "config"):
        assert command in result.stdout


# --- Cards ---


def test_add_and_list(cli):
    result = cli("add", "der Hund", "the dog", "--deck", "german", "--example", "Der Hund bellt.")
    assert result.exit_code == 0, result.output
    assert "Added card_" in result.stdout

    cards = _cards(cli)
    assert len(cards) == 1
    assert cards[0]["front"] == "der Hund"
    assert cards[0]["status"] == "new"
    assert cards[0]["deck_id"] == "german"


def test_add_requires_text(cli):
    result = cli("add", "  ", "the dog")
    assert result.exit_code == 2
    assert _cards(cli) == []


def test_list_empty(cli):
    result = cli("list")
    assert result.exit_code == 0
    assert "No cards found." in result.stdout


# --- Rating ---


def test_rate_updates_card(cli, t0):
    cli("add", "der Hund", "the dog")
    card_id = _cards(cli)[0]["id"]

    result = cli("rate", card_id, "good")

    assert result.exit_code == 0, result.output
    assert "Remembered correctly" in result.stdout
    card = _cards(cli)[0]
    assert card["status"] == "review"
    assert card["repetitions"] == 1
    assert card["version"] == 1
    assert card["due_date"] == (t0 + timedelta(days=1)).isoformat()


def test_rate_accepts_button_numbers(cli):
    cli("add", "der Hund", "the dog")
    card_id = _cards(cli)[0]["id"]

    result = cli("rate", card_id, "1")

    assert result.exit_code == 0, result.output
    assert _cards(cli)[0]["status"] == "learning"


def test_rate_rejects_unknown_rating(cli):
    cli("add", "der Hund", "the dog")
    card_id = _cards(cli)[0]["id"]

    result = cli("rate", card_id, "perfect")

    assert result.exit_code == 1
    assert "Unknown rating" in result.output
    assert _cards(cli)[0]["version"] == 0


def test_rate_unknown_card(cli):
    result = cli("rate", "card_nope", "good")
    assert result.exit_code == 1
    assert "Card not found: card_nope" in result.output


# --- Queue ---


def test_due_lists_new_then_due(cli, t0):
    cli("add", "der Hund", "the dog")
    cli("add", "die Katze", "the cat")
    first_id = _cards(cli)[0]["id"]
    cli("rate", first_id, "again")

    result = cli("due", "--json", now=t0 + timedelta(minutes=15))

    assert result.exit_code == 0, result.output
    queue = json.loads(result.stdout)
    assert len(queue) == 2
    assert queue[0] == first_id


def test_due_respects_new_limit(cli):
    cli("add", "a", "1")
    cli("add", "b", "2")
    result = cli("due", "--json", "--new-limit", "1")
    assert len(json.loads(result.stdout)) == 1


def test_due_nothing(cli):
    result = cli("due")
    assert result.exit_code == 0
    assert "All caught up" in result.stdout


# --- Stats ---


def test_stats_json(cli):
    cli("add", "der Hund", "the dog")
    cli("add", "die Katze", "the cat")
    card_id = _cards(cli)[0]["id"]
    cli("rate", card_id, "again")

    result = cli("stats", "--json")

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["total"] == 2
    assert data["new"] == 1
    assert data["learning"] == 1
    assert data["due_today"] == 1
    assert data["retention"] == 0


def test_stats_text(cli):
    cli("add", "der Hund", "the dog")
    result = cli("stats")
    assert result.exit_code == 0
    assert "Total: 1" in result.stdout
    assert "Retention: 0%" in result.stdout


def test_upcoming(cli, t0):
    cli("add", "der Hund", "the dog")

    result = cli("upcoming", "--days", "3")

    assert result.exit_code == 0, result.output
    lines = result.stdout.strip().splitlines()
    assert lines == [
        f"{(t0.date() + timedelta(days=i)).isoformat()}  {1 if i == 0 else 0}" for i in range(3)
    ]


def test_upcoming_rejects_invalid_days(cli):
    result = cli("upcoming", "--days", "0")
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


# --- Config ---


def test_config_show(mock_home):
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["max_ease"] is None
    assert data["new_cards_limit"] == 10
    assert data["data_dir"] == str(mock_home / ".local/share/lexicard")


# --- humanize_error ---


def test_humanize_error():
    assert "Unknown rating" in humanize_error(InvalidRatingError("x"))
    assert "lexicard list" in humanize_error(CardNotFoundError("card_1"))
    assert "rate it again" in humanize_error(ConcurrentUpdateError("card_1", 0, 1))
    assert humanize_error(RuntimeError("boom")) == "RuntimeError: boom"
