"""
Serialization of cards to and from plain dicts.

Timestamps are stored as ISO-8601 strings, ease as a float, interval and
repetitions as integers. Loading normalizes state that would break
scheduler invariants instead of passing corruption through.
"""

import logging
from typing import Any

from lexicard.application.utils.clock import parse_iso, to_iso
from lexicard.domain.constants import DEFAULT_EASE, FIRST_INTERVAL, MIN_EASE
from lexicard.domain.errors import CardValidationError
from lexicard.domain.models import Card, CardStatus

logger = logging.getLogger(__name__)


def card_to_dict(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "deck_id": card.deck_id,
        "front": card.front,
        "back": card.back,
        "example": card.example,
        "interval": card.interval,
        "ease": card.ease,
        "repetitions": card.repetitions,
        "status": card.status.value,
        "due_date": to_iso(card.due_date),
        "last_reviewed": to_iso(card.last_reviewed) if card.last_reviewed else None,
        "version": card.version,
    }


def card_from_dict(data: dict[str, Any]) -> Card:
    """
    Build a Card from stored data, clamping out-of-range scheduling fields.

    Raises:
        CardValidationError: If the id, status, timestamps, or numeric
            fields are unusable.
    """
    card_id = data.get("id")
    if not card_id:
        raise CardValidationError(f"Card without id: {data!r}")

    raw_status = data.get("status", CardStatus.NEW.value)
    try:
        status = CardStatus(raw_status)
    except ValueError:
        raise CardValidationError(f"Card {card_id}: unknown status {raw_status!r}") from None

    try:
        due_date = parse_iso(data["due_date"])
        last_raw = data.get("last_reviewed")
        last_reviewed = parse_iso(last_raw) if last_raw else None
        interval = int(data.get("interval") or 0)
        raw_ease = data.get("ease")
        ease = DEFAULT_EASE if raw_ease is None else float(raw_ease)
        repetitions = int(data.get("repetitions") or 0)
        version = int(data.get("version") or 0)
    except (KeyError, TypeError, ValueError) as e:
        raise CardValidationError(f"Card {card_id}: {e}") from e

    if ease < MIN_EASE:
        logger.warning(f"Card {card_id}: ease {ease} below floor, clamping to {MIN_EASE}")
        ease = MIN_EASE

    if interval < FIRST_INTERVAL:
        if status is not CardStatus.NEW:
            logger.warning(f"Card {card_id}: interval {interval} invalid for {status.value}, using 1")
        interval = FIRST_INTERVAL

    if repetitions < 0:
        logger.warning(f"Card {card_id}: negative repetitions, resetting to 0")
        repetitions = 0

    return Card(
        id=str(card_id),
        due_date=due_date,
        interval=interval,
        ease=ease,
        repetitions=repetitions,
        status=status,
        last_reviewed=last_reviewed,
        front=data.get("front") or "",
        back=data.get("back") or "",
        example=data.get("example"),
        deck_id=data.get("deck_id"),
        version=version,
    )
