"""
SM-2 style review scheduler.

Computes the next scheduling state of a card from its current state and a
recall rating. This is a pure computation module with no I/O: the caller
supplies ``now`` and persists the returned card.
"""

from dataclasses import replace
from datetime import datetime, timedelta

from lexicard.application.utils.common import round_half_up
from lexicard.domain.constants import (
    AGAIN_EASE_PENALTY,
    EASY_EASE_BONUS,
    FIRST_INTERVAL,
    HARD_EASE_PENALTY,
    MASTERY_MIN_INTERVAL,
    MASTERY_MIN_REPETITIONS,
    MIN_EASE,
    RELEARN_DELAY,
    SECOND_INTERVAL,
)
from lexicard.domain.models import Card, CardStatus, Rating

RATING_DESCRIPTIONS = {
    Rating.AGAIN: "Forgot completely - Will see again in 10 minutes",
    Rating.HARD: "Difficult to remember - Shorter interval",
    Rating.GOOD: "Remembered correctly - Normal interval",
    Rating.EASY: "Very easy - Longer interval",
}


def apply_rating(
    card: Card,
    rating: Rating,
    now: datetime,
    *,
    max_ease: float | None = None,
) -> Card:
    """
    Apply a learner's rating to a card and return its next state.

    Args:
        card: Current card state. Assumed well-formed (ease >= 1.3).
        rating: Parsed rating. Validate raw input with Rating.parse first.
        now: The review instant.
        max_ease: Optional ceiling for the 'easy' bonus. None leaves ease
            growth unbounded.

    Returns:
        A new Card; the input is left untouched.
    """
    if rating is Rating.AGAIN:
        return _lapse(card, now)

    ease = _next_ease(card.ease, rating, max_ease)
    interval = _next_interval(card.interval, card.repetitions, ease)
    repetitions = card.repetitions + 1

    if repetitions >= MASTERY_MIN_REPETITIONS and interval >= MASTERY_MIN_INTERVAL:
        status = CardStatus.MASTERED
    else:
        status = CardStatus.REVIEW

    return replace(
        card,
        ease=ease,
        interval=interval,
        repetitions=repetitions,
        status=status,
        due_date=now + timedelta(days=interval),
        last_reviewed=now,
    )


def _lapse(card: Card, now: datetime) -> Card:
    # Failed cards come back within the same session, not the next day.
    return replace(
        card,
        ease=max(MIN_EASE, card.ease - AGAIN_EASE_PENALTY),
        interval=FIRST_INTERVAL,
        repetitions=0,
        status=CardStatus.LEARNING,
        due_date=now + RELEARN_DELAY,
        last_reviewed=now,
    )


def _next_ease(ease: float, rating: Rating, max_ease: float | None) -> float:
    if rating is Rating.HARD:
        return max(MIN_EASE, ease - HARD_EASE_PENALTY)
    if rating is Rating.EASY:
        raised = ease + EASY_EASE_BONUS
        if max_ease is not None:
            # Never pull an ease that is already above the cap down.
            return max(ease, min(max_ease, raised))
        return raised
    return ease


def _next_interval(interval: int, repetitions: int, ease: float) -> int:
    """Interval for a successful review, keyed on repetitions before the increment."""
    if repetitions == 0:
        return FIRST_INTERVAL
    if repetitions == 1:
        return SECOND_INTERVAL
    return round_half_up(interval * ease)


def describe_rating(rating: Rating) -> str:
    """Learner-facing explanation of what a rating button does."""
    return RATING_DESCRIPTIONS[rating]
