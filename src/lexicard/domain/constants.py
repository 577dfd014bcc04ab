"""Centralized constants for Lexicard.

Every scheduling policy number lives here so the scheduler, selection
functions, and hosts import from a single source of truth.
"""

from datetime import timedelta

# ---------- Ease ----------
MIN_EASE = 1.3
DEFAULT_EASE = 2.5
AGAIN_EASE_PENALTY = 0.2
HARD_EASE_PENALTY = 0.15
EASY_EASE_BONUS = 0.15

# ---------- Intervals ----------
FIRST_INTERVAL = 1  # days, after the first success
SECOND_INTERVAL = 6  # days, after the second success
RELEARN_DELAY = timedelta(minutes=10)

# ---------- Mastery ----------
MASTERY_MIN_REPETITIONS = 2
MASTERY_MIN_INTERVAL = 21  # days

# ---------- Queues / Dashboards ----------
DEFAULT_NEW_CARDS_LIMIT = 10
DEFAULT_UPCOMING_DAYS = 7
DEFAULT_INTERVAL_BUCKETS = 10
OVERDUE_GRACE = timedelta(days=1)

# ---------- Identifiers ----------
CARD_ID_PREFIX = "card_"
