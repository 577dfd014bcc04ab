"""Exception hierarchy for Lexicard.

The scheduler itself never raises; these are raised at the boundaries
(rating parsing, persistence) and surfaced by the CLI.
"""


class LexicardError(Exception):
    """Base class for all Lexicard errors."""


class InvalidRatingError(LexicardError, ValueError):
    """Raised when a rating value is not one of again/hard/good/easy."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Unknown rating {value!r}. Expected one of: again, hard, good, easy (or 1-4)."
        )


class CardNotFoundError(LexicardError, KeyError):
    """Raised when a repository has no card with the requested id."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(card_id)

    def __str__(self) -> str:
        return f"Card not found: {self.card_id}"


class ConcurrentUpdateError(LexicardError):
    """Raised when a save is attempted against a stale card version."""

    def __init__(self, card_id: str, expected: int, actual: int):
        self.card_id = card_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Card {card_id} was modified concurrently "
            f"(saving version {expected}, stored version is {actual})"
        )


class CardValidationError(LexicardError, ValueError):
    """Raised when stored card data cannot be turned into a Card."""


class DuplicateCardError(LexicardError):
    """Raised when adding a card whose id is already stored."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card already exists: {card_id}")
