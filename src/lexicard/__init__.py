"""Lexicard: spaced-repetition scheduling for vocabulary decks."""

from lexicard.consts import VERSION

__version__ = VERSION
