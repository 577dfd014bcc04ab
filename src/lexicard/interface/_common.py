"""Shared helpers for CLI commands."""

import logging
from typing import Any

from pydantic import ValidationError

from lexicard.application.config import AppConfig, resolve_config
from lexicard.domain.errors import (
    CardNotFoundError,
    ConcurrentUpdateError,
    InvalidRatingError,
    LexicardError,
)
from lexicard.domain.ports import CardRepository
from lexicard.infrastructure.adapters import YamlCardRepository


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config with CLI flags taking precedence; unset flags are dropped."""
    config = resolve_config(overrides)
    if config.verbose >= 2:
        logging.getLogger("lexicard").setLevel(logging.DEBUG)
    return config


def get_card_repository(config: AppConfig) -> CardRepository:
    return YamlCardRepository(config.store_path)


def humanize_error(e: Exception) -> str:
    """Turn an exception into a one-line message for the terminal."""
    if isinstance(e, InvalidRatingError):
        return str(e)
    if isinstance(e, CardNotFoundError):
        return f"{e}. Run 'lexicard list' to see card ids."
    if isinstance(e, ConcurrentUpdateError):
        return f"{e}. Reload the card and rate it again."
    if isinstance(e, ValidationError):
        errs = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        return f"Invalid configuration: {errs}"
    if isinstance(e, LexicardError):
        return str(e)
    return f"{type(e).__name__}: {e}"
