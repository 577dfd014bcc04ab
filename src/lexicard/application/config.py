from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lexicard.domain.constants import (
    DEFAULT_NEW_CARDS_LIMIT,
    DEFAULT_UPCOMING_DAYS,
    MIN_EASE,
)

STORE_FILENAME = "cards.yaml"


def config_file_candidates() -> list[Path]:
    return [
        Path.home() / ".config/lexicard/config.toml",
        Path.home() / ".lexicard.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for lexicard.
    Supports loading from:
    1. Manual overrides (CLI)
    2. Environment variables (LEXICARD_*)
    3. Config file (~/.config/lexicard/config.toml or ~/.lexicard.toml)
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXICARD_",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/lexicard")

    # Scheduling policy
    max_ease: float | None = None  # None = 'easy' grows ease without bound

    # Study queue / dashboard
    new_cards_limit: int = Field(default=DEFAULT_NEW_CARDS_LIMIT, ge=0)
    upcoming_days: int = Field(default=DEFAULT_UPCOMING_DAYS, ge=1)

    verbose: int = 1

    @property
    def store_path(self) -> Path:
        return self.data_dir / STORE_FILENAME

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Earlier sources win. Use the first config file that exists.
        toml_file = next((f for f in config_file_candidates() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("max_ease")
    @classmethod
    def check_max_ease(cls, v: float | None) -> float | None:
        if v is not None and v < MIN_EASE:
            raise ValueError(f"max_ease must be at least {MIN_EASE}")
        return v


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/lexicard/config.toml (if exists)
    3. Environment variables (LEXICARD_*)
    4. cli_overrides (passed from Typer); None values are ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
