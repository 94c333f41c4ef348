"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.enums import Difficulty


class Settings(BaseSettings):
    """Battle settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CREATURE_BATTLE_",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Battle setup
    default_difficulty: Difficulty = Difficulty.MEDIUM
    rng_seed: int | None = None  # Fixed seed makes every battle replayable
    player_initial_hand_size: int = 3
    starting_energy: int = 10

    # Energy economy
    max_energy: int = 15
    energy_regen_base: int = 4  # Both sides, plus a fifth of the field energy attribute
    spell_energy_cost: int = 4

    # Auto-play driver
    autoplay_max_turns: int = 100


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
