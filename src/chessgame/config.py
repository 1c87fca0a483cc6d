"""Centralized application configuration.

All settings are read from environment variables (or a .env.chess file).
Nothing is required; every field has a playable default.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chessgame.pieces import Color


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env.chess", env_file_encoding="utf-8",
    )

    # Opponent
    default_difficulty: str = "easy"
    hard_search_depth: int = Field(default=2, ge=1, le=4)
    random_seed: int | None = None

    # Which side the person plays; the other side is automated
    human_color: Literal["white", "black"] = "white"

    # Logging
    log_level: str = "INFO"

    @property
    def human(self) -> Color:
        return Color(self.human_color)
