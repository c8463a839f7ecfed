"""
Settings of a game session.

Defaults reproduce a standard game: 10 minutes on each clock, moves that expose your own king are not allowed,
and no other move can be played while a promotion choice is pending.
"""

import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel, ValidationError, field_validator

from src.core.exceptions import ConfigurationError

ENV_PREFIX = "CHESS_REFEREE_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class GameConfig(BaseModel):
    clock_seconds: int = 600
    king_safety: bool = True
    lock_during_promotion: bool = True
    log_level: str = "INFO"

    @field_validator("clock_seconds")
    @classmethod
    def validate_clock_seconds(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"clock_seconds must be positive, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """
        Read settings from environment variables
        ---

        ex) CHESS_REFEREE_CLOCK_SECONDS=300 CHESS_REFEREE_KING_SAFETY=false

        Unset variables fall back to the defaults. Pydantic takes care of parsing "300" / "false" etc.
        """
        environ = os.environ if environ is None else environ
        overrides = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        try:
            return cls.model_validate(overrides)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid settings in environment: {exc}") from exc
