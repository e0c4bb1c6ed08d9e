# settings.py
# Service configuration, read from ADVISOR_* environment variables.

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from advisor import Engine, parse_engine

ENV_PREFIX = "ADVISOR_"

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseModel):
    """Runtime settings of the move advisor service."""
    title: str = Field(default="2048 Move Advisor API", description="Title shown in the API docs.")
    base_depth: int = Field(
        default=5,
        ge=0,
        description="Search depth used when a request gives none and no large tile is on the board."
    )
    engine: Engine = Field(
        default=Engine.LOOKAHEAD,
        description="Engine used when a request names none (lookahead or expectimax)."
    )
    rate_limit: str = Field(default="100/minute", description="slowapi limit applied per client address.")
    log_level: LogLevel = Field(default="INFO", description="Root logging level.")

    @field_validator("engine", mode="before")
    @classmethod
    def _parse_engine(cls, value):
        return parse_engine(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Builds Settings from the environment; unset variables keep their defaults.
    Raises:
        pydantic.ValidationError: If a variable holds an invalid value, e.g. an
                                  unknown engine or logging level.
    """
    environ = os.environ if environ is None else environ
    values = {}
    for name in Settings.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            values[name] = environ[key]
    return Settings(**values)
