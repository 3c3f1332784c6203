"""Server settings read from ``STACKCHESS_*`` environment variables."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from stackchess.constants import Color

ENV_PREFIX = "STACKCHESS_"


class Settings(BaseModel):
    opponent_color: Optional[Color] = Field(default=Color.BLACK)
    opponent_delay_ms: int = Field(default=2000, ge=0, le=60_000)
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @field_validator("opponent_color", mode="before")
    @classmethod
    def _parse_color(cls, value):
        if isinstance(value, str) and value.strip().lower() in ("", "none", "off"):
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def opponent_delay(self) -> float:
        return self.opponent_delay_ms / 1000.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for name in ("opponent_color", "opponent_delay_ms", "log_level"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        origins = env.get(ENV_PREFIX + "CORS_ORIGINS")
        if origins is not None:
            values["cors_origins"] = [item.strip() for item in origins.split(",") if item.strip()]
        return cls(**values)
