from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "POKE_"

_ENV_FIELDS = {
    "TIMEOUT": "timeout_s",
    "FOLLOW_REDIRECTS": "follow_redirects",
    "LOG_FILE": "log_file",
    "LOG_LEVEL": "log_level",
    "PAGE_STEP": "page_step",
}


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout_s: float = Field(default=30.0, gt=0)
    follow_redirects: bool = False
    log_file: str | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    page_step: int = Field(default=10, ge=1)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        values: dict[str, object] = {}
        for suffix, field in _ENV_FIELDS.items():
            raw = env.get(ENV_PREFIX + suffix)
            if raw is None or raw.strip() == "":
                continue
            values[field] = raw.strip()

        if "log_level" in values:
            values["log_level"] = str(values["log_level"]).upper()

        return cls.model_validate(values)
