# -*- coding: utf-8 -*-
"""Environment configuration."""

from __future__ import annotations
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

# ── Constants ────────────────────────────────────────────────────────────────
API_BASE_URL          = "https://api.limitless.ai"
API_KEY_ENV_VAR       = "LIMITLESS_API_KEY"
API_BASE_URL_ENV_VAR  = "LIMITLESS_API_BASE_URL"
DATABASE_PATH_ENV_VAR = "DATABASE_PATH"
DEFAULT_DATABASE_PATH = "lifelogs.db"
MEMORY_PATH           = ":memory:"


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str = API_BASE_URL
    database_path: str = DEFAULT_DATABASE_PATH

    @property
    def is_ephemeral(self) -> bool:
        return self.database_path == MEMORY_PATH

    def __repr__(self) -> str:
        # keep the credential out of tracebacks and verbose output
        return f"Settings(api_key='***', base_url={self.base_url!r}, database_path={self.database_path!r})"


def load_settings(environ: Optional[Mapping[str, str]]=None) -> Settings:
    env = os.environ if environ is None else environ
    key = env.get(API_KEY_ENV_VAR)
    if not key:
        raise ConfigError(f"Missing {API_KEY_ENV_VAR}")
    return Settings(
        api_key=key,
        base_url=(env.get(API_BASE_URL_ENV_VAR) or API_BASE_URL).rstrip("/"),
        database_path=env.get(DATABASE_PATH_ENV_VAR) or DEFAULT_DATABASE_PATH,
    )

def get_api_key() -> str:
    key = os.environ.get(API_KEY_ENV_VAR)
    if not key:
        print(f"Error: Missing {API_KEY_ENV_VAR}", file=sys.stderr)
        sys.exit(1)
    return key
