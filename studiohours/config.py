from __future__ import annotations

import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# The studio id ends up in a file name.
_STUDIO_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class Settings:
    studio_id: str

    # Directory holding one JSON document per storage key
    state_dir: str = "state"
    storage_prefix: str = "rooom_availability"

    log_level: str = "INFO"

    @property
    def storage_key(self) -> str:
        return f"{self.storage_prefix}_{self.studio_id}"


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _parse_studio_id(raw: str) -> str:
    value = raw.strip()
    if not _STUDIO_ID_RE.match(value):
        raise RuntimeError(f"Invalid STUDIO_ID value: {raw!r}. Use letters, digits, '-' or '_'.")
    return value


def load_settings(dotenv_path: str | None = None) -> Settings:
    # Prefer .env in repo root; dotenv_path allows overriding in tests.
    load_dotenv(dotenv_path=dotenv_path, override=False)

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in _LOG_LEVELS:
        raise RuntimeError(f"Invalid LOG_LEVEL value: {log_level!r}")

    return Settings(
        studio_id=_parse_studio_id(_require("STUDIO_ID")),
        state_dir=os.getenv("STATE_DIR", "state"),
        storage_prefix=os.getenv("STORAGE_PREFIX", "rooom_availability"),
        log_level=log_level,
    )
