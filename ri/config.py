"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
import shlex
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

DEFAULT_BUILD_ARGS = ("-o", "-DskipTests")


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    home: Path = Field(description="Per-user state directory (RI_HOME)")
    build_executable: str = "mvn"
    default_build_args: list[str] = Field(default_factory=lambda: list(DEFAULT_BUILD_ARGS))
    fail_on_cycle: bool = False
    log_level: str = "INFO"

    @property
    def links_dir(self) -> Path:
        return self.home / "links"


def get_settings(load_env_file: bool = True) -> Settings:
    """Build settings from RI_* environment variables."""
    if load_env_file:
        load_dotenv(find_dotenv(usecwd=True))

    home = (os.environ.get("RI_HOME") or "").strip()
    raw_args = os.environ.get("RI_DEFAULT_BUILD_ARGS")
    default_args = shlex.split(raw_args) if raw_args is not None else list(DEFAULT_BUILD_ARGS)
    return Settings(
        home=Path(home).expanduser() if home else Path.home() / ".ri",
        build_executable=(os.environ.get("RI_BUILD_EXECUTABLE") or "mvn").strip(),
        default_build_args=default_args,
        fail_on_cycle=_truthy(os.environ.get("RI_FAIL_ON_CYCLE")),
        log_level=(os.environ.get("RI_LOG_LEVEL") or "INFO").strip().upper(),
    )
