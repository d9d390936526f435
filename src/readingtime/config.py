"""Configuration management via .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from readingtime.errors import ValidationError


def _xdg_data_home() -> Path:
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


@dataclass
class AppConfig:
    # Paths
    data_dir: Path = field(default_factory=lambda: _xdg_data_home() / "readingtime")
    config_dir: Path = field(
        default_factory=lambda: _xdg_config_home() / "readingtime"
    )
    store_path: Path = field(init=False)
    log_path: Path = field(init=False)

    # Goal
    default_goal_minutes: float = 30.0
    goal_presets: tuple[float, ...] = (15, 30, 45, 60, 90, 120)

    # Timers (seconds)
    tick_seconds: float = 1.0
    rollover_check_seconds: float = 60.0

    def __post_init__(self) -> None:
        self.store_path = self.data_dir / "readingtime.db"
        self.log_path = self.data_dir / "readingtime.log"
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {raw!r}")
    return value


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """Load config from .env file. Searches CWD then config dir."""
    search_paths = [
        env_path,
        Path.cwd() / ".env",
        _xdg_config_home() / "readingtime" / ".env",
        Path.home() / ".env",
    ]
    for p in search_paths:
        if p and p.exists():
            load_dotenv(p)
            break

    kwargs: dict = {}
    data_dir = os.getenv("READINGTIME_DATA_DIR")
    if data_dir:
        kwargs["data_dir"] = Path(data_dir).expanduser()

    return AppConfig(
        default_goal_minutes=_positive_float(
            "READINGTIME_DEFAULT_GOAL_MINUTES", AppConfig.default_goal_minutes
        ),
        tick_seconds=_positive_float(
            "READINGTIME_TICK_SECONDS", AppConfig.tick_seconds
        ),
        rollover_check_seconds=_positive_float(
            "READINGTIME_ROLLOVER_CHECK_SECONDS", AppConfig.rollover_check_seconds
        ),
        **kwargs,
    )
