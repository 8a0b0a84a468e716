"""
Config loader utility for campuslift.

Loads the YAML configuration from the config/ directory and applies
environment overrides (including a .env file at the project root).
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


PROJECT_ROOT = Path(__file__).parent.parent.parent

# Default config file (relative to project root)
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "campuslift.yaml"

# Environment variable -> AppConfig field
ENV_OVERRIDES = {
    "CAMPUSLIFT_COURSE_ID": "course_id",
    "CAMPUSLIFT_FIXTURE": "fixture_path",
    "CAMPUSLIFT_FETCH_DELAY_MS": "fetch_delay_ms",
    "CAMPUSLIFT_LOG_LEVEL": "log_level",
}

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


# -----------------------------------------------------------------------------
# Layout
# -----------------------------------------------------------------------------


class Point(BaseModel):
    x: float
    y: float


class Bounds(BaseModel):
    x: float
    y: float
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)

    def contains(self, px: float, py: float, margin: float = 0) -> bool:
        """Check whether a point lies inside the bounds grown by margin."""
        return (
            self.x - margin <= px <= self.x + self.width + margin
            and self.y - margin <= py <= self.y + self.height + margin
        )


class SceneLayout(BaseModel):
    """Fixed layout of the library interior shared by scene components."""
    elevator_bounds: Bounds = Field(default_factory=lambda: Bounds(x=650, y=220, width=100, height=160))
    exit_bounds: Bounds = Field(default_factory=lambda: Bounds(x=350, y=520, width=100, height=80))
    arrival_point: Point = Field(default_factory=lambda: Point(x=650, y=300))  # where the player lands after a ride
    interaction_margin: float = Field(default=50, ge=0)
    fade_out_ms: int = Field(default=200, ge=0)
    fade_in_ms: int = Field(default=200, ge=0)
    exit_fade_ms: int = Field(default=300, ge=0)
    lobby_name: str = "Lobby"


class AppConfig(BaseModel):
    course_id: str = "mock-course-id"
    fixture_path: Optional[Path] = None  # None = bundled mock course
    fetch_delay_ms: int = Field(default=300, ge=0)
    log_level: str = "INFO"
    layout: SceneLayout = Field(default_factory=SceneLayout)


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------


def load_config(path: Path | None = None, env_file: Path | None = None) -> AppConfig:
    """
    Load application config.

    Args:
        path: Optional YAML config file. If omitted, config/campuslift.yaml
            is used when present, otherwise built-in defaults.
        env_file: Optional .env file (default: .env at the project root)

    Returns:
        Validated AppConfig

    Raises:
        FileNotFoundError: If an explicit config path doesn't exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If values are invalid
    """
    load_dotenv(env_file or PROJECT_ROOT / ".env")

    data: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        data = _read_yaml(path)
    elif DEFAULT_CONFIG_PATH.exists():
        data = _read_yaml(DEFAULT_CONFIG_PATH)

    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            data[field_name] = value

    return AppConfig.model_validate(data)


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def configure_logging(level: str = "INFO"):
    """Configure root logging for entry points (app, scripts)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
