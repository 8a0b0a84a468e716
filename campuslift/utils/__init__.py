"""campuslift utilities."""

from .config_loader import (
    AppConfig,
    Bounds,
    Point,
    SceneLayout,
    load_config,
    configure_logging,
)

__all__ = [
    "AppConfig",
    "Bounds",
    "Point",
    "SceneLayout",
    "load_config",
    "configure_logging",
]
