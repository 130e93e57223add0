"""Configuration management for pcbcanvas."""

from pcbcanvas.config.manager import (
    DEFAULT_CONFIGS,
    DEFAULT_RENDER_SETTINGS,
    JsonConfigManager,
    RenderSettings,
)

__all__ = [
    "DEFAULT_CONFIGS",
    "DEFAULT_RENDER_SETTINGS",
    "JsonConfigManager",
    "RenderSettings",
]
