"""
JSON-backed configuration for pcbcanvas.

One file per section under the config directory:
    render.json  - canvas size, background, bounds padding and pass toggles
    colors.json  - color map overrides handed to PcbCanvasDrawer.configure()

Values that fail validation are logged and replaced by their defaults, so a
hand-edited file never stops a render.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Callable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderSettings:
    """Validated contents of the render section."""
    width: int = 800
    height: int = 600
    background: str = "#1a1a1a"
    padding: float = 1.0
    antialias: bool = True
    draw_rats_nest: bool = True


DEFAULT_RENDER_SETTINGS = RenderSettings()

DEFAULT_CONFIGS: dict[str, dict[str, Any]] = {
    "render": asdict(DEFAULT_RENDER_SETTINGS),
    # e.g. {"copper": {"top": "#ffaa00"}, "drill": "white"}
    "colors": {},
}


def _canvas_size(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a pixel count, got {value!r}")
    if value <= 0 or value != int(value):
        raise ValueError(f"{value!r} is not a positive whole pixel count")
    return int(value)


def _padding(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{value!r} is not a finite non-negative padding")
    return float(value)


def _color_string(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"expected a color string, got {value!r}")
    return value


def _flag(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected true or false, got {value!r}")
    return value


_RENDER_FIELDS: dict[str, Callable[[Any], Any]] = {
    "width": _canvas_size,
    "height": _canvas_size,
    "background": _color_string,
    "padding": _padding,
    "antialias": _flag,
    "draw_rats_nest": _flag,
}


class JsonConfigManager:
    """Loads, validates and persists the pcbcanvas configuration sections."""

    def __init__(self, config_dir: str | Path | None = None):
        base_dir = os.environ.get("PCBCANVAS_CONFIG_DIR")
        root = Path(base_dir or config_dir or Path.home() / ".pcbcanvas" / "config")
        self._config_dir = root.expanduser().resolve()
        self._config_dir.mkdir(parents=True, exist_ok=True)
        self._data: dict[str, dict[str, Any]] = {}

        self._load_all()

    @property
    def config_dir(self) -> Path:
        """Return configuration directory path."""
        return self._config_dir

    def render_settings(self) -> RenderSettings:
        """Return the render section with invalid values replaced by defaults."""
        stored = self._data["render"]
        for key in sorted(set(stored) - set(_RENDER_FIELDS)):
            logger.warning("Ignoring unknown render setting '%s'", key)

        values: dict[str, Any] = {}
        for name, validate in _RENDER_FIELDS.items():
            default = getattr(DEFAULT_RENDER_SETTINGS, name)
            try:
                values[name] = validate(stored.get(name, default))
            except (TypeError, ValueError) as exc:
                logger.warning("Invalid render.%s (%s); using %r", name, exc, default)
                values[name] = default
        return RenderSettings(**values)

    def color_overrides(self) -> dict[str, Any]:
        """
        Return the colors section restricted to recognized color map keys.

        Nested groups (copper, silkscreen, ...) keep only the sides the
        default map defines; non-string colors are dropped.
        """
        # Deferred so QtGui is not loaded before the platform plugin is chosen
        from pcbcanvas.graphics.layers import DEFAULT_PCB_COLOR_MAP

        accepted: dict[str, Any] = {}
        for key, value in self._data["colors"].items():
            default = DEFAULT_PCB_COLOR_MAP.get(key)
            if default is None:
                logger.warning("Ignoring unknown color key '%s'", key)
            elif isinstance(default, dict):
                if not isinstance(value, dict):
                    logger.warning("Color group '%s' must be an object, got %r", key, value)
                    continue
                group = {
                    side: color for side, color in value.items()
                    if side in default and isinstance(color, str)
                }
                for side in sorted(set(value) - set(group)):
                    logger.warning("Ignoring color '%s.%s'", key, side)
                if group:
                    accepted[key] = group
            elif isinstance(value, str):
                accepted[key] = value
            else:
                logger.warning("Color '%s' must be a string, got %r", key, value)
        return accepted

    def _save(self, section: str) -> None:
        path = self._config_dir / f"{section}.json"
        with path.open("w", encoding="utf-8") as handle:
            json.dump(self._data[section], handle, indent=2, sort_keys=True)
            handle.write("\n")

    def _load_all(self) -> None:
        """Load every section, filling in defaults and writing them back."""
        for section, default in DEFAULT_CONFIGS.items():
            path = self._config_dir / f"{section}.json"
            loaded: dict[str, Any] = {}

            if path.exists():
                try:
                    with path.open("r", encoding="utf-8") as handle:
                        parsed = json.load(handle)
                    if isinstance(parsed, dict):
                        loaded = parsed
                    else:
                        logger.warning("Config '%s' is not a JSON object; resetting to defaults", path)
                except (OSError, json.JSONDecodeError) as exc:
                    logger.warning("Failed to load config '%s': %s", path, exc)
            else:
                logger.info("Creating default config file '%s'", path)

            self._data[section] = {**default, **loaded}
            self._save(section)
