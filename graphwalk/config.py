"""
Configuration management for GraphWalk.

Handles configuration including:
- Server settings (port, title)
- Canvas size and render cadence
- Traversal playback delays

Values are read from config.json next to the executable/project root and can be
overridden with GRAPHWALK_* environment variables (a .env file is loaded by app.py).
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from graphwalk.paths import get_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "GRAPHWALK_"


@dataclass
class Settings:
    """Resolved runtime settings."""
    title: str = "GraphWalk"
    port: int = 8082
    canvas_width: int = 1280
    canvas_height: int = 720
    frame_interval: float = 1 / 30
    bfs_visit_delay: float = 0.5
    bfs_fanout_delay: float = 0.3
    dfs_visit_delay: float = 0.6
    log_level: str = "INFO"


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = config_path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, IOError):
            logger.warning(f"Ignoring unreadable config file {config_path}")
            return {}
    return {}


def _coerce(value: Any, default: Any) -> Any:
    if isinstance(default, float):
        return float(value)
    if isinstance(default, int):
        return int(value)
    return str(value)


def get_settings(config_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    """
    Build Settings from defaults, config.json and the environment.

    Priority:
    1. Environment variable GRAPHWALK_<FIELD> (e.g. GRAPHWALK_PORT)
    2. Key <field> in config.json
    3. Dataclass default
    """
    environ = os.environ if environ is None else environ
    config = load_config(config_path)
    settings = Settings()

    for field in fields(Settings):
        default = getattr(settings, field.name)
        raw = environ.get(ENV_PREFIX + field.name.upper(), config.get(field.name))
        if raw is None:
            continue
        try:
            setattr(settings, field.name, _coerce(raw, default))
        except (TypeError, ValueError):
            logger.warning(f"Invalid value {raw!r} for setting '{field.name}', keeping {default!r}")

    return settings
