"""Configuration loading for Showsite.

Settings come from ``DEFAULT_CONFIG`` merged with an optional ``showsite.yaml`` in the
project root. Without the file the server listens on port 8080 and reads content
from ``pages/``, ``blog/``, ``episodes/`` and ``assets/`` next to ``template.html``.

Key functions:
- load_config: Loads site configuration from showsite.yaml.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "showsite.yaml"

DEFAULT_CONFIG = {
    "host": "",
    "port": 8080,
    "template": "template.html",
    "assets_dir": "assets",
    "pages_dir": "pages",
    "blog_dir": "blog",
    "episodes_dir": "episodes",
    "shutdown_timeout": 5.0,
    "log_level": "INFO",
}


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from showsite.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    return config
