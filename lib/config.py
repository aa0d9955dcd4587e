"""Configuration loading -- config/config.toml merged over built-in defaults."""

import copy
import os
from pathlib import Path
from typing import Optional

from lib.paths import get_project_root

CONFIG_PATH = get_project_root() / "config" / "config.toml"

DEFAULT_CONFIG = {
    "tools": {
        "app_name": "doreveal-tools",
        "bin_dir": "",
        "cache_dir": "",
    },
    "conversion": {
        "video_codec": "libx264",
        "video_preset": "medium",
        "video_crf": 23,
        "audio_codec": "aac",
        "mp3_codec": "libmp3lame",
        "mp3_quality": 2,
        "min_speed": 0.5,
        "max_speed": 2.0,
    },
}

# Environment variable overrides always win
ENV_OVERRIDES = {
    "DOREVEAL_BIN_DIR": ("tools", "bin_dir"),
    "DOREVEAL_CACHE_DIR": ("tools", "cache_dir"),
}


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load config.toml from the project root and apply env overrides.

    A missing config file is not an error; the defaults are used as-is.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    path = Path(config_path) if config_path else CONFIG_PATH
    if path.exists():
        try:
            import tomli
        except ImportError:
            import tomllib as tomli
        with open(path, "rb") as f:
            _merge(config, tomli.load(f))

    for env_var, (section, key) in ENV_OVERRIDES.items():
        env_val = os.getenv(env_var, "")
        if env_val:
            config.setdefault(section, {})[key] = env_val
    return config
