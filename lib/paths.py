"""Centralized path resolution for the tools cache and conversion outputs."""

import os
import sys
from pathlib import Path
from typing import Optional

from lib.errors import ConversionError, ProvisionError

PROJECT_ROOT = Path(__file__).resolve().parent.parent
INSTALLED_MARKER = "installed"


def get_project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


def user_cache_dir(system: Optional[str] = None) -> Path:
    """Return the per-user cache directory for this OS.

    macOS: ~/Library/Caches. Windows: %LOCALAPPDATA%. Others: $XDG_CACHE_HOME,
    falling back to ~/.cache.
    """
    system = system or sys.platform
    if system == "win32":
        local = os.getenv("LOCALAPPDATA", "")
        if not local:
            raise ProvisionError("failed to get cache dir: %LOCALAPPDATA% is not defined")
        return Path(local)

    try:
        home = Path.home()
    except RuntimeError as e:
        raise ProvisionError(f"failed to get cache dir: {e}") from e

    if system == "darwin":
        return home / "Library" / "Caches"
    xdg = os.getenv("XDG_CACHE_HOME", "")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    return home / ".cache"


def get_tools_dir(config: dict) -> Path:
    """Return the application subdirectory that holds ffmpeg/ffprobe.

    Checks tools.cache_dir (or DOREVEAL_CACHE_DIR, already merged into the
    config) first, then falls back to the OS cache directory.
    """
    tools = config.get("tools", {})
    base = tools.get("cache_dir") or ""
    base_dir = Path(base).expanduser() if base else user_cache_dir()
    return base_dir / tools.get("app_name", "doreveal-tools")


def build_output_path(input_path: str, extension: str) -> str:
    """Pick a non-existing ``<stem>_converted[_N].<ext>`` next to the input.

    Raises ConversionError if an existing candidate cannot be stat'ed for any
    reason other than not existing.
    """
    source = Path(input_path)
    directory = source.parent
    base = source.stem
    # ".mp4" is all extension, no stem
    if source.name.startswith(".") and source.name.count(".") == 1:
        base = ""
    if not base:
        base = "converted"

    candidate = directory / f"{base}_converted.{extension}"
    index = 1
    while True:
        try:
            os.stat(candidate)
        except FileNotFoundError:
            return str(candidate)
        except OSError as e:
            raise ConversionError(f"check output path: {e}") from e
        candidate = directory / f"{base}_converted_{index}.{extension}"
        index += 1
