"""Platform resolver -- map (OS, CPU arch) to the ffmpeg/ffprobe download URLs."""

import platform
import sys
from pathlib import Path
from typing import List, Optional

from lib.errors import UnsupportedPlatformError
from lib.models import BinaryAsset
from lib.tools import executable_name

DOWNLOAD_BASE = "https://ffmpeg.martin-riedl.de/redirect/latest"
TOOL_NAMES = ("ffmpeg", "ffprobe")

_ARM64 = {"arm64", "aarch64"}
_AMD64 = {"amd64", "x86_64"}


def _download_url(os_name: str, arch: str, tool: str) -> str:
    return f"{DOWNLOAD_BASE}/{os_name}/{arch}/release/{tool}.zip"


def resolve_assets(
    target_dir: Path,
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> List[BinaryAsset]:
    """Return the codec and probe assets for this host, in that order.

    ``system`` and ``machine`` default to ``sys.platform`` and
    ``platform.machine()``. macOS ships arm64 and amd64 builds (anything that
    is not arm64 gets amd64); Windows ships amd64 only. Every other OS is
    unsupported. Pure: no filesystem or network access.
    """
    system = system or sys.platform
    arch = (machine if machine is not None else platform.machine()).lower()

    if system == "darwin":
        os_name = "macos"
        arch = "arm64" if arch in _ARM64 else "amd64"
    elif system == "win32":
        os_name = "windows"
        if arch not in _AMD64:
            raise UnsupportedPlatformError(
                f"windows {arch or 'unknown'} not supported; use x64 build"
            )
        arch = "amd64"
    else:
        raise UnsupportedPlatformError(f"unsupported OS: {system}")

    target_dir = Path(target_dir)
    return [
        BinaryAsset(
            name=tool,
            url=_download_url(os_name, arch, tool),
            path=str(target_dir / executable_name(tool, system)),
        )
        for tool in TOOL_NAMES
    ]
