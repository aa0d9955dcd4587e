"""Binary provisioning -- download, extract, verify and cache ffmpeg/ffprobe.

Inputs:
    - config [tools] section (app_name, bin_dir, cache_dir)
Outputs:
    - <cache>/<app_name>/ffmpeg, ffprobe (plus .exe on Windows)
    - <cache>/<app_name>/installed marker
Dependencies:
    - httpx (archive download)
Environment:
    - DOREVEAL_BIN_DIR, DOREVEAL_CACHE_DIR (via lib.config)
"""

import logging
import os
import sys
import tempfile
import threading
import zipfile
import zlib
from pathlib import Path
from typing import List

import httpx

from lib.errors import ProvisionError, ToolError
from lib.models import BinaryAsset
from lib.paths import INSTALLED_MARKER, get_tools_dir
from lib.platforms import resolve_assets
from lib.tools import ToolEnv

logger = logging.getLogger("doreveal.provision")

_provision_lock = threading.Lock()


def is_ready(assets: List[BinaryAsset]) -> bool:
    """True only when every asset path exists and is a regular file."""
    return all(Path(asset.path).is_file() for asset in assets)


def add_to_search_path(bin_dir: Path):
    """Append ``bin_dir`` to this process's PATH (once)."""
    current = os.environ.get("PATH", "")
    entries = current.split(os.pathsep) if current else []
    if str(bin_dir) in entries:
        return
    entries.append(str(bin_dir))
    os.environ["PATH"] = os.pathsep.join(entries)


def download_archive(url: str, dest: Path):
    """Stream ``url`` into ``dest``. No auth, no retry, no timeout."""
    logger.info(f"Downloading {url}...")
    try:
        with httpx.stream("GET", url, follow_redirects=True, timeout=None) as response:
            if response.status_code != 200:
                raise ProvisionError(
                    f"download failed with status: {response.status_code} {response.reason_phrase}"
                )
            with open(dest, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)
    except httpx.HTTPError as e:
        raise ProvisionError(f"download failed: {e}") from e
    except OSError as e:
        raise ProvisionError(f"copy download failed: {e}") from e


def _safe_target(target_dir: Path, name: str) -> Path:
    root = target_dir.resolve()
    dest = (root / name).resolve()
    if dest != root and root not in dest.parents:
        raise ProvisionError(f"extract {name} failed: entry escapes target directory")
    return dest


def extract_archive(archive_path: Path, target_dir: Path):
    """Extract every zip entry into ``target_dir``, keeping declared file modes."""
    try:
        with zipfile.ZipFile(archive_path) as zf:
            for entry in zf.infolist():
                dest = _safe_target(target_dir, entry.filename)
                mode = (entry.external_attr >> 16) & 0o777

                try:
                    if entry.is_dir():
                        dest.mkdir(parents=True, exist_ok=True)
                        continue
                    dest.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(entry) as src, open(dest, "wb") as out:
                        while True:
                            chunk = src.read(1024 * 1024)
                            if not chunk:
                                break
                            out.write(chunk)
                    if mode:
                        os.chmod(dest, mode)
                except (OSError, zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError) as e:
                    # corrupt deflate data, encrypted or unsupported entries
                    raise ProvisionError(f"extract {entry.filename} failed: {e}") from e
    except zipfile.BadZipFile as e:
        raise ProvisionError(f"open ZIP failed: {e}") from e


def install_asset(asset: BinaryAsset, target_dir: Path):
    """Download, extract and verify a single asset."""
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f"{asset.name}-", suffix=".zip")
        os.close(fd)
    except OSError as e:
        raise ProvisionError(f"create temp file failed: {e}") from e
    tmp_zip = Path(tmp_name)
    try:
        download_archive(asset.url, tmp_zip)
        extract_archive(tmp_zip, target_dir)
    finally:
        tmp_zip.unlink(missing_ok=True)

    bin_path = Path(asset.path)
    if not bin_path.is_file():
        raise ProvisionError(f"{asset.name} not found in archive: expected {bin_path}")

    # macOS archives do not keep the executable bit
    if sys.platform == "darwin":
        try:
            os.chmod(bin_path, 0o755)
        except OSError as e:
            raise ProvisionError(f"chmod failed: {e}") from e

    verify_asset(asset)


def verify_asset(asset: BinaryAsset):
    """Run ``<asset> -version`` and require a clean exit."""
    try:
        ToolEnv().run(asset.path, ["-version"])
    except ToolError as e:
        raise ProvisionError(f"{asset.name} verify failed: {e}") from e


def ensure_ready(config: dict) -> ToolEnv:
    """Make ffmpeg/ffprobe available and return a ToolEnv pointing at them.

    Idempotent: once both executables exist in the cache directory this only
    registers the directory on PATH. A configured tools.bin_dir skips
    provisioning entirely. Raises ProvisionError on any failure.
    """
    configured = config.get("tools", {}).get("bin_dir") or ""
    if configured:
        bin_dir = Path(configured).expanduser()
        logger.info(f"Using configured binary directory {bin_dir}")
        return ToolEnv(bin_dir)

    with _provision_lock:
        app_cache = get_tools_dir(config)
        assets = resolve_assets(app_cache)

        if is_ready(assets):
            logger.debug(f"FFmpeg already installed in {app_cache}")
            add_to_search_path(app_cache)
            return ToolEnv(app_cache)

        try:
            app_cache.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProvisionError(f"failed to create cache dir: {e}") from e

        for asset in assets:
            if Path(asset.path).is_file():
                continue
            try:
                install_asset(asset, app_cache)
            except ProvisionError as e:
                raise ProvisionError(f"FFmpeg setup failed: {e}") from e

        marker = app_cache / INSTALLED_MARKER
        try:
            marker.write_text("1")
        except OSError as e:
            # Readiness is decided by the executables, not the marker
            logger.warning(f"Failed to write install flag {marker}: {e}")

        add_to_search_path(app_cache)
        logger.info(f"FFmpeg installed and verified in {app_cache}")
        return ToolEnv(app_cache)
