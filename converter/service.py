"""MediaService -- the caller-facing inspect / convert / open contract.

Every call is synchronous and blocking. Callers that serve several users at
once (the HTTP API) run each call on its own thread.
"""

import logging
import os
import subprocess
import sys
import time
from pathlib import Path
from typing import List, Optional

from converter.executor import execute_plan
from converter.planner import plan_conversion
from lib.config import load_config
from lib.encoding import get_format_options
from lib.errors import InvalidRequestError, MediaError, MediaNotFoundError
from lib.ffprobe import load_media_info
from lib.models import ConversionResult, FormatOption, MediaInfo
from lib.provision import ensure_ready
from lib.tools import ToolEnv


def _absolute(path: str) -> str:
    return os.path.abspath(path)


class MediaService:
    """Inspect and convert media files with a given ToolEnv."""

    def __init__(self, env: ToolEnv, config: Optional[dict] = None):
        self.env = env
        self.config = config if config is not None else load_config()
        self.logger = logging.getLogger("doreveal.service")

    @classmethod
    def from_config(cls, config: Optional[dict] = None) -> "MediaService":
        """Provision ffmpeg/ffprobe (if needed) and build a service."""
        config = config if config is not None else load_config()
        env = ensure_ready(config)
        return cls(env, config)

    def inspect_media(self, path: str) -> MediaInfo:
        if not path:
            raise InvalidRequestError("path is required")
        return load_media_info(_absolute(path), self.env)

    def convert_media(
        self,
        source_path: str,
        target_format: str,
        speed: Optional[float] = None,
    ) -> ConversionResult:
        """Convert ``source_path`` to ``target_format`` next to the source file."""
        if not source_path:
            raise InvalidRequestError("sourcePath is required")
        if not target_format:
            raise InvalidRequestError("targetFormat is required")

        absolute = _absolute(source_path)
        self.logger.info(f"Converting {absolute} to {target_format} (speed={speed})")
        start = time.time()
        try:
            plan = plan_conversion(absolute, target_format, speed, self.env, self.config)
            result = execute_plan(plan, self.env)
        except MediaError as e:
            elapsed = time.time() - start
            self.logger.error(f"Conversion failed after {elapsed:.1f}s: {e}")
            raise

        elapsed = time.time() - start
        self.logger.info(f"Completed in {elapsed:.1f}s -> {result.output.path}")
        return result

    def open_path(self, path: str):
        """Open ``path`` with the OS default handler without waiting for it."""
        if not path:
            raise InvalidRequestError("path is required")
        absolute = _absolute(path)
        try:
            os.stat(absolute)
        except FileNotFoundError as e:
            raise MediaNotFoundError(f"stat path: {e}") from e
        except OSError as e:
            raise MediaError(f"stat path: {e}") from e

        if sys.platform == "darwin":
            cmd = ["open", absolute]
        elif sys.platform == "win32":
            cmd = ["cmd", "/c", "start", "", absolute]
        else:
            cmd = ["xdg-open", absolute]

        try:
            subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            raise MediaError(f"open path: {e}") from e

    def format_options(self, kind: str) -> List[FormatOption]:
        try:
            return get_format_options(kind)
        except ValueError as e:
            raise InvalidRequestError(f"unknown media kind: {kind}") from e

    @property
    def bin_dir(self) -> Optional[Path]:
        return self.env.bin_dir
