"""Tool environment -- which ffmpeg/ffprobe to launch and how to run them.

Every component that starts an external process receives a ToolEnv instead
of relying on the process-wide PATH, so tests can point it at any directory.
"""

import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from lib.errors import ToolError


def executable_name(name: str, system: Optional[str] = None) -> str:
    """Return the on-disk file name for a tool (``ffmpeg.exe`` on Windows)."""
    system = system or sys.platform
    if system == "win32":
        return name + ".exe"
    return name


class ToolEnv:
    """Resolved binary directory plus a combined-output process runner."""

    def __init__(self, bin_dir: Optional[Path] = None):
        self.bin_dir = Path(bin_dir) if bin_dir else None

    def __repr__(self) -> str:
        return f"ToolEnv(bin_dir={self.bin_dir!r})"

    def executable(self, name: str) -> str:
        """Path of ``name`` inside bin_dir, or the bare name for a PATH lookup."""
        if self.bin_dir is not None:
            candidate = self.bin_dir / executable_name(name)
            if candidate.is_file():
                return str(candidate)
        return name

    def run(self, name: str, args: List[str]) -> str:
        """Run a tool and return its combined stdout/stderr.

        Raises ToolError if the tool cannot be launched or exits non-zero; the
        error carries the trimmed output for diagnostics.
        """
        cmd = [self.executable(name)] + [str(a) for a in args]
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise ToolError(f"{name} failed: {e}") from e

        if result.returncode != 0:
            trimmed = (result.stdout or "").strip()
            message = f"{name} failed: exit status {result.returncode}"
            if trimmed:
                message = f"{message}; {trimmed}"
            raise ToolError(message, output=trimmed, returncode=result.returncode)
        return result.stdout or ""
