"""DoReveal converter -- inspect and transcode media through ffmpeg/ffprobe."""

from converter.executor import execute_plan
from converter.planner import plan_conversion
from converter.service import MediaService

__all__ = ["MediaService", "execute_plan", "plan_conversion"]
