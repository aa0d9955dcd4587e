"""FFprobe wrapper -- single source of truth for media file probing."""

import logging
import os
import stat
from pathlib import Path
from typing import NamedTuple

from pydantic import ValidationError

from lib.errors import MediaNotFoundError, ProbeError, ToolError
from lib.models import AudioStream, MediaInfo, MediaKind, ProbeOutput, VideoStream
from lib.tools import ToolEnv

logger = logging.getLogger("doreveal.ffprobe")


class ProbeResult(NamedTuple):
    kind: MediaKind
    duration: float
    has_audio: bool


def probe_output(path, env: ToolEnv) -> ProbeOutput:
    """Run ffprobe and return the parsed format + streams document.

    Raises ProbeError if ffprobe fails or prints something that is not the
    expected JSON document.
    """
    args = [
        "-v", "error",
        "-show_streams", "-show_format",
        "-of", "json",
        str(path),
    ]
    try:
        out = env.run("ffprobe", args)
    except ToolError as e:
        raise ProbeError(str(e)) from e

    try:
        return ProbeOutput.model_validate_json(out)
    except ValidationError as e:
        raise ProbeError(f"parse ffprobe output: {e}") from e


def parse_duration(value: str) -> float:
    """Parse ffprobe's duration string. Unparsable values count as unknown (0)."""
    if not value:
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def classify(parsed: ProbeOutput) -> ProbeResult:
    """Derive kind, duration and audio presence from a probe document.

    Any video stream makes the file a video; otherwise any audio stream makes
    it audio. Files with neither are rejected.
    """
    has_video = any(isinstance(s, VideoStream) for s in parsed.streams)
    has_audio = any(isinstance(s, AudioStream) for s in parsed.streams)

    if has_video:
        kind = MediaKind.VIDEO
    elif has_audio:
        kind = MediaKind.AUDIO
    else:
        raise ProbeError("unsupported media: no audio or video stream")

    return ProbeResult(kind, parse_duration(parsed.format.duration), has_audio)


def probe(path, env: ToolEnv) -> ProbeResult:
    """Probe a media file and classify it."""
    return classify(probe_output(path, env))


def load_media_info(path, env: ToolEnv) -> MediaInfo:
    """Stat and probe ``path``, returning a fresh MediaInfo.

    Raises MediaNotFoundError for a missing path and ProbeError for a
    directory, an unreadable path, or an unclassifiable file.
    """
    path = str(path)
    try:
        st = os.stat(path)
    except FileNotFoundError as e:
        raise MediaNotFoundError(f"file not found: {e}") from e
    except OSError as e:
        raise ProbeError(f"stat file: {e}") from e
    if stat.S_ISDIR(st.st_mode):
        raise ProbeError("expected a file but got a directory")

    result = probe(path, env)
    logger.debug("Probed %s: kind=%s duration=%.3f audio=%s",
                 path, result.kind.value, result.duration, result.has_audio)

    return MediaInfo(
        path=path,
        name=Path(path).name,
        kind=result.kind,
        duration=result.duration if result.duration > 0 else 0.0,
        size=st.st_size,
        has_audio=result.has_audio,
    )
