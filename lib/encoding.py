"""Per-format ffmpeg argument policy -- codecs, quality, speed filters."""

from typing import List, Optional

from lib.errors import InvalidRequestError
from lib.models import FormatOption, MediaInfo, MediaKind

FORMAT_OPTIONS = {
    MediaKind.VIDEO: [
        FormatOption(value="mp4", label="MP4", description="H.264 video with AAC audio"),
        FormatOption(value="m4a", label="M4A", description="Extract audio only"),
    ],
    MediaKind.AUDIO: [
        FormatOption(value="m4a", label="M4A", description="AAC audio"),
        FormatOption(value="mp3", label="MP3", description="MP3 audio"),
    ],
}


def normalize_format(target_format: str) -> str:
    """Lower-case the token and strip one leading '.'; empty is invalid."""
    token = (target_format or "").lower()
    if token.startswith("."):
        token = token[1:]
    if not token:
        raise InvalidRequestError("invalid target format")
    return token


def fmt_speed(speed: float) -> str:
    """Shortest round-trip text for ``speed``, without a trailing '.0'."""
    text = repr(float(speed))
    return text[:-2] if text.endswith(".0") else text


def resolve_speed(speed: Optional[float], config: dict) -> float:
    """Default non-positive speeds to 1.0 and enforce the configured bounds."""
    conv = config.get("conversion", {})
    if speed is None or speed <= 0:
        speed = 1.0
    min_speed = float(conv.get("min_speed", 0.5))
    max_speed = float(conv.get("max_speed", 2.0))
    # NaN fails both comparisons
    if not (min_speed <= speed <= max_speed):
        raise InvalidRequestError(f"unsupported playback speed: {fmt_speed(speed)}")
    return float(speed)


def get_speed_filter_args(speed: float, has_audio: bool) -> list:
    """Return setpts (and atempo, when there is audio) filters for ``speed``.

    Empty at normal speed.
    """
    if speed == 1.0:
        return []
    args = ["-filter:v", f"setpts=PTS/{fmt_speed(speed)}"]
    if has_audio:
        args += ["-filter:a", f"atempo={fmt_speed(speed)}"]
    return args


def get_video_encoder_args(config: dict) -> list:
    """Return the H.264 encoder arguments from config.

    Default: ["-c:v", "libx264", "-preset", "medium", "-crf", "23"]
    """
    conv = config.get("conversion", {})
    return [
        "-c:v", conv.get("video_codec", "libx264"),
        "-preset", conv.get("video_preset", "medium"),
        "-crf", str(conv.get("video_crf", 23)),
    ]


def _mp4_args(source: MediaInfo, speed: Optional[float], config: dict) -> list:
    if source.kind != MediaKind.VIDEO:
        raise InvalidRequestError(f"cannot convert {source.kind.value} to mp4")
    speed = resolve_speed(speed, config)
    audio_codec = config.get("conversion", {}).get("audio_codec", "aac")
    return (
        get_video_encoder_args(config)
        + get_speed_filter_args(speed, source.has_audio)
        + ["-c:a", audio_codec, "-movflags", "+faststart"]
    )


def _m4a_args(source: MediaInfo, speed: Optional[float], config: dict) -> list:
    args = []
    if source.kind == MediaKind.VIDEO:
        args.append("-vn")
    args += ["-c:a", config.get("conversion", {}).get("audio_codec", "aac")]
    return args


def _mp3_args(source: MediaInfo, speed: Optional[float], config: dict) -> list:
    if source.kind != MediaKind.AUDIO:
        raise InvalidRequestError(f"cannot convert {source.kind.value} to mp3")
    conv = config.get("conversion", {})
    return [
        "-codec:a", conv.get("mp3_codec", "libmp3lame"),
        "-qscale:a", str(conv.get("mp3_quality", 2)),
    ]


FORMAT_POLICIES = {
    "mp4": _mp4_args,
    "m4a": _m4a_args,
    "mp3": _mp3_args,
}


def get_output_args(source: MediaInfo, target_format: str, speed: Optional[float],
                    config: dict) -> List[str]:
    """Return the format-specific arguments placed between input and output.

    Raises InvalidRequestError for unknown formats, kind/format mismatches and
    out-of-range speeds.
    """
    policy = FORMAT_POLICIES.get(target_format)
    if policy is None:
        raise InvalidRequestError(f"unsupported target format: {target_format}")
    return policy(source, speed, config)


def get_format_options(kind) -> List[FormatOption]:
    """Return the target formats offered for a media kind."""
    return list(FORMAT_OPTIONS.get(MediaKind(kind), []))
