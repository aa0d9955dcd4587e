"""Pydantic models for media info, conversion plans/results and ffprobe output."""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag


class MediaKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"


class MediaInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    kind: MediaKind
    duration: float = 0.0
    size: int = 0
    has_audio: bool = False


class ConversionRequest(BaseModel):
    source_path: str = ""
    target_format: str = ""
    speed: Optional[float] = None


class ConversionPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: MediaInfo
    output_path: str
    target_format: str
    args: List[str]


class ConversionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: MediaInfo
    output: MediaInfo
    target: str


class BinaryAsset(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    path: str


class FormatOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    description: str


# ---------------------------------------------------------------------------
# ffprobe -of json document
# ---------------------------------------------------------------------------

class VideoStream(BaseModel):
    codec_type: Literal["video"] = "video"
    codec_name: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class AudioStream(BaseModel):
    codec_type: Literal["audio"] = "audio"
    codec_name: Optional[str] = None
    channels: Optional[int] = None
    sample_rate: Optional[str] = None


class OtherStream(BaseModel):
    """Subtitle, data, attachment or untagged streams."""

    codec_type: str = ""
    codec_name: Optional[str] = None


def _stream_tag(value) -> str:
    if isinstance(value, dict):
        codec_type = value.get("codec_type")
    else:
        codec_type = getattr(value, "codec_type", None)
    if codec_type in ("video", "audio"):
        return codec_type
    return "other"


Stream = Annotated[
    Union[
        Annotated[VideoStream, Tag("video")],
        Annotated[AudioStream, Tag("audio")],
        Annotated[OtherStream, Tag("other")],
    ],
    Discriminator(_stream_tag),
]


class ProbeFormat(BaseModel):
    duration: str = ""


class ProbeOutput(BaseModel):
    format: ProbeFormat = Field(default_factory=ProbeFormat)
    streams: List[Stream] = Field(default_factory=list)
