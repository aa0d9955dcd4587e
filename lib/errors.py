"""Exception hierarchy shared by provisioning, probing and conversion.

Each class also derives from the closest built-in so callers that only know
about ValueError / RuntimeError / FileNotFoundError keep working.
"""


class MediaError(Exception):
    """Base class for every error raised by the media core."""


class InvalidRequestError(MediaError, ValueError):
    """Caller input is missing, malformed or out of range. Never retried."""


class ProvisionError(MediaError, RuntimeError):
    """The ffmpeg toolkit could not be located, downloaded or verified."""


class UnsupportedPlatformError(ProvisionError):
    """No toolkit build exists for this OS / CPU architecture."""


class ProbeError(MediaError, RuntimeError):
    """ffprobe failed or the file has no usable audio/video stream."""


class MediaNotFoundError(ProbeError, FileNotFoundError):
    pass


class ConversionError(MediaError, RuntimeError):
    """ffmpeg exited with an error or the output path could not be chosen."""


class OutputInspectionError(ConversionError):
    """ffmpeg succeeded but the output file could not be probed.

    Kept separate from ConversionError so callers can tell "conversion failed"
    from "the file was written but inspecting it failed".
    """


class ToolError(MediaError, RuntimeError):
    """An external executable failed to launch or exited non-zero."""

    def __init__(self, message: str, output: str = "", returncode=None):
        super().__init__(message)
        self.output = output
        self.returncode = returncode
