"""Shared test fixtures for DoReveal Tools tests."""

import copy
import json
import pytest
from pathlib import Path
from unittest.mock import MagicMock

from lib.config import DEFAULT_CONFIG
from lib.tools import ToolEnv


def completed(stdout="", returncode=0):
    """Create a mock CompletedProcess as returned by subprocess.run."""
    result = MagicMock()
    result.stdout = stdout
    result.returncode = returncode
    return result


def probe_json(result_dict):
    return completed(json.dumps(result_dict))


@pytest.fixture
def sample_config(tmp_path):
    """Return the default config with the tools cache inside tmp_path."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["tools"]["cache_dir"] = str(tmp_path / "cache")
    return config


@pytest.fixture
def tool_env(tmp_path):
    """ToolEnv pointing at an empty bin dir -- tools resolve to bare names."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return ToolEnv(bin_dir)


@pytest.fixture
def mock_ffprobe_result():
    """Return a mock ffprobe JSON result for a 10s video with audio."""
    return {
        "format": {
            "duration": "10.000000",
            "size": "1048576",
            "format_name": "mov,mp4,m4a,3gp,3g2,mj2",
        },
        "streams": [
            {
                "codec_type": "video",
                "codec_name": "h264",
                "width": 1920,
                "height": 1080,
            },
            {
                "codec_type": "audio",
                "codec_name": "aac",
                "channels": 2,
                "sample_rate": "48000",
            },
        ],
    }


@pytest.fixture
def mock_audio_result():
    """Return a mock ffprobe JSON result for an audio-only file."""
    return {
        "format": {"duration": "12.5"},
        "streams": [
            {"codec_type": "audio", "codec_name": "mp3", "channels": 2},
        ],
    }


@pytest.fixture
def mock_silent_video_result():
    """Return a mock ffprobe JSON result for a video without audio."""
    return {
        "format": {"duration": "10.0"},
        "streams": [
            {"codec_type": "video", "codec_name": "h264", "width": 640, "height": 360},
        ],
    }


@pytest.fixture
def media_file(tmp_path):
    """Create a small placeholder media file."""
    path = tmp_path / "media" / "clip.mp4"
    path.parent.mkdir()
    path.write_bytes(b"\x00" * 2048)
    return path
