"""Tests for lib.encoding -- per-format argument policy and speed handling."""

import pytest

from lib.encoding import (
    get_format_options,
    get_output_args,
    get_speed_filter_args,
    get_video_encoder_args,
    normalize_format,
    resolve_speed,
)
from lib.errors import InvalidRequestError
from lib.models import MediaInfo, MediaKind


def _info(kind, has_audio=True):
    return MediaInfo(path="/media/clip", name="clip", kind=kind, duration=10.0,
                     size=100, has_audio=has_audio)


class TestNormalizeFormat:
    def test_lowercases_and_strips_dot(self):
        assert normalize_format(".MP4") == "mp4"

    def test_plain_token(self):
        assert normalize_format("m4a") == "m4a"

    @pytest.mark.parametrize("token", ["", "."])
    def test_empty_is_invalid(self, token):
        with pytest.raises(InvalidRequestError, match="invalid target format"):
            normalize_format(token)

    def test_surrounding_whitespace_is_kept(self, sample_config):
        assert normalize_format(" mp4") == " mp4"
        with pytest.raises(InvalidRequestError, match="unsupported target format"):
            get_output_args(_info(MediaKind.VIDEO), " mp4", None, sample_config)


class TestResolveSpeed:
    def test_none_defaults_to_normal(self, sample_config):
        assert resolve_speed(None, sample_config) == 1.0

    def test_non_positive_defaults_to_normal(self, sample_config):
        assert resolve_speed(0, sample_config) == 1.0
        assert resolve_speed(-2.0, sample_config) == 1.0

    def test_bounds_are_inclusive(self, sample_config):
        assert resolve_speed(0.5, sample_config) == 0.5
        assert resolve_speed(2.0, sample_config) == 2.0

    @pytest.mark.parametrize("speed", [0.25, 2.5, 3.0, float("nan"), float("inf")])
    def test_out_of_range(self, speed, sample_config):
        with pytest.raises(InvalidRequestError, match="unsupported playback speed"):
            resolve_speed(speed, sample_config)


class TestSpeedFilters:
    def test_normal_speed_has_no_filters(self):
        assert get_speed_filter_args(1.0, has_audio=True) == []

    def test_video_and_audio_filters(self):
        args = get_speed_filter_args(1.5, has_audio=True)
        assert args == ["-filter:v", "setpts=PTS/1.5", "-filter:a", "atempo=1.5"]

    def test_video_filter_only_without_audio(self):
        assert get_speed_filter_args(0.75, has_audio=False) == ["-filter:v", "setpts=PTS/0.75"]

    def test_speed_text_keeps_full_precision(self):
        args = get_speed_filter_args(1.23456789, has_audio=False)
        assert args == ["-filter:v", "setpts=PTS/1.23456789"]

    def test_nan_speed_never_reaches_filters(self, sample_config):
        with pytest.raises(InvalidRequestError, match="unsupported playback speed: nan"):
            get_output_args(_info(MediaKind.VIDEO), "mp4", float("nan"), sample_config)


class TestGetVideoEncoderArgs:
    def test_defaults(self, sample_config):
        assert get_video_encoder_args(sample_config) == [
            "-c:v", "libx264", "-preset", "medium", "-crf", "23",
        ]

    def test_crf_from_config(self, sample_config):
        sample_config["conversion"]["video_crf"] = 18
        assert get_video_encoder_args(sample_config)[-1] == "18"

    def test_empty_config_falls_back(self):
        assert get_video_encoder_args({}) == ["-c:v", "libx264", "-preset", "medium", "-crf", "23"]


class TestGetOutputArgs:
    def test_mp4_from_video(self, sample_config):
        args = get_output_args(_info(MediaKind.VIDEO), "mp4", None, sample_config)
        assert args == [
            "-c:v", "libx264", "-preset", "medium", "-crf", "23",
            "-c:a", "aac", "-movflags", "+faststart",
        ]

    def test_mp4_from_audio_fails(self, sample_config):
        with pytest.raises(InvalidRequestError, match="cannot convert audio to mp4"):
            get_output_args(_info(MediaKind.AUDIO), "mp4", None, sample_config)

    def test_mp4_speed_out_of_range(self, sample_config):
        with pytest.raises(InvalidRequestError, match="unsupported playback speed"):
            get_output_args(_info(MediaKind.VIDEO), "mp4", 3.0, sample_config)

    def test_m4a_from_video_drops_video(self, sample_config):
        args = get_output_args(_info(MediaKind.VIDEO), "m4a", None, sample_config)
        assert args == ["-vn", "-c:a", "aac"]

    def test_m4a_from_audio(self, sample_config):
        assert get_output_args(_info(MediaKind.AUDIO), "m4a", None, sample_config) == ["-c:a", "aac"]

    def test_m4a_ignores_speed(self, sample_config):
        args = get_output_args(_info(MediaKind.AUDIO), "m4a", 5.0, sample_config)
        assert args == ["-c:a", "aac"]

    def test_mp3_from_audio(self, sample_config):
        args = get_output_args(_info(MediaKind.AUDIO), "mp3", None, sample_config)
        assert args == ["-codec:a", "libmp3lame", "-qscale:a", "2"]

    def test_mp3_from_video_fails(self, sample_config):
        with pytest.raises(InvalidRequestError, match="cannot convert video to mp3"):
            get_output_args(_info(MediaKind.VIDEO), "mp3", None, sample_config)

    def test_unknown_format(self, sample_config):
        with pytest.raises(InvalidRequestError, match="unsupported target format: webm"):
            get_output_args(_info(MediaKind.VIDEO), "webm", None, sample_config)


class TestFormatOptions:
    def test_video_options(self):
        assert [o.value for o in get_format_options("video")] == ["mp4", "m4a"]

    def test_audio_options(self):
        assert [o.value for o in get_format_options(MediaKind.AUDIO)] == ["m4a", "mp3"]

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            get_format_options("image")
