"""Tests for the conversion executor."""

import pytest
from unittest.mock import patch

from converter.executor import execute_plan
from lib.errors import ConversionError, OutputInspectionError, ProbeError
from lib.models import ConversionPlan, MediaInfo, MediaKind
from tests.conftest import completed, probe_json


@pytest.fixture
def plan(media_file):
    source = MediaInfo(path=str(media_file), name=media_file.name, kind=MediaKind.VIDEO,
                       duration=10.0, size=2048, has_audio=True)
    output = str(media_file.parent / "clip_converted.m4a")
    return ConversionPlan(
        source=source,
        output_path=output,
        target_format="m4a",
        args=["-y", "-i", str(media_file), "-vn", "-c:a", "aac", output],
    )


def _fake_tools(output_path, ffmpeg_result, probe_result):
    """subprocess.run side effect: ffmpeg writes the output, ffprobe describes it."""
    def _run(cmd, **kwargs):
        if cmd[0] == "ffmpeg":
            if ffmpeg_result.returncode == 0:
                with open(output_path, "wb") as f:
                    f.write(b"\x00" * 512)
            return ffmpeg_result
        return probe_result
    return _run


class TestExecutePlan:
    def test_success_reprobes_output(self, plan, tool_env, mock_audio_result):
        side_effect = _fake_tools(plan.output_path, completed(""), probe_json(mock_audio_result))
        with patch("subprocess.run", side_effect=side_effect) as mock_run:
            result = execute_plan(plan, tool_env)

        assert mock_run.call_args_list[0][0][0] == ["ffmpeg"] + plan.args
        assert result.target == "m4a"
        assert result.source == plan.source
        assert result.output.path == plan.output_path
        assert result.output.kind == MediaKind.AUDIO
        assert result.output.size == 512

    def test_ffmpeg_failure_carries_output(self, plan, tool_env):
        failed = completed("Unknown encoder 'aac'\n", returncode=1)
        with patch("subprocess.run", return_value=failed):
            with pytest.raises(ConversionError) as exc_info:
                execute_plan(plan, tool_env)
        assert not isinstance(exc_info.value, OutputInspectionError)
        assert str(exc_info.value) == "ffmpeg failed: exit status 1; Unknown encoder 'aac'"

    def test_ffmpeg_failure_without_output(self, plan, tool_env):
        with patch("subprocess.run", return_value=completed("", returncode=1)):
            with pytest.raises(ConversionError, match=r"^ffmpeg failed: exit status 1$"):
                execute_plan(plan, tool_env)

    def test_output_inspection_failure_is_distinct(self, plan, tool_env):
        side_effect = _fake_tools(plan.output_path, completed(""), completed("garbled", returncode=1))
        with patch("subprocess.run", side_effect=side_effect):
            with pytest.raises(OutputInspectionError) as exc_info:
                execute_plan(plan, tool_env)
        assert "conversion succeeded but inspecting output failed" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ProbeError)

    def test_missing_output_is_inspection_failure(self, plan, tool_env):
        with patch("subprocess.run", return_value=completed("")):
            with pytest.raises(OutputInspectionError, match="file not found"):
                execute_plan(plan, tool_env)
