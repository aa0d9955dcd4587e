"""Conversion executor -- run ffmpeg for a plan and inspect what it wrote."""

import logging

from lib.errors import ConversionError, OutputInspectionError, ProbeError, ToolError
from lib.ffprobe import load_media_info
from lib.models import ConversionPlan, ConversionResult
from lib.tools import ToolEnv

logger = logging.getLogger("doreveal.executor")


def execute_plan(plan: ConversionPlan, env: ToolEnv) -> ConversionResult:
    """Run ffmpeg with the plan's arguments, then re-probe the output.

    Raises ConversionError if ffmpeg fails and OutputInspectionError if the
    output exists but cannot be probed.
    """
    logger.info(f"Running ffmpeg: {plan.source.name} -> {plan.output_path}")
    try:
        env.run("ffmpeg", plan.args)
    except ToolError as e:
        raise ConversionError(str(e)) from e

    try:
        output = load_media_info(plan.output_path, env)
    except ProbeError as e:
        raise OutputInspectionError(
            f"conversion succeeded but inspecting output failed: {e}"
        ) from e

    return ConversionResult(source=plan.source, output=output, target=plan.target_format)
