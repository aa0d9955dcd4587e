"""Conversion planner -- validate a request and build the ffmpeg invocation.

Inputs:
    - source path, target format token, optional speed multiplier
Outputs:
    - ConversionPlan (source MediaInfo, collision-free output path, ffmpeg args)
Dependencies:
    - ffprobe (source inspection)
Config:
    - conversion.* (codecs, quality, speed bounds)
"""

import logging
from typing import Optional

from lib.encoding import get_output_args, normalize_format
from lib.ffprobe import load_media_info
from lib.models import ConversionPlan
from lib.paths import build_output_path
from lib.tools import ToolEnv

logger = logging.getLogger("doreveal.planner")


def plan_conversion(
    source_path: str,
    target_format: str,
    speed: Optional[float],
    env: ToolEnv,
    config: dict,
) -> ConversionPlan:
    """Probe the source and return the full ffmpeg plan.

    Probe errors propagate unchanged; invalid formats, kind/format mismatches
    and out-of-range speeds raise InvalidRequestError. ffmpeg is not run.
    """
    source = load_media_info(source_path, env)

    fmt = normalize_format(target_format)
    output_path = build_output_path(source.path, fmt)

    args = ["-y", "-i", source.path]
    args += get_output_args(source, fmt, speed, config)
    args.append(output_path)

    logger.debug("Planned %s -> %s: %s", source.path, output_path, " ".join(args))
    return ConversionPlan(
        source=source,
        output_path=output_path,
        target_format=fmt,
        args=args,
    )
