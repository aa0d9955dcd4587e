"""CLI entry point: python -m converter {setup,inspect,convert,open,formats}"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from converter.service import MediaService
from lib.config import load_config
from lib.encoding import get_format_options
from lib.errors import MediaError, ProvisionError
from lib.fmt import fmt_duration, fmt_size
from lib.provision import ensure_ready

MANUAL_INSTALL_URL = "https://ffmpeg.org/download.html"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m converter",
        description="DoReveal Tools -- inspect and convert audio/video files",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("setup", help="Download and verify ffmpeg/ffprobe")

    p_inspect = sub.add_parser("inspect", help="Show media kind, duration and size")
    p_inspect.add_argument("path")
    p_inspect.add_argument("--json", action="store_true", help="Print MediaInfo as JSON")

    p_convert = sub.add_parser("convert", help="Convert a file to another format")
    p_convert.add_argument("path")
    p_convert.add_argument("format", help="Target format (mp4, m4a, mp3)")
    p_convert.add_argument(
        "--speed",
        type=float,
        default=None,
        help="Playback speed for mp4 output (0.5-2.0)",
    )
    p_convert.add_argument("--json", action="store_true", help="Print the result as JSON")

    p_open = sub.add_parser("open", help="Open a file with the default application")
    p_open.add_argument("path")

    p_formats = sub.add_parser("formats", help="List target formats for a media kind")
    p_formats.add_argument("kind", choices=["video", "audio"])

    return parser


def _describe(info) -> str:
    pieces = [info.kind.value, fmt_duration(info.duration), fmt_size(info.size)]
    if info.kind.value == "video":
        pieces.append("audio" if info.has_audio else "no audio")
    return f"{info.name}: " + ", ".join(pieces)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = load_config()

    if args.command == "formats":
        for option in get_format_options(args.kind):
            print(f"{option.value:<5} {option.label:<5} {option.description}")
        return 0

    try:
        env = ensure_ready(config)
    except ProvisionError as e:
        print(f"FFmpeg setup error: {e}. Manual install: {MANUAL_INSTALL_URL}")
        return 1

    if args.command == "setup":
        print(f"FFmpeg ready! ({env.bin_dir})")
        return 0

    service = MediaService(env, config)
    try:
        if args.command == "inspect":
            info = service.inspect_media(args.path)
            print(info.model_dump_json(indent=2) if args.json else _describe(info))
        elif args.command == "convert":
            result = service.convert_media(args.path, args.format, args.speed)
            if args.json:
                print(result.model_dump_json(indent=2))
            else:
                print(f"\nConverted to {result.target}: {result.output.path}")
                print(f"  source: {_describe(result.source)}")
                print(f"  output: {_describe(result.output)}")
        elif args.command == "open":
            service.open_path(args.path)
    except MediaError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
