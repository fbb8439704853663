"""
twclean CLI — Command-line interface for cleaning summaries and windows.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

from twclean import __version__
from twclean.ir.schema import FormatOptions
from twclean.ir.serialization import load_payload, to_json, windows_to_json


def _add_logging_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["silent", "info", "verbose", "debug"],
        default=None,
        help="Log verbosity level (default: info, or TWCLEAN_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--log-channel",
        type=str,
        default=None,
        help="Comma-separated log channels to show (pipeline,transform,windows,merge,render,system). Default: all",
    )


def _add_format_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--slot-minutes",
        type=int,
        default=90,
        help="Width of one numeric slot in minutes (default: 90)",
    )
    parser.add_argument(
        "--24h",
        dest="use_24h",
        action="store_true",
        help="Render times on a 24-hour clock",
    )
    parser.add_argument(
        "--date",
        type=str,
        default=None,
        help="ISO date used to build timestamps for windows that only carry display times",
    )
    parser.add_argument(
        "--profile",
        type=str,
        default=None,
        help="Cleaning profile name or YAML path (default: default, or TWCLEAN_PROFILE env var)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twclean",
        description="Time-Window Narrative Cleaner",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"twclean {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Clean command
    clean_parser = subparsers.add_parser("clean", help="Clean a generated summary")
    clean_parser.add_argument(
        "input",
        type=str,
        help="Input text or path to file (use - for stdin)",
    )
    clean_parser.add_argument(
        "-w",
        "--windows",
        type=str,
        default=None,
        help="JSON file with a window payload or a list of window records",
    )
    clean_parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file path (default: stdout)",
    )
    clean_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format: text (default) or json (full result)",
    )
    clean_parser.add_argument(
        "--window-numbers",
        action="store_true",
        help="Replace 'window N' references with time ranges",
    )
    clean_parser.add_argument(
        "--dedupe-sentences",
        choices=["consecutive", "global"],
        default=None,
        help="Drop near-duplicate sentences (consecutive or global comparison)",
    )
    clean_parser.add_argument(
        "--check-idempotence",
        action="store_true",
        help="Re-clean the output and report if it changes",
    )
    _add_format_args(clean_parser)
    _add_logging_args(clean_parser)

    # Windows command
    windows_parser = subparsers.add_parser("windows", help="Build canonical windows from a payload")
    windows_parser.add_argument("payload", type=str, help="JSON payload file (use - for stdin)")
    windows_parser.add_argument("-o", "--output", type=str, default=None, help="Output file path")
    _add_format_args(windows_parser)
    _add_logging_args(windows_parser)

    # Merge command
    merge_parser = subparsers.add_parser("merge", help="Attach AI window content to engine windows")
    merge_parser.add_argument("ai_windows", type=str, help="JSON file with the AI window list")
    merge_parser.add_argument("engine_windows", type=str, help="JSON file with the engine window list")
    merge_parser.add_argument(
        "--expected-count",
        type=int,
        default=16,
        help="Number of AI windows required in strict mode (default: 16)",
    )
    merge_parser.add_argument(
        "--strict",
        action="store_true",
        help="Require exactly --expected-count AI windows",
    )
    merge_parser.add_argument("-o", "--output", type=str, default=None, help="Output file path")
    _add_logging_args(merge_parser)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args)

    if args.command == "clean":
        return run_clean(args)
    if args.command == "windows":
        return run_windows(args)
    if args.command == "merge":
        return run_merge(args)
    return 0


def _configure_logging(args: argparse.Namespace) -> None:
    from twclean.core.logging import configure_logging

    channels = None
    if getattr(args, "log_channel", None):
        channels = [ch.strip() for ch in args.log_channel.split(",")]

    configure_logging(
        level=getattr(args, "log_level", None),
        channels=channels,
        force=True,
    )


def _read_input(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    # Only check as path if it's short enough to be a valid path
    if len(value) < 256 and Path(value).exists():
        return Path(value).read_text()
    return value


def _read_json(value: str) -> Any:
    if value == "-":
        import json

        return json.loads(sys.stdin.read())
    return load_payload(value)


def _options(args: argparse.Namespace) -> FormatOptions:
    return FormatOptions(
        slot_minutes=args.slot_minutes,
        use_ampm=not args.use_24h,
        date=args.date,
    )


def _profile(args: argparse.Namespace):
    from twclean.profile.loader import clear_cache, get_profile

    clear_cache()
    return get_profile(args.profile)


def _write(output: str, path: Optional[str]) -> None:
    if path:
        Path(path).write_text(output)
    else:
        print(output)


def run_clean(args: argparse.Namespace) -> int:
    """Run the clean command."""
    from twclean.summary import SummaryCleaner
    from twclean.validate.idempotence import check_idempotent

    text = _read_input(args.input)
    cleaner = SummaryCleaner(_options(args), profile=_profile(args))

    windows = None
    if args.windows:
        payload = _read_json(args.windows)
        if isinstance(payload, list):
            payload = {"time_windows": payload}
        cleaner.build_windows(payload)

    kwargs = {
        "number_references": args.window_numbers,
        "sentence_dedupe": args.dedupe_sentences is not None,
        "dedupe_mode": args.dedupe_sentences or "consecutive",
    }
    result = cleaner.run(text, windows, **kwargs)

    if args.format == "json":
        output = to_json(result)
    else:
        output = result.text
        if result.diagnostics:
            output += "\n\n--- Diagnostics ---\n"
            for diag in result.diagnostics:
                output += f"[{diag.level.value}] {diag.code}: {diag.message}\n"

    _write(output, args.output)

    if args.check_idempotence and not check_idempotent(
        result.text, cleaner.last_windows, cleaner.options, profile=cleaner.profile, **kwargs
    ):
        print("Output is not idempotent", file=sys.stderr)
        return 1
    return 0


def run_windows(args: argparse.Namespace) -> int:
    """Run the windows command."""
    from twclean.windows.builder import build_time_windows

    payload = _read_json(args.payload)
    if isinstance(payload, list):
        payload = {"time_windows": payload}
    windows = build_time_windows(payload, _options(args), _profile(args))
    _write(windows_to_json(windows), args.output)
    return 0


def run_merge(args: argparse.Namespace) -> int:
    """Run the merge command. Invalid AI content falls back to engine-only windows."""
    from twclean.windows.mapper import map_ai_windows_to_engine_windows, validate_ai_windows

    ai_windows = _read_json(args.ai_windows)
    engine_windows = _read_json(args.engine_windows)

    valid = validate_ai_windows(ai_windows, args.expected_count, args.strict)
    if not valid:
        print("AI windows failed validation; using engine windows only", file=sys.stderr)
        ai_windows = []

    merged = map_ai_windows_to_engine_windows(ai_windows, engine_windows)
    _write(windows_to_json(merged), args.output)
    return 0 if valid else 1


if __name__ == "__main__":
    sys.exit(main())
