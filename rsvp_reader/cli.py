"""Command-line interface for the RSVP reader.

WHY: Pacing a text is easiest to judge by trying it. The CLI wires the
whole pipeline (preferences, preprocessing, chunking, optional streaming,
optional live playback, exporters) behind one command so a text file can
be checked from the terminal.

HOW: argparse reads an input file (or "-" for stdin) and preference flags.
Preferences are layered: environment (RSVP_*), then an optional JSON
preferences file, then explicit flags. Chunks are built directly, or
through a simulated streaming session with --stream. --play shows the
chunks in real time on stdout using the playback scheduler. Selected
formatters write files next to the input (or to --output-dir).

RULES:
- Positional argument: input text file path, or "-" for stdin
- --formats: comma-separated formatter keys (default: all, or none with --play)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-timeline-2.json)
- Status output goes to stderr (not stdout)
- Exit codes: 0 success, 1 error, 130 interrupted
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rsvp_reader.config import STREAM_FRAGMENT_CHARS
from rsvp_reader.core.pipeline import build_word_items
from rsvp_reader.core.types import TimingSettings, WordItem
from rsvp_reader.formatters import FORMATTERS
from rsvp_reader.formatters.base import FormatterOutput
from rsvp_reader.playback.scheduler import PlaybackScheduler, PlaybackState, PlaybackStatus
from rsvp_reader.preferences import PreferencesError, ReaderPreferences
from rsvp_reader.streaming.feeder import simulate_streaming
from rsvp_reader.streaming.orchestrator import StreamingTextOrchestrator

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Return a path for ``{stem}{suffix}`` that does not exist yet.

    On conflict a counter starting at 2 is inserted before the extension,
    e.g. ``article-timeline-2.json``.
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _resolve_preferences(args: argparse.Namespace) -> ReaderPreferences:
    """Layer env defaults, the optional preferences file, and explicit flags.

    Raises:
        PreferencesError: If any layer fails validation.
        OSError: If the preferences file cannot be read.
    """
    prefs = ReaderPreferences.from_env()

    if args.preferences:
        with open(args.preferences, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise PreferencesError(
                    "Preferences file {} is not valid JSON: {}".format(args.preferences, exc)
                ) from exc
        if not isinstance(data, dict):
            raise PreferencesError("Preferences file must contain a JSON object")
        prefs = prefs.merged(data)

    overrides: Dict[str, Any] = {}
    if args.wpm is not None:
        overrides["words_per_minute"] = args.wpm
    if args.chunk_size is not None:
        overrides["chunk_size"] = args.chunk_size
    for name in ("pause_after_comma", "pause_after_period", "pause_after_paragraph"):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    if overrides:
        prefs = prefs.merged(overrides)

    return prefs


def _parse_formats(raw: Optional[str], playing: bool) -> List[str]:
    """Raises ValueError for unknown format keys."""
    if raw is None:
        return [] if playing else list(FORMATTERS.keys())
    keys = [key.strip() for key in raw.split(",") if key.strip()]
    for key in keys:
        if key not in FORMATTERS:
            raise ValueError("Unknown format '{}'. Available formats: {}".format(
                key, ", ".join(sorted(FORMATTERS.keys()))
            ))
    return keys


def _read_input(input_file: str) -> str:
    if input_file == "-":
        return sys.stdin.read()
    return Path(input_file).read_text(encoding="utf-8")


async def _build_chunks(text: str, settings: TimingSettings, args: argparse.Namespace) -> List[WordItem]:
    if not args.stream:
        return build_word_items(text, settings)

    session = StreamingTextOrchestrator(settings)
    await simulate_streaming(session, text, fragment_chars=args.fragment_chars)
    for error, unit in session.consumer.errors:
        _status("  Warning: failed to process {!r}: {}".format(unit[:40], error))
    return session.word_items


async def _play(word_items: List[WordItem], settings: TimingSettings) -> None:
    """Show chunks one at a time on stdout until playback reaches the end."""
    state = PlaybackState(word_items=word_items, status=PlaybackStatus.PAUSED)
    finished = asyncio.Event()

    def _render(current: PlaybackState) -> None:
        item = current.current_item
        if current.status == PlaybackStatus.PAUSED:
            finished.set()
        elif item is not None:
            print(item.text, flush=True)

    scheduler = PlaybackScheduler(state, settings, on_tick=_render)
    if state.current_item is not None:
        print(state.current_item.text, flush=True)
    scheduler.play()
    try:
        await finished.wait()
    finally:
        scheduler.pause()


async def _run(args: argparse.Namespace) -> int:
    try:
        prefs = _resolve_preferences(args)
        format_keys = _parse_formats(args.formats, args.play)
        text = _read_input(args.input_file)
    except (PreferencesError, ValueError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    if args.input_file == "-":
        stem = "stdin"
        default_dir = Path.cwd()
    else:
        input_path = Path(args.input_file).resolve()
        stem = input_path.stem
        default_dir = input_path.parent

    output_dir = Path(args.output_dir).resolve() if args.output_dir else default_dir
    if format_keys and not output_dir.is_dir():
        print("Error: Output directory does not exist: {}".format(output_dir), file=sys.stderr)
        return 1

    settings = prefs.to_timing_settings()
    _status("Chunking {} chars at {} wpm, chunk size {}{}...".format(
        len(text), settings.words_per_minute, settings.chunk_size,
        " (streamed)" if args.stream else "",
    ))
    word_items = await _build_chunks(text, settings, args)
    total_ms = sum(item.total_ms for item in word_items)
    _status("  {} chunks, {:.1f}s reading time".format(len(word_items), total_ms / 1000.0))

    if args.play:
        await _play(word_items, settings)

    saved_files: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(word_items):
            saved_path = _save_output(output, stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    if saved_files:
        _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI (separate from main() for tests)."""
    parser = argparse.ArgumentParser(
        prog="rsvp_reader",
        description="Split a text into timed RSVP chunks, optionally play them "
                    "back, and export them (JSON timeline, plain text cues).",
    )

    parser.add_argument(
        "input_file",
        help="Path to a UTF-8 text file, or '-' to read stdin.",
    )

    parser.add_argument(
        "--wpm",
        type=int,
        default=None,
        help="Reading speed in words per minute (default: RSVP_WORDS_PER_MINUTE or 350).",
    )

    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Maximum number of short words per chunk (default: RSVP_CHUNK_SIZE or 3).",
    )

    for flag in ("comma", "period", "paragraph"):
        parser.add_argument(
            "--pause-after-{}".format(flag),
            dest="pause_after_{}".format(flag),
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Add a pause after a {}.".format(flag),
        )

    parser.add_argument(
        "--preferences",
        default=None,
        help="JSON file with reader preferences (camelCase or snake_case keys).",
    )

    parser.add_argument(
        "--stream",
        action="store_true",
        help="Build chunks through a simulated streaming session.",
    )

    parser.add_argument(
        "--fragment-chars",
        type=int,
        default=STREAM_FRAGMENT_CHARS,
        help="Fragment size for --stream (default: %(default)s).",
    )

    parser.add_argument(
        "--play",
        action="store_true",
        help="Show the chunks in real time on stdout.",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all (none with --play).".format(
                 ", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: next to the input file).",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m rsvp_reader``; argv=None means sys.argv."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.fragment_chars <= 0:
        parser.error("--fragment-chars must be positive")

    try:
        exit_code = asyncio.run(_run(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
