"""RSVP reader: turns text into timed one-glance chunks and plays them back.

WHY: Rapid serial visual presentation shows a text a word (or a few short
words) at a time in a fixed spot. Reading speed then depends entirely on
how long each chunk stays up, which must follow word length, rarity,
punctuation and emphasis rather than a flat rate.

HOW: Four stages, each independently testable. core/ tokenizes, times and
groups text; streaming/ feeds text that arrives in fragments through the
same pipeline; playback/ advances through the chunks on an event loop;
formatters/ exports the chunks.

RULES:
- WordItem is the stable contract between chunking, playback and export
- Core functions take TimingSettings explicitly and never read config
"""

from rsvp_reader.core import (
    TimingSettings,
    Token,
    WordItem,
    build_word_items,
    calculate_punctuation_timing,
    calculate_word_timing,
    create_chunks,
    preprocess_text,
)
from rsvp_reader.playback import PlaybackScheduler, PlaybackState, PlaybackStatus
from rsvp_reader.streaming import StreamingTextOrchestrator, start_streaming_session

__version__ = "0.1.0"

__all__ = [
    "Token",
    "WordItem",
    "TimingSettings",
    "preprocess_text",
    "calculate_word_timing",
    "calculate_punctuation_timing",
    "create_chunks",
    "build_word_items",
    "StreamingTextOrchestrator",
    "start_streaming_session",
    "PlaybackScheduler",
    "PlaybackState",
    "PlaybackStatus",
]
