"""Core text-to-timed-chunk pipeline.

WHY: The core package is the stable heart of the reader: it tokenizes,
times and groups text. Streaming, playback and formatters all consume
its WordItem output and must not depend on anything else.

HOW: types.py defines the data model, word_analysis.py the pure metrics,
preprocessor.py the tokenizer, durations.py the timing model, chunking.py
the grouping, and pipeline.py the text → chunks shortcut.

RULES:
- Everything here is synchronous, pure, and free of I/O
- Settings are passed explicitly on every call; nothing reads ambient config
"""

from rsvp_reader.core.chunking import create_chunks, retime_chunk, retime_chunks
from rsvp_reader.core.durations import calculate_punctuation_timing, calculate_word_timing
from rsvp_reader.core.pipeline import build_word_items
from rsvp_reader.core.preprocessor import preprocess_text
from rsvp_reader.core.types import TimingSettings, Token, WordItem

__all__ = [
    "Token",
    "WordItem",
    "TimingSettings",
    "preprocess_text",
    "calculate_word_timing",
    "calculate_punctuation_timing",
    "create_chunks",
    "retime_chunk",
    "retime_chunks",
    "build_word_items",
]
