"""Readable cue sheet of the chunk sequence.

One line per chunk: the slot start as M:SS.mmm, the time the chunk stays on
screen, and the chunk text with its anchor letter wrapped in brackets.
Grouped chunks are marked with "+" and bold chunks with "*". Handy for
proofreading how a text will be paced without running playback.
"""

from __future__ import annotations

from typing import List, Sequence

from rsvp_reader.core.types import WordItem
from rsvp_reader.formatters.base import BaseFormatter, FormatterOutput, iter_timeline


def format_clock(ms: float) -> str:
    """Format milliseconds as ``M:SS.mmm``."""
    total = int(round(ms))
    minutes, remainder = divmod(total, 60000)
    seconds, millis = divmod(remainder, 1000)
    return "{}:{:02d}.{:03d}".format(minutes, seconds, millis)


def mark_anchor(text: str, position: int) -> str:
    """Wrap the 1-based anchor letter in brackets; 0 leaves the text unchanged."""
    if position < 1 or position > len(text):
        return text
    i = position - 1
    return "{}[{}]{}".format(text[:i], text[i], text[i + 1:])


class PlainTextFormatter(BaseFormatter):
    """Cue sheet with one line per chunk, written as ``-cues.txt``."""

    @property
    def name(self) -> str:
        return "Plain text cue sheet"

    def format(self, word_items: Sequence[WordItem]) -> List[FormatterOutput]:
        lines = []
        for item, start in iter_timeline(word_items):
            flags = ("+" if item.is_grouped else " ") + ("*" if item.is_bold else " ")
            lines.append("{}  {:>7.1f}ms {} {}".format(
                format_clock(start),
                item.duration + item.postdelay,
                flags,
                mark_anchor(item.text, item.optimal_letter_position),
            ))

        content = "\n".join(lines)
        if content:
            content += "\n"

        return [
            FormatterOutput(
                suffix="-cues.txt",
                content=content,
                media_type="text/plain",
            )
        ]
