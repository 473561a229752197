"""Greedy grouping of tokens into timed display chunks.

WHY: Flashing "a", "of", "to" one at a time wastes the reader's time. Short
adjacent words can share a slide, but a long or complex word must never drag
its fast neighbours onto a shared, too-quick slide.

HOW: Walk tokens left to right. A group may only start on a short token
(≤ max_grouping_length, no sentence punctuation, no newline); it then absorbs
following tokens while they pass the same test and the group is below
chunk_size. Each group is timed as one pseudo-word over its joined text,
then the grouping and bold multipliers are applied.

RULES:
- chunk_size <= 1 → one chunk per token
- Eligibility is decided by the FIRST token of a group, not the average
- Grouped chunks run at 0.9x duration; bold chunks at 1.5x; both compose
- Final duration is floored at minimum_delay_ms after multipliers
- Chunk order always equals token order; nothing is dropped or reordered
"""

from __future__ import annotations

import dataclasses
import re
from typing import List, Sequence

from rsvp_reader.config import (
    BOLD_MULTIPLIER,
    GROUPED_CHUNK_MULTIPLIER,
    MAX_WORD_LENGTH_FOR_GROUPING,
    MINIMUM_DELAY_MS,
)
from rsvp_reader.core.durations import calculate_punctuation_timing, calculate_word_timing
from rsvp_reader.core.types import TimingSettings, Token, WordItem
from rsvp_reader.core.word_analysis import assign_optimal_letter_position, get_word_frequency

_SENTENCE_PUNCT_RE = re.compile(r"[.!?]")


def _is_groupable(token: Token, max_grouping_length: int) -> bool:
    return (
        len(token.text) <= max_grouping_length
        and not _SENTENCE_PUNCT_RE.search(token.text)
        and "\n" not in token.text
    )


def _apply_multipliers(
    duration: float,
    words_in_chunk: int,
    is_bold: bool,
    minimum_delay_ms: float,
) -> float:
    if words_in_chunk > 1:
        duration *= GROUPED_CHUNK_MULTIPLIER
    if is_bold:
        duration *= BOLD_MULTIPLIER
    return max(duration, minimum_delay_ms)


def _timing_probe(text: str) -> WordItem:
    """A bare WordItem used only to feed the duration calculator."""
    return WordItem(
        text=text,
        original_text=text,
        optimal_letter_position=0,
        duration=0.0,
        predelay=0.0,
        postdelay=0.0,
        word_length=len(text),
    )


def _build_chunk(
    group: Sequence[Token],
    settings: TimingSettings,
    minimum_delay_ms: float,
) -> WordItem:
    text = " ".join(token.text for token in group)
    first = group[0].text
    is_bold = any(token.is_bold for token in group)

    probe = _timing_probe(text)
    duration = calculate_word_timing(probe, settings)
    pauses = calculate_punctuation_timing(probe, settings)

    return WordItem(
        text=text,
        original_text=text,
        optimal_letter_position=assign_optimal_letter_position(text),
        duration=_apply_multipliers(duration, len(group), is_bold, minimum_delay_ms),
        predelay=pauses.predelay,
        postdelay=pauses.postdelay,
        word_length=len(first),
        frequency=get_word_frequency(first),
        words_in_chunk=len(group),
        is_grouped=len(group) > 1,
        is_bold=is_bold,
    )


def create_chunks(
    tokens: Sequence[Token],
    settings: TimingSettings,
    *,
    max_grouping_length: int = MAX_WORD_LENGTH_FOR_GROUPING,
    minimum_delay_ms: float = MINIMUM_DELAY_MS,
) -> List[WordItem]:
    """Group tokens into timed display chunks.

    Args:
        tokens: Output of preprocess_text() (or any Token sequence).
        settings: Timing preferences for this computation.
        max_grouping_length: Longest token text that may be grouped.
        minimum_delay_ms: Floor applied to every final duration.

    Returns:
        One WordItem per display slide, in token order.
    """
    if settings.chunk_size <= 1:
        return [_build_chunk([token], settings, minimum_delay_ms) for token in tokens]

    chunks: List[WordItem] = []
    i = 0
    n = len(tokens)

    while i < n:
        group = [tokens[i]]
        j = i + 1
        if _is_groupable(tokens[i], max_grouping_length):
            while (
                j < n
                and len(group) < settings.chunk_size
                and _is_groupable(tokens[j], max_grouping_length)
            ):
                group.append(tokens[j])
                j += 1

        chunks.append(_build_chunk(group, settings, minimum_delay_ms))
        i = j

    return chunks


def retime_chunk(
    chunk: WordItem,
    settings: TimingSettings,
    *,
    minimum_delay_ms: float = MINIMUM_DELAY_MS,
) -> WordItem:
    """Recompute duration and pauses of an existing chunk under new settings.

    Grouping is kept as is; the grouping and bold multipliers are reapplied.
    """
    probe = _timing_probe(chunk.text)
    duration = calculate_word_timing(probe, settings)
    pauses = calculate_punctuation_timing(probe, settings)
    return dataclasses.replace(
        chunk,
        duration=_apply_multipliers(duration, chunk.words_in_chunk, chunk.is_bold, minimum_delay_ms),
        predelay=pauses.predelay,
        postdelay=pauses.postdelay,
    )


def retime_chunks(
    chunks: Sequence[WordItem],
    settings: TimingSettings,
    *,
    minimum_delay_ms: float = MINIMUM_DELAY_MS,
) -> List[WordItem]:
    return [retime_chunk(c, settings, minimum_delay_ms=minimum_delay_ms) for c in chunks]
