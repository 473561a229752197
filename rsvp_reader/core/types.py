"""Data model shared by the text pipeline, streaming, and playback.

WHY: The preprocessor, chunking engine, streaming orchestrator, scheduler
and formatters all pass the same few shapes around. Defining them once as
dataclasses gives every stage one typed contract.

HOW: Three dataclasses:
  Token          — one preprocessed unit of text plus its bold flag
  WordItem       — one display chunk with its timing and anchor letter
  TimingSettings — the timing preferences a caller supplies per computation

RULES:
- Token is frozen; a paragraph break is a Token whose text is "\\n\\n"
- WordItem.words_in_chunk == 1 exactly when is_grouped is False
- duration / predelay / postdelay are float milliseconds
- optimal_letter_position is 1-based over WordItem.text; 0 means none
- TimingSettings is plain data; the core never caches or mutates it
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Token:
    """A preprocessed word, punctuation run, or paragraph break."""

    text: str
    is_bold: bool = False


@dataclass
class WordItem:
    """A display chunk handed to rendering and playback.

    Attributes:
        text: Display string, possibly several space-joined source words.
        original_text: The source words that formed this chunk, space-joined.
        optimal_letter_position: 1-based anchor letter index in ``text``, 0 if none.
        duration: Milliseconds the chunk stays visible.
        predelay: Milliseconds before display (always 0 for now).
        postdelay: Milliseconds of pause after display.
        word_length: Character length of the first source word.
        frequency: Corpus frequency of the first source word.
        words_in_chunk: Number of source tokens merged into this chunk.
        is_grouped: True iff ``words_in_chunk > 1``.
        is_bold: True iff any merged token was bold.
    """

    text: str
    original_text: str
    optimal_letter_position: int
    duration: float
    predelay: float
    postdelay: float
    word_length: int
    frequency: Optional[float] = None
    words_in_chunk: int = 1
    is_grouped: bool = False
    is_bold: bool = False

    @property
    def total_ms(self) -> float:
        """Full time this chunk occupies on screen including pauses."""
        return self.predelay + self.duration + self.postdelay

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TimingSettings:
    """Timing preferences supplied by the caller on every computation."""

    words_per_minute: float
    pause_after_comma: bool = True
    pause_after_period: bool = True
    pause_after_paragraph: bool = True
    chunk_size: int = 1
