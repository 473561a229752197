"""Convenience entry points that chain preprocessing and chunking.

Callers that just want "text in, timed chunks out" use build_word_items().
The token/word conversions exist for hosts that keep plain word lists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from rsvp_reader.core.chunking import create_chunks
from rsvp_reader.core.preprocessor import preprocess_text
from rsvp_reader.core.types import TimingSettings, Token, WordItem
from rsvp_reader.core.word_analysis import calculate_shannon_entropy, get_word_frequency


@dataclass(frozen=True)
class WordComplexity:
    frequency: int
    entropy: float


def build_word_items(text: str, settings: TimingSettings) -> List[WordItem]:
    """Preprocess ``text`` and chunk it under ``settings``."""
    return create_chunks(preprocess_text(text), settings)


def analyze_word_complexity(word: str) -> WordComplexity:
    return WordComplexity(
        frequency=get_word_frequency(word),
        entropy=calculate_shannon_entropy(word),
    )


def tokens_to_text(tokens: Iterable[Token]) -> str:
    """Join token texts back into a single string (bold markers are not restored)."""
    return " ".join(token.text for token in tokens)


def tokens_to_words(tokens: Iterable[Token]) -> List[str]:
    return [token.text for token in tokens]


def words_to_tokens(words: Sequence[str]) -> List[Token]:
    return [Token(word, False) for word in words]
