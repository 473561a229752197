"""Per-chunk display duration and punctuation pauses.

WHY: A fixed 60000/WPM slide time makes common short words drag and rare
long words flash by. Duration is instead scaled by how common the word is
and how varied its letters are, then clamped so nothing becomes unreadable
or stalls playback.

HOW: base = 60000 / max(MIN_WPM, wpm * WPM_MODIFIER), floored at the
minimum delay. A step-function multiplier on corpus frequency plus an
entropy term (capped at 0.3) scales the base, and the result is clamped to
[50, 2000] ms. Pauses after commas, sentence ends and paragraph breaks are
fractions of the same base and accumulate independently.

RULES:
- Frequency: ≥1M → 0.7, ≥100k → 0.85, ≥10k → 1.0, ≥1k → 1.2, else 1.5
- Entropy adjustment: min(entropy / 4, 0.3), added to the multiplier
- calculate_word_timing() always returns a value in [50, 2000]
- predelay is always 0 but stays part of the returned contract
- Pause contributions are additive, not mutually exclusive
"""

from __future__ import annotations

from dataclasses import dataclass

from rsvp_reader.config import (
    COMMA_PAUSE_MULTIPLIER,
    MAX_DURATION_MS,
    MIN_DURATION_MS,
    MIN_WPM_FOR_CALCULATION,
    MINIMUM_DELAY_MS,
    PARAGRAPH_PAUSE_MULTIPLIER,
    PERIOD_PAUSE_MULTIPLIER,
    WPM_MODIFIER,
)
from rsvp_reader.core.types import TimingSettings, WordItem
from rsvp_reader.core.word_analysis import (
    calculate_shannon_entropy,
    detect_punctuation,
    get_word_frequency,
)

_ENTROPY_DIVISOR = 4.0
_MAX_ENTROPY_ADJUSTMENT = 0.3


@dataclass(frozen=True)
class PunctuationTiming:
    predelay: float
    postdelay: float


def base_duration_ms(settings: TimingSettings) -> float:
    """Nominal time per word at the configured speed, before any adjustment."""
    modified_wpm = settings.words_per_minute * WPM_MODIFIER
    return max(60_000 / max(MIN_WPM_FOR_CALCULATION, modified_wpm), MINIMUM_DELAY_MS)


def frequency_multiplier(frequency: float) -> float:
    if frequency >= 1_000_000:
        return 0.7
    if frequency >= 100_000:
        return 0.85
    if frequency >= 10_000:
        return 1.0
    if frequency >= 1_000:
        return 1.2
    return 1.5


def calculate_word_timing(item: WordItem, settings: TimingSettings) -> float:
    """Display duration in ms for ``item`` under ``settings``.

    Uses ``item.frequency`` when set, otherwise looks up ``item.text``.
    """
    frequency = item.frequency or get_word_frequency(item.text)
    entropy = calculate_shannon_entropy(item.text)

    multiplier = frequency_multiplier(frequency)
    multiplier += min(entropy / _ENTROPY_DIVISOR, _MAX_ENTROPY_ADJUSTMENT)

    duration = base_duration_ms(settings) * multiplier
    return max(MIN_DURATION_MS, min(MAX_DURATION_MS, duration))


def calculate_punctuation_timing(item: WordItem, settings: TimingSettings) -> PunctuationTiming:
    punctuation = detect_punctuation(item.text)
    base = base_duration_ms(settings)

    postdelay = 0.0
    if settings.pause_after_comma and punctuation.has_comma:
        postdelay += base * COMMA_PAUSE_MULTIPLIER
    if settings.pause_after_period and punctuation.has_period:
        postdelay += base * PERIOD_PAUSE_MULTIPLIER
    if settings.pause_after_paragraph and punctuation.is_paragraph:
        postdelay += base * PARAGRAPH_PAUSE_MULTIPLIER

    return PunctuationTiming(predelay=0.0, postdelay=postdelay)
