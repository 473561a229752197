"""Configuration constants, timing calibration, and .env loading.

WHY: Centralizes every tunable number of the reader so it is easy to find,
update, and override. Timing multipliers, clamps, grouping limits and
streaming defaults are plain data, not buried in logic.

HOW: python-dotenv loads the .env file on import. Calibration constants are
module-level values. Default reader preferences can be overridden through
environment variables and are read through small typed helpers that fail
loudly on malformed values.

RULES:
- Core functions never import the DEFAULT_* preference values; callers pass
  TimingSettings explicitly. Only calibration constants are shared.
- Env overrides apply only to default preferences and streaming defaults
- Invalid env values raise ValueError naming the offending variable
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_int(name: str, default: int) -> int:
    """Read an integer from the environment, falling back to ``default``."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            "{} must be an integer, got {!r}".format(name, raw)
        ) from None


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag ("true"/"false", "1"/"0", "yes"/"no")."""
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise ValueError("{} must be a boolean flag, got {!r}".format(name, raw))


# ---------------------------------------------------------------------------
# Timing calibration
# ---------------------------------------------------------------------------

WPM_MODIFIER = 1.0
"""Scale applied to the nominal words-per-minute before computing base duration."""

MIN_WPM_FOR_CALCULATION = 100
"""Floor on the effective WPM so very slow settings don't produce huge slides."""

MINIMUM_DELAY_MS = 20.0
"""Global floor on any scheduled delay or final chunk duration."""

MIN_DURATION_MS = 50.0
MAX_DURATION_MS = 2000.0

COMMA_PAUSE_MULTIPLIER = 0.5
PERIOD_PAUSE_MULTIPLIER = 1.0
PARAGRAPH_PAUSE_MULTIPLIER = 1.0

BOLD_MULTIPLIER = 1.5
GROUPED_CHUNK_MULTIPLIER = 0.9

# ---------------------------------------------------------------------------
# Text processing limits
# ---------------------------------------------------------------------------

MAX_WORD_LENGTH_FOR_GROUPING = 4
MAX_WORD_LENGTH = 17
LONG_WORD_SPLIT_WINDOW = (10, 15)
LONG_WORD_DEFAULT_SPLIT = 12

PARAGRAPH_BREAK = "\n\n"
"""Token text used for a preserved paragraph break."""

# ---------------------------------------------------------------------------
# Default reader preferences (overridable via environment)
# ---------------------------------------------------------------------------

DEFAULT_WORDS_PER_MINUTE = _env_int("RSVP_WORDS_PER_MINUTE", 350)
DEFAULT_CHUNK_SIZE = _env_int("RSVP_CHUNK_SIZE", 3)
DEFAULT_PAUSE_AFTER_COMMA = _env_bool("RSVP_PAUSE_AFTER_COMMA", True)
DEFAULT_PAUSE_AFTER_PERIOD = _env_bool("RSVP_PAUSE_AFTER_PERIOD", True)
DEFAULT_PAUSE_AFTER_PARAGRAPH = _env_bool("RSVP_PAUSE_AFTER_PARAGRAPH", True)

# ---------------------------------------------------------------------------
# Streaming defaults
# ---------------------------------------------------------------------------

SENTENCE_DELIMITERS = ".!?"
MIN_BUFFER_SIZE = 50
STREAM_FRAGMENT_CHARS = _env_int("RSVP_STREAM_FRAGMENT_CHARS", 100)
STREAM_FRAGMENT_DELAY_S = 0.01
