"""Raw text → ordered Token list for RSVP display.

WHY: Raw selections contain markdown bold markers, hard-wrapped lines,
spaced-out acronyms and numbers, and occasionally very long compound words.
Showing them naively makes the reader stumble on "N", "A", "S", "A" or on a
30-letter word flashing by. This module turns text into display-ready
tokens while keeping paragraph structure.

HOW: Seven passes, in order:
  1. Paragraph preservation: runs of 2+ line breaks become a sentinel,
     remaining whitespace collapses to single spaces
  2. Split on spaces and detect **bold** spans that may cover several words
  3. Reattach surrounding punctuation, emit punctuation-only tokens
  4. Restore sentinels as "\\n\\n" paragraph tokens
  5. Acronym consolidation ("NAS" + "A" → "NASA")
  6. Number consolidation ("3" + "." + "14" → "3.14")
  7. Long-word splitting (>17 chars, split near a vowel)

RULES:
- preprocess_text() is pure, deterministic and never raises
- Empty or whitespace-only input yields an empty list
- An unmatched opening ** leaves a bold span that simply ends with the input
- Merged tokens are bold if any of their parts was bold
- Pieces of a split long word inherit the parent's bold flag
"""

from __future__ import annotations

import re
from typing import List, Tuple

from rsvp_reader.config import (
    LONG_WORD_DEFAULT_SPLIT,
    LONG_WORD_SPLIT_WINDOW,
    MAX_WORD_LENGTH,
    PARAGRAPH_BREAK,
)
from rsvp_reader.core.types import Token

_PARAGRAPH_SENTINEL = "¶¶"
_BOLD_MARKER = "**"

_PARAGRAPH_RUN_RE = re.compile(r"(?:\r?\n){2,}")
_WHITESPACE_RE = re.compile(r"\s+")
_ACRONYM_HEAD_RE = re.compile(r"^[A-Z]{2,4}$")
_ACRONYM_TAIL_RE = re.compile(r"^[A-Z]{1,2}$")
_DIGITS_RE = re.compile(r"^[0-9]+$")
_VOWELS = frozenset("aeiou")

# Lookahead window for acronym tails: the head plus at most two tails.
_ACRONYM_WINDOW = 3


def _is_core_char(ch: str) -> bool:
    return ch.isalnum() or ch == "*"


def _split_affixes(word: str) -> Tuple[str, str, str]:
    """Split ``word`` into (leading punctuation, core, trailing punctuation)."""
    start = 0
    while start < len(word) and not _is_core_char(word[start]):
        start += 1
    end = len(word)
    while end > start and not _is_core_char(word[end - 1]):
        end -= 1
    return word[:start], word[start:end], word[end:]


def _normalize_whitespace(text: str) -> str:
    preserved = _PARAGRAPH_RUN_RE.sub(" {} ".format(_PARAGRAPH_SENTINEL), text)
    return _WHITESPACE_RE.sub(" ", preserved).strip()


def _tokenize_with_bold(normalized: str) -> List[Token]:
    """Passes 2 and 3: split into words, track bold spans, reattach punctuation."""
    tokens: List[Token] = []
    in_bold = False

    for raw in normalized.split(" "):
        if raw == _PARAGRAPH_SENTINEL:
            tokens.append(Token(raw, False))
            continue

        # A bare "**" toggles the running span and never displays
        if raw == _BOLD_MARKER:
            in_bold = not in_bold
            continue

        leading, core, trailing = _split_affixes(raw)

        # Same toggle with punctuation attached ("**," or "(**")
        if core == _BOLD_MARKER:
            in_bold = not in_bold
            if leading or trailing:
                tokens.append(Token(leading + trailing, False))
            continue

        opens = core.startswith(_BOLD_MARKER)
        if opens:
            core = core[len(_BOLD_MARKER):]
        closes = core.endswith(_BOLD_MARKER)
        if closes:
            core = core[:-len(_BOLD_MARKER)]

        if opens and closes:
            is_bold = True
        elif opens:
            in_bold = True
            is_bold = True
        elif closes:
            is_bold = in_bold
            in_bold = False
        else:
            is_bold = in_bold

        if core:
            tokens.append(Token(leading + core + trailing, is_bold))
        elif leading or trailing:
            tokens.append(Token(leading + trailing, False))

    return tokens


def _restore_paragraphs(tokens: List[Token]) -> List[Token]:
    restored = []
    for token in tokens:
        if token.text == _PARAGRAPH_SENTINEL:
            restored.append(Token(PARAGRAPH_BREAK, False))
        elif token.text:
            restored.append(token)
    return restored


def consolidate_acronyms(tokens: List[Token]) -> List[Token]:
    """Merge spaced-out acronyms such as "NAS A" into "NASA".

    A 2–4 letter uppercase token absorbs up to two following uppercase
    tokens of 1–2 letters. The merged token is bold if any part was.
    """
    result: List[Token] = []
    i = 0
    n = len(tokens)

    while i < n:
        token = tokens[i]
        if _ACRONYM_HEAD_RE.match(token.text) and i + 1 < n:
            text = token.text
            is_bold = token.is_bold
            j = i + 1
            while j < n and j < i + _ACRONYM_WINDOW and _ACRONYM_TAIL_RE.match(tokens[j].text):
                text += tokens[j].text
                is_bold = is_bold or tokens[j].is_bold
                j += 1
            if j > i + 1:
                result.append(Token(text, is_bold))
                i = j
                continue

        result.append(token)
        i += 1

    return result


def preserve_numbers_decimals(tokens: List[Token]) -> List[Token]:
    """Rejoin numbers split around separators: "1" "," "000" → "1,000".

    At most one "." is absorbed per number so that a sentence-ending period
    followed by another number is not swallowed.
    """
    result: List[Token] = []
    i = 0
    n = len(tokens)

    while i < n:
        token = tokens[i]
        if not _DIGITS_RE.match(token.text):
            result.append(token)
            i += 1
            continue

        text = token.text
        is_bold = token.is_bold
        used_decimal = False
        j = i + 1
        while (
            j + 1 < n
            and tokens[j].text in (",", ".")
            and _DIGITS_RE.match(tokens[j + 1].text)
        ):
            separator = tokens[j].text
            if separator == ".":
                if used_decimal:
                    break
                used_decimal = True
            text += separator + tokens[j + 1].text
            is_bold = is_bold or tokens[j].is_bold or tokens[j + 1].is_bold
            j += 2

        result.append(Token(text, is_bold))
        i = j

    return result


def split_long_words(text: str) -> List[str]:
    """Split a word longer than 17 characters into readable pieces.

    The cut goes right after the first vowel found at indices 10–15 of the
    remaining text, or after the 12th character when there is none.
    """
    if len(text) <= MAX_WORD_LENGTH:
        return [text]

    window_start, window_end = LONG_WORD_SPLIT_WINDOW
    parts: List[str] = []
    remaining = text

    while len(remaining) > MAX_WORD_LENGTH:
        break_point = LONG_WORD_DEFAULT_SPLIT
        for i in range(window_start, min(window_end + 1, len(remaining))):
            if remaining[i].lower() in _VOWELS:
                break_point = i + 1
                break
        parts.append(remaining[:break_point])
        remaining = remaining[break_point:]

    if remaining:
        parts.append(remaining)

    return parts


def preprocess_text(text: str) -> List[Token]:
    """Turn raw text into display tokens. See module docstring for the passes.

    Args:
        text: Raw selected or streamed text. May contain **bold** markers.

    Returns:
        Ordered list of Token objects. Paragraph breaks are "\\n\\n" tokens.
    """
    normalized = _normalize_whitespace(text)
    if not normalized:
        return []

    tokens = _tokenize_with_bold(normalized)
    tokens = _restore_paragraphs(tokens)
    tokens = consolidate_acronyms(tokens)
    tokens = preserve_numbers_decimals(tokens)

    final: List[Token] = []
    for token in tokens:
        for piece in split_long_words(token.text):
            final.append(Token(piece, token.is_bold))
    return final
