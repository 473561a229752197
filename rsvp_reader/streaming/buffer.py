"""Sentence-boundary buffer for streamed text fragments.

WHY: A translator or summarizer streams text in arbitrary fragments
("Hello wor", "ld. Next"). Preprocessing fragments individually would split
words and lose sentence context, but waiting for the whole response would
delay the reader. The buffer releases text one completed sentence run at a
time.

HOW: Each fragment is appended to the buffer, then the WHOLE buffer is
scanned for the last sentence delimiter. Everything up to and including it
is emitted (trimmed); the rest (trimmed) stays buffered. flush() releases
whatever is left at end of stream.

RULES:
- Emits only when the last delimiter sits at position > 0
- Never emits the same text twice; emitted text is removed from the buffer
- min_buffer_size is kept for configuration compatibility but never forces
  a flush: long undelimited input waits for a delimiter or flush()
- With require_space_after_period, "." only counts when followed by
  whitespace, so decimals like "3.14" survive fragment boundaries
"""

from __future__ import annotations

from typing import Optional

from rsvp_reader.config import MIN_BUFFER_SIZE, SENTENCE_DELIMITERS


class StreamingTextBuffer:
    """Accumulates fragments and releases delimiter-terminated units."""

    def __init__(
        self,
        min_buffer_size: int = MIN_BUFFER_SIZE,
        sentence_delimiters: str = SENTENCE_DELIMITERS,
        require_space_after_period: bool = False,
    ) -> None:
        self._buffer = ""
        self._token_count = 0
        self.min_buffer_size = min_buffer_size
        self.sentence_delimiters = sentence_delimiters
        self.require_space_after_period = require_space_after_period

    @property
    def current_buffer(self) -> str:
        return self._buffer

    @property
    def token_count(self) -> int:
        return self._token_count

    def add_token(self, fragment: str) -> Optional[str]:
        """Append ``fragment``; return completed text if a delimiter is now present."""
        self._buffer += fragment
        self._token_count += 1

        position = self._last_delimiter_position()
        if position > 0:
            unit = self._buffer[:position + 1].strip()
            self._buffer = self._buffer[position + 1:].strip()
            return unit or None

        return None

    def flush(self) -> Optional[str]:
        """Return and clear the remaining text, or None if only whitespace is left."""
        content = self._buffer.strip()
        self._buffer = ""
        return content or None

    def clear(self) -> None:
        self._buffer = ""
        self._token_count = 0

    def _last_delimiter_position(self) -> int:
        buffer = self._buffer
        for position in range(len(buffer) - 1, -1, -1):
            ch = buffer[position]
            if ch not in self.sentence_delimiters:
                continue
            if ch == "." and self.require_space_after_period:
                if position + 1 >= len(buffer) or not buffer[position + 1].isspace():
                    continue
            return position
        return -1
