"""Turns completed text units into chunks and reports them to a consumer.

WHY: The orchestrator decides WHEN text is ready; this module decides WHAT
happens to it: preprocess, chunk, count, and hand the result to whoever is
rendering. Keeping it separate lets tests drive the pipeline without the
queueing machinery.

HOW: StreamingConsumer is the default sink. It keeps the running chunk
list, the emitted tokens, the progress counter and the completion flag.
Subclass it (or pass any object with the same methods) to hook a renderer.
StreamingTextProcessor runs one unit through preprocess_text() and
create_chunks() and notifies the consumer.

RULES:
- Chunks are only ever appended to the consumer, never replaced
- processed_chunk_count grows by the number of chunks each unit produced
- complete() notifies the consumer exactly once per session
- A unit that fails to process is logged and reported via on_error; the
  session carries on with the next unit
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from rsvp_reader.config import MAX_WORD_LENGTH_FOR_GROUPING, MINIMUM_DELAY_MS
from rsvp_reader.core.chunking import create_chunks
from rsvp_reader.core.preprocessor import preprocess_text
from rsvp_reader.core.types import TimingSettings, Token, WordItem

logger = logging.getLogger(__name__)


class StreamingConsumer:
    """Default receiver of streamed chunks, holding the running chunk list."""

    def __init__(self) -> None:
        self.word_items: List[WordItem] = []
        self.tokens: List[Token] = []
        self.processed_chunk_count = 0
        self.is_complete = False
        self.errors: List[Tuple[Exception, str]] = []

    def on_session_start(self) -> None:
        self.word_items = []
        self.tokens = []
        self.processed_chunk_count = 0
        self.is_complete = False
        self.errors = []

    def on_tokens_ready(self, tokens: List[Token]) -> None:
        self.tokens.extend(tokens)

    def on_chunks_ready(self, chunks: List[WordItem]) -> None:
        self.word_items.extend(chunks)

    def on_progress(self, processed_chunks: int) -> None:
        self.processed_chunk_count = processed_chunks

    def on_complete(self) -> None:
        self.is_complete = True

    def on_error(self, error: Exception, text: str) -> None:
        self.errors.append((error, text))


class StreamingTextProcessor:
    """Preprocesses and chunks completed units for one streaming session."""

    def __init__(
        self,
        consumer: StreamingConsumer,
        max_grouping_length: int = MAX_WORD_LENGTH_FOR_GROUPING,
        minimum_delay_ms: float = MINIMUM_DELAY_MS,
    ) -> None:
        self._consumer = consumer
        self._max_grouping_length = max_grouping_length
        self._minimum_delay_ms = minimum_delay_ms
        self._processed_chunk_count = 0
        self._is_complete = False

    @property
    def processed_chunk_count(self) -> int:
        return self._processed_chunk_count

    @property
    def is_complete(self) -> bool:
        return self._is_complete

    def process_text_chunk(self, text: str, settings: TimingSettings) -> List[WordItem]:
        """Run one unit through the pipeline and report the chunks it produced."""
        if self._is_complete:
            return []

        try:
            tokens = preprocess_text(text)
            if not tokens:
                return []
            self._consumer.on_tokens_ready(tokens)

            chunks = create_chunks(
                tokens,
                settings,
                max_grouping_length=self._max_grouping_length,
                minimum_delay_ms=self._minimum_delay_ms,
            )
            if chunks:
                self._processed_chunk_count += len(chunks)
                self._consumer.on_chunks_ready(chunks)
                self._consumer.on_progress(self._processed_chunk_count)
            logger.debug(
                "Processed unit of %d chars into %d chunks (total %d)",
                len(text), len(chunks), self._processed_chunk_count,
            )
            return chunks
        except Exception as exc:
            logger.exception("Failed to process streamed text unit (%d chars)", len(text))
            self._consumer.on_error(exc, text)
            return []

    def complete(self) -> None:
        if not self._is_complete:
            self._is_complete = True
            self._consumer.on_complete()

    def reset(self) -> None:
        self._processed_chunk_count = 0
        self._is_complete = False
