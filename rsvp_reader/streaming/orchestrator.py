"""Streaming session: serializes incoming fragments into timed chunks.

WHY: Text often arrives from a translator or summarizer in small fragments
while the reader is already waiting to start. The session turns that
trickle into an append-only chunk list the player can consume as it grows,
without ever reordering or duplicating text.

HOW: Three components work together:
  SessionStatus              — enum of session states
  StreamingTextOrchestrator  — one object per session owning the FIFO of
                               pending fragments, the sentence buffer, and
                               the unit processor
  start_streaming_session()  — factory that builds and starts a session

Fragments are queued by add_streaming_token() and drained one at a time by
_process_pending(). A non-reentrant _draining flag guarantees a single
drain loop; concurrent callers wait on an asyncio.Event until the loop that
is already running has applied their fragment. The loop yields to the event
loop after every fragment.

RULES:
- Fragments reach the buffer strictly in submission order
- Cancellation is checked at the start of every queued-fragment iteration
- cancel_streaming() clears the queue and the buffer but never removes
  chunks the consumer already holds
- complete_streaming_text() drains, flushes, then signals completion once;
  calling it twice or before start is a no-op
- Sequencing misuse never raises; it is logged at DEBUG and ignored
- Sessions share nothing: each owns its own buffer, queue and processor
- update_settings() applies to later units and retimes the chunks already
  emitted, so one session never mixes two timings
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections import deque
from typing import Deque, List, Optional

from rsvp_reader.core.chunking import retime_chunks
from rsvp_reader.core.types import TimingSettings, WordItem
from rsvp_reader.streaming.buffer import StreamingTextBuffer
from rsvp_reader.streaming.processor import StreamingConsumer, StreamingTextProcessor

logger = logging.getLogger(__name__)


class SessionStatus(str, enum.Enum):
    """Lifecycle of one streaming session.

    RULES:
    - idle: constructed, start_streaming_text() not called yet
    - collecting: accepting fragments
    - completed: drained, flushed and reported complete
    - cancelled: stopped by cancel_streaming(); may be started again
    """

    IDLE = "idle"
    COLLECTING = "collecting"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class StreamingTextOrchestrator:
    """Owns the fragment queue, buffer and processor of one session."""

    def __init__(
        self,
        settings: TimingSettings,
        consumer: Optional[StreamingConsumer] = None,
        buffer: Optional[StreamingTextBuffer] = None,
    ) -> None:
        self.settings = settings
        self.consumer = consumer if consumer is not None else StreamingConsumer()
        self._buffer = buffer if buffer is not None else StreamingTextBuffer()
        self._processor = StreamingTextProcessor(self.consumer)
        self._queue: Deque[str] = deque()
        self._draining = False
        self._drained = asyncio.Event()
        self._drained.set()
        self._completing = False
        self._status = SessionStatus.IDLE

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def processed_chunk_count(self) -> int:
        return self._processor.processed_chunk_count

    @property
    def pending_fragments(self) -> int:
        return len(self._queue)

    @property
    def buffered_text(self) -> str:
        return self._buffer.current_buffer

    @property
    def word_items(self) -> List[WordItem]:
        return self.consumer.word_items

    def update_settings(self, settings: TimingSettings) -> None:
        """Adopt new timing preferences for this session.

        Units processed from now on use ``settings``; chunks the consumer
        already holds are retimed in place, keeping their grouping.
        """
        self.settings = settings
        self.consumer.word_items[:] = retime_chunks(self.consumer.word_items, settings)
        logger.debug("Session settings updated (%s wpm)", settings.words_per_minute)

    async def start_streaming_text(self, raw_text: str = "") -> None:
        """Open the session; non-empty ``raw_text`` is processed at once as one unit."""
        if self._status == SessionStatus.COLLECTING:
            logger.debug("start_streaming_text ignored: session already collecting")
            return

        self._queue.clear()
        self._buffer.clear()
        self._processor.reset()
        self._completing = False
        self.consumer.on_session_start()
        self._status = SessionStatus.COLLECTING
        logger.info("Streaming session started (%d chars of initial text)", len(raw_text))

        if raw_text.strip():
            self._processor.process_text_chunk(raw_text, self.settings)
            await asyncio.sleep(0)

    async def add_streaming_token(self, fragment: str) -> None:
        """Queue ``fragment`` and return once it has been applied to the buffer."""
        if self._status != SessionStatus.COLLECTING:
            logger.debug("add_streaming_token ignored: session is %s", self._status.value)
            return

        self._queue.append(fragment)
        await self._process_pending()

    async def complete_streaming_text(self) -> None:
        """Drain the queue, flush the buffer remainder, and signal completion."""
        if self._status != SessionStatus.COLLECTING or self._completing:
            logger.debug("complete_streaming_text ignored: session is %s", self._status.value)
            return

        self._completing = True
        try:
            await self._process_pending()
            if self._status != SessionStatus.COLLECTING:
                return

            remainder = self._buffer.flush()
            if remainder:
                self._processor.process_text_chunk(remainder, self.settings)

            self._processor.complete()
            self._status = SessionStatus.COMPLETED
            logger.info(
                "Streaming session completed: %d chunks", self._processor.processed_chunk_count
            )
        finally:
            self._completing = False

    def cancel_streaming(self) -> None:
        """Stop the session; chunks already delivered to the consumer are kept."""
        if self._status != SessionStatus.COLLECTING:
            logger.debug("cancel_streaming ignored: session is %s", self._status.value)
            return

        dropped = len(self._queue)
        self._queue.clear()
        self._buffer.clear()
        self._processor.reset()
        self._status = SessionStatus.CANCELLED
        logger.info("Streaming session cancelled (%d queued fragments dropped)", dropped)

    async def _process_pending(self) -> None:
        if self._draining:
            await self._drained.wait()
            return

        self._draining = True
        self._drained.clear()
        try:
            while self._queue:
                if self._status != SessionStatus.COLLECTING:
                    break
                fragment = self._queue.popleft()
                unit = self._buffer.add_token(fragment)
                if unit:
                    self._processor.process_text_chunk(unit, self.settings)
                await asyncio.sleep(0)
        finally:
            self._draining = False
            self._drained.set()


async def start_streaming_session(
    raw_text: str,
    settings: TimingSettings,
    consumer: Optional[StreamingConsumer] = None,
    buffer: Optional[StreamingTextBuffer] = None,
) -> StreamingTextOrchestrator:
    """Create a fresh session, start it with ``raw_text``, and return it."""
    session = StreamingTextOrchestrator(settings, consumer=consumer, buffer=buffer)
    await session.start_streaming_text(raw_text)
    return session
