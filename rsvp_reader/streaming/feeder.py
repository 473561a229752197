"""Helpers that pump fragment sources into a streaming session.

stream_fragments() drives a session from any sync or async iterable of
fragments. simulate_streaming() is the fallback used when a text is
available all at once: it slices the text into fixed-size fragments with a
short sleep between them, so playback can start before the whole text has
been chunked and the host loop is never starved.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterable, Iterable, List, Union

from rsvp_reader.config import STREAM_FRAGMENT_CHARS, STREAM_FRAGMENT_DELAY_S
from rsvp_reader.streaming.orchestrator import SessionStatus, StreamingTextOrchestrator

logger = logging.getLogger(__name__)

FragmentSource = Union[Iterable[str], AsyncIterable[str]]


def split_into_fragments(text: str, size: int = STREAM_FRAGMENT_CHARS) -> List[str]:
    """Slice ``text`` into consecutive pieces of at most ``size`` characters."""
    if size <= 0:
        raise ValueError("Fragment size must be positive, got {}".format(size))
    return [text[i:i + size] for i in range(0, len(text), size)]


async def stream_fragments(
    session: StreamingTextOrchestrator,
    source: FragmentSource,
) -> StreamingTextOrchestrator:
    """Feed every fragment of ``source`` into ``session``, then complete it.

    If the source raises (or the task is cancelled) the session is cancelled
    and the error propagates to the caller.
    """
    if session.status != SessionStatus.COLLECTING:
        await session.start_streaming_text("")

    try:
        if hasattr(source, "__aiter__"):
            async for fragment in source:  # type: ignore[union-attr]
                await session.add_streaming_token(fragment)
        else:
            for fragment in source:  # type: ignore[union-attr]
                await session.add_streaming_token(fragment)
    except (Exception, asyncio.CancelledError):
        logger.warning("Fragment source failed; cancelling streaming session")
        session.cancel_streaming()
        raise

    await session.complete_streaming_text()
    return session


async def simulate_streaming(
    session: StreamingTextOrchestrator,
    text: str,
    fragment_chars: int = STREAM_FRAGMENT_CHARS,
    delay_s: float = STREAM_FRAGMENT_DELAY_S,
) -> StreamingTextOrchestrator:
    """Stream an already-available ``text`` through ``session`` in small slices."""
    fragments = split_into_fragments(text, fragment_chars)
    logger.debug("Simulating stream: %d fragments of %d chars", len(fragments), fragment_chars)

    async def _paced():
        for fragment in fragments:
            yield fragment
            await asyncio.sleep(delay_s)

    return await stream_fragments(session, _paced())
