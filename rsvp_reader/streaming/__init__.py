"""Incremental text streaming: buffer, per-unit processing and sessions."""

from rsvp_reader.streaming.buffer import StreamingTextBuffer
from rsvp_reader.streaming.feeder import simulate_streaming, split_into_fragments, stream_fragments
from rsvp_reader.streaming.orchestrator import (
    SessionStatus,
    StreamingTextOrchestrator,
    start_streaming_session,
)
from rsvp_reader.streaming.processor import StreamingConsumer, StreamingTextProcessor

__all__ = [
    "StreamingTextBuffer",
    "StreamingConsumer",
    "StreamingTextProcessor",
    "SessionStatus",
    "StreamingTextOrchestrator",
    "start_streaming_session",
    "stream_fragments",
    "simulate_streaming",
    "split_into_fragments",
]
