"""Tests for streaming sessions: ordering, completion, cancellation, errors.

HOW: Each test builds its own session and drives it with asyncio.run().
Chunk size 1 keeps the expected chunk texts equal to the token texts.
"""

from __future__ import annotations

import asyncio
import dataclasses

from rsvp_reader.core.chunking import create_chunks
from rsvp_reader.core.preprocessor import preprocess_text
from rsvp_reader.streaming.orchestrator import (
    SessionStatus,
    StreamingTextOrchestrator,
    start_streaming_session,
)
from rsvp_reader.streaming.processor import StreamingConsumer, StreamingTextProcessor


def _texts(session):
    return [item.text for item in session.word_items]


class CountingConsumer(StreamingConsumer):
    def __init__(self):
        super().__init__()
        self.complete_calls = 0
        self.progress_updates = []

    def on_progress(self, processed_chunks):
        super().on_progress(processed_chunks)
        self.progress_updates.append(processed_chunks)

    def on_complete(self):
        super().on_complete()
        self.complete_calls += 1


class TestSessionLifecycle:

    def test_new_session_is_idle(self, settings):
        assert StreamingTextOrchestrator(settings).status == SessionStatus.IDLE

    def test_fragments_become_chunks_per_sentence(self, settings):
        async def scenario():
            session = await start_streaming_session("", settings)
            await session.add_streaming_token("Hello wor")
            assert session.word_items == []
            await session.add_streaming_token("ld. Next")
            assert _texts(session) == ["Hello", "world."]
            await session.add_streaming_token(" sentence.")
            await session.complete_streaming_text()
            return session

        session = asyncio.run(scenario())
        assert _texts(session) == ["Hello", "world.", "Next", "sentence."]
        assert session.status == SessionStatus.COMPLETED
        assert session.consumer.is_complete
        assert session.processed_chunk_count == 4

    def test_initial_text_processed_immediately(self, settings):
        async def scenario():
            return await start_streaming_session("Intro text", settings)

        session = asyncio.run(scenario())
        assert _texts(session) == ["Intro", "text"]
        assert session.status == SessionStatus.COLLECTING

    def test_remainder_flushed_on_complete(self, settings):
        async def scenario():
            session = await start_streaming_session("", settings)
            await session.add_streaming_token("no delimiter here")
            assert session.word_items == []
            await session.complete_streaming_text()
            return session

        assert _texts(asyncio.run(scenario())) == ["no", "delimiter", "here"]

    def test_progress_reported_per_unit(self, settings):
        consumer = CountingConsumer()

        async def scenario():
            session = await start_streaming_session("", settings, consumer=consumer)
            await session.add_streaming_token("One two. Three.")
            await session.add_streaming_token(" Four")
            await session.complete_streaming_text()

        asyncio.run(scenario())
        assert consumer.progress_updates == [3, 4]


class TestSequencingMisuse:

    def test_complete_twice_signals_once(self, settings):
        consumer = CountingConsumer()

        async def scenario():
            session = await start_streaming_session("", settings, consumer=consumer)
            await session.add_streaming_token("Done.")
            await session.complete_streaming_text()
            await session.complete_streaming_text()

        asyncio.run(scenario())
        assert consumer.complete_calls == 1

    def test_complete_before_start_is_noop(self, settings):
        session = StreamingTextOrchestrator(settings)
        asyncio.run(session.complete_streaming_text())
        assert session.status == SessionStatus.IDLE
        assert not session.consumer.is_complete

    def test_fragment_before_start_is_ignored(self, settings):
        session = StreamingTextOrchestrator(settings)
        asyncio.run(session.add_streaming_token("Lost."))
        assert session.word_items == []
        assert session.buffered_text == ""

    def test_concurrent_complete_calls_signal_once(self, settings):
        consumer = CountingConsumer()

        async def scenario():
            session = await start_streaming_session("", settings, consumer=consumer)
            await session.add_streaming_token("tail")
            await asyncio.gather(
                session.complete_streaming_text(),
                session.complete_streaming_text(),
            )
            return session

        session = asyncio.run(scenario())
        assert consumer.complete_calls == 1
        assert _texts(session) == ["tail"]


class TestOrdering:

    def test_unawaited_adds_apply_in_submission_order(self, settings):
        async def scenario():
            session = await start_streaming_session("", settings)
            await asyncio.gather(*(
                session.add_streaming_token(fragment)
                for fragment in ["A b", " c. D", " e. F"]
            ))
            await session.complete_streaming_text()
            return session

        assert _texts(asyncio.run(scenario())) == ["A", "b", "c.", "D", "e.", "F"]

    def test_sessions_do_not_share_state(self, settings):
        async def scenario():
            first = await start_streaming_session("", settings)
            second = await start_streaming_session("", settings)
            await first.add_streaming_token("Only in first")
            await second.add_streaming_token("Second. ")
            return first, second

        first, second = asyncio.run(scenario())
        assert first.buffered_text == "Only in first"
        assert second.buffered_text == ""
        assert _texts(first) == []
        assert _texts(second) == ["Second."]


class TestCancellation:

    def test_cancel_keeps_emitted_chunks(self, settings):
        async def scenario():
            session = await start_streaming_session("", settings)
            await session.add_streaming_token("First one. Sec")
            session.cancel_streaming()
            await session.add_streaming_token("ond.")
            await session.complete_streaming_text()
            return session

        session = asyncio.run(scenario())
        assert session.status == SessionStatus.CANCELLED
        assert _texts(session) == ["First", "one."]
        assert session.buffered_text == ""
        assert session.processed_chunk_count == 0
        assert not session.consumer.is_complete

    def test_cancel_stops_queued_fragments(self, settings):
        class CancelAfterTwo(StreamingConsumer):
            session = None

            def on_chunks_ready(self, chunks):
                super().on_chunks_ready(chunks)
                if len(self.word_items) >= 2:
                    self.session.cancel_streaming()

        consumer = CancelAfterTwo()

        async def scenario():
            session = await start_streaming_session("", settings, consumer=consumer)
            consumer.session = session
            await asyncio.gather(*(
                session.add_streaming_token(fragment)
                for fragment in ["One. ", "Two. ", "Three. "]
            ))
            return session

        session = asyncio.run(scenario())
        assert _texts(session) == ["One.", "Two."]
        assert session.pending_fragments == 0
        assert session.status == SessionStatus.CANCELLED

    def test_restart_after_cancel(self, settings):
        async def scenario():
            session = await start_streaming_session("", settings)
            await session.add_streaming_token("Old text. ")
            session.cancel_streaming()
            await session.start_streaming_text("")
            await session.add_streaming_token("New.")
            await session.complete_streaming_text()
            return session

        session = asyncio.run(scenario())
        assert _texts(session) == ["New."]
        assert session.status == SessionStatus.COMPLETED


class TestSettingsUpdate:

    def test_later_units_and_emitted_chunks_use_new_settings(self, settings):
        faster = dataclasses.replace(settings, words_per_minute=600)

        async def scenario():
            session = await start_streaming_session("", settings)
            await session.add_streaming_token("One two.")
            before = [item.duration for item in session.word_items]
            session.update_settings(faster)
            await session.add_streaming_token(" Three.")
            await session.complete_streaming_text()
            return session, before

        session, before = asyncio.run(scenario())
        expected = create_chunks(preprocess_text("One two. Three."), faster)
        assert session.settings is faster
        assert [item.duration for item in session.word_items] == [item.duration for item in expected]
        assert [item.duration for item in session.word_items[:2]] != before

    def test_update_keeps_list_identity(self, settings):
        async def scenario():
            session = await start_streaming_session("Alpha beta", settings)
            items = session.word_items
            session.update_settings(dataclasses.replace(settings, words_per_minute=150))
            return session, items

        session, items = asyncio.run(scenario())
        assert session.word_items is items
        assert [item.text for item in items] == ["Alpha", "beta"]


class TestErrors:

    def test_failed_unit_is_reported_and_session_continues(self, settings, monkeypatch):
        from rsvp_reader.streaming import processor

        real_preprocess = processor.preprocess_text

        def flaky(text):
            if "boom" in text:
                raise RuntimeError("tokenizer exploded")
            return real_preprocess(text)

        monkeypatch.setattr(processor, "preprocess_text", flaky)

        async def scenario():
            session = await start_streaming_session("", settings)
            await session.add_streaming_token("Fine. boom. ")
            await session.add_streaming_token("Also fine.")
            await session.complete_streaming_text()
            return session

        session = asyncio.run(scenario())
        assert len(session.consumer.errors) == 1
        error, unit = session.consumer.errors[0]
        assert isinstance(error, RuntimeError)
        assert unit == "Fine. boom."
        assert _texts(session) == ["Also", "fine."]
        assert session.status == SessionStatus.COMPLETED


class TestProcessor:
    """StreamingTextProcessor used directly, without a session."""

    def test_counts_and_reports(self, settings):
        consumer = CountingConsumer()
        processor = StreamingTextProcessor(consumer)
        chunks = processor.process_text_chunk("Two words.", settings)
        assert [c.text for c in chunks] == ["Two", "words."]
        assert processor.processed_chunk_count == 2
        assert [t.text for t in consumer.tokens] == ["Two", "words."]

    def test_blank_unit_produces_nothing(self, settings):
        consumer = CountingConsumer()
        processor = StreamingTextProcessor(consumer)
        assert processor.process_text_chunk("   ", settings) == []
        assert consumer.progress_updates == []

    def test_complete_once_then_ignores_units(self, settings):
        consumer = CountingConsumer()
        processor = StreamingTextProcessor(consumer)
        processor.complete()
        processor.complete()
        assert consumer.complete_calls == 1
        assert processor.process_text_chunk("Late.", settings) == []

    def test_reset(self, settings):
        processor = StreamingTextProcessor(StreamingConsumer())
        processor.process_text_chunk("Some text.", settings)
        processor.complete()
        processor.reset()
        assert processor.processed_chunk_count == 0
        assert not processor.is_complete
