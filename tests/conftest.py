"""Shared test fixtures for the rsvp_reader test suite.

WHY: Most modules need the same timing settings, hand-built chunks with
known durations, and a way to fire playback timers without sleeping.
Centralizing them keeps the expected numbers in one place.

HOW: Settings fixtures use 300 wpm so the base duration is a round 200 ms.
make_item builds WordItem objects with explicit timing. FakeLoop stands in
for an asyncio event loop: call_later() records handles and fire_next()
runs the earliest pending one.

RULES:
- 300 wpm → 200 ms base duration (60000 / 300)
- FakeLoop never sleeps; time only moves when a handle fires
- Cancelled handles are never fired
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional

import pytest

from rsvp_reader.core.types import TimingSettings, WordItem


@pytest.fixture
def settings() -> TimingSettings:
    """One token per chunk at 300 wpm."""
    return TimingSettings(words_per_minute=300, chunk_size=1)


@pytest.fixture
def grouping_settings() -> TimingSettings:
    """Up to three short words per chunk at 300 wpm."""
    return TimingSettings(words_per_minute=300, chunk_size=3)


def _make_item(text: str, duration: float = 100.0, postdelay: float = 0.0, **kwargs: Any) -> WordItem:
    return WordItem(
        text=text,
        original_text=text,
        optimal_letter_position=kwargs.pop("optimal_letter_position", 1),
        duration=duration,
        predelay=kwargs.pop("predelay", 0.0),
        postdelay=postdelay,
        word_length=len(text.split(" ")[0]),
        **kwargs,
    )


@pytest.fixture
def make_item() -> Callable[..., WordItem]:
    """Factory for WordItem objects with explicit timing."""
    return _make_item


# ---------------------------------------------------------------------------
# Fake event loop for the playback scheduler
# ---------------------------------------------------------------------------


class FakeTimerHandle:
    def __init__(self, when: float, callback: Callable[..., None], args: tuple) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeLoop:
    """Records call_later() requests; fire_next() runs them in time order."""

    def __init__(self) -> None:
        self.time = 0.0
        self.handles: List[FakeTimerHandle] = []

    def call_later(self, delay: float, callback: Callable[..., None], *args: Any) -> FakeTimerHandle:
        handle = FakeTimerHandle(self.time + delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[FakeTimerHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    @property
    def last_delay(self) -> Optional[float]:
        """Delay in seconds of the most recently scheduled pending handle."""
        pending = self.pending
        if not pending:
            return None
        return pending[-1].when - self.time

    def fire_next(self) -> Optional[FakeTimerHandle]:
        pending = self.pending
        if not pending:
            return None
        handle = min(pending, key=lambda h: h.when)
        self.time = handle.when
        handle.fired = True
        handle.callback(*handle.args)
        return handle

    def run_until_idle(self, limit: int = 1000) -> int:
        fired = 0
        while self.pending and fired < limit:
            self.fire_next()
            fired += 1
        return fired


@pytest.fixture
def fake_loop() -> FakeLoop:
    return FakeLoop()
