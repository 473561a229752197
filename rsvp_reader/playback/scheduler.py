"""Timer-driven playback of a chunk sequence.

WHY: The reader shows one chunk at a time and must move on exactly when the
chunk's display time is over. Chained deferred callbacks are easy to get
wrong: a second chain started by a stray play() makes the text race ahead.

HOW: PlaybackState is the caller-owned view model (chunks, index, status)
that the rendering layer reads. PlaybackScheduler mutates it and keeps at
most ONE pending asyncio.TimerHandle; every transition cancels the previous
handle before scheduling a new one via loop.call_later().

RULES:
- play() is a no-op while playing; pause() is a no-op unless playing
- restart() always cancels, rewinds to index 0 and pauses (no auto-resume)
- A tick that finds the status no longer playing does nothing
- A tick at the last index pauses; there is no wrap-around
- Delay = max(duration + postdelay, minimum delay) of the chunk being shown,
  or max(60000 / max(100, wpm), minimum delay) when there is no chunk
- Changing settings or state while playing reschedules from now using the
  current chunk's delay under the new settings
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from rsvp_reader.config import MIN_WPM_FOR_CALCULATION, MINIMUM_DELAY_MS
from rsvp_reader.core.chunking import retime_chunks
from rsvp_reader.core.types import TimingSettings, WordItem

logger = logging.getLogger(__name__)


class PlaybackStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    PAUSED = "paused"
    PLAYING = "playing"


@dataclass
class PlaybackState:
    """What the rendering layer reads: the chunks, the cursor and the status."""

    word_items: List[WordItem] = field(default_factory=list)
    index: int = 0
    status: PlaybackStatus = PlaybackStatus.IDLE

    @property
    def current_item(self) -> Optional[WordItem]:
        if 0 <= self.index < len(self.word_items):
            return self.word_items[self.index]
        return None


class PlaybackScheduler:
    """Advances a PlaybackState one chunk at a time on an asyncio event loop.

    Args:
        state: Caller-owned state to drive.
        settings: Timing preferences used for the fallback delay and retiming.
        loop: Event loop to schedule on. Defaults to the running loop at the
            time of the first scheduling call.
        minimum_delay_ms: Floor for every computed delay.
        on_tick: Called with the state after every timer tick.
    """

    def __init__(
        self,
        state: PlaybackState,
        settings: TimingSettings,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        minimum_delay_ms: float = MINIMUM_DELAY_MS,
        on_tick: Optional[Callable[[PlaybackState], None]] = None,
    ) -> None:
        self.state = state
        self.settings = settings
        self.minimum_delay_ms = minimum_delay_ms
        self._loop = loop
        self._on_tick = on_tick
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def has_pending_tick(self) -> bool:
        return self._timer is not None

    def current_delay_ms(self) -> float:
        """Delay before leaving the chunk at the current index."""
        item = self.state.current_item
        if item is not None:
            return max(item.duration + item.postdelay, self.minimum_delay_ms)
        wpm = max(MIN_WPM_FOR_CALCULATION, self.settings.words_per_minute)
        return max(60000.0 / wpm, self.minimum_delay_ms)

    def play(self) -> None:
        if self.state.status == PlaybackStatus.PLAYING:
            return
        self.state.status = PlaybackStatus.PLAYING
        logger.debug("Playback started at index %d", self.state.index)
        self._schedule(self.current_delay_ms())

    def pause(self) -> None:
        if self.state.status != PlaybackStatus.PLAYING:
            return
        self._cancel_timer()
        self.state.status = PlaybackStatus.PAUSED
        logger.debug("Playback paused at index %d", self.state.index)

    def restart(self) -> None:
        self._cancel_timer()
        self.state.index = 0
        self.state.status = PlaybackStatus.PAUSED

    def update_settings(self, settings: TimingSettings) -> None:
        """Adopt new timing preferences; retimes chunks and reschedules if playing."""
        self.settings = settings
        self.state.word_items[:] = retime_chunks(
            self.state.word_items, settings, minimum_delay_ms=self.minimum_delay_ms
        )
        if self.state.status == PlaybackStatus.PLAYING:
            self._schedule(self.current_delay_ms())

    def notify_state_changed(self) -> None:
        """Call after mutating chunks or index from outside while playing."""
        if self.state.status == PlaybackStatus.PLAYING:
            self._schedule(self.current_delay_ms())

    def _schedule(self, delay_ms: float) -> None:
        self._cancel_timer()
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        self._timer = loop.call_later(delay_ms / 1000.0, self._advance)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _advance(self) -> None:
        self._timer = None
        state = self.state
        if state.status != PlaybackStatus.PLAYING:
            return

        if state.index >= len(state.word_items) - 1:
            state.status = PlaybackStatus.PAUSED
            logger.debug("Playback reached the end at index %d", state.index)
        else:
            state.index += 1
            self._schedule(self.current_delay_ms())

        if self._on_tick is not None:
            self._on_tick(state)
