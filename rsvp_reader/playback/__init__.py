"""Real-time playback of timed chunks."""

from rsvp_reader.playback.scheduler import PlaybackScheduler, PlaybackState, PlaybackStatus

__all__ = ["PlaybackScheduler", "PlaybackState", "PlaybackStatus"]
