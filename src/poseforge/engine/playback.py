"""Frame-driven playback of an animation timeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeAlias

from poseforge.models.enums import PlaybackState

if TYPE_CHECKING:
    from collections.abc import Callable

    from poseforge.engine.scheduler import FrameScheduler
    from poseforge.engine.timeline import AnimationTimeline
    from poseforge.models.pose import Pose

logger = logging.getLogger(__name__)

PoseSink: TypeAlias = "Callable[[Pose], None]"


class PlaybackScheduler:
    """Play/pause/reset/seek state machine over an :class:`AnimationTimeline`.

    While playing, every frame advances the playhead by the wall-clock time
    elapsed since the previous frame, wraps it around the timeline's total
    duration and hands ``timeline.pose_at(time)`` to *on_pose*.
    """

    def __init__(
        self,
        timeline: AnimationTimeline,
        scheduler: FrameScheduler,
        on_pose: PoseSink,
    ) -> None:
        self.timeline = timeline
        self.scheduler = scheduler
        self.on_pose = on_pose
        self.state = PlaybackState.STOPPED
        self.time = 0.0
        self._frame_handle: int | None = None
        self._last_timestamp: float | None = None

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def total_duration(self) -> float:
        return self.timeline.total_duration

    def play(self) -> bool:
        """Start or resume playback.  Needs at least two keyframes."""
        if len(self.timeline) < 2 or self.is_playing:
            return False
        self.state = PlaybackState.PLAYING
        self._last_timestamp = None
        self._frame_handle = self.scheduler.request_frame(self._on_frame)
        logger.info("Playback started at %.0fms", self.time)
        return True

    def pause(self) -> None:
        if not self.is_playing:
            return
        self._cancel_frame()
        self.state = PlaybackState.PAUSED
        logger.info("Playback paused at %.0fms", self.time)

    def reset(self) -> None:
        """Stop, rewind to 0 and show the first keyframe (if any)."""
        self._cancel_frame()
        self.state = PlaybackState.STOPPED
        self.time = 0.0
        if len(self.timeline) > 0:
            self.on_pose(self.timeline[0].pose)

    def seek(self, time_ms: float) -> None:
        """Move the playhead; outside of playback the pose is applied immediately."""
        self.time = self.timeline.wrap_time(time_ms) if self.total_duration > 0 else time_ms
        if not self.is_playing:
            pose = self.timeline.pose_at(self.time)
            if pose is not None and len(self.timeline) >= 2:
                self.on_pose(pose)

    def advance(self, delta_ms: float) -> None:
        """Advance the playhead by *delta_ms* and apply the resolved pose."""
        total = self.total_duration
        if total <= 0:
            self._stop_inert()
            return
        self.time = (self.time + delta_ms) % total
        pose = self.timeline.pose_at(self.time)
        if pose is not None:
            self.on_pose(pose)

    def _on_frame(self, timestamp: float) -> None:
        self._frame_handle = None
        if not self.is_playing:
            return
        if len(self.timeline) < 2:
            self._stop_inert()
            return
        if self._last_timestamp is None:
            self._last_timestamp = timestamp
        delta = timestamp - self._last_timestamp
        self._last_timestamp = timestamp
        self.advance(delta)
        if self.is_playing:
            self._frame_handle = self.scheduler.request_frame(self._on_frame)

    def _stop_inert(self) -> None:
        logger.debug("Timeline has fewer than two keyframes; stopping playback")
        self._cancel_frame()
        if self.is_playing:
            self.state = PlaybackState.PAUSED

    def _cancel_frame(self) -> None:
        if self._frame_handle is not None:
            self.scheduler.cancel(self._frame_handle)
            self._frame_handle = None
