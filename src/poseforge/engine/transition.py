"""Eased, frame-driven transitions between two poses."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, TypeAlias

from poseforge.engine.angles import ease_out_cubic, ease_out_expo, interpolate_angle
from poseforge.models.enums import JointKey, MotionStyle
from poseforge.models.pose import Pose

if TYPE_CHECKING:
    from collections.abc import Callable

    from poseforge.engine.scheduler import FrameScheduler

logger = logging.getLogger(__name__)

PoseSink: TypeAlias = "Callable[[Pose], None]"

CLOCKWORK_STEP = 5.0
JITTER_FRAMES = 2


def snap_duration(friction: float) -> float:
    """How long (ms) a released ghost takes to settle for a given joint friction."""
    return 50.0 + (friction / 100.0) * 700.0


class PoseTransition:
    """Animate the committed pose from a start pose to a target pose.

    ``standard`` eases out exponentially, ``lotte`` eases out cubically and
    ``clockwork`` steps in 5 degree increments before settling with a couple
    of jittered frames whose amplitude shrinks as friction grows.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        on_pose: PoseSink,
        rng: random.Random | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.on_pose = on_pose
        self.rng = rng or random.Random()
        self.start_pose: Pose | None = None
        self.target_pose: Pose | None = None
        self._duration = 0.0
        self._style = MotionStyle.STANDARD
        self._friction = 50.0
        self._on_complete: Callable[[Pose], None] | None = None
        self._started_at: float | None = None
        self._jitter_left = 0
        self._handle: int | None = None

    @property
    def is_running(self) -> bool:
        return self.target_pose is not None

    def start(
        self,
        start_pose: Pose,
        target_pose: Pose,
        duration_ms: float,
        *,
        style: MotionStyle = MotionStyle.STANDARD,
        friction: float = 50.0,
        on_complete: Callable[[Pose], None] | None = None,
    ) -> None:
        self.cancel()
        self.start_pose = start_pose
        self.target_pose = target_pose
        self._duration = max(0.0, duration_ms)
        self._style = MotionStyle(style)
        self._friction = friction
        self._on_complete = on_complete
        self._started_at = None
        self._jitter_left = 0
        self._handle = self.scheduler.request_frame(self._on_frame)
        logger.debug("Transition started (%s, %.0fms)", self._style, self._duration)

    def cancel(self) -> None:
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None
        self.start_pose = None
        self.target_pose = None

    def _eased(self, progress: float) -> float:
        if self._style is MotionStyle.LOTTE:
            return ease_out_cubic(progress)
        return ease_out_expo(progress)

    def _on_frame(self, timestamp: float) -> None:
        self._handle = None
        if self.start_pose is None or self.target_pose is None:
            return
        if self._jitter_left:
            self._jitter_frame()
            return
        if self._started_at is None:
            self._started_at = timestamp
        elapsed = timestamp - self._started_at
        progress = min(elapsed / self._duration, 1.0) if self._duration > 0 else 1.0

        if progress < 1.0:
            eased = self._eased(progress)
            values: dict[str, float] = {}
            for key in JointKey:
                value = interpolate_angle(self.start_pose[key], self.target_pose[key], eased)
                if self._style is MotionStyle.CLOCKWORK:
                    value = round(value / CLOCKWORK_STEP) * CLOCKWORK_STEP
                values[key.value] = value
            self.on_pose(Pose.from_mapping(values))
            self._handle = self.scheduler.request_frame(self._on_frame)
            return

        if self._style is MotionStyle.CLOCKWORK:
            self._jitter_left = JITTER_FRAMES
            self._jitter_frame()
            return
        self._finish()

    def _jitter_frame(self) -> None:
        if self.target_pose is None:
            return
        amount = 1.5 * (1.0 - self._friction / 100.0)
        jittered = {
            key.value: self.target_pose[key] + (self.rng.random() - 0.5) * 2.0 * amount
            for key in JointKey
        }
        self.on_pose(Pose.from_mapping(jittered))
        self._jitter_left -= 1
        if self._jitter_left > 0:
            self._handle = self.scheduler.request_frame(self._on_frame)
        else:
            self._handle = self.scheduler.request_frame(self._settle)

    def _settle(self, _timestamp: float) -> None:
        self._handle = None
        self._finish()

    def _finish(self) -> None:
        final = self.target_pose
        on_complete = self._on_complete
        self.start_pose = None
        self.target_pose = None
        self._on_complete = None
        if final is None:
            return
        self.on_pose(final)
        logger.debug("Transition finished")
        if on_complete is not None:
            on_complete(final)
