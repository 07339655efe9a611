"""Keyframe timeline: ordering, time editing and pose resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from poseforge.engine.angles import ease, interpolate_pose
from poseforge.models.enums import Easing
from poseforge.models.pose import Pose
from poseforge.models.timeline import Keyframe, new_keyframe_id

logger = logging.getLogger(__name__)

LOOP_DURATION = 1000.0
MIN_SEGMENT_DURATION = 100.0
KEYFRAME_SPACING = 1000.0


class AnimationTimeline:
    """An ordered list of keyframes resolving any time to an interpolated pose.

    The segment after the last keyframe runs for a fixed ``loop_duration`` and
    blends back into the first keyframe, closing the loop.

    Parameters
    ----------
    keyframes:
        Initial keyframes; they are sorted by time.
    loop_duration:
        Length (ms) of the closing segment from the last keyframe to the first.
    min_segment:
        Smallest gap (ms) :meth:`set_keyframe_time` leaves between neighbours.
    spacing:
        Gap (ms) placed before a keyframe appended with :meth:`add`.
    """

    def __init__(
        self,
        keyframes: Iterable[Keyframe] = (),
        *,
        loop_duration: float = LOOP_DURATION,
        min_segment: float = MIN_SEGMENT_DURATION,
        spacing: float = KEYFRAME_SPACING,
    ) -> None:
        self.loop_duration = loop_duration
        self.min_segment = min_segment
        self.spacing = spacing
        self._keyframes: list[Keyframe] = sorted(keyframes, key=lambda k: k.time)

    def __len__(self) -> int:
        return len(self._keyframes)

    def __iter__(self) -> Iterator[Keyframe]:
        return iter(self._keyframes)

    def __getitem__(self, index: int) -> Keyframe:
        return self._keyframes[index]

    @property
    def keyframes(self) -> list[Keyframe]:
        return list(self._keyframes)

    @property
    def total_duration(self) -> float:
        if len(self._keyframes) < 2:
            return 0.0
        return self._keyframes[-1].time + self.loop_duration

    def wrap_time(self, time_ms: float) -> float:
        """Fold *time_ms* into ``[0, total_duration)``; 0 for an inert timeline."""
        total = self.total_duration
        if total <= 0:
            return 0.0
        return time_ms % total

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def pose_at(self, time_ms: float) -> Pose | None:
        """Interpolated pose at *time_ms*.

        With fewer than two keyframes the timeline is inert: the only
        keyframe's pose (or ``None`` when empty) is returned unchanged.
        """
        if not self._keyframes:
            return None
        if len(self._keyframes) < 2:
            return self._keyframes[0].pose

        t = self.wrap_time(time_ms)
        start, end_pose, segment_start, segment_duration = self._segment(t)
        progress = (t - segment_start) / segment_duration if segment_duration > 0 else 1.0
        return interpolate_pose(start.pose, end_pose, ease(start.easing, progress))

    def _segment(self, t: float) -> tuple[Keyframe, Pose, float, float]:
        frames = self._keyframes
        for current, following in zip(frames, frames[1:]):
            if current.time <= t < following.time:
                return current, following.pose, current.time, following.time - current.time
        last = frames[-1]
        return last, frames[0].pose, last.time, self.loop_duration

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def add(self, pose: Pose, easing: Easing = Easing.LINEAR) -> int:
        """Append *pose* one spacing after the last keyframe; returns its index."""
        new_time = self._keyframes[-1].time + self.spacing if self._keyframes else 0.0
        self._keyframes.append(Keyframe(pose=pose, time=new_time, easing=easing))
        logger.debug("Keyframe %d added at %.0fms", len(self._keyframes), new_time)
        return len(self._keyframes) - 1

    def insert(self, pose: Pose, time_ms: float, easing: Easing = Easing.LINEAR) -> int:
        """Insert *pose* at *time_ms* keeping time order; returns its index."""
        keyframe = Keyframe(
            id=new_keyframe_id("kf-tween"), pose=pose, time=max(0.0, time_ms), easing=easing,
        )
        self._keyframes.append(keyframe)
        self._keyframes.sort(key=lambda k: k.time)
        return next(i for i, k in enumerate(self._keyframes) if k.id == keyframe.id)

    def remove(self, index: int) -> Keyframe | None:
        if not 0 <= index < len(self._keyframes):
            return None
        return self._keyframes.pop(index)

    def clear(self) -> None:
        self._keyframes.clear()

    def replace(self, keyframes: Iterable[Keyframe]) -> None:
        """Swap in a new keyframe list (sorted by time)."""
        self._keyframes = sorted(keyframes, key=lambda k: k.time)

    def set_pose(self, index: int, pose: Pose) -> None:
        if 0 <= index < len(self._keyframes):
            self._keyframes[index] = self._keyframes[index].model_copy(update={"pose": pose})

    def set_easing(self, index: int, easing: Easing) -> None:
        if 0 <= index < len(self._keyframes):
            self._keyframes[index] = self._keyframes[index].model_copy(
                update={"easing": Easing(easing)},
            )

    def set_keyframe_time(self, index: int, new_time: float) -> float | None:
        """Move keyframe *index* to *new_time*, clamped between its neighbours.

        The first keyframe anchors the timeline and never moves.  Other
        keyframes stay at least ``min_segment`` ms after the previous one and
        before the next one; the last keyframe has no upper bound.

        Returns
        -------
        float | None
            The time actually applied, or ``None`` when the edit was ignored.
        """
        if not 0 < index < len(self._keyframes):
            return None
        lower = self._keyframes[index - 1].time + self.min_segment
        clamped = max(lower, new_time)
        if index + 1 < len(self._keyframes):
            clamped = min(self._keyframes[index + 1].time - self.min_segment, clamped)
        self._keyframes[index] = self._keyframes[index].model_copy(update={"time": clamped})
        if clamped != new_time:
            logger.debug("Keyframe %d time %.0f clamped to %.0f", index, new_time, clamped)
        return clamped

    def onion_skins(
        self, index: int | None, before: int = 1, after: int = 1,
    ) -> list[tuple[int, Pose, float]]:
        """Neighbouring keyframe poses around *index* as ``(index, pose, opacity)``."""
        if index is None or len(self._keyframes) < 2:
            return []
        skins: list[tuple[int, Pose, float]] = []
        for distance in range(1, before + 1):
            i = index - distance
            if i >= 0:
                skins.append((i, self._keyframes[i].pose, 0.4 - distance * 0.1))
        for distance in range(1, after + 1):
            i = index + distance
            if i < len(self._keyframes):
                skins.append((i, self._keyframes[i].pose, 0.4 - distance * 0.1))
        return skins

    # ------------------------------------------------------------------
    # Interchange
    # ------------------------------------------------------------------

    def to_records(self) -> list[dict[str, Any]]:
        """Keyframes as ordered ``{id, time, easing, pose}`` dicts."""
        return [k.model_dump(mode="json") for k in self._keyframes]

    @classmethod
    def from_records(
        cls, records: Iterable[Mapping[str, Any]], **kwargs: float,
    ) -> AnimationTimeline:
        return cls((Keyframe.model_validate(dict(r)) for r in records), **kwargs)
