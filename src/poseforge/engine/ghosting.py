"""Transient shadow pose held during a drag."""

from __future__ import annotations

from typing import TYPE_CHECKING

from poseforge.engine.angles import interpolate_angle

if TYPE_CHECKING:
    from collections.abc import Callable

    from poseforge.models.enums import JointKey
    from poseforge.models.pose import Pose


class PreviewGhosting:
    """Keeps live drag results apart from the committed pose.

    ``ghost`` is the committed pose frozen at drag start (drawn faintly) and
    ``shadow`` the live result the operator is shaping.  Nothing here touches
    committed state; the editor decides how to promote the shadow.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.ghost: Pose | None = None
        self.shadow: Pose | None = None
        self.moved = False

    @property
    def active(self) -> bool:
        return self.shadow is not None

    def begin(self, committed: Pose) -> None:
        if not self.enabled:
            return
        self.ghost = committed
        self.shadow = committed
        self.moved = False

    def update(self, pose: Pose) -> None:
        if self.shadow is None:
            return
        self.shadow = pose
        self.moved = True

    def working_pose(self, committed: Pose) -> Pose:
        """The pose live edits should build on."""
        return self.shadow if self.shadow is not None else committed

    def end(self) -> Pose | None:
        """Close the preview; returns the shadow to promote, or ``None`` if nothing moved."""
        result = self.shadow if self.moved else None
        self.discard()
        return result

    def discard(self) -> None:
        self.ghost = None
        self.shadow = None
        self.moved = False

    def intent_path(
        self,
        joint: JointKey,
        propagate: Callable[[JointKey, float, Pose], Pose],
        steps: int = 5,
    ) -> list[tuple[Pose, float]]:
        """Intermediate poses from ghost to shadow for the dragged joint.

        Each step re-runs propagation for the partial rotation so the path
        shows how the chain will follow.  Returns ``(pose, opacity)`` pairs.
        """
        if self.ghost is None or self.shadow is None or steps <= 0:
            return []
        start = self.ghost[joint]
        end = self.shadow[joint]
        path: list[tuple[Pose, float]] = []
        for i in range(1, steps + 1):
            t = i / steps
            value = interpolate_angle(start, end, t)
            base = self.ghost.updated({joint: value})
            path.append((propagate(joint, value - start, base), 0.1 + t * 0.5))
        return path
