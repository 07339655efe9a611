"""Angle arithmetic and easing curves."""

from __future__ import annotations

from collections.abc import Callable

from poseforge.models.enums import Easing, JointKey
from poseforge.models.pose import Pose

EasingFunction = Callable[[float], float]


def wrap_angle(angle: float) -> float:
    """Wrap *angle* into ``[-180, 180)``."""
    return (angle + 180.0) % 360.0 - 180.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_rotation(angle: float) -> float:
    """Clamp an operator-entered rotation into ``[-180, 180]``."""
    return clamp(angle, -180.0, 180.0)


def shortest_delta(start: float, end: float) -> float:
    """Signed sweep from *start* to *end* that covers at most 180 degrees."""
    return wrap_angle(end - start)


def interpolate_angle(start: float, end: float, t: float) -> float:
    """Interpolate between two angles along the shortest arc.

    ``interpolate_angle(170, -170, 0.5)`` sweeps 20 degrees through 180
    rather than 340 degrees through 0.
    """
    return start + shortest_delta(start, end) * t


def interpolate_pose(start: Pose, end: Pose, t: float) -> Pose:
    """Shortest-arc interpolation of every joint independently."""
    return Pose.from_mapping(
        {key.value: interpolate_angle(start[key], end[key], t) for key in JointKey},
    )


# ---------------------------------------------------------------------------
# Easing curves
# ---------------------------------------------------------------------------


def linear(t: float) -> float:
    return t


def ease_out_cubic(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4.0 * t**3
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def ease_out_expo(t: float) -> float:
    return 1.0 if t >= 1.0 else 1.0 - 2.0 ** (-10.0 * t)


EASING_FUNCTIONS: dict[Easing, EasingFunction] = {
    Easing.LINEAR: linear,
    Easing.EASE_OUT: ease_out_cubic,
    Easing.EASE_IN_OUT: ease_in_out_cubic,
}


def ease(easing: Easing | str | None, t: float) -> float:
    """Apply a named easing curve; unknown or missing names fall back to linear."""
    try:
        func = EASING_FUNCTIONS[Easing(easing)] if easing is not None else linear
    except ValueError:
        func = linear
    return func(t)
