"""Analytic two-bone inverse kinematics for pinned limbs.

Angles follow the renderer convention: a bone with world rotation ``theta``
points along ``(-sin(theta), cos(theta))`` in screen space, so 0 degrees hangs
straight down.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from poseforge.engine.angles import clamp, wrap_angle
from poseforge.models.geometry import Vector2D

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 1e-3


def direction(angle: float) -> Vector2D:
    """Unit vector for a world rotation in degrees."""
    rad = math.radians(angle)
    return Vector2D(-math.sin(rad), math.cos(rad))


def heading(vector: Vector2D) -> float:
    """World rotation (degrees) that points along *vector*."""
    return math.degrees(math.atan2(-vector.x, vector.y))


@dataclass(frozen=True)
class IKSolution:
    """Joint angles for a two-bone chain.

    ``angle1`` is the upper bone relative to the parent's world rotation,
    ``angle2`` the lower bone relative to the upper bone.
    """

    angle1: float
    angle2: float
    reached: bool = True
    degenerate: bool = False


class TwoBoneIKSolver:
    """Law-of-cosines solver for a root -> mid -> end chain.

    Parameters
    ----------
    epsilon:
        Slack kept below full extension so the chain never locks straight.
    neutral:
        Angle pair returned when the target sits on the root.
    """

    def __init__(
        self,
        epsilon: float = DEFAULT_EPSILON,
        neutral: tuple[float, float] = (0.0, 0.0),
    ) -> None:
        self.epsilon = epsilon
        self.neutral = neutral

    def solve(
        self,
        target: Vector2D,
        root: Vector2D,
        len_a: float,
        len_b: float,
        parent_world_rotation: float = 0.0,
        mirrored: bool = False,
    ) -> IKSolution:
        """Place the chain end at *target*, or as near as the bones allow.

        A target beyond reach yields the fully extended chain pointing at it.
        *mirrored* picks the bend side so left and right limbs fold the same
        way on screen.
        """
        to_target = target - root
        distance = to_target.length()

        if distance < self.epsilon:
            logger.debug("IK target coincides with root; returning neutral pose")
            return IKSolution(*self.neutral, reached=True, degenerate=True)

        max_reach = len_a + len_b - self.epsilon
        min_reach = abs(len_a - len_b)
        reached = min_reach <= distance <= len_a + len_b
        d = clamp(distance, min_reach, max_reach)

        cos_root = clamp((len_a**2 + d**2 - len_b**2) / (2.0 * len_a * d), -1.0, 1.0)
        cos_mid = clamp((len_a**2 + len_b**2 - d**2) / (2.0 * len_a * len_b), -1.0, 1.0)
        root_angle = math.degrees(math.acos(cos_root))
        mid_angle = math.degrees(math.acos(cos_mid))

        bend = 1.0 if mirrored else -1.0
        upper_world = heading(to_target) + bend * root_angle
        lower_relative = -bend * (180.0 - mid_angle)

        return IKSolution(
            angle1=wrap_angle(upper_world - parent_world_rotation),
            angle2=wrap_angle(lower_relative),
            reached=reached,
        )

    @staticmethod
    def forward(
        root: Vector2D,
        len_a: float,
        len_b: float,
        solution: IKSolution,
        parent_world_rotation: float = 0.0,
    ) -> tuple[Vector2D, Vector2D]:
        """Reconstruct ``(mid, end)`` positions from a solution."""
        upper_world = parent_world_rotation + solution.angle1
        mid = root + direction(upper_world).scaled(len_a)
        end = mid + direction(upper_world + solution.angle2).scaled(len_b)
        return mid, end
