"""Reference renderer that lays the figure out with plain 2D forward kinematics.

It draws nothing; it computes the screen placement of every joint exactly as a
drawing renderer would and reports it back.  Useful for tests, the CLI and any
headless use of the engine.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from poseforge.engine.ik import direction
from poseforge.engine.skeleton import SKELETON, JointGraph, bone_length
from poseforge.models.enums import JointKey
from poseforge.models.geometry import JointPlacement, Vector2D

if TYPE_CHECKING:
    from poseforge.models.pose import Pose, Proportions
    from poseforge.renderer.base import PositionsCallback

logger = logging.getLogger(__name__)

# Rest orientation of each bone relative to its parent (0 hangs down).
REST_ANGLES: dict[JointKey, float] = {
    JointKey.TORSO: 180.0,
    JointKey.L_SHOULDER: 180.0,
    JointKey.R_SHOULDER: 180.0,
    JointKey.L_FOOT: -90.0,
    JointKey.R_FOOT: -90.0,
}

# Joints that pivot at their parent's pivot rather than at the end of its bone.
ATTACHED_AT_PIVOT: frozenset[JointKey] = frozenset({JointKey.TORSO})


class SkeletonRenderer:
    """Headless renderer computing joint placements.

    Parameters
    ----------
    base_unit:
        Head height in screen units; every bone length is a multiple of it.
    origin:
        Screen position of the root joint.
    body_rotation:
        World rotation added at the root.
    """

    def __init__(
        self,
        base_unit: float = 150.0,
        origin: Vector2D | None = None,
        body_rotation: float = 0.0,
        graph: JointGraph = SKELETON,
    ) -> None:
        self.base_unit = base_unit
        self.origin = origin or Vector2D(0.0, 0.0)
        self.body_rotation = body_rotation
        self.graph = graph
        self.frames_rendered = 0
        self.last_placements: dict[JointKey, JointPlacement] = {}

    def layout(self, pose: Pose, proportions: Proportions) -> dict[JointKey, JointPlacement]:
        """Placement of every joint for *pose*, root first."""
        root = self.graph.root
        placements = {
            root: JointPlacement(
                position=self.origin,
                rotation=self.body_rotation + REST_ANGLES.get(root, 0.0) + pose[root],
            ),
        }
        for joint in self.graph.descendants(root):
            parent = self.graph.parent(joint)
            assert parent is not None
            anchor = placements[parent]
            if joint in ATTACHED_AT_PIVOT:
                position = anchor.position
            else:
                length = bone_length(parent, proportions, self.base_unit)
                position = anchor.position + direction(anchor.rotation).scaled(length)
            rotation = anchor.rotation + REST_ANGLES.get(joint, 0.0) + pose[joint]
            placements[joint] = JointPlacement(position=position, rotation=rotation)
        return placements

    def render(
        self,
        pose: Pose,
        proportions: Proportions,
        on_positions_update: PositionsCallback | None = None,
    ) -> None:
        self.last_placements = self.layout(pose, proportions)
        self.frames_rendered += 1
        if on_positions_update is not None:
            on_positions_update(dict(self.last_placements))

    def end_effector(self, joint: JointKey, pose: Pose, proportions: Proportions) -> Vector2D:
        """Tip of the bone pivoted by *joint*."""
        placement = self.layout(pose, proportions)[joint]
        length = bone_length(joint, proportions, self.base_unit)
        return placement.position + direction(placement.rotation).scaled(length)
