"""Chain-reaction forward kinematics: coupling a joint's rotation to its descendants."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping
from typing import Protocol

from poseforge.engine.skeleton import SKELETON
from poseforge.models.enums import JointKey
from poseforge.models.pose import ChainBehavior, Pose

logger = logging.getLogger(__name__)

_UNCOUPLED = ChainBehavior()


class ChildLookup(Protocol):
    """Anything that can list the children of a joint."""

    def children(self, joint: JointKey) -> tuple[JointKey, ...]: ...


def propagate(
    start_joint: JointKey,
    delta: float,
    base_pose: Pose,
    behaviors: Mapping[JointKey, ChainBehavior],
    graph: ChildLookup = SKELETON,
) -> Pose:
    """Spread *delta* from *start_joint* to its descendants.

    Traversal is breadth-first from the start joint's children.  Each child
    receives ``parent_delta * (bend + stretch)``; a child whose total factor is
    zero is a decoupling point and its subtree is left untouched.  A joint is
    visited at most once, so the walk terminates even on a cyclic coupling
    graph.  *base_pose* itself is never modified.

    Returns
    -------
    Pose
        A new pose with the descendant deltas applied.  The start joint keeps
        whatever value *base_pose* holds for it.
    """
    changes: dict[JointKey, float] = {}
    visited: set[JointKey] = {start_joint}
    queue: deque[tuple[JointKey, float]] = deque([(start_joint, delta)])

    while queue:
        current, current_delta = queue.popleft()
        for child in graph.children(current):
            if child in visited:
                continue
            visited.add(child)
            factor = behaviors.get(child, _UNCOUPLED).total_factor
            if factor == 0:
                continue
            child_delta = current_delta * factor
            changes[child] = changes.get(child, base_pose[child]) + child_delta
            queue.append((child, child_delta))

    if changes:
        logger.debug("Propagated %.2f from %s to %d joints", delta, start_joint, len(changes))
    return base_pose.updated(changes)


class ChainPropagator:
    """Propagation bound to one coupling configuration and joint graph."""

    def __init__(
        self,
        behaviors: Mapping[JointKey, ChainBehavior] | None = None,
        graph: ChildLookup = SKELETON,
    ) -> None:
        self.behaviors: dict[JointKey, ChainBehavior] = dict(behaviors or {})
        self.graph = graph

    def behavior(self, joint: JointKey) -> ChainBehavior:
        return self.behaviors.get(joint, _UNCOUPLED)

    def propagate(self, start_joint: JointKey, delta: float, base_pose: Pose) -> Pose:
        return propagate(start_joint, delta, base_pose, self.behaviors, self.graph)

    def rotate(self, base_pose: Pose, joint: JointKey, new_value: float) -> Pose:
        """Set *joint* to *new_value* and carry the resulting delta down the chain."""
        delta = new_value - base_pose[joint]
        return self.propagate(joint, delta, base_pose.updated({joint: new_value}))

    def nudge(self, base_pose: Pose, joint: JointKey, delta: float) -> Pose:
        """Add *delta* to *joint* and propagate it."""
        return self.rotate(base_pose, joint, base_pose[joint] + delta)
