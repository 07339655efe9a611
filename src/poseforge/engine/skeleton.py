"""Static joint hierarchy and anatomy of the figure.

The hierarchy is declared once as an adjacency list and materialised into both
directions (children and parent) when the :class:`JointGraph` is built.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from poseforge.models.enums import BodyPart, JointKey, SelectionScope

if TYPE_CHECKING:
    from poseforge.models.pose import Proportions

# Parent -> children, in traversal order.  Waist and collar are the two
# multi-child branch points of the skeleton.
JOINT_ADJACENCY: list[tuple[JointKey, tuple[JointKey, ...]]] = [
    (JointKey.WAIST, (JointKey.TORSO, JointKey.L_HIP, JointKey.R_HIP)),
    (JointKey.TORSO, (JointKey.COLLAR,)),
    (JointKey.COLLAR, (JointKey.NECK, JointKey.L_SHOULDER, JointKey.R_SHOULDER)),
    (JointKey.L_SHOULDER, (JointKey.L_ELBOW,)),
    (JointKey.L_ELBOW, (JointKey.L_HAND,)),
    (JointKey.R_SHOULDER, (JointKey.R_ELBOW,)),
    (JointKey.R_ELBOW, (JointKey.R_HAND,)),
    (JointKey.L_HIP, (JointKey.L_KNEE,)),
    (JointKey.L_KNEE, (JointKey.L_FOOT,)),
    (JointKey.L_FOOT, (JointKey.L_TOE,)),
    (JointKey.R_HIP, (JointKey.R_KNEE,)),
    (JointKey.R_KNEE, (JointKey.R_FOOT,)),
    (JointKey.R_FOOT, (JointKey.R_TOE,)),
]

# The body part each joint pivots.
JOINT_TO_PART: dict[JointKey, BodyPart] = {
    JointKey.WAIST: BodyPart.WAIST,
    JointKey.TORSO: BodyPart.TORSO,
    JointKey.COLLAR: BodyPart.COLLAR,
    JointKey.NECK: BodyPart.HEAD,
    JointKey.L_SHOULDER: BodyPart.L_UPPER_ARM,
    JointKey.L_ELBOW: BodyPart.L_LOWER_ARM,
    JointKey.L_HAND: BodyPart.L_HAND,
    JointKey.R_SHOULDER: BodyPart.R_UPPER_ARM,
    JointKey.R_ELBOW: BodyPart.R_LOWER_ARM,
    JointKey.R_HAND: BodyPart.R_HAND,
    JointKey.L_HIP: BodyPart.L_UPPER_LEG,
    JointKey.L_KNEE: BodyPart.L_LOWER_LEG,
    JointKey.L_FOOT: BodyPart.L_FOOT,
    JointKey.L_TOE: BodyPart.L_TOE,
    JointKey.R_HIP: BodyPart.R_UPPER_LEG,
    JointKey.R_KNEE: BodyPart.R_LOWER_LEG,
    JointKey.R_FOOT: BodyPart.R_FOOT,
    JointKey.R_TOE: BodyPart.R_TOE,
}

# Unscaled part lengths in head-height units.
PART_LENGTHS: dict[BodyPart, float] = {
    BodyPart.HEAD: 1.0,
    BodyPart.COLLAR: 0.35,
    BodyPart.TORSO: 1.6,
    BodyPart.WAIST: 0.9,
    BodyPart.L_UPPER_ARM: 1.4,
    BodyPart.L_LOWER_ARM: 1.2,
    BodyPart.L_HAND: 0.5,
    BodyPart.R_UPPER_ARM: 1.4,
    BodyPart.R_LOWER_ARM: 1.2,
    BodyPart.R_HAND: 0.5,
    BodyPart.L_UPPER_LEG: 1.9,
    BodyPart.L_LOWER_LEG: 1.8,
    BodyPart.L_FOOT: 0.6,
    BodyPart.L_TOE: 0.3,
    BodyPart.R_UPPER_LEG: 1.9,
    BodyPart.R_LOWER_LEG: 1.8,
    BodyPart.R_FOOT: 0.6,
    BodyPart.R_TOE: 0.3,
}

# Pinned joint -> (upper joint, lower joint) of the two-bone chain IK drives.
IK_CHAINS: dict[JointKey, tuple[JointKey, JointKey]] = {
    JointKey.L_FOOT: (JointKey.L_HIP, JointKey.L_KNEE),
    JointKey.R_FOOT: (JointKey.R_HIP, JointKey.R_KNEE),
}


def bone_length(joint: JointKey, proportions: Proportions, base_unit: float) -> float:
    """Scaled length of the bone pivoted by *joint*."""
    part = JOINT_TO_PART[joint]
    return PART_LENGTHS[part] * base_unit * proportions[part].h


class JointGraph:
    """Immutable single-rooted tree over :class:`JointKey`.

    Parameters
    ----------
    adjacency:
        ``(parent, children)`` pairs.  Every joint in *joints* must appear
        exactly once as a child, except the root which must never appear.
    joints:
        The full joint set the graph has to cover.
    """

    def __init__(
        self,
        adjacency: Iterable[tuple[JointKey, Sequence[JointKey]]],
        joints: Iterable[JointKey] = tuple(JointKey),
    ) -> None:
        self._children: dict[JointKey, tuple[JointKey, ...]] = {}
        self._parent: dict[JointKey, JointKey] = {}
        all_joints = tuple(joints)

        for parent, children in adjacency:
            if parent in self._children:
                msg = f"joint {parent} declared twice in adjacency"
                raise ValueError(msg)
            self._children[parent] = tuple(children)
            for child in children:
                if child in self._parent:
                    msg = f"joint {child} has two parents: {self._parent[child]} and {parent}"
                    raise ValueError(msg)
                self._parent[child] = parent

        roots = [j for j in all_joints if j not in self._parent]
        if len(roots) != 1:
            msg = f"joint graph must have exactly one root, found {roots}"
            raise ValueError(msg)
        self._root = roots[0]

        reached = [self._root, *self.descendants(self._root)]
        if len(reached) != len(set(reached)) or set(reached) != set(all_joints):
            missing = sorted(set(all_joints) - set(reached))
            msg = f"joint graph is not a tree covering every joint (unreached: {missing})"
            raise ValueError(msg)
        self._joints = all_joints

    @property
    def root(self) -> JointKey:
        return self._root

    @property
    def joints(self) -> tuple[JointKey, ...]:
        return self._joints

    def children(self, joint: JointKey) -> tuple[JointKey, ...]:
        return self._children.get(joint, ())

    def parent(self, joint: JointKey) -> JointKey | None:
        return self._parent.get(joint)

    def ancestors(self, joint: JointKey) -> list[JointKey]:
        """Parents of *joint* from nearest to the root."""
        chain: list[JointKey] = []
        current = self._parent.get(joint)
        while current is not None:
            chain.append(current)
            current = self._parent.get(current)
        return chain

    def descendants(self, joint: JointKey) -> list[JointKey]:
        """All joints below *joint*, breadth-first."""
        result: list[JointKey] = []
        queue = deque(self.children(joint))
        seen: set[JointKey] = set()
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            result.append(current)
            queue.extend(self.children(current))
        return result

    def subtree(self, joint: JointKey) -> list[JointKey]:
        return [joint, *self.descendants(joint)]

    def selection(self, joint: JointKey, scope: SelectionScope) -> set[JointKey]:
        """Joints affected by a selection of *joint* at the given scope."""
        if scope is SelectionScope.PART:
            return {joint}
        if scope is SelectionScope.HIERARCHY:
            return set(self.subtree(joint))
        return set(self._joints)


SKELETON = JointGraph(JOINT_ADJACENCY)
