"""Tests for chain-reaction propagation."""

from collections import Counter

import pytest

from poseforge.engine.propagation import ChainPropagator, propagate
from poseforge.models import ChainBehavior, JointKey, Pose

BEND = ChainBehavior(bend=1.0)


def test_no_behaviors_moves_nothing():
    base = Pose(l_knee=10.0)
    result = propagate(JointKey.L_HIP, 25.0, base, {})
    assert result == base


def test_delta_scales_down_the_chain():
    behaviors = {
        JointKey.L_KNEE: ChainBehavior(bend=1.0),
        JointKey.L_FOOT: ChainBehavior(bend=0.5),
    }
    result = propagate(JointKey.L_HIP, 20.0, Pose(l_foot=3.0), behaviors)
    assert result.l_knee == pytest.approx(20.0)
    assert result.l_foot == pytest.approx(3.0 + 10.0)
    assert result.l_toe == 0.0
    assert result.l_hip == 0.0


def test_bend_and_stretch_are_summed():
    behaviors = {JointKey.L_ELBOW: ChainBehavior(bend=1.0, stretch=-0.25)}
    result = propagate(JointKey.L_SHOULDER, 40.0, Pose(), behaviors)
    assert result.l_elbow == pytest.approx(30.0)


def test_zero_factor_decouples_subtree():
    behaviors = {
        JointKey.L_KNEE: ChainBehavior(bend=1.0, stretch=-1.0),
        JointKey.L_FOOT: BEND,
        JointKey.L_TOE: BEND,
    }
    result = propagate(JointKey.L_HIP, 30.0, Pose(), behaviors)
    assert result.l_knee == 0.0
    assert result.l_foot == 0.0
    assert result.l_toe == 0.0


def test_branching_reaches_every_child():
    behaviors = {joint: BEND for joint in JointKey}
    result = propagate(JointKey.COLLAR, 15.0, Pose(), behaviors)
    for joint in (
        JointKey.NECK,
        JointKey.L_SHOULDER,
        JointKey.R_SHOULDER,
        JointKey.L_ELBOW,
        JointKey.R_HAND,
    ):
        assert result[joint] == pytest.approx(15.0)
    assert result.torso == 0.0
    assert result.l_hip == 0.0


def test_base_pose_untouched():
    base = Pose()
    propagate(JointKey.WAIST, 45.0, base, {joint: BEND for joint in JointKey})
    assert base == Pose()


class _CyclicGraph:
    """waist -> torso -> collar -> waist, counting lookups."""

    def __init__(self) -> None:
        self.lookups: Counter[JointKey] = Counter()
        self._edges = {
            JointKey.WAIST: (JointKey.TORSO,),
            JointKey.TORSO: (JointKey.COLLAR, JointKey.WAIST),
            JointKey.COLLAR: (JointKey.WAIST, JointKey.TORSO),
        }

    def children(self, joint: JointKey) -> tuple[JointKey, ...]:
        self.lookups[joint] += 1
        return self._edges.get(joint, ())


def test_cyclic_graph_visits_each_joint_once():
    graph = _CyclicGraph()
    behaviors = {joint: BEND for joint in JointKey}
    result = propagate(JointKey.WAIST, 10.0, Pose(), behaviors, graph)
    assert result.torso == pytest.approx(10.0)
    assert result.collar == pytest.approx(10.0)
    assert result.waist == 0.0
    assert all(count == 1 for count in graph.lookups.values())


# ---------------------------------------------------------------------------
# ChainPropagator
# ---------------------------------------------------------------------------


def test_rotate_sets_joint_and_carries_delta():
    propagator = ChainPropagator({JointKey.R_ELBOW: BEND})
    result = propagator.rotate(Pose(r_shoulder=10.0, r_elbow=5.0), JointKey.R_SHOULDER, 40.0)
    assert result.r_shoulder == 40.0
    assert result.r_elbow == pytest.approx(35.0)


def test_nudge_adds_delta():
    propagator = ChainPropagator({JointKey.R_ELBOW: ChainBehavior(stretch=-1.0)})
    result = propagator.nudge(Pose(r_shoulder=10.0), JointKey.R_SHOULDER, 5.0)
    assert result.r_shoulder == 15.0
    assert result.r_elbow == pytest.approx(-5.0)


def test_behavior_defaults_to_uncoupled():
    propagator = ChainPropagator()
    assert propagator.behavior(JointKey.NECK) == ChainBehavior()
