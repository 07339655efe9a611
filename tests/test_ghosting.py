"""Tests for the drag preview shadow."""

import pytest

from poseforge.engine.ghosting import PreviewGhosting
from poseforge.engine.propagation import ChainPropagator
from poseforge.models import ChainBehavior, JointKey, Pose


def test_disabled_never_activates():
    ghosting = PreviewGhosting(enabled=False)
    ghosting.begin(Pose())
    assert not ghosting.active
    ghosting.update(Pose(waist=10.0))
    assert ghosting.working_pose(Pose()) == Pose()


def test_shadow_is_promoted_after_movement():
    ghosting = PreviewGhosting()
    ghosting.begin(Pose())
    assert ghosting.active
    ghosting.update(Pose(waist=10.0))
    assert ghosting.working_pose(Pose()) == Pose(waist=10.0)
    assert ghosting.ghost == Pose()
    assert ghosting.end() == Pose(waist=10.0)
    assert not ghosting.active


def test_release_without_movement_discards():
    ghosting = PreviewGhosting()
    ghosting.begin(Pose(neck=3.0))
    assert ghosting.end() is None
    assert ghosting.ghost is None


def test_intent_path_steps_and_opacity():
    ghosting = PreviewGhosting()
    propagator = ChainPropagator({JointKey.TORSO: ChainBehavior(bend=1.0)})
    ghosting.begin(Pose())
    ghosting.update(Pose(waist=50.0, torso=50.0))

    path = ghosting.intent_path(JointKey.WAIST, propagator.propagate)
    assert len(path) == 5
    assert [opacity for _, opacity in path] == pytest.approx([0.2, 0.3, 0.4, 0.5, 0.6])
    assert path[0][0].waist == pytest.approx(10.0)
    assert path[0][0].torso == pytest.approx(10.0)
    assert path[-1][0].torso == pytest.approx(50.0)


def test_intent_path_without_drag():
    ghosting = PreviewGhosting()
    assert ghosting.intent_path(JointKey.WAIST, ChainPropagator().propagate) == []
