"""Tests for eased pose transitions."""

import random

import pytest

from poseforge.engine.scheduler import ManualFrameScheduler
from poseforge.engine.transition import PoseTransition, snap_duration
from poseforge.models import MotionStyle, Pose


@pytest.fixture
def frames() -> list[Pose]:
    return []


@pytest.fixture
def transition(scheduler: ManualFrameScheduler, frames: list[Pose]) -> PoseTransition:
    return PoseTransition(scheduler, frames.append, random.Random(3))


@pytest.mark.parametrize(
    ("friction", "expected"), [(0.0, 50.0), (50.0, 400.0), (100.0, 750.0)],
)
def test_snap_duration(friction: float, expected: float) -> None:
    assert snap_duration(friction) == pytest.approx(expected)


def test_standard_eases_out_exponentially(
    transition: PoseTransition, scheduler: ManualFrameScheduler, frames: list[Pose],
):
    done: list[Pose] = []
    transition.start(Pose(), Pose(waist=90.0), 100.0, on_complete=done.append)
    assert transition.is_running
    scheduler.advance(16.0)
    assert frames[-1].waist == pytest.approx(0.0)
    scheduler.advance(50.0)
    assert frames[-1].waist == pytest.approx(90.0 * (1.0 - 2.0**-5))
    scheduler.advance(60.0)
    assert frames[-1] == Pose(waist=90.0)
    assert done == [Pose(waist=90.0)]
    assert not transition.is_running
    assert scheduler.pending == 0


def test_lotte_eases_out_cubically(
    transition: PoseTransition, scheduler: ManualFrameScheduler, frames: list[Pose],
):
    transition.start(Pose(), Pose(waist=90.0), 100.0, style=MotionStyle.LOTTE)
    scheduler.advance(0.0)
    scheduler.advance(50.0)
    assert frames[-1].waist == pytest.approx(78.75)


def test_transition_takes_shortest_arc(
    transition: PoseTransition, scheduler: ManualFrameScheduler, frames: list[Pose],
):
    transition.start(Pose(neck=170.0), Pose(neck=-170.0), 100.0, style=MotionStyle.LOTTE)
    scheduler.advance(0.0)
    scheduler.advance(50.0)
    assert frames[-1].neck == pytest.approx(170.0 + 20.0 * 0.875)


def test_clockwork_steps_and_jitters(
    transition: PoseTransition, scheduler: ManualFrameScheduler, frames: list[Pose],
):
    done: list[Pose] = []
    target = Pose(waist=92.0)
    transition.start(
        Pose(), target, 100.0, style=MotionStyle.CLOCKWORK, friction=0.0, on_complete=done.append,
    )
    scheduler.advance(0.0)
    scheduler.advance(50.0)
    assert frames[-1].waist % 5.0 == pytest.approx(0.0)

    scheduler.advance(60.0)  # first jitter frame
    assert transition.is_running
    assert abs(frames[-1].waist - 92.0) <= 1.5
    scheduler.advance(16.0)  # second jitter frame
    assert transition.is_running
    assert done == []
    scheduler.advance(16.0)  # settle
    assert frames[-1] == target
    assert done == [target]
    assert not transition.is_running


def test_clockwork_jitter_vanishes_at_full_friction(
    transition: PoseTransition, scheduler: ManualFrameScheduler, frames: list[Pose],
):
    target = Pose(l_knee=33.0)
    transition.start(Pose(), target, 10.0, style=MotionStyle.CLOCKWORK, friction=100.0)
    scheduler.run_frames(6, 16.0)
    assert all(pose.l_knee == pytest.approx(33.0) for pose in frames[-3:])


def test_zero_duration_completes_on_first_frame(
    transition: PoseTransition, scheduler: ManualFrameScheduler, frames: list[Pose],
):
    transition.start(Pose(), Pose(torso=12.0), 0.0)
    scheduler.advance(16.0)
    assert frames == [Pose(torso=12.0)]
    assert not transition.is_running


def test_cancel_stops_frames(
    transition: PoseTransition, scheduler: ManualFrameScheduler, frames: list[Pose],
):
    transition.start(Pose(), Pose(torso=12.0), 100.0)
    transition.cancel()
    assert not transition.is_running
    scheduler.advance(16.0)
    assert frames == []


def test_restart_replaces_running_transition(
    transition: PoseTransition, scheduler: ManualFrameScheduler, frames: list[Pose],
):
    transition.start(Pose(), Pose(torso=12.0), 100.0)
    transition.start(Pose(), Pose(neck=8.0), 0.0)
    assert scheduler.pending == 1
    scheduler.advance(16.0)
    assert frames == [Pose(neck=8.0)]
