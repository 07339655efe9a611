"""Tests for the two-bone IK solver."""

import math

import pytest

from poseforge.engine.ik import TwoBoneIKSolver, direction, heading
from poseforge.models import Vector2D

ROOT = Vector2D(0.0, 0.0)


def test_direction_convention():
    down = direction(0.0)
    assert down.x == pytest.approx(0.0, abs=1e-12)
    assert down.y == pytest.approx(1.0)
    right = direction(-90.0)
    assert right.x == pytest.approx(1.0)
    assert right.y == pytest.approx(0.0, abs=1e-12)


def test_heading_inverts_direction():
    for angle in (-135.0, -90.0, 0.0, 30.0, 90.0):
        assert heading(direction(angle)) == pytest.approx(angle)


def test_reachable_target_is_hit():
    solver = TwoBoneIKSolver()
    target = Vector2D(0.0, math.sqrt(2.0))
    solution = solver.solve(target, ROOT, 1.0, 1.0)
    assert solution.reached
    assert not solution.degenerate
    assert solution.angle1 == pytest.approx(-45.0)
    assert solution.angle2 == pytest.approx(90.0)
    _, end = solver.forward(ROOT, 1.0, 1.0, solution)
    assert end.x == pytest.approx(target.x, abs=1e-9)
    assert end.y == pytest.approx(target.y)


def test_mirrored_bends_the_other_way():
    solver = TwoBoneIKSolver()
    target = Vector2D(0.0, math.sqrt(2.0))
    plain = solver.solve(target, ROOT, 1.0, 1.0)
    mirrored = solver.solve(target, ROOT, 1.0, 1.0, mirrored=True)
    assert mirrored.angle1 == pytest.approx(-plain.angle1)
    assert mirrored.angle2 == pytest.approx(-plain.angle2)
    mid, end = solver.forward(ROOT, 1.0, 1.0, mirrored)
    assert mid.x < 0.0
    assert end.y == pytest.approx(target.y)


def test_unreachable_target_clamps_to_full_extension():
    solver = TwoBoneIKSolver()
    solution = solver.solve(Vector2D(0.0, 5.0), ROOT, 1.0, 1.0)
    assert not solution.reached
    _, end = solver.forward(ROOT, 1.0, 1.0, solution)
    assert ROOT.distance_to(end) == pytest.approx(2.0 - solver.epsilon, abs=1e-9)
    assert end.x == pytest.approx(0.0, abs=1e-6)


def test_far_target_stays_within_chain_length():
    solver = TwoBoneIKSolver()
    target = Vector2D(300.0, 400.0)
    solution = solver.solve(target, ROOT, 100.0, 100.0)
    assert not solution.reached
    _, end = solver.forward(ROOT, 100.0, 100.0, solution)
    reach = ROOT.distance_to(end)
    assert reach <= 200.0
    assert reach == pytest.approx(200.0 - solver.epsilon, abs=1e-6)
    # fully extended straight at the target
    assert end.x / reach == pytest.approx(0.6, abs=1e-4)
    assert end.y / reach == pytest.approx(0.8, abs=1e-4)


def test_too_close_target_clamps_to_minimum_reach():
    solver = TwoBoneIKSolver()
    solution = solver.solve(Vector2D(0.0, 0.5), ROOT, 2.0, 1.0)
    assert not solution.reached
    _, end = solver.forward(ROOT, 2.0, 1.0, solution)
    assert ROOT.distance_to(end) == pytest.approx(1.0, abs=1e-6)


def test_target_on_root_is_degenerate():
    solver = TwoBoneIKSolver(neutral=(0.0, 0.0))
    solution = solver.solve(Vector2D(0.0, 0.0001), ROOT, 1.0, 1.0)
    assert solution.degenerate
    assert (solution.angle1, solution.angle2) == (0.0, 0.0)


def test_parent_rotation_is_relative():
    solver = TwoBoneIKSolver()
    target = Vector2D(1.2, 0.8)
    root = Vector2D(0.5, -0.3)
    solution = solver.solve(target, root, 1.0, 0.9, parent_world_rotation=30.0)
    _, end = solver.forward(root, 1.0, 0.9, solution, parent_world_rotation=30.0)
    assert end.x == pytest.approx(target.x)
    assert end.y == pytest.approx(target.y)


def test_angles_are_wrapped():
    solver = TwoBoneIKSolver()
    solution = solver.solve(Vector2D(0.0, -1.5), ROOT, 1.0, 1.0, parent_world_rotation=170.0)
    assert -180.0 <= solution.angle1 < 180.0
    assert -180.0 <= solution.angle2 < 180.0
