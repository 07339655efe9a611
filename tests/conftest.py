"""Shared fixtures for PoseForge tests."""

import os
import random
from pathlib import Path

import pytest

from poseforge.config import AppConfig, InteractionSettings
from poseforge.engine.editor import PoseEditor
from poseforge.engine.scheduler import ManualFrameScheduler
from poseforge.engine.timeline import AnimationTimeline
from poseforge.models import AnimationDocument, Keyframe, Pose
from poseforge.models.geometry import Vector2D
from poseforge.renderer import SkeletonRenderer


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's ~/.poseforge/config.toml and POSEFORGE_* env out of tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in list(os.environ):
        if name.startswith("POSEFORGE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def scheduler() -> ManualFrameScheduler:
    return ManualFrameScheduler()


@pytest.fixture
def renderer() -> SkeletonRenderer:
    return SkeletonRenderer(base_unit=100.0, origin=Vector2D(400.0, 100.0))


@pytest.fixture
def editor(scheduler: ManualFrameScheduler, renderer: SkeletonRenderer) -> PoseEditor:
    return PoseEditor(scheduler=scheduler, renderer=renderer, rng=random.Random(7))


@pytest.fixture
def direct_editor(scheduler: ManualFrameScheduler, renderer: SkeletonRenderer) -> PoseEditor:
    """Editor with ghosting off: drags write straight to the committed pose."""
    config = AppConfig(interaction=InteractionSettings(ghosting=False))
    return PoseEditor(config, scheduler=scheduler, renderer=renderer, rng=random.Random(7))


@pytest.fixture
def two_key_timeline() -> AnimationTimeline:
    return AnimationTimeline(
        [
            Keyframe(pose=Pose(), time=0.0),
            Keyframe(pose=Pose(waist=90.0), time=1000.0),
        ],
    )


@pytest.fixture
def sample_document() -> AnimationDocument:
    return AnimationDocument(
        name="wave",
        keyframes=[
            Keyframe(pose=Pose(), time=0.0),
            Keyframe(pose=Pose(r_shoulder=120.0, r_elbow=45.0), time=1000.0),
        ],
    )


@pytest.fixture
def sample_animation_file(sample_document: AnimationDocument, tmp_path: Path) -> Path:
    return sample_document.save(tmp_path / "wave.json")
