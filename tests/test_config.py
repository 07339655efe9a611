"""Tests for configuration system."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from poseforge.config import (
    AppConfig,
    HistorySettings,
    IKSettings,
    InteractionSettings,
    TimelineSettings,
    load_config,
)
from poseforge.models import MotionStyle


def test_timeline_settings_defaults():
    t = TimelineSettings()
    assert t.loop_duration_ms == 1000.0
    assert t.min_segment_ms == 100.0
    assert t.keyframe_spacing_ms == 1000.0


def test_history_settings_defaults():
    h = HistorySettings()
    assert h.undo_limit == 50
    assert h.log_display_limit == 100


def test_interaction_settings_defaults():
    i = InteractionSettings()
    assert i.joint_friction == 50.0
    assert i.ghosting is True
    assert i.motion_style == MotionStyle.STANDARD
    assert i.floor_y == 600.0
    assert i.floor_tolerance == 10.0


def test_ik_settings_defaults():
    k = IKSettings()
    assert k.epsilon == pytest.approx(1e-3)
    assert k.base_unit_height == 150.0


def test_app_config_defaults():
    config = AppConfig()
    assert config.config_dir.name == ".poseforge"
    assert config.timeline.loop_duration_ms == 1000.0


@pytest.mark.parametrize("bad", [-1.0, 100.5, 250.0])
def test_joint_friction_rejected(bad: float) -> None:
    with pytest.raises(ValidationError):
        InteractionSettings(joint_friction=bad)


@pytest.mark.parametrize("good", [0.0, 50.0, 100.0])
def test_joint_friction_accepted(good: float) -> None:
    assert InteractionSettings(joint_friction=good).joint_friction == good


def test_undo_limit_must_be_positive():
    with pytest.raises(ValidationError):
        HistorySettings(undo_limit=0)


def test_env_override(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("POSEFORGE_INTERACTION__JOINT_FRICTION", "80")
    monkeypatch.setenv("POSEFORGE_INTERACTION__MOTION_STYLE", "clockwork")
    config = load_config()
    assert config.interaction.joint_friction == 80.0
    assert config.interaction.motion_style == MotionStyle.CLOCKWORK


def test_toml_config_file():
    config_dir = Path.home() / ".poseforge"
    config_dir.mkdir(parents=True)
    (config_dir / "config.toml").write_text(
        "[timeline]\nloop_duration_ms = 400.0\n\n[history]\nundo_limit = 5\n",
    )
    config = load_config()
    assert config.timeline.loop_duration_ms == 400.0
    assert config.history.undo_limit == 5
