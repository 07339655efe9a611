"""Application configuration with pydantic-settings + TOML."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource

from poseforge.models.enums import MotionStyle


def _default_config_dir() -> Path:
    return Path.home() / ".poseforge"


class TimelineSettings(BaseSettings):
    """Keyframe timing rules."""

    loop_duration_ms: float = Field(default=1000.0, gt=0)
    min_segment_ms: float = Field(default=100.0, ge=0)
    keyframe_spacing_ms: float = Field(default=1000.0, gt=0)


class HistorySettings(BaseSettings):
    """Undo depth and recording-log display size."""

    undo_limit: int = Field(default=50, gt=0)
    log_display_limit: int = Field(default=100, gt=0)


class InteractionSettings(BaseSettings):
    """Drag feel, ghosting and floor pinning."""

    joint_friction: float = Field(default=50.0, ge=0, le=100)
    ghosting: bool = True
    motion_style: MotionStyle = MotionStyle.STANDARD
    floor_y: float = 600.0
    floor_tolerance: float = Field(default=10.0, ge=0)
    calibration_ms: float = Field(default=500.0, ge=0)
    onion_before: int = Field(default=1, ge=0)
    onion_after: int = Field(default=1, ge=0)


class IKSettings(BaseSettings):
    """Inverse kinematics and figure scale."""

    epsilon: float = Field(default=1e-3, gt=0)
    base_unit_height: float = Field(default=150.0, gt=0)


class AppConfig(BaseSettings):
    """Root application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POSEFORGE_",
        env_nested_delimiter="__",
    )

    config_dir: Path = Field(default_factory=_default_config_dir)
    timeline: TimelineSettings = Field(default_factory=TimelineSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    interaction: InteractionSettings = Field(default_factory=InteractionSettings)
    ik: IKSettings = Field(default_factory=IKSettings)

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        toml_path = _default_config_dir() / "config.toml"
        sources = (
            kwargs.get("init_settings"),
            kwargs.get("env_settings"),
        )
        if toml_path.exists():
            sources = (*sources, TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return (*sources, kwargs.get("dotenv_settings"), kwargs.get("file_secret_settings"))


def load_config() -> AppConfig:
    """Load application config from env vars and ``~/.poseforge/config.toml``."""
    return AppConfig()
