"""Immutable history snapshot and recording-log models."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from poseforge.models.pose import Pose, Proportions


def now_ms() -> float:
    return time.time() * 1000.0


class HistorySnapshot(BaseModel):
    """Full editable state captured at an interaction boundary."""

    model_config = ConfigDict(frozen=True)

    pose: Pose
    proportions: Proportions
    timestamp: float = Field(default_factory=now_ms)
    label: str | None = None


class LogEntry(BaseModel):
    """One line of the recording log; pose data is present for labeled snapshots."""

    model_config = ConfigDict(frozen=True)

    timestamp: float = Field(default_factory=now_ms)
    label: str | None = None
    pose: Pose | None = None
    proportions: Proportions | None = None

    @property
    def is_snapshot(self) -> bool:
        return self.pose is not None
