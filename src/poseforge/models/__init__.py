"""PoseForge data models - pure Pydantic, no engine logic."""

from poseforge.models.enums import (
    BodyPart,
    ChainMode,
    Easing,
    JointKey,
    MotionStyle,
    PlaybackState,
    SelectionScope,
)
from poseforge.models.geometry import JointPlacement, Vector2D
from poseforge.models.history import HistorySnapshot, LogEntry
from poseforge.models.pose import (
    ChainBehavior,
    ChainBehaviors,
    PartScale,
    Pose,
    PosePreset,
    Proportions,
)
from poseforge.models.timeline import AnimationDocument, Keyframe, TimelineLoadError

__all__ = [
    "AnimationDocument",
    "BodyPart",
    "ChainBehavior",
    "ChainBehaviors",
    "ChainMode",
    "Easing",
    "HistorySnapshot",
    "JointKey",
    "JointPlacement",
    "Keyframe",
    "LogEntry",
    "MotionStyle",
    "PartScale",
    "PlaybackState",
    "Pose",
    "PosePreset",
    "Proportions",
    "SelectionScope",
    "TimelineLoadError",
    "Vector2D",
]
