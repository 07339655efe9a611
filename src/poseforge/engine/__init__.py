"""Pose engine: skeleton, propagation, IK, timeline, playback and editing state."""

from poseforge.engine.editor import PoseEditor
from poseforge.engine.ghosting import PreviewGhosting
from poseforge.engine.history import HistoryStore
from poseforge.engine.ik import IKSolution, TwoBoneIKSolver
from poseforge.engine.playback import PlaybackScheduler
from poseforge.engine.propagation import ChainPropagator, propagate
from poseforge.engine.scheduler import AsyncioFrameScheduler, FrameScheduler, ManualFrameScheduler
from poseforge.engine.skeleton import SKELETON, JointGraph
from poseforge.engine.timeline import AnimationTimeline
from poseforge.engine.transition import PoseTransition, snap_duration

__all__ = [
    "SKELETON",
    "AnimationTimeline",
    "AsyncioFrameScheduler",
    "ChainPropagator",
    "FrameScheduler",
    "HistoryStore",
    "IKSolution",
    "JointGraph",
    "ManualFrameScheduler",
    "PlaybackScheduler",
    "PoseEditor",
    "PoseTransition",
    "PreviewGhosting",
    "TwoBoneIKSolver",
    "propagate",
    "snap_duration",
]
