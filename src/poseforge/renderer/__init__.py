"""Renderers consumed by the pose engine."""

from poseforge.renderer.base import PositionsCallback, Renderer
from poseforge.renderer.skeleton import SkeletonRenderer

__all__ = [
    "PositionsCallback",
    "Renderer",
    "SkeletonRenderer",
]
