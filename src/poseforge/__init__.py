"""PoseForge - 2D figure posing and keyframe animation engine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("poseforge")
except PackageNotFoundError:
    __version__ = "unknown"
