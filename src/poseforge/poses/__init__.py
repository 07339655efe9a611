"""Built-in pose presets."""

from poseforge.poses.loader import available_poses, load, load_pose

__all__ = ["available_poses", "load", "load_pose"]
