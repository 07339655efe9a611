"""Bundled pose presets.

Preset files spell out every joint of the figure.  A file that leaves one
out is rejected rather than letting the missing joint fall back to 0.
Names are matched loosely, so ``"T-Pose"``, ``"t_pose"`` and
``"t_pose.json"`` all find the same file.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from poseforge.models.enums import JointKey
from poseforge.models.pose import Pose, PosePreset

logger = logging.getLogger(__name__)

_POSES_DIR = Path(__file__).resolve().parent


def available_poses() -> list[str]:
    """Return the sorted preset keys accepted by :func:`load`."""
    return sorted(p.stem for p in _POSES_DIR.glob("*.json"))


def _preset_key(name: str) -> str:
    return name.strip().removesuffix(".json").lower().replace("-", "_").replace(" ", "_")


@lru_cache(maxsize=32)
def load(name: str) -> PosePreset:
    """Load a preset by key or display name.

    Raises
    ------
    FileNotFoundError
        If no preset matches *name*.
    ValueError
        If the preset file does not cover every joint.
    """
    key = _preset_key(name)
    path = _POSES_DIR / f"{key}.json"
    if not path.is_file():
        msg = f"Pose preset not found: {name!r} (available: {', '.join(available_poses())})"
        raise FileNotFoundError(msg)

    data = json.loads(path.read_text(encoding="utf-8"))
    missing = sorted(set(JointKey) - set(data.get("pose", {})))
    if missing:
        msg = f"Pose preset {key!r} does not set: {', '.join(missing)}"
        raise ValueError(msg)

    preset = PosePreset.model_validate(data)
    logger.debug("Loaded pose preset '%s' from %s", preset.name, path.name)
    return preset


def load_pose(name: str) -> Pose:
    """Shortcut for ``load(name).pose``."""
    return load(name).pose
