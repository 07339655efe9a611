"""Keyframe and animation document models with save/load."""

from __future__ import annotations

import json
from pathlib import Path
from uuid import uuid4

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from poseforge.models.enums import Easing
from poseforge.models.pose import Pose


class TimelineLoadError(ValueError):
    """Raised when an animation file cannot be loaded."""


def new_keyframe_id(prefix: str = "kf") -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


class Keyframe(BaseModel):
    """A full pose pinned to a point on the timeline."""

    id: str = Field(default_factory=new_keyframe_id)
    pose: Pose
    time: float = Field(default=0.0, ge=0.0)  # ms
    easing: Easing = Easing.LINEAR


class AnimationDocument(BaseModel):
    """An ordered keyframe list in its canonical interchange form."""

    name: str = "untitled"
    version: str = "0.1.0"
    keyframes: list[Keyframe] = Field(default_factory=list)

    def save(self, path: Path) -> Path:
        """Save the animation to a JSON file."""
        save_path = path if path.suffix == ".json" else path / "animation.json"
        save_path.parent.mkdir(parents=True, exist_ok=True)
        save_path.write_text(self.model_dump_json(indent=2))
        return save_path

    @classmethod
    def load(cls, path: Path) -> AnimationDocument:
        """Load an animation from a JSON file (or a directory holding ``animation.json``)."""
        if path.is_dir():
            path = path / "animation.json"
        try:
            text = path.read_text()
        except FileNotFoundError:
            msg = f"animation file not found: {path}"
            raise TimelineLoadError(msg) from None
        except PermissionError:
            msg = f"permission denied reading animation file: {path}"
            raise TimelineLoadError(msg) from None
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"animation file contains invalid JSON: {exc}"
            raise TimelineLoadError(msg) from None
        # A bare keyframe list is accepted as well as the wrapped document.
        if isinstance(data, list):
            data = {"name": path.stem, "keyframes": data}
        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            msg = f"animation file has invalid structure: {exc}"
            raise TimelineLoadError(msg) from None
