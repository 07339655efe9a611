"""Pose, proportion and chain-coupling models for the articulated figure."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from pydantic import BaseModel, ConfigDict, Field

from poseforge.models.enums import BodyPart, ChainMode, JointKey


class Pose(BaseModel):
    """Signed rotation offset (degrees) for every joint of the figure.

    The model is frozen: edits always produce a new ``Pose`` so that snapshots
    handed to history, keyframes or renderers can never change underneath them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    waist: float = 0.0
    torso: float = 0.0
    collar: float = 0.0
    neck: float = 0.0
    l_shoulder: float = 0.0
    r_shoulder: float = 0.0
    l_elbow: float = 0.0
    r_elbow: float = 0.0
    l_hand: float = 0.0
    r_hand: float = 0.0
    l_hip: float = 0.0
    r_hip: float = 0.0
    l_knee: float = 0.0
    r_knee: float = 0.0
    l_foot: float = 0.0
    r_foot: float = 0.0
    l_toe: float = 0.0
    r_toe: float = 0.0

    def __getitem__(self, key: JointKey | str) -> float:
        return getattr(self, JointKey(key).value)

    def items(self) -> Iterator[tuple[JointKey, float]]:
        for key in JointKey:
            yield key, getattr(self, key.value)

    def as_dict(self) -> dict[JointKey, float]:
        return dict(self.items())

    def updated(self, changes: Mapping[JointKey, float]) -> Pose:
        """Return a copy with the given joints replaced."""
        if not changes:
            return self
        return self.model_copy(
            update={JointKey(key).value: float(value) for key, value in changes.items()},
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, float]) -> Pose:
        return cls.model_validate(dict(data))


class PartScale(BaseModel):
    """Width/height scale factors for one body part."""

    model_config = ConfigDict(frozen=True)

    w: float = Field(default=1.0, gt=0.0)
    h: float = Field(default=1.0, gt=0.0)


class Proportions(BaseModel):
    """Per-body-part scale factors; independent of the pose."""

    model_config = ConfigDict(frozen=True)

    head: PartScale = Field(default_factory=PartScale)
    collar: PartScale = Field(default_factory=PartScale)
    torso: PartScale = Field(default_factory=PartScale)
    waist: PartScale = Field(default_factory=PartScale)
    l_upper_arm: PartScale = Field(default_factory=PartScale)
    l_lower_arm: PartScale = Field(default_factory=PartScale)
    l_hand: PartScale = Field(default_factory=PartScale)
    r_upper_arm: PartScale = Field(default_factory=PartScale)
    r_lower_arm: PartScale = Field(default_factory=PartScale)
    r_hand: PartScale = Field(default_factory=PartScale)
    l_upper_leg: PartScale = Field(default_factory=PartScale)
    l_lower_leg: PartScale = Field(default_factory=PartScale)
    l_foot: PartScale = Field(default_factory=PartScale)
    l_toe: PartScale = Field(default_factory=PartScale)
    r_upper_leg: PartScale = Field(default_factory=PartScale)
    r_lower_leg: PartScale = Field(default_factory=PartScale)
    r_foot: PartScale = Field(default_factory=PartScale)
    r_toe: PartScale = Field(default_factory=PartScale)

    def __getitem__(self, part: BodyPart | str) -> PartScale:
        return getattr(self, BodyPart(part).value)

    def with_scale(self, part: BodyPart | str, axis: str, value: float) -> Proportions:
        """Return a copy with one axis (``"w"`` or ``"h"``) of one part changed."""
        if axis not in ("w", "h"):
            msg = f"axis must be 'w' or 'h', got {axis!r}"
            raise ValueError(msg)
        key = BodyPart(part).value
        current = getattr(self, key)
        scale = PartScale.model_validate({**current.model_dump(), axis: value})
        return self.model_copy(update={key: scale})


class ChainBehavior(BaseModel):
    """How a joint reacts when its parent is rotated.

    ``bend`` and ``stretch`` are signed multipliers applied to the parent's
    delta; they are summed into a single coupling factor.  ``lead`` means that
    dragging this joint swings its parent instead.
    """

    model_config = ConfigDict(frozen=True)

    bend: float = 0.0
    stretch: float = 0.0
    lead: bool = False

    @property
    def total_factor(self) -> float:
        return self.bend + self.stretch

    def toggled(self, mode: ChainMode) -> ChainBehavior:
        """Flip one coupling mode on or off (bend 0<->1, stretch 0<->-1)."""
        if mode is ChainMode.BEND:
            return self.model_copy(update={"bend": 0.0 if self.bend else 1.0})
        if mode is ChainMode.STRETCH:
            return self.model_copy(update={"stretch": 0.0 if self.stretch else -1.0})
        return self.model_copy(update={"lead": not self.lead})


ChainBehaviors = Mapping[JointKey, ChainBehavior]


class PosePreset(BaseModel):
    """A named, bundled pose such as the T-pose."""

    name: str
    description: str = ""
    pose: Pose = Field(default_factory=Pose)
