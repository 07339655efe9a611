"""Enumerations used throughout PoseForge."""

from enum import StrEnum


class JointKey(StrEnum):
    WAIST = "waist"
    TORSO = "torso"
    COLLAR = "collar"
    NECK = "neck"
    L_SHOULDER = "l_shoulder"
    R_SHOULDER = "r_shoulder"
    L_ELBOW = "l_elbow"
    R_ELBOW = "r_elbow"
    L_HAND = "l_hand"
    R_HAND = "r_hand"
    L_HIP = "l_hip"
    R_HIP = "r_hip"
    L_KNEE = "l_knee"
    R_KNEE = "r_knee"
    L_FOOT = "l_foot"
    R_FOOT = "r_foot"
    L_TOE = "l_toe"
    R_TOE = "r_toe"

    @property
    def is_left(self) -> bool:
        return self.value.startswith("l_")


class BodyPart(StrEnum):
    HEAD = "head"
    COLLAR = "collar"
    TORSO = "torso"
    WAIST = "waist"
    L_UPPER_ARM = "l_upper_arm"
    L_LOWER_ARM = "l_lower_arm"
    L_HAND = "l_hand"
    R_UPPER_ARM = "r_upper_arm"
    R_LOWER_ARM = "r_lower_arm"
    R_HAND = "r_hand"
    L_UPPER_LEG = "l_upper_leg"
    L_LOWER_LEG = "l_lower_leg"
    L_FOOT = "l_foot"
    L_TOE = "l_toe"
    R_UPPER_LEG = "r_upper_leg"
    R_LOWER_LEG = "r_lower_leg"
    R_FOOT = "r_foot"
    R_TOE = "r_toe"


class Easing(StrEnum):
    LINEAR = "linear"
    EASE_OUT = "ease-out"
    EASE_IN_OUT = "ease-in-out"


class PlaybackState(StrEnum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class MotionStyle(StrEnum):
    STANDARD = "standard"
    CLOCKWORK = "clockwork"
    LOTTE = "lotte"


class SelectionScope(StrEnum):
    PART = "part"
    HIERARCHY = "hierarchy"
    FULL = "full"


class ChainMode(StrEnum):
    BEND = "bend"
    STRETCH = "stretch"
    LEAD = "lead"
