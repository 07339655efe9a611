"""The pose editor: one explicit state object behind every interaction.

All figure state (committed pose, proportions, coupling, pins, keyframes,
history) lives here and changes only through the methods below.  The
committed pose has a single writer at a time: interactive edits are refused
while playback or a transition owns it.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from poseforge.config import AppConfig
from poseforge.engine.angles import clamp_rotation, shortest_delta
from poseforge.engine.ghosting import PreviewGhosting
from poseforge.engine.history import HistoryStore
from poseforge.engine.ik import TwoBoneIKSolver, heading
from poseforge.engine.playback import PlaybackScheduler
from poseforge.engine.propagation import ChainPropagator
from poseforge.engine.scheduler import ManualFrameScheduler
from poseforge.engine.skeleton import IK_CHAINS, SKELETON, JointGraph, bone_length
from poseforge.engine.timeline import AnimationTimeline
from poseforge.engine.transition import PoseTransition, snap_duration
from poseforge.models.enums import BodyPart, ChainMode, Easing, JointKey, SelectionScope
from poseforge.models.geometry import JointPlacement, Vector2D
from poseforge.models.history import HistorySnapshot, LogEntry
from poseforge.models.pose import ChainBehavior, Pose, Proportions
from poseforge.models.timeline import AnimationDocument

if TYPE_CHECKING:
    import random
    from collections.abc import Mapping
    from typing import Any

    from poseforge.engine.scheduler import FrameScheduler
    from poseforge.renderer.base import Renderer

logger = logging.getLogger(__name__)

FLOOR_PIN_JOINTS = frozenset({JointKey.L_FOOT, JointKey.R_FOOT, JointKey.L_TOE, JointKey.R_TOE})


class PoseEditor:
    """Framework-free engine state with well-defined mutation entry points.

    Parameters
    ----------
    config:
        Engine settings; defaults are loaded when omitted.
    scheduler:
        Display-refresh source driving playback, transitions and the display
        loop.  A :class:`ManualFrameScheduler` is used when omitted.
    renderer:
        Optional renderer; its placement feedback feeds IK and lead drags.
    initial_pose:
        Starting committed pose (T-pose when omitted).
    rng:
        Random source for clockwork jitter.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        scheduler: FrameScheduler | None = None,
        renderer: Renderer | None = None,
        initial_pose: Pose | None = None,
        proportions: Proportions | None = None,
        behaviors: Mapping[JointKey, ChainBehavior] | None = None,
        graph: JointGraph = SKELETON,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.graph = graph
        self.scheduler = scheduler or ManualFrameScheduler()
        self.renderer = renderer

        self._pose = initial_pose or Pose()
        self._proportions = proportions or Proportions()

        timeline_cfg = self.config.timeline
        interaction = self.config.interaction
        self.propagator = ChainPropagator(behaviors, graph)
        self.ik = TwoBoneIKSolver(epsilon=self.config.ik.epsilon)
        self.timeline = AnimationTimeline(
            loop_duration=timeline_cfg.loop_duration_ms,
            min_segment=timeline_cfg.min_segment_ms,
            spacing=timeline_cfg.keyframe_spacing_ms,
        )
        self.playback = PlaybackScheduler(self.timeline, self.scheduler, self._apply_playback_pose)
        self.transition = PoseTransition(self.scheduler, self._apply_transition_pose, rng)
        self.history = HistoryStore(
            limit=self.config.history.undo_limit,
            display_limit=self.config.history.log_display_limit,
        )
        self.ghosting = PreviewGhosting(enabled=interaction.ghosting)

        self.joint_friction = interaction.joint_friction
        self.motion_style = interaction.motion_style
        self.pins: dict[JointKey, Vector2D] = {}
        self.placements: dict[JointKey, JointPlacement] = {}
        self.selected_keyframe: int | None = None
        self.selected_log: int | None = None
        self.dragging: JointKey | None = None
        self._sliding = False
        self._proportion_edit: tuple[BodyPart, str] | None = None
        self.calibrated = False
        self._last_pointer_x = 0.0
        self._display_handle: int | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def pose(self) -> Pose:
        """The committed pose."""
        return self._pose

    @property
    def proportions(self) -> Proportions:
        return self._proportions

    @property
    def behaviors(self) -> dict[JointKey, ChainBehavior]:
        return dict(self.propagator.behaviors)

    @property
    def display_pose(self) -> Pose:
        """What the live figure shows: the drag shadow if any, else the committed pose."""
        return self.ghosting.working_pose(self._pose)

    @property
    def ghost_pose(self) -> Pose | None:
        """Faint pose behind the live figure during a drag or transition."""
        if self.ghosting.active:
            return self.ghosting.ghost
        if self.transition.is_running:
            return self.transition.start_pose
        return None

    @property
    def is_playing(self) -> bool:
        return self.playback.is_playing

    @property
    def is_transitioning(self) -> bool:
        return self.transition.is_running

    @property
    def edits_locked(self) -> bool:
        return self.is_playing or self.is_transitioning

    def snapshot(self, label: str | None = None) -> HistorySnapshot:
        return HistorySnapshot(pose=self._pose, proportions=self._proportions, label=label)

    def _commit(self, pose: Pose) -> None:
        self._pose = pose
        if self.selected_keyframe is not None and not self.edits_locked and self.dragging is None:
            self.timeline.set_pose(self.selected_keyframe, pose)

    def _apply_playback_pose(self, pose: Pose) -> None:
        self._pose = pose

    def _apply_transition_pose(self, pose: Pose) -> None:
        if self.transition.is_running:
            self._pose = pose
        else:
            self._commit(pose)

    def _write(self, pose: Pose) -> None:
        if self.ghosting.active:
            self.ghosting.update(pose)
        else:
            self._commit(pose)

    # ------------------------------------------------------------------
    # Renderer feedback
    # ------------------------------------------------------------------

    def render(self) -> None:
        """Hand the current display pose to the renderer."""
        if self.renderer is not None:
            self.renderer.render(self.display_pose, self._proportions, self.on_positions_update)

    def on_positions_update(self, placements: Mapping[JointKey, JointPlacement]) -> None:
        self.placements = dict(placements)

    def start_display(self) -> None:
        """Render once per frame until :meth:`stop_display`."""
        if self._display_handle is None:
            self._display_handle = self.scheduler.request_frame(self._display_frame)

    def stop_display(self) -> None:
        if self._display_handle is not None:
            self.scheduler.cancel(self._display_handle)
            self._display_handle = None

    def _display_frame(self, _timestamp: float) -> None:
        self.render()
        self._display_handle = self.scheduler.request_frame(self._display_frame)

    # ------------------------------------------------------------------
    # Direct manipulation
    # ------------------------------------------------------------------

    def begin_drag(self, joint: JointKey, pointer_x: float) -> bool:
        """Start dragging *joint*; snapshots history and opens the preview."""
        if self.edits_locked or self.dragging is not None:
            return False
        self.save_to_history()
        self.record_snapshot(f"START_DRAG_{joint}")
        self.ghosting.begin(self._pose)
        self.dragging = JointKey(joint)
        self._last_pointer_x = pointer_x
        return True

    def drag_to(self, pointer_x: float, pointer_y: float = 0.0) -> None:
        """Move the pointer during a drag.

        Horizontal motion rotates the dragged joint, scaled down by joint
        friction.  A ``lead`` joint instead swings its parent to face the
        pointer, using the placements from the previous render.
        """
        joint = self.dragging
        if joint is None or self._sliding or self.edits_locked:
            return
        self.selected_keyframe = None
        base = self.ghosting.working_pose(self._pose)
        parent = self.graph.parent(joint)

        if self.propagator.behavior(joint).lead and parent is not None:
            anchor = self.placements.get(parent)
            if anchor is not None:
                pointer = Vector2D(pointer_x, pointer_y)
                delta = shortest_delta(anchor.rotation, heading(pointer - anchor.position))
                base = self.propagator.nudge(base, parent, delta)
        else:
            friction_factor = 1.0 - self.joint_friction / 125.0
            delta = (pointer_x - self._last_pointer_x) * friction_factor
            base = self.propagator.nudge(base, joint, delta)

        self._last_pointer_x = pointer_x
        self._write(self.solve_pins(base))

    def end_drag(self) -> None:
        """Release the dragged joint.

        Feet and toes released close to the floor get pinned there.  With
        ghosting on, the shadow settles into the committed pose through a
        transition; a release without movement changes nothing.
        """
        joint = self.dragging
        if joint is None:
            return
        interaction = self.config.interaction
        placement = self.placements.get(joint)
        if (
            joint in FLOOR_PIN_JOINTS
            and joint not in self.pins
            and placement is not None
            and abs(placement.position.y - interaction.floor_y) < interaction.floor_tolerance
        ):
            self.toggle_pin(joint, lock_y=interaction.floor_y)

        kind = "RANGE" if self._sliding else "DRAG"
        self.history.record(
            LogEntry(
                label=f"END_{kind}_{joint}",
                pose=self.display_pose,
                proportions=self._proportions,
            ),
        )
        self.dragging = None
        self._sliding = False
        if self.ghosting.active:
            target = self.ghosting.end()
            if target is not None:
                self.transition.start(
                    self._pose,
                    target,
                    snap_duration(self.joint_friction),
                    style=self.motion_style,
                    friction=self.joint_friction,
                    on_complete=self._commit,
                )

    def intent_path(self, steps: int = 5) -> list[tuple[Pose, float]]:
        """Faded in-between poses from the ghost to the live drag result."""
        if self.dragging is None:
            return []
        return self.ghosting.intent_path(self.dragging, self.propagator.propagate, steps)

    def begin_slider(self, joint: JointKey) -> bool:
        """Grab the rotation slider of *joint*.

        Like a drag, this is an undo boundary and, with ghosting on, edits a
        preview shadow until :meth:`end_slider`.  Pinned joints are held by IK
        and cannot be slid.
        """
        joint = JointKey(joint)
        if self.edits_locked or self.dragging is not None or joint in self.pins:
            return False
        self.save_to_history()
        self.record_snapshot(f"START_RANGE_{joint}")
        self.ghosting.begin(self._pose)
        self.selected_keyframe = None
        self.dragging = joint
        self._sliding = True
        return True

    def set_joint_rotation(self, joint: JointKey, value: float) -> bool:
        """Slider path: set one joint (clamped to +-180) and propagate.

        Outside a :meth:`begin_slider` session the change is a single
        committed step with its own undo point.
        """
        joint = JointKey(joint)
        if self.edits_locked or joint in self.pins:
            return False
        if self.dragging is None:
            self.save_to_history()
            self.record_snapshot(f"START_RANGE_{joint}")
        elif not self._sliding or self.dragging != joint:
            return False
        base = self.ghosting.working_pose(self._pose)
        self._write(self.propagator.rotate(base, joint, clamp_rotation(value)))
        return True

    def end_slider(self) -> None:
        """Release the slider grabbed with :meth:`begin_slider`."""
        if self._sliding:
            self.end_drag()

    # ------------------------------------------------------------------
    # Pins and IK
    # ------------------------------------------------------------------

    def toggle_pin(self, joint: JointKey, lock_y: float | None = None) -> bool:
        """Pin *joint* where it was last drawn, or release an existing pin.

        Returns whether the joint is pinned afterwards.
        """
        joint = JointKey(joint)
        if joint in self.pins:
            del self.pins[joint]
            self.log(f"PIN REMOVED: {joint}")
            return False
        placement = self.placements.get(joint)
        if placement is None:
            return False
        target = placement.position
        if lock_y is not None:
            target = Vector2D(target.x, lock_y)
        self.pins[joint] = target
        self.log(f"PIN ADDED: {joint}")
        return True

    def solve_pins(self, pose: Pose) -> Pose:
        """Re-aim every pinned leg at its target with two-bone IK."""
        changes: dict[JointKey, float] = {}
        for joint, target in self.pins.items():
            chain = IK_CHAINS.get(joint)
            if chain is None:
                continue
            upper, lower = chain
            root = self.placements.get(upper)
            if root is None:
                continue
            parent = self.graph.parent(upper)
            parent_placement = self.placements.get(parent) if parent is not None else None
            solution = self.ik.solve(
                target,
                root.position,
                bone_length(upper, self._proportions, self.config.ik.base_unit_height),
                bone_length(lower, self._proportions, self.config.ik.base_unit_height),
                parent_placement.rotation if parent_placement is not None else 0.0,
                mirrored=joint.is_left,
            )
            if solution.degenerate:
                continue
            changes[upper] = solution.angle1
            changes[lower] = solution.angle2
        return pose.updated(changes)

    # ------------------------------------------------------------------
    # Keyframes and playback
    # ------------------------------------------------------------------

    def add_keyframe(self) -> int | None:
        if self.edits_locked:
            return None
        index = self.timeline.add(self._pose)
        self.log(f"ANIM: Keyframe {index + 1} added.")
        self.record_snapshot(f"ADD_KEYFRAME_{index + 1}")
        self.selected_keyframe = index
        return index

    def add_tween_keyframe(self) -> int | None:
        """Capture the current pose as a keyframe at the playhead."""
        if self.is_playing or len(self.timeline) < 2:
            return None
        index = self.timeline.insert(self._pose, self.playback.time)
        self.selected_keyframe = index
        self.log("ANIM: Added tween as new keyframe.")
        return index

    def select_keyframe(self, index: int) -> bool:
        """Pause playback, jump to keyframe *index* and load its pose for editing."""
        if not 0 <= index < len(self.timeline):
            return False
        self.pause()
        keyframe = self.timeline[index]
        self.selected_keyframe = index
        self.playback.seek(keyframe.time)
        self._pose = keyframe.pose
        self.log(f"ANIM: Selected keyframe {index + 1} for editing.")
        return True

    def deselect_keyframe(self) -> None:
        self.selected_keyframe = None

    def scrub(self, time_ms: float) -> None:
        self.pause()
        self.selected_keyframe = None
        self.playback.seek(time_ms)

    def set_keyframe_time(self, index: int, time_ms: float) -> float | None:
        return self.timeline.set_keyframe_time(index, time_ms)

    def set_keyframe_easing(self, index: int, easing: Easing) -> None:
        self.timeline.set_easing(index, easing)

    def clear_timeline(self) -> None:
        self.playback.reset()
        self.timeline.clear()
        self.selected_keyframe = None
        self.log("ANIM: Timeline cleared.")

    def load_animation(self, document: AnimationDocument) -> None:
        """Replace the timeline with the keyframes of *document*."""
        self.playback.reset()
        self.timeline.replace(document.keyframes)
        self.selected_keyframe = None
        if len(self.timeline) > 0:
            self._pose = self.timeline[0].pose
        self.log(f"ANIM: Loaded '{document.name}' ({len(self.timeline)} keyframes).")

    def to_document(self, name: str = "untitled") -> AnimationDocument:
        return AnimationDocument(name=name, keyframes=self.timeline.keyframes)

    def onion_skins(self) -> list[tuple[int, Pose, float]]:
        interaction = self.config.interaction
        return self.timeline.onion_skins(
            self.selected_keyframe, interaction.onion_before, interaction.onion_after,
        )

    def play(self) -> bool:
        if self.dragging is not None or self.is_transitioning:
            return False
        self.selected_keyframe = None
        started = self.playback.play()
        if started:
            self.log("ANIM: Playback started.")
        return started

    def pause(self) -> None:
        self.playback.pause()

    def reset_playback(self) -> None:
        self.playback.reset()

    # ------------------------------------------------------------------
    # History and recording log
    # ------------------------------------------------------------------

    def save_to_history(self) -> None:
        self.history.save(self.snapshot())

    def _restore(self, snapshot: HistorySnapshot) -> None:
        self._proportions = snapshot.proportions
        self._commit(snapshot.pose)

    def undo(self) -> bool:
        if self.edits_locked or self.dragging is not None:
            return False
        previous = self.history.undo(self.snapshot())
        if previous is None:
            return False
        self._restore(previous)
        self.log("UNDO: System state reverted.")
        return True

    def redo(self) -> bool:
        if self.edits_locked or self.dragging is not None:
            return False
        following = self.history.redo(self.snapshot())
        if following is None:
            return False
        self._restore(following)
        self.log("REDO: System state reapplied.")
        return True

    def record_snapshot(self, label: str | None = None) -> LogEntry:
        return self.history.record(
            LogEntry(label=label, pose=self._pose, proportions=self._proportions),
        )

    def log(self, message: str) -> None:
        """Append a message to the recording log and the Python log."""
        self.history.record(LogEntry(label=message))
        logger.info(message)

    def restore_log_entry(self, index: int) -> bool:
        """Load the pose stored in a log entry (scrubbing the edit trail)."""
        entry = self.history.entry(index)
        if entry is None:
            return False
        self.selected_log = index
        if entry.pose is None or self.edits_locked:
            return False
        if entry.proportions is not None:
            self._proportions = entry.proportions
        self._commit(entry.pose)
        return True

    def delete_log_entry(self, index: int) -> bool:
        removed = self.history.delete_entry(index)
        if removed is None:
            return False
        self.selected_log = None
        label = removed.label or f"Pose @ {removed.timestamp:.0f}"
        self.log(f'LOG DELETED: "{label}" removed.')
        return True

    def clear_log(self) -> None:
        self.history.clear_log()
        self.selected_log = None
        self.log("COMMAND: Recording history cleared.")

    def export_log(self) -> list[dict[str, Any]]:
        return self.history.export_records()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def apply_preset(self, pose: Pose, name: str) -> bool:
        if self.edits_locked:
            return False
        self.save_to_history()
        self._commit(pose)
        self.record_snapshot(f"SET_POSE_{name.upper()}")
        self.log(f"COMMAND: Applied {name} state.")
        return True

    def calibrate(self) -> bool:
        """Ease the figure into the T-pose; the first step of a posing session."""
        if self.calibrated or self.edits_locked or self.dragging is not None:
            return False
        self.save_to_history()
        self.record_snapshot("CALIBRATION_START")
        self.log("SEQUENCE: CALIBRATION START...")

        def _done(final: Pose) -> None:
            self._commit(final)
            self.calibrated = True
            self.record_snapshot("CALIBRATION_END")
            self.log("SEQUENCE: SYSTEM ALIGNED.")

        self.transition.start(
            self._pose,
            Pose(),
            self.config.interaction.calibration_ms,
            style=self.motion_style,
            friction=self.joint_friction,
            on_complete=_done,
        )
        return True

    def begin_proportion_edit(self, part: BodyPart, axis: str) -> bool:
        """Grab the *axis* scale slider of *part*; one undo point per grab."""
        if self.edits_locked or self._proportion_edit is not None:
            return False
        part = BodyPart(part)
        if axis not in ("w", "h"):
            msg = f"axis must be 'w' or 'h', got {axis!r}"
            raise ValueError(msg)
        self.save_to_history()
        self.record_snapshot(f"START_PROP_{axis.upper()}_{part}")
        self._proportion_edit = (part, axis)
        return True

    def set_proportion(self, part: BodyPart, axis: str, value: float) -> bool:
        """Scale one axis of a body part.

        Outside a :meth:`begin_proportion_edit` session the change is a single
        step with its own undo point.
        """
        if self.edits_locked:
            return False
        part = BodyPart(part)
        scaled = self._proportions.with_scale(part, axis, value)
        if self._proportion_edit is None:
            self.save_to_history()
            self.record_snapshot(f"START_PROP_{axis.upper()}_{part}")
            self._proportions = scaled
            self.record_snapshot(f"END_PROP_{axis.upper()}_{part}")
            return True
        if self._proportion_edit != (part, axis):
            return False
        self._proportions = scaled
        return True

    def end_proportion_edit(self) -> None:
        if self._proportion_edit is None:
            return
        part, axis = self._proportion_edit
        self._proportion_edit = None
        self.record_snapshot(f"END_PROP_{axis.upper()}_{part}")

    def reset_proportions(self) -> bool:
        if self.edits_locked:
            return False
        self.save_to_history()
        self._proportions = Proportions()
        self.record_snapshot("PROPS_RESET")
        self.log("COMMAND: Anatomical proportions reset.")
        return True

    def toggle_chain_behavior(self, joint: JointKey, mode: ChainMode) -> ChainBehavior:
        joint = JointKey(joint)
        behavior = self.propagator.behavior(joint).toggled(ChainMode(mode))
        self.propagator.behaviors[joint] = behavior
        return behavior

    def set_chain_behavior_value(
        self, joint: JointKey, mode: ChainMode, value: float | str,
    ) -> ChainBehavior:
        """Set a bend or stretch factor; unparseable input counts as 0."""
        mode = ChainMode(mode)
        if mode is ChainMode.LEAD:
            msg = "lead is a flag; use toggle_chain_behavior"
            raise ValueError(msg)
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = 0.0
        if math.isnan(number):
            number = 0.0
        joint = JointKey(joint)
        behavior = self.propagator.behavior(joint).model_copy(update={mode.value: number})
        self.propagator.behaviors[joint] = behavior
        return behavior

    def selection(self, joint: JointKey, scope: SelectionScope) -> set[JointKey]:
        return self.graph.selection(JointKey(joint), SelectionScope(scope))

    def state_string(self) -> str:
        """Compact text form of the pose and proportions."""
        pose_data = ";".join(f"{key}:{round(value)}" for key, value in self._pose.items())
        prop_data = ";".join(
            f"{part}:h{self._proportions[part].h:.2f},w{self._proportions[part].w:.2f}"
            for part in BodyPart
        )
        return f"POSE[{pose_data}]|PROPS[{prop_data}]"
