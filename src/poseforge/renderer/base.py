"""Renderer protocol: the engine's window onto whatever draws the figure."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from poseforge.models.enums import JointKey
    from poseforge.models.geometry import JointPlacement
    from poseforge.models.pose import Pose, Proportions


@runtime_checkable
class Renderer(Protocol):
    """Protocol for figure renderers.

    A renderer draws *pose* with *proportions* and reports, through
    *on_positions_update*, where every joint ended up on screen.  The engine
    feeds those placements into the next IK pass.
    """

    def render(
        self,
        pose: Pose,
        proportions: Proportions,
        on_positions_update: PositionsCallback | None = None,
    ) -> None:
        """Draw the figure and report joint placements."""
        ...


# Callback type for joint placement feedback
PositionsCallback: TypeAlias = "Callable[[dict[JointKey, JointPlacement]], None]"
