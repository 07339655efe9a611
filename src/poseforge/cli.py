"""CLI entry point using Typer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
    from poseforge.engine.timeline import AnimationTimeline
    from poseforge.models.timeline import AnimationDocument

app = typer.Typer(
    name="poseforge",
    help="2D articulated-figure posing and keyframe animation engine.",
    no_args_is_help=False,
)


def _load_document(path: Path) -> AnimationDocument:
    from poseforge.models.timeline import AnimationDocument, TimelineLoadError

    try:
        return AnimationDocument.load(path)
    except TimelineLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _timeline_for(document: AnimationDocument) -> AnimationTimeline:
    from poseforge.config import load_config
    from poseforge.engine.timeline import AnimationTimeline

    settings = load_config().timeline
    return AnimationTimeline(
        document.keyframes,
        loop_duration=settings.loop_duration_ms,
        min_segment=settings.min_segment_ms,
        spacing=settings.keyframe_spacing_ms,
    )


@app.command()
def create(
    name: Annotated[str, typer.Argument(help="Animation name")],
    directory: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Output directory"),
    ] = None,
    preset: Annotated[
        str, typer.Option("--preset", "-p", help="Preset used as the first keyframe")
    ] = "t_pose",
) -> None:
    """Create a new animation file holding one keyframe."""
    from poseforge.models.timeline import AnimationDocument, Keyframe
    from poseforge.poses import load_pose

    try:
        start = load_pose(preset)
    except FileNotFoundError:
        typer.echo(f"Error: unknown preset '{preset}'", err=True)
        raise typer.Exit(1) from None

    document = AnimationDocument(name=name, keyframes=[Keyframe(pose=start, time=0.0)])
    save_path = document.save((directory or Path.cwd()) / f"{name}.json")
    typer.echo(f"Created animation '{name}' at {save_path}")


@app.command()
def sample(
    animation: Annotated[Path, typer.Argument(help="Animation JSON file")],
    time: Annotated[float, typer.Option("--time", "-t", help="Time in ms")] = 0.0,
) -> None:
    """Print the interpolated pose of an animation at a point in time."""
    document = _load_document(animation)
    timeline = _timeline_for(document)
    pose = timeline.pose_at(time)
    if pose is None:
        typer.echo("Error: animation has no keyframes", err=True)
        raise typer.Exit(1)

    typer.echo(f"t={timeline.wrap_time(time):.0f}ms / {timeline.total_duration:.0f}ms")
    for key, value in pose.items():
        typer.echo(f"  {key}: {value:.2f}")


@app.command()
def play(
    animation: Annotated[Path, typer.Argument(help="Animation JSON file")],
    fps: Annotated[int, typer.Option("--fps", help="Simulated frame rate")] = 60,
    frames: Annotated[int, typer.Option("--frames", "-n", help="Frames to simulate")] = 60,
) -> None:
    """Simulate playback frame by frame and report the resulting pose."""
    from poseforge.engine.editor import PoseEditor
    from poseforge.engine.scheduler import ManualFrameScheduler

    if fps <= 0:
        typer.echo("Error: --fps must be positive", err=True)
        raise typer.Exit(1)

    document = _load_document(animation)
    scheduler = ManualFrameScheduler()
    editor = PoseEditor(scheduler=scheduler)
    editor.load_animation(document)

    if not editor.play():
        typer.echo("Error: playback needs at least two keyframes", err=True)
        raise typer.Exit(1)

    scheduler.run_frames(frames, 1000.0 / fps)
    editor.pause()
    typer.echo(
        f"Played {frames} frames at {fps} fps: "
        f"t={editor.playback.time:.0f}ms / {editor.timeline.total_duration:.0f}ms"
    )
    typer.echo(editor.state_string())


@app.command()
def validate(
    path: Annotated[Path, typer.Argument(help="JSON file to validate")],
    recording: Annotated[
        bool, typer.Option("--recording", "-r", help="Validate a recording-log export")
    ] = False,
) -> None:
    """Validate an animation or recording-log file against its JSON schema."""
    import jsonschema

    from poseforge.validation import validate_recording_json, validate_timeline_json

    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        typer.echo(f"Error: file not found: {path}", err=True)
        raise typer.Exit(1) from None
    except json.JSONDecodeError as e:
        typer.echo(f"Error: invalid JSON: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        if recording:
            validate_recording_json(data)
        else:
            validate_timeline_json(data)
    except jsonschema.ValidationError as e:
        typer.echo(f"Invalid: {e.message}", err=True)
        raise typer.Exit(1) from None
    typer.echo(f"Valid: {path}")


@app.command()
def ik(
    target: Annotated[tuple[float, float], typer.Option("--target", help="Target x y")],
    root: Annotated[
        tuple[float, float], typer.Option("--root", help="Chain root x y")
    ] = (0.0, 0.0),
    len_a: Annotated[float, typer.Option("--len-a", help="Upper bone length")] = 1.0,
    len_b: Annotated[float, typer.Option("--len-b", help="Lower bone length")] = 1.0,
    parent: Annotated[
        float, typer.Option("--parent", help="Parent world rotation (deg)")
    ] = 0.0,
    mirrored: Annotated[bool, typer.Option("--mirrored", help="Bend the other way")] = False,
) -> None:
    """Solve a two-bone chain for a target point."""
    from poseforge.engine.ik import TwoBoneIKSolver
    from poseforge.models.geometry import Vector2D

    solver = TwoBoneIKSolver()
    root_point = Vector2D(*root)
    solution = solver.solve(Vector2D(*target), root_point, len_a, len_b, parent, mirrored)
    _, end = solver.forward(root_point, len_a, len_b, solution, parent)
    typer.echo(f"angle1: {solution.angle1:.2f}")
    typer.echo(f"angle2: {solution.angle2:.2f}")
    typer.echo(f"end: ({end.x:.2f}, {end.y:.2f})")
    typer.echo(f"reached: {'yes' if solution.reached else 'no'}")


@app.command()
def presets(
    name: Annotated[str | None, typer.Argument(help="Preset to show")] = None,
) -> None:
    """List the bundled pose presets, or print one as JSON."""
    from poseforge.poses import available_poses, load

    if name is None:
        for preset_name in available_poses():
            preset = load(preset_name)
            typer.echo(f"{preset_name}: {preset.description}")
        return
    try:
        preset = load(name)
    except FileNotFoundError:
        typer.echo(f"Error: unknown preset '{name}'", err=True)
        raise typer.Exit(1) from None
    typer.echo(preset.pose.model_dump_json(indent=2))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", "-v", help="Show version")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log engine activity to stderr")
    ] = False,
) -> None:
    """PoseForge - 2D articulated-figure posing and keyframe animation engine."""
    if version:
        from poseforge import __version__

        typer.echo(f"poseforge {__version__}")
        raise typer.Exit()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
