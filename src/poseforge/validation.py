"""Validation utilities for PoseForge interchange files."""

from __future__ import annotations

import json
from pathlib import Path

import jsonschema

_SCHEMA_DIR = Path(__file__).parent / "schemas"
_TIMELINE_SCHEMA_PATH = _SCHEMA_DIR / "timeline.schema.json"
_RECORDING_SCHEMA_PATH = _SCHEMA_DIR / "recording.schema.json"


def validate_timeline_json(data: dict[str, object]) -> None:
    """Validate an animation document dict against timeline.schema.json.

    Parameters
    ----------
    data:
        The ``{name, version, keyframes}`` dictionary to validate.

    Raises
    ------
    jsonschema.ValidationError
        If the data does not conform to the schema.
    """
    schema = json.loads(_TIMELINE_SCHEMA_PATH.read_text())
    jsonschema.validate(data, schema)


def validate_recording_json(data: list[dict[str, object]]) -> None:
    """Validate an exported recording log against recording.schema.json."""
    schema = json.loads(_RECORDING_SCHEMA_PATH.read_text())
    jsonschema.validate(data, schema)
