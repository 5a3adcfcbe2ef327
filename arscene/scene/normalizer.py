"""Sanitize loosely-typed authored scene data into the strict scene models.

Scene configurations are authored client-side and stored as JSON, so any
field can be missing, mistyped or carry editor-only state. Every function
here is total: bad input is replaced by a default, never reported as an
error. Only malformed marker dimensions are surfaced, as a warning.
"""

from __future__ import annotations

import json
import logging
import math
import time
import uuid
import warnings
from typing import Any, Mapping

from ..core.errors import MarkerDimensionParseWarning
from .models import Experience, SceneConfig, SceneObject, SceneObjectContent, Target, Vector3

logger = logging.getLogger(__name__)

# Editor-side handles that do not survive storage (scene-graph refs, upload blobs)
TRANSIENT_CONTENT_KEYS = frozenset({"meshRef", "file"})

_ZERO = Vector3()
_ONE = Vector3.ones()


def coerce_float(value: Any, default: float) -> float:
    """Parse a number, falling back to ``default``.

    Accepts ints, floats, bools and numeric strings. ``None``, unparsable
    strings, containers and non-finite results all yield ``default``.

    Args:
        value: Authored value
        default: Value to use when parsing fails

    Returns:
        A finite float (or ``default``)
    """
    if value is None or isinstance(value, (list, tuple, dict, set)):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(result):
        return default
    return result


def coerce_vector3(value: Any, fallback: Vector3 = _ZERO) -> Vector3:
    """Build a Vector3, defaulting each missing or invalid component."""
    if not isinstance(value, Mapping):
        return fallback.model_copy()
    return Vector3(
        x=coerce_float(value.get("x"), fallback.x),
        y=coerce_float(value.get("y"), fallback.y),
        z=coerce_float(value.get("z"), fallback.z),
    )


def generate_object_id() -> str:
    """Generate a scene object id: millisecond timestamp plus random suffix."""
    return f"obj-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def sanitize_content(content: Any) -> SceneObjectContent:
    """Drop transient editor state and type-check the known content fields.

    Args:
        content: Authored content mapping (anything else yields empty content)

    Returns:
        Sanitized SceneObjectContent; unknown fields are kept as extras
    """
    if not isinstance(content, Mapping):
        return SceneObjectContent()

    data = {k: v for k, v in content.items() if k not in TRANSIENT_CONTENT_KEYS}

    content_type = data.pop("type", None)
    data["type"] = None if content_type is None else str(content_type)
    data["url"] = _optional_str(data.pop("url", None))
    data["color"] = _optional_str(data.pop("color", None))
    data["primitiveType"] = _optional_str(data.pop("primitiveType", data.pop("primitive_type", None)))

    intensity = data.pop("intensity", None)
    data["intensity"] = None if intensity is None else coerce_float(intensity, 1.0)

    return SceneObjectContent.model_validate(data)


def sanitize_scene_objects(objects: Any) -> list[SceneObject]:
    """Normalize a list of authored scene objects.

    Non-mapping entries are dropped. Objects without an id get a generated
    one; transforms are coerced (scale defaults to 1, everything else to 0).
    """
    if not isinstance(objects, (list, tuple)):
        return []

    sanitized = []
    for raw in objects:
        if not isinstance(raw, Mapping):
            continue

        object_id = raw.get("id")
        if object_id is None or object_id == "":
            object_id = generate_object_id()

        sanitized.append(
            SceneObject(
                id=str(object_id),
                position=coerce_vector3(raw.get("position")),
                rotation=coerce_vector3(raw.get("rotation")),
                scale=coerce_vector3(raw.get("scale"), _ONE),
                content=sanitize_content(raw.get("content")),
            )
        )
    return sanitized


def normalize_scene_config(raw: Any) -> SceneConfig:
    """Normalize an authored single-anchor scene configuration.

    Args:
        raw: Stored ``contentConfig`` value (mapping, JSON string or garbage)

    Returns:
        Structurally complete SceneConfig
    """
    if isinstance(raw, str):
        raw = _loads_or_none(raw)
    if not isinstance(raw, Mapping):
        raw = {}

    return SceneConfig(
        position=coerce_vector3(raw.get("position")),
        rotation=coerce_vector3(raw.get("rotation")),
        scale=coerce_vector3(raw.get("scale"), _ONE),
        scene_objects=sanitize_scene_objects(raw.get("sceneObjects")),
    )


def parse_marker_dimensions(value: Any, target_id: str = "") -> dict[str, Any] | None:
    """Accept marker dimensions as a mapping or a JSON-encoded string.

    Malformed JSON (or JSON that is not an object) is dropped with a
    :class:`MarkerDimensionParseWarning`.
    """
    if not value:
        return None
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError as e:
            warnings.warn(
                f"Failed to parse markerDimensions for target {target_id!r}, ignoring: {e}",
                MarkerDimensionParseWarning,
                stacklevel=2,
            )
            return None
        if isinstance(parsed, dict):
            return parsed

    warnings.warn(
        f"markerDimensions for target {target_id!r} is not an object, ignoring",
        MarkerDimensionParseWarning,
        stacklevel=2,
    )
    return None


def normalize_targets(raw: Any) -> list[Target]:
    """Normalize the authored target list of a multi-target experience.

    Entry order is preserved; it defines the tracking anchor indices.
    """
    if isinstance(raw, str):
        raw = _loads_or_none(raw)
    if not isinstance(raw, (list, tuple)):
        return []

    targets = []
    for raw_target in raw:
        if not isinstance(raw_target, Mapping):
            continue
        index = len(targets)
        target_id = str(raw_target.get("id") or f"target-{index}")
        targets.append(
            Target(
                id=target_id,
                name=str(raw_target.get("name") or f"Target {index + 1}"),
                marker_image=str(raw_target.get("markerImage") or ""),
                marker_dimensions=parse_marker_dimensions(raw_target.get("markerDimensions"), target_id),
                scene_objects=sanitize_scene_objects(raw_target.get("sceneObjects")),
            )
        )
    return targets


def normalize_experience(record: Mapping[str, Any]) -> Experience:
    """Normalize a stored experience record for compilation.

    Args:
        record: Experience row with camelCase keys as stored

    Returns:
        Experience with normalized scene and target configurations
    """
    targets_raw = record.get("targetsConfig")
    targets = normalize_targets(targets_raw) if targets_raw is not None else None

    experience = Experience(
        id=str(record.get("id", "")),
        title=str(record.get("title") or ""),
        mind_file=_optional_str(record.get("mindFile")) or None,
        marker_image=_optional_str(record.get("markerImage")) or None,
        content_config=normalize_scene_config(record.get("contentConfig")),
        targets_config=targets,
        is_multiple_targets=bool(record.get("isMultipleTargets", False)),
    )
    logger.debug(f"Normalized {experience!r}")
    return experience


def _loads_or_none(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        logger.warning("Stored scene configuration is not valid JSON, using an empty scene")
        return None
