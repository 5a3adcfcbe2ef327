"""Scene data structures for authored AR experiences.

This module provides the strict internal shape of an experience: placed
scene objects with their content, the scene configuration of a single
tracking anchor, the per-marker targets of a multi-target experience, and
the experience record itself.

Field names are snake_case; the camelCase keys written by the authoring
editor are accepted as aliases and restored by ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field


class Vector3(BaseModel):
    """XYZ triple used for position, rotation and scale."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_array(self) -> NDArray[np.float64]:
        """Return the components as a length-3 float array."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values: NDArray[np.float64] | tuple[float, float, float]) -> Vector3:
        """Create a Vector3 from any length-3 sequence."""
        x, y, z = (float(v) for v in values)
        return cls(x=x, y=y, z=z)

    @classmethod
    def ones(cls) -> Vector3:
        """Unit scale."""
        return cls(x=1.0, y=1.0, z=1.0)


class SceneObjectContent(BaseModel):
    """What a scene object shows.

    ``type`` selects the rendering and placement rules. Unknown types are
    kept so they survive a round trip, but produce no element. Fields not
    modelled here (display names, file sizes, ...) are preserved as extras.
    """

    type: str | None = Field(default=None, description="Content kind")
    url: str | None = Field(default=None, description="Asset URL (image/video/model/audio)")

    # Light settings
    color: str | None = Field(default=None, description="CSS color for lights and primitives")
    intensity: float | None = Field(default=None, description="Light intensity")

    # Primitive settings
    primitive_type: str | None = Field(
        default=None,
        alias="primitiveType",
        description="Primitive geometry: cube, sphere, cylinder or plane",
    )

    model_config = {"populate_by_name": True, "extra": "allow"}

    @property
    def has_asset(self) -> bool:
        """True when the content references an embeddable file."""
        return bool(self.url)


class SceneObject(BaseModel):
    """A single placed piece of content."""

    id: str = Field(description="Identifier, unique within the owning scene")
    position: Vector3 = Field(default_factory=Vector3)
    rotation: Vector3 = Field(default_factory=Vector3, description="Authored rotation (degrees or radians)")
    scale: Vector3 = Field(default_factory=Vector3.ones)
    content: SceneObjectContent = Field(default_factory=SceneObjectContent)

    model_config = {"populate_by_name": True}

    @property
    def content_type(self) -> str:
        """Content type, or an empty string when unset."""
        return self.content.type or ""


class SceneConfig(BaseModel):
    """The content of one tracking anchor.

    The outer position/rotation/scale are stored by the editor but never
    applied when compiling.
    """

    position: Vector3 = Field(default_factory=Vector3)
    rotation: Vector3 = Field(default_factory=Vector3)
    scale: Vector3 = Field(default_factory=Vector3.ones)
    scene_objects: list[SceneObject] = Field(default_factory=list, alias="sceneObjects")

    model_config = {"populate_by_name": True}

    def get_object(self, object_id: str) -> SceneObject | None:
        """Get a scene object by ID."""
        for obj in self.scene_objects:
            if obj.id == object_id:
                return obj
        return None


class Target(BaseModel):
    """One marker and its content in a multi-target experience.

    The target's position in the experience's target list is the tracking
    anchor index used by the runtime.
    """

    id: str
    name: str
    marker_image: str = Field(default="", alias="markerImage")
    marker_dimensions: dict[str, Any] | None = Field(default=None, alias="markerDimensions")
    scene_objects: list[SceneObject] = Field(default_factory=list, alias="sceneObjects")

    model_config = {"populate_by_name": True}


class Experience(BaseModel):
    """A persisted AR experience record, as handed to the compiler."""

    id: str
    title: str = ""
    mind_file: str | None = Field(default=None, alias="mindFile")
    marker_image: str | None = Field(default=None, alias="markerImage")
    content_config: SceneConfig = Field(default_factory=SceneConfig, alias="contentConfig")
    targets_config: list[Target] | None = Field(default=None, alias="targetsConfig")
    is_multiple_targets: bool = Field(default=False, alias="isMultipleTargets")

    model_config = {"populate_by_name": True}

    @property
    def is_multi_target(self) -> bool:
        """Whether the experience compiles to one anchor per target."""
        return self.is_multiple_targets or bool(self.targets_config)

    @property
    def scene_object_count(self) -> int:
        """Total number of scene objects across all anchors."""
        if self.is_multi_target:
            return sum(len(t.scene_objects) for t in self.targets_config or [])
        return len(self.content_config.scene_objects)

    def anchors(self) -> list[list[SceneObject]]:
        """Scene objects grouped by tracking anchor index."""
        if self.is_multi_target:
            return [list(t.scene_objects) for t in self.targets_config or []]
        return [list(self.content_config.scene_objects)]

    def to_record(self) -> dict[str, Any]:
        """Serialize back to the stored (camelCase) record shape."""
        return self.model_dump(mode="json", by_alias=True)

    def __repr__(self) -> str:
        mode = "multi-target" if self.is_multi_target else "single-target"
        return f"Experience({self.id!r}, {mode}, {self.scene_object_count} objects)"
