"""Resolve authored placements into renderer-ready transform attributes.

The editor works in a top-down ("sky-to-earth") convention: the marker lies
on a horizontal plane and the viewer looks down at it. Each content type has
an orientation policy that adapts the authored placement to that view:

- image, video: laid flat facing up, lifted just off the marker plane
- model, primitive: authored rotation kept unless it is effectively zero
- light: authored rotation kept, raised well above the scene
- audio and unknown types: authored rotation kept, position untouched

Authored rotations carry no unit. Components with magnitude above pi are
taken as degrees and anything smaller as radians; the output is always
degrees, which is what the markup's rotation attribute expects.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..core.config import CompilerPolicy
from .models import SceneObject

logger = logging.getLogger(__name__)

# Lay-flat orientation for planar content (degrees about X, Y, Z)
FLAT_ROTATION_DEG = np.array([-90.0, 0.0, 0.0])

POSITION_DECIMALS = 3
ROTATION_DECIMALS = 1
SCALE_DECIMALS = 3


@dataclass(frozen=True)
class Placement:
    """Resolved transform as markup attribute strings (``"x y z"``)."""

    position: str
    rotation: str
    scale: str


def format_vector(values: NDArray[np.float64] | tuple[float, ...], decimals: int) -> str:
    """Format three numbers as a space-separated fixed-precision string.

    Values that round to zero are printed without a sign. Non-finite values
    are printed as ``nan``/``inf``.
    """
    parts = []
    for value in values:
        rounded = round(float(value), decimals)
        if rounded == 0:
            rounded = 0.0
        parts.append(f"{rounded:.{decimals}f}")
    return " ".join(parts)


def normalize_rotation_units(rotation: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert an authored rotation of unknown unit to degrees.

    Per component: magnitudes above pi are read as degrees (converted to
    radians first), smaller magnitudes as radians. The radians are then
    converted to degrees, so degree input comes back unchanged.

    Args:
        rotation: Authored XYZ rotation

    Returns:
        XYZ rotation in degrees
    """
    rotation = np.asarray(rotation, dtype=np.float64)
    radians = np.where(np.abs(rotation) > np.pi, np.radians(rotation), rotation)
    return np.degrees(radians)


def floor_height(position: NDArray[np.float64], minimum: float) -> NDArray[np.float64]:
    """Raise the Y component to ``minimum`` when it is at or below it."""
    position = position.copy()
    if position[1] <= minimum:
        position[1] = minimum
    return position


class OrientationPolicy(ABC):
    """Abstract base class for per-content-type placement rules."""

    @abstractmethod
    def apply(
        self,
        position: NDArray[np.float64],
        rotation: NDArray[np.float64],
        policy: CompilerPolicy,
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Adapt a placement to the top-down view.

        Args:
            position: Scaled XYZ position
            rotation: Authored XYZ rotation (unit unknown)
            policy: Compiler policy with thresholds and offsets

        Returns:
            (position, rotation in degrees)
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Policy name for display/logging."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of this policy."""
        pass


class FlatPolicy(OrientationPolicy):
    """Planar content lies on the marker facing the viewer.

    Any authored rotation is discarded.
    """

    @property
    def name(self) -> str:
        return "flat"

    @property
    def description(self) -> str:
        return "Lay flat facing up, just above the marker"

    def apply(self, position, rotation, policy):
        return floor_height(position, policy.visibility_y_offset), FLAT_ROTATION_DEG.copy()


class ModelPolicy(OrientationPolicy):
    """3D content keeps its authored rotation.

    A rotation that is zero within ``rotation_epsilon`` on every axis stays
    zero: the asset's native orientation is assumed to suit the top-down view.
    """

    @property
    def name(self) -> str:
        return "model"

    @property
    def description(self) -> str:
        return "Keep authored rotation, just above the marker"

    @staticmethod
    def resolve_rotation(rotation: NDArray[np.float64], policy: CompilerPolicy) -> NDArray[np.float64]:
        """Zero near-default rotations, unit-normalize the rest."""
        if np.all(np.abs(rotation) < policy.rotation_epsilon):
            return np.zeros(3)
        return normalize_rotation_units(rotation)

    def apply(self, position, rotation, policy):
        return floor_height(position, policy.visibility_y_offset), self.resolve_rotation(rotation, policy)


class LightPolicy(OrientationPolicy):
    """Light sources stay elevated above the scene content."""

    @property
    def name(self) -> str:
        return "light"

    @property
    def description(self) -> str:
        return "Keep authored rotation, at least light_min_height above the marker"

    def apply(self, position, rotation, policy):
        return floor_height(position, policy.light_min_height), normalize_rotation_units(rotation)


class PassthroughPolicy(OrientationPolicy):
    """Content without a visual footprint is placed as authored."""

    @property
    def name(self) -> str:
        return "passthrough"

    @property
    def description(self) -> str:
        return "Keep authored rotation and position"

    def apply(self, position, rotation, policy):
        return position.copy(), normalize_rotation_units(rotation)


# Policy registry
POLICIES: dict[str, type[OrientationPolicy]] = {
    "image": FlatPolicy,
    "video": FlatPolicy,
    "model": ModelPolicy,
    "primitive": ModelPolicy,
    "light": LightPolicy,
    "audio": PassthroughPolicy,
}


def get_policy(content_type: str) -> OrientationPolicy:
    """Get the orientation policy for a content type.

    Unrecognized types get :class:`PassthroughPolicy`.
    """
    return POLICIES.get(content_type, PassthroughPolicy)()


def list_policies() -> list[dict]:
    """List content types with the policy applied to each.

    Returns:
        List of dicts with 'content_type', 'name' and 'description' keys
    """
    return [
        {"content_type": content_type, "name": cls().name, "description": cls().description}
        for content_type, cls in POLICIES.items()
    ]


class TransformResolver:
    """Turn scene object placements into position/rotation/scale strings.

    The resolver holds the compiler policy; it never reads global state.
    """

    def __init__(self, policy: CompilerPolicy | None = None):
        """Initialize resolver.

        Args:
            policy: Placement policy (defaults if None)
        """
        self.policy = policy or CompilerPolicy()

    def resolve_arrays(
        self,
        scene_object: SceneObject,
    ) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """Resolve a placement to numeric arrays.

        Returns:
            (position, rotation in degrees, scale)
        """
        policy = self.policy
        position = scene_object.position.to_array() * policy.position_scale
        rotation = scene_object.rotation.to_array()

        if policy.enforce_top_down:
            orientation = get_policy(scene_object.content_type)
            position, rotation = orientation.apply(position, rotation, policy)
        else:
            rotation = ModelPolicy.resolve_rotation(rotation, policy)

        # Flush content would be hidden by the marker plane itself
        if abs(position[1]) < policy.position_epsilon:
            position[1] = policy.visibility_y_offset

        return position, rotation, scene_object.scale.to_array()

    def resolve(self, scene_object: SceneObject) -> Placement:
        """Resolve a scene object's placement to markup attribute strings."""
        position, rotation, scale = self.resolve_arrays(scene_object)
        placement = Placement(
            position=format_vector(position, POSITION_DECIMALS),
            rotation=format_vector(rotation, ROTATION_DECIMALS),
            scale=format_vector(scale, SCALE_DECIMALS),
        )
        logger.debug(
            f"{scene_object.id} ({scene_object.content_type or 'untyped'}): "
            f"position={placement.position} rotation={placement.rotation} scale={placement.scale}"
        )
        return placement


def resolve_placement(scene_object: SceneObject, policy: CompilerPolicy | None = None) -> Placement:
    """Resolve one scene object with the given (or default) policy."""
    return TransformResolver(policy).resolve(scene_object)
