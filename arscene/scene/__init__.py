"""Scene models, normalization and placement resolution.

This module provides the data structures for authored AR scenes and the
steps that turn loosely-typed authored data into renderer-ready transforms.
"""

from .models import Experience, SceneConfig, SceneObject, SceneObjectContent, Target, Vector3
from .normalizer import normalize_experience, normalize_scene_config, normalize_targets
from .transform import Placement, TransformResolver, get_policy, list_policies, resolve_placement

__all__ = [
    "Experience",
    "SceneConfig",
    "SceneObject",
    "SceneObjectContent",
    "Target",
    "Vector3",
    "normalize_experience",
    "normalize_scene_config",
    "normalize_targets",
    "Placement",
    "TransformResolver",
    "get_policy",
    "list_policies",
    "resolve_placement",
]
