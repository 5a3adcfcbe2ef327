"""Assemble complete AR markup documents from normalized experiences.

A document holds one MindAR tracking anchor per marker. Single-target
experiences produce one anchor (index 0) with every scene object;
multi-target experiences produce one anchor per target, indexed by the
target's position in the experience. The anchor index is what the runtime
binds to the matching slot in the .mind file, so it must stay stable.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..core.config import ArsceneConfig, CompilerPolicy, RuntimeParams
from ..core.errors import EmptySceneError, MissingMarkerError, MissingTrackingFileError
from ..scene.models import Experience, SceneObject
from ..scene.normalizer import normalize_experience
from ..scene.transform import TransformResolver
from . import runtime as page
from .manifest import ASSET_KINDS, AssetRef, asset_id_for, build_document_manifest
from .markup import MarkupNode, element, render_document

logger = logging.getLogger(__name__)

# Primitive geometry -> A-Frame primitive element
PRIMITIVE_TAGS = {
    "cube": "a-box",
    "box": "a-box",
    "sphere": "a-sphere",
    "cylinder": "a-cylinder",
    "plane": "a-plane",
}
DEFAULT_PRIMITIVE_TAG = "a-box"
DEFAULT_PRIMITIVE_COLOR = "#888888"
DEFAULT_LIGHT_COLOR = "#ffffff"
DEFAULT_LIGHT_INTENSITY = 1.0


class DocumentAssembler:
    """Build the markup document for an experience.

    The assembler is stateless between calls; the same normalized
    experience always produces the same document.
    """

    def __init__(
        self,
        policy: CompilerPolicy | None = None,
        runtime: RuntimeParams | None = None,
    ):
        """Initialize assembler.

        Args:
            policy: Placement policy for the transform resolver
            runtime: AR runtime settings embedded in the page
        """
        self.resolver = TransformResolver(policy)
        self.runtime = runtime or RuntimeParams()

    @classmethod
    def from_config(cls, config: ArsceneConfig) -> DocumentAssembler:
        """Create an assembler from the main configuration."""
        return cls(policy=config.policy, runtime=config.runtime)

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    @staticmethod
    def _check_common(experience: Experience) -> None:
        if not experience.mind_file:
            raise MissingTrackingFileError()
        if not experience.marker_image:
            raise MissingMarkerError()

    def validate_single(self, experience: Experience) -> None:
        """Check single-target preconditions.

        Raises:
            MissingTrackingFileError: No .mind file reference
            MissingMarkerError: No marker image
            EmptySceneError: No scene objects
        """
        self._check_common(experience)
        if not experience.content_config.scene_objects:
            raise EmptySceneError()

    def validate_multi(self, experience: Experience) -> None:
        """Check multi-target preconditions.

        Raises:
            MissingTrackingFileError: No .mind file reference
            MissingMarkerError: No marker image
            EmptySceneError: No targets, or no scene objects in any target
        """
        self._check_common(experience)
        targets = experience.targets_config or []
        if not targets:
            raise EmptySceneError("At least one target configuration is required")
        if not any(t.scene_objects for t in targets):
            raise EmptySceneError("At least one scene object is required across all targets")

    # ------------------------------------------------------------------
    # Element builders
    # ------------------------------------------------------------------

    @staticmethod
    def asset_element(ref: AssetRef) -> MarkupNode:
        """<a-assets> child for one asset."""
        if ref.kind == "image":
            return element("img", id=ref.id, src=ref.url, crossorigin="anonymous")
        if ref.kind == "video":
            return element(
                "video",
                id=ref.id,
                src=ref.url,
                loop=True,
                playsinline=True,
                crossorigin="anonymous",
                preload="auto",
            )
        if ref.kind == "model":
            return element("a-asset-item", id=ref.id, src=ref.url)
        return element("audio", id=ref.id, src=ref.url, preload="auto", loop=True, crossorigin="anonymous")

    def entity(self, obj: SceneObject, anchor_index: int | None = None) -> MarkupNode | None:
        """Scene element for one object, or None if it renders nothing.

        Asset-backed objects without a URL and unknown content types are
        skipped.

        Args:
            obj: Normalized scene object
            anchor_index: Anchor index in multi-target documents, None otherwise
        """
        content = obj.content
        kind = obj.content_type
        if kind in ASSET_KINDS and not content.has_asset:
            logger.warning(f"Skipping {kind} object {obj.id}: no asset URL")
            return None

        placement = self.resolver.resolve(obj)
        asset_id = asset_id_for(obj.id, anchor_index)
        transform = {
            "position": placement.position,
            "rotation": placement.rotation,
            "scale": placement.scale,
        }

        if kind == "image":
            return MarkupNode("a-image", {"src": f"#{asset_id}", **transform, "material": "side: double"})

        if kind == "video":
            return MarkupNode(
                "a-video",
                {"src": f"#{asset_id}", **transform, "material": "side: double", "data-video-id": asset_id},
            )

        if kind == "model":
            return MarkupNode("a-entity", {"gltf-model": f"#{asset_id}", **transform})

        if kind == "light":
            intensity = content.intensity if content.intensity is not None else DEFAULT_LIGHT_INTENSITY
            return MarkupNode(
                "a-light",
                {
                    "type": "directional",
                    "position": placement.position,
                    "intensity": intensity,
                    "color": content.color or DEFAULT_LIGHT_COLOR,
                },
            )

        if kind == "audio":
            return MarkupNode(
                "a-entity",
                {
                    "id": f"audio-entity-{asset_id}",
                    **transform,
                    "visible": "false",
                    "data-audio-id": asset_id,
                },
            )

        if kind == "primitive":
            tag = PRIMITIVE_TAGS.get(content.primitive_type or "", DEFAULT_PRIMITIVE_TAG)
            return MarkupNode(tag, {**transform, "color": content.color or DEFAULT_PRIMITIVE_COLOR})

        logger.warning(f"Skipping object {obj.id}: unsupported content type {kind!r}")
        return None

    def anchor(self, index: int, objects: Sequence[SceneObject], multi_target: bool) -> MarkupNode:
        """Tracking anchor element holding the entities of one marker."""
        node = MarkupNode("a-entity", {"mindar-image-target": f"targetIndex: {index}"})
        for obj in objects:
            entity = self.entity(obj, index if multi_target else None)
            if entity is not None:
                node.append(entity)
        return node

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def _document(self, experience: Experience, multi_target: bool) -> MarkupNode:
        anchors = experience.anchors()
        manifest = build_document_manifest(anchors, multi_target)
        kinds = {ref.kind for ref in manifest}

        scene = MarkupNode("a-scene", page.scene_attributes(experience.mind_file, self.runtime))
        scene.append(MarkupNode("a-assets", children=[self.asset_element(ref) for ref in manifest]))
        scene.append(page.camera())
        for index, objects in enumerate(anchors):
            scene.append(self.anchor(index, objects, multi_target))

        body = element(
            "body",
            page.loading_overlay(multi_target),
            scene,
            page.media_controls(has_audio="audio" in kinds, has_video="video" in kinds),
            page.lifecycle_script(self.runtime),
        )
        return element("html", page.head(experience.title, self.runtime), body)

    def build_single(self, experience: Experience) -> MarkupNode:
        """Validate and build the tree of a single-target document."""
        self.validate_single(experience)
        logger.info(
            f"Generating document for experience {experience.id} ({experience.title!r}): "
            f"{experience.scene_object_count} scene objects"
        )
        return self._document(experience, multi_target=False)

    def build_multi(self, experience: Experience) -> MarkupNode:
        """Validate and build the tree of a multi-target document."""
        self.validate_multi(experience)
        logger.info(
            f"Generating multi-target document for experience {experience.id} ({experience.title!r}): "
            f"{len(experience.targets_config or [])} targets, {experience.scene_object_count} scene objects"
        )
        return self._document(experience, multi_target=True)

    def build(self, experience: Experience) -> MarkupNode:
        """Validate and build the document tree, choosing the mode from the experience."""
        if experience.is_multi_target:
            return self.build_multi(experience)
        return self.build_single(experience)

    def assemble_single(self, experience: Experience) -> str:
        """Single-target document text."""
        return render_document(self.build_single(experience))

    def assemble_multi(self, experience: Experience) -> str:
        """Multi-target document text."""
        return render_document(self.build_multi(experience))

    def assemble(self, experience: Experience) -> str:
        """Document text, choosing the mode from the experience."""
        return render_document(self.build(experience))


def compile_experience(
    experience: Experience | Mapping[str, Any],
    config: ArsceneConfig | None = None,
) -> str:
    """Normalize (if given a raw record) and assemble an experience.

    Args:
        experience: Normalized Experience or stored record mapping
        config: Configuration (defaults if None)

    Returns:
        Markup document text
    """
    if not isinstance(experience, Experience):
        experience = normalize_experience(experience)
    assembler = DocumentAssembler.from_config(config or ArsceneConfig())
    return assembler.assemble(experience)
