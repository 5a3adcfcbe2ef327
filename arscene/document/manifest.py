"""Asset manifest: the embeddable files referenced by a document.

Every asset in a generated document lives in one flat id namespace, so ids
in multi-target documents carry the anchor index. Ids and order depend only
on the input, which keeps regenerated documents byte-for-byte identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..scene.models import SceneObject

# Content kinds backed by a file in <a-assets>
ASSET_KINDS = frozenset({"image", "video", "model", "audio"})


@dataclass(frozen=True)
class AssetRef:
    """One embeddable asset."""

    id: str
    kind: str
    url: str


def asset_id_for(object_id: str, anchor_index: int | None = None) -> str:
    """Asset id for a scene object.

    Args:
        object_id: Scene object id
        anchor_index: Tracking anchor index in multi-target documents, None otherwise

    Returns:
        ``asset-{id}`` or ``target-{index}-asset-{id}``
    """
    if anchor_index is None:
        return f"asset-{object_id}"
    return f"target-{anchor_index}-asset-{object_id}"


def build_manifest(
    scene_objects: Sequence[SceneObject],
    anchor_index: int | None = None,
) -> list[AssetRef]:
    """Collect the assets of one anchor's scene objects, in input order.

    Objects without a URL, and kinds that embed no file (lights,
    primitives), are skipped.

    Args:
        scene_objects: Normalized scene objects of one anchor
        anchor_index: Anchor index for multi-target documents

    Returns:
        List of AssetRef
    """
    return [
        AssetRef(
            id=asset_id_for(obj.id, anchor_index),
            kind=obj.content_type,
            url=obj.content.url,
        )
        for obj in scene_objects
        if obj.content_type in ASSET_KINDS and obj.content.has_asset
    ]


def build_document_manifest(
    anchors: Sequence[Sequence[SceneObject]],
    multi_target: bool,
) -> list[AssetRef]:
    """Manifest for a whole document, anchors in index order."""
    manifest: list[AssetRef] = []
    for index, objects in enumerate(anchors):
        manifest.extend(build_manifest(objects, index if multi_target else None))
    return manifest
