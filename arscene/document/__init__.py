"""Document generation: asset manifest, markup tree, assembly and output."""

from .assembler import DocumentAssembler, compile_experience
from .manifest import AssetRef, asset_id_for, build_manifest
from .markup import MarkupNode, render, render_document
from .writer import ExperienceWriter

__all__ = [
    "DocumentAssembler",
    "compile_experience",
    "AssetRef",
    "asset_id_for",
    "build_manifest",
    "MarkupNode",
    "render",
    "render_document",
    "ExperienceWriter",
]
