"""arscene - AR experience compiler.

Turns authored scene descriptions (images, videos, 3D models, lights and
audio placed over an image marker) into self-contained A-Frame + MindAR
documents bound to a marker-tracking file.
"""

__version__ = "0.1.0"

from .core.config import ArsceneConfig, CompilerPolicy
from .document.assembler import DocumentAssembler, compile_experience
from .document.writer import ExperienceWriter
from .scene.normalizer import normalize_experience
from .scene.transform import TransformResolver, resolve_placement

__all__ = [
    "ArsceneConfig",
    "CompilerPolicy",
    "DocumentAssembler",
    "compile_experience",
    "ExperienceWriter",
    "normalize_experience",
    "TransformResolver",
    "resolve_placement",
]
