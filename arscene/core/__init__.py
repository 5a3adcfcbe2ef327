"""Core modules for arscene."""

from .config import ArsceneConfig, CompilerPolicy, OutputParams, RuntimeParams
from .errors import (
    EmptySceneError,
    ExperienceCompileError,
    InvalidExperienceIdError,
    MarkerDimensionParseWarning,
    MissingMarkerError,
    MissingTrackingFileError,
)

__all__ = [
    "ArsceneConfig",
    "CompilerPolicy",
    "OutputParams",
    "RuntimeParams",
    "EmptySceneError",
    "ExperienceCompileError",
    "InvalidExperienceIdError",
    "MarkerDimensionParseWarning",
    "MissingMarkerError",
    "MissingTrackingFileError",
]
