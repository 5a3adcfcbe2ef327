"""Errors raised while compiling an experience.

Precondition failures propagate to the caller untouched; the message names
the specific missing input so it can be shown to the author as-is.
"""

from __future__ import annotations


class ExperienceCompileError(ValueError):
    """Base class for failures that stop a document from being produced."""


class MissingTrackingFileError(ExperienceCompileError):
    """The experience has no tracking-data (.mind) reference."""

    def __init__(self, message: str = "Mind file is required to generate AR experience"):
        super().__init__(message)


class MissingMarkerError(ExperienceCompileError):
    """The experience has no marker image."""

    def __init__(self, message: str = "Marker image is required"):
        super().__init__(message)


class EmptySceneError(ExperienceCompileError):
    """There is nothing to render in any anchor."""

    def __init__(self, message: str = "At least one scene object is required"):
        super().__init__(message)


class InvalidExperienceIdError(ExperienceCompileError):
    """The experience id cannot be used as a document file name."""


class MarkerDimensionParseWarning(UserWarning):
    """Marker dimensions were stored as malformed JSON and were dropped."""
