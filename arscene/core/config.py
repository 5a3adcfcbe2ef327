"""Configuration management for arscene.

This module defines all configuration models using Pydantic for validation.
Configuration can be loaded from JSON files, read from the process
environment once at startup, or constructed programmatically. Nothing in the
compilation pipeline reads the environment itself; the resulting objects are
passed in explicitly.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class CompilerPolicy(BaseModel):
    """Placement policy applied by the transform resolver.

    The defaults encode the top-down ("sky-to-earth") authoring convention:
    the marker lies flat and the viewer looks down at it.
    """

    position_scale: float = Field(default=1.0, description="Uniform factor applied to every position axis")
    enforce_top_down: bool = Field(default=True, description="Apply per-content-type orientation rules")
    visibility_y_offset: float = Field(
        default=0.02,
        description="Minimum height above the marker plane for flush content",
    )
    light_min_height: float = Field(default=1.0, description="Minimum height for light sources")

    # Comparison thresholds (absolute)
    rotation_epsilon: float = Field(
        default=0.01,
        ge=0,
        description="Rotation components below this are treated as unset",
    )
    position_epsilon: float = Field(
        default=0.001,
        ge=0,
        description="Heights below this are raised to the visibility offset",
    )

    # Accepted for compatibility with stored configurations, not read by the resolver
    preserve_user_transforms: bool = Field(default=False, description="Reserved")


class RuntimeParams(BaseModel):
    """Settings for the AR runtime embedded in generated documents."""

    aframe_url: str = Field(
        default="https://aframe.io/releases/1.6.0/aframe.min.js",
        description="A-Frame script URL",
    )
    mindar_url: str = Field(
        default="https://cdn.jsdelivr.net/npm/mind-ar@1.2.5/dist/mindar-image-aframe.prod.js",
        description="MindAR image-tracking script URL",
    )

    # MindAR one-euro filter settings
    filter_min_cf: float = Field(default=0.0001, gt=0, description="Filter minimum cutoff frequency")
    filter_beta: float = Field(default=0.01, ge=0, description="Filter speed coefficient")
    show_stats: bool = Field(default=False, description="Show MindAR tracking stats overlay")

    # Page behaviour
    loading_hide_delay_ms: int = Field(
        default=2000,
        ge=0,
        description="Delay before hiding the loading overlay once the scene is loaded",
    )
    controls_init_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Delay before media controls discover their elements",
    )


class OutputParams(BaseModel):
    """Where compiled documents are written and served from."""

    experiences_dir: Path = Field(
        default=Path("experiences"),
        description="Directory receiving {id}.html documents",
    )
    url_prefix: str = Field(default="/experiences", description="Public URL prefix for served documents")


# Environment variables read by ArsceneConfig.from_env: name -> (section, field)
ENV_VARS: dict[str, tuple[str, str]] = {
    "AR_POSITION_SCALE": ("policy", "position_scale"),
    "AR_ENFORCE_TOP_DOWN": ("policy", "enforce_top_down"),
    "AR_VISIBILITY_Y_OFFSET": ("policy", "visibility_y_offset"),
    "AR_LIGHT_MIN_HEIGHT": ("policy", "light_min_height"),
    "AR_PRESERVE_USER_TRANSFORMS": ("policy", "preserve_user_transforms"),
    "AR_EXPERIENCES_DIR": ("output", "experiences_dir"),
    "AR_URL_PREFIX": ("output", "url_prefix"),
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _parse_env_value(raw: str, current: object) -> object:
    """Parse an environment string into the type of the current value.

    Raises:
        ValueError: If the string cannot be interpreted
    """
    value = raw.strip()
    if isinstance(current, bool):
        lowered = value.lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    if isinstance(current, float):
        return float(value)
    if isinstance(current, Path):
        return Path(value)
    return value


class ArsceneConfig(BaseModel):
    """Main configuration container."""

    policy: CompilerPolicy = Field(default_factory=CompilerPolicy)
    runtime: RuntimeParams = Field(default_factory=RuntimeParams)
    output: OutputParams = Field(default_factory=OutputParams)

    @classmethod
    def from_file(cls, path: Path | str) -> ArsceneConfig:
        """Load configuration from a JSON file."""
        path = Path(path)
        with open(path) as f:
            data = json.load(f)
        return cls.model_validate(data)

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

    @classmethod
    def default(cls) -> ArsceneConfig:
        """Create a default configuration."""
        return cls()

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        base: ArsceneConfig | None = None,
    ) -> ArsceneConfig:
        """Build configuration from ``AR_*`` environment variables.

        Intended to be called once at process start. Variables that are
        unset keep the value from ``base`` (or the defaults); variables that
        cannot be parsed are logged and ignored.

        Args:
            environ: Mapping to read instead of ``os.environ``
            base: Configuration to overlay the variables onto

        Returns:
            New ArsceneConfig instance
        """
        if environ is None:
            environ = os.environ
        config = (base or cls()).model_copy(deep=True)

        for var, (section_name, field_name) in ENV_VARS.items():
            raw = environ.get(var)
            if raw is None or raw.strip() == "":
                continue
            section = getattr(config, section_name)
            try:
                value = _parse_env_value(raw, getattr(section, field_name))
            except ValueError:
                logger.warning(f"Ignoring {var}={raw!r}: cannot parse value")
                continue
            setattr(config, section_name, section.model_copy(update={field_name: value}))

        return config
