"""Tests for transform resolution."""

import numpy as np
import pytest

from arscene.core.config import CompilerPolicy
from arscene.scene.models import SceneObject, SceneObjectContent, Vector3
from arscene.scene.transform import (
    FlatPolicy,
    LightPolicy,
    ModelPolicy,
    PassthroughPolicy,
    TransformResolver,
    format_vector,
    get_policy,
    list_policies,
    normalize_rotation_units,
    resolve_placement,
)


def make_object(content_type, position=(0, 0, 0), rotation=(0, 0, 0), scale=(1, 1, 1)):
    return SceneObject(
        id="o",
        position=Vector3.from_array(position),
        rotation=Vector3.from_array(rotation),
        scale=Vector3.from_array(scale),
        content=SceneObjectContent(type=content_type),
    )


class TestFormatVector:
    """Test fixed-precision formatting."""

    def test_precision(self):
        """Test decimals are fixed."""
        assert format_vector((1, 2.5, -0.1234), 3) == "1.000 2.500 -0.123"
        assert format_vector((45, 90.04, 0), 1) == "45.0 90.0 0.0"

    def test_negative_zero(self):
        """Test values rounding to zero print unsigned."""
        assert format_vector((-0.0, -0.00001, 0.0), 3) == "0.000 0.000 0.000"

    def test_non_finite(self):
        """Test non-finite values are printed, not rejected."""
        assert format_vector((float("nan"), float("inf"), 0), 3) == "nan inf 0.000"


class TestRotationUnits:
    """Test the degree/radian heuristic."""

    def test_degrees_unchanged(self):
        """Test components above pi are kept as degrees."""
        np.testing.assert_allclose(normalize_rotation_units(np.array([45.0, 90.0, -180.0])), [45.0, 90.0, -180.0])

    def test_radians_converted(self):
        """Test components up to pi are read as radians."""
        np.testing.assert_allclose(normalize_rotation_units(np.array([np.pi / 2, 0.0, -np.pi])), [90.0, 0.0, -180.0])

    def test_per_component(self):
        """Test mixed magnitudes are classified independently."""
        np.testing.assert_allclose(normalize_rotation_units(np.array([1.0, 90.0, 0.0])), [np.degrees(1.0), 90.0, 0.0])


class TestPolicyRegistry:
    """Test the content-type policy registry."""

    @pytest.mark.parametrize("content_type,policy_cls", [
        ("image", FlatPolicy),
        ("video", FlatPolicy),
        ("model", ModelPolicy),
        ("primitive", ModelPolicy),
        ("light", LightPolicy),
        ("audio", PassthroughPolicy),
        ("hologram", PassthroughPolicy),
        ("", PassthroughPolicy),
    ])
    def test_get_policy(self, content_type, policy_cls):
        """Test each content type maps to its policy."""
        assert isinstance(get_policy(content_type), policy_cls)

    def test_list_policies(self):
        """Test listing policies."""
        listed = {p["content_type"]: p["name"] for p in list_policies()}
        assert listed["image"] == "flat"
        assert listed["light"] == "light"
        assert all(p["description"] for p in list_policies())


class TestFlatContent:
    """Test image and video placement."""

    @pytest.mark.parametrize("content_type", ["image", "video"])
    def test_default_placement(self, content_type):
        """Test flush planar content is lifted and laid flat."""
        placement = resolve_placement(make_object(content_type))
        assert placement.position == "0.000 0.020 0.000"
        assert placement.rotation == "-90.0 0.0 0.0"
        assert placement.scale == "1.000 1.000 1.000"

    def test_authored_rotation_discarded(self):
        """Test planar content ignores authored rotation."""
        placement = resolve_placement(make_object("image", rotation=(30, 60, 90)))
        assert placement.rotation == "-90.0 0.0 0.0"

    def test_elevated_kept(self):
        """Test content above the floor keeps its height."""
        placement = resolve_placement(make_object("video", position=(0.5, 0.1, 0)))
        assert placement.position == "0.500 0.100 0.000"


class TestModelContent:
    """Test model and primitive placement."""

    def test_degree_rotation(self):
        """Test degree rotations are kept."""
        placement = resolve_placement(make_object("model", rotation=(45, 90, 0)))
        assert placement.rotation == "45.0 90.0 0.0"

    def test_radian_rotation(self):
        """Test small rotations are read as radians."""
        assert resolve_placement(make_object("model", rotation=(1, 0, 0))).rotation == "57.3 0.0 0.0"
        assert resolve_placement(make_object("model", rotation=(3, 0, 0))).rotation == "171.9 0.0 0.0"

    def test_near_zero_rotation(self):
        """Test rotations within epsilon stay at zero."""
        placement = resolve_placement(make_object("primitive", rotation=(0.005, -0.005, 0.0)))
        assert placement.rotation == "0.0 0.0 0.0"

    def test_below_floor_raised(self):
        """Test a model below the marker is raised to the floor."""
        placement = resolve_placement(make_object("model", position=(0, -0.3, 0)))
        assert placement.position == "0.000 0.020 0.000"


class TestLightContent:
    """Test light placement."""

    def test_raised_to_minimum(self):
        """Test lights at the marker are raised."""
        placement = resolve_placement(make_object("light"))
        assert placement.position == "0.000 1.000 0.000"

    def test_high_light_kept(self):
        """Test lights above the minimum keep their height."""
        placement = resolve_placement(make_object("light", position=(1, 2.5, -1)))
        assert placement.position == "1.000 2.500 -1.000"

    def test_custom_minimum(self):
        """Test the minimum height follows the policy."""
        resolver = TransformResolver(CompilerPolicy(light_min_height=3.0))
        assert resolver.resolve(make_object("light", position=(0, 2, 0))).position == "0.000 3.000 0.000"


class TestPassthroughContent:
    """Test audio and unknown-type placement."""

    def test_audio_below_marker(self):
        """Test audio keeps a position below the marker."""
        placement = resolve_placement(make_object("audio", position=(0, -0.5, 0)))
        assert placement.position == "0.000 -0.500 0.000"

    def test_flush_audio_lifted(self):
        """Test flush audio still gets the visibility offset."""
        placement = resolve_placement(make_object("audio"))
        assert placement.position == "0.000 0.020 0.000"

    def test_unknown_type(self):
        """Test unknown types keep their rotation."""
        placement = resolve_placement(make_object("hologram", rotation=(10, 20, 30)))
        assert placement.rotation == "10.0 20.0 30.0"


class TestVisibilityFloor:
    """Test that resolved content is never flush with the marker."""

    @pytest.mark.parametrize("content_type", ["image", "video", "model", "primitive", "audio", "hologram", ""])
    @pytest.mark.parametrize("y", [0.0, 0.0005, -0.0009, 1e-9])
    def test_flush_lifted(self, content_type, y):
        """Test near-zero heights resolve to exactly the visibility offset."""
        policy = CompilerPolicy()
        position, _, _ = TransformResolver(policy).resolve_arrays(make_object(content_type, position=(0, y, 0)))
        assert position[1] == pytest.approx(policy.visibility_y_offset)

    @pytest.mark.parametrize("offset", [0.05, 0.2])
    def test_custom_offset(self, offset):
        """Test the floor follows a configured offset."""
        policy = CompilerPolicy(visibility_y_offset=offset)
        for content_type in ("image", "model", "audio"):
            position, _, _ = TransformResolver(policy).resolve_arrays(make_object(content_type))
            assert position[1] == pytest.approx(offset)

    def test_not_enforced(self):
        """Test the floor applies even without top-down enforcement."""
        resolver = TransformResolver(CompilerPolicy(enforce_top_down=False))
        assert resolver.resolve(make_object("image")).position == "0.000 0.020 0.000"


class TestPolicyOptions:
    """Test the compiler policy switches."""

    def test_position_scale(self):
        """Test positions are scaled before the floors apply."""
        resolver = TransformResolver(CompilerPolicy(position_scale=2.0))
        placement = resolver.resolve(make_object("model", position=(0.5, 1.0, -0.25)))
        assert placement.position == "1.000 2.000 -0.500"

    def test_enforcement_disabled(self):
        """Test without enforcement every type keeps its rotation."""
        resolver = TransformResolver(CompilerPolicy(enforce_top_down=False))
        image = resolver.resolve(make_object("image", position=(0, -0.5, 0), rotation=(0, 45, 0)))
        assert image.rotation == "0.0 45.0 0.0"
        assert image.position == "0.000 -0.500 0.000"
        light = resolver.resolve(make_object("light", position=(0, 0.5, 0)))
        assert light.position == "0.000 0.500 0.000"

    def test_scale_passthrough(self):
        """Test scale is copied verbatim, including zero and negative."""
        placement = resolve_placement(make_object("model", scale=(0, -1, 2)))
        assert placement.scale == "0.000 -1.000 2.000"

    def test_nan_passthrough(self):
        """Test non-finite values are not rejected."""
        placement = resolve_placement(make_object("audio", position=(float("nan"), 1, 0)))
        assert placement.position == "nan 1.000 0.000"

    def test_resolver_does_not_mutate(self):
        """Test resolving leaves the scene object untouched."""
        obj = make_object("light")
        resolve_placement(obj)
        assert obj.position == Vector3()
        assert obj.rotation == Vector3()
