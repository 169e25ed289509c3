"""Unit tests for the frame configuration.

Tests cover:
- Shading model parsing
- FrameConfig.from_dict
- Validation and upload of a configuration
"""

import pytest
import taichi as ti


class TestParseShadingModel:
    """Tests for parse_shading_model."""

    def test_names_and_values(self):
        """Test enum members, names and integer values are accepted."""
        from raykernel.config import ShadingModel, parse_shading_model

        assert parse_shading_model(ShadingModel.COOK_TORRANCE) is ShadingModel.COOK_TORRANCE
        assert parse_shading_model("cook_torrance") is ShadingModel.COOK_TORRANCE
        assert parse_shading_model("Blinn-Phong") is ShadingModel.BLINN_PHONG
        assert parse_shading_model(1) is ShadingModel.BLINN_PHONG

    def test_unknown_model_rejected(self):
        """Test unknown names and values raise ValueError."""
        from raykernel.config import parse_shading_model

        with pytest.raises(ValueError, match="Unknown shading model"):
            parse_shading_model("lambert")
        with pytest.raises(ValueError, match="Unknown shading model"):
            parse_shading_model(7)


class TestFrameConfigFromDict:
    """Tests for FrameConfig.from_dict."""

    def test_defaults(self):
        """Test an empty dictionary gives the default configuration."""
        from raykernel.config import EPSILON, MAX_BOUNCES, MAX_DISTANCE, FrameConfig, ShadingModel

        config = FrameConfig.from_dict({})

        assert config.max_bounces == MAX_BOUNCES
        assert config.max_distance == MAX_DISTANCE
        assert config.epsilon == EPSILON
        assert config.shading_model is ShadingModel.BLINN_PHONG
        assert config.background == (0.0, 0.0, 0.0)

    def test_full_dictionary(self):
        """Test every key is converted to the right type."""
        from raykernel.config import FrameConfig, ShadingModel

        config = FrameConfig.from_dict(
            {
                "aspect_ratio": 1.5,
                "light_position": [16, 64, 16],
                "camera": {"pos": [0, 16, -64], "dir": [0, 0, 1]},
                "shading_model": "cook_torrance",
                "max_bounces": 4,
                "background": [0.1, 0.2, 0.3],
            }
        )

        assert config.aspect_ratio == 1.5
        assert config.light_position == (16, 64, 16)
        assert config.camera.pos == (0, 16, -64)
        assert config.camera.right == (1.0, 0.0, 0.0)
        assert config.shading_model is ShadingModel.COOK_TORRANCE
        assert config.max_bounces == 4
        assert config.background == (0.1, 0.2, 0.3)

    def test_unknown_key_rejected(self):
        """Test a misspelled key raises ValueError."""
        from raykernel.config import FrameConfig

        with pytest.raises(ValueError, match="Unknown frame config keys"):
            FrameConfig.from_dict({"max_bounce": 3})


class TestApplyFrameConfig:
    """Tests for validating and uploading the configuration."""

    def test_values_reach_kernel(self):
        """Test the kernel-side accessors see the uploaded values."""
        from raykernel.config import (
            FrameConfig,
            ShadingModel,
            apply_frame_config,
            background,
            epsilon,
            key_light_color,
            key_light_position,
            max_bounces,
            max_distance,
            shading_model,
        )

        result_ints = ti.field(dtype=ti.i32, shape=2)
        result_floats = ti.field(dtype=ti.f32, shape=2)
        result_vecs = ti.field(dtype=ti.math.vec3, shape=3)

        @ti.kernel
        def test_kernel():
            result_ints[0] = shading_model()
            result_ints[1] = max_bounces()
            result_floats[0] = max_distance()
            result_floats[1] = epsilon()
            result_vecs[0] = key_light_position()
            result_vecs[1] = key_light_color()
            result_vecs[2] = background()

        apply_frame_config(
            FrameConfig(
                light_position=(1.0, 2.0, 3.0),
                light_color=(10.0, 20.0, 30.0),
                shading_model=ShadingModel.COOK_TORRANCE,
                max_bounces=5,
                max_distance=250.0,
                epsilon=0.02,
                background=(0.25, 0.5, 0.75),
            )
        )
        test_kernel()

        assert result_ints[0] == int(ShadingModel.COOK_TORRANCE)
        assert result_ints[1] == 5
        assert abs(result_floats[0] - 250.0) < 1e-4
        assert abs(result_floats[1] - 0.02) < 1e-6
        assert abs(result_vecs[0][2] - 3.0) < 1e-6
        assert abs(result_vecs[1][1] - 20.0) < 1e-6
        assert abs(result_vecs[2][0] - 0.25) < 1e-6

    def test_negative_bounces_rejected(self):
        """Test max_bounces must be non-negative."""
        from raykernel.config import FrameConfig, apply_frame_config

        with pytest.raises(ValueError, match="max_bounces"):
            apply_frame_config(FrameConfig(max_bounces=-1))

    def test_non_positive_epsilon_rejected(self):
        """Test epsilon must be positive."""
        from raykernel.config import FrameConfig, apply_frame_config

        with pytest.raises(ValueError, match="epsilon"):
            apply_frame_config(FrameConfig(epsilon=0.0))

    def test_max_distance_must_exceed_epsilon(self):
        """Test the search range is not empty."""
        from raykernel.config import FrameConfig, apply_frame_config

        with pytest.raises(ValueError, match="max_distance"):
            apply_frame_config(FrameConfig(max_distance=0.001))

    def test_invalid_aspect_ratio_rejected(self):
        """Test the aspect ratio is checked when the camera is uploaded."""
        from raykernel.config import FrameConfig, apply_frame_config

        with pytest.raises(ValueError, match="aspect_ratio"):
            apply_frame_config(FrameConfig(aspect_ratio=-1.0))
