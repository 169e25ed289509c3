"""Unit tests for scene descriptions, loading and the SceneStore.

Tests cover:
- Building a SceneDescription and uploading it
- Validation errors (radius, material index, ranges, capacity)
- Plane normal normalization with a warning
- Dictionary and JSON loading
- The demo scene
"""

import json
import logging

import pytest


def _simple_scene():
    from raykernel.scene.store import SceneDescription

    scene = SceneDescription()
    mat = scene.add_material((0.8, 0.8, 0.8), roughness=0.3)
    mirror = scene.add_material((0.9, 0.9, 0.9), reflective=True)
    scene.add_sphere((0.0, 16.0, 0.0), 16.0, mat)
    scene.add_plane((0.0, 1.0, 0.0), 0.0, mat)
    scene.add_triangle((-1.0, 0.0, 5.0), (0.0, 1.0, 5.0), (1.0, 0.0, 5.0), mirror)
    scene.add_light((0.0, 50.0, 0.0), (500.0, 500.0, 500.0))
    return scene


class TestSceneDescription:
    """Tests for building scene descriptions."""

    def test_add_methods_return_indices(self):
        """Test each add_* returns the index within its list."""
        from raykernel.scene.store import SceneDescription

        scene = SceneDescription()
        assert scene.add_material((0.5, 0.5, 0.5)) == 0
        assert scene.add_material((0.1, 0.1, 0.1)) == 1
        assert scene.add_sphere((0.0, 0.0, 0.0), 1.0, 0) == 0
        assert scene.add_sphere((5.0, 0.0, 0.0), 1.0, 1) == 1
        assert scene.add_plane((0.0, 1.0, 0.0), 0.0, 0) == 0
        assert scene.primitive_count() == 3

    def test_dict_round_trip(self):
        """Test to_dict and from_dict preserve the scene."""
        from raykernel.scene.store import SceneDescription

        scene = _simple_scene()
        restored = SceneDescription.from_dict(scene.to_dict())

        assert restored == scene

    def test_unknown_key_rejected(self):
        """Test from_dict rejects keys it does not know."""
        from raykernel.scene.store import SceneDescription

        with pytest.raises(ValueError, match="Unknown scene keys"):
            SceneDescription.from_dict({"spheres": [], "cubes": []})

    def test_triangle_missing_vertex_rejected(self):
        """Test a triangle entry without v2 raises ValueError."""
        from raykernel.scene.store import SceneDescription

        with pytest.raises(ValueError, match="missing vertex"):
            SceneDescription.from_dict({"triangles": [{"v0": [0, 0, 0], "v1": [1, 0, 0]}]})

    def test_malformed_vector_rejected(self):
        """Test a vector with the wrong number of components raises ValueError."""
        from raykernel.scene.store import SceneDescription

        with pytest.raises(ValueError, match="3 components"):
            SceneDescription.from_dict({"spheres": [{"center": [0, 1], "radius": 1.0}]})


class TestSceneFiles:
    """Tests for JSON loading and saving."""

    def test_save_and_load(self, tmp_path):
        """Test a scene written with save_scene loads back unchanged."""
        from raykernel.scene.store import load_scene, save_scene

        scene = _simple_scene()
        path = tmp_path / "scene.json"
        save_scene(scene, path)

        assert load_scene(path) == scene

    def test_load_defaults(self, tmp_path):
        """Test omitted fields take their default values."""
        from raykernel.scene.store import load_scene
        from raykernel.shading.materials import DEFAULT_SHININESS

        path = tmp_path / "scene.json"
        path.write_text(
            json.dumps(
                {
                    "materials": [{"albedo": [0.2, 0.4, 0.6]}],
                    "spheres": [{"center": [0, 1, 2], "radius": 3}],
                }
            )
        )
        scene = load_scene(path)

        assert scene.materials[0].roughness == 0.5
        assert scene.materials[0].reflective is False
        assert scene.materials[0].shininess == DEFAULT_SHININESS
        assert scene.spheres[0].material_id == 0
        assert scene.spheres[0].radius == 3.0

    def test_invalid_json_rejected(self, tmp_path):
        """Test a file that is not JSON raises ValueError."""
        from raykernel.scene.store import load_scene

        path = tmp_path / "broken.json"
        path.write_text("{ not json")

        with pytest.raises(ValueError, match="Invalid scene file"):
            load_scene(path)

    def test_non_object_rejected(self, tmp_path):
        """Test a JSON list at the top level raises ValueError."""
        from raykernel.scene.store import load_scene

        path = tmp_path / "list.json"
        path.write_text("[]")

        with pytest.raises(ValueError, match="JSON object"):
            load_scene(path)

    def test_bundled_example_scene_loads(self):
        """Test the example scene file shipped with the repository."""
        from pathlib import Path

        from raykernel.scene.store import SceneStore, load_scene

        path = Path(__file__).resolve().parents[1] / "examples" / "scenes" / "mirror_row.json"
        scene = load_scene(path)
        SceneStore().upload(scene)

        assert SceneStore.get_sphere_count() == len(scene.spheres)
        assert scene.primitive_count() > 0


class TestSceneStoreUpload:
    """Tests for uploading scenes into the kernel's fields."""

    def test_upload_sets_counts(self):
        """Test all lists reach the kernel."""
        from raykernel.scene.store import SceneStore

        store = SceneStore()
        store.upload(_simple_scene())

        assert store.get_material_count() == 2
        assert store.get_sphere_count() == 1
        assert store.get_plane_count() == 1
        assert store.get_triangle_count() == 1
        assert store.get_light_count() == 2
        assert store.scene is not None

    def test_upload_replaces_previous_scene(self):
        """Test a second upload clears the first."""
        from raykernel.scene.store import SceneDescription, SceneStore

        store = SceneStore()
        store.upload(_simple_scene())

        scene = SceneDescription()
        mat = scene.add_material((0.5, 0.5, 0.5))
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, mat)
        scene.add_sphere((3.0, 0.0, 0.0), 1.0, mat)
        store.upload(scene)

        assert store.get_sphere_count() == 2
        assert store.get_plane_count() == 0
        assert store.get_triangle_count() == 0
        assert store.get_light_count() == 1

    def test_rejected_scene_keeps_previous(self):
        """Test a failed validation leaves the uploaded scene untouched."""
        from raykernel.scene.store import SceneDescription, SceneStore

        store = SceneStore()
        store.upload(_simple_scene())

        bad = SceneDescription()
        bad.add_material((0.5, 0.5, 0.5))
        bad.add_sphere((0.0, 0.0, 0.0), -1.0, 0)
        with pytest.raises(ValueError):
            store.upload(bad)

        assert store.get_sphere_count() == 1
        assert store.get_plane_count() == 1

    def test_clear(self):
        """Test clear removes primitives, materials and scene lights."""
        from raykernel.scene.store import SceneStore

        store = SceneStore()
        store.upload(_simple_scene())
        SceneStore.clear()

        assert store.get_material_count() == 0
        assert store.get_sphere_count() == 0
        assert store.get_light_count() == 1


class TestSceneValidation:
    """Tests for SceneStore.validate."""

    def test_non_positive_radius(self):
        from raykernel.scene.store import SceneDescription, SceneStore

        scene = SceneDescription()
        scene.add_material((0.5, 0.5, 0.5))
        scene.add_sphere((0.0, 0.0, 0.0), 0.0, 0)

        with pytest.raises(ValueError, match="radius"):
            SceneStore.validate(scene)

    def test_invalid_material_id(self):
        from raykernel.scene.store import SceneDescription, SceneStore

        scene = SceneDescription()
        scene.add_material((0.5, 0.5, 0.5))
        scene.add_plane((0.0, 1.0, 0.0), 0.0, 1)

        with pytest.raises(ValueError, match="invalid material_id"):
            SceneStore.validate(scene)

    def test_albedo_out_of_range(self):
        from raykernel.scene.store import SceneDescription, SceneStore

        scene = SceneDescription()
        scene.add_material((0.5, 1.5, 0.5))

        with pytest.raises(ValueError, match="albedo"):
            SceneStore.validate(scene)

    def test_negative_light_color(self):
        from raykernel.scene.store import SceneDescription, SceneStore

        scene = SceneDescription()
        scene.add_light((0.0, 10.0, 0.0), (1.0, -2.0, 1.0))

        with pytest.raises(ValueError, match="negative"):
            SceneStore.validate(scene)

    def test_degenerate_triangle(self):
        from raykernel.scene.store import SceneDescription, SceneStore

        scene = SceneDescription()
        scene.add_material((0.5, 0.5, 0.5))
        scene.add_triangle((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), (2.0, 2.0, 2.0), 0)

        with pytest.raises(ValueError, match="degenerate"):
            SceneStore.validate(scene)

    def test_zero_plane_normal(self):
        from raykernel.scene.store import SceneDescription, SceneStore

        scene = SceneDescription()
        scene.add_material((0.5, 0.5, 0.5))
        scene.add_plane((0.0, 0.0, 0.0), 0.0, 0)

        with pytest.raises(ValueError, match="zero vector"):
            SceneStore.validate(scene)

    def test_too_many_lights(self):
        """Test exceeding a capacity raises RuntimeError."""
        from raykernel.scene.store import SceneDescription, SceneStore
        from raykernel.shading.lights import MAX_SCENE_LIGHTS

        scene = SceneDescription()
        for i in range(MAX_SCENE_LIGHTS + 1):
            scene.add_light((float(i), 10.0, 0.0), (1.0, 1.0, 1.0))

        with pytest.raises(RuntimeError, match="lights"):
            SceneStore.validate(scene)

    def test_plane_normal_is_normalized_with_warning(self, caplog):
        """Test a non-unit normal is rescaled and a warning is logged."""
        from raykernel.scene.store import SceneDescription, SceneStore

        scene = SceneDescription()
        scene.add_material((0.5, 0.5, 0.5))
        scene.add_plane((0.0, 2.0, 0.0), -4.0, 0)

        with caplog.at_level(logging.WARNING, logger="raykernel.scene.store"):
            checked = SceneStore.validate(scene)

        # 2y - 4 = 0 and y - 2 = 0 are the same plane
        assert checked.planes[0].normal == pytest.approx((0.0, 1.0, 0.0))
        assert checked.planes[0].distance_from_origin == pytest.approx(-2.0)
        assert "not unit length" in caplog.text
        # The caller's description is not modified
        assert scene.planes[0].normal == (0.0, 2.0, 0.0)

    def test_unit_normal_does_not_warn(self, caplog):
        from raykernel.scene.store import SceneDescription, SceneStore

        scene = SceneDescription()
        scene.add_material((0.5, 0.5, 0.5))
        scene.add_plane((0.0, 1.0, 0.0), 0.0, 0)

        with caplog.at_level(logging.WARNING, logger="raykernel.scene.store"):
            SceneStore.validate(scene)

        assert "not unit length" not in caplog.text


class TestDemoScene:
    """Tests for the bundled demo scene."""

    def test_demo_scene_is_valid(self):
        """Test the demo scene passes validation and uses every primitive kind."""
        from raykernel.config import ShadingModel
        from raykernel.scene.demo import DemoSceneParams, create_demo_scene
        from raykernel.scene.store import SceneStore

        scene, config = create_demo_scene(
            DemoSceneParams(shading_model=ShadingModel.COOK_TORRANCE, max_bounces=3),
            aspect_ratio=1.5,
        )
        SceneStore().upload(scene)

        assert SceneStore.get_sphere_count() == 2
        assert SceneStore.get_plane_count() == 1
        assert SceneStore.get_triangle_count() == 2
        assert config.shading_model is ShadingModel.COOK_TORRANCE
        assert config.max_bounces == 3
        assert config.aspect_ratio == 1.5
