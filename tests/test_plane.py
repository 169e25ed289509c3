"""Unit tests for the infinite plane primitive.

Tests cover:
- Hit distance for planes through and away from the origin
- The 0 sentinel for parallel rays and planes behind the origin
"""

import taichi as ti


class TestPlaneDistance:
    """Tests for plane_distance."""

    def test_ground_plane_hit(self):
        """Test a downward ray hits y = 0 at its height."""
        from raykernel.geometry.plane import Plane, plane_distance, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(normal=vec3(0.0, 1.0, 0.0), distance_from_origin=0.0)
            result[None] = plane_distance(vec3(0.0, 5.0, 0.0), vec3(0.0, -1.0, 0.0), plane)

        test_kernel()
        assert abs(result[None] - 5.0) < 1e-6

    def test_offset_plane_hit(self):
        """Test the plane constant shifts the plane: N = +y, k = -5 is y = 5."""
        from raykernel.geometry.plane import make_plane, plane_distance, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            plane = make_plane(vec3(0.0, 1.0, 0.0), -5.0)
            result[None] = plane_distance(vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), plane)

        test_kernel()
        assert abs(result[None] - 5.0) < 1e-6

    def test_hit_from_back_side(self):
        """Test a plane is hit from either side."""
        from raykernel.geometry.plane import Plane, plane_distance, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(normal=vec3(0.0, 0.0, -1.0), distance_from_origin=7.0)
            result[None] = plane_distance(vec3(0.0, 0.0, 10.0), vec3(0.0, 0.0, -1.0), plane)

        test_kernel()
        assert abs(result[None] - 3.0) < 1e-6

    def test_oblique_hit(self):
        """Test the distance along a diagonal ray."""
        from raykernel.geometry.plane import Plane, plane_distance, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(normal=vec3(0.0, 1.0, 0.0), distance_from_origin=0.0)
            direction = vec3(0.6, -0.8, 0.0)
            result[None] = plane_distance(vec3(0.0, 4.0, 0.0), direction, plane)

        test_kernel()
        assert abs(result[None] - 5.0) < 1e-5

    def test_parallel_ray_returns_zero(self):
        """Test a ray parallel to the plane returns 0 wherever it starts."""
        from raykernel.geometry.plane import Plane, plane_distance, vec3

        results = ti.field(dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            plane = Plane(normal=vec3(0.0, 1.0, 0.0), distance_from_origin=0.0)
            direction = vec3(1.0, 0.0, 0.0)
            results[0] = plane_distance(vec3(0.0, 5.0, 0.0), direction, plane)
            results[1] = plane_distance(vec3(0.0, -3.0, 2.0), direction, plane)
            results[2] = plane_distance(vec3(0.0, 0.0, 0.0), direction, plane)

        test_kernel()
        for i in range(3):
            assert results[i] == 0.0

    def test_plane_behind_origin_returns_zero(self):
        """Test a ray pointing away from the plane is clamped to 0."""
        from raykernel.geometry.plane import Plane, plane_distance, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(normal=vec3(0.0, 1.0, 0.0), distance_from_origin=0.0)
            result[None] = plane_distance(vec3(0.0, 5.0, 0.0), vec3(0.0, 1.0, 0.0), plane)

        test_kernel()
        assert result[None] == 0.0
