"""Tests for the object table and nearest-hit resolution.

Tests cover:
- Object storage (add, clear, kinds, capacity)
- Single sphere / triangle hits through raycast
- Closest hit across mixed primitives
- Exact distance ties resolved by insertion order
- Empty scenes and the any-hit query
"""

import pytest
import taichi as ti


def _raycast(origin, direction, t_min=1e-5, t_max=1e10):
    """Run raycast in a kernel and return (object_index, t, point, normal)."""
    from whitted.scene.intersection import raycast, vec3

    index = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.Vector.field(3, dtype=ti.f32, shape=())
    normal = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
        t_lo: ti.f32, t_hi: ti.f32,
    ):
        info = raycast(vec3(ox, oy, oz), ti.math.normalize(vec3(dx, dy, dz)), t_lo, t_hi)
        index[None] = info.object_index
        t_val[None] = info.t
        point[None] = info.point
        normal[None] = info.normal

    test_kernel(*origin, *direction, t_min, t_max)
    return index[None], t_val[None], point[None], normal[None]


class TestObjectStorage:
    """Tests for adding and clearing objects."""

    def test_add_sphere_and_triangle(self):
        """Test that objects get consecutive indices and kinds."""
        from whitted.scene.intersection import (
            ObjectKind,
            add_sphere,
            add_triangle,
            get_object_count,
            get_object_kind,
            vec3,
        )

        assert add_sphere(vec3(0, 0, -1), 0.5, 0) == 0
        assert add_triangle(vec3(0, 0, 0), vec3(1, 0, 0), vec3(0, 1, 0), 1) == 1
        assert get_object_count() == 2
        assert get_object_kind(0) == ObjectKind.SPHERE
        assert get_object_kind(1) == ObjectKind.TRIANGLE

    def test_clear_scene(self):
        """Test that clear_scene empties the table."""
        from whitted.scene.intersection import add_sphere, clear_scene, get_object_count, vec3

        add_sphere(vec3(0, 0, -1), 0.5, 0)
        clear_scene()
        assert get_object_count() == 0

    def test_get_object_kind_out_of_range(self):
        """Test that an unknown index raises IndexError."""
        from whitted.scene.intersection import get_object_kind

        with pytest.raises(IndexError):
            get_object_kind(0)

    def test_capacity_exceeded(self, monkeypatch):
        """Test that exceeding MAX_OBJECTS raises RuntimeError."""
        from whitted.scene import intersection

        monkeypatch.setattr(intersection, "MAX_OBJECTS", 2)
        intersection.add_sphere(intersection.vec3(0, 0, 0), 1.0, 0)
        intersection.add_sphere(intersection.vec3(0, 0, 0), 1.0, 0)
        with pytest.raises(RuntimeError, match="Maximum number of objects"):
            intersection.add_sphere(intersection.vec3(0, 0, 0), 1.0, 0)


class TestRaycast:
    """Tests for the nearest-hit query."""

    def test_empty_scene_misses(self):
        """Test that an empty scene is not an error, just a miss."""
        index, _, _, _ = _raycast((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))
        assert index == -1

    def test_hit_single_sphere(self):
        """Test raycast against one sphere."""
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, 0.0), 1.0, 0)
        index, t, p, n = _raycast((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))

        assert index == 0
        assert abs(t - 4.0) < 1e-5
        assert abs(p[2] - 1.0) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5

    def test_hit_single_triangle(self):
        """Test raycast against one triangle."""
        from whitted.scene.intersection import add_triangle, vec3

        add_triangle(vec3(-1.0, -1.0, 0.0), vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 0)
        index, t, _, n = _raycast((0.0, 0.0, 3.0), (0.0, 0.0, -1.0))

        assert index == 0
        assert abs(t - 3.0) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5

    def test_closest_of_two_spheres(self):
        """Test that the nearer sphere wins regardless of order."""
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, 0)  # far
        add_sphere(vec3(0.0, 0.0, -2.0), 0.5, 1)  # near
        index, t, _, _ = _raycast((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert index == 1
        assert abs(t - 1.5) < 1e-5

    def test_triangle_in_front_of_sphere(self):
        """Test mixed primitives: a triangle occluding a sphere."""
        from whitted.scene.intersection import add_sphere, add_triangle, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, 0)
        add_triangle(vec3(-1.0, -1.0, -2.0), vec3(1.0, -1.0, -2.0), vec3(0.0, 1.0, -2.0), 1)
        index, t, _, _ = _raycast((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert index == 1
        assert abs(t - 2.0) < 1e-5

    def test_exact_tie_keeps_earlier_object(self):
        """Test that on equal distance the object added first is returned."""
        from whitted.scene.intersection import add_sphere, vec3

        # Two identical spheres
        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, 0)
        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, 1)
        index, _, _, _ = _raycast((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert index == 0

    def test_exact_tie_between_kinds(self):
        """Test a triangle and a sphere touching at the same distance."""
        from whitted.scene.intersection import add_sphere, add_triangle, vec3

        # Triangle in the plane z = -2, sphere whose front is at z = -2
        add_triangle(vec3(-1.0, -1.0, -2.0), vec3(1.0, -1.0, -2.0), vec3(0.0, 1.0, -2.0), 0)
        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, 1)
        index, t, _, _ = _raycast((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert index == 0
        assert abs(t - 2.0) < 1e-5

    def test_t_max_limits_query(self):
        """Test that objects beyond t_max are ignored."""
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, 0)
        index, _, _, _ = _raycast((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=3.0)
        assert index == -1

    def test_material_id_lookup(self):
        """Test that the hit object's material id is retrievable."""
        from whitted.scene.intersection import add_sphere, get_object_material_id, raycast, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, 7)
        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            info = raycast(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), 1e-5, 1e10)
            result[None] = get_object_material_id(info.object_index)

        test_kernel()
        assert result[None] == 7


class TestRaycastAny:
    """Tests for the occlusion query."""

    def test_any_hit(self):
        """Test raycast_any reports hits and misses."""
        from whitted.scene.intersection import add_sphere, raycast_any, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, 0)
        result = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            o = vec3(0.0, 0.0, 0.0)
            result[0] = raycast_any(o, vec3(0.0, 0.0, -1.0), 1e-5, 1e10)
            result[1] = raycast_any(o, vec3(0.0, 0.0, 1.0), 1e-5, 1e10)
            result[2] = raycast_any(o, vec3(0.0, 0.0, -1.0), 1e-5, 1.5)

        test_kernel()
        assert result[0] == 1
        assert result[1] == 0
        assert result[2] == 0
