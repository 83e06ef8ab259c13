"""Tests for the Phong material model and registry."""

import pytest
import taichi as ti


class TestMaterial:
    """Tests for the Python-side Material dataclass."""

    def test_negative_shininess_rejected(self):
        """Test that shininess must be non-negative."""
        from whitted.materials.phong import Material

        with pytest.raises(ValueError, match="shininess"):
            Material((0.1,) * 3, (0.5,) * 3, (1.0,) * 3, -1.0)

    def test_wrong_component_count_rejected(self):
        """Test that colours need three components."""
        from whitted.materials.phong import Material

        with pytest.raises(ValueError, match="diffuse"):
            Material((0.1,) * 3, (0.5, 0.5), (1.0,) * 3, 8.0)

    def test_components_are_not_clamped(self):
        """Test that values above 1 are kept as given."""
        from whitted.materials.phong import Material

        material = Material((2.0, 0.0, 0.0), (0.5,) * 3, (1.0,) * 3, 8.0)
        assert material.ambient == (2.0, 0.0, 0.0)

    def test_dict_round_trip(self):
        """Test to_dict / from_dict preserve the material."""
        from whitted.materials.phong import Material

        material = Material((0.1, 0.2, 0.3), (0.4, 0.5, 0.6), (0.7, 0.8, 0.9), 64.0)
        assert Material.from_dict(material.to_dict()) == material


class TestMaterialRegistry:
    """Tests for the material fields."""

    def test_add_and_lookup(self):
        """Test that a registered material can be read in a kernel."""
        from whitted.materials.phong import (
            Material,
            add_phong_material,
            get_phong_material,
            get_phong_material_count,
        )

        add_phong_material(Material((0.0,) * 3, (0.0,) * 3, (0.0,) * 3, 1.0))
        idx = add_phong_material(Material((0.1, 0.2, 0.3), (0.4, 0.5, 0.6), (0.7, 0.8, 0.9), 32.0))

        diffuse = ti.Vector.field(3, dtype=ti.f32, shape=())
        shininess = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(i: ti.i32):
            material = get_phong_material(i)
            diffuse[None] = material.diffuse
            shininess[None] = material.shininess

        test_kernel(idx)
        assert idx == 1
        assert get_phong_material_count() == 2
        assert abs(diffuse[None][1] - 0.5) < 1e-6
        assert abs(shininess[None] - 32.0) < 1e-6


class TestPhongTerms:
    """Tests for the ambient, diffuse and specular terms."""

    def test_ambient_divided_by_light_count(self):
        """Test that the ambient term is shared between lights."""
        from whitted.materials.phong import PhongMaterial, phong_ambient, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            material = PhongMaterial(
                ambient=vec3(0.5, 1.0, 0.2),
                diffuse=vec3(0.0),
                specular=vec3(0.0),
                shininess=1.0,
            )
            result[None] = phong_ambient(material, vec3(1.0, 0.5, 1.0), 2)

        test_kernel()
        a = result[None]
        assert abs(a[0] - 0.25) < 1e-6
        assert abs(a[1] - 0.25) < 1e-6
        assert abs(a[2] - 0.1) < 1e-6

    def test_diffuse_cosine_and_backside(self):
        """Test the Lambert cosine and clamping for lights behind the surface."""
        from whitted.materials.phong import PhongMaterial, phong_diffuse, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            material = PhongMaterial(
                ambient=vec3(0.0),
                diffuse=vec3(1.0, 0.5, 0.0),
                specular=vec3(0.0),
                shininess=1.0,
            )
            n = vec3(0.0, 1.0, 0.0)
            oblique = ti.math.normalize(vec3(1.0, 1.0, 0.0))
            result[0] = phong_diffuse(material, vec3(1.0), oblique, n)
            result[1] = phong_diffuse(material, vec3(1.0), vec3(0.0, -1.0, 0.0), n)

        test_kernel()
        cos45 = 1.0 / 2.0**0.5
        assert abs(result[0][0] - cos45) < 1e-5
        assert abs(result[0][1] - 0.5 * cos45) < 1e-5
        assert abs(result[1][0]) < 1e-6

    def test_specular_peak_and_falloff(self):
        """Test that the highlight peaks in the mirror direction."""
        from whitted.materials.phong import PhongMaterial, phong_specular, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            material = PhongMaterial(
                ambient=vec3(0.0),
                diffuse=vec3(0.0),
                specular=vec3(1.0),
                shininess=16.0,
            )
            n = vec3(0.0, 1.0, 0.0)
            to_light = ti.math.normalize(vec3(-1.0, 1.0, 0.0))
            mirror_view = ti.math.normalize(vec3(1.0, 1.0, 0.0))
            result[0] = phong_specular(material, vec3(1.0), to_light, n, mirror_view)
            result[1] = phong_specular(material, vec3(1.0), to_light, n, n)

        test_kernel()
        assert abs(result[0][0] - 1.0) < 1e-5
        # cos(45)^16 = 1/256
        assert abs(result[1][0] - 1.0 / 256.0) < 1e-5
